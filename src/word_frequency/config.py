"""
Модуль для работы с конфигурацией проекта

Функции:
- Загрузка config.yaml (+ профили: config.prod.yaml, config.test.yaml)
- ENV-переопределения (префикс WORD_FREQUENCY_, вложенность через __)
- Валидация значений пайплайна
- Настройка логирования
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = 'WORD_FREQUENCY_'
ENV_PROFILE = 'WORD_FREQUENCY_ENV'

FILTER_FAMILIES = ('black_list', 'white_list', 'substitution_list')


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Рекурсивно накладывает override на base (base не изменяется)."""
    result = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Config:
    """Класс для работы с конфигурацией проекта"""

    def __init__(self, config_path: str = None):
        """
        Инициализация конфигурации

        Args:
            config_path: Путь к файлу конфигурации
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            # Ищем config.yaml в текущей директории и выше
            current_dir = Path.cwd()
            config_path = current_dir / "config.yaml"
            while not config_path.exists() and current_dir.parent != current_dir:
                current_dir = current_dir.parent
                config_path = current_dir / "config.yaml"
            self.config_path = config_path

        self.config_data: Dict[str, Any] = {}
        self.env_data: Dict[str, Optional[str]] = {}

        self._load_config()
        self._load_env()
        self._apply_env_overrides()
        self._validate()

    # --- Загрузка ---
    def _resolve_config_path(self) -> Path:
        env = os.getenv(ENV_PROFILE, '').lower().strip()
        root = self.config_path.parent
        if env == 'production':
            candidate = root / 'config.prod.yaml'
        elif env == 'testing':
            candidate = root / 'config.test.yaml'
        else:
            return self.config_path
        if candidate.exists():
            return candidate
        return self.config_path

    def _load_config(self) -> None:
        """Загружает конфигурацию из YAML файла поверх значений по умолчанию"""
        defaults = self._get_default_config()
        self.config_path = self._resolve_config_path()
        if not self.config_path.exists():
            logger.debug(f"Файл конфигурации {self.config_path} не найден, используются значения по умолчанию")
            self.config_data = defaults
            return
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Ошибка разбора конфигурации {self.config_path}: {e}")
            self.config_data = defaults
            return
        self.config_data = _deep_merge(defaults, loaded)
        logger.info(f"Конфигурация загружена: {self.config_path}")

    def _load_env(self) -> None:
        """Загружает переменные окружения из .env файла"""
        load_dotenv()
        self.env_data = {
            key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)
        }

    def _set_nested(self, data: Dict[str, Any], dotted: str, value: Any) -> None:
        cur = data
        keys = dotted.split('.')
        for k in keys[:-1]:
            if k not in cur or not isinstance(cur[k], dict):
                cur[k] = {}
            cur = cur[k]
        cur[keys[-1]] = value

    @staticmethod
    def _parse_env_value(val: str) -> Any:
        if val.lower() in ('true', 'false'):
            return val.lower() == 'true'
        try:
            if '.' in val:
                return float(val)
            return int(val)
        except ValueError:
            return val

    def _apply_env_overrides(self) -> None:
        """Переопределяет конфиг значениями из ENV (WORD_FREQUENCY_*)."""
        for key, val in self.env_data.items():
            if key == ENV_PROFILE or val is None:
                continue
            # Вложенность разделяется двойным подчёркиванием
            dotted = key[len(ENV_PREFIX):].replace('__', '.').lower()
            self._set_nested(self.config_data, dotted, self._parse_env_value(val))
        if os.getenv(ENV_PROFILE):
            logger.info(f"Активирован профиль: {os.getenv(ENV_PROFILE)}")

    def _validate(self) -> None:
        """Проверяет значения пайплайна и исправляет недопустимые."""
        delimiter = self.get('pipeline.delimiter')
        if not isinstance(delimiter, str) or delimiter == '':
            logger.warning(f"Недопустимый разделитель {delimiter!r}, используется пробел")
            self._set_nested(self.config_data, 'pipeline.delimiter', ' ')
        for key in ('force_case', 'sort_by_token', 'sort_by_frequency'):
            value = self.get(f'pipeline.{key}', 0)
            try:
                int(value)
            except (TypeError, ValueError):
                # force_case допускает имена режимов: upper/lower/none
                if key == 'force_case' and str(value).lower() in ('upper', 'lower', 'none'):
                    continue
                logger.warning(f"pipeline.{key}={value!r} не число, установлено 0")
                self._set_nested(self.config_data, f'pipeline.{key}', 0)

    def _get_default_config(self) -> Dict[str, Any]:
        """Возвращает конфигурацию по умолчанию"""
        return {
            'pipeline': {
                'delimiter': ' ',
                # <0 нижний регистр, 0 без изменений, >0 верхний
                'force_case': 0,
                'remove_numeric': False,
                # <0 по убыванию, 0 без сортировки, >0 по возрастанию
                'sort_by_token': 0,
                'sort_by_frequency': 0,
                'locale': None,
                'strip_html': False,
                # None = встроенный каталог assets пакета
                'assets_path': None,
            },
            'filters': {
                family: {
                    'items': {} if family == 'substitution_list' else [],
                    'files': [],
                    'patterns': {} if family == 'substitution_list' else [],
                    'pattern_files': [],
                    'case_sensitive': family == 'substitution_list',
                }
                for family in FILTER_FAMILIES
            },
            'sources': {
                'texts': [],
                'files': [],
            },
            'logging': {
                'level': "INFO",
                'format': "%(asctime)s - %(levelname)s - %(message)s",
                'log_to_file': False,
                'log_file': "logs/word_frequency.log",
            },
        }

    # --- Доступ к значениям ---
    def get(self, key: str, default: Any = None) -> Any:
        """
        Получает значение конфигурации по ключу

        Args:
            key: Ключ в формате 'section.subsection.parameter'
            default: Значение по умолчанию

        Returns:
            Значение параметра или default
        """
        try:
            value = self.config_data
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """
        Устанавливает значение конфигурации по ключу

        Args:
            key: Ключ в формате 'section.subsection.parameter'
            value: Новое значение
        """
        self._set_nested(self.config_data, key, value)

    def get_env(self, key: str, default: Any = None) -> Any:
        """Получает значение переменной окружения, загруженной при старте"""
        return self.env_data.get(key, default)

    def get_pipeline_config(self) -> Dict[str, Any]:
        """Получает конфигурацию пайплайна"""
        return self.config_data.get('pipeline', {})

    def get_filter_config(self, family: str) -> Dict[str, Any]:
        """Получает слоты фильтра: black_list, white_list или substitution_list"""
        return self.get(f'filters.{family}', {}) or {}

    def get_delimiter(self) -> str:
        return self.get('pipeline.delimiter', ' ')

    def get_force_case(self) -> Any:
        return self.get('pipeline.force_case', 0)

    def is_remove_numeric_enabled(self) -> bool:
        return bool(self.get('pipeline.remove_numeric', False))

    def get_sort_by_token(self) -> int:
        return int(self.get('pipeline.sort_by_token', 0))

    def get_sort_by_frequency(self) -> int:
        return int(self.get('pipeline.sort_by_frequency', 0))

    def get_locale(self) -> Any:
        return self.get('pipeline.locale')

    def is_strip_html_enabled(self) -> bool:
        return bool(self.get('pipeline.strip_html', False))

    def get_assets_path(self) -> Optional[str]:
        path = self.get('pipeline.assets_path')
        return os.path.expanduser(path) if path else None

    def get_source_texts(self) -> List[Any]:
        return list(self.get('sources.texts', []) or [])

    def get_source_files(self) -> List[str]:
        return list(self.get('sources.files', []) or [])

    # --- Логирование ---
    def get_logging_level(self) -> str:
        return self.get('logging.level', "INFO")

    def get_logging_format(self) -> str:
        return self.get('logging.format', "%(asctime)s - %(levelname)s - %(message)s")

    def is_logging_to_file_enabled(self) -> bool:
        return bool(self.get('logging.log_to_file', False))

    def get_logging_file(self) -> str:
        return self.get('logging.log_file', "logs/word_frequency.log")

    def configure_logging(self, force: bool = False) -> None:
        """Инициализирует/переинициализирует базовое логирование по config.

        Повторная конфигурация выполняется, если:
          - ранее не конфигурировалось, или
          - изменился уровень/формат/файл логирования, или
          - явно указан force=True
        """
        root = logging.getLogger()
        level_name = str(self.get_logging_level()).upper()
        level = getattr(logging, level_name, logging.INFO)
        desired_fmt = self.get_logging_format()
        desired_file = self.get_logging_file() if self.is_logging_to_file_enabled() else None

        current = getattr(root, "_word_frequency_logging", None)
        if current == (level_name, desired_fmt, desired_file) and not force:
            return

        handlers: List[logging.Handler] = []
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(logging.Formatter(desired_fmt))
        handlers.append(console)

        if desired_file:
            log_file = Path(desired_file)
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                fh = logging.FileHandler(log_file, encoding='utf-8')
                fh.setLevel(level)
                fh.setFormatter(logging.Formatter(desired_fmt))
                handlers.append(fh)
            except OSError as e:
                logger.warning(f"Не удалось открыть файл лога {log_file}: {e}")

        logging.basicConfig(level=level, handlers=handlers, format=desired_fmt, force=True)
        setattr(root, "_word_frequency_logging", (level_name, desired_fmt, desired_file))


# Глобальный экземпляр конфигурации
config = Config()
