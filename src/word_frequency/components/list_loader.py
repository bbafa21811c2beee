"""
Загрузка списков для фильтров.

Функции:
- Разрешение относительных путей относительно каталога assets
- Чтение списков терминов и регулярных выражений (по одному в строке)
- Чтение словарей замен (YAML/JSON отображение ключ → значение)
- Разбор регулярных выражений в синтаксисе с разделителями: #^T#, /s$/i
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Pattern, Tuple, Union

import yaml

from ..errors import InvalidPattern, ListFileNotFound, WordFrequencyError

logger = logging.getLogger(__name__)

# Каталог со встроенными списками (стоп-слова, пунктуация, примеры regex)
DEFAULT_ASSETS_PATH = Path(__file__).resolve().parent.parent / "assets"

# Символы, допустимые как разделители шаблона (метасимволы regex исключены)
PATTERN_DELIMITERS = "/#~!@%`;,:=&"

_PATTERN_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,
}


class AssetResolver:
    """Разрешает пути файлов списков относительно каталога assets."""

    def __init__(self, base_path: Union[str, Path, None] = None):
        self.base_path = Path(base_path).expanduser() if base_path else DEFAULT_ASSETS_PATH

    def resolve(self, name: Union[str, Path]) -> Path:
        """
        Возвращает путь к существующему файлу списка.

        Raises:
            ListFileNotFound: файл не существует
        """
        path = Path(name).expanduser()
        if not path.is_absolute():
            path = self.base_path / path
        if not path.is_file():
            raise ListFileNotFound(f"Файл списка не найден: {path}")
        return path


def read_lines(path: Path) -> List[str]:
    """Читает непустые строки файла без окружающих пробелов."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def load_term_files(resolver: AssetResolver, names: Iterable[Union[str, Path]]) -> List[str]:
    """Загружает и объединяет термины из нескольких файлов (один термин в строке)."""
    paths = [resolver.resolve(name) for name in names]
    terms: List[str] = []
    for path in paths:
        lines = read_lines(path)
        logger.debug(f"Загружено {len(lines)} строк из {path}")
        terms.extend(lines)
    return terms


def load_substitution_files(resolver: AssetResolver, names: Iterable[Union[str, Path]]) -> Dict[str, str]:
    """
    Загружает словари замен из YAML/JSON файлов.

    Более поздние файлы перекрывают совпадающие ключи более ранних.

    Raises:
        ListFileNotFound: файл не существует
        WordFrequencyError: файл не содержит отображение
    """
    paths = [resolver.resolve(name) for name in names]
    merged: Dict[str, str] = {}
    for path in paths:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise WordFrequencyError(f"Файл замен {path} должен содержать отображение ключ → значение")
        merged.update(normalize_substitutions(data))
        logger.debug(f"Загружено {len(data)} замен из {path}")
    return merged


def normalize_substitutions(mapping: Dict) -> Dict[str, str]:
    """Приводит ключи и значения замен к строкам (None → пустая строка)."""
    result = {}
    for key, value in mapping.items():
        result[str(key)] = "" if value is None else str(value)
    return result


def split_delimited(pattern: str) -> Tuple[str, int]:
    """
    Разбирает шаблон вида <d>тело<d>флаги.

    Шаблон без разделителей возвращается как есть с нулевыми флагами.
    """
    if len(pattern) >= 2 and pattern[0] in PATTERN_DELIMITERS:
        end = pattern.rfind(pattern[0])
        suffix = pattern[end + 1:]
        if end > 0 and all(ch in _PATTERN_FLAGS for ch in suffix):
            flags = 0
            for ch in suffix:
                flags |= _PATTERN_FLAGS[ch]
            return pattern[1:end], flags
    return pattern, 0


def compile_pattern(pattern: Union[str, Pattern]) -> Pattern:
    """
    Компилирует регулярное выражение (с разделителями или без).

    Raises:
        InvalidPattern: выражение не компилируется
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    body, flags = split_delimited(str(pattern))
    try:
        return re.compile(body, flags)
    except re.error as e:
        raise InvalidPattern(f"Неверное регулярное выражение {pattern!r}: {e}") from e


def compile_patterns(patterns: Iterable[Union[str, Pattern]]) -> List[Pattern]:
    """Компилирует список выражений, сохраняя порядок."""
    return [compile_pattern(p) for p in patterns]


def load_pattern_files(resolver: AssetResolver, names: Iterable[Union[str, Path]]) -> List[Pattern]:
    """Загружает и компилирует выражения из файлов (одно выражение в строке)."""
    return compile_patterns(load_term_files(resolver, names))
