"""
Модуль пайплайна частотности токенов

Предоставляет функциональность для:
- Накопления токенов из строк, деревьев строк, файлов и внешних записей
- Фильтрации чёрным и белым списком, замен подстрок
- Удаления числовых токенов
- Подсчёта частот и сортировки таблицы
- Предупреждений о настроенных, но не запущенных этапах

Порядок работы:
    configure → accumulate_sources() → run_*_filter() (любые, повторяемые)
    → generate(locale) → frequency_table
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .components.auditor import StageVisits, UsageAuditor
from .components.collation import LocaleSpec, make_collator
from .components.filters import (
    BlackListFilter,
    ListFilter,
    ListFilterSpec,
    SubstitutionFilter,
    SubstitutionSpec,
    WhiteListFilter,
)
from .components.frequency_analyzer import FrequencyAnalyzer, FrequencyTable
from .components.list_loader import AssetResolver
from .components.numeric import strip_numeric
from .components.sources import SourceAccumulator
from .components.tokenizer import Tokenizer
from .config import Config, config as default_config
from .errors import InvalidSourceArgument, PipelineWarning
from .interfaces.pipeline import RecordProvider, RecordQuery

logger = logging.getLogger(__name__)

_SPEC_KEYS = {'items', 'files', 'patterns', 'pattern_files', 'case_sensitive'}

FilterSetting = Union[ListFilterSpec, Dict[str, Any], List[Any], str, None]


def _is_slot_section(value: Dict[str, Any], substitution: bool) -> bool:
    """Проверяет, что словарь является секцией слотов, а не отображением замен."""
    if not value or not set(value) <= _SPEC_KEYS:
        return False
    term_types = (dict,) if substitution else (list, tuple, str)
    for key, slot in value.items():
        if slot is None:
            continue
        if key in ('items', 'patterns') and not isinstance(slot, term_types):
            return False
        if key in ('files', 'pattern_files') and not isinstance(slot, (list, tuple, str, Path)):
            return False
        if key == 'case_sensitive' and not isinstance(slot, bool):
            return False
    return True


def coerce_filter_spec(value: FilterSetting, substitution: bool = False) -> ListFilterSpec:
    """
    Приводит настройку фильтра к ListFilterSpec.

    Принимает готовые настройки, секцию конфигурации (словарь со слотами)
    или сокращённую форму: список терминов для чёрного/белого списка,
    отображение замен для списка замен. Словарь считается секцией слотов,
    только если и ключи, и типы значений совпадают со слотами;
    например {"items": "things"} остаётся заменой слова "items".
    """
    spec_cls = SubstitutionSpec if substitution else ListFilterSpec
    if value is None:
        return spec_cls()
    if isinstance(value, ListFilterSpec):
        return value
    if isinstance(value, dict) and _is_slot_section(value, substitution):
        return spec_cls.from_dict(value)
    return spec_cls(items=value)


class WordFrequency:
    """Пайплайн построения таблицы частот токенов"""

    def __init__(self,
                 source_list: Optional[List[Any]] = None,
                 file_source_list: Optional[List[Union[str, Path]]] = None,
                 delimiter: str = " ",
                 force_case: Any = 0,
                 remove_numeric: bool = False,
                 sort_by_token: int = 0,
                 sort_by_frequency: int = 0,
                 locale: LocaleSpec = None,
                 strip_html: bool = False,
                 assets_path: Union[str, Path, None] = None,
                 black_list: FilterSetting = None,
                 white_list: FilterSetting = None,
                 substitution_list: FilterSetting = None):
        """Инициализация пайплайна; все настройки можно менять и после создания"""
        self.source_list: List[Any] = list(source_list or [])
        self.file_source_list: List[Union[str, Path]] = list(file_source_list or [])
        self.delimiter = delimiter
        self.force_case = force_case
        self.remove_numeric = remove_numeric
        self.sort_by_token = sort_by_token
        self.sort_by_frequency = sort_by_frequency
        self.locale = locale
        self.strip_html = strip_html
        self.assets_path = assets_path
        self.black_list = black_list
        self.white_list = white_list
        self.substitution_list = substitution_list

        self.tokens: List[str] = []
        self.frequency_table: FrequencyTable = FrequencyTable()
        self.warnings: List[PipelineWarning] = []
        self.visits = StageVisits()
        self.auditor = UsageAuditor()

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "WordFrequency":
        """Создаёт пайплайн из конфигурации (по умолчанию глобальной)"""
        cfg = cfg or default_config
        return cls(
            source_list=cfg.get_source_texts(),
            file_source_list=cfg.get_source_files(),
            delimiter=cfg.get_delimiter(),
            force_case=cfg.get_force_case(),
            remove_numeric=cfg.is_remove_numeric_enabled(),
            sort_by_token=cfg.get_sort_by_token(),
            sort_by_frequency=cfg.get_sort_by_frequency(),
            locale=cfg.get_locale(),
            strip_html=cfg.is_strip_html_enabled(),
            assets_path=cfg.get_assets_path(),
            black_list=ListFilterSpec.from_dict(cfg.get_filter_config('black_list')),
            white_list=ListFilterSpec.from_dict(cfg.get_filter_config('white_list')),
            substitution_list=SubstitutionSpec.from_dict(cfg.get_filter_config('substitution_list')),
        )

    # ===== Настройки фильтров =====

    @property
    def black_list(self) -> ListFilterSpec:
        return self._black_list

    @black_list.setter
    def black_list(self, value: FilterSetting) -> None:
        self._black_list = coerce_filter_spec(value)

    @property
    def white_list(self) -> ListFilterSpec:
        return self._white_list

    @white_list.setter
    def white_list(self, value: FilterSetting) -> None:
        self._white_list = coerce_filter_spec(value)

    @property
    def substitution_list(self) -> ListFilterSpec:
        return self._substitution_list

    @substitution_list.setter
    def substitution_list(self, value: FilterSetting) -> None:
        self._substitution_list = coerce_filter_spec(value, substitution=True)

    def _filters(self) -> List[ListFilter]:
        resolver = AssetResolver(self.assets_path)
        return [
            BlackListFilter(self.black_list, resolver),
            WhiteListFilter(self.white_list, resolver),
            SubstitutionFilter(self.substitution_list, resolver),
        ]

    # ===== Источники =====

    def _warn(self, warning: PipelineWarning) -> None:
        logger.warning(str(warning))
        self.warnings.append(warning)

    def add_source(self, source: Any) -> "WordFrequency":
        """Добавляет строку или дерево строк; другие значения только дают предупреждение"""
        if isinstance(source, (str, list, tuple)):
            self.source_list.append(source)
        else:
            self._warn(InvalidSourceArgument(
                f"Ожидается строка или список строк, получено {type(source).__name__}"
            ))
        return self

    def add_record_source(self, provider: Any, query: Any) -> "WordFrequency":
        """Добавляет источник записей: провайдер и запрос к нему"""
        if isinstance(provider, RecordProvider) and isinstance(query, RecordQuery):
            self.source_list.append((provider, query))
        else:
            self._warn(InvalidSourceArgument(
                f"Ожидаются RecordProvider и RecordQuery, получено "
                f"{type(provider).__name__} и {type(query).__name__}"
            ))
        return self

    def add_file_source(self, path: Union[str, Path]) -> "WordFrequency":
        """Добавляет текстовый файл (каждая непустая строка токенизируется)"""
        self.file_source_list.append(path)
        return self

    def has_sources(self) -> bool:
        return bool(self.source_list or self.file_source_list)

    def accumulate_sources(self) -> "WordFrequency":
        """Токенизирует все источники и добавляет токены к накопленным"""
        tokenizer = Tokenizer(self.delimiter, self.force_case, self.strip_html)
        new_tokens = SourceAccumulator(tokenizer).accumulate(self.source_list, self.file_source_list)
        self.tokens.extend(new_tokens)
        self.visits.mark_accumulated(len(new_tokens))
        logger.info(f"Накоплено {len(new_tokens)} токенов (всего {len(self.tokens)})")
        return self

    # ===== Фильтры =====

    def _run_filter(self, flt: ListFilter) -> "WordFrequency":
        """Этап отмечается выполненным только после успешного применения фильтра."""
        before = len(self.tokens)
        self.tokens = flt.apply(self.tokens)
        self.visits.mark_filter(flt.family)
        logger.info(f"{flt.title}: {before} → {len(self.tokens)} токенов")
        return self

    def run_black_list_filter(self) -> "WordFrequency":
        """Удаляет токены из чёрного списка"""
        return self._run_filter(BlackListFilter(self.black_list, AssetResolver(self.assets_path)))

    def run_white_list_filter(self) -> "WordFrequency":
        """Оставляет только токены из белого списка"""
        return self._run_filter(WhiteListFilter(self.white_list, AssetResolver(self.assets_path)))

    def run_substitution_list_filter(self) -> "WordFrequency":
        """Применяет замены к каждому токену"""
        return self._run_filter(SubstitutionFilter(self.substitution_list, AssetResolver(self.assets_path)))

    # ===== Результат =====

    def audit(self) -> List[PipelineWarning]:
        """Возвращает предупреждения о неиспользованных или пустых этапах"""
        return self.auditor.audit(self.visits, self.has_sources(), self._filters())

    def generate(self, locale: LocaleSpec = None) -> FrequencyTable:
        """
        Строит таблицу частот из накопленных токенов.

        Args:
            locale: Локаль для сравнения токенов (по умолчанию self.locale);
                имя, список вариантов или LocaleCollator

        Returns:
            Таблица частот (также сохраняется в self.frequency_table)
        """
        for warning in self.audit():
            self._warn(warning)

        if self.remove_numeric:
            self.tokens = strip_numeric(self.tokens)

        collator = make_collator(locale if locale is not None else self.locale)
        analyzer = FrequencyAnalyzer(self.sort_by_token, self.sort_by_frequency)
        self.frequency_table = analyzer.build_table(self.tokens, collator)
        logger.info(
            f"Таблица частот: {len(self.frequency_table)} уникальных токенов, "
            f"{self.frequency_table.total} вхождений"
        )
        return self.frequency_table

    def reset(self) -> "WordFrequency":
        """Очищает накопленные токены, таблицу, предупреждения и отметки этапов"""
        self.tokens = []
        self.frequency_table = FrequencyTable()
        self.warnings = []
        self.visits = StageVisits()
        return self

    def get_summary_stats(self) -> Dict[str, Any]:
        """Краткая статистика по текущему состоянию пайплайна"""
        stats = FrequencyAnalyzer.get_frequency_statistics(self.frequency_table)
        stats['accumulated_tokens'] = self.visits.accumulated_tokens
        stats['current_tokens'] = len(self.tokens)
        stats['warnings'] = len(self.warnings)
        return stats
