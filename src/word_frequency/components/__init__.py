"""
Компоненты пайплайна частотности токенов.

Каждый компонент отвечает за одну конкретную задачу:
- Tokenizer - разбивка строки на токены
- SourceAccumulator - накопление токенов из источников
- BlackListFilter, WhiteListFilter, SubstitutionFilter - списочные фильтры
- LocaleCollator - сравнение токенов с учётом языка
- FrequencyAnalyzer - подсчёт и сортировка частот
- UsageAuditor - предупреждения о неиспользованных этапах
"""

from .tokenizer import Tokenizer, CaseMode
from .sources import (
    TextSource,
    TreeSource,
    FileSource,
    RecordSource,
    SourceAccumulator,
    classify_source,
)
from .record_providers import (
    DataFrameRecordProvider,
    SpreadsheetRecordProvider,
    SqliteRecordProvider,
)
from .list_loader import AssetResolver, compile_pattern
from .filters import (
    ListFilterSpec,
    SubstitutionSpec,
    BlackListFilter,
    WhiteListFilter,
    SubstitutionFilter,
)
from .numeric import is_numeric, strip_numeric
from .collation import LocaleCollator, make_collator
from .frequency_analyzer import FrequencyAnalyzer, FrequencyTable
from .auditor import StageVisits, UsageAuditor

__all__ = [
    'Tokenizer',
    'CaseMode',
    'TextSource',
    'TreeSource',
    'FileSource',
    'RecordSource',
    'SourceAccumulator',
    'classify_source',
    'DataFrameRecordProvider',
    'SpreadsheetRecordProvider',
    'SqliteRecordProvider',
    'AssetResolver',
    'compile_pattern',
    'ListFilterSpec',
    'SubstitutionSpec',
    'BlackListFilter',
    'WhiteListFilter',
    'SubstitutionFilter',
    'is_numeric',
    'strip_numeric',
    'LocaleCollator',
    'make_collator',
    'FrequencyAnalyzer',
    'FrequencyTable',
    'StageVisits',
    'UsageAuditor',
]
