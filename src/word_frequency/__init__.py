"""
Word Frequency - построение таблиц частотности токенов

Этот модуль предоставляет инструменты для:
- Накопления токенов из строк, деревьев строк, файлов и табличных записей
- Фильтрации чёрным и белым списком (списки, файлы, регулярные выражения)
- Замен подстрок в токенах
- Подсчёта и сортировки частот с учётом языка
"""

__version__ = "0.1.0"
__author__ = "Sergey"

from .frequency_pipeline import WordFrequency
from .components.filters import ListFilterSpec, SubstitutionSpec
from .components.frequency_analyzer import FrequencyTable
from .interfaces.pipeline import RecordProvider, RecordQuery
from . import cli

__all__ = [
    "WordFrequency",
    "ListFilterSpec",
    "SubstitutionSpec",
    "FrequencyTable",
    "RecordProvider",
    "RecordQuery",
    "cli",
]
