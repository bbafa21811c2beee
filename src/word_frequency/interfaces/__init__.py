"""
Интерфейсы для компонентов пайплайна частотности.

Определяет абстрактные базовые классы для всех компонентов,
обеспечивая единообразный API и возможность замены реализаций.
"""

from .pipeline import (
    RecordQuery,
    RecordProvider,
    TokenizerInterface,
    ListFilterInterface,
    FrequencyAnalyzerInterface,
)

__all__ = [
    'RecordQuery',
    'RecordProvider',
    'TokenizerInterface',
    'ListFilterInterface',
    'FrequencyAnalyzerInterface',
]
