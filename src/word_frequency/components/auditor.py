"""
Проверка использования этапов пайплайна.

Аудитор только наблюдает: сравнивает, какие этапы настроены и какие
реально запускались, и возвращает список предупреждений.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from ..errors import (
    EmptyResultWarning,
    NoSourcesWarning,
    NotAccumulatedWarning,
    PipelineWarning,
    UnusedFilterWarning,
)
from ..interfaces.pipeline import ListFilterInterface


@dataclass
class StageVisits:
    """Какие этапы запускались в рамках одного пайплайна."""
    accumulated: bool = False
    accumulated_tokens: int = 0
    filters_run: Set[str] = field(default_factory=set)

    def mark_accumulated(self, token_count: int) -> None:
        self.accumulated = True
        self.accumulated_tokens += token_count

    def mark_filter(self, family: str) -> None:
        self.filters_run.add(family)

    def filter_was_run(self, family: str) -> bool:
        return family in self.filters_run


class UsageAuditor:
    """Сверяет настроенные и выполненные этапы."""

    def audit(self, visits: StageVisits, has_sources: bool,
              filters: Iterable[ListFilterInterface]) -> List[PipelineWarning]:
        """
        Args:
            visits: Отметки о выполненных этапах
            has_sources: Заданы ли источники (обычные или файловые)
            filters: Семейства фильтров пайплайна

        Returns:
            Список предупреждений (пустой, если замечаний нет)
        """
        warnings: List[PipelineWarning] = []

        if not visits.accumulated:
            warnings.append(NotAccumulatedWarning(
                "Источники не накоплены: generate вызван без accumulate_sources"
            ))
        if not has_sources:
            warnings.append(NoSourcesWarning("Источники не заданы"))
        if visits.accumulated and visits.accumulated_tokens == 0:
            warnings.append(EmptyResultWarning("Источники не дали ни одного токена"))

        for flt in filters:
            if flt.is_configured() and not visits.filter_was_run(flt.family):
                warnings.append(UnusedFilterWarning(
                    f"Фильтр «{flt.title}» настроен, но не запускался "
                    f"({flt.run_method} не вызывался)",
                    family=flt.family,
                ))
        return warnings
