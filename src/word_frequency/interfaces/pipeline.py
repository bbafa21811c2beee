"""
Абстрактные интерфейсы для компонентов пайплайна частотности.

Определяет контракты компонентов и внешнего источника структурированных
записей, обеспечивая единообразный API и возможность замены реализаций.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence


@dataclass
class RecordQuery:
    """Описание запроса к источнику записей.

    fields: какие поля каждой записи отдавать в токенизацию (по порядку),
        допускается строка через запятую: "col1, col2"
    where: условия отбора {поле: допустимые значения}
    """
    fields: Sequence[str]
    where: Dict[str, Sequence[Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.fields, str):
            self.fields = [f.strip() for f in self.fields.split(",") if f.strip()]
        self.fields = tuple(self.fields)
        self.where = dict(self.where or {})


class RecordProvider(ABC):
    """Внешний источник структурированных записей (таблица, БД, выгрузка)."""

    @abstractmethod
    def fetch(self, query: RecordQuery) -> Iterable[Mapping[str, Any]]:
        """Возвращает записи, отобранные по query."""
        pass


class TokenizerInterface(ABC):
    """Интерфейс для токенизации текста."""

    @abstractmethod
    def tokenize(self, text: str) -> List[str]:
        """Разбивает текст на токены."""
        pass


class ListFilterInterface(ABC):
    """Интерфейс семейства списочных фильтров."""

    family: str = ""
    title: str = ""
    run_method: str = ""

    @abstractmethod
    def apply(self, tokens: List[str]) -> List[str]:
        """Возвращает новый список токенов после всех подфильтров семейства."""
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """True, если задан хотя бы один из четырёх слотов."""
        pass


class FrequencyAnalyzerInterface(ABC):
    """Интерфейс для подсчёта и сортировки частот."""

    @abstractmethod
    def count_frequency(self, tokens: List[str]) -> Dict[str, int]:
        """Подсчитывает частоту появления токенов."""
        pass
