"""
Компонент для подсчёта частотности токенов.

Отвечает за подсчёт вхождений каждого уникального токена и упорядочивание
таблицы частот по токену, по частоте или по обоим ключам.
"""

from collections import Counter
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from ..interfaces.pipeline import FrequencyAnalyzerInterface
from .collation import LocaleCollator


class FrequencyTable(dict):
    """Таблица частот: токен → количество, порядок задаёт режим сортировки."""

    @property
    def total(self) -> int:
        """Общее число вхождений."""
        return sum(self.values())

    def most_common(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        """n самых частых токенов; при равенстве сохраняется порядок таблицы."""
        ranked = sorted(self.items(), key=lambda x: x[1], reverse=True)
        return ranked if n is None else ranked[:n]

    def to_dataframe(self) -> pd.DataFrame:
        """Таблица в виде DataFrame с колонками token, frequency (порядок сохраняется)."""
        return pd.DataFrame(list(self.items()), columns=["token", "frequency"])


class FrequencyAnalyzer(FrequencyAnalyzerInterface):
    """Подсчёт и сортировка частот."""

    def __init__(self, sort_by_token: int = 0, sort_by_frequency: int = 0):
        """
        Args:
            sort_by_token: >0 по возрастанию, <0 по убыванию, 0 без сортировки
            sort_by_frequency: то же для частоты; если не 0, частота становится
                основным ключом, а токен разрешает равенство
        """
        self.sort_by_token = int(sort_by_token)
        self.sort_by_frequency = int(sort_by_frequency)

    def count_frequency(self, tokens: List[str]) -> Dict[str, int]:
        """
        Подсчитывает частоту появления токенов.

        Returns:
            Словарь в порядке первого появления токена
        """
        return dict(Counter(tokens))

    def _token_key(self, collator: Optional[LocaleCollator]) -> Callable:
        if collator is None:
            return lambda item: item[0]
        # Кодовая точка в конце ключа делает порядок полным
        return lambda item: (collator.sort_key(item[0]), item[0])

    def sort_items(self, counts: Dict[str, int],
                   collator: Optional[LocaleCollator] = None) -> List[Tuple[str, int]]:
        """
        Упорядочивает пары (токен, частота) согласно настройкам сортировки.

        Args:
            counts: Частоты в естественном порядке
            collator: Языковой компаратор для токенов (None = по кодовым точкам)
        """
        items = list(counts.items())
        token_key = self._token_key(collator)

        if self.sort_by_frequency == 0:
            if self.sort_by_token > 0:
                items.sort(key=token_key)
            elif self.sort_by_token < 0:
                items.sort(key=token_key, reverse=True)
            return items

        # Составная сортировка: сначала вторичный ключ, затем стабильно основной
        items.sort(key=token_key, reverse=self.sort_by_token < 0)
        items.sort(key=lambda item: item[1], reverse=self.sort_by_frequency < 0)
        return items

    def build_table(self, tokens: List[str],
                    collator: Optional[LocaleCollator] = None) -> FrequencyTable:
        """Подсчитывает и сортирует частоты, возвращая готовую таблицу."""
        return FrequencyTable(self.sort_items(self.count_frequency(tokens), collator))

    @staticmethod
    def get_frequency_statistics(table: Dict[str, int]) -> Dict[str, float]:
        """
        Возвращает общую статистику частотности.

        Returns:
            Словарь со статистикой
        """
        if not table:
            return {
                'total_tokens': 0,
                'unique_tokens': 0,
                'max_frequency': 0,
                'min_frequency': 0,
            }
        return {
            'total_tokens': sum(table.values()),
            'unique_tokens': len(table),
            'max_frequency': max(table.values()),
            'min_frequency': min(table.values()),
        }
