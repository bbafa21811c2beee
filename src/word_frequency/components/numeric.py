"""
Удаление числовых токенов.

Токен считается числовым, если разбор ведущего целого даёт значение
больше нуля, либо токен в точности равен "0". Поэтому "47" и "47abc"
числовые, а "abc47", "-5" и "00" нет.
"""

import re
from typing import List

_LEADING_INTEGER = re.compile(r"\s*([+-]?)([0-9]+)")


def leading_integer(token: str) -> int:
    """Значение ведущего целого в строке (0, если строка с него не начинается)."""
    match = _LEADING_INTEGER.match(token)
    if not match:
        return 0
    value = int(match.group(2))
    return -value if match.group(1) == "-" else value


def is_numeric(token: str) -> bool:
    """Проверяет, является ли токен числом в смысле пайплайна."""
    return token == "0" or leading_integer(token) > 0


def strip_numeric(tokens: List[str]) -> List[str]:
    """Возвращает токены без числовых, порядок сохраняется."""
    return [token for token in tokens if not is_numeric(token)]
