"""
Компонент для токенизации текста.

Отвечает за разбивку строки на токены по буквальному разделителю,
обрезку пробелов, отбрасывание пустых токенов и приведение регистра.
"""

from enum import Enum
from typing import List, Union

from bs4 import BeautifulSoup

from ..interfaces.pipeline import TokenizerInterface


class CaseMode(Enum):
    """Режим приведения регистра токенов."""
    LOWER = -1
    NONE = 0
    UPPER = 1

    @classmethod
    def coerce(cls, value: Union["CaseMode", int, str, None]) -> "CaseMode":
        """Принимает CaseMode, число (знак задаёт режим) или имя режима."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        if isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
            value = int(name)
        if value > 0:
            return cls.UPPER
        if value < 0:
            return cls.LOWER
        return cls.NONE


class Tokenizer(TokenizerInterface):
    """Разбивает строку на токены по буквальному разделителю."""

    def __init__(self, delimiter: str = " ",
                 case_mode: Union[CaseMode, int, str, None] = CaseMode.NONE,
                 strip_html: bool = False):
        """
        Инициализирует токенизатор.

        Args:
            delimiter: Разделитель (строка, не регулярное выражение)
            case_mode: Приведение регистра: верхний, нижний или без изменений
            strip_html: Извлекать видимый текст из HTML перед разбиением
        """
        if not isinstance(delimiter, str) or delimiter == "":
            raise ValueError("Разделитель должен быть непустой строкой")
        self.delimiter = delimiter
        self.case_mode = CaseMode.coerce(case_mode)
        self.strip_html = strip_html

    def tokenize(self, text: str) -> List[str]:
        """
        Разбивает текст на токены.

        Args:
            text: Исходный текст

        Returns:
            Список непустых токенов в исходном порядке
        """
        if not text:
            return []

        if self.strip_html:
            text = self.remove_html_tags(text)

        tokens = []
        for piece in text.split(self.delimiter):
            token = piece.strip()
            if not token:
                continue
            tokens.append(self.apply_case(token))
        return tokens

    def apply_case(self, token: str) -> str:
        """Приводит регистр токена согласно настройке."""
        if self.case_mode is CaseMode.UPPER:
            return token.upper()
        if self.case_mode is CaseMode.LOWER:
            return token.lower()
        return token

    def remove_html_tags(self, text: str) -> str:
        """
        Удаляет HTML теги из текста используя BeautifulSoup

        Args:
            text: HTML текст

        Returns:
            Текст без тегов; соседние элементы разделяются разделителем
            токенизатора, обычный текст возвращается как есть
        """
        if '<' in text and '>' in text:
            soup = BeautifulSoup(text, "html.parser")
            return soup.get_text(self.delimiter)
        return text
