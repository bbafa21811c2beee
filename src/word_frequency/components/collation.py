"""
Сравнение токенов с учётом языка.

Коллатор передаётся в сортировку явно и не меняет локаль процесса.
Ключ сортировки многоуровневый:
1. базовые буквы (без диакритики, casefold) с поправками языка,
   например испанская ñ после n или шведские å ä ö после z;
2. диакритика;
3. регистр (строчные раньше прописных).
"""

import re
import unicodedata
from typing import Dict, Optional, Sequence, Tuple, Union

# Символ больше любой буквы: буквы с ним в ключе встают после базовой
_AFTER = "\U0010FFFF"

_NORDIC_SV = {
    "å": "z" + _AFTER + "1",
    "ä": "z" + _AFTER + "2",
    "æ": "z" + _AFTER + "2",
    "ö": "z" + _AFTER + "3",
    "ø": "z" + _AFTER + "3",
}

_NORDIC_DA = {
    "æ": "z" + _AFTER + "1",
    "ä": "z" + _AFTER + "1",
    "ø": "z" + _AFTER + "2",
    "ö": "z" + _AFTER + "2",
    "å": "z" + _AFTER + "3",
}

# Поправки к базовому порядку по языкам; отсутствующий язык = общий порядок
_TAILORINGS: Dict[str, Dict[str, str]] = {
    "es": {"ñ": "n" + _AFTER},
    "sv": _NORDIC_SV,
    "fi": _NORDIC_SV,
    "da": _NORDIC_DA,
    "nb": _NORDIC_DA,
    "nn": _NORDIC_DA,
    "no": _NORDIC_DA,
}

# Локали, для которых сравнение идёт по кодовым точкам
_BINARY_LOCALES = {"c", "posix"}

LocaleSpec = Union[str, Sequence[str], "LocaleCollator", None]


def parse_language(name: str) -> str:
    """'de_DE@euro' → 'de', 'sv-SE.UTF-8' → 'sv'."""
    return re.split(r"[_\-.@]", name.strip(), maxsplit=1)[0].lower()


class LocaleCollator:
    """Компаратор строк для заданной локали."""

    def __init__(self, locale: Union[str, Sequence[str]]):
        """
        Args:
            locale: Имя локали или список вариантов по убыванию предпочтения
                (берётся первый непустой: ['de_DE@euro', 'de_DE', 'de'])
        """
        names = [locale] if isinstance(locale, str) else list(locale)
        names = [n for n in names if n and str(n).strip()]
        if not names:
            raise ValueError("Не задано имя локали")
        self.locale = str(names[0])
        self.language = parse_language(self.locale)
        self.tailoring = _TAILORINGS.get(self.language, {})
        self.binary = self.language in _BINARY_LOCALES

    def _primary(self, token: str) -> str:
        parts = []
        for ch in token:
            tailored = self.tailoring.get(ch.lower())
            if tailored is not None:
                parts.append(tailored)
                continue
            base = "".join(c for c in unicodedata.normalize("NFD", ch) if not unicodedata.combining(c))
            parts.append(base.casefold())
        return "".join(parts)

    def sort_key(self, token: str) -> Tuple:
        """Ключ сортировки токена."""
        if self.binary:
            return (token,)
        primary = self._primary(token)
        secondary = unicodedata.normalize("NFD", token.casefold())
        tertiary = tuple(ch.isupper() for ch in token)
        return (primary, secondary, tertiary)

    def compare(self, a: str, b: str) -> int:
        """Отрицательное, ноль или положительное, как strcoll."""
        ka, kb = self.sort_key(a), self.sort_key(b)
        if ka < kb:
            return -1
        if ka > kb:
            return 1
        return 0

    def __repr__(self) -> str:
        return f"LocaleCollator({self.locale!r})"


def make_collator(locale: LocaleSpec) -> Optional[LocaleCollator]:
    """Создаёт коллатор из спецификации локали; None, если локаль не задана."""
    if locale is None or isinstance(locale, LocaleCollator):
        return locale
    if isinstance(locale, str) and not locale.strip():
        return None
    return LocaleCollator(locale)
