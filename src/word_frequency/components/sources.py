"""
Источники текста и их накопление.

Каждый элемент списка источников один раз приводится к одному из типов:
- TextSource: строка
- TreeSource: дерево строк (вложенные списки произвольной глубины)
- FileSource: файл, строки которого токенизируются (пустые пропускаются)
- RecordSource: пара (провайдер записей, запрос)

Неподходящая форма отвергается при построении ссылки (InvalidSourceKind).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Sequence, Union

from ..errors import InvalidSourceKind, SourceFileNotFound
from ..interfaces.pipeline import RecordProvider, RecordQuery, TokenizerInterface
from .list_loader import read_lines
from .record_providers import record_values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextSource:
    text: str

    def texts(self) -> Iterator[str]:
        yield self.text


@dataclass(frozen=True)
class TreeSource:
    """Дерево строк; обходится в глубину слева направо."""
    tree: Sequence[Any]

    def __post_init__(self) -> None:
        # Проверяем все листья сразу, чтобы ошибка не всплыла посреди накопления
        for _ in self.texts():
            pass

    def texts(self) -> Iterator[str]:
        stack = [iter(self.tree)]
        while stack:
            try:
                node = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue
            if isinstance(node, str):
                yield node
            elif isinstance(node, (list, tuple)):
                stack.append(iter(node))
            else:
                raise InvalidSourceKind(
                    f"Лист дерева источников должен быть строкой, получено {type(node).__name__}"
                )


@dataclass(frozen=True)
class FileSource:
    """Текстовый файл; относительный путь разрешается от текущего каталога."""
    path: Path

    def texts(self) -> Iterator[str]:
        path = Path(self.path).expanduser()
        if not path.is_file():
            raise SourceFileNotFound(f"Файл источника не найден: {path}")
        yield from read_lines(path)


@dataclass(frozen=True)
class RecordSource:
    provider: RecordProvider
    query: RecordQuery

    def texts(self) -> Iterator[str]:
        rows = self.provider.fetch(self.query)
        yield from record_values(rows, self.query.fields)


Source = Union[TextSource, TreeSource, FileSource, RecordSource]
_SOURCE_TYPES = (TextSource, TreeSource, FileSource, RecordSource)


def is_record_pair(value: Any) -> bool:
    """True для пары (RecordProvider, RecordQuery)."""
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and isinstance(value[0], RecordProvider)
        and isinstance(value[1], RecordQuery)
    )


def classify_source(value: Any) -> Source:
    """
    Приводит элемент списка источников к типизированной ссылке.

    Порядок проверки: строка, дерево (первый элемент сам список),
    пара провайдер/запрос.

    Raises:
        InvalidSourceKind: форма элемента не распознана
    """
    if isinstance(value, _SOURCE_TYPES):
        return value
    if isinstance(value, str):
        return TextSource(value)
    if isinstance(value, (list, tuple)) and value:
        if isinstance(value[0], (list, tuple)):
            return TreeSource(value)
        if is_record_pair(value):
            return RecordSource(value[0], value[1])
    raise InvalidSourceKind(
        f"Источник должен быть строкой, деревом строк или парой (провайдер, запрос), "
        f"получено {type(value).__name__}: {value!r:.80}"
    )


class SourceAccumulator:
    """Собирает токены из всех источников в один упорядоченный список."""

    def __init__(self, tokenizer: TokenizerInterface):
        self.tokenizer = tokenizer

    def resolve(self, sources: Iterable[Any],
                file_sources: Iterable[Union[str, Path]] = ()) -> List[Source]:
        """Файловые источники идут первыми, затем остальные в заданном порядке."""
        resolved: List[Source] = [FileSource(Path(p)) for p in file_sources]
        resolved.extend(classify_source(s) for s in sources)
        return resolved

    def accumulate(self, sources: Iterable[Any],
                   file_sources: Iterable[Union[str, Path]] = ()) -> List[str]:
        """
        Токенизирует все источники.

        Returns:
            Новые токены в порядке обхода; при ошибке ничего не возвращается,
            поэтому накопленное ранее состояние вызывающего не меняется
        """
        tokens: List[str] = []
        for source in self.resolve(sources, file_sources):
            before = len(tokens)
            for text in source.texts():
                tokens.extend(self.tokenizer.tokenize(text))
            logger.debug(f"{type(source).__name__}: +{len(tokens) - before} токенов")
        return tokens
