"""
Ошибки и предупреждения пайплайна частотности.

Фатальные ошибки (неверный тип источника, отсутствующие файлы, неверные
регулярные выражения) прерывают текущий этап. Предупреждения только
собираются и пишутся в лог.
"""


class WordFrequencyError(Exception):
    """Базовая ошибка пакета."""


class InvalidSourceKind(WordFrequencyError, TypeError):
    """Элемент источника не строка, не дерево строк и не пара провайдер/запрос."""


class SourceFileNotFound(WordFrequencyError, FileNotFoundError):
    """Файловый источник текста не найден."""


class ListFileNotFound(WordFrequencyError, FileNotFoundError):
    """Файл списка, регулярных выражений или замен не найден."""


class InvalidPattern(WordFrequencyError, ValueError):
    """Регулярное выражение не компилируется."""


class PipelineWarning(UserWarning):
    """Базовое предупреждение: не прерывает работу пайплайна."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.message))


class InvalidSourceArgument(PipelineWarning):
    """В add_source/add_record_source передан неподходящий аргумент."""


class NotAccumulatedWarning(PipelineWarning):
    """generate вызван без accumulate_sources."""


class NoSourcesWarning(PipelineWarning):
    """Источники не заданы."""


class EmptyResultWarning(PipelineWarning):
    """Источники не дали ни одного токена."""


class UnusedFilterWarning(PipelineWarning):
    """Фильтр настроен, но ни разу не запускался."""

    def __init__(self, message: str, family: str = ""):
        super().__init__(message)
        self.family = family
