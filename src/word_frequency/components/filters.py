"""
Списочные фильтры: чёрный список, белый список, замены.

У каждого семейства четыре слота, которые применяются строго по порядку:
1. список в конфигурации,
2. списки из файлов,
3. регулярные выражения в конфигурации,
4. регулярные выражения из файлов.
Пустые слоты пропускаются. Все файлы загружаются до обработки токенов,
поэтому ошибка загрузки не оставляет список токенов наполовину изменённым.
"""

import copy
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Tuple, Union

from ..interfaces.pipeline import ListFilterInterface
from .list_loader import (
    AssetResolver,
    compile_pattern,
    compile_patterns,
    load_pattern_files,
    load_substitution_files,
    load_term_files,
    normalize_substitutions,
)

logger = logging.getLogger(__name__)

Stage = Callable[[List[str]], List[str]]


def flatten_terms(items: Any) -> List[str]:
    """Разворачивает вложенные списки терминов (несколько списков в одном слоте)."""
    if isinstance(items, str):
        return [items]
    terms: List[str] = []
    for item in items or []:
        if isinstance(item, (list, tuple, set, frozenset)):
            terms.extend(flatten_terms(item))
        elif item is not None:
            terms.append(str(item))
    return terms


def file_list(value: Any) -> List[Union[str, Path]]:
    """Слот файлов: одиночное имя оборачивается в список."""
    if not value:
        return []
    if isinstance(value, (str, Path)):
        return [value]
    return list(value)


@dataclass
class ListFilterSpec:
    """Настройки семейства фильтров: четыре необязательных слота и регистр."""
    items: Any = field(default_factory=list)
    files: List[Union[str, Path]] = field(default_factory=list)
    patterns: Any = field(default_factory=list)
    pattern_files: List[Union[str, Path]] = field(default_factory=list)
    case_sensitive: bool = False

    def is_configured(self) -> bool:
        return any(bool(slot) for slot in (self.items, self.files, self.patterns, self.pattern_files))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ListFilterSpec":
        """Создаёт настройки из секции конфигурации (лишние ключи игнорируются)."""
        data = data or {}
        defaults = cls()
        # Копии, чтобы изменения настроек не затрагивали исходную секцию
        return cls(
            items=copy.deepcopy(data.get('items') or defaults.items),
            files=file_list(data.get('files')),
            patterns=copy.deepcopy(data.get('patterns') or defaults.patterns),
            pattern_files=file_list(data.get('pattern_files')),
            case_sensitive=bool(data.get('case_sensitive', defaults.case_sensitive)),
        )


@dataclass
class SubstitutionSpec(ListFilterSpec):
    """Настройки замен: items и patterns задаются отображением ключ → значение."""
    items: Dict[str, str] = field(default_factory=dict)
    patterns: Dict[str, str] = field(default_factory=dict)
    case_sensitive: bool = True


class ListFilter(ListFilterInterface):
    """Общая часть семейств фильтров."""

    family = ""
    title = ""
    run_method = ""

    def __init__(self, spec: Optional[ListFilterSpec] = None,
                 resolver: Optional[AssetResolver] = None):
        self.spec = spec if spec is not None else self._default_spec()
        self.resolver = resolver if resolver is not None else AssetResolver()

    def _default_spec(self) -> ListFilterSpec:
        return ListFilterSpec()

    def is_configured(self) -> bool:
        return self.spec.is_configured()

    def _prepare(self) -> List[Tuple[str, Stage]]:
        """Загружает слоты и возвращает этапы по порядку."""
        stages: List[Tuple[str, Stage]] = []
        spec = self.spec
        if spec.items:
            stages.append(("список", self._literal_stage(flatten_terms(spec.items))))
        if spec.files:
            stages.append(("файлы", self._literal_stage(load_term_files(self.resolver, file_list(spec.files)))))
        if spec.patterns:
            stages.append(("regex", self._pattern_stage(compile_patterns(flatten_terms(spec.patterns)))))
        if spec.pattern_files:
            files = file_list(spec.pattern_files)
            stages.append(("regex-файлы", self._pattern_stage(load_pattern_files(self.resolver, files))))
        return stages

    def apply(self, tokens: List[str]) -> List[str]:
        stages = self._prepare()
        for name, stage in stages:
            before = len(tokens)
            tokens = stage(tokens)
            logger.debug(f"{self.title} ({name}): {before} → {len(tokens)} токенов")
        return tokens

    def _fold(self, value: str) -> str:
        return value if self.spec.case_sensitive else value.casefold()

    def _literal_stage(self, terms: List[str]) -> Stage:
        raise NotImplementedError

    def _pattern_stage(self, patterns: List[Pattern]) -> Stage:
        raise NotImplementedError


class BlackListFilter(ListFilter):
    """Удаляет токены, совпадающие с терминами или выражениями."""

    family = "blacklist"
    title = "Чёрный список"
    run_method = "run_black_list_filter"

    def _literal_stage(self, terms: List[str]) -> Stage:
        excluded = {self._fold(t) for t in terms}
        return lambda tokens: [t for t in tokens if self._fold(t) not in excluded]

    def _pattern_stage(self, patterns: List[Pattern]) -> Stage:
        def stage(tokens: List[str]) -> List[str]:
            # Каждое выражение: отдельный проход по оставшимся токенам
            for pattern in patterns:
                tokens = [t for t in tokens if not pattern.search(t)]
            return tokens
        return stage


class WhiteListFilter(ListFilter):
    """Оставляет только токены, совпадающие с терминами или выражениями."""

    family = "whitelist"
    title = "Белый список"
    run_method = "run_white_list_filter"

    def _literal_stage(self, terms: List[str]) -> Stage:
        allowed = {self._fold(t) for t in terms}
        return lambda tokens: [t for t in tokens if self._fold(t) in allowed]

    def _pattern_stage(self, patterns: List[Pattern]) -> Stage:
        def stage(tokens: List[str]) -> List[str]:
            pool = list(range(len(tokens)))
            kept = set()
            for pattern in patterns:
                matched = [i for i in pool if pattern.search(tokens[i])]
                logger.debug(f"{self.title}: {pattern.pattern!r} → {len(matched)} токенов")
                kept.update(matched)
                # Совпавшие токены засчитаны первому выражению и дальше не проверяются
                pool = [i for i in pool if i not in kept]
            return [tokens[i] for i in sorted(kept)]
        return stage


class LiteralReplacer:
    """Одновременная замена всех ключей: на каждой позиции выигрывает самый длинный ключ."""

    def __init__(self, mapping: Dict[str, str], case_sensitive: bool = True):
        self.case_sensitive = case_sensitive
        self.lookup: Dict[str, str] = {}
        for key, value in mapping.items():
            if not key:
                continue
            self.lookup.setdefault(key if case_sensitive else key.lower(), value)
        keys = sorted(self.lookup, key=len, reverse=True)
        flags = 0 if case_sensitive else re.IGNORECASE
        self.regex = re.compile("|".join(re.escape(k) for k in keys), flags) if keys else None

    def _replacement(self, match) -> str:
        text = match.group(0)
        return self.lookup.get(text if self.case_sensitive else text.lower(), text)

    def replace(self, token: str) -> str:
        if self.regex is None:
            return token
        return self.regex.sub(self._replacement, token)


class PatternReplacer:
    """Одновременная замена по нескольким выражениям.

    На каждой позиции пробуются выражения в заданном порядке, применяется
    первое совпавшее; заменённый текст повторно не просматривается.
    """

    def __init__(self, pairs: Iterable[Tuple[Pattern, str]]):
        self.pairs = list(pairs)

    def _match_at(self, token: str, pos: int):
        for pattern, template in self.pairs:
            match = pattern.match(token, pos)
            if match:
                return match, template
        return None, None

    def replace(self, token: str) -> str:
        out = []
        pos = 0
        size = len(token)
        while pos <= size:
            match, template = self._match_at(token, pos)
            if match is None or match.end() == pos:
                if match is not None:
                    out.append(match.expand(template))
                if pos < size:
                    out.append(token[pos])
                pos += 1
                continue
            out.append(match.expand(template))
            pos = match.end()
        return "".join(out)


def _drop_empty(tokens: Iterable[str]) -> List[str]:
    # Пустые результаты замены удаляются сразу, до удаления чисел и подсчёта
    return [t for t in tokens if t]


class SubstitutionFilter(ListFilter):
    """Заменяет подстроки в каждом токене; пустые токены удаляются."""

    family = "substitution"
    title = "Замены"
    run_method = "run_substitution_list_filter"

    def _default_spec(self) -> ListFilterSpec:
        return SubstitutionSpec()

    def _prepare(self) -> List[Tuple[str, Stage]]:
        stages: List[Tuple[str, Stage]] = []
        spec = self.spec
        if spec.items:
            stages.append(("список", self._literal_stage(normalize_substitutions(spec.items))))
        if spec.files:
            stages.append(("файлы", self._literal_stage(load_substitution_files(self.resolver, file_list(spec.files)))))
        if spec.patterns:
            stages.append(("regex", self._regex_map_stage(normalize_substitutions(spec.patterns))))
        if spec.pattern_files:
            files = file_list(spec.pattern_files)
            stages.append(("regex-файлы", self._regex_map_stage(load_substitution_files(self.resolver, files))))
        return stages

    def _literal_stage(self, mapping: Dict[str, str]) -> Stage:
        replacer = LiteralReplacer(mapping, self.spec.case_sensitive)
        return lambda tokens: _drop_empty(replacer.replace(t) for t in tokens)

    def _regex_map_stage(self, mapping: Dict[str, str]) -> Stage:
        replacer = PatternReplacer((compile_pattern(k), v) for k, v in mapping.items())
        return lambda tokens: _drop_empty(replacer.replace(t) for t in tokens)
