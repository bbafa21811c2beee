"""
Тесты списочных фильтров и загрузки списков.
"""

import re

import pytest

from word_frequency.components.filters import (
    BlackListFilter,
    ListFilterSpec,
    LiteralReplacer,
    PatternReplacer,
    SubstitutionFilter,
    SubstitutionSpec,
    WhiteListFilter,
    file_list,
    flatten_terms,
)
from word_frequency.components.list_loader import (
    DEFAULT_ASSETS_PATH,
    AssetResolver,
    compile_pattern,
    load_substitution_files,
    load_term_files,
    split_delimited,
)
from word_frequency.components.tokenizer import Tokenizer
from word_frequency.errors import InvalidPattern, ListFileNotFound, WordFrequencyError

from .fixtures.sample_texts import BASE_TEXT

TOKENS = Tokenizer().tokenize(BASE_TEXT)


class TestPatternSyntax:

    @pytest.mark.parametrize("pattern,body,flags", [
        ("#^T#", "^T", 0),
        ("/s$/i", "s$", re.IGNORECASE),
        ("~a.b~ms", "a.b", re.MULTILINE | re.DOTALL),
        ("#x#u", "x", 0),
        ("^T", "^T", 0),
        ("#abc", "#abc", 0),
        ("#x#q", "#x#q", 0),
    ])
    def test_split_delimited(self, pattern, body, flags):
        assert split_delimited(pattern) == (body, flags)

    def test_compile_delimited_with_flag(self):
        assert compile_pattern("/^this$/i").search("THIS")

    def test_compiled_pattern_passes_through(self):
        pattern = re.compile("x")
        assert compile_pattern(pattern) is pattern

    def test_invalid_pattern(self):
        with pytest.raises(InvalidPattern):
            compile_pattern("#(#")

    def test_invalid_pattern_is_value_error(self):
        with pytest.raises(ValueError):
            compile_pattern("[")


class TestListLoading:

    def test_default_assets_exist(self):
        for name in ("blacklist_en.txt", "whitelist_test.txt", "regexp_test_1.txt",
                     "regexp_test_2.txt", "punctuation_en.yaml"):
            assert (DEFAULT_ASSETS_PATH / name).is_file()

    def test_missing_list_file(self, assets_dir):
        with pytest.raises(ListFileNotFound):
            AssetResolver(assets_dir).resolve("nope.txt")

    def test_absolute_path(self, assets_dir):
        path = assets_dir / "stop.txt"
        assert AssetResolver().resolve(path) == path

    def test_term_files_strip_and_skip_blank(self, assets_dir):
        terms = load_term_files(AssetResolver(assets_dir), ["stop.txt", "more_stop.txt"])
        assert terms == ["this", "is", "a"]

    def test_substitution_files_merge_yaml_and_json(self, assets_dir):
        mapping = load_substitution_files(AssetResolver(assets_dir), ["swap.yaml", "swap.json"])
        assert mapping == {".": "!", "string": "rope", "rope": "cord"}

    def test_substitution_file_must_be_mapping(self, assets_dir):
        with pytest.raises(WordFrequencyError):
            load_substitution_files(AssetResolver(assets_dir), ["not_a_mapping.yaml"])

    def test_flatten_terms(self):
        assert flatten_terms([["a", "b"], "c", ("d",)]) == ["a", "b", "c", "d"]
        assert flatten_terms("single") == ["single"]
        assert flatten_terms(None) == []

    def test_file_list_wraps_single_name(self, assets_dir):
        assert file_list("stop.txt") == ["stop.txt"]
        assert file_list(assets_dir) == [assets_dir]
        assert file_list(None) == []
        assert file_list(("a.txt", "b.txt")) == ["a.txt", "b.txt"]

    def test_spec_from_dict_single_file_names(self):
        spec = ListFilterSpec.from_dict({"files": "blacklist_en.txt", "pattern_files": "regexp_test_2.txt"})
        assert spec.files == ["blacklist_en.txt"]
        assert spec.pattern_files == ["regexp_test_2.txt"]


class TestBlackListFilter:

    def test_not_configured(self):
        flt = BlackListFilter()
        assert not flt.is_configured()
        assert flt.apply(TOKENS) == TOKENS

    def test_items_case_insensitive(self):
        flt = BlackListFilter(ListFilterSpec(items=["this", "is"]))
        assert flt.apply(TOKENS) == ["a", "test", "string.", "a", "second", "test", "string"]

    def test_items_case_sensitive(self):
        flt = BlackListFilter(ListFilterSpec(items=["this", "is"], case_sensitive=True))
        assert flt.apply(TOKENS).count("This") == 2

    def test_patterns_are_successive_passes(self):
        flt = BlackListFilter(ListFilterSpec(patterns=["#^[Tt]#", "#^[Ss]#", "#s$#"]))
        assert flt.apply(TOKENS) == ["a", "a"]

    def test_pattern_files(self, assets_dir):
        flt = BlackListFilter(ListFilterSpec(pattern_files=["patterns.txt"]), AssetResolver(assets_dir))
        # #^s# и /T/i убирают всё, кроме 'is' и 'a'
        assert flt.apply(TOKENS) == ["is", "a", "is", "a"]

    def test_single_file_name(self, assets_dir):
        flt = BlackListFilter(ListFilterSpec(files="stop.txt"), AssetResolver(assets_dir))
        assert flt.apply(TOKENS) == ["a", "test", "string.", "a", "second", "test", "string"]

    def test_single_pattern_file_name(self, assets_dir):
        flt = BlackListFilter(ListFilterSpec(pattern_files="patterns.txt"), AssetResolver(assets_dir))
        assert flt.apply(TOKENS) == ["is", "a", "is", "a"]

    def test_missing_file_raises_before_filtering(self, assets_dir):
        tokens = list(TOKENS)
        flt = BlackListFilter(ListFilterSpec(items=["a"], files=["stop.txt", "nope.txt"]),
                              AssetResolver(assets_dir))
        with pytest.raises(ListFileNotFound):
            flt.apply(tokens)
        assert tokens == TOKENS

    def test_idempotent(self):
        flt = BlackListFilter(ListFilterSpec(items=["a"], patterns=["#^s#"]))
        once = flt.apply(TOKENS)
        assert flt.apply(once) == once


class TestWhiteListFilter:

    def test_items(self):
        flt = WhiteListFilter(ListFilterSpec(items=["this", "is"]))
        assert flt.apply(TOKENS) == ["This", "is", "This", "is"]

    def test_items_case_sensitive(self):
        flt = WhiteListFilter(ListFilterSpec(items=["this", "is"], case_sensitive=True))
        assert flt.apply(TOKENS) == ["is", "is"]

    def test_patterns_union_keeps_order(self):
        flt = WhiteListFilter(ListFilterSpec(patterns=["#T#", "#is#", "#^[Tt]#"]))
        assert flt.apply(TOKENS) == ["This", "is", "test", "This", "is", "test"]

    def test_slots_intersect(self):
        spec = ListFilterSpec(items=["this", "is", "test"], patterns=["#^[Tt]#"])
        assert WhiteListFilter(spec).apply(TOKENS) == ["This", "test", "This", "test"]

    def test_empty_whitelist_result(self):
        flt = WhiteListFilter(ListFilterSpec(items=["nothing"]))
        assert flt.apply(TOKENS) == []

    def test_idempotent(self):
        flt = WhiteListFilter(ListFilterSpec(patterns=["#^[Ss]#"]))
        once = flt.apply(TOKENS)
        assert flt.apply(once) == once


class TestReplacers:

    def test_longest_key_wins(self):
        assert LiteralReplacer({"a": "1", "ab": "2"}).replace("abc") == "2c"

    def test_simultaneous_replacement(self):
        assert LiteralReplacer({"a": "b", "b": "a"}).replace("ab") == "ba"

    def test_case_insensitive_literal(self):
        replacer = LiteralReplacer({"t": "XXX"}, case_sensitive=False)
        assert replacer.replace("This") == "XXXhis"
        assert replacer.replace("test") == "XXXesXXX"

    def test_empty_mapping(self):
        assert LiteralReplacer({}).replace("abc") == "abc"

    def test_pattern_first_match_wins(self):
        replacer = PatternReplacer([
            (compile_pattern("#ab#"), "X"),
            (compile_pattern("#a#"), "Y"),
        ])
        assert replacer.replace("abac") == "XYc"

    def test_pattern_not_rescanned(self):
        replacer = PatternReplacer([
            (compile_pattern("#a#"), "b"),
            (compile_pattern("#b#"), "c"),
        ])
        assert replacer.replace("ab") == "bc"

    def test_pattern_backreference(self):
        replacer = PatternReplacer([(compile_pattern(r"#(\w)-(\w)#"), r"\2-\1")])
        assert replacer.replace("a-b c-d") == "b-a d-c"


class TestSubstitutionFilter:

    def test_default_spec_is_case_sensitive(self):
        assert SubstitutionFilter().spec.case_sensitive is True
        assert SubstitutionSpec().case_sensitive is True

    def test_items(self):
        flt = SubstitutionFilter(SubstitutionSpec(items={".": "X"}))
        assert "stringX" in flt.apply(TOKENS)

    def test_files_then_patterns(self, assets_dir):
        spec = SubstitutionSpec(files=["swap.yaml"], patterns={"#!$#": "?"})
        flt = SubstitutionFilter(spec, AssetResolver(assets_dir))
        tokens = flt.apply(["string.", "string"])
        assert tokens == ["rope?", "rope"]

    def test_single_file_names(self, assets_dir):
        spec = SubstitutionSpec(files="swap.yaml", pattern_files="swap.json")
        flt = SubstitutionFilter(spec, AssetResolver(assets_dir))
        assert flt.apply(["string.", "string"]) == ["cord!", "cord"]

    def test_empty_tokens_dropped(self):
        flt = SubstitutionFilter(SubstitutionSpec(items={"a": ""}))
        assert flt.apply(["a", "ab", "aa"]) == ["b"]

    def test_pattern_to_empty_dropped(self):
        flt = SubstitutionFilter(SubstitutionSpec(patterns={"#^is$#": ""}))
        assert "is" not in flt.apply(TOKENS)
        assert "" not in flt.apply(TOKENS)
