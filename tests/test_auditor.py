"""
Тесты предупреждений о неиспользованных этапах.
"""

import logging

from word_frequency import WordFrequency
from word_frequency.components.auditor import StageVisits, UsageAuditor
from word_frequency.components.filters import BlackListFilter, ListFilterSpec, WhiteListFilter
from word_frequency.errors import (
    EmptyResultWarning,
    InvalidSourceArgument,
    NoSourcesWarning,
    NotAccumulatedWarning,
    PipelineWarning,
    UnusedFilterWarning,
)
from word_frequency.interfaces.pipeline import RecordQuery

from .fixtures.sample_texts import BASE_TEXT


def _types(warnings):
    return [type(w) for w in warnings]


class TestStageVisits:

    def test_marks(self):
        visits = StageVisits()
        assert not visits.accumulated
        visits.mark_accumulated(3)
        visits.mark_accumulated(2)
        visits.mark_filter("blacklist")
        assert visits.accumulated
        assert visits.accumulated_tokens == 5
        assert visits.filter_was_run("blacklist")
        assert not visits.filter_was_run("whitelist")


class TestUsageAuditor:

    def test_fresh_pipeline_without_sources(self):
        warnings = UsageAuditor().audit(StageVisits(), has_sources=False, filters=[])
        assert _types(warnings) == [NotAccumulatedWarning, NoSourcesWarning]

    def test_empty_result_only_after_accumulation(self):
        visits = StageVisits()
        assert EmptyResultWarning not in _types(UsageAuditor().audit(visits, True, []))
        visits.mark_accumulated(0)
        assert _types(UsageAuditor().audit(visits, True, [])) == [EmptyResultWarning]

    def test_configured_filter_not_run(self):
        visits = StageVisits()
        visits.mark_accumulated(5)
        filters = [
            BlackListFilter(ListFilterSpec(items=["a"])),
            WhiteListFilter(),
        ]
        warnings = UsageAuditor().audit(visits, True, filters)
        assert len(warnings) == 1
        assert isinstance(warnings[0], UnusedFilterWarning)
        assert warnings[0].family == "blacklist"
        assert "run_black_list_filter" in str(warnings[0])

    def test_run_filter_no_warning(self):
        visits = StageVisits()
        visits.mark_accumulated(5)
        visits.mark_filter("blacklist")
        warnings = UsageAuditor().audit(visits, True, [BlackListFilter(ListFilterSpec(items=["a"]))])
        assert warnings == []

    def test_warnings_are_user_warnings(self):
        assert issubclass(PipelineWarning, UserWarning)
        assert NoSourcesWarning("x") == NoSourcesWarning("x")
        assert NoSourcesWarning("x") != EmptyResultWarning("x")


class TestPipelineWarnings:
    """Предупреждения пайплайна пишутся в лог и собираются в warnings."""

    def test_bad_source(self, caplog):
        wf = WordFrequency()
        with caplog.at_level(logging.WARNING):
            result = wf.add_source(object())
        assert result is wf
        assert wf.source_list == []
        assert "Ожидается строка или список строк" in caplog.text
        assert _types(wf.warnings) == [InvalidSourceArgument]

    def test_bad_record_source(self, caplog):
        wf = WordFrequency()
        with caplog.at_level(logging.WARNING):
            wf.add_record_source("junk", "more junk")
        assert wf.source_list == []
        assert "Ожидаются RecordProvider и RecordQuery" in caplog.text

    def test_record_source_with_bad_provider(self):
        wf = WordFrequency().add_record_source(object(), RecordQuery("col1"))
        assert _types(wf.warnings) == [InvalidSourceArgument]

    def test_not_accumulated(self, caplog):
        wf = WordFrequency(source_list=[BASE_TEXT])
        with caplog.at_level(logging.WARNING):
            table = wf.generate()
        assert table == {}
        assert "Источники не накоплены" in caplog.text
        assert _types(wf.warnings) == [NotAccumulatedWarning]

    def test_no_sources(self, caplog):
        wf = WordFrequency()
        with caplog.at_level(logging.WARNING):
            wf.accumulate_sources().generate()
        assert "Источники не заданы" in caplog.text
        assert EmptyResultWarning in _types(wf.warnings)

    def test_empty_result(self, caplog):
        wf = WordFrequency(source_list=[""])
        with caplog.at_level(logging.WARNING):
            wf.accumulate_sources().generate()
        assert "Источники не дали ни одного токена" in caplog.text
        assert _types(wf.warnings) == [EmptyResultWarning]

    def test_blacklist_not_used(self, caplog):
        wf = WordFrequency(source_list=[BASE_TEXT], black_list=["this", "is"])
        with caplog.at_level(logging.WARNING):
            wf.accumulate_sources().generate()
        assert "Чёрный список" in caplog.text
        assert [w.family for w in wf.warnings] == ["blacklist"]

    def test_whitelist_not_used(self, caplog):
        wf = WordFrequency(source_list=[BASE_TEXT], white_list=["this", "is"])
        with caplog.at_level(logging.WARNING):
            wf.accumulate_sources().generate()
        assert "Белый список" in caplog.text

    def test_substitution_not_used(self, caplog):
        wf = WordFrequency(source_list=[BASE_TEXT], substitution_list={"this": "is"})
        with caplog.at_level(logging.WARNING):
            wf.accumulate_sources().generate()
        assert "Замены" in caplog.text
        assert [w.family for w in wf.warnings] == ["substitution"]

    def test_clean_run_has_no_warnings(self, caplog):
        wf = WordFrequency(source_list=[BASE_TEXT], black_list=["this"])
        with caplog.at_level(logging.WARNING):
            wf.accumulate_sources().run_black_list_filter().generate()
        assert wf.warnings == []
        assert caplog.text == ""

    def test_unconfigured_filter_run_is_harmless(self):
        wf = WordFrequency(source_list=[BASE_TEXT])
        wf.accumulate_sources().run_white_list_filter().generate()
        assert wf.warnings == []
        assert wf.visits.filter_was_run("whitelist")
