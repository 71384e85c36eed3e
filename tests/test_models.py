"""Tests for ClassReport aggregation and its serialized detail."""

import math

from surefire_reports.models import ClassReport
from surefire_reports.models import TestCaseResult as CaseResult
from surefire_reports.models import TestOutcome as Outcome


def case(outcome=Outcome.SUCCESS, duration=10.0, name="test", classname="org.Foo", **kwargs):
    return CaseResult(class_name=classname, name=name, outcome=outcome,
                      duration_millis=duration, **kwargs)


class TestClassReport:

    def test_empty_report(self):
        report = ClassReport()
        assert report.tests == 0
        assert report.errors == report.failures == report.skipped == 0
        assert math.isnan(report.duration_millis)
        assert report.results == []

    def test_add_result_counts_each_outcome(self):
        report = ClassReport()
        for outcome in (Outcome.SUCCESS, Outcome.SKIPPED, Outcome.FAILURE,
                        Outcome.ERROR, Outcome.FAILURE):
            report.add_result(case(outcome))

        assert report.tests == 5
        assert report.skipped == 1
        assert report.failures == 2
        assert report.errors == 1
        assert report.errors + report.failures + report.skipped <= report.tests
        assert report.duration_millis == 50.0

    def test_results_keep_insertion_order(self):
        report = ClassReport()
        for name in ("b", "a", "c"):
            report.add_result(case(name=name))
        assert [r.name for r in report.results] == ["b", "a", "c"]

    def test_zero_duration_is_known(self):
        report = ClassReport().add_result(case(duration=0.0))
        assert report.duration_millis == 0.0

    def test_unknown_durations_stay_nan(self):
        report = ClassReport()
        report.add_result(case(duration=math.nan))
        report.add_result(case(duration=math.nan))
        assert report.tests == 2
        assert math.isnan(report.duration_millis)

    def test_unknown_duration_does_not_poison_sum(self):
        report = ClassReport()
        report.add_result(case(duration=math.nan))
        report.add_result(case(duration=12.5))
        assert report.duration_millis == 12.5

    def test_executed_excludes_skipped(self):
        report = ClassReport(tests=10, skipped=3)
        assert report.executed == 7


class TestClassReportAdd:

    def test_add_sums_counts_and_appends_results(self):
        a = ClassReport().add_result(case(Outcome.FAILURE, 5.0, name="a1"))
        b = ClassReport().add_result(case(Outcome.SKIPPED, 7.0, name="b1"))
        b.add_result(case(Outcome.ERROR, 1.0, name="b2"))

        b.add(a)

        assert b.tests == 3
        assert b.failures == 1
        assert b.skipped == 1
        assert b.errors == 1
        assert b.duration_millis == 13.0
        assert [r.name for r in b.results] == ["b1", "b2", "a1"]

    def test_nan_duration_counts_as_zero_when_other_side_known(self):
        a = ClassReport().add_result(case(duration=math.nan))
        b = ClassReport().add_result(case(duration=4.0))
        assert b.add(a).duration_millis == 4.0
        c = ClassReport().add_result(case(duration=math.nan))
        assert c.add(ClassReport().add_result(case(duration=3.0))).duration_millis == 3.0

    def test_both_nan_stays_nan(self):
        a = ClassReport().add_result(case(duration=math.nan))
        b = ClassReport().add_result(case(duration=math.nan))
        assert math.isnan(b.add(a).duration_millis)


class TestClassReportXml:

    def test_to_xml_lists_counts_and_cases(self):
        report = ClassReport()
        report.add_result(case(name="testOk", duration=12.0))
        report.add_result(case(Outcome.FAILURE, 3.5, name="testBad",
                               message="expected 1", stack_trace="AssertionError\n\tat Foo"))

        xml = report.to_xml()

        assert xml.startswith('<tests-details tests="2" errors="0" failures="1" skipped="0" time="15.5"')
        assert '<testcase name="testOk" classname="org.Foo" status="success" time="12" />' in xml
        assert '<failure message="expected 1">AssertionError' in xml

    def test_to_xml_omits_unknown_time(self):
        report = ClassReport().add_result(case(duration=math.nan))
        xml = report.to_xml()
        assert "time=" not in xml

    def test_to_xml_keeps_infinite_time_readable(self):
        report = ClassReport().add_result(case(duration=math.inf))
        restored = ClassReport.from_xml(report.to_xml())
        assert math.isinf(restored.results[0].duration_millis)

    def test_xml_round_trip(self):
        report = ClassReport()
        report.add_result(case(name="one", duration=1.0))
        report.add_result(case(Outcome.ERROR, math.nan, name="two",
                               message="boom", stack_trace="java.lang.IllegalStateException"))
        report.add_result(case(Outcome.SKIPPED, 0.0, name="three"))

        restored = ClassReport.from_xml(report.to_xml())

        assert (restored.tests, restored.errors, restored.failures, restored.skipped) == (3, 1, 0, 1)
        assert restored.duration_millis == 1.0
        assert restored.results[:1] == report.results[:1]
        assert restored.results[2] == report.results[2]
        two = restored.results[1]
        assert two.outcome == Outcome.ERROR
        assert two.message == "boom"
        assert two.stack_trace == "java.lang.IllegalStateException"
        assert math.isnan(two.duration_millis)
