"""Tests for JUnit XML parser.

These tests verify that JUnit reports from other runners become
publishable suite results.
"""

from __future__ import annotations

import pytest

from testledger.core.models import ResultStatus
from testledger.parsers.junit import JUnitParser, JUnitTestCase, parse_timestamp_millis
from tests.factories import SAMPLE_JUNIT_XML, make_metadata

SUITE_START_MILLIS = 1_792_317_600_000  # 2026-10-18T10:00:00Z


class TestJUnitParser:
    """Tests for JUnitParser class."""

    def test_parse_cases_and_statuses(self) -> None:
        report = JUnitParser.parse_string(SAMPLE_JUNIT_XML)

        assert [tc.status for tc in report.test_cases] == ["passed", "passed", "failed", "skipped"]
        assert [tc.name for tc in report.test_cases] == ["test_pay", "test_refund[visa]", "test_cancel", "test_wallet"]

    def test_cases_start_back_to_back_from_suite_timestamp(self) -> None:
        report = JUnitParser.parse_string(SAMPLE_JUNIT_XML)

        starts = [tc.start_millis for tc in report.test_cases]
        assert starts == [
            SUITE_START_MILLIS,
            SUITE_START_MILLIS + 250,
            SUITE_START_MILLIS + 750,
            SUITE_START_MILLIS + 1750,
        ]

    def test_parse_report_with_errors(self) -> None:
        xml = """<testsuite name="APITests" tests="1" errors="1">
            <testcase classname="com.example.APITests" name="testConnection" time="0.5">
                <error type="ConnectionError">ConnectionError: Connection refused
    at APITests.testConnection(APITests.java:15)</error>
            </testcase>
        </testsuite>"""

        report = JUnitParser.parse_string(xml)

        case = report.test_cases[0]
        assert case.status == "error"
        assert case.start_millis == 0
        assert case.to_method_result().status == ResultStatus.FAILURE

    def test_parse_multiple_test_suites(self) -> None:
        xml = """<testsuites>
            <testsuite name="Suite1"><testcase classname="Suite1" name="test1" time="1.0"/></testsuite>
            <testsuite name="Suite2"><testcase classname="Suite2" name="test2" time="2.0"/></testsuite>
        </testsuites>"""

        report = JUnitParser.parse_string(xml)

        assert [tc.classname for tc in report.test_cases] == ["Suite1", "Suite2"]
        # each suite restarts at its own timestamp (absent -> 0)
        assert [tc.start_millis for tc in report.test_cases] == [0, 0]

    def test_parse_file(self, tmp_path) -> None:
        path = tmp_path / "report.xml"
        path.write_text(SAMPLE_JUNIT_XML)

        report = JUnitParser.parse_file(path)

        assert len(report.test_cases) == 4

    def test_missing_time_is_zero(self) -> None:
        report = JUnitParser.parse_string('<testsuite><testcase classname="A" name="b"/></testsuite>')

        assert report.test_cases[0].duration_millis == 0

    def test_invalid_time_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            JUnitParser.parse_string('<testsuite><testcase classname="A" name="b" time="slow"/></testsuite>')


class TestParametrizedNames:
    """Tests for splitting data-driven test names."""

    def test_plain_name(self) -> None:
        case = JUnitTestCase(name="test_pay", classname="A")

        assert case.split_name() == ("test_pay", ())

    def test_parametrized_name(self) -> None:
        case = JUnitTestCase(name="test_refund[visa-10]", classname="A")

        assert case.split_name() == ("test_refund", ("visa-10",))

    def test_nested_brackets_in_parameter(self) -> None:
        case = JUnitTestCase(name="test_parse[[1, 2]]", classname="A")

        assert case.split_name() == ("test_parse", ("[1, 2]",))


class TestToSuiteResults:
    """Tests for conversion to SuiteResults."""

    def test_groups_by_status_with_keys_and_durations(self) -> None:
        report = JUnitParser.parse_string(SAMPLE_JUNIT_XML)

        suite = JUnitParser.to_suite_results(report, make_metadata())

        assert [r.test_key for r in suite.passed] == [
            "tests.test_checkout.TestCheckout#test_pay",
            "tests.test_checkout.TestCheckout#test_refund@visa",
        ]
        assert [r.duration_millis for r in suite.passed] == [250, 500]
        assert [r.method_name for r in suite.failed] == ["test_cancel"]
        assert [r.method_name for r in suite.skipped] == ["test_wallet"]
        assert suite.metadata == make_metadata()


class TestParseTimestamp:
    """Tests for testsuite timestamp conversion."""

    def test_timezone_aware(self) -> None:
        assert parse_timestamp_millis("2026-10-18T10:00:00+00:00") == SUITE_START_MILLIS

    def test_naive_is_treated_as_utc(self) -> None:
        assert parse_timestamp_millis("2026-10-18T10:00:00") == SUITE_START_MILLIS

    def test_absent_or_invalid(self) -> None:
        assert parse_timestamp_millis(None) == 0
        assert parse_timestamp_millis("yesterday") == 0
