"""JUnit XML parser for test reports.

This module lets results from runners other than pytest be published:
- JUnit / TestNG (surefire reports)
- Jest (with jest-junit reporter)
- pytest (with --junitxml)

Test case names of the form ``method[param-id]`` are treated as data-driven
invocations whose first parameter is ``param-id``.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from testledger.core.models import MethodResult, ResultStatus, SuiteResults

if TYPE_CHECKING:
    from testledger.core.models import SuiteMetadata

# "test_login[admin-user]" -> ("test_login", "admin-user")
PARAMETRIZED_NAME_PATTERN = re.compile(r"^(?P<method>[^\[]+)\[(?P<param>.*)\]$")


@dataclass
class JUnitTestCase:
    """Represents a single test case from JUnit XML."""

    name: str
    classname: str
    time: float = 0.0
    status: str = "passed"  # passed, failed, error, skipped
    start_millis: int = 0

    @property
    def duration_millis(self) -> int:
        return round(self.time * 1000)

    def split_name(self) -> tuple[str, tuple[str, ...]]:
        """Split the case name into method name and parameters."""
        match = PARAMETRIZED_NAME_PATTERN.match(self.name)
        if match is None:
            return self.name, ()
        return match.group("method"), (match.group("param"),)

    def to_method_result(self) -> MethodResult:
        method_name, parameters = self.split_name()
        return MethodResult(
            class_name=self.classname,
            method_name=method_name,
            status=_STATUS_BY_NAME[self.status],
            start_millis=self.start_millis,
            end_millis=self.start_millis + self.duration_millis,
            parameters=parameters,
        )


_STATUS_BY_NAME = {
    "passed": ResultStatus.SUCCESS,
    "failed": ResultStatus.FAILURE,
    "error": ResultStatus.FAILURE,
    "skipped": ResultStatus.SKIP,
}


@dataclass
class JUnitReport:
    """Represents a parsed JUnit XML report."""

    test_cases: list[JUnitTestCase] = field(default_factory=list)


def parse_timestamp_millis(value: str | None) -> int:
    """Convert a testsuite ``timestamp`` attribute to epoch millis (0 if absent)."""
    if not value:
        return 0
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp() * 1000)


class JUnitParser:
    """Parser for JUnit XML reports."""

    @staticmethod
    def parse_string(xml_content: str) -> JUnitReport:
        """Parse JUnit XML from string.

        Args:
            xml_content: JUnit XML as string.

        Returns:
            JUnitReport with parsed data.
        """
        root = ET.fromstring(xml_content)  # noqa: S314 - trusted test report data
        return JUnitParser._parse_root(root)

    @staticmethod
    def parse_file(file_path: Path | str) -> JUnitReport:
        """Parse JUnit XML from file.

        Args:
            file_path: Path to JUnit XML file.

        Returns:
            JUnitReport with parsed data.
        """
        tree = ET.parse(Path(file_path))  # noqa: S314 - trusted test report data
        return JUnitParser._parse_root(tree.getroot())

    @staticmethod
    def _parse_root(root: ET.Element) -> JUnitReport:
        """Parse the root element of JUnit XML."""
        report = JUnitReport()

        # Handle both <testsuites> and <testsuite> as root
        if root.tag == "testsuites":
            for testsuite in root.findall("testsuite"):
                JUnitParser._parse_testsuite(testsuite, report)
        elif root.tag == "testsuite":
            JUnitParser._parse_testsuite(root, report)

        return report

    @staticmethod
    def _parse_testsuite(testsuite: ET.Element, report: JUnitReport) -> None:
        """Parse a testsuite element; cases start back to back from the suite timestamp."""
        offset = parse_timestamp_millis(testsuite.get("timestamp"))
        for testcase in testsuite.findall("testcase"):
            tc = JUnitParser._parse_testcase(testcase, offset)
            offset += tc.duration_millis
            report.test_cases.append(tc)

    @staticmethod
    def _parse_testcase(testcase: ET.Element, start_millis: int) -> JUnitTestCase:
        """Parse a testcase element."""
        tc = JUnitTestCase(
            name=testcase.get("name", ""),
            classname=testcase.get("classname", ""),
            time=float(testcase.get("time", 0) or 0),
            start_millis=start_millis,
        )

        for tag in ("failure", "error"):
            if testcase.find(tag) is not None:
                tc.status = "failed" if tag == "failure" else "error"

        if testcase.find("skipped") is not None:
            tc.status = "skipped"

        return tc

    @staticmethod
    def to_suite_results(report: JUnitReport, metadata: SuiteMetadata) -> SuiteResults:
        """Group the report's test cases into passed, failed and skipped results.

        Args:
            report: Parsed JUnit report.
            metadata: Run metadata for the suite.

        Returns:
            SuiteResults ready for publishing.
        """
        suite = SuiteResults(metadata=metadata)
        for tc in report.test_cases:
            suite.add(tc.to_method_result())
        return suite
