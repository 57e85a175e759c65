"""Result model shared by the pytest plugin, the JUnit parser and the stores.

A finished suite is represented as a SuiteResults: run metadata plus the
passed, failed and skipped method invocations. Each MethodResult knows how to
compose the key it is stored under, and ResultRecord is the flat row that a
ResultStore persists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ResultStatus(IntEnum):
    """Status codes reported for a single method invocation."""

    SUCCESS = 1
    FAILURE = 2
    SKIP = 3
    SUCCESS_PERCENTAGE_FAILURE = 4
    STARTED = 16

    @property
    def label(self) -> str:
        """Status string as written to the store."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    ResultStatus.SUCCESS: "PASS",
    ResultStatus.FAILURE: "FAIL",
    ResultStatus.SKIP: "SKIP",
    ResultStatus.SUCCESS_PERCENTAGE_FAILURE: "FAIL",
    ResultStatus.STARTED: "STARTED",
}

UNKNOWN_STATUS = "UNKNOWN"


def status_to_string(code: int) -> str:
    """Convert a raw status code to the string stored for it."""
    try:
        return ResultStatus(code).label
    except ValueError:
        return UNKNOWN_STATUS


@dataclass(frozen=True)
class SuiteMetadata:
    """Run metadata attached to every record of a suite."""

    component: str
    version: str
    build_number: int
    platform: str


@dataclass
class MethodResult:
    """One invocation of a test method.

    Data-driven tests produce one MethodResult per parameter set; the first
    parameter value distinguishes them in the stored key.
    """

    class_name: str
    method_name: str
    status: ResultStatus
    start_millis: int = 0
    end_millis: int = 0
    parameters: tuple[Any, ...] = ()

    @property
    def is_data_driven(self) -> bool:
        return len(self.parameters) > 0

    @property
    def test_key(self) -> str:
        """Key in the form ``<class>#<method>`` or ``<class>#<method>@<first param>``."""
        key = f"{self.class_name}#{self.method_name}"
        if self.is_data_driven:
            key = f"{key}@{self.parameters[0]}"
        return key

    @property
    def duration_millis(self) -> int:
        return self.end_millis - self.start_millis


@dataclass
class SuiteResults:
    """Outcome of a finished suite, split by status."""

    metadata: SuiteMetadata
    passed: list[MethodResult] = field(default_factory=list)
    failed: list[MethodResult] = field(default_factory=list)
    skipped: list[MethodResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.passed) + len(self.failed) + len(self.skipped)

    def add(self, result: MethodResult) -> None:
        """Append a result to the set matching its status."""
        if result.status == ResultStatus.SUCCESS:
            self.passed.append(result)
        elif result.status == ResultStatus.SKIP:
            self.skipped.append(result)
        else:
            self.failed.append(result)

    def result_sets(self) -> list[tuple[str, list[MethodResult]]]:
        """Result sets in publishing order: passed, failed, skipped."""
        return [
            ("passed", self.passed),
            ("failed", self.failed),
            ("skipped", self.skipped),
        ]


@dataclass(frozen=True)
class ResultRecord:
    """A single row handed to a ResultStore."""

    component: str
    version: str
    build_number: int
    platform: str
    test_key: str
    duration_millis: int
    status: str

    @classmethod
    def from_result(cls, metadata: SuiteMetadata, result: MethodResult) -> ResultRecord:
        """Build the stored row for a method result of a suite."""
        return cls(
            component=metadata.component,
            version=metadata.version,
            build_number=metadata.build_number,
            platform=metadata.platform,
            test_key=result.test_key,
            duration_millis=result.duration_millis,
            status=result.status.label,
        )
