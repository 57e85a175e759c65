"""pytest plugin that publishes session results when the run finishes.

Enabled with ``--testledger``. Suite metadata comes from the command line,
the ini file or ``TESTLEDGER_*`` environment variables, in that order.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import pytest

from testledger.config import get_settings
from testledger.core.exceptions import ConfigurationError
from testledger.core.metadata import resolve_suite_metadata
from testledger.core.models import MethodResult, ResultStatus, SuiteResults
from testledger.logging import create_logger
from testledger.publisher import PublishSummary, ResultPublisher
from testledger.storage.sql import SqlResultStore

if TYPE_CHECKING:
    from testledger.config import Settings
    from testledger.storage.base import ResultStore

PLUGIN_NAME = "testledger-collector"

# option suffix -> suite parameter name
SUITE_PARAMETERS = {
    "component": "component",
    "version": "version",
    "build_number": "buildNumber",
    "platform": "platform",
}


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("testledger", "publishing test results to a result store")
    group.addoption(
        "--testledger",
        action="store_true",
        dest="testledger_enabled",
        default=False,
        help="Publish test results when the session finishes",
    )
    group.addoption("--testledger-component", dest="testledger_component", help="Component under test")
    group.addoption("--testledger-version", dest="testledger_version", help="Component version")
    group.addoption("--testledger-build-number", dest="testledger_build_number", help="Build number")
    group.addoption("--testledger-platform", dest="testledger_platform", help="Platform identifier")
    group.addoption(
        "--testledger-database-url",
        dest="testledger_database_url",
        help="Database URL (or set TESTLEDGER_DATABASE_URL)",
    )

    for name in SUITE_PARAMETERS:
        parser.addini(f"testledger_{name}", help=f"testledger {name.replace('_', ' ')}")


def pytest_configure(config: pytest.Config) -> None:
    if not config.getoption("testledger_enabled"):
        return

    settings = get_settings()
    database_url = config.getoption("testledger_database_url")
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})

    logger = create_logger("testledger", log_level=settings.log_level, json_format=settings.log_json_format)

    try:
        store = SqlResultStore.from_settings(settings, logger=logger)
    except ConfigurationError as e:
        raise pytest.UsageError(f"testledger: {e}") from e

    config.pluginmanager.register(ResultCollector(config, settings, store, logger), PLUGIN_NAME)


def pytest_unconfigure(config: pytest.Config) -> None:
    collector = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if collector is not None:
        config.pluginmanager.unregister(collector)


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def outcome_status(reports: list[pytest.TestReport]) -> ResultStatus:
    """Combine setup/call/teardown reports into one status; xfail counts as skipped."""
    if any(report.failed for report in reports):
        return ResultStatus.FAILURE
    if any(report.skipped for report in reports):
        return ResultStatus.SKIP
    return ResultStatus.SUCCESS


def describe_item(item: pytest.Item) -> tuple[str, str, tuple[Any, ...]]:
    """Return the class name, method name and parameters of a collected item."""
    module = getattr(item, "module", None)
    if module is None:
        # Non-python items (doctests, custom collectors) are keyed by file
        return item.nodeid.split("::")[0], item.name, ()

    cls = getattr(item, "cls", None)
    class_name = f"{module.__name__}.{cls.__qualname__}" if cls is not None else module.__name__
    method_name = getattr(item, "originalname", None) or item.name

    callspec = getattr(item, "callspec", None)
    parameters = tuple(callspec.params.values()) if callspec is not None else ()
    return class_name, method_name, parameters


class ResultCollector:
    """Collects per-item timings and reports, then publishes them at session end."""

    def __init__(self, config: pytest.Config, settings: Settings, store: ResultStore, logger: Any) -> None:
        self.config = config
        self.settings = settings
        self.logger = logger
        self.publisher = ResultPublisher(store, settings, logger=logger)
        self.summary: PublishSummary | None = None
        self._items: list[pytest.Item] = []
        self._started: dict[str, int] = {}
        self._finished: dict[str, int] = {}
        self._reports: dict[str, list[pytest.TestReport]] = {}

    def suite_parameters(self) -> dict[str, str | None]:
        """Raw suite parameters: command line, then ini, then settings."""
        parameters: dict[str, str | None] = {}
        for name, key in SUITE_PARAMETERS.items():
            value = self.config.getoption(f"testledger_{name}") or self.config.getini(f"testledger_{name}")
            parameters[key] = value or getattr(self.settings, name)
        return parameters

    def pytest_collection_finish(self, session: pytest.Session) -> None:
        self._items = list(session.items)

    def pytest_runtest_logstart(self, nodeid: str) -> None:
        self._started[nodeid] = now_millis()

    def pytest_runtest_logfinish(self, nodeid: str) -> None:
        self._finished[nodeid] = now_millis()

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        self._reports.setdefault(report.nodeid, []).append(report)

    def method_result(self, item: pytest.Item) -> MethodResult | None:
        reports = self._reports.get(item.nodeid)
        if not reports:
            return None
        class_name, method_name, parameters = describe_item(item)
        start = self._started.get(item.nodeid, 0)
        return MethodResult(
            class_name=class_name,
            method_name=method_name,
            status=outcome_status(reports),
            start_millis=start,
            end_millis=self._finished.get(item.nodeid, start),
            parameters=parameters,
        )

    def build_suite_results(self) -> SuiteResults:
        """
        Assemble the finished session into SuiteResults.

        Raises:
            ConfigurationError: If the suite parameters are incomplete or invalid.
        """
        metadata = resolve_suite_metadata(self.suite_parameters(), self.settings)
        suite = SuiteResults(metadata=metadata)
        for item in self._items:
            result = self.method_result(item)
            if result is not None:
                suite.add(result)
        return suite

    @pytest.hookimpl(trylast=True)
    def pytest_sessionfinish(self, session: pytest.Session) -> None:
        try:
            suite = self.build_suite_results()
        except ConfigurationError as e:
            self.logger.error("suite_not_published", error=str(e))
            return
        self.summary = self.publisher.publish_suite(suite)

    def pytest_terminal_summary(self, terminalreporter: Any) -> None:
        if self.summary is None:
            terminalreporter.write_line("testledger: results were not published")
        elif self.summary.skipped_snapshot:
            terminalreporter.write_line("testledger: snapshot version, results were not published")
        else:
            terminalreporter.write_line(
                f"testledger: published {self.summary.published} results, "
                f"{self.summary.failed} failed to store"
            )
