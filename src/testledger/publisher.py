"""Publishing of finished suites to a result store.

ResultPublisher is the callback the pytest plugin and the CLI hand finished
suites to. It applies the snapshot guard, turns every method result into a
ResultRecord and writes it to the injected store. A record that fails to
store is logged and skipped; the rest of the suite is still published.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from testledger.core.exceptions import ConfigurationError, StorageError
from testledger.core.metadata import is_snapshot
from testledger.core.models import ResultRecord
from testledger.logging import bound_suite_context, get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from testledger.config import Settings
    from testledger.core.models import MethodResult, SuiteMetadata, SuiteResults
    from testledger.storage.base import ResultStore


@dataclass
class PublishSummary:
    """Counts of what happened while publishing one or more suites."""

    published: int = 0
    failed: int = 0
    skipped_snapshot: bool = False

    @property
    def total(self) -> int:
        return self.published + self.failed

    def merge(self, other: PublishSummary) -> None:
        self.published += other.published
        self.failed += other.failed
        self.skipped_snapshot = self.skipped_snapshot or other.skipped_snapshot


class ResultPublisher:
    """Writes suite results to a ResultStore, one record per method invocation."""

    def __init__(self, store: ResultStore, settings: Settings, logger: Any = None) -> None:
        self.store = store
        self.settings = settings
        self.logger = logger if logger is not None else get_logger(__name__)

    def should_publish(self, metadata: SuiteMetadata) -> bool:
        """Snapshot builds are only published when explicitly enabled."""
        if self.settings.snapshot_results_enabled:
            return True
        return not is_snapshot(metadata.version, self.settings.snapshot_marker)

    def publish_suite(self, suite: SuiteResults) -> PublishSummary:
        """
        Publish every result of a finished suite.

        Args:
            suite: Suite metadata and its passed, failed and skipped results.

        Returns:
            PublishSummary for the suite.

        Raises:
            ConfigurationError: If the suite has no component or version.
        """
        metadata = suite.metadata
        if not metadata.component.strip() or not metadata.version.strip():
            raise ConfigurationError("Suite metadata needs a component and a version")
        summary = PublishSummary()

        with bound_suite_context(
            component=metadata.component,
            version=metadata.version,
            build_number=metadata.build_number,
            platform=metadata.platform,
        ):
            self.logger.info("publishing_started", total=suite.total)

            if not self.should_publish(metadata):
                self.logger.warning(
                    "snapshot_not_published",
                    reason="Building a snapshot version, results will not be published",
                )
                summary.skipped_snapshot = True
                return summary

            for result_set, results in suite.result_sets():
                if not results:
                    continue
                self.logger.debug("storing_result_set", result_set=result_set, count=len(results))
                self._publish_results(metadata, results, summary)

            self.logger.info(
                "publishing_complete",
                published=summary.published,
                failed=summary.failed,
            )
        return summary

    def _publish_results(
        self,
        metadata: SuiteMetadata,
        results: Iterable[MethodResult],
        summary: PublishSummary,
    ) -> None:
        for result in results:
            record = ResultRecord.from_result(metadata, result)
            self.logger.debug(
                "storing_result",
                test_key=record.test_key,
                duration_millis=record.duration_millis,
                status=record.status,
            )
            try:
                self.store.record(record)
            except StorageError as e:
                summary.failed += 1
                self.logger.error("record_store_failed", test_key=record.test_key, error=str(e))
                continue
            summary.published += 1

    def publish_suites(self, suites: Iterable[SuiteResults]) -> PublishSummary:
        """Publish several suites; an invalid suite does not stop the others."""
        summary = PublishSummary()
        for suite in suites:
            try:
                summary.merge(self.publish_suite(suite))
            except ConfigurationError as e:
                self.logger.error("suite_not_published", error=str(e))
        return summary
