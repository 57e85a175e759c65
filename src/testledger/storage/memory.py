"""In-memory result store used for dry runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from testledger.core.models import ResultRecord


class InMemoryResultStore:
    """Keeps published records in a list, in publishing order."""

    def __init__(self) -> None:
        self.records: list[ResultRecord] = []

    def record(self, result: ResultRecord) -> None:
        self.records.append(result)
