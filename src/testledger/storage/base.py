"""Result store interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from testledger.core.models import ResultRecord


@runtime_checkable
class ResultStore(Protocol):
    """Persistence collaborator the publisher writes to.

    Implementations raise StorageError when a record cannot be persisted.
    """

    def record(self, result: ResultRecord) -> None: ...
