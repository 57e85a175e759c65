"""Result stores for testledger."""

from testledger.storage.base import ResultStore
from testledger.storage.memory import InMemoryResultStore
from testledger.storage.sql import SqlResultStore

__all__ = ["InMemoryResultStore", "ResultStore", "SqlResultStore"]
