"""Shared exceptions for the testledger package."""


class LedgerError(Exception):
    """Base class for all testledger errors."""


class ConfigurationError(LedgerError):
    """Raised when suite metadata or settings cannot be used for publishing."""


class StorageError(LedgerError):
    """Raised by a result store when a record cannot be persisted.

    Wraps connectivity and data errors from the underlying database driver
    so callers only need to handle one exception type per record.
    """

    def __init__(self, message: str, test_key: str | None = None) -> None:
        super().__init__(message)
        self.test_key = test_key
