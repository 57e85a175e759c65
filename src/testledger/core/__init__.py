"""Core domain models for testledger."""

from testledger.core.exceptions import ConfigurationError, StorageError, LedgerError
from testledger.core.models import (
    MethodResult,
    ResultRecord,
    ResultStatus,
    SuiteMetadata,
    SuiteResults,
    status_to_string,
)

__all__ = [
    "ConfigurationError",
    "MethodResult",
    "ResultRecord",
    "ResultStatus",
    "StorageError",
    "SuiteMetadata",
    "SuiteResults",
    "LedgerError",
    "status_to_string",
]
