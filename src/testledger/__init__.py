"""testledger - publish test results of finished suites to a result database."""

__version__ = "0.1.0"

from testledger.core.exceptions import ConfigurationError, LedgerError, StorageError
from testledger.core.models import (
    MethodResult,
    ResultRecord,
    ResultStatus,
    SuiteMetadata,
    SuiteResults,
)
from testledger.publisher import PublishSummary, ResultPublisher

__all__ = [
    "ConfigurationError",
    "LedgerError",
    "MethodResult",
    "PublishSummary",
    "ResultPublisher",
    "ResultRecord",
    "ResultStatus",
    "StorageError",
    "SuiteMetadata",
    "SuiteResults",
]
