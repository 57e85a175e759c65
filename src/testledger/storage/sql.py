"""SQLAlchemy-backed result store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError, SQLAlchemyError

from testledger.core.exceptions import ConfigurationError, StorageError
from testledger.core.models import ResultRecord
from testledger.logging import get_logger
from testledger.retry import retry_with_backoff
from testledger.storage.database import create_engine, get_session_maker, session_scope
from testledger.storage.models import ResultRow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

    from testledger.config import Settings

# Errors worth another attempt: dropped connections, locked or unreachable database
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (OperationalError, DisconnectionError)

# OperationalError also covers faults no retry can fix ("no such table")
TRANSIENT_MESSAGE_MARKERS = (
    "database is locked",
    "connection",
    "timeout",
    "timed out",
    "could not connect",
    "server closed",
)


def is_transient_error(error: Exception) -> bool:
    """Check whether a database error may go away on its own."""
    if isinstance(error, DisconnectionError):
        return True
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    message = str(getattr(error, "orig", None) or error).lower()
    return any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS)


class SqlResultStore:
    """Writes each ResultRecord as one row of the ``test_results`` table.

    Once a record has used up its retries, later records are tried once
    until a write succeeds again, so a dead database fails a suite quickly.
    """

    def __init__(
        self,
        session_maker: sessionmaker[Session],
        max_retries: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        logger: Any = None,
    ) -> None:
        self._session_maker = session_maker
        self.logger = logger if logger is not None else get_logger(__name__)
        self.retries_exhausted = False
        self._insert_with_retry = retry_with_backoff(
            max_retries=max_retries,
            base_delay=base_delay,
            max_delay=max_delay,
            retryable_exceptions=TRANSIENT_ERRORS,
            should_retry=is_transient_error,
            log=self.logger,
        )(self._insert_row)

    @classmethod
    def from_settings(cls, settings: Settings, logger: Any = None) -> SqlResultStore:
        """Create a store connected to ``settings.database_url``."""
        if not settings.database_url:
            raise ConfigurationError("A database URL is required to publish results")
        engine = create_engine(settings.database_url, echo=settings.echo_sql)
        return cls(
            get_session_maker(engine),
            max_retries=settings.retry_max_retries,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            logger=logger,
        )

    def _insert_row(self, result: ResultRecord) -> None:
        with session_scope(self._session_maker) as session:
            session.add(ResultRow.from_record(result))

    def record(self, result: ResultRecord) -> None:
        """
        Persist one record in its own transaction.

        Raises:
            StorageError: If the row could not be written.
        """
        insert = self._insert_row if self.retries_exhausted else self._insert_with_retry
        try:
            insert(result)
        except SQLAlchemyError as e:
            if not self.retries_exhausted and is_transient_error(e):
                self.retries_exhausted = True
                self.logger.warning("retries_disabled", test_key=result.test_key)
            raise StorageError(
                f"Failed to store result for {result.test_key}: {e}",
                test_key=result.test_key,
            ) from e
        self.retries_exhausted = False
        self.logger.debug("record_stored", test_key=result.test_key, status=result.status)

    def insert(
        self,
        component: str,
        version: str,
        build_number: int,
        platform: str,
        test_key: str,
        duration_millis: int,
        status: str,
    ) -> None:
        """Persist one result given as flat column values."""
        self.record(
            ResultRecord(
                component=component,
                version=version,
                build_number=build_number,
                platform=platform,
                test_key=test_key,
                duration_millis=duration_millis,
                status=status,
            )
        )
