"""Database models for testledger."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

if TYPE_CHECKING:
    from testledger.core.models import ResultRecord


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class ResultRow(Base):
    """One published test method invocation."""

    __tablename__ = "test_results"
    __table_args__ = (
        Index("ix_test_results_component_version_build", "component", "version", "build_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    component: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[str] = mapped_column(String(100), nullable=False)
    build_number: Mapped[int] = mapped_column(Integer, nullable=False)
    platform: Mapped[str] = mapped_column(String(100), nullable=False)
    test_key: Mapped[str] = mapped_column(String(1000), nullable=False)
    duration_millis: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    @classmethod
    def from_record(cls, record: ResultRecord) -> ResultRow:
        return cls(
            component=record.component,
            version=record.version,
            build_number=record.build_number,
            platform=record.platform,
            test_key=record.test_key,
            duration_millis=record.duration_millis,
            status=record.status,
        )
