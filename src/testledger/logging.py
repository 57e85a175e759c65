"""Structured logging configuration for testledger."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TextIO

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator


def build_processors(json_format: bool = True) -> list:
    """Processor chain shared by the global configuration and standalone loggers."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def _level(log_level: str) -> int:
    return getattr(logging, log_level.upper(), logging.INFO)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging with structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output JSON format; otherwise, console format.
        stream: Output stream (defaults to the current sys.stdout).
    """
    structlog.configure(
        processors=build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream) if stream is not None else structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def create_logger(
    name: str,
    log_level: str = "INFO",
    json_format: bool = True,
    stream: TextIO | None = None,
) -> Any:
    """
    Create a logger that does not touch the global structlog configuration.

    Used inside host processes (the pytest plugin) whose own code may rely
    on its own structlog setup.
    """
    return structlog.wrap_logger(
        structlog.PrintLogger(stream),
        processors=build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(_level(log_level)),
        context_class=dict,
    ).bind(logger=name)


class LazyLogger:
    """Logger that resolves the structlog configuration on every call."""

    def __init__(self, name: str) -> None:
        self.name = name

    def bind(self, **values: Any) -> Any:
        return structlog.get_logger(self.name).bind(logger=self.name, **values)

    def __getattr__(self, method: str) -> Any:
        return getattr(self.bind(), method)


def get_logger(name: str) -> LazyLogger:
    """
    Get a logger instance bound to ``name``.

    Reconfiguring (or capturing logs in tests) applies to module-level
    loggers created before the configuration.

    Args:
        name: Logger name (typically module name).

    Returns:
        LazyLogger for ``name``.
    """
    return LazyLogger(name)


@contextmanager
def bound_suite_context(**values: Any) -> Iterator[None]:
    """Bind suite metadata to every log event emitted inside the block."""
    with structlog.contextvars.bound_contextvars(**values):
        yield
