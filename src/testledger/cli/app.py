"""Main Typer CLI application for testledger."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Annotated

import typer

from testledger.config import get_settings
from testledger.core.exceptions import ConfigurationError
from testledger.core.metadata import resolve_suite_metadata
from testledger.logging import configure_logging
from testledger.parsers.junit import JUnitParser
from testledger.publisher import ResultPublisher
from testledger.storage.database import create_engine, init_schema
from testledger.storage.memory import InMemoryResultStore
from testledger.storage.sql import SqlResultStore

app = typer.Typer(
    name="testledger",
    help="Publish test results to a result database",
    no_args_is_help=True,
)


@app.command("publish-junit")
def publish_junit(
    report: Annotated[
        Path,
        typer.Argument(
            help="Path to a JUnit XML report",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    component: Annotated[
        str,
        typer.Option("-c", "--component", help="Component under test"),
    ],
    version: Annotated[
        str,
        typer.Option("-v", "--version", help="Component version"),
    ],
    build_number: Annotated[
        str | None,
        typer.Option("-b", "--build-number", help="Build number"),
    ] = None,
    platform: Annotated[
        str | None,
        typer.Option("-p", "--platform", help="Platform identifier"),
    ] = None,
    database_url: Annotated[
        str | None,
        typer.Option(
            "--database-url",
            help="Database URL (or set TESTLEDGER_DATABASE_URL)",
            envvar="TESTLEDGER_DATABASE_URL",
        ),
    ] = None,
    allow_snapshots: Annotated[
        bool,
        typer.Option("--allow-snapshots", help="Publish snapshot versions too"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print records instead of storing them"),
    ] = False,
) -> None:
    """Publish the results of a JUnit XML report."""
    settings = get_settings()
    updates: dict[str, object] = {}
    if database_url:
        updates["database_url"] = database_url
    if allow_snapshots:
        updates["snapshot_results_enabled"] = True
    if updates:
        settings = settings.model_copy(update=updates)

    configure_logging(log_level=settings.log_level, json_format=settings.log_json_format)

    try:
        metadata = resolve_suite_metadata(
            {
                "component": component,
                "version": version,
                "buildNumber": build_number,
                "platform": platform,
            },
            settings,
        )
        store = InMemoryResultStore() if dry_run else SqlResultStore.from_settings(settings)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    try:
        junit_report = JUnitParser.parse_file(report)
    except (ET.ParseError, ValueError) as e:
        typer.echo(f"Error parsing JUnit report: {e}", err=True)
        raise typer.Exit(1) from e

    suite = JUnitParser.to_suite_results(junit_report, metadata)
    summary = ResultPublisher(store, settings).publish_suite(suite)

    if dry_run:
        for record in store.records:
            typer.echo(f"{record.test_key}\t{record.status}\t{record.duration_millis}ms")

    if summary.skipped_snapshot:
        typer.echo("Snapshot version, results were not published")
        return

    typer.echo(f"Published {summary.published} results ({summary.failed} failed)")
    if summary.failed:
        raise typer.Exit(1)


@app.command("init-db")
def init_db(
    database_url: Annotated[
        str | None,
        typer.Option(
            "--database-url",
            help="Database URL (or set TESTLEDGER_DATABASE_URL)",
            envvar="TESTLEDGER_DATABASE_URL",
        ),
    ] = None,
) -> None:
    """Create the results table if it does not exist."""
    url = database_url or get_settings().database_url
    if not url:
        typer.echo("Error: a database URL is required", err=True)
        raise typer.Exit(1)

    engine = create_engine(url)
    try:
        init_schema(engine)
    finally:
        engine.dispose()
    typer.echo("Database schema is ready")
