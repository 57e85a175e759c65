"""CLI package for testledger."""

from testledger.cli.app import app


def main() -> None:
    """Main entry point for the CLI."""
    app()


__all__ = ["app", "main"]
