"""
Main entry point for the conflux command-line interface.

This module provides commands to print the merged configuration, watch it
for changes, and create or validate retriever option files.
"""

import asyncio
import json
import logging
import sys
from typing import Optional

import typer

from .application.builder import build_retriever
from .core.domain.snapshot import ChangeEvent
from .core.exceptions import ConfluxError
from .infrastructure.config.loader import ConfigLoader
from .infrastructure.config.models import RetrieverOptions, StoreOptions
from .infrastructure.logging.setup import setup_logging

cli = typer.Typer(
    name="conflux",
    help="Aggregate configuration from multiple stores and watch it for changes"
)

logger = logging.getLogger(__name__)


def _load_options(config_file: Optional[str], log_level: Optional[str]) -> RetrieverOptions:
    options = ConfigLoader().load_config(config_file)
    if log_level:
        options.logging.level = log_level.upper()
    setup_logging(options.logging)
    return options


@cli.command()
def show(
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Retriever options file"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level"
    )
) -> None:
    """Scan every store once and print the merged configuration."""
    try:
        options = _load_options(config_file, log_level)
        document = asyncio.run(fetch_once(options))
    except (ConfluxError, ValueError, FileNotFoundError) as e:
        typer.echo(f"Unable to retrieve configuration: {e}", err=True)
        sys.exit(1)

    typer.echo(json.dumps(document, indent=2))


@cli.command()
def watch(
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Retriever options file"
    ),
    scan_period: Optional[float] = typer.Option(
        None, "--scan-period", "-p", help="Seconds between scans"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level"
    )
) -> None:
    """Print the configuration, then every change until interrupted."""
    try:
        options = _load_options(config_file, log_level)
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Invalid options: {e}", err=True)
        sys.exit(1)

    if scan_period is not None:
        options.scan_period = scan_period

    try:
        asyncio.run(run_watch(options))
    except KeyboardInterrupt:
        logger.info("Watch interrupted by user")
    except ConfluxError as e:
        typer.echo(f"Unable to retrieve configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
def init_config(
    output: str = typer.Option(
        "conflux.yaml", "--output", "-o", help="Output options file"
    ),
    format: str = typer.Option(
        "yaml", "--format", "-f", help="Options format (yaml/json)"
    )
) -> None:
    """Generate a sample retriever options file."""
    options = RetrieverOptions(stores=[
        StoreOptions(type="file", format="yaml", config={'path': "config.yaml"}, name="file"),
        StoreOptions(type="env", config={'keys': ["APP_ENV"]}, name="env"),
    ])

    try:
        ConfigLoader().save_config(options, output, format)
        typer.echo(f"Default options saved to {output}")
    except ValueError as e:
        typer.echo(f"Error saving options: {e}", err=True)
        sys.exit(1)


@cli.command()
def validate_config(
    config_file: str = typer.Argument(..., help="Options file to validate")
) -> None:
    """Validate a retriever options file."""
    try:
        options = ConfigLoader().load_config(config_file)
        retriever = build_retriever(options)
        asyncio.run(retriever.close())
    except (ConfluxError, ValueError, FileNotFoundError) as e:
        typer.echo(f"Options validation failed: {e}", err=True)
        sys.exit(1)

    typer.echo(f"Options file {config_file} is valid")
    typer.echo(f"Stores: {len(options.stores)}")
    typer.echo(f"Scan period: {options.scan_period}s")


async def fetch_once(options: RetrieverOptions) -> dict:
    """
    Build a retriever, run a single scan and close it.

    Args:
        options: Retriever options

    Returns:
        Merged configuration
    """
    async with build_retriever(options) as retriever:
        return await retriever.get_config()


async def run_watch(options: RetrieverOptions, stop_event: Optional[asyncio.Event] = None) -> None:
    """
    Run a retriever and echo every configuration change.

    Args:
        options: Retriever options
        stop_event: Event ending the watch (runs until cancelled when None)
    """
    stop_event = stop_event or asyncio.Event()

    def on_change(change: ChangeEvent) -> None:
        typer.echo(json.dumps({'version': change.version, 'configuration': change.new}, indent=2))

    async with build_retriever(options) as retriever:
        initial = await retriever.get_config()
        typer.echo(json.dumps({'version': retriever.snapshot.version, 'configuration': initial}, indent=2))

        retriever.listen(on_change)
        retriever.set_scan_error_handler(lambda error: logger.warning(f"Scan failed: {error}"))
        await retriever.start()

        await stop_event.wait()


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
