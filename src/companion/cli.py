"""CLI entrypoint — companion report, companion status, companion usage."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from companion.classifier import handle_event
from companion.config import CompanionConfig, load_config, save_config_value
from companion.formatting import describe_status, format_usage
from companion.logs import configure_logging
from companion.models import HookEvent
from companion.parser import AGGREGATION_MODES, aggregate
from companion.store import read_status, write_status

logger = logging.getLogger(__name__)


def _load() -> CompanionConfig:
    try:
        config = load_config()
    except ValueError as exc:
        click.echo(f"Invalid config: {exc}", err=True)
        raise SystemExit(1)
    configure_logging(config)
    return config


@click.group()
def cli():
    """companion — live status of Claude Code for the desktop pet."""
    pass


@cli.command()
def report():
    """Hook entry point: read one hook event from stdin and update the status file."""
    config = _load()

    # Undecodable bytes become U+FFFD and then fail JSON parsing below
    raw = click.get_binary_stream("stdin").read().decode("utf-8", errors="replace")
    if not raw.strip():
        return

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        click.echo(f"Failed to parse event: {exc}", err=True)
        raise SystemExit(1)
    if not isinstance(data, dict):
        click.echo("Failed to parse event: expected a JSON object", err=True)
        raise SystemExit(1)

    event = HookEvent.from_dict(data)
    record = handle_event(event, mode=config.aggregation_mode)
    if record is None:
        return

    try:
        write_status(record, config.status_file)
    except OSError as exc:
        logger.error("Could not write status to %s: %s", config.status_file, exc)
        click.echo(f"Could not write status: {exc}", err=True)
        raise SystemExit(1)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the raw status JSON.")
def status(as_json: bool):
    """Print the current status."""
    config = _load()
    record = read_status(config.status_file)

    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2))
    else:
        click.echo(describe_status(record))


@cli.command()
@click.argument("transcript", type=click.Path(path_type=Path))
@click.option(
    "--mode",
    type=click.Choice(AGGREGATION_MODES),
    default=None,
    help="Aggregation mode (default: from config).",
)
def usage(transcript: Path, mode: str | None):
    """Summarize token usage and latest thinking in a transcript."""
    config = _load()
    summary = aggregate(transcript, mode=mode or config.aggregation_mode)

    click.echo(f"Usage: {format_usage(summary.usage)}")
    if summary.usage is not None:
        click.echo(f"  context: {summary.usage.context}")
        click.echo(f"  output: {summary.usage.output}")
    click.echo(f"Thinking: {summary.thinking or '-'}")


@cli.group(name="config")
def config_group():
    """Show or change settings in the config file."""
    pass


@config_group.command("show")
def config_show():
    """Print the effective settings."""
    config = _load()
    click.echo(f"status_file: {config.status_file}")
    click.echo(f"aggregation_mode: {config.aggregation_mode}")
    click.echo(f"log_file: {config.log_file or '-'}")
    click.echo(f"log_level: {config.log_level}")


@config_group.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set KEY to VALUE in the config file."""
    try:
        save_config_value(key, value)
    except ValueError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1)
    click.echo(f"Set {key} = {value}")
