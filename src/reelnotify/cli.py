"""
CLI — the host-facing entry point for reelnotify.

Commands:
    reelnotify init       — Interactive setup
    reelnotify notify     — Send (or update) the status card for a job event
    reelnotify preview    — Render the card in the terminal without sending

``notify`` exits 0 when the card was delivered and 1 otherwise, so a job
runner can branch on the result.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.prompt import Prompt

from reelnotify import __version__
from reelnotify.notifications.events import EventKind, FileContext, NotificationEvent

console = Console()

_KINDS = [k.value for k in EventKind]


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """reelnotify — Discord status cards for media transcode jobs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


@main.command()
def init() -> None:
    """Interactive setup — webhook, OMDb key and delivery mode."""
    from reelnotify.core import REELNOTIFY_CONFIG_FILE, ReelConfig, save_config
    from reelnotify.notifications.config import NotifierSettings

    console.print("\n[bold green]reelnotify Setup[/bold green]\n")

    webhook_url = Prompt.ask("  Discord webhook URL", password=True, default="")
    omdb_api_key = Prompt.ask("  OMDb API key (optional)", password=True, default="")
    server_url = Prompt.ask("  Management URL (optional)", default="")
    mode = Prompt.ask("  Notification mode", choices=["updates", "sequential"], default="updates")
    library_name = Prompt.ask("  Library name (optional)", default="")

    config = ReelConfig(
        notifier=NotifierSettings(
            webhook_url=webhook_url,
            omdb_api_key=omdb_api_key,
            server_url=server_url,
            mode=mode,
        ),
        library_name=library_name,
    )
    errors = config.notifier.collect_errors()
    for error in errors:
        console.print(f"  [yellow]![/yellow] {error}")

    save_config(config)
    console.print(f"\n[green]>[/green] Config saved to {REELNOTIFY_CONFIG_FILE}")
    console.print(
        "[green]>[/green] Ready! Try: [bold]reelnotify notify --kind started --job job.json[/bold]\n"
    )


# ---------------------------------------------------------------------------
# Job snapshot loading
# ---------------------------------------------------------------------------


def build_event(data: dict[str, Any], kind: str, library_name: str = "") -> NotificationEvent:
    """
    Turn a host job snapshot into a NotificationEvent.

    The snapshot carries either ``file`` (already in FileContext shape) or
    ``file_obj`` (ffprobe-style host object); for finished jobs
    ``original_file_obj.file_size`` supplies the pre-transcode size.
    """
    if "file" in data:
        file = FileContext(**data["file"])
    else:
        original = (data.get("original_file_obj") or {}).get("file_size")
        file = FileContext.from_probe(
            data.get("file_obj") or {},
            original_size_mb=float(original) if original else None,
        )

    fields: dict[str, Any] = {"kind": kind, "file": file}
    if data.get("job_id"):
        fields["job_id"] = str(data["job_id"])
    if data.get("job_started_at"):
        fields["job_started_at"] = data["job_started_at"]
    if data.get("library_name") or library_name:
        fields["library_name"] = data.get("library_name") or library_name
    return NotificationEvent(**fields)


def _read_event(job_file: str, kind: str, library_name: str) -> NotificationEvent:
    try:
        data = json.loads(Path(job_file).read_text())
        return build_event(data, kind, library_name)
    except (OSError, ValueError, ValidationError) as exc:
        console.print(f"[red]Error: Could not read job snapshot {job_file}: {exc}[/red]")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Notify
# ---------------------------------------------------------------------------


@main.command()
@click.option("--kind", "-k", type=click.Choice(_KINDS), required=True)
@click.option("--job", "job_file", type=click.Path(exists=True), required=True, help="Job snapshot JSON")
@click.option("--webhook", "webhook_url", default=None, help="Override the configured webhook URL")
@click.option("--omdb-key", "omdb_api_key", default=None, help="Override the configured OMDb key")
@click.option("--mode", "-m", type=click.Choice(["updates", "sequential"]), default=None)
@click.option("--config", "config_file", type=click.Path(), default=None, help="Config YAML file")
@click.option("--state-file", type=click.Path(), default=None, help="Message state JSON file")
def notify(kind, job_file, webhook_url, omdb_api_key, mode, config_file, state_file):
    """Send or update the status card for a job event."""
    from reelnotify.core import load_config
    from reelnotify.notifications.joblog import JobLog
    from reelnotify.notifications.notifier import Notifier
    from reelnotify.notifications.state import FileMessageStore

    config = load_config(Path(config_file) if config_file else None)
    overrides: dict[str, Any] = {"kind": kind}
    if webhook_url is not None:
        overrides["webhook_url"] = webhook_url
    if omdb_api_key is not None:
        overrides["omdb_api_key"] = omdb_api_key
    if mode is not None:
        overrides["mode"] = mode
    settings = config.notifier.model_copy(update=overrides)

    event = _read_event(job_file, kind, config.library_name)
    store = FileMessageStore(Path(state_file or config.state_file))
    job_log = JobLog(lambda line: console.print(line, markup=False, highlight=False))

    result = asyncio.run(Notifier(settings, store=store, job_log=job_log).notify(event))
    if result.remote_message_id:
        console.print(f"[dim]message id: {result.remote_message_id}[/dim]")
    sys.exit(0 if result.delivered else 1)


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------


@main.command()
@click.option("--kind", "-k", type=click.Choice(_KINDS), required=True)
@click.option("--job", "job_file", type=click.Path(exists=True), required=True, help="Job snapshot JSON")
@click.option("--poster", "poster_url", default=None, help="Poster URL to show instead of the placeholder")
@click.option("--config", "config_file", type=click.Path(), default=None, help="Config YAML file")
def preview(kind, job_file, poster_url: Optional[str], config_file):
    """Render the status card locally without sending it."""
    from reelnotify.core import load_config
    from reelnotify.notifications.card import build_card
    from reelnotify.notifications.channels.console import ConsoleChannel
    from reelnotify.notifications.media import parse_media_info

    config = load_config(Path(config_file) if config_file else None)
    event = _read_event(job_file, kind, config.library_name)
    media = parse_media_info(event.file.path)
    card = build_card(event, media, poster_url, server_url=config.notifier.server_url)
    asyncio.run(ConsoleChannel(console).deliver(card, event.job_id))
