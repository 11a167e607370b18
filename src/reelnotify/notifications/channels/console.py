"""
Console channel — renders a status card in the terminal with Rich.

Used by ``reelnotify preview`` to show exactly what would be posted,
without touching the network or the message store.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from reelnotify.notifications.card import NotificationCard
from reelnotify.notifications.channel import NotificationChannel
from reelnotify.notifications.config import DeliveryMode
from reelnotify.notifications.events import DispatchResult


class ConsoleChannel(NotificationChannel):
    """Rich terminal output channel."""

    name: str = "console"

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    async def deliver(
        self,
        card: NotificationCard,
        job_id: Optional[str] = None,
        mode: DeliveryMode = DeliveryMode.UPDATES,
    ) -> DispatchResult:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(style="bold")
        table.add_column()
        for field in card.fields:
            if field.inline:
                table.add_row(field.name, field.value)

        self._console.print(
            Panel(
                table,
                title=card.headline,
                subtitle=card.footer_text,
                border_style=f"#{card.accent_color:06x}",
            )
        )
        if card.body_text:
            self._console.print(card.body_text, markup=False, highlight=False)
        self._console.print(f"[dim]thumbnail: {card.thumbnail_url}[/dim]")
        return DispatchResult(delivered=True)
