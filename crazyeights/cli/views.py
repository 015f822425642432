"""Composable view primitives for the Crazy Eights CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table

from ..cards import Card, Suit
from ..state import GameSnapshot, Phase, Side


@dataclass(slots=True)
class TableSummaryView:
    """Renderable summarising both seats and the centre of the table."""

    snapshot: GameSnapshot
    card_formatter: Callable[[Card], str]
    suit_formatter: Callable[[Suit], str]
    reveal_opponent: bool = False

    def _hand_markup(self, cards: tuple[Card, ...], visible: bool) -> str:
        if not visible:
            return f"{len(cards)} card(s)"
        if not cards:
            return "—"
        playable = set(self.snapshot.playable)
        parts = []
        for card in cards:
            label = self.card_formatter(card)
            if card.id in playable:
                label = f"[reverse]{label}[/reverse]"
            parts.append(label)
        return " ".join(parts)

    def _metadata_panel(self) -> Panel:
        snapshot = self.snapshot
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        grid.add_row(f"[cyan]Draw pile[/cyan]: {snapshot.draw_pile_count} card(s)")
        if snapshot.top_discard is not None:
            top_card = self.card_formatter(snapshot.top_discard)
            grid.add_row(f"[cyan]Discard[/cyan]: {top_card} ({snapshot.discard_count} card(s))")
        else:
            grid.add_row("[cyan]Discard[/cyan]: —")
        if snapshot.active_suit is not None:
            grid.add_row(f"[cyan]Active suit[/cyan]: {self.suit_formatter(snapshot.active_suit)}")
        return Panel(grid, title="Table", box=box.SQUARE, border_style="blue")

    def render(self) -> RenderableType:
        snapshot = self.snapshot
        table = Table(box=box.ROUNDED, expand=True)
        table.add_column("Seat", justify="left", style="bold")
        table.add_column("Hand", justify="left")
        table.add_column("Status", justify="left")

        for side, cards, visible in (
            (Side.OPPONENT, snapshot.opponent_hand, self.reveal_opponent),
            (Side.PLAYER, snapshot.player_hand, True),
        ):
            name = "You" if side is Side.PLAYER else "Opponent"
            if snapshot.phase is Phase.PLAYING and snapshot.turn is side:
                name = f"[bold yellow]{name}[/bold yellow]"
            status = ""
            if snapshot.winner is side:
                status = "[bold green]Winner[/bold green]"
            elif snapshot.phase is Phase.PLAYING and snapshot.turn is side:
                status = "To act"
            table.add_row(name, self._hand_markup(cards, visible), status)

        return Group(table, self._metadata_panel())
