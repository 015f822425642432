"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from rich.console import RenderableType
from rich.panel import Panel

from ..cards import Card, Suit
from ..state import GameSnapshot
from .views import TableSummaryView

_SUIT_COLORS = {
    Suit.HEARTS: "red",
    Suit.DIAMONDS: "red",
    Suit.CLUBS: "white",
    Suit.SPADES: "white",
}


def format_suit(suit: Suit) -> str:
    """Return a Rich-rendered suit symbol followed by its name."""

    color = _SUIT_COLORS.get(suit, "white")
    return f"[{color}]{suit.symbol}[/{color}] {suit.value}"


def format_card(card: Card) -> str:
    """Return a Rich-rendered label for ``card``."""

    color = _SUIT_COLORS.get(card.suit, "white")
    label = f"[{color}]{card.rank.value}{card.suit.symbol}[/{color}]"
    if card.is_wild:
        label = f"[bold]{label}[/bold]"
    return label


def render_state(
    snapshot: GameSnapshot,
    *,
    reveal_opponent: bool = False,
    title: str = "Crazy Eights",
) -> RenderableType:
    """Return a Rich panel describing ``snapshot``."""

    view = TableSummaryView(
        snapshot=snapshot,
        card_formatter=format_card,
        suit_formatter=format_suit,
        reveal_opponent=reveal_opponent,
    )
    return Panel(view.render(), title=title, padding=(0, 1), border_style="cyan")
