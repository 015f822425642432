"""Rule utilities and constants for Crazy Eights."""

from __future__ import annotations

from typing import Final, Iterable

from .cards import Card, Rank, Suit

__all__ = [
    "WILD_RANK",
    "HAND_SIZE",
    "IllegalAction",
    "IllegalDraw",
    "IllegalPlay",
    "InvalidWildResolution",
    "is_legal",
    "legal_cards",
]

WILD_RANK: Final[Rank] = Rank.EIGHT
HAND_SIZE: Final[int] = 8


class IllegalAction(RuntimeError):
    """Raised when a caller requests an action the rules do not allow."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class IllegalDraw(IllegalAction):
    """Raised when a side attempts to draw illegally."""


class IllegalPlay(IllegalAction):
    """Raised when a side attempts to play a card illegally."""


class InvalidWildResolution(IllegalAction):
    """Raised when a suit is nominated while no wild eight is pending."""


def is_legal(card: Card, top_discard: Card, active_suit: Suit) -> bool:
    """Return ``True`` when ``card`` may be played onto the table.

    Eights are always playable; any other card must follow the active suit or
    match the rank of the top discard.
    """

    if card.rank == WILD_RANK:
        return True
    if card.suit == active_suit:
        return True
    return card.rank == top_discard.rank


def legal_cards(hand: Iterable[Card], top_discard: Card, active_suit: Suit) -> list[Card]:
    """Return the cards of ``hand`` that are legal to play, in hand order."""

    return [card for card in hand if is_legal(card, top_discard, active_suit)]
