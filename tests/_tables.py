"""Shared helpers for building hand-crafted table states in tests."""

from __future__ import annotations

from typing import Sequence

from crazyeights.cards import Card, Rank, Suit, build_deck
from crazyeights.state import GameState, Phase, Side

_SUITS = {"h": Suit.HEARTS, "d": Suit.DIAMONDS, "c": Suit.CLUBS, "s": Suit.SPADES}


def card(label: str) -> Card:
    """Parse a short label such as ``"8h"`` or ``"10s"``."""

    return Card(rank=Rank(label[:-1].upper()), suit=_SUITS[label[-1].lower()])


def cards(labels: str) -> list[Card]:
    return [card(label) for label in labels.split()]


def table_state(
    player: str,
    opponent: str,
    top: str,
    *,
    deck: Sequence[str] | None = None,
    active_suit: Suit | None = None,
    turn: Side = Side.PLAYER,
) -> GameState:
    """Return a playing state holding exactly 52 cards.

    Cards not named anywhere go to the draw pile, or underneath the top
    discard when ``deck`` is given explicitly.
    """

    player_hand = cards(player) if player else []
    opponent_hand = cards(opponent) if opponent else []
    top_card = card(top)
    draw_pile = [card(label) for label in deck] if deck is not None else None
    used = set(player_hand) | set(opponent_hand) | {top_card} | set(draw_pile or [])
    rest = [c for c in build_deck() if c not in used]
    if draw_pile is None:
        draw_pile = rest
        discard = [top_card]
    else:
        discard = rest + [top_card]
    return GameState(
        deck=draw_pile,
        player_hand=player_hand,
        opponent_hand=opponent_hand,
        discard_pile=discard,
        active_suit=active_suit or top_card.suit,
        turn=turn,
        phase=Phase.PLAYING,
    )
