"""Heuristic decision policy for the computer opponent."""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Sequence, Union

from .cards import Card, Suit
from .rules import legal_cards

__all__ = ["PlayMove", "DrawMove", "OpponentMove", "EightsPolicy", "FALLBACK_SUIT"]

FALLBACK_SUIT = Suit.HEARTS


@dataclass(frozen=True, slots=True)
class PlayMove:
    """Play ``card``; ``suit`` is the nomination when the card is an eight."""

    card: Card
    suit: Suit | None = None


@dataclass(frozen=True, slots=True)
class DrawMove:
    """Draw from the draw pile because nothing in hand is legal."""


OpponentMove = Union[PlayMove, DrawMove]


@dataclass(slots=True)
class EightsPolicy:
    """Single-heuristic opponent: hold eights back, follow suit or rank.

    The policy keeps no state between calls; the random source is only used
    to break ties between equally good non-eight cards.
    """

    def choose_move(
        self,
        hand: Sequence[Card],
        top_discard: Card,
        active_suit: Suit,
        rng: random.Random,
    ) -> OpponentMove:
        """Return the move to make from ``hand`` against the current table."""

        legal = legal_cards(hand, top_discard, active_suit)
        if not legal:
            return DrawMove()

        non_wild = [card for card in legal if not card.is_wild]
        if non_wild:
            return PlayMove(card=rng.choice(non_wild))

        card = legal[0]
        return PlayMove(card=card, suit=self.choose_suit(hand, played=card))

    def choose_suit(self, hand: Sequence[Card], *, played: Card | None = None) -> Suit:
        """Return the most common suit in ``hand`` once ``played`` has left it.

        Ties go to the suit that appears first in ``hand``; an empty hand
        yields :data:`FALLBACK_SUIT`.
        """

        remaining = list(hand)
        if played is not None and played in remaining:
            remaining.remove(played)
        counts = Counter(card.suit for card in remaining)
        if not counts:
            return FALLBACK_SUIT
        # counts iterate in first-seen order and max keeps the first maximum
        return max(counts, key=counts.__getitem__)
