"""Card abstractions and deck helpers for Crazy Eights."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Protocol, Sequence

__all__ = [
    "Suit",
    "Rank",
    "Card",
    "DECK_SIZE",
    "iter_full_deck",
    "build_deck",
    "shuffle",
    "format_cards",
]


class Suit(str, Enum):
    """Enumeration of the four suits in a standard deck."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]

    @classmethod
    def parse(cls, value: "Suit | str") -> "Suit":
        """Return the suit named by ``value`` (member, name or symbol)."""

        if isinstance(value, Suit):
            return value
        text = str(value).strip().lower()
        for suit in cls:
            if text in (suit.value, suit.name.lower(), suit.symbol):
                return suit
        raise ValueError(f"unknown suit '{value}'")


_SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


class Rank(str, Enum):
    """Enumeration of ranks in deck order."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


DECK_SIZE = len(Suit) * len(Rank)


@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing a physical card."""

    rank: Rank
    suit: Suit

    @property
    def id(self) -> str:
        """Stable identifier used by front-ends, e.g. ``"8-hearts"``."""

        return f"{self.rank.value}-{self.suit.value}"

    @property
    def is_wild(self) -> bool:
        return self.rank is Rank.EIGHT

    @classmethod
    def from_id(cls, card_id: str) -> "Card":
        parts = card_id.split("-")
        if len(parts) != 2:
            raise ValueError(f"invalid card id '{card_id}'")
        rank_text, suit_text = parts
        try:
            return cls(rank=Rank(rank_text.upper()), suit=Suit(suit_text.lower()))
        except ValueError as exc:
            raise ValueError(f"invalid card id '{card_id}'") from exc

    def label(self) -> str:
        """Create a compact label suitable for logs and plain text output."""

        return f"{self.rank.value}{self.suit.symbol}"

    def __str__(self) -> str:
        return self.label()


class _RandIntSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def iter_full_deck() -> Iterator[Card]:
    """Yield all cards of a fresh deck, suit-major and rank-minor."""

    for suit in Suit:
        for rank in Rank:
            yield Card(rank=rank, suit=suit)


def build_deck() -> List[Card]:
    """Return the 52 unique cards in canonical order."""

    return list(iter_full_deck())


def shuffle(deck: Sequence[Card], rng: _RandIntSource) -> List[Card]:
    """Return a uniformly random permutation of ``deck`` (Fisher–Yates).

    The input sequence is copied first and never modified.
    """

    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def format_cards(cards: Iterable[Card]) -> str:
    return " ".join(card.label() for card in cards)
