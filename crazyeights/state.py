"""Core game state data structures for Crazy Eights."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Union

from .cards import DECK_SIZE, Card, Suit
from .rules import HAND_SIZE, legal_cards


class Side(str, Enum):
    """The two seats at the table."""

    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER


class Phase(str, Enum):
    """High-level game phases."""

    DEALING = "dealing"
    PLAYING = "playing"
    GAME_OVER = "gameOver"


@dataclass(frozen=True, slots=True)
class AwaitingAction:
    """The side to act may draw or play."""


@dataclass(frozen=True, slots=True)
class AwaitingSuit:
    """A wild eight is committed and its suit has not been nominated yet.

    The card is still in the player's hand while this stage is active.
    """

    card: Card


TurnStage = Union[AwaitingAction, AwaitingSuit]

AWAITING_ACTION = AwaitingAction()


def check_hand_size(hand_size: int) -> None:
    """Raise ``ValueError`` unless two hands and a first discard fit in one deck."""

    if hand_size < 1 or hand_size * 2 + 1 > DECK_SIZE:
        raise ValueError(f"hand size must be between 1 and {(DECK_SIZE - 1) // 2}, got {hand_size}")


@dataclass(slots=True)
class GameConfig:
    """Runtime configuration for a single engine instance."""

    hand_size: int = HAND_SIZE
    think_delay: float = 1.5
    follow_up_delay: float = 1.0
    seed: int | None = None

    def __post_init__(self) -> None:
        check_hand_size(self.hand_size)


@dataclass(slots=True)
class GameState:
    """Authoritative mutable record of one game.

    Only :class:`crazyeights.controller.TurnController` mutates instances.
    """

    deck: List[Card] = field(default_factory=list)
    player_hand: List[Card] = field(default_factory=list)
    opponent_hand: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)
    active_suit: Suit | None = None
    turn: Side = Side.PLAYER
    phase: Phase = Phase.DEALING
    stage: TurnStage = AWAITING_ACTION
    winner: Side | None = None
    message: str = ""

    def hand(self, side: Side) -> List[Card]:
        return self.player_hand if side is Side.PLAYER else self.opponent_hand

    @property
    def top_discard(self) -> Card | None:
        return self.discard_pile[-1] if self.discard_pile else None

    @property
    def pending_wild(self) -> Card | None:
        """Return the committed wild card while a suit is outstanding."""

        if isinstance(self.stage, AwaitingSuit):
            return self.stage.card
        return None

    def card_count(self) -> int:
        return len(self.deck) + len(self.player_hand) + len(self.opponent_hand) + len(self.discard_pile)

    def clone(self) -> "GameState":
        """Return a copy whose containers can be mutated independently."""

        return GameState(
            deck=list(self.deck),
            player_hand=list(self.player_hand),
            opponent_hand=list(self.opponent_hand),
            discard_pile=list(self.discard_pile),
            active_suit=self.active_suit,
            turn=self.turn,
            phase=self.phase,
            stage=self.stage,
            winner=self.winner,
            message=self.message,
        )

    def check_invariants(self) -> None:
        """Raise ``ValueError`` when the card-conservation rules are broken."""

        if self.phase is Phase.DEALING:
            return
        containers = (self.deck, self.player_hand, self.opponent_hand, self.discard_pile)
        total = sum(len(cards) for cards in containers)
        if total != DECK_SIZE:
            raise ValueError(f"expected {DECK_SIZE} cards across all piles, found {total}")
        seen: set[Card] = set()
        for cards in containers:
            for card in cards:
                if card in seen:
                    raise ValueError(f"card {card.id} appears more than once")
                seen.add(card)
        if not self.discard_pile or self.active_suit is None:
            raise ValueError("table has no top discard or active suit")
        someone_empty = not self.player_hand or not self.opponent_hand
        if (self.phase is Phase.GAME_OVER) != someone_empty:
            raise ValueError("game over must coincide with an empty hand")
        pending = self.pending_wild
        if pending is not None:
            if self.turn is not Side.PLAYER or pending not in self.player_hand:
                raise ValueError("pending wild must belong to the player whose turn it is")


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only view of a game handed to front-ends."""

    player_hand: tuple[Card, ...]
    opponent_hand: tuple[Card, ...]
    top_discard: Card | None
    draw_pile_count: int
    discard_count: int
    active_suit: Suit | None
    turn: Side
    phase: Phase
    pending_wild: Card | None
    winner: Side | None
    playable: tuple[str, ...]
    message: str
    game_number: int = 0

    @property
    def player_count(self) -> int:
        return len(self.player_hand)

    @property
    def opponent_count(self) -> int:
        return len(self.opponent_hand)

    @property
    def awaiting_suit(self) -> bool:
        return self.pending_wild is not None


def snapshot_of(state: GameState, *, game_number: int = 0) -> GameSnapshot:
    """Capture ``state`` as an immutable :class:`GameSnapshot`."""

    top = state.top_discard
    playable: tuple[str, ...] = ()
    if (
        state.phase is Phase.PLAYING
        and state.turn is Side.PLAYER
        and isinstance(state.stage, AwaitingAction)
        and top is not None
        and state.active_suit is not None
    ):
        playable = tuple(card.id for card in legal_cards(state.player_hand, top, state.active_suit))
    return GameSnapshot(
        player_hand=tuple(state.player_hand),
        opponent_hand=tuple(state.opponent_hand),
        top_discard=top,
        draw_pile_count=len(state.deck),
        discard_count=len(state.discard_pile),
        active_suit=state.active_suit,
        turn=state.turn,
        phase=state.phase,
        pending_wild=state.pending_wild,
        winner=state.winner,
        playable=playable,
        message=state.message,
        game_number=game_number,
    )


def deal_new_game(deck_cards: Sequence[Card], hand_size: int = HAND_SIZE) -> GameState:
    """Deal a fresh game from an already shuffled deck.

    The player receives the first ``hand_size`` cards, the opponent the next
    ``hand_size`` and the following card starts the discard pile. The rest
    becomes the draw pile, drawn from its end.
    """

    check_hand_size(hand_size)
    draw_pile = list(deck_cards)
    needed = hand_size * 2 + 1
    if len(draw_pile) < needed:
        raise ValueError("insufficient cards in deck for requested hand size")

    player_hand = draw_pile[:hand_size]
    opponent_hand = draw_pile[hand_size : hand_size * 2]
    first_discard = draw_pile[hand_size * 2]
    del draw_pile[:needed]

    return GameState(
        deck=draw_pile,
        player_hand=player_hand,
        opponent_hand=opponent_hand,
        discard_pile=[first_discard],
        active_suit=first_discard.suit,
        turn=Side.PLAYER,
        phase=Phase.PLAYING,
        stage=AWAITING_ACTION,
        winner=None,
        message="",
    )
