"""Turn controller: the single mutation entry point for a game."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .cards import Card, Suit
from .rules import HAND_SIZE, IllegalDraw, IllegalPlay, InvalidWildResolution, is_legal
from .state import (
    AWAITING_ACTION,
    AwaitingAction,
    AwaitingSuit,
    GameState,
    Phase,
    Side,
    check_hand_size,
    deal_new_game,
)

__all__ = ["DrawResult", "PlayResult", "TurnController"]

logger = logging.getLogger(__name__)

MSG_PLAYER_TURN = "Your turn! Play a card matching the suit or rank."
MSG_CHOOSE_SUIT = "Wild eight! Choose the next suit."
MSG_OPPONENT_THINKING = "Opponent is thinking..."


@dataclass(frozen=True, slots=True)
class DrawResult:
    """Outcome of a draw request."""

    card: Card | None
    playable: bool
    turn_passed: bool

    @property
    def deck_empty(self) -> bool:
        return self.card is None


@dataclass(frozen=True, slots=True)
class PlayResult:
    """Outcome of a play request."""

    card: Card
    completed: bool
    game_over: bool = False


class TurnController:
    """Apply draws, plays and wild resolutions to a :class:`GameState`.

    Every operation checks all of its preconditions before touching the
    state, so a rejected call leaves the game exactly as it was.
    """

    def __init__(self, state: GameState | None = None, *, hand_size: int = HAND_SIZE) -> None:
        check_hand_size(hand_size)
        self.state = state if state is not None else GameState()
        self.hand_size = hand_size

    # ------------------------------------------------------------------
    # lifecycle

    def reset(self, deck: Sequence[Card]) -> GameState:
        """Deal a new game from ``deck`` (already shuffled) and hand the turn to the player."""

        dealt = deal_new_game(deck, self.hand_size)
        dealt.message = MSG_PLAYER_TURN
        self.state = dealt
        logger.info(
            "dealt new game: top discard %s, %d cards in draw pile",
            dealt.discard_pile[-1],
            len(dealt.deck),
        )
        return self.state

    # ------------------------------------------------------------------
    # guards

    def _require_turn(self, side: Side, error: type[IllegalDraw] | type[IllegalPlay]) -> None:
        state = self.state
        if state.phase is not Phase.PLAYING:
            raise error(f"game is not in progress (phase {state.phase.value})")
        if state.turn is not side:
            raise error(f"not the {side.value}'s turn")
        if not isinstance(state.stage, AwaitingAction):
            raise error("a suit must be chosen for the pending eight first")

    def _table(self) -> tuple[Card, Suit]:
        top = self.state.top_discard
        suit = self.state.active_suit
        if top is None or suit is None:
            raise RuntimeError("table has not been dealt")
        return top, suit

    # ------------------------------------------------------------------
    # actions

    def draw(self, side: Side) -> DrawResult:
        """Draw one card for ``side`` from the draw pile.

        An empty draw pile ends the turn without drawing. A drawn card that
        cannot be played also ends the turn; a playable one keeps it.
        """

        self._require_turn(side, IllegalDraw)
        state = self.state
        top, suit = self._table()

        if not state.deck:
            if side is Side.PLAYER:
                state.message = "The draw pile is empty! Skipping your turn."
            else:
                state.message = "Opponent cannot play and the draw pile is empty. Skipping."
            logger.info("%s cannot draw: draw pile empty, turn passes", side.value)
            self._pass_turn(side)
            return DrawResult(card=None, playable=False, turn_passed=True)

        card = state.deck.pop()
        state.hand(side).append(card)
        playable = is_legal(card, top, suit)
        logger.debug("%s drew %s (playable=%s)", side.value, card, playable)

        if side is Side.PLAYER:
            state.message = f"You drew {card.label()}."
        else:
            state.message = "Opponent drew a card."

        if playable:
            return DrawResult(card=card, playable=True, turn_passed=False)

        if side is Side.PLAYER:
            state.message = f"You drew {card.label()}, which cannot be played. Opponent's turn."
        self._pass_turn(side)
        return DrawResult(card=card, playable=False, turn_passed=True)

    def play(self, card: Card, side: Side, chosen_suit: Suit | None = None) -> PlayResult:
        """Play ``card`` from ``side``'s hand.

        An eight played by the player without a suit commits the card and waits
        for :meth:`resolve_wild`. The opponent must always name its suit.
        """

        self._require_turn(side, IllegalPlay)
        state = self.state
        top, suit = self._table()
        hand = state.hand(side)
        if card not in hand:
            raise IllegalPlay(f"{card.id} is not in the {side.value}'s hand")
        if not is_legal(card, top, suit):
            raise IllegalPlay(f"{card.id} does not match {suit.value} or rank {top.rank.value}")

        if card.is_wild and chosen_suit is None:
            if side is Side.OPPONENT:
                raise IllegalPlay("opponent must nominate a suit when playing an eight")
            state.stage = AwaitingSuit(card)
            state.message = MSG_CHOOSE_SUIT
            logger.debug("player committed %s, awaiting suit", card)
            return PlayResult(card=card, completed=False)

        next_suit = chosen_suit if card.is_wild else card.suit
        assert next_suit is not None
        return self._complete_play(side, card, next_suit)

    def resolve_wild(self, chosen_suit: Suit) -> PlayResult:
        """Nominate the suit for the committed eight and finish the play."""

        state = self.state
        stage = state.stage
        if state.phase is not Phase.PLAYING or not isinstance(stage, AwaitingSuit):
            raise InvalidWildResolution("no wild eight is waiting for a suit")
        return self._complete_play(Side.PLAYER, stage.card, chosen_suit)

    # ------------------------------------------------------------------
    # transitions

    def _complete_play(self, side: Side, card: Card, next_suit: Suit) -> PlayResult:
        state = self.state
        hand = state.hand(side)
        hand.remove(card)
        state.discard_pile.append(card)
        state.active_suit = next_suit
        state.stage = AWAITING_ACTION
        logger.info("%s played %s, active suit %s", side.value, card, next_suit.value)

        if side is Side.PLAYER:
            if card.is_wild:
                state.message = f"You chose {next_suit.value}. Opponent's turn."
            else:
                state.message = MSG_OPPONENT_THINKING
        elif card.is_wild:
            state.message = f"Opponent played an 8 and chose {next_suit.value}!"
        else:
            state.message = f"Opponent played {card.label()}."

        if not hand:
            state.phase = Phase.GAME_OVER
            state.winner = side
            state.message = "You win! 🎉" if side is Side.PLAYER else "Opponent wins! Better luck next time."
            logger.info("%s wins", side.value)
            return PlayResult(card=card, completed=True, game_over=True)

        state.turn = side.other
        return PlayResult(card=card, completed=True)

    def _pass_turn(self, side: Side) -> None:
        self.state.turn = side.other
        self.state.stage = AWAITING_ACTION
        logger.debug("turn passes from %s to %s", side.value, side.other.value)
