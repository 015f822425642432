"""Public call surface of the Crazy Eights engine."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Callable, List

from . import cards
from .cards import Card, Suit
from .controller import TurnController
from .opponent import DrawMove, EightsPolicy
from .rules import IllegalPlay
from .scheduling import Cancellable, ImmediateScheduler, Scheduler
from .state import GameConfig, GameSnapshot, GameState, Phase, Side, snapshot_of

__all__ = ["CrazyEightsEngine", "SnapshotListener"]

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[GameSnapshot], None]


@dataclass(slots=True)
class _PendingMove:
    """Bookkeeping for the opponent task currently scheduled."""

    label: str
    handle: Cancellable | None = None


class CrazyEightsEngine:
    """Human vs. computer game driven through snapshots.

    Human actions are applied synchronously. Whenever the turn reaches the
    opponent, its move is scheduled through ``scheduler`` after the configured
    think-time; starting a new game cancels any move still in flight.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        policy: EightsPolicy | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.scheduler: Scheduler = scheduler or ImmediateScheduler()
        self.policy = policy or EightsPolicy()
        self.controller = TurnController(hand_size=self.config.hand_size)
        self.game_number = 0
        self._lock = threading.RLock()
        self._pending: _PendingMove | None = None
        self._listeners: List[SnapshotListener] = []

    # ------------------------------------------------------------------
    # observation

    @property
    def state(self) -> GameState:
        return self.controller.state

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return snapshot_of(self.controller.state, game_number=self.game_number)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener`` for opponent updates; return an unsubscribe hook."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    @property
    def opponent_pending(self) -> bool:
        return self._pending is not None

    # ------------------------------------------------------------------
    # human actions

    def new_game(self) -> GameSnapshot:
        """Shuffle, deal and hand the first turn to the player."""

        with self._lock:
            deck = cards.shuffle(cards.build_deck(), self.rng)
            self.controller.reset(deck)
            self._cancel_pending()
            self.game_number += 1
            logger.info("game %d started", self.game_number)
            return self.snapshot()

    def player_draw(self) -> GameSnapshot:
        with self._lock:
            self.controller.draw(Side.PLAYER)
            self._schedule_opponent_turn()
            return self.snapshot()

    def player_play(self, card_id: str, chosen_suit: Suit | str | None = None) -> GameSnapshot:
        """Play the player's card ``card_id``.

        Eights played without ``chosen_suit`` wait for :meth:`resolve_wild`.
        """

        with self._lock:
            card = self._held_card(card_id)
            suit = Suit.parse(chosen_suit) if chosen_suit is not None else None
            self.controller.play(card, Side.PLAYER, suit)
            self._schedule_opponent_turn()
            return self.snapshot()

    def resolve_wild(self, chosen_suit: Suit | str) -> GameSnapshot:
        with self._lock:
            self.controller.resolve_wild(Suit.parse(chosen_suit))
            self._schedule_opponent_turn()
            return self.snapshot()

    def _held_card(self, card_id: str) -> Card:
        card = Card.from_id(card_id)
        if card not in self.state.player_hand:
            raise IllegalPlay(f"{card.id} is not in the player's hand")
        return card

    # ------------------------------------------------------------------
    # opponent scheduling

    def _schedule_opponent_turn(self) -> None:
        state = self.state
        if state.phase is not Phase.PLAYING or state.turn is not Side.OPPONENT:
            return
        if self._pending is not None:
            return
        self._schedule("opponent turn", self.config.think_delay, self._opponent_turn)

    def _schedule(self, label: str, delay: float, action: Callable[[], None]) -> None:
        move = _PendingMove(label)
        self._pending = move

        def _run() -> None:
            with self._lock:
                if self._pending is not move:
                    logger.debug("ignoring superseded %s", label)
                    return
                self._pending = None
                action()
                self._schedule_opponent_turn()
                snapshot = self.snapshot()
            self._notify(snapshot)

        handle = self.scheduler(delay, _run)
        if self._pending is move:
            move.handle = handle

    def _cancel_pending(self) -> None:
        move = self._pending
        self._pending = None
        if move is None:
            return
        if move.handle is not None:
            move.handle.cancel()
        logger.debug("cancelled pending %s", move.label)

    def _opponent_turn(self) -> None:
        state = self.state
        top = state.top_discard
        if top is None or state.active_suit is None:
            return
        move = self.policy.choose_move(state.opponent_hand, top, state.active_suit, self.rng)
        if isinstance(move, DrawMove):
            result = self.controller.draw(Side.OPPONENT)
            if result.card is not None and result.playable:
                drawn = result.card
                self._schedule(
                    "opponent follow-up",
                    self.config.follow_up_delay,
                    lambda: self._opponent_play(drawn),
                )
            return
        self.controller.play(move.card, Side.OPPONENT, move.suit)

    def _opponent_play(self, card: Card) -> None:
        suit = self.policy.choose_suit(self.state.opponent_hand, played=card) if card.is_wild else None
        self.controller.play(card, Side.OPPONENT, suit)

    def _notify(self, snapshot: GameSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)
