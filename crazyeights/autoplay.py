"""Self-play harness that drives both seats with the opponent policy."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from . import scoreboard
from .engine import CrazyEightsEngine
from .opponent import DrawMove, EightsPolicy
from .rules import legal_cards
from .scheduling import ImmediateScheduler
from .state import GameConfig, GameState, Phase, Side

__all__ = ["SelfPlayReport", "is_deadlocked", "play_one_game", "run_selfplay"]

logger = logging.getLogger(__name__)

DEFAULT_TURN_LIMIT = 400


@dataclass(frozen=True, slots=True)
class SelfPlayReport:
    """Summary of a batch of self-play games."""

    history: scoreboard.MatchHistory
    player_wins: int
    opponent_wins: int
    stalled: int


def is_deadlocked(state: GameState) -> bool:
    """Return ``True`` when the draw pile is empty and neither side can ever play.

    The discard pile is never recycled, so once this holds the turn passes
    back and forth forever.
    """

    if state.phase is not Phase.PLAYING or state.deck:
        return False
    top = state.top_discard
    if top is None or state.active_suit is None:
        return False
    return not legal_cards(state.player_hand, top, state.active_suit) and not legal_cards(
        state.opponent_hand, top, state.active_suit
    )


def play_one_game(
    engine: CrazyEightsEngine,
    policy: EightsPolicy,
    rng: random.Random,
    *,
    turn_limit: int = DEFAULT_TURN_LIMIT,
    check_invariants: bool = False,
) -> scoreboard.GameSummary:
    """Play a full game, choosing the player's moves with ``policy``."""

    snapshot = engine.new_game()
    turns = 0
    while snapshot.phase is Phase.PLAYING and turns < turn_limit:
        state = engine.state
        if check_invariants:
            state.check_invariants()
        if is_deadlocked(state):
            logger.debug("game %d deadlocked after %d turns", snapshot.game_number, turns)
            break
        if state.turn is not Side.PLAYER:
            raise RuntimeError("self-play requires a synchronous scheduler")

        top = state.top_discard
        assert top is not None and state.active_suit is not None
        move = policy.choose_move(state.player_hand, top, state.active_suit, rng)
        if isinstance(move, DrawMove):
            snapshot = engine.player_draw()
        else:
            snapshot = engine.player_play(move.card.id, move.suit)
        turns += 1

    if check_invariants:
        engine.state.check_invariants()
    return scoreboard.GameSummary.from_snapshot(snapshot, turns=turns)


def run_selfplay(
    games: int,
    *,
    seed: int = 123,
    turn_limit: int = DEFAULT_TURN_LIMIT,
    check_invariants: bool = False,
) -> SelfPlayReport:
    """Play ``games`` games back to back and return aggregate statistics."""

    if games <= 0:
        raise ValueError("games must be positive")

    rng = random.Random(seed)
    config = GameConfig(think_delay=0.0, follow_up_delay=0.0, seed=seed)
    engine = CrazyEightsEngine(config, rng=rng, scheduler=ImmediateScheduler())
    policy = EightsPolicy()
    history = scoreboard.MatchHistory()

    for _ in range(games):
        summary = play_one_game(
            engine,
            policy,
            rng,
            turn_limit=turn_limit,
            check_invariants=check_invariants,
        )
        history.record(summary)

    totals = {total.side: total for total in history.totals()}
    report = SelfPlayReport(
        history=history,
        player_wins=totals[Side.PLAYER].wins,
        opponent_wins=totals[Side.OPPONENT].wins,
        stalled=history.unfinished,
    )
    logger.info(
        "self-play finished: %d games, player %d, opponent %d, stalled %d",
        games,
        report.player_wins,
        report.opponent_wins,
        report.stalled,
    )
    return report
