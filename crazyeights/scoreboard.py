"""Helpers for tracking results across games in one session."""

from __future__ import annotations

from dataclasses import dataclass, field

from .state import GameSnapshot, Phase, Side

__all__ = ["GameSummary", "SideTotal", "MatchHistory"]


@dataclass(frozen=True, slots=True)
class GameSummary:
    """Outcome of a single game.

    ``winner`` is ``None`` for a game abandoned before anyone emptied a hand.
    """

    game_number: int
    winner: Side | None
    player_cards_left: int
    opponent_cards_left: int
    turns: int = 0

    @property
    def finished(self) -> bool:
        return self.winner is not None

    def cards_left(self, side: Side) -> int:
        return self.player_cards_left if side is Side.PLAYER else self.opponent_cards_left

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot, *, turns: int = 0) -> "GameSummary":
        winner = snapshot.winner if snapshot.phase is Phase.GAME_OVER else None
        return cls(
            game_number=snapshot.game_number,
            winner=winner,
            player_cards_left=snapshot.player_count,
            opponent_cards_left=snapshot.opponent_count,
            turns=turns,
        )


@dataclass(frozen=True, slots=True)
class SideTotal:
    """Aggregate totals for one seat across all recorded games."""

    side: Side
    wins: int
    cards_left: int


@dataclass(slots=True)
class MatchHistory:
    """Mutable tracker that accumulates game summaries for a session."""

    games: list[GameSummary] = field(default_factory=list)
    _wins: dict[Side, int] = field(init=False, repr=False)
    _cards_left: dict[Side, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._wins = {side: 0 for side in Side}
        self._cards_left = {side: 0 for side in Side}

    def record(self, summary: GameSummary) -> None:
        """Record ``summary`` and update cumulative totals."""

        if summary.player_cards_left < 0 or summary.opponent_cards_left < 0:
            raise ValueError("card counts cannot be negative")
        if summary.winner is not None and summary.cards_left(summary.winner) != 0:
            raise ValueError("the winner must have emptied their hand")
        self.games.append(summary)
        self._cards_left[Side.PLAYER] += summary.player_cards_left
        self._cards_left[Side.OPPONENT] += summary.opponent_cards_left
        if summary.winner is not None:
            self._wins[summary.winner] += 1

    @property
    def unfinished(self) -> int:
        return sum(1 for game in self.games if not game.finished)

    def totals(self) -> list[SideTotal]:
        """Return the cumulative totals for each side, player first."""

        return [
            SideTotal(side=side, wins=self._wins[side], cards_left=self._cards_left[side])
            for side in Side
        ]
