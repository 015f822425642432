"""Tests for the turn controller state machine."""

from __future__ import annotations

import pytest

from _tables import card, cards, table_state
from crazyeights.cards import Suit, build_deck
from crazyeights.controller import TurnController
from crazyeights.rules import IllegalDraw, IllegalPlay, InvalidWildResolution
from crazyeights.state import AwaitingAction, AwaitingSuit, GameState, Phase, Side


def _controller(game_state: GameState) -> TurnController:
    return TurnController(game_state)


def test_reset_deals_and_gives_player_the_turn() -> None:
    controller = TurnController()

    game_state = controller.reset(build_deck())

    assert game_state.phase is Phase.PLAYING
    assert game_state.turn is Side.PLAYER
    assert len(game_state.player_hand) == 8
    assert len(game_state.opponent_hand) == 8
    assert len(game_state.discard_pile) == 1
    assert len(game_state.deck) == 35
    assert game_state.message
    game_state.check_invariants()


def test_player_draw_of_unplayable_card_passes_turn() -> None:
    game_state = table_state("2c", "4h 5h", "kh", deck=["3s"])
    controller = _controller(game_state)

    result = controller.draw(Side.PLAYER)

    assert result.card == card("3s")
    assert not result.playable
    assert result.turn_passed
    assert card("3s") in game_state.player_hand
    assert game_state.turn is Side.OPPONENT
    game_state.check_invariants()


def test_player_draw_of_playable_card_keeps_turn() -> None:
    game_state = table_state("2c", "4h 5h", "kh", deck=["3c", "3h"])
    controller = _controller(game_state)

    result = controller.draw(Side.PLAYER)

    assert result.card == card("3h")
    assert result.playable
    assert not result.turn_passed
    assert game_state.turn is Side.PLAYER
    assert game_state.deck == [card("3c")]


def test_draw_from_empty_deck_passes_without_moving_cards() -> None:
    game_state = table_state("2c 4c", "4s 5s", "kh", deck=[], turn=Side.OPPONENT)
    controller = _controller(game_state)
    hands_before = (list(game_state.player_hand), list(game_state.opponent_hand))
    discard_before = list(game_state.discard_pile)

    result = controller.draw(Side.OPPONENT)

    assert result.deck_empty
    assert result.turn_passed
    assert game_state.turn is Side.PLAYER
    assert (game_state.player_hand, game_state.opponent_hand) == hands_before
    assert game_state.discard_pile == discard_before
    assert "empty" in game_state.message


def test_draw_out_of_turn_is_rejected() -> None:
    game_state = table_state("2c", "4h 5h", "kh")
    controller = _controller(game_state)
    before = game_state.clone()

    with pytest.raises(IllegalDraw):
        controller.draw(Side.OPPONENT)

    assert game_state == before


def test_play_moves_card_and_sets_active_suit() -> None:
    game_state = table_state("2c kc 5d", "4h 5h", "kh")
    controller = _controller(game_state)

    result = controller.play(card("kc"), Side.PLAYER)

    assert result.completed
    assert game_state.top_discard == card("kc")
    assert game_state.active_suit is Suit.CLUBS
    assert game_state.player_hand == cards("2c 5d")
    assert game_state.turn is Side.OPPONENT
    game_state.check_invariants()


@pytest.mark.parametrize(
    ("side", "candidate"),
    [
        (Side.PLAYER, "2c"),  # does not match
        (Side.PLAYER, "9d"),  # not held
        (Side.OPPONENT, "4h"),  # out of turn
    ],
)
def test_illegal_plays_are_rejected_without_side_effects(side: Side, candidate: str) -> None:
    game_state = table_state("2c 5h", "4h 5d", "kh")
    controller = _controller(game_state)
    before = game_state.clone()

    with pytest.raises(IllegalPlay):
        controller.play(card(candidate), side)

    assert game_state == before


def test_player_eight_waits_for_suit() -> None:
    game_state = table_state("8c 2d", "4h 5h", "kh")
    controller = _controller(game_state)

    result = controller.play(card("8c"), Side.PLAYER)

    assert not result.completed
    assert game_state.phase is Phase.PLAYING
    assert game_state.turn is Side.PLAYER
    assert game_state.stage == AwaitingSuit(card("8c"))
    assert card("8c") in game_state.player_hand
    assert game_state.top_discard == card("kh")


def test_pending_eight_blocks_other_actions() -> None:
    game_state = table_state("8c 2h", "4h 5h", "kh")
    controller = _controller(game_state)
    controller.play(card("8c"), Side.PLAYER)

    with pytest.raises(IllegalDraw):
        controller.draw(Side.PLAYER)
    with pytest.raises(IllegalPlay):
        controller.play(card("2h"), Side.PLAYER)


def test_resolve_wild_completes_play() -> None:
    game_state = table_state("8c 2d", "4h 5h", "kh")
    controller = _controller(game_state)
    controller.play(card("8c"), Side.PLAYER)

    result = controller.resolve_wild(Suit.DIAMONDS)

    assert result.completed
    assert game_state.top_discard == card("8c")
    assert game_state.active_suit is Suit.DIAMONDS
    assert isinstance(game_state.stage, AwaitingAction)
    assert game_state.turn is Side.OPPONENT
    assert "diamonds" in game_state.message


def test_resolve_wild_without_pending_eight_is_rejected() -> None:
    game_state = table_state("8c 2d", "4h 5h", "kh")
    controller = _controller(game_state)
    before = game_state.clone()

    with pytest.raises(InvalidWildResolution):
        controller.resolve_wild(Suit.SPADES)

    assert game_state == before


def test_player_eight_with_suit_completes_in_one_step() -> None:
    game_state = table_state("8c 2d", "4h 5h", "kh")
    controller = _controller(game_state)

    result = controller.play(card("8c"), Side.PLAYER, Suit.SPADES)

    assert result.completed
    assert game_state.active_suit is Suit.SPADES
    assert game_state.turn is Side.OPPONENT


def test_opponent_eight_requires_suit() -> None:
    game_state = table_state("2d", "8s 5h", "kh", turn=Side.OPPONENT)
    controller = _controller(game_state)

    with pytest.raises(IllegalPlay):
        controller.play(card("8s"), Side.OPPONENT)

    controller.play(card("8s"), Side.OPPONENT, Suit.HEARTS)
    assert game_state.active_suit is Suit.HEARTS
    assert "chose hearts" in game_state.message


def test_playing_last_card_ends_game_without_flipping_turn() -> None:
    game_state = table_state("qh", "4h 5h", "kh")
    controller = _controller(game_state)

    result = controller.play(card("qh"), Side.PLAYER)

    assert result.game_over
    assert game_state.phase is Phase.GAME_OVER
    assert game_state.winner is Side.PLAYER
    assert game_state.turn is Side.PLAYER
    game_state.check_invariants()


def test_resolving_last_eight_wins() -> None:
    game_state = table_state("8d", "4h 5h", "kh")
    controller = _controller(game_state)
    controller.play(card("8d"), Side.PLAYER)
    assert game_state.phase is Phase.PLAYING

    controller.resolve_wild(Suit.CLUBS)

    assert game_state.phase is Phase.GAME_OVER
    assert game_state.winner is Side.PLAYER


def test_game_over_rejects_further_actions() -> None:
    game_state = table_state("qh", "4h 5h", "kh")
    controller = _controller(game_state)
    controller.play(card("qh"), Side.PLAYER)

    with pytest.raises(IllegalDraw):
        controller.draw(Side.PLAYER)
    with pytest.raises(IllegalDraw):
        controller.draw(Side.OPPONENT)
    with pytest.raises(IllegalPlay):
        controller.play(card("4h"), Side.OPPONENT)
    with pytest.raises(InvalidWildResolution):
        controller.resolve_wild(Suit.HEARTS)


@pytest.mark.parametrize("hand_size", [0, 26])
def test_controller_rejects_hand_size_that_cannot_be_dealt(hand_size: int) -> None:
    with pytest.raises(ValueError):
        TurnController(hand_size=hand_size)


def test_failed_reset_keeps_running_game() -> None:
    game_state = table_state("2c 4c", "4h 5h", "kh")
    controller = _controller(game_state)
    before = game_state.clone()

    with pytest.raises(ValueError):
        controller.reset(build_deck()[:10])

    assert controller.state is game_state
    assert game_state == before
    assert game_state.phase is Phase.PLAYING
