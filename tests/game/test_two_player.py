"""Tests for the alternating and simultaneous two-player mazes."""

from __future__ import annotations

import random

import pytest

from maze_search.game.alternate import AlternateMazeState
from maze_search.game.errors import IllegalActionError
from maze_search.game.protocol import GameState, SimultaneousGameState
from maze_search.game.simultaneous import SimultaneousMazeState
from maze_search.game.types import (
    ALTERNATE_MAZE_CONFIG,
    Character,
    Coord,
    MazeConfig,
    WinningStatus,
)

CFG = ALTERNATE_MAZE_CONFIG  # 3×3, 4 ターン


def _first_player_diff(state: AlternateMazeState) -> int:
    """先手視点のスコア差（get_score は手番側視点なので偶奇で直す）。"""
    return state.get_score() if state.is_first_player() else -state.get_score()


class TestAlternateInitialState:
    def test_implements_game_state(self) -> None:
        assert isinstance(AlternateMazeState.from_seed(0), GameState)

    def test_characters_start_left_and_right_of_center(self) -> None:
        state = AlternateMazeState.from_seed(0)
        assert state.characters[0].pos == Coord(1, 0)
        assert state.characters[1].pos == Coord(1, 2)

    def test_character_cells_have_no_points(self) -> None:
        state = AlternateMazeState.from_seed(9)
        assert state.points[CFG.index(Coord(1, 0))] == 0
        assert state.points[CFG.index(Coord(1, 2))] == 0

    def test_deterministic(self) -> None:
        assert AlternateMazeState.from_seed(3) == AlternateMazeState.from_seed(3)

    def test_first_player_moves_first(self) -> None:
        state = AlternateMazeState.from_seed(0)
        assert state.is_first_player()
        assert state.legal_actions() == [0, 2, 3]  # 左端なので左には行けない


class TestAlternateAdvance:
    def test_turn_passes_and_characters_swap(self) -> None:
        state = AlternateMazeState.from_seed(0)
        nxt = state.advance(0)
        assert nxt.turn == 1
        assert not nxt.is_first_player()
        assert nxt.characters[1].pos == Coord(1, 1)  # 動いた先手は後ろに回る
        assert nxt.characters[0] == state.characters[1]

    def test_collects_point(self) -> None:
        points = (0, 0, 0, 0, 6, 0, 0, 0, 0)
        state = AlternateMazeState(
            points=points,
            characters=(Character(Coord(1, 0)), Character(Coord(1, 2))),
        )
        nxt = state.advance(0)
        assert nxt.characters[1].game_score == 6
        assert nxt.points[4] == 0
        assert nxt.get_score() == -6  # 手番側（後手）から見ると −6

    def test_zero_sum_score(self) -> None:
        rng = random.Random(0)
        for seed in range(20):
            state = AlternateMazeState.from_seed(seed)
            rewards = [0, 0]
            while not state.is_done:
                player = 0 if state.is_first_player() else 1
                action = rng.choice(state.legal_actions())
                nxt = state.advance(action)
                rewards[player] += state.points[CFG.index(state.characters[0].pos.moved(action))]
                state = nxt
                assert _first_player_diff(state) == rewards[0] - rewards[1]

    def test_advance_done_raises(self) -> None:
        state = AlternateMazeState.from_seed(0)
        for _ in range(CFG.end_turn):
            state = state.advance(state.legal_actions()[0])
        with pytest.raises(IllegalActionError):
            state.advance(state.legal_actions()[0])


class TestAlternateWinningStatus:
    def _finished(self, mover_score: int, other_score: int, turn: int) -> AlternateMazeState:
        return AlternateMazeState(
            points=(0,) * 9,
            characters=(
                Character(Coord(1, 0), mover_score),
                Character(Coord(1, 2), other_score),
            ),
            turn=turn,
        )

    def test_none_while_playing(self) -> None:
        assert AlternateMazeState.from_seed(0).get_winning_status() == WinningStatus.NONE

    def test_win_lose_draw(self) -> None:
        assert self._finished(5, 3, 4).get_winning_status() == WinningStatus.WIN
        assert self._finished(3, 5, 4).get_winning_status() == WinningStatus.LOSE
        assert self._finished(4, 4, 4).get_winning_status() == WinningStatus.DRAW

    def test_first_player_score_for_win_rate(self) -> None:
        # turn=4 は先手の手番 → 手番側の勝ち = 先手の勝ち
        assert self._finished(5, 3, 4).get_first_player_score_for_win_rate() == 1.0
        assert self._finished(4, 4, 4).get_first_player_score_for_win_rate() == 0.5

    def test_first_player_score_when_second_to_move(self) -> None:
        state = AlternateMazeState(
            points=(0,) * 9,
            characters=(Character(Coord(1, 0), 5), Character(Coord(1, 2), 3)),
            config=MazeConfig(3, 3, 5),
            turn=5,
        )
        assert not state.is_first_player()
        assert state.get_winning_status() == WinningStatus.WIN
        assert state.get_first_player_score_for_win_rate() == 0.0


class TestAlternateDisplay:
    def test_labels_follow_player_ids(self) -> None:
        state = AlternateMazeState.from_seed(0).advance(0)
        text = str(state)
        # 手番が入れ替わっても A はプレイヤー 0（中央に移動済み）
        assert text.splitlines()[-2][1] == "A"
        assert text.splitlines()[-2][2] == "B"


class TestSimultaneous:
    def test_implements_protocol(self) -> None:
        assert isinstance(SimultaneousMazeState.from_seed(0), SimultaneousGameState)

    def test_points_are_mirrored(self) -> None:
        for seed in range(10):
            state = SimultaneousMazeState.from_seed(seed)
            for y in range(3):
                assert state.points[y * 3] == state.points[y * 3 + 2]

    def test_both_collect_on_same_cell(self) -> None:
        state = SimultaneousMazeState(
            points=(0, 0, 0, 0, 7, 0, 0, 0, 0),
            characters=(Character(Coord(1, 0)), Character(Coord(1, 2))),
        )
        nxt = state.advance(0, 1)  # 2 人とも中央へ
        assert nxt.characters[0].game_score == 7
        assert nxt.characters[1].game_score == 7
        assert nxt.points[4] == 0
        assert nxt.get_score() == 0

    def test_status_from_player0(self) -> None:
        state = SimultaneousMazeState(
            points=(0,) * 9,
            characters=(Character(Coord(1, 0), 2), Character(Coord(1, 2), 5)),
            turn=4,
        )
        assert state.get_winning_status() == WinningStatus.LOSE
        assert state.get_first_player_score_for_win_rate() == 0.0
        assert state.get_score_rate() == pytest.approx(2 / 7)

    def test_score_rate_zero_when_no_points(self) -> None:
        assert SimultaneousMazeState.from_seed(0).get_score_rate() == 0.0

    def test_illegal_action_raises(self) -> None:
        state = SimultaneousMazeState.from_seed(0)
        with pytest.raises(IllegalActionError):
            state.advance(1, 1)  # プレイヤー 0 は左端にいる

    def test_legal_actions_per_player(self) -> None:
        state = SimultaneousMazeState.from_seed(0)
        assert state.legal_actions(0) == [0, 2, 3]
        assert state.legal_actions(1) == [1, 2, 3]


class TestAlternateView:
    def test_player0_view(self) -> None:
        state = SimultaneousMazeState.from_seed(2).advance(2, 3)
        view = state.to_alternate(0)
        assert view.turn == 2
        assert view.config.end_turn == state.config.end_turn * 2
        assert view.characters == state.characters
        assert view.points == state.points

    def test_player1_view_moves_player1_first(self) -> None:
        state = SimultaneousMazeState.from_seed(2)
        view = state.to_alternate(1)
        assert view.characters[0] == state.characters[1]
        assert view.legal_actions() == state.legal_actions(1)


class TestTensorPlanes:
    def test_alternate_planes(self) -> None:
        planes = AlternateMazeState.from_seed(0).to_tensor_planes()
        assert planes.shape == (3, 3, 3)
        assert planes[1, 1, 0] == 1.0
        assert planes[2, 1, 2] == 1.0

    def test_simultaneous_planes(self) -> None:
        planes = SimultaneousMazeState.from_seed(0).to_tensor_planes()
        assert planes.shape == (3, 3, 3)
        assert planes[1].sum() == 1.0 and planes[2].sum() == 1.0
