"""Tests for beam search and Chokudai search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import pytest
import torch

from maze_search.engine.beam import (
    Beam,
    BeamEntry,
    beam_search,
    beam_search_action,
    chokudai_search_action,
)
from maze_search.engine.time_keeper import TimeKeeper
from maze_search.game.maze import MazeState
from maze_search.game.types import INVALID_ACTION, MAZE_CONFIG, Coord, MazeConfig, WinningStatus
from maze_search.game.wall_maze import WallMazeState

SMALL = MazeConfig(height=3, width=3, end_turn=4)


def _fixed_state() -> MazeState:
    return MazeState(points=(0, 4, 1, 2, 7, 3, 9, 5, 6), character=Coord(0, 0), config=SMALL)


def _best_total(state: MazeState) -> int:
    """Helper: exhaustive search for the best reachable final score."""
    if state.is_done:
        return state.game_score
    return max(_best_total(state.advance(a)) for a in state.legal_actions())


@dataclass(frozen=True)
class DeadEndState:
    """Scored state whose children have no legal actions but never finish.

    深さ 1 の局面で手がなくなる。空のビームの扱いを確かめるための偽の局面。
    """

    depth: int = 0
    value: int = 0

    @property
    def is_done(self) -> bool:
        return False

    def legal_actions(self) -> list[int]:
        return [0, 1] if self.depth == 0 else []

    def advance(self, action: int) -> DeadEndState:
        return DeadEndState(self.depth + 1, 3 if action == 1 else 1)

    def get_score(self) -> int:
        return self.value

    def evaluate_score(self) -> int:
        return self.value

    def get_winning_status(self) -> WinningStatus:
        return WinningStatus.NONE

    def to_tensor_planes(self) -> torch.Tensor:
        return torch.zeros(1, 1, 1)


@dataclass(frozen=True)
class TranspositionState:
    """Hashable state whose first and second actions merge into one position.

    深さ 0 で手 0 と手 1 が同じハッシュ 10 の局面になり、
    深さ 1 でもその 2 つの子が同じハッシュ 100 の局面になる。
    後から合流する側 (0, 0) の評価値のほうが高い。
    """

    # 手順 → (hash, evaluate_score)
    NODES: ClassVar[dict[tuple[int, ...], tuple[int, int]]] = {
        (): (0, 0),
        (0,): (10, 4),
        (1,): (10, 5),
        (2,): (20, 1),
        (0, 0): (100, 12),
        (1, 0): (100, 9),
        (2, 0): (200, 2),
    }

    path: tuple[int, ...] = ()

    @property
    def hash(self) -> int:
        return self.NODES[self.path][0]

    @property
    def is_done(self) -> bool:
        return len(self.path) == 2

    def legal_actions(self) -> list[int]:
        return [0, 1, 2] if not self.path else [0]

    def advance(self, action: int) -> TranspositionState:
        return TranspositionState(self.path + (action,))

    def get_score(self) -> int:
        return self.evaluate_score()

    def evaluate_score(self) -> int:
        return self.NODES[self.path][1]

    def get_winning_status(self) -> WinningStatus:
        return WinningStatus.DRAW if self.is_done else WinningStatus.NONE

    def to_tensor_planes(self) -> torch.Tensor:
        return torch.zeros(1, 1, 1)


class TestBeam:
    def test_pops_highest_score_first(self) -> None:
        beam = Beam()
        for score in (3, 7, 5):
            beam.push(BeamEntry(_fixed_state(), score, score))
        assert [beam.pop().evaluated_score for _ in range(3)] == [7, 5, 3]
        assert not beam

    def test_ties_pop_in_push_order(self) -> None:
        beam = Beam()
        for action in (2, 0, 1):
            beam.push(BeamEntry(_fixed_state(), 5, action))
        assert len(beam) == 3
        assert beam.peek().first_action == 2
        assert [beam.pop().first_action for _ in range(3)] == [2, 0, 1]


class TestBeamSearch:
    @pytest.mark.parametrize("seed", range(5))
    def test_exhaustive_width_finds_optimum(self, seed: int) -> None:
        state = MazeState.from_seed(seed, MAZE_CONFIG)
        best = beam_search(state, 256, MAZE_CONFIG.end_turn)
        assert best is not None
        assert best.state.is_done
        assert best.evaluated_score == _best_total(state)

    @pytest.mark.parametrize("width", [1, 2, 5])
    def test_narrow_width_never_beats_optimum(self, width: int) -> None:
        state = MazeState.from_seed(11, MAZE_CONFIG)
        best = beam_search(state, width, MAZE_CONFIG.end_turn)
        assert best is not None
        assert best.evaluated_score <= _best_total(state)

    def test_fixed_board_plays_optimal_route(self) -> None:
        best = beam_search(_fixed_state(), 256, 4)
        assert best is not None
        assert best.evaluated_score == 25
        assert beam_search_action(_fixed_state(), 256, 4) == 0

    def test_returns_legal_action(self) -> None:
        state = MazeState.from_seed(3)
        assert beam_search_action(state, 2, 4) in state.legal_actions()

    def test_no_legal_action_gives_invalid(self) -> None:
        state = MazeState(points=(0,), character=Coord(0, 0), config=MazeConfig(1, 1, 4))
        assert beam_search(state, 2, 4) is None
        assert beam_search_action(state, 2, 4) == INVALID_ACTION

    def test_empty_level_falls_back_to_previous_best(self) -> None:
        best = beam_search(DeadEndState(), 2, 3)  # type: ignore[arg-type]
        assert best is not None
        assert best.first_action == 1
        assert best.evaluated_score == 3

    def test_invalid_parameters(self) -> None:
        with pytest.raises(ValueError):
            beam_search_action(_fixed_state(), 0, 4)
        with pytest.raises(ValueError):
            beam_search_action(_fixed_state(), 2, 0)

    def test_deadline_stops_after_first_level(self) -> None:
        best = beam_search(_fixed_state(), 4, 4, time_keeper=TimeKeeper(0))
        assert best is not None
        assert best.state.turn == 1
        assert best.first_action == 0  # 4 点 > 2 点


class TestHashPruning:
    CONFIG = MazeConfig(height=5, width=5, end_turn=4)

    @pytest.mark.parametrize("seed", range(5))
    def test_same_best_score_with_and_without_hash(self, seed: int) -> None:
        state = WallMazeState.from_seed(seed, self.CONFIG)
        plain = beam_search(state, 256, 4)
        hashed = beam_search(state, 256, 4, use_hash=True)
        assert plain is not None and hashed is not None
        assert hashed.evaluated_score == plain.evaluated_score

    def test_wall_maze_action_is_legal(self) -> None:
        state = WallMazeState.from_seed(0, self.CONFIG)
        assert beam_search_action(state, 10, 4, use_hash=True) in state.legal_actions()

    def test_transposition_keeps_first_pushed(self) -> None:
        # 幅 2 で (1,) → (0,) の順に展開される。(0, 0) は (1, 0) と同じ局面なので捨てる
        hashed = beam_search(TranspositionState(), 2, 2, use_hash=True)  # type: ignore[arg-type]
        assert hashed is not None
        assert hashed.state == TranspositionState((1, 0))
        assert hashed.first_action == 1
        assert hashed.evaluated_score == 9

    def test_without_hash_duplicate_survives(self) -> None:
        plain = beam_search(TranspositionState(), 2, 2)  # type: ignore[arg-type]
        assert plain is not None
        assert plain.state == TranspositionState((0, 0))
        assert plain.first_action == 0
        assert plain.evaluated_score == 12

    def test_depth0_duplicates_are_kept(self) -> None:
        # (0,) と (1,) は同じハッシュだが、深さ 0 の展開は枝刈りしない
        best = beam_search(TranspositionState(), 3, 1, use_hash=True)  # type: ignore[arg-type]
        assert best is not None
        assert best.first_action == 1
        assert best.evaluated_score == 5


class TestChokudaiSearch:
    @pytest.mark.parametrize("seed", range(5))
    def test_single_round_width_one_matches_beam(self, seed: int) -> None:
        state = MazeState.from_seed(seed, MAZE_CONFIG)
        assert chokudai_search_action(state, 1, 4, 1) == beam_search_action(state, 1, 4)

    def test_fixed_board_more_rounds(self) -> None:
        assert chokudai_search_action(_fixed_state(), 1, 4, 4) == 0

    def test_returns_legal_action(self) -> None:
        state = MazeState.from_seed(7)
        assert chokudai_search_action(state, 2, 4, 3) in state.legal_actions()

    def test_no_legal_action_gives_invalid(self) -> None:
        state = MazeState(points=(0,), character=Coord(0, 0), config=MazeConfig(1, 1, 4))
        assert chokudai_search_action(state, 1, 4, 2) == INVALID_ACTION

    def test_invalid_beam_number(self) -> None:
        with pytest.raises(ValueError):
            chokudai_search_action(_fixed_state(), 1, 4, 0)

    def test_deadline_still_runs_first_round(self) -> None:
        action = chokudai_search_action(_fixed_state(), 1, 4, 100, time_keeper=TimeKeeper(0))
        assert action == beam_search_action(_fixed_state(), 1, 4)

    def test_terminal_best_is_left_in_beam(self) -> None:
        # 残り 1 ターンなのに深さ 3。深さ 1 の最良候補は終局しているので
        # どの周でも取り出されない（展開すれば advance が IllegalActionError を投げる）
        state = MazeState(
            points=(0, 2, 1, 7, 0, 0, 0, 0, 0), character=Coord(0, 0), config=MazeConfig(3, 3, 1)
        )
        assert chokudai_search_action(state, 2, 3, 3) == 2  # 下の 7 点
