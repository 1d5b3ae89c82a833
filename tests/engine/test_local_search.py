"""Tests for hill climbing and simulated annealing."""

from __future__ import annotations

import random

import pytest

from maze_search.engine.local_search import (
    hill_climb,
    random_placement,
    simulated_annealing,
    transition,
)
from maze_search.engine.time_keeper import TimeKeeper
from maze_search.game.auto_move import AutoMoveMazeState


class TestNeighbourhood:
    def test_random_placement_moves_every_character_on_board(self) -> None:
        state = random_placement(AutoMoveMazeState.from_seed(0), random.Random(3))
        assert len(state.characters) == 3
        for coord in state.characters:
            assert state.config.contains(coord)

    def test_transition_changes_at_most_one_character(self) -> None:
        rng = random.Random(0)
        state = random_placement(AutoMoveMazeState.from_seed(0), rng)
        for _ in range(20):
            nxt = transition(state, rng)
            changed = sum(a != b for a, b in zip(state.characters, nxt.characters))
            assert changed <= 1
            assert nxt.points == state.points


class TestHillClimb:
    @pytest.mark.parametrize("seed", range(5))
    def test_never_worse_than_start(self, seed: int) -> None:
        state = AutoMoveMazeState.from_seed(seed)
        start = random_placement(state, random.Random(seed))
        result = hill_climb(state, 200, random.Random(seed))
        assert result.get_score() >= start.get_score()

    def test_zero_steps_returns_start(self) -> None:
        state = AutoMoveMazeState.from_seed(1)
        start = random_placement(state, random.Random(7))
        assert hill_climb(state, 0, random.Random(7)) == start

    def test_negative_steps_rejected(self) -> None:
        with pytest.raises(ValueError):
            hill_climb(AutoMoveMazeState.from_seed(0), -1)

    def test_deadline_returns_start(self) -> None:
        state = AutoMoveMazeState.from_seed(2)
        start = random_placement(state, random.Random(1))
        result = hill_climb(state, 1000, random.Random(1), time_keeper=TimeKeeper(0))
        assert result == start


class TestSimulatedAnnealing:
    @pytest.mark.parametrize("seed", range(5))
    def test_best_not_worse_than_start(self, seed: int) -> None:
        state = AutoMoveMazeState.from_seed(seed)
        start = random_placement(state, random.Random(seed))
        result = simulated_annealing(state, 200, 500.0, 10.0, random.Random(seed))
        assert result.get_score() >= start.get_score()

    def test_same_rng_same_result(self) -> None:
        state = AutoMoveMazeState.from_seed(3)
        a = simulated_annealing(state, 100, 50.0, 1.0, random.Random(2))
        b = simulated_annealing(state, 100, 50.0, 1.0, random.Random(2))
        assert a == b

    def test_temperatures_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            simulated_annealing(AutoMoveMazeState.from_seed(0), 10, 0.0, 1.0)
        with pytest.raises(ValueError):
            simulated_annealing(AutoMoveMazeState.from_seed(0), 10, 10.0, -1.0)

    def test_without_rng_uses_global_random(self) -> None:
        state = AutoMoveMazeState.from_seed(3)
        random.seed(9)
        a = simulated_annealing(state, 50, 50.0, 1.0)
        random.seed(9)
        b = simulated_annealing(state, 50, 50.0, 1.0)
        assert a == b
