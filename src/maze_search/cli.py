"""CLI entry point for maze-search: watch one search algorithm play a maze.

コマンドラインで 1 局分の対局を表示するデモプログラム。

起動方法: `maze-search --algorithm beam --seed 11`
"""

from __future__ import annotations

import argparse
import logging
import random
from collections.abc import Callable

from maze_search.engine.beam import beam_search_action, chokudai_search_action
from maze_search.engine.duct import duct_action
from maze_search.engine.greedy import greedy_action
from maze_search.engine.local_search import hill_climb, simulated_annealing
from maze_search.engine.mcts import mcts_action
from maze_search.engine.minimax import mini_max_action
from maze_search.engine.montecarlo import primitive_montecarlo_action
from maze_search.engine.random_player import random_action, random_simultaneous_action
from maze_search.game.alternate import AlternateMazeState
from maze_search.game.auto_move import AutoMoveMazeState
from maze_search.game.maze import MazeState
from maze_search.game.protocol import GameState
from maze_search.game.simultaneous import SimultaneousMazeState
from maze_search.game.types import ACTION_NAMES, INVALID_ACTION
from maze_search.game.wall_maze import WallMazeState

SINGLE_AGENT = ("random", "greedy", "beam", "chokudai", "wall-beam")
ALTERNATING = ("minimax", "montecarlo", "mcts")
SIMULTANEOUS = ("duct",)
AUTO_MOVE = ("hill-climb", "annealing")


def _single_agent_fn(name: str, rng: random.Random) -> Callable[[GameState], int]:
    if name == "random":
        return lambda s: random_action(s, rng)
    if name == "greedy":
        return greedy_action
    if name == "beam":
        return lambda s: beam_search_action(s, beam_width=2, beam_depth=4)  # type: ignore[arg-type]
    if name == "chokudai":
        return lambda s: chokudai_search_action(s, 1, 4, 2)  # type: ignore[arg-type]
    # 7×7 盤面で毎ターン最後まで読むので、幅は控えめにする
    return lambda s: beam_search_action(s, 20, 49, use_hash=True)  # type: ignore[arg-type]


def _alternating_fn(name: str, rng: random.Random) -> Callable[[GameState], int]:
    if name == "minimax":
        return lambda s: mini_max_action(s, depth=4)
    if name == "montecarlo":
        return lambda s: primitive_montecarlo_action(s, 1000, rng)
    return lambda s: mcts_action(s, 1000, rng)


def play_single(name: str, seed: int) -> None:
    """1 人用迷路を 1 局プレイして各ターンの盤面を表示する。"""
    rng = random.Random(seed)
    state: GameState
    if name == "wall-beam":
        state = WallMazeState.from_seed(seed)
    else:
        state = MazeState.from_seed(seed)
    fn = _single_agent_fn(name, rng)
    print(state)
    print()
    while not state.is_done:
        action = fn(state)
        if action == INVALID_ACTION:
            raise SystemExit("search returned no decision")
        state = state.advance(action)
        print(f"action: {ACTION_NAMES[action]}")
        print(state)
        print()
    print(f"Final score: {state.get_score()}")


def play_alternating(name: str, seed: int) -> None:
    """先手 = 指定アルゴリズム、後手 = ランダムで交互手番迷路を 1 局プレイする。"""
    rng = random.Random(seed)
    state = AlternateMazeState.from_seed(seed)
    players = (_alternating_fn(name, rng), lambda s: random_action(s, rng))
    print(state)
    print()
    ply = 0
    while not state.is_done:
        print(f"{ply % 2 + 1}p ------------------------------------")
        action = players[ply % 2](state)
        state = state.advance(action)
        print(f"action: {ACTION_NAMES[action]}")
        print(state)
        print()
        ply += 1

    first = state.get_first_player_score_for_win_rate()
    if first == 1.0:
        print(f"winner: 1p ({name})")
    elif first == 0.0:
        print("winner: 2p (random)")
    else:
        print("DRAW")


def play_simultaneous(seed: int) -> None:
    """プレイヤー 0 = DUCT、プレイヤー 1 = ランダムで同時手番迷路を 1 局プレイする。"""
    rng = random.Random(seed)
    state = SimultaneousMazeState.from_seed(seed)
    print(state)
    print()
    while not state.is_done:
        action0 = duct_action(state, 0, 1000, rng)
        action1 = random_simultaneous_action(state, 1, rng)
        state = state.advance(action0, action1)
        print(f"actions: {ACTION_NAMES[action0]} {ACTION_NAMES[action1]}")
        print(state)
        print()
    print(f"Score difference (A - B): {state.get_score()}")


def play_auto_move(name: str, seed: int) -> None:
    """局所探索で初期配置を決め、自動移動迷路を終局まで表示する。"""
    rng = random.Random(seed)
    state = AutoMoveMazeState.from_seed(seed)
    if name == "hill-climb":
        state = hill_climb(state, 10000, rng)
    else:
        state = simulated_annealing(state, 10000, 500.0, 10.0, rng)
    print(state)
    print()
    final = state.simulate()
    print(final)
    print()
    print(f"Score of {name}: {final.game_score}")


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and play one game."""
    parser = argparse.ArgumentParser(description="Watch a search algorithm play a maze.")
    parser.add_argument(
        "--algorithm",
        choices=SINGLE_AGENT + ALTERNATING + SIMULTANEOUS + AUTO_MOVE,
        default="greedy",
    )
    parser.add_argument("--seed", type=int, default=11)
    parser.add_argument("--verbose", action="store_true", help="show search debug logs")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.algorithm in SINGLE_AGENT:
        play_single(args.algorithm, args.seed)
    elif args.algorithm in ALTERNATING:
        play_alternating(args.algorithm, args.seed)
    elif args.algorithm in AUTO_MOVE:
        play_auto_move(args.algorithm, args.seed)
    else:
        play_simultaneous(args.seed)


if __name__ == "__main__":
    main()
