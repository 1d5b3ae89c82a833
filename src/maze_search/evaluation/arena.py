"""Arena for comparing decision functions over many seeded games.

アリーナ: 探索アルゴリズム（局面を受け取り手を返す関数）同士を対戦させたり、
1 人用ゲームの平均得点を測ったりするモジュール。
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from maze_search.game.protocol import GameState, SimultaneousGameState

logger = logging.getLogger(__name__)

# 局面 → 手 の関数（交互手番ゲーム・1 人用ゲーム）
Decision = Callable[[GameState], int]
# (局面, プレイヤー ID) → 手 の関数（同時手番ゲーム）
SimultaneousDecision = Callable[[SimultaneousGameState, int], int]


def play_alternating_game(
    first_fn: Decision,
    second_fn: Decision,
    state: GameState,
) -> GameState:
    """Play one alternating game to the end and return the final state.

    先手 first_fn・後手 second_fn で終局まで対局する。
    """
    players = (first_fn, second_fn)
    ply = 0
    while not state.is_done:
        state = state.advance(players[ply % 2](state))
        ply += 1
    return state


def first_player_win_rate(
    ais: Sequence[tuple[str, Decision]],
    game_number: int,
    state_factory: Callable[[int], GameState],
) -> float:
    """Win rate of ais[0] against ais[1] over game_number seeded boards.

    ais[0] の ais[1] に対する勝率を返す（勝ち=1, 引き分け=0.5, 負け=0）。

    各シードの盤面で先手・後手を入れ替えて 2 局ずつ対局する
    → 先手有利バイアスを打ち消す。

    state_factory: シードを受け取り初期局面を返す関数
    """
    if len(ais) != 2:
        raise ValueError("exactly two AIs are required")
    if game_number < 1:
        raise ValueError("game_number must be >= 1")

    total = 0.0
    for i in range(game_number):
        base_state = state_factory(i)
        for j in range(2):
            first_fn = ais[j][1]
            second_fn = ais[(j + 1) % 2][1]
            final = play_alternating_game(first_fn, second_fn, base_state)
            point = final.get_first_player_score_for_win_rate()  # type: ignore[attr-defined]
            if j == 1:
                point = 1.0 - point  # ais[0] が後手の局は反転
            total += point
        logger.info("game %d: running win rate %.3f", i, total / ((i + 1) * 2))

    rate = total / (game_number * 2)
    logger.info("Winning rate of %s to %s: %.3f", ais[0][0], ais[1][0], rate)
    return rate


def play_simultaneous_game(
    first_fn: SimultaneousDecision,
    second_fn: SimultaneousDecision,
    state: SimultaneousGameState,
) -> SimultaneousGameState:
    """Play one simultaneous game to the end and return the final state."""
    while not state.is_done:
        state = state.advance(first_fn(state, 0), second_fn(state, 1))
    return state


def simultaneous_first_player_win_rate(
    ais: Sequence[tuple[str, SimultaneousDecision]],
    game_number: int,
    state_factory: Callable[[int], SimultaneousGameState],
) -> float:
    """Win rate of ais[0] (as player 0) against ais[1] on simultaneous boards.

    同時手番ゲームの盤面は左右対称なので、入れ替え対局はしない。
    """
    if len(ais) != 2:
        raise ValueError("exactly two AIs are required")
    if game_number < 1:
        raise ValueError("game_number must be >= 1")

    total = 0.0
    for i in range(game_number):
        final = play_simultaneous_game(ais[0][1], ais[1][1], state_factory(i))
        total += final.get_first_player_score_for_win_rate()
        logger.info("game %d: running win rate %.3f", i, total / (i + 1))

    rate = total / game_number
    logger.info("Winning rate of %s to %s: %.3f", ais[0][0], ais[1][0], rate)
    return rate


def average_score(
    ai: tuple[str, Decision],
    game_number: int,
    state_factory: Callable[[int], GameState],
) -> float:
    """Mean final score of a single-agent decision function.

    1 人用ゲームで ai を game_number 局プレイさせ、最終得点の平均を返す。
    """
    if game_number < 1:
        raise ValueError("game_number must be >= 1")
    name, fn = ai
    total = 0
    for i in range(game_number):
        state = state_factory(i)
        while not state.is_done:
            state = state.advance(fn(state))
        total += state.get_score()
    mean = total / game_number
    logger.info("Score of %s: %.3f", name, mean)
    return mean
