"""Local search over character placements: hill climbing and simulated annealing.

局所探索: 「配置を少しだけ変えた近傍解」を作り、評価値が良ければ採用する。

- 山登り法:   改善する近傍解だけを採用する（局所最適に捕まりやすい）
- 焼きなまし法: 改悪でも温度に応じた確率で採用する（温度は時間とともに下げる）
"""

from __future__ import annotations

import logging
import math
import random

from maze_search.engine.time_keeper import TimeKeeper, should_stop
from maze_search.game.auto_move import AutoMoveMazeState
from maze_search.game.types import Coord

logger = logging.getLogger(__name__)


def _random_coord(state: AutoMoveMazeState, rng: random.Random) -> Coord:
    return Coord(rng.randrange(state.config.height), rng.randrange(state.config.width))


def random_placement(
    state: AutoMoveMazeState, rng: random.Random | None = None
) -> AutoMoveMazeState:
    """全キャラクターを一様ランダムなマスに置く（局所探索の初期解）。"""
    rng = rng or random
    for character_id in range(len(state.characters)):
        state = state.with_character(character_id, _random_coord(state, rng))
    return state


def transition(state: AutoMoveMazeState, rng: random.Random) -> AutoMoveMazeState:
    """Neighbour: move one random character to a random cell."""
    character_id = rng.randrange(len(state.characters))
    return state.with_character(character_id, _random_coord(state, rng))


def hill_climb(
    state: AutoMoveMazeState,
    number: int,
    rng: random.Random | None = None,
    time_keeper: TimeKeeper | None = None,
) -> AutoMoveMazeState:
    """Return the best placement found by hill climbing.

    山登り法: ランダムな初期配置から始め、number 回近傍を試す。
    評価値が真に良くなった近傍だけを採用する。
    """
    if number < 0:
        raise ValueError(f"number must be >= 0, got {number}")
    rng = rng or random
    now_state = random_placement(state, rng)
    best_score = now_state.get_score()
    for i in range(number):
        if should_stop(time_keeper):
            logger.debug("hill climb stopped by deadline after %d steps", i)
            break
        next_state = transition(now_state, rng)
        next_score = next_state.get_score()
        if next_score > best_score:
            best_score = next_score
            now_state = next_state
    logger.debug("hill climb (%d steps) reached score %d", number, best_score)
    return now_state


def simulated_annealing(
    state: AutoMoveMazeState,
    number: int,
    start_temp: float,
    end_temp: float,
    rng: random.Random | None = None,
    time_keeper: TimeKeeper | None = None,
) -> AutoMoveMazeState:
    """Return the best placement seen during simulated annealing.

    焼きなまし法。

    温度 temp は start_temp から end_temp まで線形に下げる。
    近傍の評価値が現在より悪くても、確率 exp((next − now) / temp) で採用する。
    温度が高い序盤は大胆に動き回り、終盤は山登り法に近づく。

    探索中に一度でも見つかった最良の配置を返す（最後の配置ではない）。
    """
    if number < 0:
        raise ValueError(f"number must be >= 0, got {number}")
    if start_temp <= 0 or end_temp <= 0:
        raise ValueError("temperatures must be positive")
    rng = rng or random

    now_state = random_placement(state, rng)
    now_score = now_state.get_score()
    best_state, best_score = now_state, now_score
    for i in range(number):
        if should_stop(time_keeper):
            logger.debug("annealing stopped by deadline after %d steps", i)
            break
        next_state = transition(now_state, rng)
        next_score = next_state.get_score()
        temp = start_temp + (end_temp - start_temp) * (i / number)
        if next_score > now_score or rng.random() < math.exp((next_score - now_score) / temp):
            now_state, now_score = next_state, next_score
        if next_score > best_score:
            best_state, best_score = next_state, next_score
    logger.debug("annealing (%d steps) reached score %d", number, best_score)
    return best_state
