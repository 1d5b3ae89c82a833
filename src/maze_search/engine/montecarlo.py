"""Primitive Monte Carlo search.

原始モンテカルロ法: 各合法手についてランダムプレイアウト（終局までランダムに
指し進める対局）を繰り返し、平均勝率が最も高い手を選ぶ。
探索木は作らない。MCTS のベースラインとして使う。
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from maze_search.engine.random_player import random_action, random_simultaneous_action
from maze_search.game.protocol import GameState, SimultaneousGameState

logger = logging.getLogger(__name__)


def playout(state: GameState, rng: random.Random | None = None) -> float:
    """Play random moves to the end and score it for the side to move now.

    交互手番ゲームのプレイアウト。
    戻り値は「state の手番側」から見た勝ち点（勝ち=1.0, 負け=0.0, 引き分け=0.5）。

    再帰で書くと「終局なら勝ち点、そうでなければ 1 − playout(次の局面)」となる。
    ここでは再帰の代わりにループで進め、手番が入れ替わった回数の偶奇で反転する。
    """
    flipped = False
    while not state.is_done:
        state = state.advance(random_action(state, rng))
        flipped = not flipped  # 1 手ごとに視点が相手に移る
    value = state.get_winning_status().value_for_win_rate
    return 1.0 - value if flipped else value


def simultaneous_playout(
    state: SimultaneousGameState, rng: random.Random | None = None
) -> float:
    """Play random simultaneous moves to the end.

    同時手番ゲームのプレイアウト。両者が同時に動くので視点の反転は不要で、
    戻り値は常にプレイヤー 0 から見た勝ち点。
    """
    while not state.is_done:
        state = state.advance(
            random_simultaneous_action(state, 0, rng),
            random_simultaneous_action(state, 1, rng),
        )
    return state.get_first_player_score_for_win_rate()


@dataclass
class ActionStats:
    """Accumulated playout results for one candidate action."""

    action: int
    value_sum: float = 0.0
    count: int = 0

    @property
    def mean(self) -> float:
        # 1 回もプレイアウトしていない手は選ばれないよう -inf とする
        if self.count == 0:
            return float("-inf")
        return self.value_sum / self.count


def evaluate_actions(
    state: GameState,
    playout_number: int,
    rng: random.Random | None = None,
) -> list[ActionStats]:
    """Spread playouts over the legal actions round-robin.

    playout_number 回のプレイアウトを合法手に順番に割り当てる
    （cnt 回目は cnt % 合法手数 番目の手）。
    各手の価値は「1 − 相手視点のプレイアウト結果」で自分視点に直す。
    """
    if playout_number < 1:
        raise ValueError(f"playout_number must be >= 1, got {playout_number}")
    actions = state.legal_actions()
    if not actions:
        raise ValueError("No legal actions available")

    stats = [ActionStats(action) for action in actions]
    for cnt in range(playout_number):
        entry = stats[cnt % len(actions)]
        next_state = state.advance(entry.action)
        entry.value_sum += 1.0 - playout(next_state, rng)
        entry.count += 1
    return stats


def primitive_montecarlo_action(
    state: GameState,
    playout_number: int,
    rng: random.Random | None = None,
) -> int:
    """Return the action with the highest mean playout value.

    同点の場合は先に並んでいる手を優先する。
    """
    stats = evaluate_actions(state, playout_number, rng)
    best = stats[0]
    for entry in stats[1:]:
        if entry.mean > best.mean:
            best = entry
    logger.debug(
        "primitive montecarlo (%d playouts) chose %d with mean %.3f",
        playout_number,
        best.action,
        best.mean,
    )
    return best.action


def simultaneous_primitive_montecarlo_action(
    state: SimultaneousGameState,
    player_id: int,
    playout_number: int,
    rng: random.Random | None = None,
) -> int:
    """Primitive Monte Carlo for one player of a simultaneous game.

    自分の各合法手について playout_number 回ずつ、相手の手を一様ランダムに選んで
    1 ターン進め、そこからプレイアウトする。相手の手は探索しない。
    プレイヤー 1 の場合はプレイヤー 0 視点の勝ち点を反転して使う。
    """
    if playout_number < 1:
        raise ValueError(f"playout_number must be >= 1, got {playout_number}")
    my_actions = state.legal_actions(player_id)
    opp_actions = state.legal_actions(1 - player_id)
    if not my_actions or not opp_actions:
        raise ValueError("No legal actions available")

    best_action = my_actions[0]
    best_value = float("-inf")
    for action in my_actions:
        value = 0.0
        for _ in range(playout_number):
            opp_action = (rng or random).choice(opp_actions)
            if player_id == 0:
                next_state = state.advance(action, opp_action)
            else:
                next_state = state.advance(opp_action, action)
            player0_win_rate = simultaneous_playout(next_state, rng)
            value += player0_win_rate if player_id == 0 else 1.0 - player0_win_rate
        if value > best_value:
            best_value = value
            best_action = action
    return best_action
