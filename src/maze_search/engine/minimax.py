"""Minimax search (negamax form) for alternating two-player mazes."""

from __future__ import annotations

import logging

from maze_search.game.protocol import GameState

logger = logging.getLogger(__name__)


def mini_max_score(state: GameState, depth: int) -> int:
    """Negamax value of a state from the side to move.

    ネガマックス法による局面評価。

    ネガマックス法とは:
    ミニマックス法の変形で、常に「現在のプレイヤーにとっての評価値」を
    返すようにする。相手番の評価値は符号を反転させることで統一できる。

    枝刈りは行わない（素朴な全探索。αβ法と比べるためのベースライン）。
    葉ノードでは評価関数ではなく実際のスコア差 get_score() を返す。
    """
    # 終局または探索深さ0: スコア差をそのまま返す（葉ノード）
    if state.is_done or depth == 0:
        return state.get_score()

    actions = state.legal_actions()
    if not actions:
        return state.get_score()  # 手がない局面は葉として扱う

    best_score = float("-inf")
    for action in actions:
        # 相手番の評価値を符号反転して自分の視点に変換（ネガマックスの核心）
        score = -mini_max_score(state.advance(action), depth - 1)
        if score > best_score:
            best_score = score
    return int(best_score)


def mini_max_action(state: GameState, depth: int) -> int:
    """Return the action maximizing the negamax value.

    ミニマックス探索で最善手を返す。同点は先に見つかった手を優先する。
    depth に残りターン数以上を指定すると、終局までの完全読みになる。
    """
    if depth < 1:
        raise ValueError(f"depth must be >= 1, got {depth}")
    actions = state.legal_actions()
    if not actions:
        raise ValueError("No legal actions available")

    best_action = actions[0]
    best_score = float("-inf")
    for action in actions:
        score = -mini_max_score(state.advance(action), depth - 1)
        if score > best_score:
            best_score = score
            best_action = action

    logger.debug("minimax depth=%d chose %d (score %s)", depth, best_action, best_score)
    return best_action
