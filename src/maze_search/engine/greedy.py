"""Greedy player: one-step lookahead on the exact score."""

from __future__ import annotations

from maze_search.game.protocol import GameState


def greedy_action(state: GameState) -> int:
    """Return the action whose successor has the highest score.

    貪欲法: 各合法手を 1 手だけ試し、直後のスコアが最大になる手を選ぶ。
    同点の場合は先に見つかった手を優先する（合法手の順序に依存して安定）。
    """
    actions = state.legal_actions()
    if not actions:
        raise ValueError("No legal actions available")

    best_action = actions[0]
    best_score = float("-inf")
    for action in actions:
        score = state.advance(action).get_score()
        if score > best_score:  # 厳密な > なので同点は先勝ち
            best_score = score
            best_action = action
    return best_action
