"""Random player: selects a legal action uniformly at random.

ランダムプレイヤー: 合法手の中からランダムに手を選ぶ。

用途:
- 実装の動作確認（ルールが正しく実装されているかテスト）
- ベースラインとの対戦（ランダムに勝てないAIは弱すぎる）
- モンテカルロ法のプレイアウト方策
"""

from __future__ import annotations

import random

from maze_search.game.protocol import GameState, SimultaneousGameState


def random_action(state: GameState, rng: random.Random | None = None) -> int:
    """Return a random legal action.

    合法手の中から一様ランダムで1手を返す。
    rng を渡すと再現性のある乱数列を使う（テスト用）。
    合法手がない場合は ValueError を送出する（終局局面では呼ばれないはず）。
    """
    actions = state.legal_actions()
    if not actions:
        raise ValueError("No legal actions available")
    return (rng or random).choice(actions)  # 一様ランダムサンプリング


def random_simultaneous_action(
    state: SimultaneousGameState,
    player_id: int,
    rng: random.Random | None = None,
) -> int:
    """Return a random legal action for one player of a simultaneous game."""
    actions = state.legal_actions(player_id)
    if not actions:
        raise ValueError(f"No legal actions available for player {player_id}")
    return (rng or random).choice(actions)
