"""GameState protocols: every maze variant implements one of these.

ゲーム状態の共通インタフェース（プロトコル）。

1 人用迷路・交互手番迷路・同時手番迷路がこのプロトコルを実装することで、
貪欲法・ビームサーチ・MCTS などの探索エンジンがゲームに依存せず動作できる。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import torch

from maze_search.game.types import WinningStatus


@runtime_checkable  # isinstance() でのランタイムチェックを有効にする
class GameState(Protocol):
    """Common interface for turn-based maze states.

    手番制ゲームの共通インタフェース。1 人用ゲームは手番交代がない特殊ケース。

    重要: advance() は新しい状態を返す（イミュータブル設計）。
    探索側は呼び出し元の状態を壊す心配なく、分岐ごとに advance() するだけでよい。
    """

    @property
    def is_done(self) -> bool:
        """ゲームが終了していれば True を返す。"""
        ...

    def legal_actions(self) -> list[int]:
        """合法手の ID リストを返す（順序は再現性のために固定）。"""
        ...

    def advance(self, action: int) -> GameState:
        """手を適用した新しい状態を返す（元の状態は変化しない）。"""
        ...

    def get_score(self) -> int:
        """スコアを返す。対戦ゲームでは手番側から見たスコア差。"""
        ...

    def get_winning_status(self) -> WinningStatus:
        """手番側から見た勝敗を返す。対局中は NONE。"""
        ...

    def to_tensor_planes(self) -> torch.Tensor:
        """局面を (C, H, W) の特徴プレーンに変換する。"""
        ...


@runtime_checkable
class ScoredGameState(GameState, Protocol):
    """A single-agent state with a fast heuristic for beam-style searches.

    ビームサーチ・chokudai サーチ用に、高速な評価関数を持つ 1 人用ゲーム状態。
    """

    def evaluate_score(self) -> int:
        """探索用の評価値（大きいほど良い）を返す。"""
        ...


@runtime_checkable
class HashableGameState(ScoredGameState, Protocol):
    """A scored state carrying an incrementally maintained Zobrist hash."""

    @property
    def hash(self) -> int:
        """局面のハッシュ値（同一局面なら経路によらず同じ値）。"""
        ...


@runtime_checkable
class SimultaneousGameState(Protocol):
    """Common interface for two-player simultaneous-move states.

    同時手番ゲームの共通インタフェース。
    両プレイヤーの手を同時に受け取って 1 ターン進める。
    勝敗やスコアは常にプレイヤー 0 の視点で返す。
    """

    @property
    def is_done(self) -> bool:
        ...

    def legal_actions(self, player_id: int) -> list[int]:
        """指定プレイヤーの合法手リストを返す。"""
        ...

    def advance(self, action0: int, action1: int) -> SimultaneousGameState:
        """両プレイヤーの手を同時に適用した新しい状態を返す。"""
        ...

    def get_score(self) -> int:
        """プレイヤー 0 のスコア − プレイヤー 1 のスコア。"""
        ...

    def get_winning_status(self) -> WinningStatus:
        """プレイヤー 0 から見た勝敗を返す。"""
        ...

    def get_first_player_score_for_win_rate(self) -> float:
        """プレイヤー 0 の勝ち=1.0, 負け=0.0, 引き分け=0.5。"""
        ...
