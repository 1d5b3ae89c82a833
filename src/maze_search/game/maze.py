"""Single-agent scoring maze.

1 人用の得点迷路。キャラクターを 1 マスずつ動かし、
止まったマスの得点を回収する。決められたターン数で終了し、合計得点を競う。
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

import torch

from maze_search.game.display import single_to_str
from maze_search.game.errors import IllegalActionError
from maze_search.game.types import (
    MAZE_CONFIG,
    NUM_ACTIONS,
    Coord,
    MazeConfig,
    WinningStatus,
)


@dataclass(frozen=True)  # イミュータブル: advance() は新しいオブジェクトを返す
class MazeState:
    """Immutable state of the single-agent maze.

    points: 行優先のフラットなタプル。points[y * width + x] がマス (y, x) の得点。
    """

    points: tuple[int, ...]
    character: Coord
    config: MazeConfig = MAZE_CONFIG
    turn: int = 0
    game_score: int = 0

    @classmethod
    def from_seed(cls, seed: int, config: MazeConfig = MAZE_CONFIG) -> MazeState:
        """Generate a maze deterministically from a seed.

        シードから迷路を生成する。同じシードなら必ず同じ盤面になる。
        キャラクターの初期位置以外の全マスに 1〜9 点を置く。
        """
        rng = random.Random(seed)
        character = Coord(
            rng.randint(0, 10) % config.height,
            rng.randint(0, 10) % config.width,
        )
        points = [0] * config.num_cells
        for y in range(config.height):
            for x in range(config.width):
                if y == character.y and x == character.x:
                    continue
                points[y * config.width + x] = rng.randint(1, 9)
        return cls(points=tuple(points), character=character, config=config)

    @property
    def is_done(self) -> bool:
        return self.turn == self.config.end_turn

    def legal_actions(self) -> list[int]:
        """盤面外に出ない方向だけを返す。"""
        return [
            action
            for action in range(NUM_ACTIONS)
            if self.config.contains(self.character.moved(action))
        ]

    def advance(self, action: int) -> MazeState:
        """Move the character and collect the point it lands on."""
        if self.is_done:
            raise IllegalActionError(action, "game is already finished")
        if action not in self.legal_actions():
            raise IllegalActionError(action, f"not legal at {self.character}")

        character = self.character.moved(action)
        idx = self.config.index(character)
        points = list(self.points)
        game_score = self.game_score + points[idx]
        points[idx] = 0  # 回収済みのマスは 0 点になる
        return MazeState(
            points=tuple(points),
            character=character,
            config=self.config,
            turn=self.turn + 1,
            game_score=game_score,
        )

    def get_score(self) -> int:
        return self.game_score

    def evaluate_score(self) -> int:
        # このゲームでは現在の得点をそのまま評価値とする
        return self.game_score

    def get_winning_status(self) -> WinningStatus:
        # 1 人用ゲームに勝敗はないので、終局なら引き分け扱い
        return WinningStatus.DRAW if self.is_done else WinningStatus.NONE

    def to_tensor_planes(self) -> torch.Tensor:
        """Convert to feature planes.

        ch.0: 各マスの得点（1/9 で正規化）
        ch.1: キャラクターの位置
        """
        h, w = self.config.height, self.config.width
        planes = torch.zeros(2, h, w)
        planes[0] = torch.tensor(self.points, dtype=torch.float32).view(h, w) / 9.0
        planes[1, self.character.y, self.character.x] = 1.0
        return planes

    def __str__(self) -> str:
        return single_to_str(
            self.config, self.turn, self.game_score, self.points, self.character
        )
