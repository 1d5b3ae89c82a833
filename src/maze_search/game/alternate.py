"""Two-player alternating-move maze.

交互手番の対戦迷路。2 人のキャラクターが交互に 1 マスずつ動き、
止まったマスの得点を回収する。終局時の得点が多いほうの勝ち。

characters[0] は常に「これから手を指すプレイヤー」。
advance() のたびに 2 人を入れ替えることで、探索側はいつでも
「自分 = characters[0]」として評価でき、ネガマックス法と相性が良い。
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import torch

from maze_search.game.display import two_player_to_str
from maze_search.game.errors import IllegalActionError
from maze_search.game.types import (
    ALTERNATE_MAZE_CONFIG,
    NUM_ACTIONS,
    Character,
    Coord,
    MazeConfig,
    WinningStatus,
)


def initial_characters(config: MazeConfig) -> tuple[Character, Character]:
    """中央行の左右に 2 人を配置する。"""
    return (
        Character(Coord(config.height // 2, config.width // 2 - 1)),
        Character(Coord(config.height // 2, config.width // 2 + 1)),
    )


@dataclass(frozen=True)
class AlternateMazeState:
    """Immutable state of the alternating two-player maze."""

    points: tuple[int, ...]
    characters: tuple[Character, Character]
    config: MazeConfig = ALTERNATE_MAZE_CONFIG
    turn: int = 0

    @classmethod
    def from_seed(
        cls, seed: int, config: MazeConfig = ALTERNATE_MAZE_CONFIG
    ) -> AlternateMazeState:
        """Generate a board deterministically from a seed.

        キャラクターのいないマスに 0〜9 点を置く。
        乱数はキャラクターのマスでも 1 回消費する（盤面の再現性を保つため）。
        """
        rng = random.Random(seed)
        characters = initial_characters(config)
        occupied = {c.pos for c in characters}
        points = [0] * config.num_cells
        for y in range(config.height):
            for x in range(config.width):
                point = rng.randint(0, 9)
                if Coord(y, x) in occupied:
                    continue
                points[y * config.width + x] = point
        return cls(points=tuple(points), characters=characters, config=config)

    @property
    def is_done(self) -> bool:
        return self.turn == self.config.end_turn

    def is_first_player(self) -> bool:
        """手番側がプレイヤー 0（先手）なら True。"""
        return self.turn % 2 == 0

    def legal_actions(self) -> list[int]:
        """手番側キャラクターが盤面外に出ない方向を返す。"""
        pos = self.characters[0].pos
        return [
            action
            for action in range(NUM_ACTIONS)
            if self.config.contains(pos.moved(action))
        ]

    def advance(self, action: int) -> AlternateMazeState:
        """Move the side to move, collect its point and pass the turn."""
        if self.is_done:
            raise IllegalActionError(action, "game is already finished")
        if action not in self.legal_actions():
            raise IllegalActionError(action, f"not legal at {self.characters[0].pos}")

        mover = self.characters[0].moved(action)
        idx = self.config.index(mover.pos)
        points = list(self.points)
        if points[idx] > 0:
            mover = mover.scored(points[idx])
            points[idx] = 0
        return AlternateMazeState(
            points=tuple(points),
            characters=(self.characters[1], mover),  # 手番交代
            config=self.config,
            turn=self.turn + 1,
        )

    def get_score(self) -> int:
        """手番側のスコア − 相手のスコア（ゼロサム）。"""
        return self.characters[0].game_score - self.characters[1].game_score

    def get_winning_status(self) -> WinningStatus:
        """手番側から見た勝敗。対局中は NONE。"""
        if not self.is_done:
            return WinningStatus.NONE
        score = self.get_score()
        if score > 0:
            return WinningStatus.WIN
        if score < 0:
            return WinningStatus.LOSE
        return WinningStatus.DRAW

    def get_first_player_score_for_win_rate(self) -> float:
        """先手（プレイヤー 0）から見た勝ち点: 勝ち=1.0, 負け=0.0, 引き分け=0.5。"""
        value = self.get_winning_status().value_for_win_rate
        return value if self.is_first_player() else 1.0 - value

    def player_characters(self) -> tuple[Character, Character]:
        """実際のプレイヤー ID 順（0, 1）に並べたキャラクターを返す。"""
        if self.is_first_player():
            return self.characters
        return (self.characters[1], self.characters[0])

    def to_tensor_planes(self) -> torch.Tensor:
        """Convert to feature planes from the side-to-move perspective.

        ch.0: 各マスの得点（1/9 で正規化）
        ch.1: 手番側キャラクターの位置
        ch.2: 相手キャラクターの位置
        """
        h, w = self.config.height, self.config.width
        planes = torch.zeros(3, h, w)
        planes[0] = torch.tensor(self.points, dtype=torch.float32).view(h, w) / 9.0
        for ch, character in enumerate(self.characters, start=1):
            planes[ch, character.pos.y, character.pos.x] = 1.0
        return planes

    def __str__(self) -> str:
        chars = self.player_characters()
        return two_player_to_str(
            self.config,
            self.turn,
            self.points,
            [c.pos for c in chars],
            [c.game_score for c in chars],
        )
