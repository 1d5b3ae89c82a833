"""Two-player simultaneous-move maze.

同時手番の対戦迷路。2 人が同時に 1 マスずつ動き、止まったマスの得点を回収する。
同じマスに同時に止まった場合は 2 人とも得点を得る。
盤面は左右対称に生成するので、先手・後手の有利不利がない。
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace

import torch

from maze_search.game.alternate import AlternateMazeState, initial_characters
from maze_search.game.display import two_player_to_str
from maze_search.game.errors import IllegalActionError
from maze_search.game.types import (
    NUM_ACTIONS,
    SIMULTANEOUS_MAZE_CONFIG,
    Character,
    Coord,
    MazeConfig,
    WinningStatus,
)


@dataclass(frozen=True)
class SimultaneousMazeState:
    """Immutable state of the simultaneous two-player maze.

    characters は常にプレイヤー ID 順（交互手番版と違い入れ替えない）。
    """

    points: tuple[int, ...]
    characters: tuple[Character, Character]
    config: MazeConfig = SIMULTANEOUS_MAZE_CONFIG
    turn: int = 0

    @classmethod
    def from_seed(
        cls, seed: int, config: MazeConfig = SIMULTANEOUS_MAZE_CONFIG
    ) -> SimultaneousMazeState:
        """Generate a left-right symmetric board from a seed.

        マス (y, x) と鏡像マス (y, W-1-x) に同じ得点を置く。
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
                points[y * config.width + (config.width - 1 - x)] = point
        return cls(points=tuple(points), characters=characters, config=config)

    @property
    def is_done(self) -> bool:
        return self.turn == self.config.end_turn

    def legal_actions(self, player_id: int) -> list[int]:
        pos = self.characters[player_id].pos
        return [
            action
            for action in range(NUM_ACTIONS)
            if self.config.contains(pos.moved(action))
        ]

    def advance(self, action0: int, action1: int) -> SimultaneousMazeState:
        """Move both characters at once.

        1. 2 人を同時に移動させ、それぞれ移動先の得点を加算
        2. 2 人の移動先のマスを 0 点にする（同じマスなら 2 人とも得点済み）
        """
        if self.is_done:
            raise IllegalActionError(action0, "game is already finished")
        for player_id, action in enumerate((action0, action1)):
            if action not in self.legal_actions(player_id):
                raise IllegalActionError(action, f"not legal for player {player_id}")

        moved: list[Character] = []
        for character, action in zip(self.characters, (action0, action1)):
            nxt = character.moved(action)
            point = self.points[self.config.index(nxt.pos)]
            if point > 0:
                nxt = nxt.scored(point)
            moved.append(nxt)

        points = list(self.points)
        for character in moved:
            points[self.config.index(character.pos)] = 0
        return SimultaneousMazeState(
            points=tuple(points),
            characters=(moved[0], moved[1]),
            config=self.config,
            turn=self.turn + 1,
        )

    def get_score(self) -> int:
        return self.characters[0].game_score - self.characters[1].game_score

    def get_score_rate(self) -> float:
        """プレイヤー 0 の得点シェア。2 人とも 0 点なら 0.0。"""
        total = self.characters[0].game_score + self.characters[1].game_score
        if total == 0:
            return 0.0
        return self.characters[0].game_score / total

    def get_winning_status(self) -> WinningStatus:
        """プレイヤー 0 から見た勝敗。"""
        if not self.is_done:
            return WinningStatus.NONE
        score = self.get_score()
        if score > 0:
            return WinningStatus.WIN
        if score < 0:
            return WinningStatus.LOSE
        return WinningStatus.DRAW

    def get_first_player_score_for_win_rate(self) -> float:
        return self.get_winning_status().value_for_win_rate

    def to_alternate(self, player_id: int) -> AlternateMazeState:
        """Re-derive an alternating view where player_id moves first.

        同時手番ゲームを「player_id が先に動き、相手が後から動く」交互手番ゲーム
        として見直す。ターン数と終了ターンは 2 倍になる。
        交互手番用の MCTS をそのまま同時手番ゲームに流用するために使う。
        """
        chars = self.characters if player_id == 0 else (self.characters[1], self.characters[0])
        return AlternateMazeState(
            points=self.points,
            characters=chars,
            config=replace(self.config, end_turn=self.config.end_turn * 2),
            turn=self.turn * 2,
        )

    def to_tensor_planes(self) -> torch.Tensor:
        """Convert to feature planes from player 0's perspective.

        ch.0: 各マスの得点（1/9 で正規化）
        ch.1: プレイヤー 0 の位置
        ch.2: プレイヤー 1 の位置
        """
        h, w = self.config.height, self.config.width
        planes = torch.zeros(3, h, w)
        planes[0] = torch.tensor(self.points, dtype=torch.float32).view(h, w) / 9.0
        for ch, character in enumerate(self.characters, start=1):
            planes[ch, character.pos.y, character.pos.x] = 1.0
        return planes

    def __str__(self) -> str:
        return two_player_to_str(
            self.config,
            self.turn,
            self.points,
            [c.pos for c in self.characters],
            [c.game_score for c in self.characters],
        )
