"""Single-agent maze with walls and an incrementally maintained Zobrist hash.

壁あり迷路。壁のマスには移動できない。
評価関数は「得点 × 盤面サイズ − 最寄りの得点マスまでの距離」で、
同点の局面では得点マスに近いほうを高く評価する。
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass

import torch

from maze_search.game.display import single_to_str
from maze_search.game.errors import IllegalActionError
from maze_search.game.types import (
    DX,
    DY,
    NUM_ACTIONS,
    WALL_MAZE_CONFIG,
    Coord,
    MazeConfig,
    WinningStatus,
)
from maze_search.game.zobrist import get_table


def _generate_walls(rng: random.Random, config: MazeConfig, character: Coord) -> list[int]:
    """Lay walls with the pillar-falling method.

    棒倒し法: 奇数座標のマスに柱を立て、柱をランダムな 1 方向に倒す。
    1 行目の柱は上下左右の 4 方向、それ以外は上を除く 3 方向に倒す
    （通路が閉じないようにするため）。キャラクターのマスには壁を置かない。
    """
    walls = [0] * config.num_cells
    for y in range(1, config.height, 2):
        for x in range(1, config.width, 2):
            if y == character.y and x == character.x:
                continue
            walls[y * config.width + x] = 1
            direction_size = 4 if y == 1 else 3
            direction = rng.randrange(direction_size)
            ty = y + DY[direction]
            tx = x + DX[direction]
            if ty == character.y and tx == character.x:
                continue
            if not config.contains(Coord(ty, tx)):
                continue  # 偶数サイズの盤面では端の柱が盤面外に倒れうる
            walls[ty * config.width + tx] = 1
    return walls


@dataclass(frozen=True)
class WallMazeState:
    """Immutable state of the walled single-agent maze."""

    points: tuple[int, ...]
    walls: tuple[int, ...]
    character: Coord
    hash: int
    config: MazeConfig = WALL_MAZE_CONFIG
    turn: int = 0
    game_score: int = 0

    @classmethod
    def from_seed(cls, seed: int, config: MazeConfig = WALL_MAZE_CONFIG) -> WallMazeState:
        """Generate a walled maze deterministically from a seed.

        壁以外・キャラクター位置以外のマスに 0〜9 点を置く。
        """
        rng = random.Random(seed)
        character = Coord(rng.randrange(config.height), rng.randrange(config.width))
        walls = _generate_walls(rng, config, character)
        points = [0] * config.num_cells
        for y in range(config.height):
            for x in range(config.width):
                idx = y * config.width + x
                if (y == character.y and x == character.x) or walls[idx]:
                    continue
                points[idx] = rng.randint(0, 9)
        return cls.from_layout(points, walls, character, config)

    @classmethod
    def from_layout(
        cls,
        points: list[int] | tuple[int, ...],
        walls: list[int] | tuple[int, ...],
        character: Coord,
        config: MazeConfig = WALL_MAZE_CONFIG,
    ) -> WallMazeState:
        """Build a state from an explicit layout and compute its hash from scratch."""
        if len(points) != config.num_cells or len(walls) != config.num_cells:
            raise ValueError("layout size does not match the board")
        table = get_table(config.num_cells)
        return cls(
            points=tuple(points),
            walls=tuple(walls),
            character=character,
            hash=table.initial_hash(config.index(character), points),
            config=config,
        )

    @property
    def is_done(self) -> bool:
        return self.turn == self.config.end_turn

    def _is_open(self, coord: Coord) -> bool:
        return self.config.contains(coord) and not self.walls[self.config.index(coord)]

    def legal_actions(self) -> list[int]:
        """盤面外と壁のマスを除いた方向を返す。"""
        return [
            action
            for action in range(NUM_ACTIONS)
            if self._is_open(self.character.moved(action))
        ]

    def advance(self, action: int) -> WallMazeState:
        """Move, collect the point and update the hash by XOR deltas.

        ハッシュは全体を再計算せず、変化した事実の乱数だけを XOR で出し入れする:
        1. 移動元のキャラクター乱数を XOR（取り除く）
        2. 移動先のキャラクター乱数を XOR（加える）
        3. 移動先に得点があれば、その得点の乱数を XOR（取り除く）
        """
        if self.is_done:
            raise IllegalActionError(action, "game is already finished")
        if action not in self.legal_actions():
            raise IllegalActionError(action, f"not legal at {self.character}")

        table = get_table(self.config.num_cells)
        character = self.character.moved(action)
        idx = self.config.index(character)

        h = self.hash
        h ^= table.character(self.config.index(self.character))
        h ^= table.character(idx)

        points = list(self.points)
        point = points[idx]
        game_score = self.game_score
        if point > 0:
            h ^= table.point(idx, point)
            game_score += point
            points[idx] = 0

        return WallMazeState(
            points=tuple(points),
            walls=self.walls,
            character=character,
            hash=h,
            config=self.config,
            turn=self.turn + 1,
            game_score=game_score,
        )

    def distance_to_nearest_point(self) -> int:
        """BFS distance to the closest cell that still holds points.

        幅優先探索で最寄りの得点マスまでの歩数を求める。
        到達できる得点マスがなければ盤面のマス数を返す。
        """
        cfg = self.config
        queue: deque[tuple[Coord, int]] = deque([(self.character, 0)])
        seen = {self.character}
        while queue:
            coord, distance = queue.popleft()
            if self.points[cfg.index(coord)] > 0:
                return distance
            for action in range(NUM_ACTIONS):
                nxt = coord.moved(action)
                if nxt not in seen and self._is_open(nxt):
                    seen.add(nxt)
                    queue.append((nxt, distance + 1))
        return cfg.num_cells

    def evaluate_score(self) -> int:
        # 得点を最優先し、同点なら得点マスに近いほうを高く評価する
        return self.game_score * self.config.num_cells - self.distance_to_nearest_point()

    def get_score(self) -> int:
        return self.game_score

    def get_winning_status(self) -> WinningStatus:
        return WinningStatus.DRAW if self.is_done else WinningStatus.NONE

    def to_tensor_planes(self) -> torch.Tensor:
        """Convert to feature planes.

        ch.0: 各マスの得点（1/9 で正規化）
        ch.1: キャラクターの位置
        ch.2: 壁
        """
        h, w = self.config.height, self.config.width
        planes = torch.zeros(3, h, w)
        planes[0] = torch.tensor(self.points, dtype=torch.float32).view(h, w) / 9.0
        planes[1, self.character.y, self.character.x] = 1.0
        planes[2] = torch.tensor(self.walls, dtype=torch.float32).view(h, w)
        return planes

    def __str__(self) -> str:
        return single_to_str(
            self.config,
            self.turn,
            self.game_score,
            self.points,
            self.character,
            self.walls,
        )
