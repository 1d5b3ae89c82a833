"""Auto-moving multi-character maze (a placement problem).

自動で動く迷路。プレイヤーが決めるのはキャラクターの初期配置だけで、
その後は各キャラクターが「隣接マスのうち得点が最大のマスへ進む」規則で
自動的に動く。良い初期配置を局所探索（山登り法・焼きなまし法）で探す。
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace

from maze_search.game.display import AGENT_CHAR, board_to_str
from maze_search.game.types import AUTO_MOVE_MAZE_CONFIG, NUM_ACTIONS, Coord, MazeConfig

# 配置するキャラクターの数
CHARACTER_NUMBER = 3


@dataclass(frozen=True)
class AutoMoveMazeState:
    """Immutable state of the auto-moving maze.

    characters: 各キャラクターの位置。from_seed 直後は全員 (0, 0) で未配置。
    """

    points: tuple[int, ...]
    characters: tuple[Coord, ...]
    config: MazeConfig = AUTO_MOVE_MAZE_CONFIG
    turn: int = 0
    game_score: int = 0

    @classmethod
    def from_seed(
        cls,
        seed: int,
        config: MazeConfig = AUTO_MOVE_MAZE_CONFIG,
        character_number: int = CHARACTER_NUMBER,
    ) -> AutoMoveMazeState:
        """Generate a board with 1 to 9 points on every cell."""
        if character_number < 1:
            raise ValueError("character_number must be >= 1")
        rng = random.Random(seed)
        points = tuple(rng.randint(1, 9) for _ in range(config.num_cells))
        return cls(points=points, characters=(Coord(0, 0),) * character_number, config=config)

    @property
    def is_done(self) -> bool:
        return self.turn == self.config.end_turn

    def with_character(self, character_id: int, coord: Coord) -> AutoMoveMazeState:
        """character_id 番のキャラクターを coord に置いた新しい状態を返す。"""
        if not self.config.contains(coord):
            raise ValueError(f"{coord} is outside the board")
        characters = list(self.characters)
        characters[character_id] = coord
        return replace(self, characters=tuple(characters))

    def _next_coord(self, coord: Coord) -> Coord:
        # 得点が最大の隣接マスへ。同点なら右・左・下・上の順で先のもの
        best = coord
        best_point = -1
        for action in range(NUM_ACTIONS):
            nxt = coord.moved(action)
            if not self.config.contains(nxt):
                continue
            point = self.points[self.config.index(nxt)]
            if point > best_point:
                best_point = point
                best = nxt
        return best

    def advance(self) -> AutoMoveMazeState:
        """Move every character greedily, then collect points.

        1. 全キャラクターを（得点を回収する前の盤面で）1 マス動かす
        2. キャラクター順に移動先の得点を加算し、そのマスを 0 点にする
           （同じマスに複数いる場合は先のキャラクターだけが得点する）
        """
        characters = tuple(self._next_coord(c) for c in self.characters)
        points = list(self.points)
        game_score = self.game_score
        for coord in characters:
            idx = self.config.index(coord)
            game_score += points[idx]
            points[idx] = 0
        return replace(
            self,
            points=tuple(points),
            characters=characters,
            turn=self.turn + 1,
            game_score=game_score,
        )

    def simulate(self) -> AutoMoveMazeState:
        """Play the placement out to the end and return the final state.

        初期配置のマスの得点は回収できない（開始前に 0 点にする）。
        """
        points = list(self.points)
        for coord in self.characters:
            points[self.config.index(coord)] = 0
        state = replace(self, points=tuple(points))
        while not state.is_done:
            state = state.advance()
        return state

    def get_score(self) -> int:
        """この配置で終局まで進めたときの得点。配置の評価値として使う。"""
        return self.simulate().game_score

    def __str__(self) -> str:
        header = f"turn:\t{self.turn}\nscore:\t{self.game_score}"
        marks = {coord: AGENT_CHAR for coord in self.characters}
        return f"{header}\n{board_to_str(self.config, self.points, marks)}"
