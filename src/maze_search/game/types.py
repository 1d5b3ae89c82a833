"""Types and constants shared by every maze variant.

迷路ゲーム共通の型・定数定義。
行動は 4 方向（右・左・下・上）の整数 ID で表す。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique

# 行動 ID → 移動量。インデックスが行動 ID に対応する（0=右, 1=左, 2=下, 3=上）
DX: tuple[int, ...] = (1, -1, 0, 0)
DY: tuple[int, ...] = (0, 0, 1, -1)
ACTION_NAMES: tuple[str, ...] = ("RIGHT", "LEFT", "DOWN", "UP")
NUM_ACTIONS = 4

# 「手が決まらなかった」ことを表す番兵。どの合法手 ID とも衝突しない
INVALID_ACTION = -1


@unique
class WinningStatus(IntEnum):
    """Outcome of a finished game.

    対局結果。交互手番ゲームでは「手番側プレイヤー」から見た結果、
    同時手番ゲームではプレイヤー 0 から見た結果を表す。
    """

    WIN = 0
    LOSE = 1
    DRAW = 2
    NONE = 3  # 対局中

    @property
    def value_for_win_rate(self) -> float:
        """勝ち=1.0, 負け=0.0, それ以外=0.5 に変換する。"""
        if self == WinningStatus.WIN:
            return 1.0
        if self == WinningStatus.LOSE:
            return 0.0
        return 0.5


@dataclass(frozen=True)
class Coord:
    """A cell on the board (row y, column x)."""

    y: int
    x: int

    def moved(self, action: int) -> Coord:
        """行動 action の方向に 1 マス動かした座標を返す。"""
        return Coord(self.y + DY[action], self.x + DX[action])


@dataclass(frozen=True)
class Character:
    """A character on a two-player board and the points it has collected.

    対戦ゲームのキャラクター。位置と獲得スコアを持つ。
    """

    pos: Coord
    game_score: int = 0

    def moved(self, action: int) -> Character:
        return Character(self.pos.moved(action), self.game_score)

    def scored(self, point: int) -> Character:
        return Character(self.pos, self.game_score + point)


@dataclass(frozen=True)
class MazeConfig:
    """Board geometry and game length.

    盤面サイズと終了ターン数。

    Attributes:
        height:   盤面の高さ（行数）
        width:    盤面の幅（列数）
        end_turn: このターン数に達したら終局
    """

    height: int
    width: int
    end_turn: int

    def __post_init__(self) -> None:
        if self.height <= 0 or self.width <= 0:
            raise ValueError("board dimensions must be positive")
        if self.end_turn < 0:
            raise ValueError("end_turn must be non-negative")

    @property
    def num_cells(self) -> int:
        return self.height * self.width

    def contains(self, coord: Coord) -> bool:
        """座標が盤面内なら True。"""
        return 0 <= coord.y < self.height and 0 <= coord.x < self.width

    def index(self, coord: Coord) -> int:
        """座標を行優先のフラットなインデックスに変換する。"""
        return coord.y * self.width + coord.x


# 1 人用迷路のプリセット: 3×4 盤面、4 ターン
MAZE_CONFIG = MazeConfig(height=3, width=4, end_turn=4)

# 壁あり迷路のプリセット: 7×7 盤面、49 ターン
WALL_MAZE_CONFIG = MazeConfig(height=7, width=7, end_turn=49)

# 対戦ゲーム（交互・同時）のプリセット: 3×3 盤面、4 ターン
ALTERNATE_MAZE_CONFIG = MazeConfig(height=3, width=3, end_turn=4)
SIMULTANEOUS_MAZE_CONFIG = MazeConfig(height=3, width=3, end_turn=4)

# 自動移動迷路のプリセット: 5×5 盤面、5 ターン
AUTO_MOVE_MAZE_CONFIG = MazeConfig(height=5, width=5, end_turn=5)
