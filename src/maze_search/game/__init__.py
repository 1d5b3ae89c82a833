"""Maze game states used by the search engines."""

from maze_search.game.alternate import AlternateMazeState
from maze_search.game.auto_move import AutoMoveMazeState
from maze_search.game.errors import IllegalActionError, MazeError
from maze_search.game.maze import MazeState
from maze_search.game.protocol import (
    GameState,
    HashableGameState,
    ScoredGameState,
    SimultaneousGameState,
)
from maze_search.game.simultaneous import SimultaneousMazeState
from maze_search.game.types import INVALID_ACTION, Coord, MazeConfig, WinningStatus
from maze_search.game.wall_maze import WallMazeState

__all__ = [
    "AlternateMazeState",
    "AutoMoveMazeState",
    "Coord",
    "GameState",
    "HashableGameState",
    "INVALID_ACTION",
    "IllegalActionError",
    "MazeConfig",
    "MazeError",
    "MazeState",
    "ScoredGameState",
    "SimultaneousGameState",
    "SimultaneousMazeState",
    "WallMazeState",
    "WinningStatus",
]
