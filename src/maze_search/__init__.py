"""maze-search: game-tree search algorithms on small grid mazes."""

__version__ = "0.1.0"
