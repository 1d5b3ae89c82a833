"""Text rendering for maze boards.

迷路の盤面をターミナル表示用の文字列に変換するモジュール。
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from maze_search.game.types import Coord, MazeConfig

EMPTY_CHAR = "."
WALL_CHAR = "#"
AGENT_CHAR = "@"
PLAYER_CHARS = ("A", "B")  # プレイヤー 0 = A, プレイヤー 1 = B


def board_to_str(
    config: MazeConfig,
    points: Sequence[int],
    marks: Mapping[Coord, str],
    walls: Sequence[int] = (),
) -> str:
    """Render the board grid.

    盤面を文字列に変換する。

    Example output (3×4, キャラクターは左上):
        @295
        1.37
        8641

    描画の優先順位: 壁 "#" > キャラクター > 得点の数字 > 空マス "."
    """
    lines: list[str] = []
    for y in range(config.height):
        row: list[str] = []
        for x in range(config.width):
            idx = y * config.width + x
            coord = Coord(y, x)
            if walls and walls[idx]:
                row.append(WALL_CHAR)
            elif coord in marks:
                row.append(marks[coord])
            elif points[idx] > 0:
                row.append(str(points[idx]))
            else:
                row.append(EMPTY_CHAR)
        lines.append("".join(row))
    return "\n".join(lines)


def single_to_str(
    config: MazeConfig,
    turn: int,
    game_score: int,
    points: Sequence[int],
    character: Coord,
    walls: Sequence[int] = (),
) -> str:
    """Render a single-agent maze with its turn and score header."""
    header = f"turn:\t{turn}\nscore:\t{game_score}"
    board = board_to_str(config, points, {character: AGENT_CHAR}, walls)
    return f"{header}\n{board}"


def two_player_to_str(
    config: MazeConfig,
    turn: int,
    points: Sequence[int],
    positions: Sequence[Coord],
    scores: Sequence[int],
) -> str:
    """Render a two-player maze.

    positions / scores は実際のプレイヤー ID 順（0=A, 1=B）で渡すこと。
    同じマスに 2 人いる場合は後のプレイヤー（B）が表示される。
    """
    lines = [f"turn:\t{turn}"]
    for player_id, (pos, score) in enumerate(zip(positions, scores)):
        lines.append(f"score({player_id})\t {score}\ty:{pos.y} x:{pos.x}")
    marks = {pos: PLAYER_CHARS[i] for i, pos in enumerate(positions)}
    lines.append(board_to_str(config, points, marks))
    return "\n".join(lines)
