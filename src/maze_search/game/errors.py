"""Exceptions raised by maze game states."""

from __future__ import annotations


class MazeError(Exception):
    """Base class for maze game errors."""


class IllegalActionError(MazeError, ValueError):
    """Raised when advancing with an illegal action or from a finished game.

    終局後の advance や非合法手の適用はプログラムのバグなので、
    黙って無視せずに即座に例外を送出する。
    """

    def __init__(self, action: int, reason: str) -> None:
        super().__init__(f"illegal action {action}: {reason}")
        self.action = action
        self.reason = reason
