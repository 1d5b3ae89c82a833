"""Zobrist hashing for single-agent mazes.

Zobrist ハッシュ: 「マス c にキャラクターがいる」「マス c に p 点がある」という
事実ごとに 64bit の乱数を割り当て、成り立っている事実の乱数をすべて XOR した値を
局面のハッシュとする。XOR は可換・結合的なので、同じ局面には経路によらず同じ
ハッシュが付く（トランスポジション検出に使える）。

衝突は検出しない。異なる局面が同じハッシュになる確率は十分小さいとして許容する。
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from functools import lru_cache

# 1 マスに置かれる得点の最大値（1..9 点）
MAX_POINT = 9


class ZobristTable:
    """Immutable random tables for (cell, point) and (cell, character) facts.

    固定シードから一度だけ生成し、以降は変更しない。
    """

    def __init__(self, num_cells: int, seed: int = 0) -> None:
        rng = random.Random(seed)
        # points[cell][p]: マス cell に p 点がある。p=0 は「点なし」なので使わない
        self._points: tuple[tuple[int, ...], ...] = tuple(
            (0,) + tuple(rng.getrandbits(64) for _ in range(MAX_POINT))
            for _ in range(num_cells)
        )
        # character[cell]: マス cell にキャラクターがいる
        self._character: tuple[int, ...] = tuple(
            rng.getrandbits(64) for _ in range(num_cells)
        )
        self.num_cells = num_cells

    def point(self, cell: int, value: int) -> int:
        """マス cell に value 点があるという事実の乱数。"""
        if not 1 <= value <= MAX_POINT:
            raise ValueError(f"point value must be in 1..{MAX_POINT}, got {value}")
        return self._points[cell][value]

    def character(self, cell: int) -> int:
        """マス cell にキャラクターがいるという事実の乱数。"""
        return self._character[cell]

    def initial_hash(self, character_cell: int, points: Sequence[int]) -> int:
        """Compute a hash from scratch.

        キャラクター位置と、正の得点を持つ全マスの乱数を XOR する。
        以後の更新は advance() 内の差分 XOR だけで行う。
        """
        h = self._character[character_cell]
        for cell, value in enumerate(points):
            if value > 0:
                h ^= self._points[cell][value]
        return h


@lru_cache(maxsize=None)
def get_table(num_cells: int, seed: int = 0) -> ZobristTable:
    """Return the process-wide table for a board size.

    盤面サイズごとに 1 つのテーブルを共有する（生成は初回のみ）。
    """
    return ZobristTable(num_cells, seed)
