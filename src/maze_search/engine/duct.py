"""Decoupled UCT (DUCT) for simultaneous two-player games.

同時手番ゲーム用の MCTS。子ノードを (プレイヤー0の手, プレイヤー1の手) の
2 次元グリッドで持ち、各プレイヤーは自分の手の「周辺化した」統計だけを見て
独立に UCB1 で手を選ぶ。
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field

from maze_search.engine.montecarlo import simultaneous_playout
from maze_search.engine.time_keeper import TimeKeeper, should_stop
from maze_search.game.protocol import SimultaneousGameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DUCTConfig:
    """Configuration for DUCT search."""

    c: float = 1.0
    expand_threshold: int = 5

    def __post_init__(self) -> None:
        if self.c < 0:
            raise ValueError("c must be non-negative")
        if self.expand_threshold < 1:
            raise ValueError("expand_threshold must be >= 1")


@dataclass(eq=False)
class DUCTNode:
    """A node of the DUCT tree.

    w: プレイヤー 0 視点の価値の合計（反転しない）
    n: 評価回数
    children[i][j]: プレイヤー 0 が i 番目、プレイヤー 1 が j 番目の手を
                    指した局面のノード
    """

    state: SimultaneousGameState
    w: float = 0.0
    n: int = 0
    children: list[list[DUCTNode]] = field(default_factory=list)

    def expand(self) -> None:
        actions0 = self.state.legal_actions(0)
        actions1 = self.state.legal_actions(1)
        self.children = [
            [DUCTNode(self.state.advance(a0, a1)) for a1 in actions1] for a0 in actions0
        ]

    def evaluate(self, config: DUCTConfig, rng: random.Random | None = None) -> float:
        """Run one simulation and back up the player-0 value.

        MCTS と同じ流れだが、同時手番なので子の価値を反転せずにそのまま加算する。
        """
        if self.state.is_done:
            value = self.state.get_first_player_score_for_win_rate()
        elif not self.children:
            value = simultaneous_playout(self.state, rng)
            if self.n + 1 == config.expand_threshold:
                self.expand()
        else:
            value = self.next_child_node(config).evaluate(config, rng)

        self.w += value
        self.n += 1
        return value

    def row_stats(self, i: int) -> tuple[float, int]:
        """プレイヤー 0 の i 番目の手について (w, n) を合計する。"""
        row = self.children[i]
        return sum(c.w for c in row), sum(c.n for c in row)

    def column_stats(self, j: int) -> tuple[float, int]:
        """プレイヤー 1 の j 番目の手について (w, n) を合計する。"""
        column = [row[j] for row in self.children]
        return sum(c.w for c in column), sum(c.n for c in column)

    def next_child_node(self, config: DUCTConfig) -> DUCTNode:
        """Pick a joint child from two independent marginal UCB1 choices.

        未訪問の子があれば行優先で先頭から選ぶ。
        全て訪問済みなら:
        - プレイヤー 0: 行ごとに集計した w/n に探索ボーナスを足して最大の行
        - プレイヤー 1: 列ごとに集計し、プレイヤー 0 視点の価値を反転した
                        1 − w/n に探索ボーナスを足して最大の列
        2 人の選択は互いに独立（一方の最大値が他方の選択に影響しない）。
        """
        for row in self.children:
            for child in row:
                if child.n == 0:
                    return child

        t = sum(c.n for row in self.children for c in row)
        log_t = math.log(t)

        best_i = 0
        best_value = float("-inf")
        for i in range(len(self.children)):
            w, n = self.row_stats(i)
            ucb1 = w / n + config.c * math.sqrt(2.0 * log_t / n)
            if ucb1 > best_value:
                best_value = ucb1
                best_i = i

        best_j = 0
        best_value = float("-inf")
        for j in range(len(self.children[0])):
            w, n = self.column_stats(j)
            ucb1 = 1.0 - w / n + config.c * math.sqrt(2.0 * log_t / n)
            if ucb1 > best_value:
                best_value = ucb1
                best_j = j

        return self.children[best_i][best_j]


def duct_search(
    state: SimultaneousGameState,
    playout_number: int,
    rng: random.Random | None = None,
    config: DUCTConfig | None = None,
    time_keeper: TimeKeeper | None = None,
) -> DUCTNode:
    """Grow a DUCT tree from state and return its root."""
    if state.is_done:
        raise ValueError("Cannot search from a finished game")
    config = config or DUCTConfig()
    root = DUCTNode(state)
    root.expand()
    for i in range(playout_number):
        if should_stop(time_keeper):
            logger.debug("duct stopped by deadline after %d playouts", i)
            break
        root.evaluate(config, rng)
    return root


def duct_action(
    state: SimultaneousGameState,
    player_id: int,
    playout_number: int,
    rng: random.Random | None = None,
    config: DUCTConfig | None = None,
    time_keeper: TimeKeeper | None = None,
) -> int:
    """Return player_id's most visited action at the root.

    プレイヤー 0 なら訪問回数の合計が最大の行、プレイヤー 1 なら最大の列の手を返す。
    同数なら先の手を優先する。
    """
    root = duct_search(state, playout_number, rng, config, time_keeper)
    actions = state.legal_actions(player_id)
    stats = root.row_stats if player_id == 0 else root.column_stats

    best_index = 0
    best_n = -1
    for index in range(len(actions)):
        _, n = stats(index)
        if n > best_n:
            best_n = n
            best_index = index
    return actions[best_index]
