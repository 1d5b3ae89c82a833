"""Monte Carlo Tree Search (UCT) with random playouts."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field

from maze_search.engine.montecarlo import playout
from maze_search.engine.time_keeper import TimeKeeper, should_stop
from maze_search.game.protocol import GameState, SimultaneousGameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MCTSConfig:
    """Configuration for MCTS search."""

    c: float = 1.0  # UCB1 の探索係数（大きいほど探索重視）
    expand_threshold: int = 10  # この回数訪問された葉ノードを展開する

    def __post_init__(self) -> None:
        if self.c < 0:
            raise ValueError("c must be non-negative")
        if self.expand_threshold < 1:
            raise ValueError("expand_threshold must be >= 1")


@dataclass(eq=False)
class MCTSNode:
    """A node in the MCTS tree.

    MCTSの探索木の1ノード。各ノードは1つの局面に対応する。

    w:        このノードを通じたプレイアウト結果の合計（このノードの手番側視点）
    n:        このノードが評価された回数
    children: 子ノード。展開済みなら legal_actions() と同じ順で 1 手 1 ノード
    """

    state: GameState
    w: float = 0.0
    n: int = 0
    children: list[MCTSNode] = field(default_factory=list)

    @property
    def q_value(self) -> float:
        """Average value (w/n)."""
        if self.n == 0:
            return 0.0
        return self.w / self.n

    def expand(self) -> None:
        """合法手ごとに子ノードを作る。"""
        self.children = [
            MCTSNode(self.state.advance(action)) for action in self.state.legal_actions()
        ]

    def evaluate(self, config: MCTSConfig, rng: random.Random | None = None) -> float:
        """Run one simulation through this node and back the value up.

        1回のシミュレーション（選択→展開→プレイアウト→バックアップ）。
        戻り値: このノードの手番側から見た価値（勝ち=1.0, 負け=0.0, 引き分け=0.5）

        1. 終局ノード: 実際の勝敗をそのまま使う
        2. 葉ノード:   ランダムプレイアウトで価値を見積もる。
                       訪問回数が expand_threshold に達したら子ノードを作る
        3. 内部ノード: UCB1 で子を選んで再帰し、子の価値を反転（1 − 値）して使う
        """
        if self.state.is_done:
            value = self.state.get_winning_status().value_for_win_rate
        elif not self.children:
            value = playout(self.state, rng)
            if self.n + 1 == config.expand_threshold:
                self.expand()
        else:
            # 子ノードは相手の手番なので、相手視点の価値を自分視点に反転する
            value = 1.0 - self.next_child_node(config).evaluate(config, rng)

        self.w += value
        self.n += 1
        return value

    def next_child_node(self, config: MCTSConfig) -> MCTSNode:
        """Select a child: untried first, then highest UCB1.

        UCB1 スコアで子ノードを選ぶ。

        UCB1 = (1 − w/n) + c * sqrt(2 * ln(T) / n)

        1 − w/n: 子（相手視点）の平均価値を自分視点に反転したもの（活用）
        T:       全子ノードの訪問回数の合計
        n:       この子の訪問回数（少ないほど探索ボーナスが大きい）

        未訪問（n == 0）の子があれば、先頭から順に必ずそれを選ぶ。
        これにより UCB1 の計算時に n == 0 で割ることはない。
        """
        for child in self.children:
            if child.n == 0:
                return child

        t = sum(child.n for child in self.children)
        best_child = self.children[0]
        best_value = float("-inf")
        for child in self.children:
            ucb1 = 1.0 - child.w / child.n + config.c * math.sqrt(
                2.0 * math.log(t) / child.n
            )
            if ucb1 > best_value:
                best_value = ucb1
                best_child = child
        return best_child


class MCTS:
    """Monte Carlo Tree Search with random playouts.

    ニューラルネットを使わない素朴な UCT。葉ノードの価値はランダムプレイアウトで
    見積もる。

    アルゴリズムの4ステップ:
    1. 選択 (Selection):     UCB1 スコアで子ノードを選ぶ
    2. 展開 (Expansion):     十分訪問された葉ノードに子を作る
    3. プレイアウト (Playout): 葉からランダムに終局まで指す
    4. バックアップ (Backup):  結果を反転しながら根ノードまで伝播
    """

    def __init__(
        self,
        config: MCTSConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or MCTSConfig()
        self.rng = rng

    def search(
        self,
        state: GameState,
        playout_number: int,
        time_keeper: TimeKeeper | None = None,
    ) -> MCTSNode:
        """Grow a tree from state and return its root.

        ルートは最初に展開し、playout_number 回（または時間切れまで）評価する。
        """
        if state.is_done:
            raise ValueError("Cannot search from a finished game")
        if not state.legal_actions():
            raise ValueError("No legal actions available")

        root = MCTSNode(state)
        root.expand()
        for i in range(playout_number):
            if should_stop(time_keeper):
                logger.debug("mcts stopped by deadline after %d playouts", i)
                break
            root.evaluate(self.config, self.rng)
        return root

    def best_action(
        self,
        state: GameState,
        playout_number: int,
        time_keeper: TimeKeeper | None = None,
    ) -> int:
        """Return the most visited root action (robust child).

        平均価値ではなく訪問回数が最大の手を選ぶ。同数なら先の手を優先する。
        """
        root = self.search(state, playout_number, time_keeper)
        actions = state.legal_actions()
        best_index = 0
        best_n = -1
        for i, child in enumerate(root.children):
            if child.n > best_n:
                best_n = child.n
                best_index = i
        logger.debug(
            "mcts (%d playouts) chose %d with %d visits",
            root.n,
            actions[best_index],
            best_n,
        )
        return actions[best_index]


def mcts_action(
    state: GameState,
    playout_number: int,
    rng: random.Random | None = None,
    config: MCTSConfig | None = None,
    time_keeper: TimeKeeper | None = None,
) -> int:
    """Return the best action for the side to move using MCTS."""
    return MCTS(config, rng).best_action(state, playout_number, time_keeper)


def simultaneous_mcts_action(
    state: SimultaneousGameState,
    player_id: int,
    playout_number: int,
    rng: random.Random | None = None,
    config: MCTSConfig | None = None,
    time_keeper: TimeKeeper | None = None,
) -> int:
    """MCTS on the alternating view of a simultaneous game.

    同時手番ゲームを「player_id が先に動く交互手番ゲーム」に読み替えて MCTS を行う。
    相手は自分の手を見てから動けることになるので、自分にとって悲観的な見積もりになる。
    """
    alternate = state.to_alternate(player_id)  # type: ignore[attr-defined]
    return mcts_action(alternate, playout_number, rng, config, time_keeper)
