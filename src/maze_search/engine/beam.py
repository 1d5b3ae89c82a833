"""Beam search and Chokudai search for single-agent mazes.

ビームサーチ系の探索。どちらも「評価値の高い局面だけを幅 beam_width 個残して
深さ方向に展開する」点は同じで、展開の順序が異なる。

- ビームサーチ:   深さ 0 → 1 → 2 … と 1 段ずつ全幅を展開する
- chokudai サーチ: 全深さを幅の小さいビームで何周も展開する（時間で打ち切りやすい）
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field

from maze_search.engine.time_keeper import TimeKeeper, should_stop
from maze_search.game.protocol import ScoredGameState
from maze_search.game.types import INVALID_ACTION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BeamEntry:
    """A candidate in a beam.

    state:           局面のスナップショット
    evaluated_score: state.evaluate_score() の値（大きいほど良い）
    first_action:    ルート局面からこの局面に至る最初の手
    """

    state: ScoredGameState
    evaluated_score: int
    first_action: int


@dataclass
class Beam:
    """Max-priority queue of beam entries keyed on evaluated_score.

    評価値の降順に取り出す優先度付きキュー。
    同点の場合は先に push したエントリを先に取り出す（再現性のため）。
    """

    _heap: list[tuple[int, int, BeamEntry]] = field(default_factory=list)
    _counter: itertools.count = field(default_factory=itertools.count)

    def push(self, entry: BeamEntry) -> None:
        # heapq は最小ヒープなので評価値の符号を反転して格納する
        heapq.heappush(self._heap, (-entry.evaluated_score, next(self._counter), entry))

    def pop(self) -> BeamEntry:
        return heapq.heappop(self._heap)[2]

    def peek(self) -> BeamEntry:
        return self._heap[0][2]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


def _root_entry(state: ScoredGameState) -> BeamEntry:
    return BeamEntry(state, state.evaluate_score(), INVALID_ACTION)


def _check_width_depth(beam_width: int, beam_depth: int) -> None:
    if beam_width < 1:
        raise ValueError(f"beam_width must be >= 1, got {beam_width}")
    if beam_depth < 1:
        raise ValueError(f"beam_depth must be >= 1, got {beam_depth}")


def beam_search(
    state: ScoredGameState,
    beam_width: int,
    beam_depth: int,
    *,
    use_hash: bool = False,
    time_keeper: TimeKeeper | None = None,
) -> BeamEntry | None:
    """Run beam search and return the best surviving candidate.

    ビームサーチを実行し、最後に残った最良候補を返す。

    アルゴリズム:
    1. ルート局面だけを入れたビームから始める
    2. 各深さで、ビームの上位 beam_width 個を全合法手で展開して次のビームを作る
    3. 次のビームの最良候補が終局していれば打ち切る
    4. 最後に残った最良候補を返す

    use_hash=True のとき、同じ深さで既に出現したハッシュの局面は捨てる
    （トランスポジションの重複展開を防ぐ。state は hash 属性を持つこと）。
    深さ 0 の展開は枝刈りしない。

    ある深さで候補が 1 つも作れなかった場合は、直前の深さの最良候補を返す。
    ルートから 1 手も展開できなければ None を返す。
    """
    _check_width_depth(beam_width, beam_depth)
    now_beam = Beam()
    now_beam.push(_root_entry(state))
    best: BeamEntry | None = None

    for t in range(beam_depth):
        if t > 0 and should_stop(time_keeper):
            logger.debug("beam search stopped by deadline at depth %d", t)
            break

        next_beam = Beam()
        seen: set[int] = set()  # この深さで出現済みのハッシュ
        for _ in range(beam_width):
            if not now_beam:
                break
            entry = now_beam.pop()
            if entry.state.is_done:
                continue
            for action in entry.state.legal_actions():
                next_state = entry.state.advance(action)
                if use_hash:
                    h = next_state.hash  # type: ignore[attr-defined]
                    if t >= 1 and h in seen:
                        continue  # 既出局面は先着を残して捨てる
                    seen.add(h)
                first_action = action if t == 0 else entry.first_action
                next_beam.push(
                    BeamEntry(next_state, next_state.evaluate_score(), first_action)
                )

        if not next_beam:
            logger.debug("beam exhausted at depth %d", t)
            break
        now_beam = next_beam
        best = next_beam.peek()
        if best.state.is_done:
            break

    return best


def beam_search_action(
    state: ScoredGameState,
    beam_width: int,
    beam_depth: int,
    *,
    use_hash: bool = False,
    time_keeper: TimeKeeper | None = None,
) -> int:
    """Return the first action of the best beam-search candidate.

    候補が作れなかった場合は INVALID_ACTION を返す。
    """
    best = beam_search(
        state, beam_width, beam_depth, use_hash=use_hash, time_keeper=time_keeper
    )
    if best is None:
        return INVALID_ACTION
    logger.debug(
        "beam search (width=%d, depth=%d) chose %d with score %d",
        beam_width,
        beam_depth,
        best.first_action,
        best.evaluated_score,
    )
    return best.first_action


def chokudai_search_action(
    state: ScoredGameState,
    beam_width: int,
    beam_depth: int,
    beam_number: int,
    *,
    time_keeper: TimeKeeper | None = None,
) -> int:
    """Return the first action chosen by Chokudai search.

    chokudai サーチで最善手を返す。

    深さごとのビーム beam[0..beam_depth] を用意し、beam_number 周にわたって
    各深さ t の上位 beam_width 個を取り出して beam[t + 1] へ展開する。
    周回を重ねるほど全深さの探索が少しずつ深まる（途中で打ち切っても結果が出る）。

    取り出そうとした最良候補が終局済みなら、その深さの展開はその周では打ち切る
    （終局局面は取り出さずビームに残す）。

    探索後、最も深い空でないビームの最良候補の first_action を返す。
    どのビームにも候補がない場合は INVALID_ACTION を返す（設定ミスを示す）。
    """
    _check_width_depth(beam_width, beam_depth)
    if beam_number < 1:
        raise ValueError(f"beam_number must be >= 1, got {beam_number}")

    beams = [Beam() for _ in range(beam_depth + 1)]
    beams[0].push(_root_entry(state))

    for cnt in range(beam_number):
        if cnt > 0 and should_stop(time_keeper):
            logger.debug("chokudai search stopped by deadline after %d rounds", cnt)
            break
        for t in range(beam_depth):
            now_beam = beams[t]
            next_beam = beams[t + 1]
            for _ in range(beam_width):
                if not now_beam:
                    break
                if now_beam.peek().state.is_done:
                    break
                entry = now_beam.pop()
                for action in entry.state.legal_actions():
                    next_state = entry.state.advance(action)
                    first_action = action if t == 0 else entry.first_action
                    next_beam.push(
                        BeamEntry(next_state, next_state.evaluate_score(), first_action)
                    )

    for t in range(beam_depth, -1, -1):
        if beams[t]:
            return beams[t].peek().first_action
    return INVALID_ACTION
