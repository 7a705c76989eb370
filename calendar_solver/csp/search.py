# -*- coding: utf-8 -*-
"""
バックトラック探索を行うモジュールです。

ざっくり流れ
------------
1. MRV で次に割り当てる会議（変数）を選ぶ
2. その会議のドメインを日付順に1つずつ試す
3. 仮に割り当てたら、その会議を参照する制約のうち
   「すべての会議が割り当て済みになった制約」だけをチェックする
4. （forward checking 有効時）隣の未割り当て会議のドメインを、
   二項制約を単項制約に落として絞り込む。空になったら次の値へ
5. 再帰して、完全な割り当てが返ってきたらそのまま上に返す（最初の解で終了）
6. 全部だめなら None を返して親に戻る（バックトラック）

各フレームは「割り当てのコピー」と「ドメインのスナップショット」を
自分専用に持つので、子フレームの変更が親に漏れることはありません。
"""

from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from .. import config
from ..errors import SearchLimitExceeded
from ..logging_utils import get_logger
from ..types import Assignment, Constraint
from .constraints import index_by_variable, is_satisfied, reduce
from .domains import DateDomain, snapshot
from .propagation import filter_unary

logger = get_logger()

# 再帰上限は全スレッド共通なので、同時に走っている探索の深さをまとめて管理する
_recursion_lock = threading.Lock()
_active_depths: List[int] = []
_base_recursion_limit = sys.getrecursionlimit()


@dataclass
class SearchContext:
    """
    探索全体で共有する情報をまとめたクラスです。
    """

    constraints_by_var: List[List[Constraint]]
    forward_checking: bool = field(default_factory=lambda: config.FORWARD_CHECKING)
    max_nodes: Optional[int] = field(default_factory=lambda: config.MAX_SEARCH_NODES)

    nodes_visited: int = 0
    backtracks: int = 0

    def count_node(self) -> None:
        self.nodes_visited += 1

        if self.max_nodes is not None and self.nodes_visited > self.max_nodes:
            raise SearchLimitExceeded(self.max_nodes, self.nodes_visited)

        if self.nodes_visited % config.PROGRESS_LOG_INTERVAL == 0:
            logger.info(
                "[search] nodes_visited = %d, backtracks = %d",
                self.nodes_visited,
                self.backtracks,
            )


def choose_next_var(
    assignment: Assignment,
    domains: List[DateDomain],
) -> int | None:
    """
    次に割り当てるべき会議（変数）を選びます。

    MRV（Minimum Remaining Values）:
    - 未割り当てで、ドメインサイズが 2 以上のもののうち最小のもの
    - 同じなら、インデックスが小さいものを優先
    - 未割り当ての会議がすべてドメインサイズ 1 以下なら、
      分岐は不要なのでインデックス最小のものをそのまま割り当てる
    """
    unassigned = [v for v, d in enumerate(assignment) if d is None]
    if not unassigned:
        return None

    branching = [v for v in unassigned if len(domains[v]) > 1]
    if branching:
        return min(branching, key=lambda v: (len(domains[v]), v))
    return unassigned[0]


def is_consistent(ctx: SearchContext, var: int, assignment: Assignment) -> bool:
    """var を参照する制約のうち、関係するものがすべて満たされているか。"""
    return all(is_satisfied(c, assignment) for c in ctx.constraints_by_var[var])


def forward_check(
    ctx: SearchContext,
    var: int,
    value: date,
    assignment: Assignment,
    domains: List[DateDomain],
) -> bool:
    """
    var = value を前提に、隣接する未割り当て会議のドメインを絞ります。

    二項制約を reduce で単項制約に落とし、ノード整合と同じ処理を
    スナップショット側のドメインに適用します。
    どこかが空になったら False。
    """
    for c in ctx.constraints_by_var[var]:
        if c.arity != 2:
            continue
        other = c.right if c.left == var else c.left
        if assignment[other] is not None:
            continue
        if filter_unary(domains[other], reduce(c, var, value)).is_empty():
            return False
    return True


def backtrack(
    ctx: SearchContext,
    assignment: Assignment,
    domains: List[DateDomain],
) -> Optional[List[date]]:
    """
    部分割り当て assignment から再帰的に探索します。

    Returns
    -------
    list[date] or None
        完全な割り当て。この枝に解がなければ None。
    """
    var = choose_next_var(assignment, domains)
    if var is None:
        return list(assignment)

    # このフレームで試す候補（日付順）
    candidates = list(domains[var])

    for value in candidates:
        ctx.count_node()

        child_assignment = list(assignment)
        child_assignment[var] = value

        if not is_consistent(ctx, var, child_assignment):
            ctx.backtracks += 1
            continue

        child_domains = snapshot(domains)
        child_domains[var].collapse_to(value)

        if ctx.forward_checking and not forward_check(
            ctx, var, value, child_assignment, child_domains
        ):
            ctx.backtracks += 1
            continue

        result = backtrack(ctx, child_assignment, child_domains)
        if result is not None:
            return result

        ctx.backtracks += 1

    return None


@contextmanager
def deeper_recursion(depth: int) -> Iterator[None]:
    """
    with ブロックの間だけ、再帰上限を depth 段ぶん広げます。

    抜けるときは、まだ走っている他の探索に必要な分だけ残して元に戻します。
    """
    global _base_recursion_limit

    with _recursion_lock:
        if not _active_depths:
            _base_recursion_limit = sys.getrecursionlimit()
        _active_depths.append(depth)
        sys.setrecursionlimit(_base_recursion_limit + max(_active_depths))
    try:
        yield
    finally:
        with _recursion_lock:
            _active_depths.remove(depth)
            sys.setrecursionlimit(_base_recursion_limit + max(_active_depths, default=0))


def backtracking_search(
    domains: List[DateDomain],
    constraints: Iterable[Constraint],
    max_nodes: Any = config.USE_CONFIG,
    forward_checking: Optional[bool] = None,
) -> Tuple[Optional[List[date]], SearchContext]:
    """
    バックトラック探索のエントリポイントです。

    Parameters
    ----------
    domains : list[DateDomain]
        前処理済みのドメイン（会議インデックス順）。変更はされません。
    constraints : iterable of Constraint
        全制約。
    max_nodes : int or None
        探索ノード数の上限。超えたら SearchLimitExceeded。
        None なら上限なし。省略時は config.MAX_SEARCH_NODES。
    forward_checking : bool, optional
        forward checking を行うかどうか。省略時は config.FORWARD_CHECKING。

    Returns
    -------
    solution : list[date] or None
        見つかった解。解がなければ None。
    ctx : SearchContext
        探索の統計情報（nodes_visited, backtracks）。
    """
    if max_nodes is config.USE_CONFIG:
        max_nodes = config.MAX_SEARCH_NODES
    if forward_checking is None:
        forward_checking = config.FORWARD_CHECKING

    ctx = SearchContext(
        constraints_by_var=index_by_variable(constraints, len(domains)),
        forward_checking=forward_checking,
        max_nodes=max_nodes,
    )

    initial_assignment: Assignment = [None] * len(domains)

    # 会議1つにつき backtrack が1段深くなる
    with deeper_recursion(len(domains)):
        solution = backtrack(ctx, initial_assignment, snapshot(domains))

    logger.info(
        "[search] finished: solved=%s, nodes_visited=%d, backtracks=%d",
        solution is not None,
        ctx.nodes_visited,
        ctx.backtracks,
    )
    return solution, ctx
