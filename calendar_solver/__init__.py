# -*- coding: utf-8 -*-
"""
calendar_solver パッケージの入口となるモジュールです。

    from calendar_solver import solve

と呼び出されることを想定しています。

ここでは、会議数・日付範囲・制約を受け取り、
1. 入力チェック
2. 会議ごとの初期ドメイン（日付リスト）の作成
3. ノード整合（単項制約）
4. アーク整合（二項制約）
5. バックトラック探索
6. 解の再チェック（任意）
を順番に呼び出します。
"""

from __future__ import annotations

import time
from datetime import date
from typing import Any, Iterable, List, Optional

from . import config
from .csp.domains import build_initial_domains, domain_sizes
from .csp.propagation import preprocess
from .csp.search import backtracking_search
from .errors import InvalidProblemError, SearchLimitExceeded
from .eval.verify import find_violations
from .logging_utils import get_logger
from .types import (
    BinaryConstraint,
    Constraint,
    Operator,
    SolveReport,
    SolveStatus,
    UnaryConstraint,
)
from .validation import validate_problem

logger = get_logger()

__all__ = [
    "solve",
    "solve_with_report",
    "Operator",
    "UnaryConstraint",
    "BinaryConstraint",
    "Constraint",
    "SolveReport",
    "SolveStatus",
    "InvalidProblemError",
    "SearchLimitExceeded",
]


def solve_with_report(
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[Constraint],
    *,
    arc_mode: Optional[str] = None,
    max_nodes: Any = config.USE_CONFIG,
    forward_checking: Optional[bool] = None,
) -> SolveReport:
    """
    カレンダー CSP を解き、結果と統計情報を返します。

    Parameters
    ----------
    n_meetings : int
        会議数。会議インデックスは 0..n_meetings-1。
    range_start, range_end : datetime.date
        全会議に共通の日付範囲（両端を含む）。
    constraints : iterable of Constraint
        単項・二項制約の集合（順序は問わない）。
    arc_mode : str, optional
        "single_pass" または "ac3"。省略時は config.ARC_CONSISTENCY_MODE。
    max_nodes : int or None, optional
        探索ノード数の上限。None なら上限なし。省略時は config.MAX_SEARCH_NODES。
    forward_checking : bool, optional
        省略時は config.FORWARD_CHECKING。

    Returns
    -------
    SolveReport
        解けた場合は report.assignment に会議インデックス順の日付リスト。

    Raises
    ------
    InvalidProblemError
        入力が壊れている場合（範囲の逆転、インデックス範囲外など）。
    SearchLimitExceeded
        max_nodes を超えて探索した場合。
    """
    start_time = time.perf_counter()

    n_meetings, range_start, range_end, constraints = validate_problem(
        n_meetings, range_start, range_end, constraints
    )
    if arc_mode is None:
        arc_mode = config.ARC_CONSISTENCY_MODE
    if arc_mode not in config.ARC_CONSISTENCY_MODES:
        raise InvalidProblemError(
            f"Unknown arc consistency mode {arc_mode!r}; expected one of {config.ARC_CONSISTENCY_MODES}."
        )
    if max_nodes is config.USE_CONFIG:
        max_nodes = config.MAX_SEARCH_NODES
    if forward_checking is None:
        forward_checking = config.FORWARD_CHECKING

    logger.info("=== solve() START ===")
    logger.info(
        "Meetings=%d, Range=%s..%s, Constraints=%d, ArcMode=%s",
        n_meetings,
        range_start.isoformat(),
        range_end.isoformat(),
        len(constraints),
        arc_mode,
    )

    # 1) 初期ドメイン
    domains = build_initial_domains(n_meetings, range_start, range_end)
    initial_sizes = domain_sizes(domains)

    # 2) 前処理（ノード整合 + アーク整合）
    if not preprocess(domains, constraints, mode=arc_mode):
        logger.info("Preprocessing emptied a domain: no solution.")
        return SolveReport(
            status=SolveStatus.INFEASIBLE_PREPROCESSING,
            initial_domain_sizes=initial_sizes,
            filtered_domain_sizes=domain_sizes(domains),
            elapsed_ms=(time.perf_counter() - start_time) * 1000,
        )

    filtered_sizes = domain_sizes(domains)
    logger.info("Domain sizes after preprocessing: %s", filtered_sizes)

    # 3) バックトラック探索
    assignment, ctx = backtracking_search(
        domains,
        constraints,
        max_nodes=max_nodes,
        forward_checking=forward_checking,
    )

    # 4) 最終確認（全制約を再チェック）
    if assignment is not None and config.VERIFY_SOLUTION:
        for violation in find_violations(assignment, constraints):
            logger.warning("[WARNING] Solution violates a constraint: %s", violation)

    report = SolveReport(
        status=SolveStatus.SOLVED if assignment is not None else SolveStatus.INFEASIBLE_SEARCH,
        assignment=assignment,
        initial_domain_sizes=initial_sizes,
        filtered_domain_sizes=filtered_sizes,
        nodes_visited=ctx.nodes_visited,
        backtracks=ctx.backtracks,
        elapsed_ms=(time.perf_counter() - start_time) * 1000,
    )

    logger.info("=== solve() END: %s (%.1f ms) ===", report.status.name, report.elapsed_ms)
    return report


def solve(
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[Constraint],
    *,
    arc_mode: Optional[str] = None,
    max_nodes: Any = config.USE_CONFIG,
    forward_checking: Optional[bool] = None,
) -> Optional[List[date]]:
    """
    カレンダー CSP を解くメイン関数。

    Returns
    -------
    list[date] or None
        全制約を満たす、会議インデックス順の日付リスト。
        解が存在しない場合は None。
    """
    report = solve_with_report(
        n_meetings,
        range_start,
        range_end,
        constraints,
        arc_mode=arc_mode,
        max_nodes=max_nodes,
        forward_checking=forward_checking,
    )
    return report.assignment
