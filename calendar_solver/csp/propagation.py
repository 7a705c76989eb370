# -*- coding: utf-8 -*-
"""
制約伝播（propagation）を行うモジュールです。

探索の前処理として、以下の2段階でドメインを絞り込みます。

1. ノード整合（node consistency）
   単項制約 (#i op 日付) を満たさない日付を #i のドメインから削除します。
2. アーク整合（arc consistency）
   二項制約 (#tail op #head) について、head の現在のドメインに
   相手（サポート）が1つもない日付を tail のドメインから削除します。
   二項制約は必ず flip した制約とペアで適用するので、両方向が絞られます。

アーク整合には2つの方式があります（config.ARC_CONSISTENCY_MODE）。

- "single_pass": 各アークを1回ずつ適用するだけ。
  適用順によって残る値が変わることがありますが、
  取りこぼした矛盾は探索中の制約チェックで必ず検出されます。
- "ac3": AC-3。ドメインが縮んだ変数を head に持つアークを再度キューに積み、
  不動点に達するまで繰り返します。

どちらの方式でも、ドメインが空になった時点で「解なし」として打ち切ります。
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Set

from .. import config
from ..logging_utils import get_logger
from ..types import BinaryConstraint, Constraint, Operator, UnaryConstraint
from .constraints import evaluate, flip, split_by_arity
from .domains import DateDomain

logger = get_logger()


def filter_unary(domain: DateDomain, constraint: UnaryConstraint) -> DateDomain:
    """
    単項制約でドメインを絞り込みます（ノード整合）。

    == の場合は、固定日付がドメインにあればその1点に、
    なければ空にします。

    Returns
    -------
    DateDomain
        絞り込み後のドメイン（引数と同じオブジェクト）。
        空かどうかの判定は呼び出し側で行います。
    """
    op, fixed = constraint.op, constraint.date

    if op == Operator.EQ:
        if fixed in domain:
            domain.collapse_to(fixed)
        else:
            domain.keep_if(lambda d: False)
    elif op == Operator.NE:
        domain.remove(fixed)
    elif op == Operator.LT:
        domain.remove_after(fixed)
        domain.remove(fixed)
    elif op == Operator.LE:
        domain.remove_after(fixed)
    elif op == Operator.GT:
        domain.remove_before(fixed)
        domain.remove(fixed)
    else:  # Operator.GE
        domain.remove_before(fixed)

    return domain


def has_support(value, head: DateDomain, op: Operator) -> bool:
    """
    head のドメインの中に value op h を満たす h が1つでもあるかを返します。

    ドメインは昇順に並んでいるので、大小比較の演算子は
    head の最小値・最大値だけを見れば判定できます。
    """
    if head.is_empty():
        return False

    if op == Operator.EQ:
        return value in head
    if op == Operator.NE:
        return len(head) > 1 or head.dates[0] != value
    if op in (Operator.LT, Operator.LE):
        return evaluate(value, op, head.dates[-1])
    return evaluate(value, op, head.dates[0])


def filter_binary(tail: DateDomain, head: DateDomain, constraint: BinaryConstraint) -> int:
    """
    二項制約 (tail op head) で tail のドメインを絞り込みます（アーク整合）。

    tail の各日付 d について、head の現在のドメインに
    evaluate(d, op, h) を満たす h が存在するときだけ d を残します。

    Returns
    -------
    int
        tail から削除した日付の個数。
    """
    if constraint.left != tail.var or constraint.right != head.var:
        raise ValueError(
            f"Constraint {constraint} does not go from #{tail.var} to #{head.var}."
        )

    removed = tail.keep_if(lambda d: has_support(d, head, constraint.op))
    if removed:
        logger.debug("[arc] %s: removed %d dates from #%d", constraint, removed, tail.var)
    return removed


def apply_node_consistency(
    domains: List[DateDomain],
    unary: Iterable[UnaryConstraint],
) -> bool:
    """全単項制約を適用します。どこかのドメインが空になれば False。"""
    for c in unary:
        dom = filter_unary(domains[c.var], c)
        logger.debug("[node] %s: #%d has %d dates", c, c.var, len(dom))
        if dom.is_empty():
            logger.info("[node] domain of #%d emptied by %s", c.var, c)
            return False
    return True


def directed_arcs(binary: Iterable[BinaryConstraint]) -> List[BinaryConstraint]:
    """各二項制約とその flip を、適用順に並べて返します。"""
    arcs: List[BinaryConstraint] = []
    for c in binary:
        arcs.append(c)
        arcs.append(flip(c))
    return arcs


def apply_arc_consistency_single_pass(
    domains: List[DateDomain],
    binary: Iterable[BinaryConstraint],
) -> bool:
    """各アークを1回ずつ適用します。どこかのドメインが空になれば False。"""
    for arc in directed_arcs(binary):
        tail = domains[arc.left]
        filter_binary(tail, domains[arc.right], arc)
        if tail.is_empty():
            logger.info("[arc] domain of #%d emptied by %s", arc.left, arc)
            return False
    return True


def apply_arc_consistency_ac3(
    domains: List[DateDomain],
    binary: Iterable[BinaryConstraint],
) -> bool:
    """
    AC-3 で不動点までアーク整合を伝播します。

    tail のドメインが縮んだら、tail を head に持つアーク
    （tail を参照して別の変数を絞るアーク）を再度キューに積みます。
    """
    arcs = directed_arcs(binary)

    arcs_by_head: Dict[int, List[BinaryConstraint]] = {}
    for arc in arcs:
        arcs_by_head.setdefault(arc.right, []).append(arc)

    queue: Deque[BinaryConstraint] = deque(arcs)
    queued: Set[BinaryConstraint] = set(arcs)
    revisions = 0

    while queue:
        arc = queue.popleft()
        queued.discard(arc)
        revisions += 1

        tail = domains[arc.left]
        if not filter_binary(tail, domains[arc.right], arc):
            continue

        if tail.is_empty():
            logger.info("[ac3] domain of #%d emptied by %s", arc.left, arc)
            return False

        for neighbor_arc in arcs_by_head.get(arc.left, []):
            # 今使った head を絞り直すのは、反対向きの同じ制約以外
            if neighbor_arc == flip(arc):
                continue
            if neighbor_arc not in queued:
                queue.append(neighbor_arc)
                queued.add(neighbor_arc)

    logger.debug("[ac3] reached fixed point after %d revisions", revisions)
    return True


def preprocess(
    domains: List[DateDomain],
    constraints: Iterable[Constraint],
    mode: Optional[str] = None,
) -> bool:
    """
    探索前の制約伝播をまとめて行うヘルパー関数です。

    1. 全単項制約でノード整合
    2. 全二項制約（と flip）でアーク整合

    Parameters
    ----------
    domains : list[DateDomain]
        会議インデックス順のドメイン。その場で絞り込まれます。
    constraints : iterable of Constraint
        全制約。
    mode : str, optional
        "single_pass" または "ac3"。省略時は config.ARC_CONSISTENCY_MODE。

    Returns
    -------
    bool
        False なら、どこかのドメインが空になった（解なし）。
    """
    if mode is None:
        mode = config.ARC_CONSISTENCY_MODE
    if mode not in config.ARC_CONSISTENCY_MODES:
        raise ValueError(
            f"Unknown arc consistency mode {mode!r}; expected one of {config.ARC_CONSISTENCY_MODES}."
        )

    unary, binary = split_by_arity(constraints)

    if not apply_node_consistency(domains, unary):
        return False

    if mode == "ac3":
        return apply_arc_consistency_ac3(domains, binary)
    return apply_arc_consistency_single_pass(domains, binary)
