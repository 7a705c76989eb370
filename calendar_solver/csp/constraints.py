# -*- coding: utf-8 -*-
"""
制約の評価・反転・関連判定を行うモジュールです。

- evaluate   : 2つの日付を演算子で比較
- flip       : 二項制約の向き（tail/head）を入れ替える
- relevant_to: 制約が参照する会議がすべて割り当て済みか
- reduce     : 片側が確定した二項制約を単項制約に落とす
"""

from __future__ import annotations

import operator
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..types import BinaryConstraint, Constraint, Operator, UnaryConstraint

# 演算子 -> 比較関数
_COMPARATORS: Dict[Operator, Callable[[date, date], bool]] = {
    Operator.EQ: operator.eq,
    Operator.NE: operator.ne,
    Operator.LT: operator.lt,
    Operator.LE: operator.le,
    Operator.GT: operator.gt,
    Operator.GE: operator.ge,
}

# 左右を入れ替えたときの演算子（== と != はそのまま）
_FLIPPED: Dict[Operator, Operator] = {
    Operator.EQ: Operator.EQ,
    Operator.NE: Operator.NE,
    Operator.LT: Operator.GT,
    Operator.LE: Operator.GE,
    Operator.GT: Operator.LT,
    Operator.GE: Operator.LE,
}


def evaluate(left: date, op: Operator, right: date) -> bool:
    """
    left op right を評価します。

    日付は全順序なので、6つの演算子は互いに矛盾しません。
    （例: not (a < b) なら a >= b）
    """
    return _COMPARATORS[op](left, right)


def flip_operator(op: Operator) -> Operator:
    return _FLIPPED[op]


def flip(constraint: Constraint) -> Constraint:
    """
    二項制約 (L, op, R) を (R, op', L) に反転します。

    単項制約には向きがないので、そのまま返します。
    flip(flip(c)) == c が成り立ちます。
    """
    if constraint.arity == 1:
        return constraint
    return BinaryConstraint(
        left=constraint.right,
        op=flip_operator(constraint.op),
        right=constraint.left,
    )


def relevant_to(constraint: Constraint, assignment: Sequence[Optional[date]]) -> bool:
    """制約が参照する会議がすべて assignment で割り当て済みなら True。"""
    return all(assignment[v] is not None for v in constraint.variables)


def is_satisfied(constraint: Constraint, assignment: Sequence[Optional[date]]) -> bool:
    """
    現在の（部分）割り当てで制約が満たされているかを返します。

    まだ関係のない（未割り当ての会議を含む）制約は、
    空虚に満たされている（True）とみなします。
    """
    if not relevant_to(constraint, assignment):
        return True
    if constraint.arity == 1:
        return evaluate(assignment[constraint.var], constraint.op, constraint.date)
    return evaluate(assignment[constraint.left], constraint.op, assignment[constraint.right])


def reduce(constraint: BinaryConstraint, var: int, value: date) -> UnaryConstraint:
    """
    二項制約の片側 var が value に確定したとき、
    もう片側の会議に対する単項制約に変換します。

    例: (#0 < #1) で #0 = 3/5 なら、#1 > 3/5 になる。
    """
    if var == constraint.left:
        return UnaryConstraint(var=constraint.right, op=flip_operator(constraint.op), date=value)
    if var == constraint.right:
        return UnaryConstraint(var=constraint.left, op=constraint.op, date=value)
    raise ValueError(f"Meeting #{var} does not appear in constraint {constraint}.")


def split_by_arity(
    constraints: Iterable[Constraint],
) -> Tuple[List[UnaryConstraint], List[BinaryConstraint]]:
    """
    制約を単項・二項に分けます。

    入力は順序のない集合でもよいので、結果が毎回同じになるよう
    会議インデックス・演算子・右辺で並べ替えておきます。
    """
    unary: List[UnaryConstraint] = []
    binary: List[BinaryConstraint] = []
    for c in constraints:
        if c.arity == 1:
            unary.append(c)
        else:
            binary.append(c)

    unary.sort(key=lambda c: (c.var, c.op.value, c.date))
    binary.sort(key=lambda c: (c.left, c.right, c.op.value))
    return unary, binary


def index_by_variable(
    constraints: Iterable[Constraint],
    n_meetings: int,
) -> List[List[Constraint]]:
    """会議インデックス -> その会議を参照する制約のリスト。"""
    index: List[List[Constraint]] = [[] for _ in range(n_meetings)]
    for c in constraints:
        for v in set(c.variables):
            index[v].append(c)
    return index
