# -*- coding: utf-8 -*-
"""
問題インスタンスの入力チェックを行うモジュールです。

前処理に入る前に、壊れた入力を InvalidProblemError で弾きます。
- 会議数が負、整数でない、または config.MAX_MEETINGS を超える
- 日付範囲の端が date でない、または逆転している
- 制約が参照する会議インデックスが範囲外
- 自分自身との二項制約（#i op #i）
- 知らない演算子、日付のない単項制約
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List

from . import config
from .errors import InvalidProblemError
from .types import BinaryConstraint, Constraint, Operator, UnaryConstraint


def normalize_date(value: object, name: str) -> date:
    """datetime は日付部分だけにし、date 以外は InvalidProblemError にします。"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidProblemError(f"{name} must be a date, got {type(value).__name__}.")


def _check_index(index: object, n_meetings: int, constraint: object) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidProblemError(f"Meeting index {index!r} in {constraint!r} is not an integer.")
    if not 0 <= index < n_meetings:
        raise InvalidProblemError(
            f"Meeting index {index} in {constraint!r} is out of range [0, {n_meetings})."
        )


def validate_constraint(constraint: object, n_meetings: int) -> Constraint:
    """
    1つの制約をチェックし、正規化した制約を返します。

    演算子が文字列で渡された場合は Operator に、
    日付が datetime で渡された場合は date に揃えます。
    """
    if isinstance(constraint, UnaryConstraint):
        _check_index(constraint.var, n_meetings, constraint)
        if constraint.date is None:
            raise InvalidProblemError(f"Unary constraint on #{constraint.var} has no date.")
        return UnaryConstraint(
            var=constraint.var,
            op=Operator.parse(constraint.op),
            date=normalize_date(constraint.date, f"Date of constraint on #{constraint.var}"),
        )

    if isinstance(constraint, BinaryConstraint):
        _check_index(constraint.left, n_meetings, constraint)
        _check_index(constraint.right, n_meetings, constraint)
        if constraint.left == constraint.right:
            raise InvalidProblemError(
                f"Binary constraint {constraint} refers to meeting #{constraint.left} twice."
            )
        return BinaryConstraint(
            left=constraint.left,
            op=Operator.parse(constraint.op),
            right=constraint.right,
        )

    raise InvalidProblemError(f"{constraint!r} is not a UnaryConstraint or BinaryConstraint.")


def validate_problem(
    n_meetings: object,
    range_start: object,
    range_end: object,
    constraints: Iterable[object],
) -> tuple[int, date, date, List[Constraint]]:
    """
    問題インスタンス全体をチェックします。

    Returns
    -------
    (n_meetings, range_start, range_end, constraints)
        正規化済みの値。constraints は重複を除いたリスト。
    """
    if isinstance(n_meetings, bool) or not isinstance(n_meetings, int):
        raise InvalidProblemError(f"n_meetings must be an integer, got {n_meetings!r}.")
    if n_meetings < 0:
        raise InvalidProblemError(f"n_meetings must be >= 0, got {n_meetings}.")
    if n_meetings > config.MAX_MEETINGS:
        raise InvalidProblemError(
            f"n_meetings must be <= {config.MAX_MEETINGS}, got {n_meetings}."
        )

    start = normalize_date(range_start, "range_start")
    end = normalize_date(range_end, "range_end")
    if end < start:
        raise InvalidProblemError(
            f"range_end ({end.isoformat()}) is before range_start ({start.isoformat()})."
        )

    if constraints is None:
        raise InvalidProblemError("constraints must be an iterable, got None.")

    normalized: List[Constraint] = []
    seen = set()
    for c in constraints:
        nc = validate_constraint(c, n_meetings)
        if nc not in seen:
            seen.add(nc)
            normalized.append(nc)

    return n_meetings, start, end, normalized
