# -*- coding: utf-8 -*-
"""
制約一覧（CSV）を読み込むモジュールです。

CSV の仕様：
- 必ず 'left', 'op', 'right' 列がある
- left  : 会議インデックス（整数）
- op    : 演算子（==, !=, <, <=, >, >=）
- right : 会議インデックス（整数）なら二項制約、
          ISO 形式の日付（例: 2024-03-05）なら単項制約

例:

    left,op,right
    0,<,1
    1,==,2024-03-05
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List

import pandas as pd

from ..errors import InvalidProblemError
from ..types import BinaryConstraint, Constraint, Operator, UnaryConstraint

REQUIRED_COLUMNS = ("left", "op", "right")


def parse_constraint_row(left: object, op: object, right: object) -> Constraint:
    """
    CSV の1行分を制約に変換します。

    right が整数として読めれば二項制約、そうでなければ日付として読みます。
    """
    if pd.isna(left):
        raise InvalidProblemError("Constraint row has an empty 'left' column.")
    try:
        left_idx = int(str(left).strip())
    except ValueError:
        raise InvalidProblemError(f"Invalid meeting index in 'left': {left!r}") from None

    operator = Operator.parse(str(op))
    if pd.isna(right) or not str(right).strip():
        raise InvalidProblemError(f"Constraint on #{left_idx} has an empty 'right' column.")
    rhs = str(right).strip()

    if rhs.lstrip("-").isdigit():
        return BinaryConstraint(left=left_idx, op=operator, right=int(rhs))

    try:
        fixed: date = pd.Timestamp(rhs).date()
    except ValueError:
        raise InvalidProblemError(
            f"'right' must be a meeting index or an ISO date, got {right!r}"
        ) from None
    return UnaryConstraint(var=left_idx, op=operator, date=fixed)


def constraints_from_frame(df: pd.DataFrame) -> List[Constraint]:
    """
    'left', 'op', 'right' 列を持つ DataFrame を制約のリストに変換します。

    Parameters
    ----------
    df : pandas.DataFrame
        制約一覧。列はすべて文字列として扱います。

    Returns
    -------
    list of Constraint
        行の順番どおりの制約リスト。
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidProblemError(f"Constraint table is missing columns: {', '.join(missing)}")

    # 空行は読み飛ばす
    df = df.dropna(subset=list(REQUIRED_COLUMNS), how="all")

    return [
        parse_constraint_row(row.left, row.op, row.right)
        for row in df[list(REQUIRED_COLUMNS)].itertuples(index=False)
    ]


def load_constraints(path: str | Path) -> List[Constraint]:
    """
    制約 CSV を読み込み、制約のリストにして返します。

    Parameters
    ----------
    path : str or Path
        CSV ファイルのパス。
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Constraint CSV not found: {p}")

    df = pd.read_csv(p, encoding="utf-8-sig", dtype=str, skipinitialspace=True)
    return constraints_from_frame(df)
