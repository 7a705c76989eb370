# -*- coding: utf-8 -*-
"""
探索結果をもとに表示用の情報を構築するモジュールです。
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from ..types import SolveReport


def build_schedule_frame(assignment: List[date]) -> pd.DataFrame:
    """
    会議インデックス -> 日付 の割り当てを表（DataFrame）にします。

    Returns
    -------
    pandas.DataFrame
        'meeting', 'date', 'weekday' 列を持ち、日付順（同日ならインデックス順）に
        並んだ表。
    """
    df = pd.DataFrame(
        {
            "meeting": list(range(len(assignment))),
            "date": pd.to_datetime(assignment),
        }
    )
    df["weekday"] = df["date"].dt.day_name()
    return df.sort_values(["date", "meeting"], kind="stable").reset_index(drop=True)


def build_schedule_records(assignment: List[date]) -> List[Dict[str, Any]]:
    """表示用に、1会議1行の dict のリストを作る"""
    if not assignment:
        return []

    df = build_schedule_frame(assignment)
    return [
        {
            "meeting": int(row.meeting),
            "date": row.date.date().isoformat(),
            "weekday": row.weekday,
        }
        for row in df.itertuples(index=False)
    ]


def build_result(report: SolveReport, n_meetings: Optional[int] = None) -> Dict[str, Any]:
    """
    SolveReport を JSON にそのまま渡せる dict に変換します。

    Parameters
    ----------
    report : SolveReport
        solve_with_report の戻り値。
    n_meetings : int, optional
        会議数。省略時は report から推定します。
    """
    assignment = report.assignment

    if n_meetings is None:
        n_meetings = len(assignment) if assignment is not None else len(report.initial_domain_sizes)

    return {
        "solved": report.is_solved,
        "status": report.status.name,
        "n_meetings": n_meetings,
        "assignment": [d.isoformat() for d in assignment] if assignment is not None else None,  # ★ date は文字列にして返す
        "schedule": build_schedule_records(assignment) if assignment is not None else [],
        "stats": report.stats(),
    }
