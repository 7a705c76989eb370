# calendar_solver/eval/verify.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence

from ..csp.constraints import is_satisfied
from ..types import Constraint


def find_violations(
    assignment: Sequence[Optional[date]],
    constraints: Iterable[Constraint],
) -> List[str]:
    """
    割り当てが破っている制約を、人が読めるメッセージのリストで返します。

    未割り当ての会議が残っている場合も、その会議ごとにメッセージを出します。
    空リストなら、完全かつ全制約を満たす割り当てです。
    """
    errors: List[str] = []

    for var, d in enumerate(assignment):
        if d is None:
            errors.append(f"#{var}: not assigned")

    for c in constraints:
        if max(c.variables) >= len(assignment):
            errors.append(f"{c}: refers to a meeting outside the assignment")
            continue
        if not is_satisfied(c, assignment):
            got = ", ".join(f"#{v}={assignment[v].isoformat()}" for v in c.variables)
            errors.append(f"{c}: violated ({got})")

    return errors
