# -*- coding: utf-8 -*-
"""
カレンダー CSP solver で使う主なデータ構造（型）をまとめたモジュールです。

dataclass を使うことで、
「この構造体はどんなフィールドを持っているのか」を
分かりやすく表現しています。

制約は「単項制約」と「二項制約」の2種類だけで、
どちらも frozen な dataclass（生成後に変更しない）として表します。
種類の判定は isinstance ではなく ``arity`` で行います。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple, Union

from .errors import InvalidProblemError

# 会議インデックス -> 日付 の割り当て。未割り当ては None。
Assignment = List[Optional[date]]


class Operator(str, Enum):
    """比較演算子。値は記号そのもの（"<=" など）です。"""

    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @classmethod
    def parse(cls, symbol: Union[str, "Operator"]) -> "Operator":
        """
        記号文字列（"<" など）または Operator を Operator に変換します。

        知らない記号の場合は InvalidProblemError を送出します。
        """
        if isinstance(symbol, Operator):
            return symbol
        try:
            return cls(str(symbol).strip())
        except ValueError:
            raise InvalidProblemError(
                f"Unknown operator {symbol!r}; expected one of "
                f"{', '.join(op.value for op in cls)}."
            ) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnaryConstraint:
    """
    「会議 var の日付 op 固定日付」を表す単項制約です。

    Attributes
    ----------
    var : int
        対象の会議インデックス。
    op : Operator
        比較演算子。
    date : datetime.date
        比較相手の固定日付。
    """

    var: int
    op: Operator
    date: date

    @property
    def arity(self) -> int:
        return 1

    @property
    def variables(self) -> Tuple[int, ...]:
        return (self.var,)

    def __str__(self) -> str:
        return f"#{self.var} {self.op} {self.date.isoformat()}"


@dataclass(frozen=True)
class BinaryConstraint:
    """
    「会議 left の日付 op 会議 right の日付」を表す二項制約です。

    アーク整合では left を tail（絞り込まれる側）、
    right を head（サポートを探す側）として扱います。
    """

    left: int
    op: Operator
    right: int

    @property
    def arity(self) -> int:
        return 2

    @property
    def variables(self) -> Tuple[int, ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        return f"#{self.left} {self.op} #{self.right}"


Constraint = Union[UnaryConstraint, BinaryConstraint]


class SolveStatus(Enum):
    """solve の結果ステータス。"""

    SOLVED = auto()                    # すべての制約を満たす割り当てが見つかった
    INFEASIBLE_PREPROCESSING = auto()  # 前処理でドメインが空になった
    INFEASIBLE_SEARCH = auto()         # 探索し尽くしても解がなかった


@dataclass
class SolveReport:
    """
    1回の solve 呼び出しの結果と統計情報です。

    Attributes
    ----------
    status : SolveStatus
        結果ステータス。
    assignment : list[date] or None
        解（会議インデックス順の日付リスト）。解がなければ None。
    initial_domain_sizes : list[int]
        前処理前の各会議のドメインサイズ。
    filtered_domain_sizes : list[int]
        前処理後の各会議のドメインサイズ（前処理で失敗した場合は途中の値）。
    nodes_visited : int
        探索で試した（値を仮に割り当てた）ノード数。
    backtracks : int
        値の割り当てを取り消した回数。
    elapsed_ms : float
        全体の処理時間（ミリ秒）。
    """

    status: SolveStatus
    assignment: Optional[List[date]] = None
    initial_domain_sizes: List[int] = field(default_factory=list)
    filtered_domain_sizes: List[int] = field(default_factory=list)
    nodes_visited: int = 0
    backtracks: int = 0
    elapsed_ms: float = 0.0

    @property
    def is_solved(self) -> bool:
        return self.status == SolveStatus.SOLVED

    def stats(self) -> Dict[str, object]:
        """ログや API 応答に載せる統計情報を dict で返します。"""
        return {
            "status": self.status.name,
            "initial_domain_sizes": list(self.initial_domain_sizes),
            "filtered_domain_sizes": list(self.filtered_domain_sizes),
            "nodes_visited": self.nodes_visited,
            "backtracks": self.backtracks,
            "elapsed_ms": round(self.elapsed_ms, 3),
        }
