# -*- coding: utf-8 -*-
"""
会議ごとのドメイン（取り得る日付の集合）を扱うモジュールです。

- 日付範囲 [range_start, range_end] から初期ドメインを作る
- 比較による枝刈り（ある日付より前/後を削除）
- 1つの日付への確定（collapse）

ドメインは常に「日付の昇順のリスト」として保持します。
一度作ったドメインは縮むだけで、増えることはありません。
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterator, List

import pandas as pd


class DateDomain:
    """
    1つの会議変数のドメインです。

    Attributes
    ----------
    var : int
        会議インデックス。
    dates : list[date]
        まだ取り得る日付（昇順・重複なし）。
    """

    __slots__ = ("var", "dates")

    def __init__(self, var: int, dates: List[date]):
        self.var = var
        self.dates = list(dates)

    @classmethod
    def from_range(cls, var: int, range_start: date, range_end: date) -> "DateDomain":
        """
        range_start から range_end まで（両端を含む）の全日付でドメインを作ります。

        range_end < range_start の場合は空のドメインになります
        （入力チェックは validation.py 側で行う前提）。
        """
        days = pd.date_range(start=range_start, end=range_end, freq="D")
        return cls(var, [ts.date() for ts in days])

    # ------------------------------------------------------------------
    # 枝刈り
    # ------------------------------------------------------------------

    def remove_before(self, d: date) -> int:
        """d より厳密に前の日付を削除し、削除した個数を返します。"""
        return self.keep_if(lambda x: x >= d)

    def remove_after(self, d: date) -> int:
        """d より厳密に後の日付を削除し、削除した個数を返します。"""
        return self.keep_if(lambda x: x <= d)

    def remove(self, d: date) -> bool:
        """d がドメインにあれば削除します。"""
        try:
            self.dates.remove(d)
        except ValueError:
            return False
        return True

    def collapse_to(self, d: date) -> None:
        """ドメインを [d] の1要素に置き換えます。"""
        self.dates = [d]

    def keep_if(self, predicate: Callable[[date], bool]) -> int:
        """predicate を満たす日付だけを残し、削除した個数を返します。"""
        before = len(self.dates)
        self.dates = [d for d in self.dates if predicate(d)]
        return before - len(self.dates)

    # ------------------------------------------------------------------
    # 参照系
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self.dates

    def copy(self) -> "DateDomain":
        return DateDomain(self.var, self.dates)

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self) -> Iterator[date]:
        return iter(self.dates)

    def __contains__(self, d: object) -> bool:
        return d in self.dates

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateDomain):
            return NotImplemented
        return self.var == other.var and self.dates == other.dates

    def __repr__(self) -> str:
        if not self.dates:
            return f"DateDomain(#{self.var}, empty)"
        return (
            f"DateDomain(#{self.var}, {len(self.dates)} dates "
            f"{self.dates[0].isoformat()}..{self.dates[-1].isoformat()})"
        )


def build_initial_domains(
    n_meetings: int,
    range_start: date,
    range_end: date,
) -> List[DateDomain]:
    """
    全会議の初期ドメインを構築します。

    Parameters
    ----------
    n_meetings : int
        会議数。インデックスは 0..n_meetings-1。
    range_start, range_end : datetime.date
        全会議に共通の日付範囲（両端を含む）。

    Returns
    -------
    list[DateDomain]
        会議インデックス順のドメイン。
    """
    template = DateDomain.from_range(0, range_start, range_end)
    return [DateDomain(var, template.dates) for var in range(n_meetings)]


def snapshot(domains: List[DateDomain]) -> List[DateDomain]:
    """探索の1フレーム分として、全ドメインのコピーを作ります。"""
    return [dom.copy() for dom in domains]


def domain_sizes(domains: List[DateDomain]) -> List[int]:
    return [len(dom) for dom in domains]
