# -*- coding: utf-8 -*-
"""
calendar_solver が送出する例外クラスです。

解が存在しないこと（充足不能）は例外ではなく、
solve() が None を返すことで表現します。
ここにあるのは「入力が壊れている」「探索の上限に達した」といった
呼び出し側で対処すべき状況だけです。
"""


class InvalidProblemError(ValueError):
    """Raised when a problem instance is malformed (bad range, index, operator, ...)."""

    pass


class SearchLimitExceeded(RuntimeError):
    """Raised when backtracking search visits more nodes than the configured budget."""

    def __init__(self, max_nodes: int, nodes_visited: int):
        super().__init__(
            f"Search aborted after {nodes_visited} nodes (limit={max_nodes})."
        )
        self.max_nodes = max_nodes
        self.nodes_visited = nodes_visited
