"""
Tests for loading constraints from CSV / DataFrame

pytest tests/test_loader.py -v
"""

from datetime import date

import pandas as pd
import pytest

from calendar_solver import solve
from calendar_solver.errors import InvalidProblemError
from calendar_solver.io.loader import constraints_from_frame, load_constraints, parse_constraint_row
from calendar_solver.types import BinaryConstraint, Operator, UnaryConstraint


SAMPLE_CSV = """left,op,right
0,<,1
1,<=,2024-03-06
2, !=, 0
"""


class TestParseRow:

    def test_binary_row(self):
        assert parse_constraint_row("0", "<", "1") == BinaryConstraint(left=0, op=Operator.LT, right=1)

    def test_unary_row(self):
        assert parse_constraint_row(1, "==", "2024-03-06") == UnaryConstraint(
            var=1, op=Operator.EQ, date=date(2024, 3, 6)
        )

    def test_bad_left(self):
        with pytest.raises(InvalidProblemError):
            parse_constraint_row("first", "<", "1")

    def test_bad_operator(self):
        with pytest.raises(InvalidProblemError):
            parse_constraint_row("0", "=<", "1")

    def test_bad_right(self):
        with pytest.raises(InvalidProblemError):
            parse_constraint_row("0", "<", "not-a-date")

    def test_empty_right(self):
        with pytest.raises(InvalidProblemError):
            parse_constraint_row("0", "<", float("nan"))


class TestConstraintsFromFrame:

    def test_frame(self):
        df = pd.DataFrame({"left": ["0", "1"], "op": [">", "!="], "right": ["1", "2024-03-04"]})
        assert constraints_from_frame(df) == [
            BinaryConstraint(left=0, op=Operator.GT, right=1),
            UnaryConstraint(var=1, op=Operator.NE, date=date(2024, 3, 4)),
        ]

    def test_missing_columns(self):
        df = pd.DataFrame({"left": ["0"], "right": ["1"]})
        with pytest.raises(InvalidProblemError, match="op"):
            constraints_from_frame(df)

    def test_empty_frame(self):
        df = pd.DataFrame(columns=["left", "op", "right"])
        assert constraints_from_frame(df) == []


class TestLoadConstraints:

    def test_load_csv(self, tmp_path):
        path = tmp_path / "constraints.csv"
        path.write_text(SAMPLE_CSV, encoding="utf-8")

        constraints = load_constraints(path)

        assert constraints == [
            BinaryConstraint(left=0, op=Operator.LT, right=1),
            UnaryConstraint(var=1, op=Operator.LE, date=date(2024, 3, 6)),
            BinaryConstraint(left=2, op=Operator.NE, right=0),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_constraints(tmp_path / "nope.csv")

    def test_loaded_constraints_solve(self, tmp_path, days):
        path = tmp_path / "constraints.csv"
        path.write_text(SAMPLE_CSV, encoding="utf-8")

        result = solve(3, days[0], days[4], load_constraints(path))

        assert result is not None
        assert result[0] < result[1] <= date(2024, 3, 6)
        assert result[2] != result[0]
