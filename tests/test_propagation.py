"""
Tests for node / arc consistency preprocessing

pytest tests/test_propagation.py -v
"""

import itertools
from datetime import timedelta

import pytest

from calendar_solver.csp.constraints import evaluate
from calendar_solver.csp.domains import DateDomain, build_initial_domains, domain_sizes
from calendar_solver.csp.propagation import (
    filter_binary,
    filter_unary,
    has_support,
    preprocess,
)
from calendar_solver.types import BinaryConstraint, Operator, UnaryConstraint


class TestNodeConsistency:

    @pytest.mark.parametrize("op,expected", [
        (Operator.EQ, [2]),
        (Operator.NE, [0, 1, 3, 4]),
        (Operator.LT, [0, 1]),
        (Operator.LE, [0, 1, 2]),
        (Operator.GT, [3, 4]),
        (Operator.GE, [2, 3, 4]),
    ])
    def test_each_operator(self, days, op, expected):
        dom = DateDomain(0, days)
        filter_unary(dom, UnaryConstraint(var=0, op=op, date=days[2]))
        assert dom.dates == [days[i] for i in expected]

    def test_equality_outside_domain_empties(self, days):
        dom = DateDomain(0, days[:2])
        filter_unary(dom, UnaryConstraint(var=0, op=Operator.EQ, date=days[4]))
        assert dom.is_empty()

    def test_matches_evaluate(self, days):
        for op in Operator:
            dom = DateDomain(0, days)
            c = UnaryConstraint(var=0, op=op, date=days[1])
            filter_unary(dom, c)
            assert dom.dates == [d for d in days if evaluate(d, op, days[1])]


class TestArcConsistency:

    def test_less_than(self, days):
        tail = DateDomain(0, days)
        head = DateDomain(1, days[:3])
        removed = filter_binary(tail, head, BinaryConstraint(left=0, op=Operator.LT, right=1))
        assert removed == 3
        assert tail.dates == days[:2]
        assert head.dates == days[:3]

    def test_not_equal_single_head(self, days):
        tail = DateDomain(0, days)
        head = DateDomain(1, [days[2]])
        filter_binary(tail, head, BinaryConstraint(left=0, op=Operator.NE, right=1))
        assert days[2] not in tail
        assert len(tail) == 4

    def test_not_equal_wide_head_keeps_everything(self, days):
        tail = DateDomain(0, days)
        head = DateDomain(1, days[1:3])
        assert filter_binary(tail, head, BinaryConstraint(left=0, op=Operator.NE, right=1)) == 0

    def test_equal_intersects(self, days):
        tail = DateDomain(0, days[:3])
        head = DateDomain(1, days[2:])
        filter_binary(tail, head, BinaryConstraint(left=0, op=Operator.EQ, right=1))
        assert tail.dates == [days[2]]

    def test_empty_head_empties_tail(self, days):
        tail = DateDomain(0, days)
        head = DateDomain(1, [])
        filter_binary(tail, head, BinaryConstraint(left=0, op=Operator.GE, right=1))
        assert tail.is_empty()

    def test_wrong_direction(self, days):
        tail = DateDomain(0, days)
        head = DateDomain(1, days)
        with pytest.raises(ValueError):
            filter_binary(tail, head, BinaryConstraint(left=1, op=Operator.LT, right=0))

    @pytest.mark.parametrize("op", list(Operator))
    def test_monotonic_and_keeps_supported(self, days, op):
        """Never grows a domain and removes exactly the unsupported dates."""
        for size in range(0, 4):
            for head_dates in itertools.combinations(days, size):
                tail = DateDomain(0, days)
                head = DateDomain(1, list(head_dates))
                filter_binary(tail, head, BinaryConstraint(left=0, op=op, right=1))

                assert len(tail) <= len(days)
                assert list(head_dates) == head.dates
                expected = [d for d in days if any(evaluate(d, op, h) for h in head_dates)]
                assert tail.dates == expected

    def test_has_support_uses_extremes(self, days):
        head = DateDomain(1, [days[1], days[3]])
        assert has_support(days[2], head, Operator.LT)
        assert not has_support(days[3], head, Operator.LT)
        assert has_support(days[2], head, Operator.GT)
        assert not has_support(days[1], head, Operator.GT)
        assert not has_support(days[2], head, Operator.EQ)


class TestPreprocess:

    def test_unary_out_of_range_fails(self, days, arc_mode):
        domains = build_initial_domains(1, days[0], days[4])
        c = UnaryConstraint(var=0, op=Operator.EQ, date=days[0] - timedelta(days=1))
        assert preprocess(domains, [c], mode=arc_mode) is False

    def test_binary_empties_domain(self, d0, arc_mode):
        domains = build_initial_domains(2, d0, d0)
        assert preprocess(domains, [BinaryConstraint(left=0, op=Operator.NE, right=1)], mode=arc_mode) is False

    def test_no_constraints(self, days, arc_mode):
        domains = build_initial_domains(2, days[0], days[4])
        assert preprocess(domains, [], mode=arc_mode) is True
        assert domain_sizes(domains) == [5, 5]

    def test_both_directions_are_filtered(self, days, arc_mode):
        domains = build_initial_domains(2, days[0], days[4])
        assert preprocess(domains, [BinaryConstraint(left=0, op=Operator.LT, right=1)], mode=arc_mode)
        assert domains[0].dates == days[:4]
        assert domains[1].dates == days[1:]

    def test_unary_applied_before_binary(self, days, arc_mode):
        domains = build_initial_domains(2, days[0], days[4])
        constraints = [
            BinaryConstraint(left=0, op=Operator.GT, right=1),
            UnaryConstraint(var=0, op=Operator.LE, date=days[1]),
        ]
        assert preprocess(domains, constraints, mode=arc_mode)
        assert domains[0].dates == [days[1]]
        assert domains[1].dates == [days[0]]

    def test_chain_single_pass_vs_ac3(self, days):
        constraints = [
            BinaryConstraint(left=0, op=Operator.LT, right=1),
            BinaryConstraint(left=1, op=Operator.LT, right=2),
        ]

        single = build_initial_domains(3, days[0], days[2])
        assert preprocess(single, constraints, mode="single_pass")
        assert single[0].dates == days[:2]
        assert single[1].dates == [days[1]]
        assert single[2].dates == [days[2]]

        fixed_point = build_initial_domains(3, days[0], days[2])
        assert preprocess(fixed_point, constraints, mode="ac3")
        assert [d.dates for d in fixed_point] == [[days[0]], [days[1]], [days[2]]]

    def test_ac3_detects_chain_infeasibility(self, days):
        # #0 < #1 < #2 < #0 has no solution; AC-3 empties a domain
        constraints = [
            BinaryConstraint(left=0, op=Operator.LT, right=1),
            BinaryConstraint(left=1, op=Operator.LT, right=2),
            BinaryConstraint(left=2, op=Operator.LT, right=0),
        ]
        domains = build_initial_domains(3, days[0], days[4])
        assert preprocess(domains, constraints, mode="ac3") is False

    def test_unknown_mode(self, days):
        domains = build_initial_domains(1, days[0], days[4])
        with pytest.raises(ValueError):
            preprocess(domains, [], mode="full")
