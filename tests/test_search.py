"""Unit tests for the Algorithm X search driver."""

import pytest

from exactcover.core import (
    AlgorithmX,
    Column,
    SinkAction,
    build,
    iter_solutions,
    search,
)
from exactcover.problems import NQueensProblem


WIKI_ROWS = [
    ("A", "147"),
    ("B", "14"),
    ("C", "457"),
    ("D", "356"),
    ("E", "2367"),
    ("F", "27"),
]

# Knuth's example from "Dancing Links"
KNUTH_ROWS = [
    ("CEF", "CEF"),
    ("ADG", "ADG"),
    ("BCF", "BCF"),
    ("AD", "AD"),
    ("BG", "BG"),
    ("DEG", "DEG"),
]


def collect(matrix, max_solutions=100, **kwargs):
    found = []
    count = search(matrix, max_solutions, found.append, **kwargs)
    assert count == len(found)
    return found


def assert_exact_cover(columns, rows, solution):
    """Primary columns covered exactly once, secondary at most once."""
    row_map = dict(rows)
    counts = {}
    for row_id in solution:
        for c in row_map[row_id]:
            counts[c] = counts.get(c, 0) + 1
    for column in columns:
        if column.primary:
            assert counts.get(column.id) == 1, column.id
        else:
            assert counts.get(column.id, 0) <= 1, column.id


class TestTextbookInstances:
    """Small instances with known answers."""

    def test_wikipedia_example(self):
        matrix = build(list("1234567"), WIKI_ROWS)
        assert collect(matrix, max_solutions=10) == [("B", "D", "F")]

    def test_knuth_example(self):
        matrix = build(list("ABCDEFG"), KNUTH_ROWS)
        assert collect(matrix) == [("AD", "CEF", "BG")]

    def test_knuth_example_with_unused_secondary(self):
        columns = [Column(c) for c in "ABCDEFG"] + [Column.secondary("H")]
        matrix = build(columns, KNUTH_ROWS)
        assert collect(matrix) == [("AD", "CEF", "BG")]

    def test_no_solution(self):
        rows = WIKI_ROWS[:-1] + [("F", "26")]
        matrix = build(list("1234567"), rows)
        assert search(matrix, 10) == 0

    def test_no_columns_has_empty_solution(self):
        assert collect(build([], [])) == [()]

    def test_only_secondary_columns(self):
        matrix = build([Column.secondary(c) for c in "AB"], [("x", "AB")])
        assert collect(matrix) == [()]

    def test_primary_column_without_rows(self):
        matrix = build(list("ABC"), [])
        assert search(matrix) == 0

    def test_two_of_three(self):
        matrix = build(list("ABC"), [("AB", "AB"), ("AC", "AC"), ("C", "C")])
        assert collect(matrix) == [("AB", "C")]

    def test_odd_cycle_has_no_cover(self):
        matrix = build(list("ABC"), [("AB", "AB"), ("BC", "BC"), ("AC", "AC")])
        assert search(matrix, 5) == 0

    def test_deep_solution(self):
        # One row per column, so the only cover uses all 2500 rows
        n = 2500
        matrix = build(range(n), [(f"r{i}", [i]) for i in range(n)])
        before = matrix.snapshot()

        solutions = collect(matrix, heuristic="first")

        assert solutions == [tuple(f"r{i}" for i in range(n))]
        assert matrix.snapshot() == before
        matrix.check_integrity()

    def test_deep_search_closed_midway(self):
        n = 2000
        rows = [(f"r{i}", [i]) for i in range(n)] + [("extra", [n - 1])]
        matrix = build(range(n), rows)
        before = matrix.snapshot()

        solutions = iter_solutions(matrix, heuristic="first")
        assert len(next(solutions)) == n
        solutions.close()

        assert matrix.snapshot() == before
        assert not matrix.busy

    def test_multiple_solutions_in_order(self):
        matrix = build(list("AB"), [("A", "A"), ("B", "B"), ("AB", "AB")])
        assert collect(matrix) == [("A", "B"), ("AB",)]


class TestEnumerationPolicy:
    """max_solutions, sinks and the resulting matrix state."""

    def test_max_solutions_caps_count(self):
        matrix = NQueensProblem(8).build()
        assert search(matrix, max_solutions=5) == 5

    def test_sink_can_stop(self):
        matrix = NQueensProblem(8).build()
        seen = []

        def sink(solution):
            seen.append(solution)
            return SinkAction.STOP if len(seen) == 3 else SinkAction.CONTINUE

        assert search(matrix, 100, sink) == 3
        assert len(seen) == 3

    def test_max_solutions_must_be_positive(self):
        matrix = build(["a"], [("r", "a")])
        with pytest.raises(ValueError):
            search(matrix, 0)

    def test_unknown_heuristic(self):
        matrix = build(["a"], [("r", "a")])
        with pytest.raises(ValueError):
            search(matrix, heuristic="random")

    @pytest.mark.parametrize("max_solutions", [1, 2, 100])
    def test_matrix_at_rest_after_search(self, max_solutions):
        matrix = NQueensProblem(6).build()
        before = matrix.snapshot()

        search(matrix, max_solutions)

        assert matrix.snapshot() == before
        matrix.check_integrity()

    def test_same_matrix_searched_twice(self):
        matrix = build(list("1234567"), WIKI_ROWS)
        assert collect(matrix) == collect(matrix)

    def test_solutions_are_sound(self):
        problem = NQueensProblem(6)
        columns = problem.columns()
        rows = [(r.id, r.column_ids) for r in problem.rows()]
        matrix = problem.build()

        solutions = collect(matrix)
        assert len(solutions) == 4
        for solution in solutions:
            assert_exact_cover(columns, rows, solution)

    def test_heuristics_agree_on_count(self):
        counts = {
            name: search(NQueensProblem(6).build(), 100, heuristic=name)
            for name in ("min-size", "first")
        }
        assert counts == {"min-size": 4, "first": 4}


class TestLazyEnumeration:
    """iter_solutions and the single-search guard."""

    def test_iter_solutions(self):
        matrix = build(list("1234567"), WIKI_ROWS)
        assert list(iter_solutions(matrix)) == [("B", "D", "F")]

    def test_limit(self):
        matrix = NQueensProblem(8).build()
        assert len(list(iter_solutions(matrix, limit=7))) == 7

    def test_close_restores_matrix(self):
        matrix = NQueensProblem(8).build()
        before = matrix.snapshot()

        solutions = iter_solutions(matrix)
        next(solutions)
        assert matrix.snapshot() != before
        solutions.close()

        assert matrix.snapshot() == before
        assert not matrix.busy

    def test_concurrent_search_rejected(self):
        matrix = NQueensProblem(5).build()
        solutions = iter_solutions(matrix)
        next(solutions)

        with pytest.raises(RuntimeError):
            search(matrix)

        solutions.close()
        assert search(matrix, 100) == 10


class TestCancellation:
    """Step and time limits."""

    def test_max_steps(self):
        matrix = NQueensProblem(8).build()
        before = matrix.snapshot()
        solver = AlgorithmX(matrix, max_steps=20)

        count = solver.run(max_solutions=100)

        assert solver.stats.cancelled
        assert count < 92
        assert solver.stats.nodes_explored == 21
        assert matrix.snapshot() == before

    def test_cancel_deep_in_the_tree(self):
        n = 2000
        matrix = build(range(n), [(f"r{i}", [i]) for i in range(n)])
        before = matrix.snapshot()
        solver = AlgorithmX(matrix, heuristic="first", max_steps=1500)

        assert solver.run() == 0
        assert solver.stats.cancelled
        assert solver.stats.max_depth == 1500
        assert matrix.snapshot() == before

    def test_zero_steps_finds_nothing(self):
        matrix = build(list("1234567"), WIKI_ROWS)
        solver = AlgorithmX(matrix, max_steps=0)
        assert solver.run() == 0
        assert solver.stats.cancelled

    def test_generous_limit_is_not_hit(self):
        matrix = build(list("1234567"), WIKI_ROWS)
        solver = AlgorithmX(matrix, max_steps=1000, timeout_seconds=60)
        assert solver.run() == 1
        assert not solver.stats.cancelled

    def test_invalid_limits(self):
        matrix = build(["a"], [("r", "a")])
        with pytest.raises(ValueError):
            AlgorithmX(matrix, max_steps=-1)
        with pytest.raises(ValueError):
            AlgorithmX(matrix, timeout_seconds=0)


class TestRequiredRows:
    """Rows committed before the search starts."""

    def test_required_row_leads_solution(self):
        matrix = build(list("ABCDEFG"), KNUTH_ROWS, required_rows=["BG"])
        assert collect(matrix) == [("BG", "AD", "CEF")]

    def test_required_row_prunes(self):
        matrix = build(list("AB"), [("A", "A"), ("B", "B"), ("AB", "AB")], required_rows=["AB"])
        assert collect(matrix) == [("AB",)]

    def test_conflicting_required_rows(self):
        matrix = build(list("ABCDEFG"), KNUTH_ROWS, required_rows=["AD", "ADG"])
        before = matrix.snapshot()
        assert search(matrix, 10) == 0
        assert matrix.snapshot() == before

    def test_required_rows_released(self):
        matrix = build(list("ABCDEFG"), KNUTH_ROWS, required_rows=["CEF", "AD"])
        before = matrix.snapshot()
        assert collect(matrix) == [("CEF", "AD", "BG")]
        assert matrix.snapshot() == before


class TestStats:
    """Search statistics."""

    def test_stats_collected(self):
        matrix = build(list("1234567"), WIKI_ROWS)
        solver = AlgorithmX(matrix)
        solver.run(10)

        stats = solver.stats
        assert stats.solutions == 1
        assert stats.nodes_explored > 0
        assert stats.backtracks >= 1
        assert stats.updates > 0
        assert stats.max_depth == 2
        assert stats.time_seconds > 0
        assert stats.to_dict()["heuristic"] == "min-size"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
