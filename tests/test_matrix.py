"""Unit tests for the dancing links matrix."""

import pytest

from exactcover.core import Column, ColumnKind, MalformedInstance, MatrixCorruption, Row, build
from exactcover.core.heuristics import choose_first, choose_min_size


# Example from https://en.wikipedia.org/wiki/Exact_cover#Detailed_example
WIKI_COLUMNS = list("1234567")
WIKI_ROWS = [
    ("A", "147"),
    ("B", "14"),
    ("C", "457"),
    ("D", "356"),
    ("E", "2367"),
    ("F", "27"),
]


def wiki_matrix():
    return build(WIKI_COLUMNS, WIKI_ROWS)


class TestBuild:
    """Tests for matrix construction."""

    def test_dimensions(self):
        matrix = wiki_matrix()
        assert matrix.n_columns == 7
        assert matrix.n_rows == 6
        assert matrix.n_nodes == 17

    def test_column_sizes(self):
        matrix = wiki_matrix()
        sizes = [matrix.size[matrix.header_of(c)] for c in WIKI_COLUMNS]
        assert sizes == [2, 2, 2, 3, 2, 2, 4]

    def test_integrity_after_build(self):
        wiki_matrix().check_integrity()

    def test_column_order_follows_row_order(self):
        matrix = wiki_matrix()
        nodes = matrix.column_nodes(matrix.header_of("7"))
        assert [matrix.row_ids[matrix.row[n]] for n in nodes] == ["A", "C", "E", "F"]

    def test_row_nodes_keep_insertion_order(self):
        matrix = wiki_matrix()
        head = matrix.row_heads[matrix.row_of("E")]
        columns = [matrix.column_ids[matrix.column[n] - 1] for n in matrix.row_nodes(head)]
        assert columns == ["2", "3", "6", "7"]

    def test_to_dense(self):
        dense = wiki_matrix().to_dense()
        assert dense.shape == (6, 7)
        assert dense[0].tolist() == [1, 0, 0, 1, 0, 0, 1]
        assert int(dense.sum()) == 17

    def test_secondary_columns_not_in_header(self):
        matrix = build(
            [Column("a"), Column("b", ColumnKind.SECONDARY), Column.secondary("c")],
            [Row(1, ["a", "b"]), Row(2, ["a", "c"])]
        )
        assert matrix.active_columns() == ["a"]
        assert matrix.size[matrix.header_of("b")] == 1
        matrix.check_integrity()

    def test_row_tuples_and_bare_ids(self):
        matrix = build(["x", "y"], [("r", ["x", "y"])])
        assert matrix.active_columns() == ["x", "y"]
        assert matrix.row_ids == ["r"]

    def test_empty_instance(self):
        matrix = build([], [])
        assert matrix.active_columns() == []
        matrix.check_integrity()


class TestMalformedInstance:
    """Tests for rejected instances."""

    def test_empty_row(self):
        with pytest.raises(MalformedInstance) as exc:
            build(["a"], [("r", [])])
        assert exc.value.row_id == "r"

    def test_unknown_column(self):
        with pytest.raises(MalformedInstance) as exc:
            build(["a"], [("r", ["a", "z"])])
        assert exc.value.column_id == "z"

    def test_duplicate_column_in_row(self):
        with pytest.raises(MalformedInstance):
            build(["a", "b"], [("r", ["a", "b", "a"])])

    def test_duplicate_column_id(self):
        with pytest.raises(MalformedInstance):
            build(["a", "a"], [])

    def test_duplicate_row_id(self):
        with pytest.raises(MalformedInstance):
            build(["a", "b"], [("r", ["a"]), ("r", ["b"])])

    def test_unknown_required_row(self):
        with pytest.raises(MalformedInstance):
            build(["a"], [("r", ["a"])], required_rows=["s"])

    def test_repeated_required_row(self):
        with pytest.raises(MalformedInstance):
            build(["a"], [("r", ["a"])], required_rows=["r", "r"])

    def test_unhashable_column_id(self):
        with pytest.raises(MalformedInstance) as exc:
            build([["a"]], [])
        assert exc.value.column_id == ["a"]

    def test_unhashable_column_in_row(self):
        with pytest.raises(MalformedInstance) as exc:
            build(["a"], [("r", [["a"]])])
        assert exc.value.row_id == "r"

    def test_unhashable_row_id(self):
        with pytest.raises(MalformedInstance):
            build(["a"], [(["r"], ["a"])])

    def test_unhashable_required_row(self):
        with pytest.raises(MalformedInstance):
            build(["a"], [("r", ["a"])], required_rows=[["r"]])

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            build(["a"], [("r", [])])


class TestCoverUncover:
    """Tests for the reversible structural edits."""

    def test_cover_removes_conflicting_rows(self):
        matrix = wiki_matrix()
        matrix.cover(matrix.header_of("1"))

        assert "1" not in matrix.active_columns()
        # Rows A and B touch column 1, so they vanish from 4 and 7
        assert matrix.size[matrix.header_of("4")] == 1
        assert matrix.size[matrix.header_of("7")] == 3
        matrix.check_integrity()

        dense = matrix.to_dense()
        assert dense[0, 0] == 1
        assert dense[0, 3] == 0 and dense[0, 6] == 0

    def test_uncover_restores_exactly(self):
        matrix = wiki_matrix()
        before = matrix.snapshot()

        c = matrix.header_of("4")
        matrix.cover(c)
        assert matrix.snapshot() != before
        matrix.uncover(c)

        assert matrix.snapshot() == before

    def test_repeated_cover_uncover(self):
        matrix = wiki_matrix()
        before = matrix.snapshot()
        c = matrix.header_of("7")
        for _ in range(10):
            matrix.cover(c)
            matrix.uncover(c)
        assert matrix.snapshot() == before

    def test_nested_balanced_sequence(self):
        matrix = wiki_matrix()
        before = matrix.snapshot()
        order = [matrix.header_of(c) for c in ["7", "1", "3", "5"]]

        for c in order:
            matrix.cover(c)
            matrix.check_integrity()
        for c in reversed(order):
            matrix.uncover(c)
            matrix.check_integrity()

        assert matrix.snapshot() == before
        assert matrix.active_columns() == WIKI_COLUMNS

    def test_cover_secondary_leaves_header(self):
        matrix = build(["a", Column.secondary("s")], [(1, ["a", "s"]), (2, ["s"])])
        before = matrix.snapshot()
        s = matrix.header_of("s")

        matrix.cover(s)
        assert matrix.active_columns() == ["a"]
        assert matrix.size[matrix.header_of("a")] == 0
        matrix.uncover(s)

        assert matrix.snapshot() == before

    def test_update_counter(self):
        matrix = wiki_matrix()
        matrix.cover(matrix.header_of("1"))
        # A contributes nodes in 4 and 7, B one node in 4
        assert matrix.updates == 3

    def test_integrity_detects_corruption(self):
        matrix = wiki_matrix()
        c = matrix.header_of("7")
        matrix.size[c] += 1
        with pytest.raises(MatrixCorruption):
            matrix.check_integrity()


class TestHeuristics:
    """Tests for column selection."""

    def test_min_size_prefers_smallest(self):
        matrix = build(["a", "b", "c"], [(1, "ab"), (2, "a"), (3, "c"), (4, "ac")])
        assert choose_min_size(matrix) == matrix.header_of("b")

    def test_min_size_tie_goes_to_first(self):
        matrix = wiki_matrix()
        assert choose_min_size(matrix) == matrix.header_of("1")

    def test_min_size_skips_covered_columns(self):
        matrix = wiki_matrix()
        matrix.cover(matrix.header_of("1"))
        assert choose_min_size(matrix) == matrix.header_of("4")

    def test_first(self):
        matrix = build(["a", "b"], [(1, "a"), (2, "a"), (3, "b")])
        assert choose_first(matrix) == matrix.header_of("a")

    def test_zero_size_column_is_chosen(self):
        matrix = build(["a", "b"], [(1, "a")])
        c = choose_min_size(matrix)
        assert c == matrix.header_of("b")
        assert matrix.size[c] == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
