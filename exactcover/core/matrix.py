"""
Toroidal sparse incidence matrix ("dancing links") stored in an index arena.

Every node lives at an integer index into parallel lists. Index 0 is the
root header, indices ``1..n_columns`` are the column headers (in the order
the columns were given) and the remaining indices are row nodes. Links are
indices, so covering and uncovering a column is pure list assignment.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Hashable, Iterable, List, NamedTuple, Tuple

import numpy as np

from .instance import (
    Column,
    MalformedInstance,
    normalize_columns,
    normalize_rows,
)

logger = logging.getLogger(__name__)

ROOT = 0


class MatrixCorruption(RuntimeError):
    """Raised by integrity checks when the link structure is inconsistent."""


def _check_hashable(value: Any, kind: str, **ids: Any) -> None:
    try:
        hash(value)
    except TypeError:
        raise MalformedInstance(f"{kind} id {value!r} is not hashable", **ids) from None


class MatrixSnapshot(NamedTuple):
    """Copies of the link arrays, used to compare two at-rest states."""
    left: Tuple[int, ...]
    right: Tuple[int, ...]
    up: Tuple[int, ...]
    down: Tuple[int, ...]
    size: Tuple[int, ...]


class IncidenceMatrix:
    """
    An exact cover instance materialised as a dancing links torus.

    Built once by :func:`build`; afterwards only :meth:`cover` and
    :meth:`uncover` mutate it. Nodes are never added or removed.
    """

    def __init__(self, columns: List[Column]):
        n = len(columns)

        self.column_ids: List[Hashable] = [c.id for c in columns]
        self.primary: List[bool] = [c.primary for c in columns]
        self.row_ids: List[Hashable] = []
        self.row_heads: List[int] = []
        self.required: List[int] = []
        self.updates = 0
        self.busy = False

        self._column_index: Dict[Hashable, int] = {}
        self._row_index: Dict[Hashable, int] = {}

        # Headers link to themselves vertically and start with no rows
        self.left = list(range(n + 1))
        self.right = list(range(n + 1))
        self.up = list(range(n + 1))
        self.down = list(range(n + 1))
        self.column = list(range(n + 1))
        self.row = [-1] * (n + 1)
        self.size = [0] * (n + 1)

        # Only primary columns join the header list
        prev = ROOT
        for i, col in enumerate(columns, start=1):
            _check_hashable(col.id, "Column", column_id=col.id)
            if col.id in self._column_index:
                raise MalformedInstance(f"Duplicate column id {col.id!r}", column_id=col.id)
            self._column_index[col.id] = i
            if not col.primary:
                continue
            self.left[i] = prev
            self.right[prev] = i
            prev = i
        self.right[prev] = ROOT
        self.left[ROOT] = prev

    @property
    def n_columns(self) -> int:
        return len(self.column_ids)

    @property
    def n_rows(self) -> int:
        return len(self.row_ids)

    @property
    def n_nodes(self) -> int:
        """Number of row nodes (set intersections)."""
        return len(self.left) - self.n_columns - 1

    def header_of(self, column_id: Hashable) -> int:
        """Arena index of a column header."""
        return self._column_index[column_id]

    def row_of(self, row_id: Hashable) -> int:
        """Position of a row in build order."""
        return self._row_index[row_id]

    def add_row(self, row_id: Hashable, column_ids: Iterable[Hashable]) -> None:
        """Append a row, linking its nodes at the bottom of each column."""
        column_ids = tuple(column_ids)
        _check_hashable(row_id, "Row", row_id=row_id)
        if row_id in self._row_index:
            raise MalformedInstance(f"Duplicate row id {row_id!r}", row_id=row_id)
        if not column_ids:
            raise MalformedInstance(f"Row {row_id!r} covers no columns", row_id=row_id)

        headers = []
        seen = set()
        for cid in column_ids:
            _check_hashable(cid, "Column", row_id=row_id, column_id=cid)
            if cid not in self._column_index:
                raise MalformedInstance(
                    f"Row {row_id!r} references unknown column {cid!r}",
                    row_id=row_id, column_id=cid
                )
            if cid in seen:
                raise MalformedInstance(
                    f"Row {row_id!r} references column {cid!r} more than once",
                    row_id=row_id, column_id=cid
                )
            seen.add(cid)
            headers.append(self._column_index[cid])

        L, R, U, D = self.left, self.right, self.up, self.down
        r = len(self.row_ids)
        first = len(L)

        for k, c in enumerate(headers):
            node = first + k
            # Link vertically (insert above column header)
            U.append(U[c])
            D.append(c)
            D[U[c]] = node
            U[c] = node
            self.size[c] += 1

            # Link horizontally (circular, insertion order)
            L.append(first + (k - 1) % len(headers))
            R.append(first + (k + 1) % len(headers))
            self.column.append(c)
            self.row.append(r)

        self._row_index[row_id] = r
        self.row_ids.append(row_id)
        self.row_heads.append(first)

    def cover(self, c: int) -> None:
        """Remove column ``c`` and every row intersecting it."""
        L, R, U, D, C, S = self.left, self.right, self.up, self.down, self.column, self.size

        # Secondary headers point at themselves, so this is a no-op for them
        R[L[c]] = R[c]
        L[R[c]] = L[c]

        updates = 0
        i = D[c]
        while i != c:
            j = R[i]
            while j != i:
                D[U[j]] = D[j]
                U[D[j]] = U[j]
                S[C[j]] -= 1
                updates += 1
                j = R[j]
            i = D[i]
        self.updates += updates

    def uncover(self, c: int) -> None:
        """Undo :meth:`cover` for column ``c``, in exact reverse order."""
        L, R, U, D, C, S = self.left, self.right, self.up, self.down, self.column, self.size

        i = U[c]
        while i != c:
            j = L[i]
            while j != i:
                S[C[j]] += 1
                D[U[j]] = j
                U[D[j]] = j
                j = L[j]
            i = U[i]

        R[L[c]] = c
        L[R[c]] = c

    def column_nodes(self, c: int) -> List[int]:
        """Nodes currently in column ``c``, top to bottom."""
        nodes = []
        i = self.down[c]
        while i != c:
            nodes.append(i)
            i = self.down[i]
        return nodes

    def row_nodes(self, node: int) -> List[int]:
        """All nodes of the row containing ``node``, starting with it."""
        nodes = [node]
        j = self.right[node]
        while j != node:
            nodes.append(j)
            j = self.right[j]
        return nodes

    def active_columns(self) -> List[Hashable]:
        """Ids of primary columns still waiting to be covered."""
        ids = []
        c = self.right[ROOT]
        while c != ROOT:
            ids.append(self.column_ids[c - 1])
            c = self.right[c]
        return ids

    def snapshot(self) -> MatrixSnapshot:
        return MatrixSnapshot(
            tuple(self.left), tuple(self.right),
            tuple(self.up), tuple(self.down), tuple(self.size)
        )

    def check_integrity(self) -> None:
        """
        Verify the torus invariants for every reachable node.

        Raises:
            MatrixCorruption: If a link does not point back, a size does not
                match its column, or a secondary column sits in the header list.
        """
        L, R, U, D = self.left, self.right, self.up, self.down

        c = R[ROOT]
        while c != ROOT:
            if L[R[c]] != c or R[L[c]] != c:
                raise MatrixCorruption(f"Header list broken at column {self.column_ids[c - 1]!r}")
            if not self.primary[c - 1]:
                raise MatrixCorruption(f"Secondary column {self.column_ids[c - 1]!r} in header list")
            c = R[c]

        for c in range(1, self.n_columns + 1):
            count = 0
            i = D[c]
            while i != c:
                if U[D[i]] != i or D[U[i]] != i:
                    raise MatrixCorruption(f"Vertical links broken at node {i}")
                if L[R[i]] != i or R[L[i]] != i:
                    raise MatrixCorruption(f"Horizontal links broken at node {i}")
                if self.column[i] != c:
                    raise MatrixCorruption(f"Node {i} is filed under the wrong column")
                count += 1
                i = D[i]
            if count != self.size[c]:
                raise MatrixCorruption(
                    f"Column {self.column_ids[c - 1]!r} has size {self.size[c]} "
                    f"but {count} reachable nodes"
                )

    def to_dense(self) -> np.ndarray:
        """
        Nodes reachable from each column header, as a 0/1 array.

        Rows and columns keep build order. Covering a column leaves its own
        nodes in place but removes its rows from every other column.
        """
        dense = np.zeros((self.n_rows, self.n_columns), dtype=np.int8)
        for c in range(1, self.n_columns + 1):
            for node in self.column_nodes(c):
                dense[self.row[node], c - 1] = 1
        return dense

    def __repr__(self) -> str:
        return (
            f"IncidenceMatrix(columns={self.n_columns}, rows={self.n_rows}, "
            f"nodes={self.n_nodes})"
        )


def build(
    columns: Iterable[Any],
    rows: Iterable[Any],
    required_rows: Iterable[Hashable] = ()
) -> IncidenceMatrix:
    """
    Build the dancing links matrix for an exact cover instance.

    Args:
        columns: ``Column`` objects or bare ids (treated as primary).
        rows: ``Row`` objects or ``(row_id, column_ids)`` pairs.
        required_rows: Row ids that every solution must contain.

    Returns:
        The matrix, at rest and ready to search.

    Raises:
        MalformedInstance: On an empty row, an unknown or repeated column in
            a row, a duplicate or unhashable id, or a bad required row.
    """
    matrix = IncidenceMatrix(normalize_columns(columns))
    for row in normalize_rows(rows):
        matrix.add_row(row.id, row.column_ids)

    for row_id in required_rows:
        _check_hashable(row_id, "Required row", row_id=row_id)
        if row_id not in matrix._row_index:
            raise MalformedInstance(f"Unknown required row {row_id!r}", row_id=row_id)
        r = matrix.row_of(row_id)
        if r in matrix.required:
            raise MalformedInstance(f"Required row {row_id!r} listed twice", row_id=row_id)
        matrix.required.append(r)

    logger.debug(
        "Built matrix: %d columns (%d primary), %d rows, %d nodes",
        matrix.n_columns, sum(matrix.primary), matrix.n_rows, matrix.n_nodes
    )
    return matrix
