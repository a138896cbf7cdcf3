"""N-queens as exact cover with secondary diagonal constraints."""

from __future__ import annotations
from typing import List, Sequence, Tuple

import numpy as np

from .base_problem import ExactCoverProblem
from ..core.instance import Column, ColumnKind, Row

Placement = Tuple[int, int]


class QueensBoard:
    """An N x N board of queens; 1 marks a queen."""

    def __init__(self, n: int, placements: Sequence[Placement] = ()):
        self.n = n
        self.grid = np.zeros((n, n), dtype=np.int8)
        for rank, file in placements:
            self.grid[rank, file] = 1

    @property
    def placements(self) -> List[Placement]:
        """Queen positions as (rank, file), sorted by rank."""
        return [(int(r), int(f)) for r, f in zip(*np.nonzero(self.grid))]

    def is_valid(self) -> bool:
        """True if there are N queens and no two attack each other."""
        if int(self.grid.sum()) != self.n:
            return False
        if (self.grid.sum(axis=0) > 1).any() or (self.grid.sum(axis=1) > 1).any():
            return False
        flipped = np.fliplr(self.grid)
        for offset in range(-self.n + 1, self.n):
            if self.grid.trace(offset) > 1 or flipped.trace(offset) > 1:
                return False
        return True

    def __str__(self) -> str:
        return "\n".join(
            "".join("Q" if cell else "." for cell in row) for row in self.grid
        )

    def __repr__(self) -> str:
        return f"QueensBoard(n={self.n}, placements={self.placements})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueensBoard):
            return False
        return self.n == other.n and np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash((self.n, tuple(self.placements)))


class NQueensProblem(ExactCoverProblem[QueensBoard]):
    """
    Place N queens so that none attacks another.

    - One queen per rank (N primary constraints)
    - One queen per file (N primary constraints)
    - At most one queen per diagonal and anti-diagonal (2 x (2N - 1)
      secondary constraints)

    Every square is a candidate row.
    """

    name = "N-queens"

    def __init__(self, n: int, **kwargs):
        if n < 1:
            raise ValueError(f"Board size must be at least 1, got {n}")
        super().__init__(**kwargs)
        self.n = n

    def columns(self) -> List[Column]:
        n = self.n
        columns = [Column(("rank", r)) for r in range(n)]
        columns += [Column(("file", f)) for f in range(n)]
        columns += [Column(("diag", d), ColumnKind.SECONDARY) for d in range(-n + 1, n)]
        columns += [Column(("anti", a), ColumnKind.SECONDARY) for a in range(2 * n - 1)]
        return columns

    def rows(self) -> List[Row]:
        rows = []
        for rank in range(self.n):
            for file in range(self.n):
                rows.append(Row(
                    (rank, file),
                    [("rank", rank), ("file", file), ("diag", rank - file), ("anti", rank + file)]
                ))
        return rows

    def decode(self, row_ids: Sequence[Placement]) -> QueensBoard:
        return QueensBoard(self.n, row_ids)

    def __repr__(self) -> str:
        return f"NQueensProblem(n={self.n}, heuristic={self.heuristic!r})"
