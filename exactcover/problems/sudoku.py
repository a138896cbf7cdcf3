"""Sudoku as exact cover."""

from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple

from .base_problem import ExactCoverProblem
from .board import SudokuBoard
from ..core.instance import Column, Row

logger = logging.getLogger(__name__)

Candidate = Tuple[int, int, int]


class SudokuProblem(ExactCoverProblem[SudokuBoard]):
    """
    Sudoku formulated as an exact cover problem:
    - Each cell must have exactly one value (n^2 constraints)
    - Each row must have each digit exactly once (n^2 constraints)
    - Each column must have each digit exactly once (n^2 constraints)
    - Each box must have each digit exactly once (n^2 constraints)

    For 9x9 that is 324 constraints and at most 729 candidates
    (row, col, digit). Clue cells keep only their given digit and empty
    cells only the digits their peers allow.
    """

    name = "Sudoku"

    def __init__(self, board: SudokuBoard, **kwargs):
        super().__init__(**kwargs)
        self.board = board.copy()

    @classmethod
    def from_string(cls, s: str, size: int = 9, **kwargs) -> SudokuProblem:
        return cls(SudokuBoard.from_string(s, size), **kwargs)

    def columns(self) -> List[Column]:
        n = self.board.size
        columns = [Column(("cell", r, c)) for r in range(n) for c in range(n)]
        for unit in ("row", "col", "box"):
            columns += [Column((unit, i, d)) for i in range(n) for d in range(1, n + 1)]
        return columns

    def candidates(self) -> List[Candidate]:
        """The (row, col, digit) choices consistent with the clues."""
        board = self.board
        result = []
        for r in range(board.size):
            for c in range(board.size):
                if board.is_empty(r, c):
                    digits = sorted(board.get_candidates(r, c))
                else:
                    digits = [board.get(r, c)]
                result.extend((r, c, d) for d in digits)
        return result

    def rows(self) -> List[Row]:
        board = self.board
        rows = []
        for r, c, d in self.candidates():
            b = board.get_box_index(r, c)
            rows.append(Row((r, c, d), [("cell", r, c), ("row", r, d), ("col", c, d), ("box", b, d)]))
        logger.debug("Sudoku %dx%d: %d candidate rows", board.size, board.size, len(rows))
        return rows

    def decode(self, row_ids: Sequence[Candidate]) -> SudokuBoard:
        """Write the chosen digits into a copy of the puzzle."""
        solution = self.board.copy()
        for r, c, d in row_ids:
            solution.set(r, c, d)
        return solution

    def has_unique_solution(self) -> bool:
        """
        Check if the puzzle has exactly one solution.

        Looks for a second solution after the first one.
        """
        return self.count_solutions(limit=2) == 1

    def __repr__(self) -> str:
        return f"SudokuProblem(size={self.board.size}, clues={self.board.count_filled()})"


def solve_sudoku(board: SudokuBoard, **kwargs) -> Optional[SudokuBoard]:
    """Solve a puzzle, returning the filled board or None if unsolvable."""
    solution, _ = SudokuProblem(board, **kwargs).solve()
    return solution
