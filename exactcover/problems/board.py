"""Sudoku board representation with support for variable sizes."""

from __future__ import annotations
import string

import numpy as np
from typing import Iterable, List, Optional, Set, Tuple


class BoardFormatError(ValueError):
    """Raised when puzzle text cannot be read as a board."""


def _symbol_value(ch: str) -> int:
    """Map a cell symbol to its value; 0 and '.' are empty."""
    if ch in "0.":
        return 0
    if ch in "123456789":
        return int(ch)
    if ch in string.ascii_letters:
        return ord(ch.upper()) - ord('A') + 10
    raise BoardFormatError(f"Invalid character {ch!r}")


class SudokuBoard:
    """
    Represents a Sudoku board of configurable size.

    Standard Sudoku is 9x9 with 3x3 boxes.
    Supports 4x4 (2x2 boxes), 16x16 (4x4 boxes) and 25x25 (5x5 boxes).
    """

    def __init__(self, size: int = 9, grid: Optional[np.ndarray] = None):
        """
        Initialize a Sudoku board.

        Args:
            size: Board size (4, 9, 16 or 25). Must be a perfect square.
            grid: Optional initial grid. If None, creates empty board.
        """
        box_size = int(round(np.sqrt(size)))
        if size < 1 or box_size * box_size != size:
            raise ValueError(f"Size must be a perfect square, got {size}")

        self.size = size
        self.box_size = box_size

        if grid is not None:
            if grid.shape != (size, size):
                raise ValueError(f"Grid shape must be ({size}, {size})")
            if grid.min() < 0 or grid.max() > size:
                raise ValueError(f"Cell values must be 0-{size}")
            self.grid = grid.copy().astype(np.int32)
        else:
            self.grid = np.zeros((size, size), dtype=np.int32)

    def copy(self) -> SudokuBoard:
        """Create a deep copy of the board."""
        return SudokuBoard(self.size, self.grid)

    def get(self, row: int, col: int) -> int:
        """Get value at position (row, col). 0 means empty."""
        return int(self.grid[row, col])

    def set(self, row: int, col: int, value: int) -> None:
        """Set value at position (row, col). Use 0 to clear."""
        if value < 0 or value > self.size:
            raise ValueError(f"Value must be 0-{self.size}, got {value}")
        self.grid[row, col] = value

    def is_empty(self, row: int, col: int) -> bool:
        return self.grid[row, col] == 0

    def get_box(self, row: int, col: int) -> np.ndarray:
        """Get all values in the box containing (row, col)."""
        box_row = (row // self.box_size) * self.box_size
        box_col = (col // self.box_size) * self.box_size
        return self.grid[box_row:box_row + self.box_size,
                         box_col:box_col + self.box_size].flatten()

    def get_box_index(self, row: int, col: int) -> int:
        """Get the box index (0 to size-1) for a cell."""
        return (row // self.box_size) * self.box_size + (col // self.box_size)

    def get_candidates(self, row: int, col: int) -> Set[int]:
        """
        Get all values not yet used by the peers of an empty cell.

        Returns an empty set if the cell is filled.
        """
        if not self.is_empty(row, col):
            return set()

        used = set(self.grid[row, :].tolist())
        used |= set(self.grid[:, col].tolist())
        used |= set(self.get_box(row, col).tolist())
        return set(range(1, self.size + 1)) - used

    def clues(self) -> List[Tuple[int, int, int]]:
        """Filled cells as (row, col, value)."""
        rows, cols = np.nonzero(self.grid)
        return [(int(r), int(c), int(self.grid[r, c])) for r, c in zip(rows, cols)]

    def count_empty(self) -> int:
        return int(np.sum(self.grid == 0))

    def count_filled(self) -> int:
        return int(np.sum(self.grid != 0))

    def _units(self) -> Iterable[np.ndarray]:
        for i in range(self.size):
            yield self.grid[i, :]
            yield self.grid[:, i]
        for box_row in range(0, self.size, self.box_size):
            for box_col in range(0, self.size, self.box_size):
                yield self.get_box(box_row, box_col)

    def is_valid(self) -> bool:
        """
        Check that no row, column or box repeats a value.
        Empty cells are ignored, so a partial board can be valid.
        """
        for unit in self._units():
            non_zero = unit[unit != 0]
            if len(non_zero) != len(set(non_zero.tolist())):
                return False
        return True

    def is_solved(self) -> bool:
        """Check if the puzzle is completely and correctly solved."""
        return self.count_empty() == 0 and self.is_valid()

    def agrees_with(self, puzzle: SudokuBoard) -> bool:
        """True if every clue of ``puzzle`` appears unchanged on this board."""
        if puzzle.size != self.size:
            return False
        mask = puzzle.grid != 0
        return bool(np.array_equal(self.grid[mask], puzzle.grid[mask]))

    def to_string(self) -> str:
        """
        Convert board to a compact string representation.
        Uses 0 for empty cells, 1-9 for values, A-P for 10-25.
        """
        chars = []
        for val in self.grid.flatten().tolist():
            if val <= 9:
                chars.append(str(val))
            else:
                chars.append(chr(ord('A') + val - 10))
        return ''.join(chars)

    @classmethod
    def from_string(cls, s: str, size: int = 9) -> SudokuBoard:
        """
        Create a board from a compact string.

        Args:
            s: String of length size*size.
               0 or . for empty, 1-9 for values, A-P for 10-25.
            size: Board size.

        Raises:
            BoardFormatError: On a bad length or character.
        """
        if len(s) != size * size:
            raise BoardFormatError(f"String length must be {size*size}, got {len(s)}")

        values = [_symbol_value(ch) for ch in s]
        if max(values) > size:
            raise BoardFormatError(f"Values must be 0-{size}")
        return cls(size, np.array(values, dtype=np.int32).reshape(size, size))

    @classmethod
    def from_text(cls, text: str, size: int = 9) -> SudokuBoard:
        """
        Read the grid layout used in puzzle files.

        Each non-blank line is one board row; spaces are ignored and '.' or
        '0' mark empty cells, so both ``53. .7. ...`` and ``530070000``
        work. A whole puzzle on one line is accepted as well.

        Raises:
            BoardFormatError: On an unknown character or a row or board of
                the wrong size.
        """
        lines = [line.replace(" ", "").replace("\t", "") for line in text.splitlines()]
        lines = [line for line in lines if line]

        if len(lines) == 1 and len(lines[0]) == size * size:
            return cls.from_string(lines[0], size)

        if len(lines) != size:
            raise BoardFormatError(f"Expected {size} rows, got {len(lines)}")

        grid = np.zeros((size, size), dtype=np.int32)
        for i, line in enumerate(lines):
            values = [_symbol_value(ch) for ch in line]
            if len(values) != size:
                raise BoardFormatError(f"Row {i + 1} has {len(values)} cells, expected {size}")
            if max(values) > size:
                raise BoardFormatError(f"Row {i + 1} has a value above {size}")
            grid[i, :] = values

        return cls(size, grid)

    @classmethod
    def from_file(cls, path: str, size: int = 9) -> SudokuBoard:
        with open(path, "r") as f:
            return cls.from_text(f.read(), size)

    @classmethod
    def from_2d_list(cls, data: List[List[int]]) -> SudokuBoard:
        """Create a board from a 2D list."""
        arr = np.array(data, dtype=np.int32)
        return cls(arr.shape[0], arr)

    def __str__(self) -> str:
        """Pretty-print the board."""
        lines = []
        horizontal_sep = '+' + (('-' * (self.box_size * 2 + 1)) + '+') * self.box_size

        for i in range(self.size):
            if i % self.box_size == 0:
                lines.append(horizontal_sep)

            row_str = '|'
            for j in range(self.size):
                val = self.grid[i, j]
                if val == 0:
                    row_str += ' .'
                elif val <= 9:
                    row_str += f' {val}'
                else:
                    row_str += f' {chr(ord("A") + val - 10)}'

                if (j + 1) % self.box_size == 0:
                    row_str += ' |'

            lines.append(row_str)

        lines.append(horizontal_sep)
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"SudokuBoard(size={self.size}, filled={self.count_filled()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SudokuBoard):
            return False
        return self.size == other.size and np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash(self.to_string())
