"""Problem encoders: puzzles expressed as exact cover instances."""

from .base_problem import ExactCoverProblem
from .board import SudokuBoard, BoardFormatError
from .set_family import SetFamilyProblem
from .nqueens import NQueensProblem, QueensBoard
from .sudoku import SudokuProblem, solve_sudoku

__all__ = [
    "ExactCoverProblem",
    "SudokuBoard",
    "BoardFormatError",
    "SetFamilyProblem",
    "NQueensProblem",
    "QueensBoard",
    "SudokuProblem",
    "solve_sudoku",
]
