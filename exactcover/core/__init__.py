"""Core module: dancing links matrix and the Algorithm X search."""

from .instance import Column, ColumnKind, Row, MalformedInstance
from .matrix import IncidenceMatrix, MatrixCorruption, build
from .heuristics import HEURISTICS, choose_min_size, choose_first
from .search import AlgorithmX, SearchStats, SinkAction, search, iter_solutions

__all__ = [
    "Column",
    "ColumnKind",
    "Row",
    "MalformedInstance",
    "IncidenceMatrix",
    "MatrixCorruption",
    "build",
    "HEURISTICS",
    "choose_min_size",
    "choose_first",
    "AlgorithmX",
    "SearchStats",
    "SinkAction",
    "search",
    "iter_solutions",
]
