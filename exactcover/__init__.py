"""Exact cover solving with dancing links and Knuth's Algorithm X."""

from .core import (
    Column,
    ColumnKind,
    Row,
    MalformedInstance,
    IncidenceMatrix,
    SearchStats,
    SinkAction,
    build,
    search,
    iter_solutions,
)

__version__ = "1.0.0"

__all__ = [
    "Column",
    "ColumnKind",
    "Row",
    "MalformedInstance",
    "IncidenceMatrix",
    "SearchStats",
    "SinkAction",
    "build",
    "search",
    "iter_solutions",
]
