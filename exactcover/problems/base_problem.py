"""Base problem interface and common utilities."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Generic, Hashable, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar
import tracemalloc

from ..core.instance import Column, Row
from ..core.matrix import IncidenceMatrix, build
from ..core.search import AlgorithmX, SearchStats

S = TypeVar("S")


class ExactCoverProblem(ABC, Generic[S]):
    """
    Abstract base class for puzzles expressed as exact cover.

    Subclasses encode themselves as columns and rows and decode a list of
    chosen row ids back into their own solution type. A fresh matrix is
    built for every search.
    """

    name: str = "ExactCoverProblem"

    def __init__(
        self,
        heuristic: str = "min-size",
        max_steps: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        track_memory: bool = False
    ):
        self.heuristic = heuristic
        self.max_steps = max_steps
        self.timeout_seconds = timeout_seconds
        self.track_memory = track_memory
        self.stats = SearchStats(heuristic=heuristic)

    @abstractmethod
    def columns(self) -> Iterable[Column]:
        """The constraints of the instance."""
        pass

    @abstractmethod
    def rows(self) -> Iterable[Row]:
        """The candidate rows of the instance."""
        pass

    def required_rows(self) -> Iterable[Hashable]:
        """Rows every solution must contain."""
        return ()

    @abstractmethod
    def decode(self, row_ids: Sequence[Hashable]) -> S:
        """
        Turn a solution of the matrix into a solution of the problem.

        Args:
            row_ids: Chosen row ids, in selection order.
        """
        pass

    def build(self) -> IncidenceMatrix:
        """Encode the problem as a fresh dancing links matrix."""
        return build(self.columns(), self.rows(), self.required_rows())

    def _solver(self, matrix: IncidenceMatrix) -> AlgorithmX:
        return AlgorithmX(
            matrix,
            heuristic=self.heuristic,
            max_steps=self.max_steps,
            timeout_seconds=self.timeout_seconds
        )

    def solve(self) -> Tuple[Optional[S], SearchStats]:
        """
        Find the first solution with timing and optional memory tracking.

        Returns:
            Tuple of (decoded solution or None, stats).
        """
        if self.track_memory:
            tracemalloc.start()

        try:
            solver = self._solver(self.build())
            found: List[Tuple[Hashable, ...]] = []
            solver.run(1, found.append)
        finally:
            if self.track_memory:
                current, peak = tracemalloc.get_traced_memory()
                tracemalloc.stop()

        self.stats = solver.stats
        if self.track_memory:
            self.stats.memory_bytes = peak

        solution = self.decode(found[0]) if found else None
        return solution, self.stats

    def solutions(self, limit: Optional[int] = None) -> Iterator[S]:
        """Lazily yield decoded solutions."""
        solver = self._solver(self.build())
        rows = solver.solutions(limit)
        try:
            for row_ids in rows:
                yield self.decode(row_ids)
        finally:
            rows.close()
            self.stats = solver.stats

    def count_solutions(self, limit: Optional[int] = None) -> int:
        """
        Count solutions, stopping early once ``limit`` is reached.

        Solutions are counted without being decoded.
        """
        solver = self._solver(self.build())
        count = solver.run(limit) if limit is not None else self._count_all(solver)
        self.stats = solver.stats
        return count

    @staticmethod
    def _count_all(solver: AlgorithmX) -> int:
        count = 0
        for _ in solver.solutions():
            count += 1
        return count

    def reset_stats(self) -> None:
        """Reset search statistics."""
        self.stats = SearchStats(heuristic=self.heuristic)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(heuristic={self.heuristic!r})"
