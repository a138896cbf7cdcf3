"""Knuth's Algorithm X driven over a dancing links matrix."""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Tuple

from .heuristics import get_heuristic
from .matrix import IncidenceMatrix

logger = logging.getLogger(__name__)

Solution = Tuple[Hashable, ...]


class SinkAction(Enum):
    """What a solution callback wants the driver to do next."""
    CONTINUE = "continue"
    STOP = "stop"


SolutionSink = Callable[[Solution], Optional[SinkAction]]


@dataclass
class SearchStats:
    """Statistics from a search run."""
    solutions: int = 0
    time_seconds: float = 0.0
    memory_bytes: int = 0

    # Column-selection points visited and dead ends hit
    nodes_explored: int = 0
    backtracks: int = 0
    updates: int = 0
    max_depth: int = 0

    cancelled: bool = False
    heuristic: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solutions": self.solutions,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "nodes_explored": self.nodes_explored,
            "backtracks": self.backtracks,
            "updates": self.updates,
            "max_depth": self.max_depth,
            "cancelled": self.cancelled,
            "heuristic": self.heuristic,
            **self.extra
        }


class _Cancelled(Exception):
    """Unwinds the search when a step or time limit is hit."""


class AlgorithmX:
    """
    Depth-first exact cover search.

    Each stack frame is one column-selection point: choose a column,
    cover it, then try every row left in it. Solutions are produced lazily by
    :meth:`solutions`; whenever that iterator finishes or is closed, every
    cover it made has been undone and the matrix is back at rest.
    """

    def __init__(
        self,
        matrix: IncidenceMatrix,
        heuristic: str = "min-size",
        max_steps: Optional[int] = None,
        timeout_seconds: Optional[float] = None
    ):
        """
        Args:
            matrix: The instance to search. Only one search may run on it at a time.
            heuristic: Name of the column selection heuristic.
            max_steps: Stop after this many column-selection points.
            timeout_seconds: Stop once this much wall-clock time has passed.
        """
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

        self.matrix = matrix
        self.heuristic = heuristic
        self.max_steps = max_steps
        self.timeout_seconds = timeout_seconds
        self.stats = SearchStats(heuristic=heuristic)

        self._choose = get_heuristic(heuristic)
        self._partial: List[Hashable] = []
        self._deadline: Optional[float] = None

    def run(self, max_solutions: int = 1, on_solution: Optional[SolutionSink] = None) -> int:
        """
        Search until ``max_solutions`` are found, the sink says stop, the
        tree is exhausted, or a limit is hit.

        Returns:
            Number of solutions found. Zero is a normal outcome.
        """
        if max_solutions < 1:
            raise ValueError(f"max_solutions must be at least 1, got {max_solutions}")

        count = 0
        solutions = self.solutions()
        try:
            for solution in solutions:
                count += 1
                action = on_solution(solution) if on_solution is not None else None
                if action is SinkAction.STOP or count >= max_solutions:
                    break
        finally:
            solutions.close()

        logger.info(
            "Search finished: %d solution(s), %d nodes, %d backtracks in %.4fs",
            count, self.stats.nodes_explored, self.stats.backtracks, self.stats.time_seconds
        )
        return count

    def solutions(self, limit: Optional[int] = None) -> Iterator[Solution]:
        """Lazily yield solutions as tuples of row ids, required rows first."""
        matrix = self.matrix
        if matrix.busy:
            raise RuntimeError("A search is already running on this matrix")
        matrix.busy = True

        self.stats = SearchStats(heuristic=self.heuristic)
        self._partial = []
        updates_before = matrix.updates
        start_time = time.perf_counter()
        self._deadline = start_time + self.timeout_seconds if self.timeout_seconds else None

        selected: List[int] = []
        try:
            if not self._select_required(selected):
                return
            search = self._search()
            try:
                for solution in search:
                    self.stats.solutions += 1
                    logger.debug("Solution %d: %r", self.stats.solutions, solution)
                    yield solution
                    if limit is not None and self.stats.solutions >= limit:
                        return
            finally:
                search.close()
        except _Cancelled:
            self.stats.cancelled = True
            logger.warning(
                "Search cancelled after %d nodes with %d solution(s) found",
                self.stats.nodes_explored, self.stats.solutions
            )
        finally:
            self._release_required(selected)
            self._partial = []
            self.stats.updates = matrix.updates - updates_before
            self.stats.time_seconds = time.perf_counter() - start_time
            matrix.busy = False

    def _search(self) -> Iterator[Solution]:
        """
        Depth-first search driven by an explicit stack of frames.

        Each frame is ``[column, row node]``: a covered column and the row
        currently selected from it (the column header itself before the
        first row is tried). The stack length is the search depth.
        """
        matrix = self.matrix
        D, S = matrix.down, matrix.size
        stats = self.stats
        stack: List[List[int]] = []

        try:
            while True:
                # No primary column left to satisfy
                if matrix.right[0] == 0:
                    yield tuple(self._partial)
                else:
                    stats.nodes_explored += 1
                    if len(stack) > stats.max_depth:
                        stats.max_depth = len(stack)
                    self._check_limits()

                    c = self._choose(matrix)
                    if S[c] == 0:
                        stats.backtracks += 1
                    else:
                        matrix.cover(c)
                        stack.append([c, c])

                # Move to the next untried row, leaving exhausted columns
                while stack:
                    frame = stack[-1]
                    c, r = frame
                    if r != c:
                        self._unselect(r)
                    r = frame[1] = D[r]
                    if r != c:
                        self._select(r)
                        break
                    matrix.uncover(c)
                    stack.pop()
                else:
                    return
        finally:
            while stack:
                c, r = stack.pop()
                if r != c:
                    self._unselect(r)
                matrix.uncover(c)

    def _select(self, r: int) -> None:
        """Add the row of node ``r`` to the partial solution."""
        matrix = self.matrix
        R, C = matrix.right, matrix.column
        self._partial.append(matrix.row_ids[matrix.row[r]])
        j = R[r]
        while j != r:
            matrix.cover(C[j])
            j = R[j]

    def _unselect(self, r: int) -> None:
        matrix = self.matrix
        L, C = matrix.left, matrix.column
        j = L[r]
        while j != r:
            matrix.uncover(C[j])
            j = L[j]
        self._partial.pop()

    def _check_limits(self) -> None:
        if self.max_steps is not None and self.stats.nodes_explored > self.max_steps:
            raise _Cancelled()
        if self._deadline is not None and time.perf_counter() > self._deadline:
            raise _Cancelled()

    def _select_required(self, selected: List[int]) -> bool:
        """Commit the required rows; False if two of them collide."""
        matrix = self.matrix
        used = set()
        for r in matrix.required:
            head = matrix.row_heads[r]
            columns = [matrix.column[n] for n in matrix.row_nodes(head)]
            if used.intersection(columns):
                logger.info("Required row %r collides with another required row", matrix.row_ids[r])
                return False
            used.update(columns)
            for c in columns:
                matrix.cover(c)
            selected.append(head)
            self._partial.append(matrix.row_ids[r])
        return True

    def _release_required(self, selected: List[int]) -> None:
        matrix = self.matrix
        for head in reversed(selected):
            for node in reversed(matrix.row_nodes(head)):
                matrix.uncover(matrix.column[node])
        selected.clear()


def search(
    matrix: IncidenceMatrix,
    max_solutions: int = 1,
    on_solution: Optional[SolutionSink] = None,
    *,
    heuristic: str = "min-size",
    max_steps: Optional[int] = None,
    timeout_seconds: Optional[float] = None
) -> int:
    """
    Find up to ``max_solutions`` exact covers of ``matrix``.

    Args:
        matrix: Instance built with :func:`~exactcover.core.matrix.build`.
        max_solutions: Stop after this many solutions (at least 1).
        on_solution: Called with each solution's row ids; returning
            ``SinkAction.STOP`` ends the search early.
        heuristic: Column selection heuristic name.
        max_steps: Optional cap on column-selection points.
        timeout_seconds: Optional wall-clock cap.

    Returns:
        The number of solutions found.
    """
    solver = AlgorithmX(
        matrix, heuristic=heuristic, max_steps=max_steps, timeout_seconds=timeout_seconds
    )
    return solver.run(max_solutions, on_solution)


def iter_solutions(
    matrix: IncidenceMatrix,
    limit: Optional[int] = None,
    *,
    heuristic: str = "min-size",
    max_steps: Optional[int] = None,
    timeout_seconds: Optional[float] = None
) -> Iterator[Solution]:
    """Lazily enumerate solutions; close the iterator to abandon the search."""
    solver = AlgorithmX(
        matrix, heuristic=heuristic, max_steps=max_steps, timeout_seconds=timeout_seconds
    )
    return solver.solutions(limit)
