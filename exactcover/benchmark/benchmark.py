"""Benchmarking framework for comparing column selection heuristics."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import json
import logging
import os

from tqdm import tqdm

from ..core.heuristics import HEURISTICS
from ..problems import ExactCoverProblem, NQueensProblem, SudokuProblem

logger = logging.getLogger(__name__)


# name -> puzzle string
SUDOKU_PUZZLES: Dict[str, str] = {
    "classic": (
        "530070000600195000098000060800060003400803001"
        "700020006060000280000419005000080079"
    ),
    "easy": (
        "003020600900305001001806400008102900700000008"
        "006708200002609500800203009005010300"
    ),
    "hard": (
        "000000000000003085001020000000507000004000100"
        "090000000500009007070040000300000008"
    ),
    "ai-escargot": (
        "100007090030020008009600500005300900010080002"
        "600004000300000010040000007007000300"
    ),
}


@dataclass
class BenchmarkCase:
    """One instance to benchmark; ``count_all`` enumerates every solution."""
    name: str
    family: str
    factory: Callable[..., ExactCoverProblem]
    count_all: bool = False


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    instance: str
    family: str
    heuristic: str
    solved: bool
    solutions: int
    time_seconds: float
    memory_bytes: int
    nodes_explored: int
    backtracks: int
    updates: int
    cancelled: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "instance": self.instance,
            "family": self.family,
            "heuristic": self.heuristic,
            "solved": self.solved,
            "solutions": self.solutions,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "memory_mb": self.memory_bytes / (1024 * 1024),
            "nodes_explored": self.nodes_explored,
            "backtracks": self.backtracks,
            "updates": self.updates,
            "cancelled": self.cancelled,
            **self.extra
        }


def default_cases(queens: Sequence[int] = range(4, 9)) -> List[BenchmarkCase]:
    """Built-in suite: the Sudoku puzzles above plus N-queens counts."""
    cases = [
        BenchmarkCase(
            name=f"sudoku-{name}",
            family="sudoku",
            factory=lambda puzzle=puzzle, **kw: SudokuProblem.from_string(puzzle, **kw)
        )
        for name, puzzle in SUDOKU_PUZZLES.items()
    ]
    cases += [
        BenchmarkCase(
            name=f"queens-{n}",
            family="queens",
            factory=lambda n=n, **kw: NQueensProblem(n, **kw),
            count_all=True
        )
        for n in queens
    ]
    return cases


class Benchmark:
    """
    Runs every case under every heuristic and collects search metrics.

    Slow runs are cut off by the search's own timeout, so a result may be
    marked ``cancelled`` instead of raising.
    """

    def __init__(
        self,
        cases: Optional[List[BenchmarkCase]] = None,
        heuristics: Optional[List[str]] = None,
        timeout_seconds: float = 60.0,
        track_memory: bool = False
    ):
        """
        Initialize the benchmark.

        Args:
            cases: Instances to run (default: built-in suite).
            heuristics: Heuristic names to compare (default: all).
            timeout_seconds: Maximum time per case per heuristic.
            track_memory: Record peak memory with tracemalloc (slower).
        """
        self.cases = cases if cases is not None else default_cases()
        self.heuristics = heuristics or list(HEURISTICS)
        for name in self.heuristics:
            if name not in HEURISTICS:
                raise ValueError(f"Unknown heuristic {name!r}")
        self.timeout_seconds = timeout_seconds
        self.track_memory = track_memory
        self.results: List[BenchmarkResult] = []

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Run the full benchmark suite.

        Returns:
            List of BenchmarkResult objects.
        """
        self.results = []
        total = len(self.cases) * len(self.heuristics)

        pbar = tqdm(total=total, desc="Benchmarking", disable=not show_progress)
        for case in self.cases:
            for heuristic in self.heuristics:
                pbar.set_postfix_str(f"{case.name}/{heuristic}")
                self.results.append(self._run_single(case, heuristic))
                pbar.update(1)
        pbar.close()

        return self.results

    def _run_single(self, case: BenchmarkCase, heuristic: str) -> BenchmarkResult:
        """Run a single case under a single heuristic."""
        problem = case.factory(
            heuristic=heuristic,
            timeout_seconds=self.timeout_seconds,
            track_memory=self.track_memory
        )

        if case.count_all:
            count = problem.count_solutions()
            stats = problem.stats
        else:
            _, stats = problem.solve()
            count = stats.solutions

        if stats.cancelled:
            logger.warning("%s with %s hit the %.1fs timeout", case.name, heuristic, self.timeout_seconds)

        return BenchmarkResult(
            instance=case.name,
            family=case.family,
            heuristic=heuristic,
            solved=count > 0 and not stats.cancelled,
            solutions=count,
            time_seconds=stats.time_seconds,
            memory_bytes=stats.memory_bytes,
            nodes_explored=stats.nodes_explored,
            backtracks=stats.backtracks,
            updates=stats.updates,
            cancelled=stats.cancelled,
            extra={"max_depth": stats.max_depth}
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        summary: Dict[str, Any] = {
            "instances": [c.name for c in self.cases],
            "heuristics": list(self.heuristics),
            "results_by_heuristic": {},
        }

        for heuristic in self.heuristics:
            results = [r for r in self.results if r.heuristic == heuristic]
            if not results:
                continue
            times = [r.time_seconds for r in results]
            nodes = [r.nodes_explored for r in results]
            summary["results_by_heuristic"][heuristic] = {
                "completed": sum(1 for r in results if not r.cancelled),
                "total_tested": len(results),
                "avg_time_seconds": sum(times) / len(times),
                "max_time_seconds": max(times),
                "total_nodes": sum(nodes),
                "solutions": {r.instance: r.solutions for r in results},
            }

        return summary

    def save_results(self, output_dir: str) -> Tuple[str, str]:
        """Save raw results and the summary as JSON; returns both paths."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        logger.info("Results saved to %s", output_dir)
        return results_file, summary_file
