"""Command-line interface for the exact cover solver."""

import argparse
import logging
import sys

from .benchmark import Benchmark, Visualizer, default_cases
from .core.heuristics import HEURISTICS
from .core.search import SearchStats
from .problems import NQueensProblem, SetFamilyProblem, SudokuBoard, SudokuProblem


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Exact cover solver (Dancing Links / Algorithm X)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a Sudoku given as an 81 character string
  python -m exactcover.cli sudoku --puzzle "530070000600195..."

  # Count all solutions of the 8 queens puzzle
  python -m exactcover.cli queens 8 --count

  # Solve a set family stored as JSON
  python -m exactcover.cli cover family.json --max 10

  # Compare heuristics
  python -m exactcover.cli benchmark --output results/
        """
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0,
        help="Log search progress (-v info, -vv debug)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    search_options = argparse.ArgumentParser(add_help=False)
    search_options.add_argument(
        "--heuristic", choices=sorted(HEURISTICS), default="min-size",
        help="Column selection heuristic (default: min-size)"
    )
    search_options.add_argument(
        "--timeout", type=float, default=None,
        help="Give up after this many seconds"
    )
    search_options.add_argument(
        "--max-steps", type=int, default=None,
        help="Give up after this many search nodes"
    )
    search_options.add_argument(
        "--stats", action="store_true",
        help="Show search statistics"
    )

    # Sudoku command
    sudoku_parser = subparsers.add_parser(
        "sudoku", parents=[search_options], help="Solve a Sudoku puzzle"
    )
    source = sudoku_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--puzzle", "-p", type=str,
        help="Puzzle string (size*size chars, 0 or . for empty cells)"
    )
    source.add_argument(
        "--file", "-f", type=str,
        help="Puzzle file, one board row per line"
    )
    sudoku_parser.add_argument(
        "--size", type=int, default=9,
        help="Board size (default: 9)"
    )
    sudoku_parser.add_argument(
        "--check-unique", action="store_true",
        help="Also report whether the solution is unique"
    )

    # Queens command
    queens_parser = subparsers.add_parser(
        "queens", parents=[search_options], help="Solve the N-queens puzzle"
    )
    queens_parser.add_argument("n", type=int, help="Board size")
    queens_parser.add_argument(
        "--count", action="store_true",
        help="Count all solutions instead of printing boards"
    )
    queens_parser.add_argument(
        "--show", type=int, default=1,
        help="Number of boards to print (default: 1)"
    )

    # Cover command
    cover_parser = subparsers.add_parser(
        "cover", parents=[search_options], help="Solve a set family stored as JSON"
    )
    cover_parser.add_argument(
        "path", type=str,
        help='JSON file: {"primary": [...], "secondary": [...], "subsets": {...}}'
    )
    cover_parser.add_argument(
        "--max", type=int, default=1, dest="max_solutions",
        help="Maximum number of solutions to print (default: 1)"
    )

    # Benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Compare column selection heuristics")
    bench_parser.add_argument(
        "--output", "-o", type=str, default="results",
        help="Output directory for results (default: results)"
    )
    bench_parser.add_argument(
        "--heuristics", nargs="+", choices=sorted(HEURISTICS), default=None,
        help="Heuristics to compare (default: all)"
    )
    bench_parser.add_argument(
        "--queens", nargs=2, type=int, default=[4, 8], metavar=("MIN", "MAX"),
        help="Range of N-queens sizes to count (default: 4 8)"
    )
    bench_parser.add_argument(
        "--timeout", type=float, default=30.0,
        help="Per-run time limit in seconds (default: 30)"
    )
    bench_parser.add_argument(
        "--memory", action="store_true",
        help="Track peak memory (slower)"
    )
    bench_parser.add_argument(
        "--no-charts", action="store_true",
        help="Skip chart generation"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=[logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "sudoku":
        cmd_sudoku(args)
    elif args.command == "queens":
        cmd_queens(args)
    elif args.command == "cover":
        cmd_cover(args)
    elif args.command == "benchmark":
        cmd_benchmark(args)


def _search_kwargs(args):
    return {
        "heuristic": args.heuristic,
        "timeout_seconds": args.timeout,
        "max_steps": args.max_steps,
    }


def _print_stats(stats: SearchStats):
    print(f"  Time: {stats.time_seconds:.4f}s")
    print(f"  Nodes: {stats.nodes_explored:,}")
    print(f"  Backtracks: {stats.backtracks:,}")
    print(f"  Updates: {stats.updates:,}")
    if stats.cancelled:
        print("  Search was cancelled before it finished")


def cmd_sudoku(args):
    """Handle the sudoku command."""
    try:
        if args.file:
            board = SudokuBoard.from_file(args.file, args.size)
        else:
            board = SudokuBoard.from_string(args.puzzle, args.size)
        problem = SudokuProblem(board, **_search_kwargs(args))
    except (OSError, ValueError) as e:
        print(f"Error reading puzzle: {e}")
        sys.exit(1)

    print("Input puzzle:")
    print(board)
    print()

    solution, stats = problem.solve()
    if solution is not None:
        print(f"✓ Solved in {stats.time_seconds:.4f}s")
        print(solution)
    elif stats.cancelled:
        print("✗ Gave up before finding a solution")
    else:
        print("✗ Puzzle has no solution")
    if args.stats:
        _print_stats(stats)

    if solution is not None and args.check_unique:
        unique = problem.has_unique_solution()
        print("Solution is unique" if unique else "Puzzle has more than one solution")

    if solution is None:
        sys.exit(1)


def cmd_queens(args):
    """Handle the queens command."""
    try:
        problem = NQueensProblem(args.n, **_search_kwargs(args))
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.count:
        count = problem.count_solutions()
        print(f"{args.n}-queens: {count} solution(s)")
    else:
        count = 0
        for board in problem.solutions(limit=max(args.show, 1)):
            count += 1
            print(f"--- Solution {count} ---")
            print(board)
            print()
        if count == 0:
            print(f"{args.n}-queens has no solution")

    if args.stats:
        _print_stats(problem.stats)


def cmd_cover(args):
    """Handle the cover command."""
    try:
        problem = SetFamilyProblem.from_json(args.path, **_search_kwargs(args))
        count = 0
        for names in problem.solutions(limit=max(args.max_solutions, 1)):
            count += 1
            print(f"Solution {count}: {' '.join(str(n) for n in names)}")
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if count == 0:
        print("No exact cover exists")
    if args.stats:
        _print_stats(problem.stats)


def cmd_benchmark(args):
    """Handle the benchmark command."""
    low, high = args.queens
    benchmark = Benchmark(
        cases=default_cases(queens=range(low, high + 1)),
        heuristics=args.heuristics,
        timeout_seconds=args.timeout,
        track_memory=args.memory
    )

    print("=" * 60)
    print("EXACT COVER HEURISTIC BENCHMARK")
    print("=" * 60)
    print(f"Instances: {', '.join(c.name for c in benchmark.cases)}")
    print(f"Heuristics: {', '.join(benchmark.heuristics)}")
    print(f"Output directory: {args.output}")
    print("=" * 60)

    results = benchmark.run()
    summary = benchmark.get_summary()

    print("\nBy Heuristic:")
    print("-" * 50)
    for heuristic, stats in summary["results_by_heuristic"].items():
        print(f"\n{heuristic}:")
        print(f"  Completed: {stats['completed']}/{stats['total_tested']}")
        print(f"  Avg Time: {stats['avg_time_seconds']:.4f}s")
        print(f"  Total Nodes: {stats['total_nodes']:,}")

    benchmark.save_results(args.output)
    print(f"\nResults saved to {args.output}/")

    if not args.no_charts:
        print("\nGenerating charts...")
        charts = Visualizer(results, args.output).generate_all()
        for chart in charts:
            print(f"  - {chart}")


if __name__ == "__main__":
    main()
