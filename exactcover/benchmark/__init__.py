"""Benchmark module for comparing column selection heuristics."""

from .benchmark import Benchmark, BenchmarkCase, BenchmarkResult, default_cases
from .visualizer import Visualizer

__all__ = ["Benchmark", "BenchmarkCase", "BenchmarkResult", "default_cases", "Visualizer"]
