"""Visualization utilities for benchmark results."""

from __future__ import annotations
import os
from typing import List

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .benchmark import BenchmarkResult


class Visualizer:
    """
    Chart generator for heuristic benchmark results.

    One bar group per instance, one bar per heuristic.
    """

    COLORS = {
        "min-size": "#9b59b6",  # Purple
        "first": "#e74c3c",     # Red
    }

    def __init__(self, results: List[BenchmarkResult], output_dir: str = "results"):
        """
        Args:
            results: List of benchmark results.
            output_dir: Directory to save generated charts.
        """
        self.results = results
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        plt.style.use('seaborn-v0_8-whitegrid')
        sns.set_palette("husl")

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [
            self.plot_metric("time_seconds", "Time (seconds)", "time_comparison.png"),
            self.plot_metric("nodes_explored", "Search nodes", "nodes_comparison.png"),
        ]

    def plot_metric(self, metric: str, label: str, filename: str) -> str:
        """Grouped bar chart of one metric per instance and heuristic (log scale)."""
        fig, ax = plt.subplots(figsize=(12, 6))

        instances = list(dict.fromkeys(r.instance for r in self.results))
        heuristics = list(dict.fromkeys(r.heuristic for r in self.results))

        x = np.arange(len(instances))
        width = 0.8 / max(len(heuristics), 1)

        for i, heuristic in enumerate(heuristics):
            values = []
            for instance in instances:
                matching = [
                    getattr(r, metric) for r in self.results
                    if r.instance == instance and r.heuristic == heuristic
                ]
                values.append(np.mean(matching) if matching else 0)

            offset = (i - len(heuristics) / 2 + 0.5) * width
            ax.bar(x + offset, values, width,
                   label=heuristic,
                   color=self.COLORS.get(heuristic, "#95a5a6"),
                   edgecolor='black', linewidth=0.5)

        ax.set_xlabel('Instance', fontsize=12)
        ax.set_ylabel(label, fontsize=12)
        ax.set_title(f'{label} by Instance and Heuristic', fontsize=14, fontweight='bold')
        ax.set_xticks(x)
        ax.set_xticklabels(instances, rotation=30, ha='right')
        ax.set_yscale('symlog')
        ax.legend(title='Heuristic')

        plt.tight_layout()
        path = os.path.join(self.output_dir, filename)
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return path
