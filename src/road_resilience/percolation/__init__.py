"""Threshold percolation analysis for road network resilience."""

from .sweep import PercolationResult, PercolationSweep, integer_thresholds, run_percolation_sweep
from .analysis import results_to_frame, curve, save_results, load_results, critical_threshold

__all__ = [
    'PercolationResult', 'PercolationSweep', 'integer_thresholds', 'run_percolation_sweep',
    'results_to_frame', 'curve', 'save_results', 'load_results', 'critical_threshold',
]
