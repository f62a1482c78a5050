"""
Road Resilience - Road network analysis and percolation resilience sweeps.

This package provides tools for:
- Building weighted road graphs from node/edge tables
- Network metrics and community detection
- Threshold percolation sweeps (giant component, component count, mean distance)
- Config-driven and parallel sweep runs
"""

__version__ = "1.0.0"
