"""
Config-driven sweep runs.

Loads the road graph described by a SweepConfig, applies the optional
regional subset, runs the sweep and writes the results table.

Usage:
    config = SweepConfig.from_yaml('config/example_sweep.yaml')
    results = run_from_config(config)
"""

import igraph
from typing import Optional, Tuple

from .manifest import SweepConfig
from ..network.construction import load_road_graph, subset_by_attribute
from ..percolation.sweep import PercolationResult, PercolationSweep
from ..percolation.analysis import save_results


def load_config_graph(config: SweepConfig, verbose: bool = False) -> igraph.Graph:
    """Load the road graph for a config, restricted to its subset if one is set."""
    graph = load_road_graph(
        config.nodes_path,
        config.edges_path,
        id_column=config.id_column,
        source_column=config.source_column,
        target_column=config.target_column,
    )
    if verbose:
        print(f"Loaded {graph.vcount()} nodes, {graph.ecount()} edges")

    if config.subset_attr is not None:
        graph = subset_by_attribute(graph, config.subset_attr, config.subset_values)
        if verbose:
            print(f"  Subset {config.subset_attr} in {config.subset_values}: "
                  f"{graph.vcount()} nodes, {graph.ecount()} edges")

    return graph


def run_from_config(
    config: SweepConfig,
    graph: Optional[igraph.Graph] = None,
    verbose: bool = False,
) -> Tuple[PercolationResult, ...]:
    """
    Run the sweep defined by a config.

    Args:
        config: Sweep configuration
        graph: Already loaded graph (skips loading and subsetting)
        verbose: Print progress

    Returns:
        Tuple of PercolationResult
    """
    if graph is None:
        graph = load_config_graph(config, verbose=verbose)

    sweep = PercolationSweep(graph, config.criterion_attr, config.distance_attr)
    thresholds = config.thresholds(graph)

    results = sweep.run(
        thresholds,
        n_workers=config.n_workers,
        timeout=config.timeout,
        verbose=verbose,
    )

    if config.results_csv is not None:
        output_file = save_results(results, config.results_csv)
        if verbose:
            print(f"Saved {len(results)} results to {output_file}")

    return results
