"""
Threshold percolation sweep for road network resilience.

Edges are switched on by a threshold on one edge attribute (e.g. border-aware
travel time): at threshold t the network holds every edge whose attribute is
strictly below t, over the full, fixed node set. For each threshold the sweep
records the giant component size, the number of components and the mean
shortest-path distance over connected node pairs.

Each threshold is evaluated on a freshly built subgraph that is discarded
afterwards, so thresholds are independent and can be evaluated in parallel
(see worker.py).
"""

import math
import numbers
import time
import numpy as np
import igraph
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from ..network.construction import attribute_max
from ..network.metrics import mean_reachable_distance


@dataclass(frozen=True)
class PercolationResult:
    """Resilience metrics of the network filtered at one threshold."""

    threshold: Any
    giant_component_size: int
    component_count: int
    mean_distance: Optional[float] = None  # None when no node pair is connected

    @property
    def has_mean_distance(self) -> bool:
        return self.mean_distance is not None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_edge_attribute(graph: igraph.Graph, attr: str, non_negative: bool = False) -> None:
    """
    Check that every edge carries a numeric value for an attribute.

    Args:
        graph: Graph to check
        attr: Edge attribute name
        non_negative: Also reject negative values

    Raises:
        ValueError: If the attribute is missing, or any value is missing,
            non-numeric, NaN, or (with non_negative) negative
    """
    if graph.ecount() == 0:
        return

    if attr not in graph.es.attributes():
        raise ValueError(f"Graph has no edge attribute '{attr}'")

    bad = []
    negative = []
    for i, value in enumerate(graph.es[attr]):
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
            bad.append(i)
        elif math.isnan(value):
            bad.append(i)
        elif non_negative and value < 0:
            negative.append(i)

    if bad:
        raise ValueError(
            f"Edge attribute '{attr}' is missing or non-numeric on {len(bad)} edges "
            f"(edge ids {bad[:10]})"
        )
    if negative:
        raise ValueError(
            f"Edge attribute '{attr}' is negative on {len(negative)} edges "
            f"(edge ids {negative[:10]})"
        )


def integer_thresholds(graph: igraph.Graph, attr: str, start: int = 0, step: int = 1) -> List[int]:
    """
    Consecutive integer thresholds from `start` up to the attribute maximum.

    The maximum is floored and included, e.g. a largest travel time of 90.5
    gives thresholds start..90.

    Args:
        graph: Road graph
        attr: Edge attribute the thresholds apply to
        start: First threshold
        step: Spacing between thresholds

    Returns:
        List of thresholds ([start] for an edgeless graph)
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    validate_edge_attribute(graph, attr)
    max_value = attribute_max(graph, attr)
    if max_value is None:
        return [start]

    return list(range(start, int(math.floor(max_value)) + 1, step))


def validate_thresholds(thresholds: Iterable) -> None:
    """
    Check that every threshold is a real number.

    Raises:
        ValueError: On a non-numeric, boolean or NaN threshold
    """
    for i, threshold in enumerate(thresholds):
        if isinstance(threshold, (bool, np.bool_)) or not isinstance(threshold, numbers.Real):
            raise ValueError(f"Threshold {threshold!r} at position {i} is not a number")
        if math.isnan(threshold):
            raise ValueError(f"Threshold at position {i} is NaN")


# float64 holds every integer exactly only up to this magnitude
_EXACT_INT = 2 ** 53


def _criterion_array(values: List) -> np.ndarray:
    if any(isinstance(v, numbers.Integral) and abs(v) > _EXACT_INT for v in values):
        return np.asarray(values, dtype=object)
    return np.asarray(values)


def _as_scalar(value):
    if isinstance(value, np.generic):
        return value.item()
    return value


class PercolationSweep:
    """
    Threshold percolation over a fixed road graph.

    The source graph is validated once at construction and never modified.

    Example:
        sweep = PercolationSweep(graph, criterion_attr='time_border')
        results = sweep.run(integer_thresholds(graph, 'time_border'))
    """

    def __init__(self, graph: igraph.Graph, criterion_attr: str, distance_attr: Optional[str] = None):
        """
        Initialize the sweep.

        Args:
            graph: Undirected weighted graph with a fixed node set
            criterion_attr: Edge attribute compared against each threshold
            distance_attr: Edge attribute used as distance for the mean
                distance (defaults to criterion_attr)
        """
        if graph.vcount() == 0:
            raise ValueError("Cannot run a percolation sweep on a graph with no nodes")
        if graph.is_directed():
            raise ValueError("Percolation sweep expects an undirected graph")

        if distance_attr is None:
            distance_attr = criterion_attr

        validate_edge_attribute(graph, criterion_attr)
        validate_edge_attribute(graph, distance_attr, non_negative=True)

        self.graph = graph
        self.criterion_attr = criterion_attr
        self.distance_attr = distance_attr
        self.n_nodes = graph.vcount()

        if graph.ecount():
            self._criterion = _criterion_array(graph.es[criterion_attr])
        else:
            self._criterion = np.empty(0)

    def filtered_graph(self, threshold) -> igraph.Graph:
        """
        Graph over all nodes holding only edges with criterion < threshold.

        The comparison is strict: an edge whose value equals the threshold is
        left out.
        """
        keep = np.flatnonzero(self._criterion < threshold)
        return self.graph.subgraph_edges(keep.tolist(), delete_vertices=False)

    def evaluate(self, threshold) -> PercolationResult:
        """
        Compute the resilience metrics at a single threshold.

        Args:
            threshold: Numeric threshold

        Returns:
            PercolationResult for this threshold
        """
        validate_thresholds([threshold])
        filtered = self.filtered_graph(threshold)
        components = filtered.connected_components()
        sizes = components.sizes()

        if filtered.ecount():
            mean_distance = mean_reachable_distance(filtered, weights=self.distance_attr)
        else:
            mean_distance = None

        return PercolationResult(
            threshold=_as_scalar(threshold),
            giant_component_size=int(max(sizes)),
            component_count=len(sizes),
            mean_distance=mean_distance,
        )

    def iter_results(self, thresholds: Iterable) -> Iterator[PercolationResult]:
        """Yield one result per threshold, in the given order."""
        for threshold in thresholds:
            yield self.evaluate(threshold)

    def run(
        self,
        thresholds: Iterable,
        n_workers: int = 1,
        chunk_size: Optional[int] = None,
        timeout: Optional[float] = None,
        verbose: bool = False,
    ) -> Tuple[PercolationResult, ...]:
        """
        Run the sweep over a sequence of thresholds.

        Thresholds are processed in the given order and duplicates are
        evaluated independently. With n_workers > 1 the thresholds are
        evaluated in a process pool; the output order is still the input order.

        Args:
            thresholds: Threshold values, normally ascending
            n_workers: Number of worker processes (1 = run in this process)
            chunk_size: Thresholds per worker task (parallel runs only)
            timeout: Wall-clock limit in seconds for the whole sweep
            verbose: Print progress

        Returns:
            Tuple of PercolationResult, one per threshold

        Raises:
            ValueError: If any threshold is not a number; nothing is evaluated
            TimeoutError: If the sweep exceeds `timeout`; no partial result
                is returned
        """
        thresholds = list(thresholds)
        if not thresholds:
            return ()
        validate_thresholds(thresholds)

        if n_workers > 1:
            from .worker import run_parallel_sweep
            return run_parallel_sweep(
                self, thresholds, n_workers=n_workers, chunk_size=chunk_size,
                timeout=timeout, verbose=verbose,
            )

        if verbose:
            print(f"Sweeping {len(thresholds)} thresholds on '{self.criterion_attr}' "
                  f"({self.n_nodes} nodes, {self.graph.ecount()} edges)")

        start = time.monotonic()
        results = []
        for i, threshold in enumerate(thresholds):
            if timeout is not None and time.monotonic() - start > timeout:
                raise TimeoutError(
                    f"Percolation sweep exceeded {timeout}s after {i}/{len(thresholds)} thresholds"
                )
            results.append(self.evaluate(threshold))

        if verbose:
            print(f"✓ Swept {len(results)} thresholds in {time.monotonic() - start:.1f}s")

        return tuple(results)


def run_percolation_sweep(
    graph: igraph.Graph,
    thresholds: Iterable,
    criterion_attr: str,
    distance_attr: Optional[str] = None,
    n_workers: int = 1,
    timeout: Optional[float] = None,
) -> Tuple[PercolationResult, ...]:
    """
    Run a percolation sweep in one call.

    Args:
        graph: Undirected weighted graph
        thresholds: Threshold values
        criterion_attr: Edge attribute compared against each threshold
        distance_attr: Edge attribute used as distance (defaults to criterion_attr)
        n_workers: Number of worker processes
        timeout: Wall-clock limit in seconds

    Returns:
        Tuple of PercolationResult in threshold order
    """
    sweep = PercolationSweep(graph, criterion_attr, distance_attr)
    return sweep.run(thresholds, n_workers=n_workers, timeout=timeout)
