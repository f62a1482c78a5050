"""
Network metrics for road graphs.

Thin wrappers over igraph's algorithms. The mean-distance helper here is also
the distance primitive used by the percolation sweep.
"""

import numpy as np
import pandas as pd
import igraph
from typing import Any, Dict, List, Optional, Tuple


def component_sizes(graph: igraph.Graph) -> np.ndarray:
    """Node count of every connected component (isolated nodes count as 1)."""
    return np.asarray(graph.connected_components().sizes(), dtype=np.int64)


def mean_reachable_distance(
    graph: igraph.Graph,
    weights: Optional[str] = None,
) -> Optional[float]:
    """
    Mean shortest-path distance over mutually reachable node pairs.

    Pairs in different components are left out of both the sum and the pair
    count. igraph accumulates the mean one source at a time, so no distance
    matrix is ever held in memory.

    Args:
        graph: Undirected graph
        weights: Edge attribute used as distance (None for hop counts)

    Returns:
        Mean distance, or None when no pair of nodes is connected
    """
    value = graph.average_path_length(directed=False, unconn=True, weights=weights)
    if np.isnan(value):
        return None
    return float(value)


def _vertex_index(graph: igraph.Graph, name: Any) -> int:
    if 'name' in graph.vs.attributes():
        try:
            return graph.vs.find(name=name).index
        except ValueError:
            raise KeyError(f"No node named {name!r}")
    if isinstance(name, (int, np.integer)) and 0 <= name < graph.vcount():
        return int(name)
    raise KeyError(f"No node {name!r}")


def shortest_route(
    graph: igraph.Graph,
    source: Any,
    target: Any,
    weights: Optional[str] = None,
) -> Tuple[List[Any], float]:
    """
    Shortest path between two nodes.

    Args:
        graph: Road graph
        source: Source node name
        target: Target node name
        weights: Edge attribute used as distance (None for hop counts)

    Returns:
        (node names along the path, path length); ([], inf) if unreachable
    """
    src = _vertex_index(graph, source)
    dst = _vertex_index(graph, target)

    length = float(graph.distances(src, dst, weights=weights)[0][0])
    if np.isinf(length):
        return [], length

    path = graph.get_shortest_paths(src, to=dst, weights=weights, output='vpath')[0]
    if 'name' in graph.vs.attributes():
        return [graph.vs[i]['name'] for i in path], length
    return list(path), length


def centrality_table(graph: igraph.Graph, weights: Optional[str] = None) -> pd.DataFrame:
    """
    Per-node degree and centrality measures.

    Args:
        graph: Road graph
        weights: Edge attribute used for strength and as distance for
            betweenness/closeness (None for unweighted)

    Returns:
        DataFrame with columns name, degree, strength, betweenness, closeness
    """
    if 'name' in graph.vs.attributes():
        names = graph.vs['name']
    else:
        names = list(range(graph.vcount()))

    return pd.DataFrame({
        'name': names,
        'degree': graph.degree(),
        'strength': graph.strength(weights=weights),
        'betweenness': graph.betweenness(directed=False, weights=weights),
        'closeness': graph.closeness(weights=weights),
    })


def network_summary(graph: igraph.Graph, weights: Optional[str] = None) -> Dict[str, Any]:
    """
    Global description of a road graph.

    Returns:
        Dict with n_nodes, n_edges, n_components, giant_component_size,
        diameter and mean_distance (both over connected pairs only)
    """
    n_nodes = graph.vcount()
    if n_nodes == 0:
        return {
            'n_nodes': 0,
            'n_edges': 0,
            'n_components': 0,
            'giant_component_size': 0,
            'diameter': None,
            'mean_distance': None,
        }

    sizes = component_sizes(graph)
    diameter = graph.diameter(directed=False, unconn=True, weights=weights) if graph.ecount() else None

    return {
        'n_nodes': n_nodes,
        'n_edges': graph.ecount(),
        'n_components': len(sizes),
        'giant_component_size': int(sizes.max()),
        'diameter': diameter,
        'mean_distance': mean_reachable_distance(graph, weights=weights),
    }
