"""
Road graph construction from node and edge tables.

Builds undirected igraph graphs from CSV node/edge tables. Every column other
than the identifier columns is carried over as a vertex or edge attribute
(population, region, coordinates, travel times, border flags, ...).
"""

import numpy as np
import pandas as pd
import igraph
from pathlib import Path
from typing import Iterable, Optional, Union


def load_node_table(
    path: Union[str, Path],
    id_column: str = 'id',
) -> pd.DataFrame:
    """
    Load a node table from CSV.

    Args:
        path: Path to the node CSV file
        id_column: Column holding the unique node identifier

    Returns:
        DataFrame with one row per node
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Node table not found: {path}")

    nodes = pd.read_csv(path)
    if id_column not in nodes.columns:
        raise ValueError(f"Node table {path} has no '{id_column}' column")

    return nodes


def load_edge_table(
    path: Union[str, Path],
    source_column: str = 'from',
    target_column: str = 'to',
) -> pd.DataFrame:
    """
    Load an edge table from CSV.

    Args:
        path: Path to the edge CSV file
        source_column: Column holding the first endpoint
        target_column: Column holding the second endpoint

    Returns:
        DataFrame with one row per edge
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Edge table not found: {path}")

    edges = pd.read_csv(path)
    missing = [col for col in (source_column, target_column) if col not in edges.columns]
    if missing:
        raise ValueError(f"Edge table {path} is missing columns: {missing}")

    return edges


def build_road_graph(
    nodes: pd.DataFrame,
    edges: pd.DataFrame,
    id_column: str = 'id',
    source_column: str = 'from',
    target_column: str = 'to',
) -> igraph.Graph:
    """
    Build an undirected road graph from node and edge tables.

    Parallel edges are kept (the graph is multigraph-capable). Vertex names are
    the node identifiers, so vertices can be looked up with graph.vs.find(name=...).

    Args:
        nodes: Node table, one row per node
        edges: Edge table, one row per edge
        id_column: Node identifier column in the node table
        source_column: First endpoint column in the edge table
        target_column: Second endpoint column in the edge table

    Returns:
        Undirected igraph.Graph with vertex and edge attributes
    """
    if nodes[id_column].duplicated().any():
        dupes = nodes.loc[nodes[id_column].duplicated(), id_column].unique()
        raise ValueError(f"Duplicate node identifiers: {list(dupes[:10])}")

    known = set(nodes[id_column])
    endpoints = pd.concat([edges[source_column], edges[target_column]])
    unknown = sorted({str(v) for v in endpoints if v not in known})
    if unknown:
        raise ValueError(
            f"{len(unknown)} edge endpoints are not in the node table, e.g. {unknown[:10]}"
        )

    # igraph expects the identifier / endpoint columns first
    vertex_cols = [id_column] + [c for c in nodes.columns if c != id_column]
    edge_cols = [source_column, target_column] + [
        c for c in edges.columns if c not in (source_column, target_column)
    ]

    return igraph.Graph.DataFrame(
        edges[edge_cols],
        directed=False,
        vertices=nodes[vertex_cols],
        use_vids=False,
    )


def load_road_graph(
    nodes_path: Union[str, Path],
    edges_path: Union[str, Path],
    id_column: str = 'id',
    source_column: str = 'from',
    target_column: str = 'to',
) -> igraph.Graph:
    """Load node and edge CSV files and build the road graph."""
    nodes = load_node_table(nodes_path, id_column=id_column)
    edges = load_edge_table(edges_path, source_column=source_column, target_column=target_column)
    return build_road_graph(nodes, edges, id_column, source_column, target_column)


def subset_by_attribute(
    graph: igraph.Graph,
    attr: str,
    values: Iterable,
) -> igraph.Graph:
    """
    Restrict a graph to the nodes whose attribute is in a set of values.

    Used to cut a regional network (e.g. region == 'South') out of the
    continental one. Edges are kept only when both endpoints survive.

    Args:
        graph: Source graph (not modified)
        attr: Vertex attribute to select on
        values: Accepted attribute values

    Returns:
        Induced subgraph
    """
    if attr not in graph.vs.attributes():
        raise ValueError(f"Graph has no vertex attribute '{attr}'")

    accepted = set(values)
    keep = [v.index for v in graph.vs if v[attr] in accepted]
    return graph.induced_subgraph(keep)


def attribute_max(graph: igraph.Graph, attr: str) -> Optional[float]:
    """Largest value of an edge attribute, or None for an edgeless graph."""
    if graph.ecount() == 0:
        return None
    if attr not in graph.es.attributes():
        raise ValueError(f"Graph has no edge attribute '{attr}'")
    return float(np.max(np.asarray(graph.es[attr], dtype=np.float64)))
