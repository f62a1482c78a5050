"""
Community detection on road graphs.

Wraps igraph's walktrap, edge-betweenness (Girvan-Newman) and multilevel
(Louvain) algorithms behind a common fit()/get_params() interface.
"""

from abc import ABC, abstractmethod
import numpy as np
import pandas as pd
import igraph
from pathlib import Path
from typing import Any, Dict, Optional, Union


class CommunityMethod(ABC):
    """
    Abstract base class for community detection methods.

    Subclasses implement _partition(), returning an igraph VertexClustering.
    """

    name = None

    def __init__(self, weights: Optional[str] = None):
        self.weights = weights
        self.modularity = None
        self.membership = None

    @abstractmethod
    def _partition(self, graph: igraph.Graph) -> igraph.VertexClustering:
        pass

    def fit(self, graph: igraph.Graph) -> np.ndarray:
        """
        Detect communities.

        Args:
            graph: Undirected road graph

        Returns:
            Array of community assignments, shape (n_nodes,)
        """
        if self.weights is not None and self.weights not in graph.es.attributes():
            raise ValueError(f"Graph has no edge attribute '{self.weights}'")

        clustering = self._partition(graph)
        self.modularity = graph.modularity(clustering.membership, weights=self.weights)
        self.membership = np.array(clustering.membership, dtype=np.int32)
        return self.membership

    def get_params(self) -> Dict[str, Any]:
        return {'method': self.name, 'weights': self.weights}


class WalktrapCommunities(CommunityMethod):
    """Random-walk based communities (Pons & Latapy)."""

    name = 'walktrap'

    def __init__(self, steps: int = 4, weights: Optional[str] = None):
        super().__init__(weights=weights)
        self.steps = steps

    def _partition(self, graph):
        return graph.community_walktrap(weights=self.weights, steps=self.steps).as_clustering()

    def get_params(self):
        params = super().get_params()
        params['steps'] = self.steps
        return params


class EdgeBetweennessCommunities(CommunityMethod):
    """
    Divisive communities by repeatedly removing the highest-betweenness edge.

    Weights are read as distances when computing betweenness. Cost grows
    quickly with graph size, so this is meant for regional subsets.
    """

    name = 'edge_betweenness'

    def _partition(self, graph):
        dendrogram = graph.community_edge_betweenness(directed=False, weights=self.weights)
        return dendrogram.as_clustering()


class LouvainCommunities(CommunityMethod):
    """Multilevel modularity optimisation (Louvain)."""

    name = 'louvain'

    def __init__(self, weights: Optional[str] = None, resolution: float = 1.0):
        super().__init__(weights=weights)
        self.resolution = resolution

    def _partition(self, graph):
        return graph.community_multilevel(weights=self.weights, resolution=self.resolution)

    def get_params(self):
        params = super().get_params()
        params['resolution'] = self.resolution
        return params


METHODS = {
    'walktrap': WalktrapCommunities,
    'edge_betweenness': EdgeBetweennessCommunities,
    'louvain': LouvainCommunities,
}


def detect_communities(
    graph: igraph.Graph,
    method: str = 'louvain',
    weights: Optional[str] = None,
    **params,
) -> CommunityMethod:
    """
    Run a community detection method and return the fitted instance.

    The assignments are stored on the instance as `membership`.

    Args:
        graph: Undirected road graph
        method: 'walktrap', 'edge_betweenness' or 'louvain'
        weights: Edge attribute used as weight
        **params: Extra method parameters (steps, resolution)

    Returns:
        Fitted CommunityMethod
    """
    if method not in METHODS:
        raise ValueError(f"Unknown community method '{method}', expected one of {sorted(METHODS)}")

    detector = METHODS[method](weights=weights, **params)
    detector.fit(graph)
    return detector


def community_sizes(membership: np.ndarray) -> pd.DataFrame:
    """Size of every community, largest first."""
    ids, counts = np.unique(membership, return_counts=True)
    df = pd.DataFrame({'community': ids, 'size': counts})
    return df.sort_values('size', ascending=False, ignore_index=True)


def save_membership(
    graph: igraph.Graph,
    membership: np.ndarray,
    output_path: Union[str, Path],
) -> Path:
    """
    Save node community assignments to CSV.

    Args:
        graph: Graph the membership was computed on
        membership: Community assignment per node
        output_path: Output CSV path

    Returns:
        Path to saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    names = graph.vs['name'] if 'name' in graph.vs.attributes() else list(range(graph.vcount()))
    pd.DataFrame({'name': names, 'community': membership}).to_csv(output_path, index=False)

    return output_path
