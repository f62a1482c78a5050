"""Road graph construction, metrics and community detection."""

from .construction import build_road_graph, load_road_graph, subset_by_attribute
from .metrics import mean_reachable_distance, network_summary, centrality_table, shortest_route
from .communities import detect_communities

__all__ = [
    'build_road_graph', 'load_road_graph', 'subset_by_attribute',
    'mean_reachable_distance', 'network_summary', 'centrality_table', 'shortest_route',
    'detect_communities',
]
