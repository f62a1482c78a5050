"""Shared fixtures: small road graphs and node/edge tables."""

import random

import pytest
import igraph
import numpy as np
import pandas as pd


@pytest.fixture
def chain_graph():
    """A - B - C - D with travel times 10, 50, 90."""
    graph = igraph.Graph(n=4, edges=[(0, 1), (1, 2), (2, 3)])
    graph.vs['name'] = ['A', 'B', 'C', 'D']
    graph.es['time'] = [10, 50, 90]
    return graph


@pytest.fixture
def two_component_graph():
    """A - B (2) and C - D - E (4, 6): two components, no cross links."""
    graph = igraph.Graph(n=5, edges=[(0, 1), (2, 3), (3, 4)])
    graph.vs['name'] = ['A', 'B', 'C', 'D', 'E']
    graph.es['time'] = [2, 4, 6]
    return graph


@pytest.fixture
def random_road_graph():
    """Sparse random graph with integer travel times and real-valued lengths."""
    random.seed(7)
    rng = np.random.default_rng(7)
    graph = igraph.Graph.Erdos_Renyi(n=40, m=80)
    graph.vs['name'] = [f"n{i}" for i in range(graph.vcount())]
    graph.es['time'] = rng.integers(1, 30, size=graph.ecount()).tolist()
    graph.es['length'] = rng.uniform(1.0, 100.0, size=graph.ecount()).tolist()
    return graph


@pytest.fixture
def road_tables():
    """Node and edge tables shaped like the road network dataset."""
    nodes = pd.DataFrame({
        'id': ['JNB', 'PTA', 'MPM', 'GBE', 'LUN', 'NBO'],
        'population': [5_600_000, 2_400_000, 1_100_000, 250_000, 2_700_000, 4_400_000],
        'region': ['South', 'South', 'South', 'South', 'East', 'East'],
        'country': ['ZAF', 'ZAF', 'MOZ', 'BWA', 'ZMB', 'KEN'],
        'kind': ['city', 'city', 'city', 'city', 'city', 'city'],
    })
    edges = pd.DataFrame({
        'from': ['JNB', 'PTA', 'JNB', 'GBE', 'LUN'],
        'to': ['PTA', 'MPM', 'GBE', 'LUN', 'NBO'],
        'length': [58.0, 480.0, 360.0, 1500.0, 2200.0],
        'time': [1.0, 6.5, 5.0, 22.0, 30.0],
        'time_border': [1.0, 8.5, 7.0, 25.0, 33.0],
        'border': [False, True, True, True, True],
        'added': [False, False, False, False, True],
    })
    return nodes, edges


@pytest.fixture
def road_csvs(tmp_path, road_tables):
    nodes, edges = road_tables
    nodes_path = tmp_path / 'nodes.csv'
    edges_path = tmp_path / 'edges.csv'
    nodes.to_csv(nodes_path, index=False)
    edges.to_csv(edges_path, index=False)
    return nodes_path, edges_path
