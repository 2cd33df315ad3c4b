"""Pytest configuration and shared fixtures for layerorder tests."""

import itertools
import random

import pytest

from layerorder import OrderPhase, create_constraint_graph, create_graph
from layerorder.crossings import layer_positions


@pytest.fixture
def three_rank_ranks():
    """Ranks for the three-rank scenario graph."""
    return {"A": 0, "B": 1, "C": 1, "D": 2, "E": 2}


@pytest.fixture
def three_rank_edges():
    """Edges for the three-rank scenario graph."""
    return [("A", "C"), ("A", "B"), ("B", "E"), ("C", "D"), ("C", "E")]


@pytest.fixture
def three_rank_graph(three_rank_ranks, three_rank_edges):
    """Three ranks: [A], [B, C], [D, E], with one crossing as built."""
    return create_graph(three_rank_ranks, three_rank_edges)


@pytest.fixture
def crossed_pair_graph():
    """Two layers [a, b] and [x, y] with edges a -> y and b -> x."""
    return create_graph({"a": 0, "b": 0, "x": 1, "y": 1}, [("a", "y"), ("b", "x")])


@pytest.fixture
def empty_constraints():
    """Constraint graph with no constraints."""
    return create_constraint_graph()


@pytest.fixture
def phase():
    """Default OrderPhase instance."""
    return OrderPhase()


def brute_force_bilayer(graph, layer1, layer2):
    """Count crossings by comparing every pair of edges."""
    pos1 = layer_positions(layer1)
    pos2 = layer_positions(layer2)
    edges = [
        (pos1[source], pos2[target])
        for source in layer1
        for _, target in graph.out_edges(source)
    ]
    crossings = 0
    for (u1, v1), (u2, v2) in itertools.combinations(edges, 2):
        if (u1 - u2) * (v1 - v2) < 0:
            crossings += 1
    return crossings


def random_layered_graph(seed, rank_sizes, edge_probability=0.4):
    """Build a graph whose edges only join adjacent ranks."""
    rng = random.Random(seed)
    ranks = {}
    layers = []
    for rank, size in enumerate(rank_sizes):
        layer = [f"n{rank}_{i}" for i in range(size)]
        rng.shuffle(layer)
        layers.append(layer)
        for node in layer:
            ranks[node] = rank

    edges = []
    for upper, lower in zip(layers, layers[1:]):
        for source in upper:
            for target in lower:
                if rng.random() < edge_probability:
                    edges.append((source, target))
    return create_graph(ranks, edges)


@pytest.fixture
def bilayer_oracle():
    """Pairwise edge comparison used to check the crossing counter."""
    return brute_force_bilayer


@pytest.fixture
def layered_graph_factory():
    """Factory for seeded random graphs with edges between adjacent ranks."""
    return random_layered_graph
