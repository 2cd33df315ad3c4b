"""
End-to-end tests for the ordering phase.

These run OrderPhase on whole graphs and check the properties every result
must have: a valid layering, no regression against the starting layering,
a non-increasing incumbent and honored constraints.
"""

import itertools
import random

import pytest

from layerorder import (
    IN_EDGES,
    ConstraintResolver,
    OrderPhase,
    barycenters,
    create_constraint_graph,
    create_graph,
    cross_count,
    init_order,
    satisfies_constraints,
)

RANK_SHAPES = [
    [2, 3],
    [3, 3, 3],
    [1, 4, 2, 5],
    [4, 6, 5, 3, 2],
    [5, 5, 5, 5, 5, 5],
]


def random_constraints(layering, seed, per_layer=2):
    """Acyclic left-of pairs drawn inside each layer."""
    rng = random.Random(seed)
    pairs = []
    for layer in layering:
        if len(layer) < 2:
            continue
        ranking = list(layer)
        rng.shuffle(ranking)
        for _ in range(per_layer):
            i, j = sorted(rng.sample(range(len(ranking)), 2))
            pairs.append((ranking[i], ranking[j]))
    return create_constraint_graph(pairs)


def assert_valid_layering(graph, layering):
    """Layer i holds exactly the nodes of rank i, each once."""
    assert sum(len(layer) for layer in layering) == graph.number_of_nodes()
    for rank, layer in enumerate(layering):
        assert len(set(layer)) == len(layer)
        expected = {n for n, data in graph.nodes(data=True) if data["rank"] == rank}
        assert set(layer) == expected
        for position, node in enumerate(layer):
            assert graph.nodes[node]["order"] == position


class TestScenarioGraph:
    """The three-rank scenario graph is solved optimally from any start."""

    RANK_1 = ["B", "C"]
    RANK_2 = ["D", "E"]

    @pytest.mark.parametrize(
        "rank_1, rank_2",
        list(
            itertools.product(
                itertools.permutations(RANK_1), itertools.permutations(RANK_2)
            )
        ),
    )
    def test_reaches_brute_force_minimum(self, rank_1, rank_2, three_rank_edges):
        """The result matches the best of all permutations of ranks 1 and 2."""
        ranks = {"A": 0}
        ranks.update({node: 1 for node in rank_1})
        ranks.update({node: 2 for node in rank_2})
        graph = create_graph(ranks, three_rank_edges)

        minimum = min(
            cross_count(graph, [["A"], list(p1), list(p2)])
            for p1 in itertools.permutations(self.RANK_1)
            for p2 in itertools.permutations(self.RANK_2)
        )

        layering = OrderPhase().run(graph)
        assert cross_count(graph, layering) == minimum
        assert_valid_layering(graph, layering)


class TestRandomGraphs:
    """Properties checked over seeded random layered graphs."""

    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("shape", RANK_SHAPES)
    def test_never_worse_than_start(self, seed, shape, layered_graph_factory):
        """The result never has more crossings than the starting layering."""
        graph = layered_graph_factory(seed, shape)
        initial = cross_count(graph, init_order(graph))

        layering = OrderPhase().run(graph)

        assert cross_count(graph, layering) <= initial
        assert_valid_layering(graph, layering)

    @pytest.mark.parametrize("seed", range(10))
    def test_incumbent_never_increases(self, seed, layered_graph_factory):
        """The best crossing count recorded per round is non-increasing."""
        graph = layered_graph_factory(seed, [4, 6, 5, 3, 2])
        phase = OrderPhase()
        layering = phase.run(graph)

        history = phase.get_trace().best_cross_count_history()
        assert all(a >= b for a, b in zip(history, history[1:]))
        assert history[-1] == cross_count(graph, layering)

    @pytest.mark.parametrize("seed", range(10))
    def test_result_is_deterministic(self, seed, layered_graph_factory):
        """Identical inputs give identical layerings."""
        first = OrderPhase().run(layered_graph_factory(seed, [3, 5, 4]))
        second = OrderPhase().run(layered_graph_factory(seed, [3, 5, 4]))
        assert first == second


class TestConstrainedGraphs:
    """Constraint handling on seeded random graphs."""

    @pytest.mark.parametrize("seed", range(15))
    def test_constraints_hold_in_result(self, seed, layered_graph_factory):
        """Every left-of pair is honored by the returned layering."""
        graph = layered_graph_factory(seed, [3, 5, 5, 4])
        constraints = random_constraints(init_order(graph), seed)

        layering = OrderPhase().run(graph, constraints)

        assert satisfies_constraints(constraints, layering)
        assert_valid_layering(graph, layering)

    @pytest.mark.parametrize("seed", range(15))
    def test_resolution_leaves_no_violation(self, seed, layered_graph_factory):
        """After resolving a layer, the violation search finds nothing."""
        graph = layered_graph_factory(seed, [4, 6])
        fixed, movable = init_order(graph)
        constraints = random_constraints([movable], seed, per_layer=4)

        weights = barycenters(graph, fixed, movable, IN_EDGES)
        resolver = ConstraintResolver(graph, constraints, movable, weights, IN_EDGES)
        merges = resolver.resolve()

        assert merges <= len(movable) - 1
        assert resolver.find_violated_constraint() is None
        order = resolver.ordered_nodes()
        assert sorted(order) == sorted(movable)
        for left, right in constraints.edges:
            assert order.index(left) < order.index(right)
