"""
Crossing-minimization ordering phase for ranked graphs.

Given a graph whose nodes already carry a rank, OrderPhase decides the
left-to-right order of the nodes inside every rank. It alternates downward
and upward barycenter sweeps, keeps the layering with the fewest crossings
seen so far and finally writes each node's index within its layer to the
node's ``order`` attribute.

Example:
    >>> graph = create_graph({"A": 0, "B": 1, "C": 1}, [("A", "C"), ("A", "B")])
    >>> layering = OrderPhase(iterations=8).run(graph)
    >>> graph.nodes["B"]["order"]
    0
"""

import math
import time
from typing import Hashable, List, Optional, Sequence

import networkx as nx
import structlog

from .barycenter import order_layer
from .constraints import ConstraintResolver
from .crossings import bilayer_cross_count, cross_count, layer_positions
from .graph import (
    IN_EDGES,
    OUT_EDGES,
    OrderingError,
    check_constraint_graph,
    create_constraint_graph,
    node_rank,
)
from .models import UNCONSTRAINED
from .tracer import DOWN, UP, OrderTrace

logger = structlog.get_logger()

Layering = List[List[Hashable]]


def init_order(graph: nx.DiGraph) -> Layering:
    """
    Group nodes by rank, keeping the graph's node order within each rank.

    Raises:
        OrderingError: If a rank is missing or invalid, or a rank between
            0 and the highest rank has no nodes
    """
    layering: Layering = []
    for node in graph.nodes:
        rank = node_rank(graph, node)
        while len(layering) <= rank:
            layering.append([])
        layering[rank].append(node)

    for rank, layer in enumerate(layering):
        if not layer:
            raise OrderingError(f"rank {rank} has no nodes")
    return layering


def copy_layering(layering: Sequence[Sequence[Hashable]]) -> Layering:
    """Copy a layering so later sweeps cannot change it."""
    return [list(layer) for layer in layering]


def satisfies_constraints(
    constraint_graph: nx.DiGraph, layering: Sequence[Sequence[Hashable]]
) -> bool:
    """
    Check that every constraint edge between nodes of one layer is respected.

    Edges whose endpoints sit in different layers place no requirement on
    the order and are ignored, and so are self-loops.
    """
    for layer in layering:
        positions = layer_positions(layer)
        for left, right in constraint_graph.subgraph(layer).edges:
            if left != right and positions[left] >= positions[right]:
                return False
    return True


def constrain_layering(
    graph: nx.DiGraph,
    constraint_graph: nx.DiGraph,
    layering: Sequence[Sequence[Hashable]],
) -> Layering:
    """
    Rearrange each layer just enough to respect its constraints.

    Every node is treated as unconstrained by barycenter, so only the
    constraint merges move anything. Compound units land where their leftmost
    member was and everything else keeps its relative order. Layers with no
    same-layer constraint come back unchanged.
    """
    result: Layering = []
    for layer in layering:
        if constraint_graph.subgraph(layer).number_of_edges() == 0:
            result.append(list(layer))
            continue
        weights = {node: UNCONSTRAINED for node in layer}
        resolver = ConstraintResolver(graph, constraint_graph, layer, weights, IN_EDGES)
        resolver.resolve()
        result.append(resolver.ordered_nodes())
    return result


def sweep(
    graph: nx.DiGraph,
    constraint_graph: nx.DiGraph,
    iteration: int,
    layering: Layering,
) -> int:
    """
    Run one directional pass over the layering, reordering it in place.

    Even iterations sweep downward, ordering each layer against the one
    above through in-edges. Odd iterations sweep upward through out-edges.

    Returns:
        Sum of the bilayer crossing counts met along the sweep
    """
    cc = 0
    if iteration % 2 == 0:
        for i in range(1, len(layering)):
            layering[i] = order_layer(
                graph, constraint_graph, layering[i - 1], layering[i], IN_EDGES
            )
            cc += bilayer_cross_count(graph, layering[i - 1], layering[i])
    else:
        for i in range(len(layering) - 2, -1, -1):
            layering[i] = order_layer(
                graph, constraint_graph, layering[i + 1], layering[i], OUT_EDGES
            )
            cc += bilayer_cross_count(graph, layering[i], layering[i + 1])
    return cc


class OrderPhase:
    """
    Orders nodes within their ranks to reduce edge crossings.

    The result is heuristic. It never has more crossings than the starting
    layering (after that layering is made to honor the constraints) or than
    the first sweep, but it is not guaranteed to be minimal.

    Example:
        >>> phase = OrderPhase(iterations=24, debug_level=2)
        >>> layering = phase.run(graph, constraint_graph)
        >>> print(phase.get_trace().summary())
    """

    # Consecutive rounds without improvement before giving up
    NON_IMPROVEMENT_PATIENCE = 4

    def __init__(self, iterations: int = 24, debug_level: int = 0):
        """
        Initialize the ordering phase.

        Args:
            iterations: Maximum number of sweep rounds (positive)
            debug_level: 0 is silent, 1 logs elapsed time, 2 adds start and
                best crossing counts, 3 adds every round's count
        """
        self.iterations = iterations
        self.debug_level = debug_level
        self._trace: Optional[OrderTrace] = None

    @property
    def iterations(self) -> int:
        return self._iterations

    @iterations.setter
    def iterations(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError("iterations must be a positive integer")
        self._iterations = value

    @property
    def debug_level(self) -> int:
        return self._debug_level

    @debug_level.setter
    def debug_level(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError("debug_level must be a non-negative integer")
        self._debug_level = value

    def run(
        self, graph: nx.DiGraph, constraint_graph: Optional[nx.DiGraph] = None
    ) -> Layering:
        """
        Order every rank of ``graph`` and write the result back.

        Args:
            graph: Ranked layout graph; receives an ``order`` attribute
            constraint_graph: Edges (u, v) requiring u left of v; optional

        Returns:
            The best layering found, one list of nodes per rank

        Raises:
            OrderingError: If the graphs violate the phase's preconditions
        """
        if constraint_graph is None:
            constraint_graph = create_constraint_graph()
        check_constraint_graph(graph, constraint_graph)

        start = time.perf_counter()
        layering = init_order(graph)
        # Sweeps never reorder the first layer going down or the last going up
        if not satisfies_constraints(constraint_graph, layering):
            layering = constrain_layering(graph, constraint_graph, layering)
        trace = OrderTrace(initial_cross_count=cross_count(graph, layering))
        self._trace = trace

        if self.debug_level >= 2:
            logger.info("Order phase start", cross_count=trace.initial_cross_count)

        # The starting layering competes too, unless a constraint cycle left it broken
        best_layering = copy_layering(layering)
        best_cc = math.inf
        if satisfies_constraints(constraint_graph, layering):
            best_cc = trace.initial_cross_count
        stale = 0
        iteration = 0
        while iteration < self.iterations and stale < self.NON_IMPROVEMENT_PATIENCE:
            cc = sweep(graph, constraint_graph, iteration, layering)
            improved = cc < best_cc
            if improved:
                best_layering = copy_layering(layering)
                best_cc = cc
                stale = 0
            else:
                stale += 1

            trace.add_round(
                iteration,
                DOWN if iteration % 2 == 0 else UP,
                cc,
                best_cc,
                improved,
            )
            if self.debug_level >= 3:
                logger.info(
                    "Order phase iteration",
                    iteration=iteration,
                    cross_count=cc,
                    best_cross_count=best_cc,
                )
            iteration += 1

        for layer in best_layering:
            for position, node in enumerate(layer):
                graph.nodes[node]["order"] = position

        trace.best_cross_count = best_cc
        trace.best_layering = copy_layering(best_layering)
        trace.iterations_run = iteration
        trace.elapsed_seconds = time.perf_counter() - start

        if self.debug_level >= 2:
            logger.info(
                "Order phase best",
                iterations=iteration,
                best_cross_count=best_cc,
            )
        if self.debug_level >= 1:
            logger.info(
                "Order phase finished",
                elapsed_ms=round(trace.elapsed_seconds * 1000, 3),
            )

        return best_layering

    def get_trace(self) -> Optional[OrderTrace]:
        """Trace of the most recent run, or None before the first run."""
        return self._trace
