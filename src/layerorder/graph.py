"""
Graph contract for the ordering phase.

The ordering phase works on networkx directed graphs supplied by the caller:

- the layout graph, a ``nx.DiGraph`` or ``nx.MultiDiGraph`` whose nodes carry
  an integer ``rank`` attribute (read) and receive an ``order`` attribute
  (written once the phase finishes);
- the constraint graph, a ``nx.DiGraph`` where an edge ``(u, v)`` means
  "u must end up to the left of v".

This module holds the small amount of glue the algorithm needs on top of
networkx, plus builders used by callers and tests.
"""

from typing import Dict, Hashable, Iterable, List, Tuple

import networkx as nx

IN_EDGES = "in"
OUT_EDGES = "out"


class OrderingError(Exception):
    """Raised when the input graphs violate the ordering phase's preconditions."""

    pass


def neighbors(graph: nx.DiGraph, node: Hashable, relation: str) -> List[Hashable]:
    """
    Return the neighbors of ``node`` reachable through ``relation``.

    One entry is returned per edge, so parallel edges of a MultiDiGraph
    contribute their endpoint more than once.

    Args:
        graph: The layout graph
        node: Node whose neighbors are wanted
        relation: ``IN_EDGES`` for edge sources, ``OUT_EDGES`` for edge targets
    """
    if relation == IN_EDGES:
        return [source for source, _ in graph.in_edges(node)]
    if relation == OUT_EDGES:
        return [target for _, target in graph.out_edges(node)]
    raise ValueError(f"unknown neighbor relation: {relation!r}")


def degree(graph: nx.DiGraph, node: Hashable, relation: str) -> int:
    """Number of edges incident to ``node`` in the given relation."""
    if relation == IN_EDGES:
        return graph.in_degree(node)
    if relation == OUT_EDGES:
        return graph.out_degree(node)
    raise ValueError(f"unknown neighbor relation: {relation!r}")


def node_rank(graph: nx.DiGraph, node: Hashable) -> int:
    """Read a node's rank, failing fast on missing or invalid values."""
    rank = graph.nodes[node].get("rank")
    if isinstance(rank, bool) or not isinstance(rank, int):
        raise OrderingError(f"node {node!r} has no integer rank (got {rank!r})")
    if rank < 0:
        raise OrderingError(f"node {node!r} has negative rank {rank}")
    return rank


def check_constraint_graph(graph: nx.DiGraph, constraint_graph: nx.DiGraph) -> None:
    """Ensure every constraint-graph node is also a node of the layout graph."""
    for node in constraint_graph.nodes:
        if node not in graph:
            raise OrderingError(f"constraint references unknown node {node!r}")


def create_graph(
    ranks: Dict[Hashable, int],
    edges: Iterable[Tuple[Hashable, Hashable]] = (),
    multigraph: bool = False,
) -> nx.DiGraph:
    """
    Create a ranked layout graph.

    Nodes are added in the iteration order of ``ranks``, which is also the
    order the phase uses to build its initial layering.

    Args:
        ranks: Mapping of node -> rank
        edges: (source, target) pairs; both endpoints must appear in ``ranks``
        multigraph: Build a MultiDiGraph so repeated pairs stay parallel edges

    Returns:
        networkx graph with a ``rank`` attribute on every node
    """
    graph = nx.MultiDiGraph() if multigraph else nx.DiGraph()
    for node, rank in ranks.items():
        graph.add_node(node, rank=rank)
    for source, target in edges:
        if source not in ranks or target not in ranks:
            raise OrderingError(
                f"edge ({source!r}, {target!r}) references an unranked node"
            )
        graph.add_edge(source, target)
    return graph


def create_constraint_graph(
    constraints: Iterable[Tuple[Hashable, Hashable]] = (),
) -> nx.DiGraph:
    """
    Create a constraint graph from (left, right) pairs.

    Each pair (u, v) requires u to be placed somewhere to the left of v
    within their shared layer.
    """
    constraint_graph = nx.DiGraph()
    constraint_graph.add_edges_from(constraints)
    return constraint_graph
