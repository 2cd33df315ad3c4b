"""
Barycenter ordering of one layer against a fixed neighbor layer.

Each movable node is weighted by the mean position of its neighbors in the
fixed layer. Ordering constraints are then repaired by the
ConstraintResolver and the layer is sorted by the resulting unit weights.
"""

from typing import Dict, Hashable, List, Sequence

import networkx as nx

from .constraints import ConstraintResolver
from .crossings import layer_positions
from .graph import OrderingError, neighbors
from .models import UNCONSTRAINED, Weight


def barycenters(
    graph: nx.DiGraph,
    fixed: Sequence[Hashable],
    movable: Sequence[Hashable],
    relation: str,
) -> Dict[Hashable, Weight]:
    """
    Compute barycenter weights for every node of ``movable``.

    Args:
        graph: The layout graph
        fixed: Neighbor layer whose order is held fixed
        movable: Layer to be weighted
        relation: ``IN_EDGES`` when ``fixed`` is above, ``OUT_EDGES`` when below

    Returns:
        Mapping node -> mean neighbor position, or ``UNCONSTRAINED`` for
        nodes with no neighbors through ``relation``
    """
    fixed_pos = layer_positions(fixed)

    weights: Dict[Hashable, Weight] = {}
    for node in movable:
        adjacent = neighbors(graph, node, relation)
        if not adjacent:
            weights[node] = UNCONSTRAINED
            continue
        total = 0
        for neighbor in adjacent:
            if neighbor not in fixed_pos:
                raise OrderingError(
                    f"neighbor {neighbor!r} of {node!r} is not in the adjacent layer"
                )
            total += fixed_pos[neighbor]
        weights[node] = total / len(adjacent)
    return weights


def order_layer(
    graph: nx.DiGraph,
    constraint_graph: nx.DiGraph,
    fixed: Sequence[Hashable],
    movable: Sequence[Hashable],
    relation: str,
) -> List[Hashable]:
    """
    Reorder ``movable`` to reduce crossings with ``fixed``.

    Follows Forster's constrained barycenter heuristic: a single pass that
    respects every "left of" constraint between nodes of ``movable`` but
    makes no optimality promise.

    Returns:
        The new left-to-right order of ``movable``
    """
    weights = barycenters(graph, fixed, movable, relation)
    resolver = ConstraintResolver(graph, constraint_graph, movable, weights, relation)
    resolver.resolve()
    return resolver.ordered_nodes()
