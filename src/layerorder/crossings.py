"""
Edge crossing counts for ordered layerings.

The bilayer count follows W. Barth et al., "Bilayer Cross Counting",
JGAA 8(2) 179-194 (2004): edge endpoints are flattened into a sequence of
lower-layer positions and crossings are counted as inversions of that
sequence with an accumulator tree.

Both functions here are side-effect free and are safe to use as test
oracles for any layering of a graph.
"""

from typing import Dict, Hashable, List, Sequence

import networkx as nx

from .graph import OrderingError


def layer_positions(layer: Sequence[Hashable]) -> Dict[Hashable, int]:
    """Map each node of ``layer`` to its index within the layer."""
    return {node: i for i, node in enumerate(layer)}


def bilayer_cross_count(
    graph: nx.DiGraph, layer1: Sequence[Hashable], layer2: Sequence[Hashable]
) -> int:
    """
    Count edge crossings between two adjacent ordered layers.

    Only edges leaving ``layer1`` are considered, and every one of them must
    land in ``layer2``.

    Args:
        graph: The layout graph
        layer1: Upper layer, in left-to-right order
        layer2: Lower layer, in left-to-right order

    Returns:
        Number of pairwise crossings between edges from layer1 to layer2
    """
    layer2_pos = layer_positions(layer2)

    # Targets are grouped per source node, each group sorted by position
    indices: List[int] = []
    for node in layer1:
        node_indices = []
        for _, target in graph.out_edges(node):
            if target not in layer2_pos:
                raise OrderingError(
                    f"edge ({node!r}, {target!r}) does not end in the adjacent layer"
                )
            node_indices.append(layer2_pos[target])
        node_indices.sort()
        indices.extend(node_indices)

    first_index = 1
    while first_index < len(layer2):
        first_index <<= 1

    tree_size = 2 * first_index - 1
    first_index -= 1
    tree = [0] * tree_size

    cc = 0
    for index in indices:
        tree_index = index + first_index
        tree[tree_index] += 1
        while tree_index > 0:
            # A left child picks up everything already under its right sibling
            if tree_index % 2:
                cc += tree[tree_index + 1]
            tree_index = (tree_index - 1) >> 1
            tree[tree_index] += 1

    return cc


def cross_count(graph: nx.DiGraph, layering: Sequence[Sequence[Hashable]]) -> int:
    """Total crossings of a layering: the sum over successive layer pairs."""
    cc = 0
    for upper, lower in zip(layering, layering[1:]):
        cc += bilayer_cross_count(graph, upper, lower)
    return cc
