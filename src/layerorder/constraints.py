"""
Constraint resolution for a single layer.

Implements the merge step of Forster's constrained two-layer crossing
reduction ("A Fast and Simple Heuristic for Constrained Two-Level Crossing
Reduction"). Units start as one per node; whenever a "left of" constraint
disagrees with the barycenter order, its two endpoints are merged into a
compound unit that keeps them adjacent and in the required order.

Units live in an index-addressed arena. A merge appends a new unit and
retires its two parts, so indices stay stable for the lifetime of one
resolver and nothing leaks into the next layer.
"""

from typing import Dict, Hashable, List, Optional, Sequence, Tuple

import networkx as nx

from .graph import degree
from .models import UNCONSTRAINED, Unit, Weight, weight_key


class ConstraintResolver:
    """
    Unit arena plus the constraint subgraph restricted to one layer.

    Attributes:
        units: Every unit created so far, merged ones included.
        constraints: DiGraph over unit indices of the live constrained units.
    """

    def __init__(
        self,
        graph: nx.DiGraph,
        constraint_graph: nx.DiGraph,
        movable: Sequence[Hashable],
        weights: Dict[Hashable, Weight],
        relation: str,
    ):
        """
        Build singleton units for ``movable`` and restrict the constraints.

        Args:
            graph: The layout graph, used for neighbor degrees
            constraint_graph: Caller's constraint graph (not modified)
            movable: The layer being reordered, in its current order
            weights: Barycenter weight per node of ``movable``
            relation: Neighbor relation the weights were computed with
        """
        self.units: List[Unit] = []
        self.constraints = nx.DiGraph()

        index: Dict[Hashable, int] = {}
        for position, node in enumerate(movable):
            index[node] = len(self.units)
            self.units.append(
                Unit(
                    weight=weights[node],
                    position=position,
                    nodes=[node],
                    degree=degree(graph, node, relation),
                )
            )

        present = [node for node in movable if node in constraint_graph]
        restricted = constraint_graph.subgraph(present).copy()
        for node in present:
            self.constraints.add_node(index[node])
        for node in present:
            for successor in restricted.successors(node):
                if successor != node:
                    self.constraints.add_edge(index[node], index[successor])

    def find_violated_constraint(self) -> Optional[Tuple[int, int]]:
        """
        Find a constraint edge whose barycenters do not already agree with it.

        Units are visited in topological order, driven by a stack seeded with
        the units that have no predecessors. When a unit becomes active, each
        incoming edge (s, t) is checked, most recently processed first; it is
        violated when ``weight(s) >= weight(t)``.

        Returns:
            The violated (source, target) unit indices, or None
        """
        active: List[int] = []
        incoming: Dict[int, List[int]] = {}
        remaining: Dict[int, int] = {}

        for unit in self.constraints.nodes:
            incoming[unit] = []
            remaining[unit] = self.constraints.in_degree(unit)
            if remaining[unit] == 0:
                active.append(unit)

        while active:
            target = active.pop()
            target_key = weight_key(self.units[target].weight)
            for source in incoming[target]:
                if weight_key(self.units[source].weight) >= target_key:
                    return source, target
            for successor in self.constraints.successors(target):
                incoming[successor].insert(0, target)
                remaining[successor] -= 1
                if remaining[successor] == 0:
                    active.append(successor)

        return None

    def merge(self, source: int, target: int) -> int:
        """
        Merge two units into a compound placed where the leftmost one was.

        The compound's weight is the degree-weighted average of its parts.
        Unconstrained or neighborless parts carry no weight into the average;
        if neither part has any, the compound stays unconstrained. Parts that
        take part in no constraint are merged without touching the
        constraint subgraph.

        Returns:
            Index of the new compound unit
        """
        left = self.units[source]
        right = self.units[target]

        weighted = [
            part
            for part in (left, right)
            if part.weight is not UNCONSTRAINED and part.degree > 0
        ]
        if weighted:
            weight: Weight = sum(part.weight * part.degree for part in weighted) / sum(
                part.degree for part in weighted
            )
        else:
            weight = UNCONSTRAINED

        compound = len(self.units)
        self.units.append(
            Unit(
                weight=weight,
                position=min(left.position, right.position),
                nodes=left.nodes + right.nodes,
                degree=left.degree + right.degree,
            )
        )
        left.alive = False
        right.alive = False

        merged = [part for part in (source, target) if part in self.constraints]
        if not merged:
            return compound

        self.constraints.add_node(compound)
        for old in merged:
            for predecessor in list(self.constraints.predecessors(old)):
                if predecessor not in (source, target):
                    self.constraints.add_edge(predecessor, compound)
            for successor in list(self.constraints.successors(old)):
                if successor not in (source, target):
                    self.constraints.add_edge(compound, successor)
        self.constraints.remove_nodes_from(merged)

        return compound

    def resolve(self) -> int:
        """
        Merge violated constraints until none remain.

        Returns:
            Number of merges performed
        """
        merges = 0
        while True:
            violation = self.find_violated_constraint()
            if violation is None:
                return merges
            self.merge(*violation)
            merges += 1

    def live_units(self) -> List[Unit]:
        """Units that have not been merged away."""
        return [unit for unit in self.units if unit.alive]

    def ordered_nodes(self) -> List[Hashable]:
        """Concatenate live unit members ordered by (weight, position)."""
        result: List[Hashable] = []
        for unit in sorted(self.live_units(), key=lambda u: u.sort_key()):
            result.extend(unit.nodes)
        return result
