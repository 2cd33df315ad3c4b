"""
Data models for layer ordering.

This module contains the records the barycenter engine and the constraint
resolver pass between each other while a single layer is being reordered.

Classes:
    Unconstrained: Tagged weight for nodes with no neighbor in the fixed layer.
    Unit: One node, or a merged group of nodes, competing for a position.
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Tuple, Union


class Unconstrained:
    """
    Weight of a unit with no neighbors in the fixed layer.

    It is kept distinct from every real barycenter and orders before all of
    them, so such units gather at the left end of the layer.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCONSTRAINED"


UNCONSTRAINED = Unconstrained()

Weight = Union[float, Unconstrained]


def weight_key(weight: Weight) -> Tuple[int, float]:
    """Sort key placing ``UNCONSTRAINED`` before every real weight."""
    if weight is UNCONSTRAINED:
        return (0, 0.0)
    return (1, weight)


@dataclass
class Unit:
    """
    A node or merged group of nodes being ordered within one layer.

    Units are created fresh for every layer ordering. Merging two units
    produces a new unit whose members are the left unit's members followed
    by the right unit's members, so the "left of" requirement that caused
    the merge holds inside the group.

    Attributes:
        weight: Barycenter of the unit, or ``UNCONSTRAINED``.
        position: Tie-break index, the smallest original index of any member.
        nodes: Member node IDs, in the order they will be emitted.
        degree: Number of neighbor-relation edges across all members.
        alive: False once the unit has been merged into a compound.
    """

    weight: Weight
    position: int
    nodes: List[Hashable] = field(default_factory=list)
    degree: int = 0
    alive: bool = True

    def sort_key(self) -> Tuple[Tuple[int, float], int]:
        """Key used for the final left-to-right ordering of units."""
        return (weight_key(self.weight), self.position)
