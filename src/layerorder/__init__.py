"""
layerorder - Crossing minimization for layered graph drawings

Orders the nodes of an already-ranked graph within their ranks so that a
Sugiyama-style drawing has few edge crossings, honoring optional
"must be left of" constraints between nodes of the same rank.

Example:
    >>> from layerorder import OrderPhase, create_graph, cross_count
    >>> graph = create_graph(
    ...     {"A": 0, "B": 1, "C": 1, "D": 2, "E": 2},
    ...     [("A", "C"), ("A", "B"), ("B", "E"), ("C", "D"), ("C", "E")],
    ... )
    >>> layering = OrderPhase().run(graph)
    >>> cross_count(graph, layering)
    0

Debug Mode Example:
    >>> phase = OrderPhase(debug_level=3)
    >>> layering = phase.run(graph)
    >>> print(phase.get_trace().summary())
"""

from .barycenter import barycenters, order_layer
from .constraints import ConstraintResolver
from .crossings import bilayer_cross_count, cross_count, layer_positions
from .debug import format_layering, layering_diff
from .graph import (
    IN_EDGES,
    OUT_EDGES,
    OrderingError,
    create_constraint_graph,
    create_graph,
)
from .models import UNCONSTRAINED, Unit, weight_key
from .order import (
    OrderPhase,
    constrain_layering,
    copy_layering,
    init_order,
    satisfies_constraints,
    sweep,
)
from .tracer import OrderTrace, RoundRecord

__version__ = "0.1.0"

__all__ = [
    # Main API
    "OrderPhase",
    "init_order",
    "copy_layering",
    "sweep",
    "satisfies_constraints",
    "constrain_layering",
    # Graph contract
    "IN_EDGES",
    "OUT_EDGES",
    "OrderingError",
    "create_graph",
    "create_constraint_graph",
    # Crossing counting
    "bilayer_cross_count",
    "cross_count",
    "layer_positions",
    # Barycenter ordering and constraint resolution
    "barycenters",
    "order_layer",
    "ConstraintResolver",
    "Unit",
    "UNCONSTRAINED",
    "weight_key",
    # Debug/Tracing
    "OrderTrace",
    "RoundRecord",
    "format_layering",
    "layering_diff",
]
