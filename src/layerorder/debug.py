"""
Debug utilities for layerorder.

Text helpers for looking at layerings while troubleshooting an ordering:

- format_layering: Render a layering one rank per line
- layering_diff: Compare two layerings rank by rank

Usage:
    >>> from layerorder.debug import layering_diff
    >>> print(layering_diff(expected_layering, actual_layering))
"""

from typing import Hashable, List, Sequence


def format_layering(layering: Sequence[Sequence[Hashable]]) -> str:
    """
    Render a layering as text, one line per rank.

    Example:
        >>> print(format_layering([["A"], ["B", "C"]]))
          0: A
          1: B  C
    """
    if not layering:
        return "(empty layering)"
    return "\n".join(
        f"{rank:3d}: " + "  ".join(str(node) for node in layer)
        for rank, layer in enumerate(layering)
    )


def layering_diff(
    expected: Sequence[Sequence[Hashable]], actual: Sequence[Sequence[Hashable]]
) -> str:
    """
    Generate a rank-by-rank diff between two layerings.

    Matching ranks are shown once; differing ranks show both orders and the
    first index at which they disagree.

    Args:
        expected: The expected layering
        actual: The actual layering

    Returns:
        A formatted string showing the differences
    """
    output: List[str] = ["=" * 60, "LAYERING DIFF", "=" * 60]

    max_ranks = max(len(expected), len(actual))
    differing = [
        rank
        for rank in range(max_ranks)
        if _layer_at(expected, rank) != _layer_at(actual, rank)
    ]

    if not differing:
        output.append("No differences found.")
        return "\n".join(output)

    output.append(f"Found {len(differing)} differing rank(s)")
    output.append("")

    for rank in range(max_ranks):
        exp_layer = _layer_at(expected, rank)
        act_layer = _layer_at(actual, rank)
        if rank not in differing:
            output.append(f"{rank:3d}:   {_join(act_layer)}")
            continue

        output.append(f"{rank:3d}: E |{_join(exp_layer)}|")
        output.append(f"     A |{_join(act_layer)}|")
        first = next(
            (
                i
                for i in range(max(len(exp_layer), len(act_layer)))
                if i >= len(exp_layer)
                or i >= len(act_layer)
                or exp_layer[i] != act_layer[i]
            ),
            None,
        )
        output.append(f"       first difference at index {first}")

    return "\n".join(output)


def _layer_at(layering: Sequence[Sequence[Hashable]], rank: int) -> List[Hashable]:
    return list(layering[rank]) if rank < len(layering) else []


def _join(layer: Sequence[Hashable]) -> str:
    return "  ".join(str(node) for node in layer)
