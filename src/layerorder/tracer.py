"""
Debug tracing for the ordering phase.

Every run of OrderPhase records an OrderTrace describing how the crossing
count evolved from round to round. The trace is cheap to collect and is
kept whatever the debug level; the debug level only decides what gets
logged while the phase runs.

This is primarily useful for:
1. Understanding why the phase settled on a particular layering
2. Checking how quickly sweeps converge on a given graph
3. Writing targeted tests against per-round behaviour

Usage:
    >>> phase = OrderPhase()
    >>> layering = phase.run(graph, constraint_graph)
    >>> trace = phase.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("order_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Optional

from .debug import format_layering

DOWN = "down"
UP = "up"


@dataclass
class RoundRecord:
    """
    Outcome of a single sweep round.

    Attributes:
        iteration: 0-based round index
        direction: ``"down"`` (in-edges, top to bottom) or ``"up"``
        cross_count: Crossings of the layering produced by this round
        best_cross_count: Incumbent crossing count after this round
        improved: Whether this round replaced the incumbent
    """

    iteration: int
    direction: str
    cross_count: int
    best_cross_count: int
    improved: bool

    def __str__(self) -> str:
        marker = "*" if self.improved else " "
        return (
            f"[{marker}] round {self.iteration} ({self.direction}): "
            f"{self.cross_count} crossings, best {self.best_cross_count}"
        )


@dataclass
class OrderTrace:
    """
    Complete trace of one ordering run.

    Attributes:
        initial_cross_count: Crossings of the starting layering, after any
            constraint repair
        rounds: One record per sweep round, in execution order
        best_cross_count: Crossings of the returned layering
        best_layering: Copy of the returned layering
        iterations_run: Number of rounds executed before stopping
        elapsed_seconds: Wall-clock duration of the run
    """

    initial_cross_count: Optional[int] = None
    rounds: List[RoundRecord] = field(default_factory=list)
    best_cross_count: Optional[int] = None
    best_layering: List[List[Hashable]] = field(default_factory=list)
    iterations_run: int = 0
    elapsed_seconds: float = 0.0

    def add_round(
        self,
        iteration: int,
        direction: str,
        cross_count: int,
        best_cross_count: int,
        improved: bool,
    ) -> None:
        """Record the outcome of a sweep round."""
        self.rounds.append(
            RoundRecord(iteration, direction, cross_count, best_cross_count, improved)
        )

    def get_round(self, iteration: int) -> Optional[RoundRecord]:
        """Get the record for a specific round index."""
        for record in self.rounds:
            if record.iteration == iteration:
                return record
        return None

    def get_improvements(self) -> List[RoundRecord]:
        """Rounds that replaced the incumbent layering."""
        return [record for record in self.rounds if record.improved]

    def best_cross_count_history(self) -> List[int]:
        """Incumbent crossing count after each round."""
        return [record.best_cross_count for record in self.rounds]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with the crossing counts at the start and end of
        the run, the number of rounds and how many of them improved.
        """
        lines = [
            "=" * 60,
            "ORDER TRACE SUMMARY",
            "=" * 60,
            "",
            f"Initial cross count: {self.initial_cross_count}",
            f"Best cross count: {self.best_cross_count}",
            f"Iterations run: {self.iterations_run}",
            f"Improving rounds: {len(self.get_improvements())}",
            f"Elapsed: {self.elapsed_seconds * 1000:.3f} ms",
        ]
        return "\n".join(lines)

    def dump(self) -> str:
        """
        Generate a complete human-readable dump of the trace.

        This includes the summary, every round and the final layering.
        """
        lines = [self.summary(), "", "ROUNDS:", "-" * 40]
        for record in self.rounds:
            lines.append(str(record))

        lines.extend(["", "BEST LAYERING:", "-" * 40])
        lines.append(format_layering(self.best_layering))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
