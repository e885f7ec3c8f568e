"""Opt-in parse profiling.

Inside a ``profiled_parse()`` block every call to ``parse()`` appends a
ParseRecord to the active ParseAccumulator. Outside such a block the
parser only pays for one ContextVar lookup.

Example:
    from plantilla import parse
    from plantilla.profiling import profiled_parse

    with profiled_parse() as metrics:
        parse("<h1>{title}</h1>", filename="index.astro")
        parse("<p>unclosed", filename="about.astro")

    for record in metrics.records:
        print(record.filename, record.token_count, record.elapsed_ms)
    print(metrics.summary())

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

from plantilla.nodes import Node
from plantilla.visitor import walk


@dataclass(frozen=True, slots=True)
class ParseRecord:
    """Measurements for a single parse() call."""

    filename: str | None
    source_length: int
    token_count: int
    node_count: int
    diagnostic_count: int
    elapsed_ms: float


@dataclass
class ParseAccumulator:
    """Collects one ParseRecord per parse within a profiling block.

    The count properties are totals over all records.
    """

    records: list[ParseRecord] = field(default_factory=list)
    started: float = field(default_factory=perf_counter)

    def add(self, record: ParseRecord) -> None:
        self.records.append(record)

    @property
    def parse_calls(self) -> int:
        return len(self.records)

    @property
    def source_length(self) -> int:
        return sum(r.source_length for r in self.records)

    @property
    def token_count(self) -> int:
        return sum(r.token_count for r in self.records)

    @property
    def node_count(self) -> int:
        return sum(r.node_count for r in self.records)

    @property
    def diagnostic_count(self) -> int:
        return sum(r.diagnostic_count for r in self.records)

    @property
    def parse_ms(self) -> float:
        """Time spent inside parse() calls."""
        return sum(r.elapsed_ms for r in self.records)

    @property
    def wall_ms(self) -> float:
        """Time since the accumulator was created."""
        return (perf_counter() - self.started) * 1000

    def slowest(self) -> ParseRecord | None:
        return max(self.records, key=lambda r: r.elapsed_ms, default=None)

    def summary(self) -> dict[str, Any]:
        return {
            "parse_calls": self.parse_calls,
            "parse_ms": round(self.parse_ms, 3),
            "wall_ms": round(self.wall_ms, 3),
            "source_length": self.source_length,
            "token_count": self.token_count,
            "node_count": self.node_count,
            "diagnostic_count": self.diagnostic_count,
        }


def count_nodes(node: Node) -> int:
    """Size of the subtree at node, counting attributes and attribute expressions."""
    return sum(1 for _ in walk(node))


_active: ContextVar[ParseAccumulator | None] = ContextVar("plantilla_profile", default=None)


def get_parse_accumulator() -> ParseAccumulator | None:
    """The accumulator of the innermost profiled_parse() block, if any."""
    return _active.get()


@contextmanager
def profiled_parse() -> Iterator[ParseAccumulator]:
    """Record every parse in the block into a fresh ParseAccumulator.

    Blocks nest; the inner block shadows the outer one until it exits.
    """
    accumulator = ParseAccumulator()
    reset_token = _active.set(accumulator)
    try:
        yield accumulator
    finally:
        _active.reset(reset_token)
