"""
Group parsed benchmark records into runs and pick a shared time unit.

A run group is every measurement record seen between two terminator
lines. The accumulator owns one group at a time; when a terminator shows
up it hands the group to the renderer and starts a new one.
"""

from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple

import numpy as np

from bench_types import BenchmarkRecord, Measured


# ---------------------------------------------------------------------------
# Run group
# ---------------------------------------------------------------------------

@dataclass
class RunGroup:
    records: List[BenchmarkRecord] = field(default_factory=list)
    measured: Measured = Measured.NONE  # union of every record's flags

    def add(self, rec: BenchmarkRecord) -> None:
        self.records.append(rec)
        self.measured |= rec.measured

    def __len__(self) -> int:
        return len(self.records)

    def has(self, flag: Measured) -> bool:
        return bool(self.measured & flag)


# ---------------------------------------------------------------------------
# Unit normalization
# ---------------------------------------------------------------------------

class TimeUnit(NamedTuple):
    label: str
    divisor: float


NANOSECONDS = TimeUnit("ns/op", 1.0)
MICROSECONDS = TimeUnit("μs/op", 1e3)
MILLISECONDS = TimeUnit("ms/op", 1e6)
SECONDS = TimeUnit("s/op", 1e9)


def select_time_unit(smallest_ns: float) -> TimeUnit:
    """Pick the display unit for a group from its smallest ns/op value."""
    if smallest_ns < 10_000:
        return NANOSECONDS
    if smallest_ns < 1_000_000:
        return MICROSECONDS
    if smallest_ns < 10_000_000_000:
        return MILLISECONDS
    return SECONDS


def smallest_ns_per_op(group: RunGroup) -> float:
    """
    Return the minimum ns/op across the group.

    Records that did not report a time are ignored. A group where nobody
    reported a time returns 0.0, which keeps the column in nanoseconds.
    """
    values = np.array(
        [rec.ns_per_op for rec in group.records if rec.ns_per_op is not None],
        dtype=np.float64,
    )
    if values.size == 0:
        return 0.0
    return float(values.min())


def time_format_func(group: RunGroup) -> Callable[[float], str]:
    """
    Return one formatter used for every time cell in the group.

    The unit is chosen once from the group's smallest value, so a row that
    would individually prefer a coarser unit is still shown in the shared one.
    """
    if not group.records:
        raise ValueError("cannot choose a time unit for an empty group")
    unit = select_time_unit(smallest_ns_per_op(group))

    def fmt(ns: float) -> str:
        return f"{ns / unit.divisor:.2f} {unit.label}"

    return fmt


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------

class GroupAccumulator:
    """
    Buffer records for the current run and render them on demand.

    `render` is any callable turning a RunGroup into table text; the
    pipeline passes render_table.render_group.
    """

    def __init__(self, render: Callable[[RunGroup], str], flush_on_eof: bool = True) -> None:
        self.render = render
        self.flush_on_eof = flush_on_eof
        self.group = RunGroup()
        self.groups_rendered = 0

    def append(self, rec: BenchmarkRecord) -> None:
        self.group.add(rec)

    def flush_and_reset(self) -> str:
        group, self.group = self.group, RunGroup()
        if not group.records:
            return ""
        self.groups_rendered += 1
        return self.render(group)

    def finish(self) -> str:
        """Handle end of input: render or drop whatever is still buffered."""
        if self.flush_on_eof:
            return self.flush_and_reset()
        self.group = RunGroup()
        return ""
