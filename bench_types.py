"""
Shared types and utilities for the benchmark table formatter.

This module contains:
- Measured flag set describing which metrics a record carries
- BenchmarkRecord dataclass for representing parsed measurement lines
- Parse / input error types
- ANSI color helpers for diagnostic output
"""

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Optional, TextIO
import os
import sys


BENCHMARK_PREFIX = "Benchmark"


# ---------------------------------------------------------------------------
# ANSI color helpers
# ---------------------------------------------------------------------------

def _use_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    try:
        return stream.isatty()
    except Exception:
        return False


def _c(text: str, code: str, stream: Optional[TextIO] = None) -> str:
    if not _use_color(stream if stream is not None else sys.stderr):
        return text
    return f"\033[{code}m{text}\033[0m"


def c_label(text: str, stream: Optional[TextIO] = None) -> str:
    return _c(text, "1;36", stream)  # bold cyan


def c_value(text: str, stream: Optional[TextIO] = None) -> str:
    return _c(text, "1;37", stream)  # bold white


def c_warn(text: str, stream: Optional[TextIO] = None) -> str:
    return _c(text, "1;33", stream)  # bold yellow


def c_err(text: str, stream: Optional[TextIO] = None) -> str:
    return _c(text, "1;31", stream)  # bold red


# ---------------------------------------------------------------------------
# Measured flags
# ---------------------------------------------------------------------------

class Measured(Flag):
    NONE = 0
    NS_PER_OP = auto()
    MB_PER_S = auto()
    BYTES_PER_OP = auto()
    ALLOCS_PER_OP = auto()


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ParseFailure(Enum):
    NOT_A_BENCHMARK_LINE = "not a benchmark line"
    TOO_FEW_FIELDS = "too few fields"
    BAD_ITERATION_COUNT = "bad iteration count"
    MALFORMED_METRIC_FIELD = "malformed metric field"
    UNKNOWN_UNIT = "unknown unit"


class ParseError(ValueError):
    """A line looked like a measurement but could not be turned into a record."""

    def __init__(self, reason: ParseFailure, line: str, detail: str = "") -> None:
        self.reason = reason
        self.line = line
        self.detail = detail
        msg = reason.value if not detail else f"{reason.value}: {detail}"
        super().__init__(msg)


class InputReadFault(RuntimeError):
    """The input stream itself failed; fatal for the whole run."""


# ---------------------------------------------------------------------------
# BenchmarkRecord dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BenchmarkRecord:
    name: str
    iterations: int
    ns_per_op: Optional[float] = None
    mb_per_s: Optional[float] = None
    bytes_per_op: Optional[int] = None
    allocs_per_op: Optional[int] = None
    measured: Measured = field(init=False)

    def __post_init__(self) -> None:
        # Flags always mirror the optional fields that are set.
        flags = Measured.NONE
        if self.ns_per_op is not None:
            flags |= Measured.NS_PER_OP
        if self.mb_per_s is not None:
            flags |= Measured.MB_PER_S
        if self.bytes_per_op is not None:
            flags |= Measured.BYTES_PER_OP
        if self.allocs_per_op is not None:
            flags |= Measured.ALLOCS_PER_OP
        object.__setattr__(self, "measured", flags)
