"""
Render a run group as a plain-text, column-aligned table.

Output layout:

    benchmark           iter      time/iter    throughput
    ---------           ----      ---------    ----------
    BenchmarkFoo-8   1000000   120.00 ns/op   800.00 MB/s

The first column is left-justified, all others right-justified; columns are
separated by three spaces and the last column carries no trailing padding.
Widths are counted in characters, so "μs/op" is five wide.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from bench_group import RunGroup, time_format_func
from bench_types import BenchmarkRecord, Measured


COLUMN_SEP = "   "


# ---------------------------------------------------------------------------
# Cell formatters
# ---------------------------------------------------------------------------

def format_iterations(n: int) -> str:
    return str(n)


def format_mb_per_s(rec: BenchmarkRecord) -> str:
    if rec.mb_per_s is None:
        return ""
    return f"{rec.mb_per_s:.2f} MB/s"


def format_bytes_per_op(rec: BenchmarkRecord) -> str:
    if rec.bytes_per_op is None:
        return ""
    return f"{rec.bytes_per_op} B/op"


def format_allocs_per_op(rec: BenchmarkRecord) -> str:
    if rec.allocs_per_op is None:
        return ""
    return f"{rec.allocs_per_op} allocs/op"


# (header, flag that switches the column on, cell formatter)
_OPTIONAL_COLUMNS: List[tuple[str, Measured, Callable[[BenchmarkRecord], str]]] = [
    ("throughput", Measured.MB_PER_S, format_mb_per_s),
    ("bytes alloc", Measured.BYTES_PER_OP, format_bytes_per_op),
    ("allocs", Measured.ALLOCS_PER_OP, format_allocs_per_op),
]


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

@dataclass
class Table:
    cells: List[List[str]]
    max_lengths: Optional[List[int]] = None


def optional_columns(measured: Measured) -> List[tuple[str, Measured, Callable[[BenchmarkRecord], str]]]:
    """Optional columns switched on by `measured`, in display order."""
    return [col for col in _OPTIONAL_COLUMNS if measured & col[1]]


def column_names(measured: Measured) -> List[str]:
    """Header names for a group whose union of flags is `measured`."""
    return ["benchmark", "iter", "time/iter"] + [header for header, _, _ in optional_columns(measured)]


def tabulate(group: RunGroup) -> Table:
    """Build header, underline and one data row per record, in input order."""
    optional = optional_columns(group.measured)
    names = ["benchmark", "iter", "time/iter"] + [header for header, _, _ in optional]
    table = Table(cells=[names, ["-" * len(name) for name in names]])
    fmt_time = time_format_func(group)

    for rec in group.records:
        time_cell = fmt_time(rec.ns_per_op) if rec.ns_per_op is not None else ""
        row = [rec.name, format_iterations(rec.iterations), time_cell]
        for _, _, fmt in optional:
            row.append(fmt(rec))
        table.cells.append(row)

    return table


def find_max_lengths(cells: List[List[str]]) -> List[int]:
    lengths = np.array([[len(cell) for cell in row] for row in cells], dtype=np.int64)
    return [int(n) for n in lengths.max(axis=0)]


def _pad(cell: str, width: int, col: int, ncols: int) -> str:
    if col == 0:
        return cell.ljust(width) + COLUMN_SEP
    if col == ncols - 1:
        return cell.rjust(width)
    return cell.rjust(width) + COLUMN_SEP


def format_table_cells(cells: List[List[str]], max_lengths: List[int]) -> str:
    out: List[str] = []
    for row in cells:
        ncols = len(row)
        out.append("".join(_pad(cell, max_lengths[i], i, ncols) for i, cell in enumerate(row)))
        out.append("\n")
    return "".join(out)


def render_group(group: RunGroup) -> str:
    """Render a group as table text; an empty group renders as ""."""
    if not group.records:
        return ""
    table = tabulate(group)
    table.max_lengths = find_max_lengths(table.cells)
    return format_table_cells(table.cells, table.max_lengths)
