#!/usr/bin/env python3
"""
Reformat `go test -bench` output into aligned tables.

Reads runner output from stdin line by line. Measurement lines are buffered
until the runner's "ok" summary line, at which point the buffered run is
printed as a table; every other line is echoed unchanged.

Usage:
    go test -bench . -benchmem | python3 prettybench.py [--no-passthrough] [--drop-unterminated] [--summary]
"""

from dataclasses import dataclass
from typing import Optional, TextIO
import argparse
import io
import os
import sys

from bench_group import GroupAccumulator
from bench_types import InputReadFault, ParseError, c_err, c_label, c_value, c_warn
from parse_bench import LineKind, classify_line, parse_line
from render_table import render_group


UNRECOGNIZED_NOTICE = "prettybench unrecognized line:"


@dataclass
class Config:
    suppress_passthrough: bool = False
    flush_on_eof: bool = True
    summary: bool = False


@dataclass
class Counters:
    lines: int = 0
    records: int = 0
    rejected: int = 0


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class Pipeline:
    """Classify, parse, group and render one stream of runner output."""

    def __init__(self, out: TextIO, err: TextIO, config: Optional[Config] = None) -> None:
        self.out = out
        self.err = err
        self.config = config or Config()
        self.accumulator = GroupAccumulator(render_group, flush_on_eof=self.config.flush_on_eof)
        self.counters = Counters()

    def _echo(self, text: str) -> None:
        if not self.config.suppress_passthrough:
            print(text, file=self.out)

    def feed(self, text: str) -> None:
        text = text.rstrip("\r\n")
        self.counters.lines += 1
        kind = classify_line(text)

        if kind is LineKind.MEASUREMENT:
            try:
                rec = parse_line(text)
            except ParseError:
                self.counters.rejected += 1
                print(c_warn(UNRECOGNIZED_NOTICE, self.err), file=self.err)
                print(text, file=self.out)
                return
            self.accumulator.append(rec)
            self.counters.records += 1
            return

        if kind is LineKind.TERMINATOR:
            self.out.write(self.accumulator.flush_and_reset())
        self._echo(text)

    def close(self) -> None:
        self.out.write(self.accumulator.finish())
        self.out.flush()
        if self.config.summary:
            self.print_summary()

    def print_summary(self) -> None:
        c = self.counters
        for label, value in (
            ("Lines", c.lines),
            ("Records", c.records),
            ("Groups", self.accumulator.groups_rendered),
            ("Rejected", c.rejected),
        ):
            print(f"{c_label(label + ':', self.err)} {c_value(str(value), self.err)}", file=self.err)


def run(stream: TextIO, out: TextIO, err: TextIO, config: Optional[Config] = None) -> Pipeline:
    """
    Drive a Pipeline over every line of `stream`.

    Raises InputReadFault when reading the stream fails; anything wrong with
    an individual line is reported and skipped.
    """
    pipeline = Pipeline(out, err, config)
    lines = iter(stream)
    while True:
        try:
            text = next(lines)
        except StopIteration:
            break
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadFault(str(e)) from e
        pipeline.feed(text)
    pipeline.close()
    return pipeline


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def die(msg: str) -> None:
    print(f"{c_err('Error', sys.stderr)}: {msg}", file=sys.stderr)
    sys.exit(1)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Format go test benchmark output read from stdin as aligned tables.")
    ap.add_argument("--no-passthrough", action="store_true", help="Don't print non-benchmark lines")
    ap.add_argument(
        "--drop-unterminated",
        action="store_true",
        help="Discard benchmark lines not followed by an 'ok' line instead of printing them at end of input",
    )
    ap.add_argument("--summary", action="store_true", help="Print line/record counts to stderr at the end")
    return ap.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> Config:
    return Config(
        suppress_passthrough=args.no_passthrough,
        flush_on_eof=not args.drop_unterminated,
        summary=args.summary,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    config = config_from_args(args)

    stdin = sys.stdin
    if hasattr(stdin, "buffer"):
        stdin = io.TextIOWrapper(stdin.buffer, encoding="utf-8", errors="replace", newline="\n")

    try:
        run(stdin, sys.stdout, sys.stderr, config)
    except InputReadFault as e:
        die(str(e))
    except BrokenPipeError:
        # Downstream closed early (e.g. `| head`); stop quietly.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        os.close(devnull)
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
