import pytest

from bench_types import Measured, ParseError, ParseFailure
from parse_bench import LineKind, classify_line, parse_line


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "line, kind",
    [
        ("BenchmarkFoo-8\t1000000\t120 ns/op", LineKind.MEASUREMENT),
        ("BenchmarkFoo\t10\t5 widgets/op", LineKind.MEASUREMENT),
        ("BenchmarkFoo-8   \t 1000000\t       120 ns/op", LineKind.MEASUREMENT),
        ("ok  \tpkg/example\t0.120s", LineKind.TERMINATOR),
        ("ok pkg/example", LineKind.TERMINATOR),
        ("okay then", LineKind.PASSTHROUGH),
        ("ok", LineKind.PASSTHROUGH),
        ("PASS", LineKind.PASSTHROUGH),
        ("goos: linux", LineKind.PASSTHROUGH),
        ("BenchmarkFoo 1000 120 ns/op", LineKind.PASSTHROUGH),
        ("Foo\t10\t5 widgets/op", LineKind.PASSTHROUGH),
        ("  BenchmarkFoo\t10\t5 ns/op", LineKind.PASSTHROUGH),
        ("", LineKind.PASSTHROUGH),
    ],
)
def test_classify_line(line, kind):
    assert classify_line(line) is kind


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def test_parse_time_only():
    rec = parse_line("BenchmarkFoo-8\t1000000\t120 ns/op")
    assert rec.name == "BenchmarkFoo-8"
    assert rec.iterations == 1000000
    assert rec.ns_per_op == 120.0
    assert rec.mb_per_s is None
    assert rec.bytes_per_op is None
    assert rec.allocs_per_op is None
    assert rec.measured == Measured.NS_PER_OP


def test_parse_all_metrics_with_go_padding():
    line = "BenchmarkDecode-16   \t  500000\t      2451 ns/op\t  53.47 MB/s\t    1024 B/op\t      12 allocs/op"
    rec = parse_line(line)
    assert rec.name == "BenchmarkDecode-16"
    assert rec.iterations == 500000
    assert rec.ns_per_op == 2451.0
    assert rec.mb_per_s == pytest.approx(53.47)
    assert rec.bytes_per_op == 1024
    assert rec.allocs_per_op == 12
    assert rec.measured == (
        Measured.NS_PER_OP | Measured.MB_PER_S | Measured.BYTES_PER_OP | Measured.ALLOCS_PER_OP
    )


def test_parse_memory_without_throughput():
    rec = parse_line("BenchmarkAlloc\t100\t15.5 ns/op\t0 B/op\t0 allocs/op")
    assert rec.bytes_per_op == 0
    assert rec.allocs_per_op == 0
    assert Measured.MB_PER_S not in rec.measured
    assert Measured.BYTES_PER_OP in rec.measured


def test_parse_strips_crlf():
    rec = parse_line("BenchmarkFoo\t10\t5 ns/op\r\n")
    assert rec.ns_per_op == 5.0


def test_parse_accepts_exponent_and_leading_dot():
    rec = parse_line("BenchmarkFoo\t10\t1.5e3 ns/op\t.5 MB/s")
    assert rec.ns_per_op == 1500.0
    assert rec.mb_per_s == 0.5


def test_parse_repeated_unit_last_wins():
    rec = parse_line("BenchmarkFoo\t10\t5 ns/op\t7 ns/op")
    assert rec.ns_per_op == 7.0


@pytest.mark.parametrize(
    "line, reason",
    [
        ("BenchmarkFoo\t10", ParseFailure.TOO_FEW_FIELDS),
        ("BenchmarkFoo\tabc\t5 ns/op", ParseFailure.BAD_ITERATION_COUNT),
        ("BenchmarkFoo\t-3\t5 ns/op", ParseFailure.BAD_ITERATION_COUNT),
        ("BenchmarkFoo\t1.5\t5 ns/op", ParseFailure.BAD_ITERATION_COUNT),
        ("BenchmarkFoo\t10\t5ns/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t5 ns / op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\tfast ns/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\tnan ns/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t1_000 ns/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t١٢ ns/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t5 ns/op\t1_0.5 MB/s", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t1e999 ns/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t5 ns/op\t1.5 B/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t5 ns/op\t-1 allocs/op", ParseFailure.MALFORMED_METRIC_FIELD),
        ("BenchmarkFoo\t10\t5 widgets/op", ParseFailure.UNKNOWN_UNIT),
        ("BenchmarkFoo\t10\t5 NS/OP", ParseFailure.UNKNOWN_UNIT),
        ("not a benchmark", ParseFailure.NOT_A_BENCHMARK_LINE),
    ],
)
def test_parse_errors(line, reason):
    with pytest.raises(ParseError) as exc_info:
        parse_line(line)
    assert exc_info.value.reason is reason
    assert exc_info.value.line == line


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_line("BenchmarkFoo\t10\t5 widgets/op")


def test_unknown_unit_after_good_fields_produces_nothing():
    # A valid ns/op before the bad field must not leak out as a partial record.
    with pytest.raises(ParseError):
        parse_line("BenchmarkFoo\t10\t5 ns/op\t3 widgets/op")


def test_record_is_immutable():
    rec = parse_line("BenchmarkFoo\t10\t5 ns/op")
    with pytest.raises(AttributeError):
        rec.iterations = 11
