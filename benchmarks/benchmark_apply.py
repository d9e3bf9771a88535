"""Benchmark full scans over a large text.

Run with:
    pytest benchmarks/benchmark_apply.py -v --benchmark-only
"""

import pytest

from splicer import Engine, MatchHandle, compile

SET_PATTERN = compile(";[name]=[value]\n")
CALL_PATTERN = compile("call*([target])")


def _to_set(m: MatchHandle) -> None:
    m.replace(f"SET {m.get_value('name').strip()}={m.get_value('value')}\n")


@pytest.mark.benchmark(group="apply")
def test_benchmark_read_only_scan(benchmark, large_script):
    """Scan every occurrence without editing."""

    def scan():
        Engine(large_script).apply(SET_PATTERN, lambda m: None)

    benchmark(scan)


@pytest.mark.benchmark(group="apply")
def test_benchmark_rewrite_scan(benchmark, large_script):
    """Replace every occurrence (one splice per match)."""

    def rewrite():
        Engine(large_script).apply(SET_PATTERN, _to_set)

    benchmark(rewrite)


@pytest.mark.benchmark(group="apply")
def test_benchmark_gap_pattern(benchmark, large_script):
    """Gap-bounded captures with case-insensitive literals."""

    def scan():
        Engine(large_script).apply(CALL_PATTERN, lambda m: m.set_value("target", "x"))

    benchmark(scan)
