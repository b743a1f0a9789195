"""Measure T-counts and run times of deterministic synthesis."""

from __future__ import annotations

import argparse
import math
import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import mpmath

from su2synth.deterministic_synth import synth
from su2synth.su2 import SU2, random_unitary, set_random_unitary_seed


@dataclass(frozen=True)
class BenchmarkRow:
    """T-counts and timings of all unitaries at one precision."""

    eps: float
    t_counts: tuple[int, ...]
    seconds: tuple[float, ...]

    @property
    def average_t_count(self) -> float:
        return sum(self.t_counts) / len(self.t_counts)

    @property
    def min_t_count(self) -> int:
        return min(self.t_counts)

    @property
    def max_t_count(self) -> int:
        return max(self.t_counts)

    @property
    def average_time_ms(self) -> float:
        return sum(self.seconds) / len(self.seconds) * 1000.0


def run(unitaries: Sequence[SU2], eps_values: Iterable[float]) -> Iterator[BenchmarkRow]:
    """Synthesise every unitary at every precision, yielding one row per eps."""
    unitaries = list(unitaries)
    if not unitaries:
        raise ValueError("at least one unitary is required")
    return _rows(unitaries, eps_values)


def _rows(unitaries: list[SU2], eps_values: Iterable[float]) -> Iterator[BenchmarkRow]:
    for eps in eps_values:
        counts: list[int] = []
        seconds: list[float] = []
        for u in unitaries:
            started = time.perf_counter()
            sequence = synth(u, eps)
            seconds.append(time.perf_counter() - started)
            counts.append(sequence.count("T"))
        yield BenchmarkRow(float(eps), tuple(counts), tuple(seconds))


def _eps_sequence(start: float, stop: float) -> Iterator[float]:
    if start <= 0 or stop <= 0:
        raise ValueError("eps bounds must be positive")
    factor = math.sqrt(0.1)
    eps = start
    while eps >= stop:
        yield eps
        eps *= factor


def _format_unitary(u: SU2) -> str:
    parts = ", ".join(mpmath.nstr(x, 20) for x in (u.a, u.b, u.c, u.d))
    return f"({parts})"


def _format_list(name: str, values: Iterable[object]) -> str:
    body = "".join(f"{value:g}, " for value in values)
    return f"{name} = [{body}]"


def _print_summary(rows: list[BenchmarkRow]) -> None:
    print(_format_list("eps", (row.eps for row in rows)))
    print(_format_list("AVE", (row.average_t_count for row in rows)))
    print(_format_list("MIN", (row.min_t_count for row in rows)))
    print(_format_list("MAX", (row.max_t_count for row in rows)))
    print(_format_list("TIME", (row.average_time_ms for row in rows)))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="su2synth-benchmark",
        description="Benchmark deterministic Clifford+T synthesis on random unitaries.",
    )
    parser.add_argument("--count", type=int, default=100, help="number of unitaries")
    parser.add_argument("--seed", type=int, default=1234, help="random seed")
    parser.add_argument("--start", type=float, default=1e-12, help="largest eps")
    parser.add_argument("--stop", type=float, default=1e-12, help="smallest eps")
    args = parser.parse_args(argv)
    if args.count < 1:
        parser.error("--count must be at least 1")
    if args.start <= 0 or args.stop <= 0:
        parser.error("eps bounds must be positive")

    set_random_unitary_seed(args.seed)
    unitaries = [random_unitary() for _ in range(args.count)]
    for u in unitaries:
        print(_format_unitary(u))

    rows: list[BenchmarkRow] = []
    for row in run(unitaries, _eps_sequence(args.start, args.stop)):
        print(f"{row.eps:g}")
        for count in row.t_counts:
            print(f"T-count {count}")
        rows.append(row)
        _print_summary(rows)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())