"""Timing of the stack and recursive engines on looping and deeply nested formulas."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable

from nock_jax import CRASH, Cell, NockRecursionError, nock
from nock_jax.programs import DECREMENT, increment_chain
from _bench_utils import host_metadata, sample_ms, summarize_ms

ENGINES = ("stack", "recursive")


@dataclass(frozen=True)
class Workload:
    name: str
    note: str
    build: Callable[[int], Cell]
    expected: Callable[[int], int]


@dataclass(frozen=True)
class Row:
    workload: str
    engine: str
    size: int
    status: str
    mean_ms: float | None = None
    stdev_ms: float | None = None
    p50_ms: float | None = None
    p95_ms: float | None = None


WORKLOADS = (
    Workload(
        name="decrement",
        note="opcode 9 counting loop, n iterations",
        build=lambda n: Cell(n, DECREMENT),
        expected=lambda n: n - 1,
    ),
    Workload(
        name="increment_chain",
        note="n nested opcode 4 formulas",
        build=lambda n: Cell(0, increment_chain(n)),
        expected=lambda n: n,
    ),
)


def _run(workload: Workload, engine: str, size: int, *, warmup: int, samples: int) -> Row:
    pair = workload.build(size)
    try:
        result = nock(pair, engine=engine)
    except NockRecursionError:
        return Row(workload=workload.name, engine=engine, size=size, status="recursion-limit")
    if result is CRASH or result != workload.expected(size):
        return Row(workload=workload.name, engine=engine, size=size, status="wrong-result")

    timings = sample_ms(lambda: nock(pair, engine=engine), warmup=warmup, samples=samples)
    return Row(
        workload=workload.name,
        engine=engine,
        size=size,
        status="ok",
        **summarize_ms(timings),
    )


def _print_rows(rows: list[Row]) -> None:
    print(f"{'engine':<10} {'size':>8} {'status':<16} {'mean ms':>10} {'p95 ms':>10}")
    for row in rows:
        mean_ms = f"{row.mean_ms:10.3f}" if row.mean_ms is not None else f"{'-':>10}"
        p95_ms = f"{row.p95_ms:10.3f}" if row.p95_ms is not None else f"{'-':>10}"
        print(f"{row.engine:<10} {row.size:>8} {row.status:<16} {mean_ms} {p95_ms}")


def _parse_sizes(text: str) -> list[int]:
    sizes = [int(part) for part in text.split(",") if part.strip()]
    if not sizes or any(size < 1 for size in sizes):
        raise argparse.ArgumentTypeError("sizes must be a comma-separated list of positive integers")
    return sizes


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark nock-jax engines on loop-heavy formulas.")
    parser.add_argument("--sizes", type=_parse_sizes, default=[100, 1_000, 10_000], help="comma-separated workload sizes")
    parser.add_argument("--samples", type=int, default=5, help="timed samples per row")
    parser.add_argument("--warmup", type=int, default=1, help="untimed warmup runs per row")
    parser.add_argument(
        "--json-out",
        default="",
        help="optional path to write machine-readable benchmark results",
    )
    args = parser.parse_args()
    if args.samples < 1:
        parser.error("--samples must be at least 1")

    payload_rows: list[dict[str, object]] = []
    for workload in WORKLOADS:
        print(f"== {workload.name}: {workload.note}")
        rows = [
            _run(workload, engine, size, warmup=args.warmup, samples=args.samples)
            for size in args.sizes
            for engine in ENGINES
        ]
        _print_rows(rows)
        print()
        payload_rows.extend(asdict(row) for row in rows)

    if args.json_out:
        outpath = Path(args.json_out)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "host": host_metadata(),
            "config": {"sizes": args.sizes, "samples": args.samples, "warmup": args.warmup},
            "results": payload_rows,
        }
        outpath.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote JSON benchmark output: {outpath}")


if __name__ == "__main__":
    main()
