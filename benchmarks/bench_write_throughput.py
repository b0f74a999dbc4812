"""Benchmark: throughput of batched writes.

Measures Store.write_entries() over a batch of flat and nested paths,
covering permission checks, path validation, cycle checks and nested
dict construction.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aumos_permission_store.store.container import Store

_ITERATIONS: int = 2_000
_BATCH: dict[str, object] = {
    "name": "Ann",
    "age": 30,
    "profile:address:city": "Oslo",
    "profile:address:zip": "0150",
    "tags": ["a", "b", "c"],
    "settings:theme:mode": "dark",
}


def bench_write_throughput() -> dict[str, object]:
    """Benchmark write_entries() batch throughput.

    Returns
    -------
    dict with keys: operation, iterations, batch_size, total_seconds,
    ops_per_second, avg_latency_ms.
    """
    store = Store(default_policy="rw")

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        store.write_entries(_BATCH)
    total = max(time.perf_counter() - start, 1e-9)

    writes = _ITERATIONS * len(_BATCH)
    result: dict[str, object] = {
        "operation": "write_entries_throughput",
        "iterations": _ITERATIONS,
        "batch_size": len(_BATCH),
        "total_seconds": round(total, 4),
        "ops_per_second": round(writes / total, 1),
        "avg_latency_ms": round(total * 1000 / writes, 6),
    }
    print(
        f"[bench_write_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} writes/sec  "
        f"mean={result['avg_latency_ms']:.6f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_write_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "write_throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
