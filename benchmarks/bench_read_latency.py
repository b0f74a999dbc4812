"""Benchmark: per-call latency of gated nested reads.

Measures Store.read() on a three-level path through a nested store, a
plain mapping and a list, including the top-level permission check.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aumos_permission_store.permissions.resolver import StoreSchema
from aumos_permission_store.store.container import Store

_WARMUP: int = 100
_ITERATIONS: int = 5_000
_PATH: str = "profile:address:lines:1"


def _make_store() -> Store:
    """Build a store with a nested store under a read-only field."""
    profile = Store(
        initial={"address": {"lines": ["1 Main St", "Apt 4"], "city": "Oslo"}}
    )
    return Store(
        default_policy="rw",
        schema=StoreSchema().restrict("profile", "r"),
        initial={"profile": profile},
    )


def bench_read_latency() -> dict[str, object]:
    """Benchmark Store.read() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    store = _make_store()

    for _ in range(_WARMUP):
        store.read(_PATH)

    latencies_ms: list[float] = []
    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        store.read(_PATH)
        latencies_ms.append((time.perf_counter() - t0) * 1000)
    total = max(time.perf_counter() - start, 1e-9)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)

    result: dict[str, object] = {
        "operation": "nested_read_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_read_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_read_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "read_latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
