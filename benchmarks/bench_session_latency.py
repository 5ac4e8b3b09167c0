"""Benchmark: SessionModel save/load latency — per-call p50/p99.

Measures one create, one load, and one update per iteration against the
in-memory store, isolating the cost of field serialisation and state
encoding from network round trips.
"""
from __future__ import annotations

import asyncio
import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from kvsession.model import SessionModel
from kvsession.store.memory import InMemorySessionStore

_WARMUP: int = 200
_ITERATIONS: int = 5_000


async def _cycle(store: InMemorySessionStore) -> None:
    model = SessionModel(store, 3600)
    model.insert("user_id", "abc-123")
    model.insert("roles", ["admin", "editor"])
    await model.save()
    loaded = await SessionModel.load(store, model.id)
    assert loaded is not None
    loaded.insert("visits", 2)
    await loaded.save()


async def bench_session_model_latency() -> dict[str, object]:
    """Benchmark a create/load/update cycle.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_latency_ms, p99_latency_ms.
    """
    store = InMemorySessionStore()
    for _ in range(_WARMUP):
        await _cycle(store)
    store.clear()

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        await _cycle(store)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "session_model_cycle_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_latency_ms": round(sorted_lats[n // 2], 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
    }
    print(
        f"[bench_session_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return asyncio.run(bench_session_model_latency())


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
