# topk/benchmark.py
"""
Benchmark de verificación de TopKQueue.

Para cada escenario (k, n, distribución) genera un flujo reproducible con
numpy, lo pasa por la cola y compara el resultado con la respuesta de
fuerza bruta (ordenación completa). Los escenarios se ejecutan en paralelo
con joblib y los resultados se guardan en JSON.

Uso:
    topk-bench --ks 1 10 100 --ns 1000 100000 --distributions uniform sorted
"""
from __future__ import annotations

import argparse
import itertools
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np
from joblib import Parallel, delayed
from tqdm import tqdm

from topk.core.comparators import float_less, int_less
from topk.core.experiment_runner import RawScenarioResult, run_with_timeout
from topk.core.topk_queue import TopKQueue
from topk.core.types import DISTRIBUTIONS, BenchmarkResult, RunStatus, ScenarioSpec

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass
class BenchmarkConfig:
    """Parámetros de una ejecución completa del benchmark."""
    ks: List[int] = field(default_factory=lambda: [1, 10, 100])
    ns: List[int] = field(default_factory=lambda: [1_000, 100_000])
    distributions: List[str] = field(default_factory=lambda: list(DISTRIBUTIONS))
    seed: int = 0
    timeout_sec: float = 60.0
    n_jobs: int = -1
    out_dir: Path = Path("results") / "topk"
    tag: str = "bench"


# -------------------------------------------------------------------
# Generación de flujos y referencia
# -------------------------------------------------------------------

def generate_stream(spec: ScenarioSpec) -> np.ndarray:
    """Flujo reproducible de spec.n valores según spec.distribution."""
    rng = np.random.default_rng(spec.seed)

    if spec.distribution == "integers":
        # Rango pequeño a propósito: muchos empates
        return rng.integers(0, max(spec.n // 4, 1), size=spec.n)

    values = rng.random(spec.n)
    if spec.distribution == "sorted":
        # Peor caso: cada elemento expulsa al mínimo
        return np.sort(values)
    if spec.distribution == "reversed":
        return np.sort(values)[::-1]
    return values


def brute_force_top_k(values: np.ndarray, k: int) -> list:
    """Top-k por ordenación completa, de mayor a menor."""
    return np.sort(values, kind="stable")[::-1][:k].tolist()


def run_topk_scenario(spec: ScenarioSpec) -> RawScenarioResult:
    values = generate_stream(spec)
    is_less = int_less if spec.distribution == "integers" else float_less

    queue: TopKQueue = TopKQueue(spec.k, is_less)
    queue.extend(values.tolist())

    top = queue.best_first()
    expected = brute_force_top_k(values, spec.k)
    meta = {
        "size": len(queue),
        "min_retained": queue.peek() if len(queue) else None,
    }
    return top, spec.n, top == expected, meta


# -------------------------------------------------------------------
# Orquestación
# -------------------------------------------------------------------

def build_scenarios(config: BenchmarkConfig) -> List[ScenarioSpec]:
    scenarios: List[ScenarioSpec] = []
    combos = itertools.product(config.ks, config.ns, config.distributions)
    for i, (k, n, dist) in enumerate(combos):
        scenarios.append(
            ScenarioSpec(
                scenario_id=f"k{k}_n{n}_{dist}",
                k=k,
                n=n,
                distribution=dist,
                seed=config.seed + i,
            )
        )
    return scenarios


def make_run_dir(base_dir: Path, tag: str = "run") -> Path:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = base_dir / f"{ts}_{tag}"
    run_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Creado directorio de resultados: %s", run_dir)
    return run_dir


def run_benchmark(config: BenchmarkConfig) -> List[BenchmarkResult]:
    """Ejecuta todos los escenarios en paralelo y guarda results.json."""
    scenarios = build_scenarios(config)
    logger.info("Ejecutando %d escenarios (n_jobs=%d)", len(scenarios), config.n_jobs)

    tasks = (
        delayed(run_with_timeout)(spec, run_topk_scenario, config.timeout_sec)
        for spec in scenarios
    )
    parallel_runner = Parallel(n_jobs=config.n_jobs, return_as="generator")

    results: List[BenchmarkResult] = []
    for res in tqdm(parallel_runner(tasks), total=len(scenarios), unit="scenario"):
        results.append(res)

    run_dir = make_run_dir(config.out_dir, config.tag)
    results_path = run_dir / "results.json"
    with results_path.open("w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in results], f, indent=2)

    logger.info("Resultados guardados en: %s", results_path)
    return results


def summarize(results: Sequence[BenchmarkResult]) -> Dict[str, int]:
    counts = {status.value: 0 for status in RunStatus}
    for r in results:
        counts[r.status.value] += 1
    return counts


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    defaults = BenchmarkConfig()
    parser = argparse.ArgumentParser(description="Verifica y mide TopKQueue contra fuerza bruta.")
    parser.add_argument("--ks", type=int, nargs="+", default=defaults.ks)
    parser.add_argument("--ns", type=int, nargs="+", default=defaults.ns)
    parser.add_argument("--distributions", nargs="+", choices=DISTRIBUTIONS, default=defaults.distributions)
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("--timeout", type=float, default=defaults.timeout_sec)
    parser.add_argument("--n-jobs", type=int, default=defaults.n_jobs)
    parser.add_argument("--out-dir", type=Path, default=defaults.out_dir)
    parser.add_argument("--tag", default=defaults.tag)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    config = BenchmarkConfig(
        ks=args.ks,
        ns=args.ns,
        distributions=args.distributions,
        seed=args.seed,
        timeout_sec=args.timeout,
        n_jobs=args.n_jobs,
        out_dir=args.out_dir,
        tag=args.tag,
    )
    results = run_benchmark(config)
    counts = summarize(results)

    print("\n" + "=" * 50)
    print("📊 REPORTE FINAL")
    print("=" * 50)
    print(f"✅ OK:              {counts[RunStatus.OK.value]}")
    print(f"⚠️ Mismatch:        {counts[RunStatus.MISMATCH.value]}")
    print(f"🐢 Timeout:         {counts[RunStatus.TIMEOUT.value]}")
    print(f"❌ Exception:       {counts[RunStatus.EXCEPTION.value]}")

    ok = [r for r in results if r.status == RunStatus.OK and r.pushes_per_sec]
    if ok:
        best = max(ok, key=lambda r: r.pushes_per_sec)
        print(f"🚀 Mejor throughput: {best.pushes_per_sec:,.0f} push/s ({best.scenario_id})")

    return 0 if counts[RunStatus.OK.value] == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
