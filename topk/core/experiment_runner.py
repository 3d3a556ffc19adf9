# topk/core/experiment_runner.py
from __future__ import annotations

import concurrent.futures as cf
import logging
from datetime import datetime, timezone
from time import perf_counter
import traceback as tb
from typing import Any, Callable, Dict, List, TypeAlias

from .types import BenchmarkResult, RunStatus, ScenarioSpec

logger = logging.getLogger(__name__)


# (top, n_pushed, matches_reference, meta)
RawScenarioResult: TypeAlias = tuple[List[Any], int, bool, Dict[str, Any]]


def run_with_timeout(
    spec: ScenarioSpec,
    scenario_fn: Callable[[ScenarioSpec], RawScenarioResult],
    timeout_sec: float,
) -> BenchmarkResult:
    """
    Ejecuta un escenario con timeout, captura excepciones y tiempos,
    y empaqueta todo en un BenchmarkResult.
    """
    start_dt = datetime.now(timezone.utc)
    logger.info("[%s] Starting k=%d n=%d (%s)", spec.scenario_id, spec.k, spec.n, spec.distribution)

    result_data: Dict[str, Any] = {
        "pushes_per_sec": None,
        "top": None,
        "meta": {},
        "exception_type": None,
        "exception_message": None,
        "exception_traceback": None,
    }

    status = RunStatus.OK
    future: cf.Future[RawScenarioResult] | None = None
    start_perf = perf_counter()

    # Sin 'with': al salir por timeout no queremos esperar al hilo colgado.
    executor = cf.ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(scenario_fn, spec)
        top, n_pushed, matches, meta = future.result(timeout=timeout_sec)
        elapsed = perf_counter() - start_perf
        result_data.update(
            {
                "pushes_per_sec": n_pushed / elapsed if elapsed > 0 else None,
                "top": top,
                "meta": meta,
            }
        )
        if not matches:
            status = RunStatus.MISMATCH
            logger.warning("[%s] Result differs from brute force reference", spec.scenario_id)
    except cf.TimeoutError:
        status = RunStatus.TIMEOUT
        if future:
            future.cancel()
        logger.warning("[%s] Timeout after %.1fs", spec.scenario_id, timeout_sec)

    except Exception as exc:  # noqa: BLE001
        status = RunStatus.EXCEPTION
        result_data.update(
            {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "exception_traceback": tb.format_exc(),
            }
        )
        logger.exception("[%s] Exception while running scenario", spec.scenario_id)
    finally:
        executor.shutdown(wait=False)

    wall = perf_counter() - start_perf
    end_dt = datetime.now(timezone.utc)

    result = BenchmarkResult(
        scenario_id=spec.scenario_id,
        k=spec.k,
        n=spec.n,
        distribution=spec.distribution,
        seed=spec.seed,
        status=status,
        start_time=start_dt.isoformat(),
        end_time=end_dt.isoformat(),
        wall_time_sec=wall,
        **result_data,
    )

    logger.info(
        "[%s] Finished status=%s, wall_time=%.3fs, pushes_per_sec=%s",
        spec.scenario_id,
        result.status.value,
        wall,
        result.pushes_per_sec,
    )
    return result
