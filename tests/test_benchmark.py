from __future__ import annotations

import json

import numpy as np
import pytest

from topk.benchmark import (
    BenchmarkConfig,
    brute_force_top_k,
    build_scenarios,
    generate_stream,
    main,
    run_benchmark,
    run_topk_scenario,
    summarize,
)
from topk.core.types import DISTRIBUTIONS, RunStatus, ScenarioSpec


def test_generate_stream_is_reproducible() -> None:
    spec = ScenarioSpec("s", k=3, n=100, distribution="uniform", seed=42)
    assert np.array_equal(generate_stream(spec), generate_stream(spec))
    assert len(generate_stream(spec)) == 100


def test_generate_stream_orderings() -> None:
    asc = generate_stream(ScenarioSpec("a", k=3, n=50, distribution="sorted", seed=1))
    desc = generate_stream(ScenarioSpec("d", k=3, n=50, distribution="reversed", seed=1))
    assert np.all(np.diff(asc) >= 0)
    assert np.all(np.diff(desc) <= 0)

    ints = generate_stream(ScenarioSpec("i", k=3, n=40, distribution="integers", seed=1))
    assert np.issubdtype(ints.dtype, np.integer)
    assert ints.max() < 10


def test_unknown_distribution_is_rejected() -> None:
    with pytest.raises(ValueError):
        ScenarioSpec("x", k=1, n=1, distribution="gaussian")


def test_brute_force_top_k() -> None:
    assert brute_force_top_k(np.array([5, 6, 2, 4, 2]), 3) == [6, 5, 4]
    assert brute_force_top_k(np.array([5, 6, 2, 4, 2]), 10) == [6, 5, 4, 2, 2]


@pytest.mark.parametrize("distribution", DISTRIBUTIONS)
@pytest.mark.parametrize("k, n", [(1, 100), (10, 1000), (50, 20), (5, 0)])
def test_scenario_matches_brute_force(distribution: str, k: int, n: int) -> None:
    spec = ScenarioSpec(f"{distribution}_{k}_{n}", k=k, n=n, distribution=distribution, seed=7)
    top, n_pushed, matches, meta = run_topk_scenario(spec)

    assert matches
    assert n_pushed == n
    assert len(top) == min(k, n)
    assert meta["size"] == min(k, n)
    if top:
        assert meta["min_retained"] == top[-1]


def test_build_scenarios() -> None:
    config = BenchmarkConfig(ks=[1, 5], ns=[10, 20, 30], distributions=["uniform", "sorted"], seed=100)
    scenarios = build_scenarios(config)

    assert len(scenarios) == 12
    assert scenarios[0].scenario_id == "k1_n10_uniform"
    assert len({s.scenario_id for s in scenarios}) == 12
    assert [s.seed for s in scenarios] == list(range(100, 112))


def test_run_benchmark_writes_results(tmp_path) -> None:
    config = BenchmarkConfig(
        ks=[1, 4],
        ns=[200],
        distributions=["uniform", "integers"],
        n_jobs=1,
        timeout_sec=30.0,
        out_dir=tmp_path,
        tag="unit",
    )
    results = run_benchmark(config)

    assert len(results) == 4
    assert summarize(results)[RunStatus.OK.value] == 4

    files = list(tmp_path.glob("*_unit/results.json"))
    assert len(files) == 1
    data = json.loads(files[0].read_text(encoding="utf-8"))
    assert {row["status"] for row in data} == {"ok"}
    assert {row["scenario_id"] for row in data} == {r.scenario_id for r in results}


def test_main_returns_zero_when_all_ok(tmp_path, capsys) -> None:
    code = main(
        [
            "--ks", "3",
            "--ns", "50",
            "--distributions", "reversed",
            "--n-jobs", "1",
            "--out-dir", str(tmp_path),
            "--log-level", "WARNING",
        ]
    )
    assert code == 0
    assert "REPORTE FINAL" in capsys.readouterr().out
