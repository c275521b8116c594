import csv
from pathlib import Path

import pytest

from experiment_runner import aggregate_by_strategy, load_config, main, run_experiments

SMALL_CONFIG = """
seed: 3
seed_count: 2
units: 6
criteria:
  - A
  - D
strategies:
  - name: random
    kind: random_search
    params:
      budget: 40
  - name: annealing
    kind: sa
    params:
      maxiter: 10
      no_local_search: true
"""


def write_config(tmp_path: Path, text: str = SMALL_CONFIG) -> Path:
    cfg = tmp_path / "exp.yml"
    cfg.write_text(text)
    return cfg


def test_run_experiments_covers_every_combination(tmp_path: Path):
    """Smoke-test: 2 criteria * 2 strategies * 2 seeds."""
    results = run_experiments(write_config(tmp_path), use_processes=False)

    assert len(results) == 8
    keys = {(r.criterion, r.strategy, r.seed) for r in results}
    assert keys == {(c, s, seed) for c in ("A", "D") for s in ("random", "annealing") for seed in (3, 4)}
    for res in results:
        assert len(res.design) == 6
        assert list(res.design) == sorted(res.design)
        assert res.score > 0.0


def test_runner_resumes_from_runs_csv(tmp_path: Path, capsys):
    cfg = write_config(tmp_path)
    runs_csv = tmp_path / "results" / "runs.csv"
    summary_csv = tmp_path / "results" / "summary.csv"

    first = run_experiments(cfg, runs_csv=runs_csv, summary_csv=summary_csv, use_processes=False)
    assert "[run] queued 8 new tasks (existing runs: 0)" in capsys.readouterr().out

    second = run_experiments(cfg, runs_csv=runs_csv, use_processes=False)
    assert "[run] queued 0 new tasks (existing runs: 8)" in capsys.readouterr().out

    key = lambda r: (r.criterion, r.strategy, r.seed)  # noqa: E731
    assert sorted(second, key=key) == sorted(first, key=key)

    with runs_csv.open() as f:
        assert len(list(csv.DictReader(f))) == 8
    with summary_csv.open() as f:
        rows = list(csv.DictReader(f))
    assert {(row["criterion"], row["strategy"]) for row in rows} == {
        ("A", "random"),
        ("A", "annealing"),
        ("D", "random"),
        ("D", "annealing"),
    }
    assert all(row["runs"] == "2" for row in rows)


def test_aggregate_by_strategy_pools_seeds(tmp_path: Path):
    results = run_experiments(write_config(tmp_path), use_processes=False)
    rows = aggregate_by_strategy(results, decimals=2)

    assert len(rows) == 4
    assert sum(row["runs"] for row in rows) == len(results)
    for row in rows:
        runs = [r for r in results if (r.criterion, r.strategy) == (row["criterion"], row["strategy"])]
        assert row["mean_score"] == pytest.approx(sum(r.score for r in runs) / len(runs))
        assert row["best_score"] == min(r.score for r in runs)
        assert row["summary"].total == len(runs)
        assert 0.0 < row["consensus"] <= 1.0


def test_load_config_defaults(tmp_path: Path):
    cfg = load_config(
        write_config(
            tmp_path,
            """
seed_count: 5
strategies:
  - kind: pso
""",
        )
    )
    assert cfg.seed == 0
    assert cfg.units == 20
    assert (cfg.lower, cfg.upper) == (0.0, 1.0)
    assert list(cfg.criteria) == ["A"]
    assert cfg.strategies[0].name == "pso"


@pytest.mark.parametrize(
    "text, message",
    [
        ("seed_count: 1\nstrategies:\n  - kind: tabu\n", "Unknown search strategy"),
        ("seed_count: 1\ncriteria: [E]\nstrategies:\n  - kind: ga\n", "Unknown optimality criterion"),
        ("seed_count: 1\nstrategies:\n  - kind: ga\n    params: {generations: 3}\n", "Unknown parameters"),
        ("strategies:\n  - kind: ga\n", "missing or mistypes"),
        ("seed_count: 1\nstrategies:\n  - kind: ga\n  - kind: genetic\n    name: ga\n", "unique"),
        ("- just\n- a list\n", "experiment mapping"),
    ],
)
def test_load_config_rejects_bad_files(tmp_path: Path, text: str, message: str):
    with pytest.raises(ValueError, match=message):
        load_config(write_config(tmp_path, text))


def test_main_reads_and_writes_under_working_directory(tmp_path: Path, monkeypatch, capsys):
    exp_dir = tmp_path / "experiments"
    exp_dir.mkdir()
    write_config(exp_dir).rename(exp_dir / "experiments.yml")
    monkeypatch.chdir(tmp_path)

    main([], use_processes=False)

    out = capsys.readouterr().out
    assert out.count("-optimality / ") == 4
    assert "2 runs, consensus" in out
    runs_csv = exp_dir / "results" / "runs.csv"
    summary_csv = exp_dir / "results" / "summary.csv"
    with runs_csv.open() as f:
        assert len(list(csv.DictReader(f))) == 8
    with summary_csv.open() as f:
        assert len(list(csv.DictReader(f))) == 4
