"""
CLI to compare search strategies on optimal exposure designs across seeds.

Reads ./experiments/experiments.yml (or the path given on the command line),
builds one evaluator per criterion and one strategy per configured entry, runs
every (criterion, strategy, seed) combination and prints a frequency summary
of the designs each strategy found. Per-run rows are appended to
./experiments/results/runs.csv so an interrupted comparison resumes where it
stopped.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple
import csv
from concurrent.futures import ProcessPoolExecutor, as_completed
import sys
import time

from optimal_design.criteria import get_criterion
from optimal_design.design import endpoint_split, format_design, parse_design
from optimal_design.experiment import RunResult, format_summary, run_once, summarise
from optimal_design.strategies import build_strategy


@dataclass(frozen=True)
class StrategySpec:
    name: str
    kind: str
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Config:
    seed: int
    seed_count: int
    units: int
    lower: float
    upper: float
    decimals: int
    criteria: Sequence[str]
    strategies: Sequence[StrategySpec]


RUN_FIELDS = ["criterion", "strategy", "seed", "score", "at_lower", "at_upper", "interior", "design"]
SUMMARY_FIELDS = ["criterion", "strategy", "runs", "mean_score", "best_score", "consensus", "modal_split", "modal_design"]


def load_config(path: Path) -> Config:
    import yaml  # type: ignore

    data = yaml.safe_load(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain an experiment mapping")
    try:
        strategies = [
            StrategySpec(
                name=str(entry.get("name", entry["kind"])),
                kind=str(entry["kind"]),
                params=dict(entry.get("params") or {}),
            )
            for entry in data["strategies"]
        ]
        cfg = Config(
            seed=int(data.get("seed", 0)),
            seed_count=int(data["seed_count"]),
            units=int(data.get("units", 20)),
            lower=float(data.get("lower", 0.0)),
            upper=float(data.get("upper", 1.0)),
            decimals=int(data.get("decimals", 2)),
            criteria=[str(c) for c in data.get("criteria", ["A"])],
            strategies=strategies,
        )
    except (AttributeError, KeyError, TypeError) as exc:
        raise ValueError(f"{path} is missing or mistypes a required field: {exc}") from exc

    # Fail fast on bad names before any run starts.
    for name in cfg.criteria:
        get_criterion(name)
    for spec in cfg.strategies:
        build_strategy(spec.kind, spec.params, spec.name)
    if len({spec.name for spec in cfg.strategies}) != len(cfg.strategies):
        raise ValueError("strategy names must be unique")
    return cfg


def run_experiments(
    config_path: Path,
    runs_csv: Path | None = None,
    summary_csv: Path | None = None,
    max_workers: int | None = None,
    use_processes: bool = True,
) -> List[RunResult]:
    return run_config(
        load_config(config_path),
        runs_csv=runs_csv,
        summary_csv=summary_csv,
        max_workers=max_workers,
        use_processes=use_processes,
    )


def run_config(
    cfg: Config,
    runs_csv: Path | None = None,
    summary_csv: Path | None = None,
    max_workers: int | None = None,
    use_processes: bool = True,
) -> List[RunResult]:
    start = time.time()

    existing_runs = load_runs_csv(runs_csv, cfg) if runs_csv else []
    seen_keys: Set[Tuple[str, str, int]] = {(r.criterion, r.strategy, r.seed) for r in existing_runs}

    tasks: List[tuple[str, StrategySpec, int]] = []
    for criterion_name in cfg.criteria:
        criterion = get_criterion(criterion_name).name
        for spec in cfg.strategies:
            for offset in range(cfg.seed_count):
                seed = cfg.seed + offset
                if (criterion, spec.name, seed) in seen_keys:
                    continue
                tasks.append((criterion, spec, seed))

    print(f"[run] queued {len(tasks)} new tasks (existing runs: {len(seen_keys)})")

    new_results: List[RunResult] = []
    if tasks:
        if use_processes:
            try:
                with ProcessPoolExecutor(max_workers=max_workers) as executor:
                    future_to_task = {
                        executor.submit(_run_task, criterion, asdict(spec), seed, cfg.units, cfg.lower, cfg.upper): (
                            criterion,
                            spec.name,
                            seed,
                        )
                        for criterion, spec, seed in tasks
                    }
                    for future in as_completed(future_to_task):
                        criterion, strategy_name, seed = future_to_task[future]
                        try:
                            res, duration = future.result()
                        except Exception as exc:
                            print(f"[run] failed criterion={criterion} strategy={strategy_name} seed={seed}: {exc}")
                            continue
                        _record(res, duration, new_results, runs_csv)
            except (PermissionError, NotImplementedError, OSError) as exc:
                print(f"[run] process pool unavailable ({exc}), falling back to sequential execution")
                use_processes = False
                done = {(r.criterion, r.strategy, r.seed) for r in new_results}
                tasks = [t for t in tasks if (t[0], t[1].name, t[2]) not in done]
        else:
            print("[run] using sequential execution")

        if not use_processes:
            for criterion, spec, seed in tasks:
                try:
                    res, duration = _run_task(criterion, asdict(spec), seed, cfg.units, cfg.lower, cfg.upper)
                except Exception as exc:
                    print(f"[run] failed criterion={criterion} strategy={spec.name} seed={seed}: {exc}")
                    continue
                _record(res, duration, new_results, runs_csv)

    results = existing_runs + sorted(new_results, key=lambda r: (r.criterion, r.strategy, r.seed))

    if summary_csv:
        write_summary_csv(aggregate_by_strategy(results, cfg.decimals, cfg.lower, cfg.upper), summary_csv)

    elapsed = time.time() - start
    print(f"[run] completed {len(results)} total runs in {elapsed:.2f}s")
    return results


def _record(res: RunResult, duration: float, results: List[RunResult], runs_csv: Path | None) -> None:
    results.append(res)
    if runs_csv:
        append_run_row(runs_csv, res)
    print(
        f"[run] completed criterion={res.criterion} strategy={res.strategy} seed={res.seed} "
        f"score={res.score:.4f} duration={duration:.2f}s"
    )


def _run_task(
    criterion: str,
    spec_dict: Dict[str, Any],
    seed: int,
    units: int,
    lower: float,
    upper: float,
) -> Tuple[RunResult, float]:
    start_run = time.time()
    evaluator = get_criterion(criterion)
    strategy = build_strategy(str(spec_dict["kind"]), spec_dict.get("params"), str(spec_dict["name"]))
    res = run_once(strategy, evaluator, [lower] * units, [upper] * units, seed)
    return res, time.time() - start_run


def aggregate_by_strategy(
    results: Iterable[RunResult],
    decimals: Optional[int] = None,
    lower: float = 0.0,
    upper: float = 1.0,
) -> List[Dict[str, object]]:
    """
    One summary row per (criterion, strategy), pooling runs across seeds.
    """
    grouped: Dict[Tuple[str, str], List[RunResult]] = {}
    for res in results:
        grouped.setdefault((res.criterion, res.strategy), []).append(res)

    rows: List[Dict[str, object]] = []
    for (criterion, strategy), runs in sorted(grouped.items()):
        summary = summarise(runs, decimals)
        modal_design, _count = summary.most_common(1)[0]
        at_lower, at_upper, interior = endpoint_split(modal_design, lower, upper)
        scores = [r.score for r in runs]
        rows.append(
            {
                "criterion": criterion,
                "strategy": strategy,
                "runs": len(runs),
                "mean_score": sum(scores) / len(scores),
                "best_score": min(scores),
                "consensus": summary.consensus(),
                "modal_split": f"{at_lower}/{at_upper}/{interior}",
                "modal_design": format_design(modal_design),
                "summary": summary,
            }
        )
    return rows


def load_runs_csv(path: Path | None, cfg: Config) -> List[RunResult]:
    if path is None or not path.exists():
        return []
    with path.open() as f:
        reader = csv.DictReader(f)
        rows: List[RunResult] = []
        for row in reader:
            rows.append(
                RunResult(
                    design=parse_design(row["design"], cfg.lower, cfg.upper),
                    criterion=row["criterion"],
                    strategy=row["strategy"],
                    seed=int(row["seed"]),
                    score=float(row["score"]),
                )
            )
        return rows


def _run_row(res: RunResult) -> Dict[str, object]:
    at_lower, at_upper, interior = endpoint_split(res.design)
    return {
        "criterion": res.criterion,
        "strategy": res.strategy,
        "seed": res.seed,
        "score": repr(res.score),
        "at_lower": at_lower,
        "at_upper": at_upper,
        "interior": interior,
        "design": format_design(res.design),
    }


def append_run_row(path: Path, res: RunResult) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    write_header = not path.exists()
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RUN_FIELDS)
        if write_header:
            writer.writeheader()
        writer.writerow(_run_row(res))


def write_summary_csv(aggregated: Iterable[Mapping[str, object]], path: Path) -> None:
    """
    Write one row per (criterion, strategy) summary.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in aggregated:
            writer.writerow(row)


def main(argv: Sequence[str] | None = None, use_processes: bool = True) -> None:
    """Run the comparison; paths are relative to the working directory."""
    args = list(sys.argv[1:] if argv is None else argv)
    base_dir = Path.cwd() / "experiments"
    config_path = Path(args[0]) if args else base_dir / "experiments.yml"
    out_dir = base_dir / "results"
    runs_csv = out_dir / "runs.csv"
    summary_csv = out_dir / "summary.csv"

    cfg = load_config(config_path)
    results = run_config(cfg, runs_csv=runs_csv, use_processes=use_processes)
    rows = aggregate_by_strategy(results, cfg.decimals, cfg.lower, cfg.upper)
    write_summary_csv(rows, summary_csv)
    for row in rows:
        print(f"\n{row['criterion']}-optimality / {row['strategy']}: mean score {row['mean_score']:.4f}")
        print(format_summary(row["summary"], lower=cfg.lower, upper=cfg.upper))  # type: ignore[arg-type]
    print(f"Wrote runs to {runs_csv} and summary to {summary_csv}")


if __name__ == "__main__":
    main()
