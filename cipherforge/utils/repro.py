"""Reproducible evaluation runs: seeding and the on-disk layout of a run.

Each run lives in ``<runs_root>/<UTC timestamp>_<name>/`` and holds the
parameters it was started with, the JSON report and the console summary.
"""
from __future__ import annotations

import json
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import numpy as np


def set_global_seed(seed: int) -> None:
    random.seed(seed)
    np.random.seed(seed)


def utc_timestamp() -> str:
    # e.g. 2026-01-08T12-34-56Z (safe for filenames)
    return time.strftime("%Y-%m-%dT%H-%M-%SZ", time.gmtime())


@dataclass(frozen=True)
class RunPaths:
    run_dir: Path
    run_config_json: Path
    report_json: Path
    summary_txt: Path


def make_run_dir(runs_root: str | Path, run_name: str) -> RunPaths:
    safe = "".join(ch if ch.isalnum() or ch in {"-", "_"} else "_" for ch in run_name.strip())[:60]
    run_dir = Path(runs_root) / f"{utc_timestamp()}_{safe}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return RunPaths(
        run_dir=run_dir,
        run_config_json=run_dir / "run_config.json",
        report_json=run_dir / "evaluation_report.json",
        summary_txt=run_dir / "summary.txt",
    )


def write_json(path: str | Path, obj: Any) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, sort_keys=True), encoding="utf-8")


def read_json(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def save_evaluation(
    runs_root: str | Path,
    *,
    run_config: Dict[str, Any],
    report: Dict[str, Any],
    summary: str,
    run_name: str = "twofish_evaluation",
) -> RunPaths:
    """Write the parameters, the report and its summary into a fresh run directory."""
    paths = make_run_dir(runs_root, run_name)
    write_json(paths.run_config_json, run_config)
    write_json(paths.report_json, report)
    paths.summary_txt.write_text(summary + "\n", encoding="utf-8")
    return paths
