"""CLI entry point for the Twofish evaluation suite.

Usage:
    python scripts/run_evaluation.py                          # full suite
    python scripts/run_evaluation.py --vectors 20 --sac-trials 8   # quick check
    python scripts/run_evaluation.py --key-sizes 16 32 --skip-sac

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from cipherforge.config import load_settings
from cipherforge.evaluation import (
    EvaluationReport,
    cbc_error_propagation,
    compute_sac,
    run_all_configurations,
)
from cipherforge.utils.repro import save_evaluation, set_global_seed

logger = logging.getLogger("run_evaluation")


def _cli_progress(message: str, current: int, total: int) -> None:
    """Print progress to stderr."""
    pct = (current / total * 100) if total > 0 else 0
    print(f"  [{current + 1}/{total}] ({pct:.0f}%) {message}", file=sys.stderr)


def main() -> int:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Twofish evaluation: roundtrip, SAC, CBC propagation")
    parser.add_argument(
        "--key-sizes", nargs="+", type=int, default=[8, 16, 24, 32],
        help="Key lengths in bytes (default: 8 16 24 32)",
    )
    parser.add_argument(
        "--vectors", type=int, default=100,
        help="Roundtrip vectors per (mode, key size) (default: 100)",
    )
    parser.add_argument(
        "--sac-trials", type=int, default=64,
        help="SAC trials per input bit (default: 64)",
    )
    parser.add_argument(
        "--propagation-trials", type=int, default=32,
        help="CBC propagation trials per key size (default: 32)",
    )
    parser.add_argument("--skip-sac", action="store_true", help="Skip SAC analysis")
    parser.add_argument(
        "--seed", type=int, default=settings.global_seed,
        help=f"Base random seed (default: {settings.global_seed})",
    )
    parser.add_argument(
        "--output-dir", type=str, default=settings.runs_dir,
        help=f"Output directory (default: {settings.runs_dir})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    set_global_seed(args.seed)

    logger.info("Roundtrip tests: %d vectors x %d configurations", args.vectors, 2 * len(args.key_sizes))
    report = EvaluationReport(
        roundtrip_results=run_all_configurations(
            key_sizes=args.key_sizes,
            num_vectors=args.vectors,
            seed=args.seed,
            progress_callback=_cli_progress,
        ),
    )

    if not args.skip_sac:
        for key_size in args.key_sizes:
            for input_type in ("plaintext", "key"):
                logger.info("SAC (%s, %d-bit key)", input_type, key_size * 8)
                report.sac_results.append(compute_sac(
                    key_size_bytes=key_size,
                    input_type=input_type,
                    trials=args.sac_trials,
                    seed=args.seed,
                ))

    for key_size in args.key_sizes:
        report.propagation_results.append(cbc_error_propagation(
            key_size_bytes=key_size,
            trials=args.propagation_trials,
            seed=args.seed,
        ))

    summary = report.to_summary()
    paths = save_evaluation(
        args.output_dir,
        run_config={
            "seed": args.seed,
            "key_sizes": args.key_sizes,
            "vectors": args.vectors,
            "sac_trials": None if args.skip_sac else args.sac_trials,
            "propagation_trials": args.propagation_trials,
        },
        report=report.to_dict(),
        summary=summary,
    )

    print(summary)
    logger.info("Report written to %s", paths.run_dir)
    return 0 if report.all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
