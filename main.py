"""
CLI entrypoint for the PRC/ROC statistics pipeline.

This script performs the following steps:
- loads .env (if present), configs/analysis.yaml
- creates a per-run output folder under outputs/
- builds one threshold sweep table per classifier from the scored reference set
- computes AUROC / AUPRC, recall at a precision cutoff and threshold ranges
- samples PRC paths and aggregates them into confidence bands
- compares AUPRCs (pairwise significance, optionally against random scores)
- saves sweep tables, bands, metrics and significance results
- logs a human-readable summary of results
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from opik import opik_context, track

from application import (
    build_collection_from_table,
    compute_confidence_bands,
    compute_curve_metrics,
    compute_significance,
    log_analysis_summary,
    save_confidence_bands,
    save_json_artifact,
    save_sweep_tables,
)
from application.constants import (
    BAND_OUTPUTS_DIRNAME,
    CONFIG_SNAPSHOT_FILENAME,
    DATA_FINGERPRINT_FILENAME,
    LOG_FILENAME,
    METRICS_FILENAME,
    SIGNIFICANCE_FILENAME,
    SWEEP_OUTPUTS_DIRNAME,
)
from infrastructure.config import load_run_config
from infrastructure.constants import ANALYSIS_FILE
from infrastructure.io import ensure_exists, read_table
from infrastructure.observability import configure_logging, make_run_tag, set_log_context
from infrastructure.utils import make_rng

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compute PRC/ROC statistics with confidence bands and AUPRC significance")
    p.add_argument(
        "--config",
        type=str,
        default=str(ANALYSIS_FILE),
        help="Path to analysis.yaml (default: configs/analysis.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded if it exists (default: .env)",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level",
    )
    return p.parse_args()


@track(
    name="PRC.statistics",
    type="general",
    metadata={"task": "prc_statistics"},
    capture_input=False,
    capture_output=False,
    flush=True,
)
def main() -> None:
    args = _parse_args()

    # Tracing settings (OPIK_*) may come from .env; running without one is fine
    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    config_path = Path(args.config)
    ensure_exists(config_path, "analysis.yaml")

    cfg = load_run_config(config_path)
    rng = make_rng(cfg.stats.seed)

    # ---- Per-run output folder ----
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = (
        f"{ts}_"
        f"{cfg.data_file_path.stem}_"
        f"{cfg.stats.sampling.value}_"
        f"n{cfg.stats.n_samples}_"
        f"mono{int(cfg.curve.monotonized)}_"
        f"bal{int(cfg.curve.balanced)}"
    )

    run_dir = cfg.output_root / run_id
    run_dir.mkdir(parents=True, exist_ok=True)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
    )
    set_log_context(run_id_full=run_id)

    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    # Load scored reference set
    logger.info("Loading data from %s...", cfg.data_file_path)
    df = read_table(cfg.data_file_path)
    logger.info("Data loaded: %d rows, %d columns", df.shape[0], df.shape[1])

    # Save snapshot config + data fingerprint
    save_json_artifact(cfg.model_dump(mode="json"), run_dir / CONFIG_SNAPSHOT_FILENAME, "config snapshot")
    save_json_artifact(
        {
            "data_file": str(cfg.data_file_path),
            "rows": int(df.shape[0]),
            "columns": [str(c) for c in df.columns],
        },
        run_dir / DATA_FINGERPRINT_FILENAME,
        "data fingerprint",
    )

    opik_context.update_current_span(
        name=f"PRC.statistics.{cfg.data_file_path.stem}",
        metadata={
            "run_id": run_id,
            "sampling": cfg.stats.sampling.value,
            "n_samples": cfg.stats.n_samples,
            "seed": cfg.stats.seed,
        },
    )

    # Sweep tables
    collection = build_collection_from_table(cfg, df)
    save_sweep_tables(collection, run_dir / SWEEP_OUTPUTS_DIRNAME)

    # Point metrics
    metrics = compute_curve_metrics(cfg, collection)
    metrics_path = save_json_artifact(metrics, run_dir / METRICS_FILENAME, "metrics")

    # Confidence bands
    if cfg.compute_confidence_bands:
        bands = compute_confidence_bands(cfg, collection, rng)
        save_confidence_bands(bands, run_dir / BAND_OUTPUTS_DIRNAME)
    else:
        logger.info("Confidence bands disabled (compute_confidence_bands=False).")

    # AUPRC comparisons
    significance, signif_result = compute_significance(cfg, collection, rng)
    significance_path = None
    if significance:
        significance_path = save_json_artifact(significance, run_dir / SIGNIFICANCE_FILENAME, "significance")

    # Human-readable summary
    log_analysis_summary(
        collection=collection,
        metrics=metrics,
        significance=significance,
        signif_result=signif_result,
        metrics_path=metrics_path,
        significance_path=significance_path,
    )

    logger.info("Detailed log: %s", log_path)


if __name__ == "__main__":
    main()
