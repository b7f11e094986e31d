import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from application import (
    build_collection_from_table,
    compute_confidence_bands,
    compute_curve_metrics,
    compute_significance,
    save_confidence_bands,
    save_json_artifact,
    save_sweep_tables,
)
from application.serialize import safe_filename_part
from domain.errors import TypeMismatchError
from infrastructure.config.models import CurveConfig, DataColumnsConfig, RunConfig, StatsConfig


def _config(tmp_path: Path, **overrides) -> RunConfig:
    values = {
        "data_file_path": tmp_path / "scores.csv",
        "columns": DataColumnsConfig(
            truth_col="truth",
            score_cols=["good", "random"],
            names=["Good model", "Random"],
        ),
        "curve": CurveConfig(precision_cutoff=0.8),
        "stats": StatsConfig(n_samples=60, n_bins=10, signif_res=0.01, null_cycles=100),
        "compute_pvrandom": True,
        "compute_sampled_auprc": True,
        "output_root": tmp_path / "outputs",
    }
    values.update(overrides)
    return RunConfig(**values)


def test_full_analysis_run(tmp_path: Path, scored_frame: pd.DataFrame, rng: np.random.Generator) -> None:
    cfg = _config(tmp_path)

    collection = build_collection_from_table(cfg, scored_frame)
    metrics = compute_curve_metrics(cfg, collection)
    bands = compute_confidence_bands(cfg, collection, rng)
    significance, signif_result = compute_significance(cfg, collection, rng)

    assert collection.names == ["Good model", "Random"]
    assert metrics["reference_set_size"] == 80
    assert metrics["auprc"]["Good model"] > metrics["auprc"]["Random"]
    assert set(bands) == {"Good model", "Random"}
    assert list(bands["Random"].columns) == ["recall", "0.025", "0.975"]
    assert signif_result is not None
    assert set(significance) == {"significance", "pvrandom", "sampled_auprc_ci"}
    lo, hi = significance["sampled_auprc_ci"]["Good model"]
    assert lo <= hi

    sweep_paths = save_sweep_tables(collection, tmp_path / "sweeps")
    band_paths = save_confidence_bands(bands, tmp_path / "bands")
    metrics_path = save_json_artifact(metrics, tmp_path / "metrics.json", "metrics")

    assert [p.name for p in sweep_paths] == ["sweep_Good_model.csv", "sweep_Random.csv"]
    assert all(p.exists() for p in band_paths)
    assert len(pd.read_csv(sweep_paths[0])) == len(collection["Good model"].table)
    assert json.loads(metrics_path.read_text(encoding="utf-8"))["classifiers"] == ["Good model", "Random"]


def test_optional_analyses_can_be_disabled(
    tmp_path: Path, scored_frame: pd.DataFrame, rng: np.random.Generator
) -> None:
    cfg = _config(tmp_path, compute_significance=False, compute_pvrandom=False, compute_sampled_auprc=False)
    collection = build_collection_from_table(cfg, scored_frame)

    significance, signif_result = compute_significance(cfg, collection, rng)

    assert significance == {}
    assert signif_result is None


def test_metrics_are_json_safe(tmp_path: Path, scored_frame: pd.DataFrame) -> None:
    cfg = _config(tmp_path, curve=CurveConfig(precision_cutoff=1.0))
    collection = build_collection_from_table(cfg, scored_frame)

    metrics = compute_curve_metrics(cfg, collection)

    assert metrics["recall_at_precision"]["Random"] is None or metrics["recall_at_precision"]["Random"] >= 0
    assert metrics["threshold_ranges"]["Random"] is None
    json.dumps(metrics)


def test_integer_truth_is_accepted(tmp_path: Path, scored_frame: pd.DataFrame) -> None:
    frame = scored_frame.assign(truth=scored_frame["truth"].astype(int))

    collection = build_collection_from_table(_config(tmp_path), frame)

    assert collection["Good model"].n_positive == 30


def test_truth_column_errors(tmp_path: Path, scored_frame: pd.DataFrame) -> None:
    cfg = _config(tmp_path)

    with pytest.raises(TypeMismatchError):
        build_collection_from_table(cfg, scored_frame.assign(truth="yes"))
    with pytest.raises(TypeMismatchError):
        build_collection_from_table(cfg, scored_frame.assign(truth=scored_frame["truth"].astype(int) * 2))
    with pytest.raises(KeyError):
        build_collection_from_table(cfg, scored_frame.drop(columns=["random"]))


def test_safe_filename_part() -> None:
    assert safe_filename_part("REVEL / v1.2") == "REVEL_v1.2"
    assert safe_filename_part("///") == "classifier"
