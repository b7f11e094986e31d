"""Analysis workflows and summary logging."""

import logging
import math
from functools import partial
from pathlib import Path

import numpy as np
import pandas as pd
from opik import track

from application.constants import (
    AUPRC_KEY,
    AUROC_KEY,
    CLASSIFIERS_KEY,
    PRECISION_CUTOFF_KEY,
    PVRANDOM_KEY,
    RECALL_AT_PRECISION_KEY,
    REFERENCE_SET_SIZE_KEY,
    SAMPLED_AUPRC_CI_KEY,
    SIGNIFICANCE_KEY,
    THRESHOLD_RANGES_KEY,
)
from domain.errors import TypeMismatchError
from domain.evaluation import (
    auprc,
    auprc_pvrandom,
    auprc_signif,
    auroc,
    build_collection,
    get_rate_sampler,
    prc_confidence_band,
    recall_at_precision,
    sample_auprc_distribution,
    threshold_ranges,
)
from domain.evaluation.sampling import RateSampler
from domain.schemas import ClassifierCollection, SignificanceResult
from infrastructure.config.models import RunConfig
from infrastructure.observability import classifier_context

logger = logging.getLogger(__name__)


def _finite_or_none(value: float) -> float | None:
    return float(value) if math.isfinite(value) else None


def _series_to_json(series: pd.Series) -> dict[str, float | None]:
    return {str(k): _finite_or_none(v) for k, v in series.items()}


def _coerce_truth(values: pd.Series, column: str) -> np.ndarray:
    """Boolean truth vector from a bool column, or an integer column holding only 0/1."""
    if pd.api.types.is_bool_dtype(values):
        return values.to_numpy(dtype=bool)
    if pd.api.types.is_integer_dtype(values) and set(values.unique().tolist()) <= {0, 1}:
        return values.to_numpy() == 1
    raise TypeMismatchError(
        f"Truth column '{column}' must be boolean or 0/1 integers, got dtype {values.dtype}"
    )


def _configured_sampler(cfg: RunConfig) -> RateSampler:
    return partial(get_rate_sampler(cfg.stats.sampling), max_rounds=cfg.stats.max_rejection_rounds)


def build_collection_from_table(cfg: RunConfig, df: pd.DataFrame) -> ClassifierCollection:
    """
    Build the classifier collection from a scored reference table.

    Args:
        cfg: RunConfig instance
        df: table holding the truth column and one score column per classifier

    Returns:
        ClassifierCollection keyed by the configured classifier names

    Raises:
        KeyError: If a configured column is missing from the table
        TypeMismatchError: If the truth column is not boolean (or 0/1)
    """
    cols = cfg.columns
    missing = [c for c in [cols.truth_col, *cols.score_cols] if c not in df.columns]
    if missing:
        raise KeyError(f"Columns {missing} not found in data columns: {list(df.columns)}")

    truth = _coerce_truth(df[cols.truth_col], cols.truth_col)
    collection = build_collection(
        truth,
        df[cols.score_cols],
        names=cols.resolved_names,
        high=cols.resolved_high,
    )
    logger.info(
        "Built sweep tables for %d classifier(s) over %d reference labels (%d positive)",
        len(collection),
        collection.reference_set_size,
        int(truth.sum()),
    )
    return collection


def compute_curve_metrics(cfg: RunConfig, collection: ClassifierCollection) -> dict:
    """AUROC, AUPRC, recall at the precision cutoff and threshold ranges, as a JSON-ready dict."""
    curve_cfg = cfg.curve
    ranges = threshold_ranges(
        collection,
        x=curve_cfg.precision_cutoff,
        monotonized=curve_cfg.monotonized,
        balanced=curve_cfg.balanced,
    )
    return {
        REFERENCE_SET_SIZE_KEY: collection.reference_set_size,
        CLASSIFIERS_KEY: collection.names,
        AUROC_KEY: _series_to_json(auroc(collection)),
        AUPRC_KEY: _series_to_json(auprc(collection, curve_cfg.monotonized, curve_cfg.balanced)),
        PRECISION_CUTOFF_KEY: curve_cfg.precision_cutoff,
        RECALL_AT_PRECISION_KEY: _series_to_json(
            recall_at_precision(
                collection,
                x=curve_cfg.precision_cutoff,
                monotonized=curve_cfg.monotonized,
                balanced=curve_cfg.balanced,
            )
        ),
        THRESHOLD_RANGES_KEY: {
            name: (None if trange is None else {k: _finite_or_none(v) for k, v in trange.model_dump().items()})
            for name, trange in ranges.items()
        },
    }


@track(
    name="PRC.confidence.bands",
    type="general",
    metadata={"task": "prc_confidence_bands"},
    capture_input=False,
    capture_output=False,
)
def compute_confidence_bands(
    cfg: RunConfig,
    collection: ClassifierCollection,
    rng: np.random.Generator,
) -> dict[str, pd.DataFrame]:
    """
    Sample PRC paths for each classifier and aggregate them into recall-binned bands.

    Args:
        cfg: RunConfig instance (stats section drives the sampler, curve.balanced the band)
        collection: classifiers to process
        rng: random generator shared by all classifiers, consumed in collection order

    Returns:
        Dict name -> band DataFrame (recall plus one column per CI probability)
    """
    stats = cfg.stats
    sampler = _configured_sampler(cfg)

    bands: dict[str, pd.DataFrame] = {}
    for name, curve in collection.items():
        with classifier_context(name):
            logger.info(
                "Sampling %d PRC paths (%s, monotonized=%s)",
                stats.n_samples,
                stats.sampling.value,
                stats.monotonized_sampling,
            )
            bands[name] = prc_confidence_band(
                curve.table,
                rng,
                n_samples=stats.n_samples,
                sampler=sampler,
                monotonized_sampling=stats.monotonized_sampling,
                n_bins=stats.n_bins,
                probs=stats.ci_probs,
                balanced=cfg.curve.balanced,
            )

    return bands


@track(
    name="AUPRC.significance",
    type="general",
    metadata={"task": "auprc_significance_workflow"},
    capture_input=False,
    capture_output=False,
)
def compute_significance(
    cfg: RunConfig,
    collection: ClassifierCollection,
    rng: np.random.Generator,
) -> tuple[dict, SignificanceResult | None]:
    """
    Run the AUPRC comparisons switched on in the RunConfig.

    - cfg.compute_significance: pairwise LLR / p-values
    - cfg.compute_pvrandom: empirical p-values against random scores
    - cfg.compute_sampled_auprc: sampling-based AUPRC intervals

    Returns:
        Tuple of (JSON-ready dict, SignificanceResult or None when pairwise comparison is disabled)
    """
    out: dict = {}
    monotonized = cfg.curve.monotonized
    signif: SignificanceResult | None = None

    if cfg.compute_significance:
        signif = auprc_signif(collection, monotonized=monotonized, res=cfg.stats.signif_res)
        out[SIGNIFICANCE_KEY] = signif.to_dict()

    if cfg.compute_pvrandom:
        pv = auprc_pvrandom(collection, rng, monotonized=monotonized, cycles=cfg.stats.null_cycles)
        out[PVRANDOM_KEY] = _series_to_json(pv)

    if cfg.compute_sampled_auprc:
        sampler = _configured_sampler(cfg)
        intervals: dict[str, list[float | None]] = {}
        for name, curve in collection.items():
            with classifier_context(name):
                dist = sample_auprc_distribution(
                    curve.table,
                    rng,
                    n_samples=cfg.stats.n_samples,
                    monotonized=cfg.stats.monotonized_sampling,
                    sampler=sampler,
                )
                qs = np.nanquantile(dist, cfg.stats.ci_probs) if np.isfinite(dist).any() else [math.nan] * 2
                intervals[name] = [_finite_or_none(q) for q in qs]
                logger.debug("Sampled AUPRC interval: %s", intervals[name])
        out[SAMPLED_AUPRC_CI_KEY] = intervals

    return out, signif


def log_analysis_summary(
    collection: ClassifierCollection,
    metrics: dict,
    significance: dict,
    signif_result: SignificanceResult | None,
    metrics_path: Path,
    significance_path: Path | None,
) -> None:
    """
    Log a concise, human-readable analysis summary.

    Args:
        collection: analysed classifiers
        metrics: output of compute_curve_metrics
        significance: dict part of compute_significance
        signif_result: SignificanceResult part of compute_significance (optional)
        metrics_path: Path to metrics JSON file
        significance_path: Path to significance JSON file (optional)
    """
    logger.info("=== Analysis Summary ===")
    for line in collection.describe().splitlines():
        logger.info(line)

    cutoff = metrics[PRECISION_CUTOFF_KEY]
    for name in collection.names:
        logger.info(
            "%s: AUROC=%s AUPRC=%s recall@precision>%.2f=%s",
            name,
            _fmt(metrics[AUROC_KEY][name]),
            _fmt(metrics[AUPRC_KEY][name]),
            cutoff,
            _fmt(metrics[RECALL_AT_PRECISION_KEY][name]),
        )
        trange = metrics[THRESHOLD_RANGES_KEY][name]
        if trange is None:
            logger.info("%s: precision never exceeds %.2f", name, cutoff)
        else:
            logger.info(
                "%s: precision first exceeds %.2f between thresholds %s and %s",
                name,
                cutoff,
                _fmt(trange["previous_thresh"]),
                _fmt(trange["cutoff_thresh"]),
            )

    if signif_result is not None:
        logger.info("--- AUPRC significance ---")
        logger.info("AUPRC 95%% CI (rows=probability, cols=classifier):\n%s", signif_result.ci)
        logger.info("Pairwise log10 likelihood ratio (row beats col):\n%s", signif_result.llr)
        logger.debug("Pairwise p-values (row AUPRC under col distribution):\n%s", signif_result.pval)

    if PVRANDOM_KEY in significance:
        logger.info("AUPRC p-value vs random: %s", significance[PVRANDOM_KEY])
    if SAMPLED_AUPRC_CI_KEY in significance:
        logger.info("Sampled AUPRC intervals: %s", significance[SAMPLED_AUPRC_CI_KEY])

    logger.info("--- Artifacts ---")
    logger.info("Metrics: %s", metrics_path)
    if significance_path is not None:
        logger.info("Significance: %s", significance_path)


def _fmt(value: float | None) -> str:
    return "NA" if value is None else f"{value:.4f}"
