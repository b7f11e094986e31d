"""
Curve statistics and their uncertainty.

Provides:
- Threshold sweep tables and classifier collections
- Precision monotonization and prior balancing
- Exact grid-based rate CIs and likelihood-based rate samplers
- Sampled PRC paths and recall-binned confidence bands
- AUROC / AUPRC, recall at precision, threshold ranges
- AUPRC significance (pairwise LLR / p-values, empirical p-value vs random)

All functions are pure (numpy, scipy, pandas); randomness comes from an explicit Generator.
"""

from domain.evaluation.auc import calc_auc
from domain.evaluation.curves import balance_precision, class_prior, configure_precision, monotonize
from domain.evaluation.intervals import prc_ci
from domain.evaluation.metrics import auprc, auroc, recall_at_precision, threshold_ranges
from domain.evaluation.paths import infer_prc_ci, prc_confidence_band, sample_prc_paths
from domain.evaluation.sampling import (
    SamplingMethod,
    get_rate_sampler,
    rejection_sample,
    sample_rates,
    sample_rates_qd,
)
from domain.evaluation.significance import (
    auprc_pvrandom,
    auprc_signif,
    null_auprc_distribution,
    sample_auprc_distribution,
)
from domain.evaluation.sweep import build_collection, build_sweep_table

__all__ = [
    # Sweep tables
    "build_sweep_table",
    "build_collection",
    # Curve post-processing
    "monotonize",
    "balance_precision",
    "class_prior",
    "configure_precision",
    # Intervals and sampling
    "prc_ci",
    "SamplingMethod",
    "get_rate_sampler",
    "rejection_sample",
    "sample_rates",
    "sample_rates_qd",
    "sample_prc_paths",
    "infer_prc_ci",
    "prc_confidence_band",
    # Metrics
    "calc_auc",
    "auroc",
    "auprc",
    "recall_at_precision",
    "threshold_ranges",
    # Significance
    "auprc_signif",
    "auprc_pvrandom",
    "null_auprc_distribution",
    "sample_auprc_distribution",
]
