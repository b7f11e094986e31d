"""Sampled precision/recall paths and the confidence bands aggregated from them."""

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from domain.evaluation.curves import balance_precision, class_prior
from domain.evaluation.sampling import RateSampler, sample_rates
from domain.schemas import FN_COL, FP_COL, TP_COL, PathEnsemble

logger = logging.getLogger(__name__)


def sample_prc_paths(
    table: pd.DataFrame,
    n_samples: int,
    rng: np.random.Generator,
    monotonized: bool = True,
    sampler: RateSampler = sample_rates,
) -> PathEnsemble:
    """
    Draw `n_samples` random precision/recall paths from a sweep table.

    Rows are visited in ascending threshold order, skipping the terminal +inf row. At each
    row precision is drawn from (tp, tp+fp) and recall from (tp, tp+fn). With `monotonized`,
    each draw's precision is bounded below by its own previous-row precision and its recall
    bounded above by its previous-row recall, so every path already has the monotone PRC shape.

    Args:
        table: sweep table of one classifier
        n_samples: number of paths
        rng: random generator
        monotonized: chain each row's draws to the previous row's
        sampler: rate sampler (sample_rates or sample_rates_qd)

    Returns:
        PathEnsemble with (n_samples, rows - 1) precision and recall arrays
    """
    if n_samples <= 0:
        raise ValueError(f"n_samples must be positive, got {n_samples}")

    n_rows = len(table) - 1
    tp = table[TP_COL].to_numpy()
    fp = table[FP_COL].to_numpy()
    fn = table[FN_COL].to_numpy()

    precision = np.empty((n_samples, n_rows))
    recall = np.empty((n_samples, n_rows))

    for k in range(n_rows):
        i = int(tp[k])
        if monotonized and k > 0:
            precision[:, k] = sampler(i, i + int(fp[k]), n_samples, rng, min_q=precision[:, k - 1])
            recall[:, k] = sampler(i, i + int(fn[k]), n_samples, rng, max_q=recall[:, k - 1])
        else:
            precision[:, k] = sampler(i, i + int(fp[k]), n_samples, rng)
            recall[:, k] = sampler(i, i + int(fn[k]), n_samples, rng)
        logger.debug("Sampled row %d/%d", k + 1, n_rows)

    return PathEnsemble(precision=precision, recall=recall)


def infer_prc_ci(
    paths: PathEnsemble,
    n_bins: int = 50,
    probs: Sequence[float] = (0.025, 0.975),
) -> pd.DataFrame:
    """
    Bin-wise precision quantiles over the pooled points of a path ensemble.

    The pooled recall range is split into `n_bins` equal-width bins; each bin reports the
    requested quantiles of the precision values whose recall falls in it. Empty bins are NaN.

    Returns:
        DataFrame with a 'recall' column (bin centres) and one column per probability
    """
    if n_bins <= 0:
        raise ValueError(f"n_bins must be positive, got {n_bins}")

    points = paths.pooled()
    columns = ["recall"] + [str(p) for p in probs]
    if points.empty:
        return pd.DataFrame(np.full((n_bins, len(columns)), np.nan), columns=columns)

    lower = float(points["recall"].min())
    upper = float(points["recall"].max())
    width = (upper - lower) / n_bins

    if width > 0:
        bin_idx = np.clip(((points["recall"] - lower) / width).astype(int), 0, n_bins - 1)
    else:
        bin_idx = pd.Series(0, index=points.index)

    grouped = points["precision"].groupby(bin_idx.to_numpy())
    out = pd.DataFrame({"recall": lower + width * (np.arange(n_bins) + 0.5)})
    for p in probs:
        out[str(p)] = grouped.quantile(p).reindex(range(n_bins)).to_numpy()

    return out


def prc_confidence_band(
    table: pd.DataFrame,
    rng: np.random.Generator,
    n_samples: int = 1000,
    sampler: RateSampler = sample_rates,
    monotonized_sampling: bool = False,
    n_bins: int = 50,
    probs: Sequence[float] = (0.025, 0.975),
    balanced: bool = False,
) -> pd.DataFrame:
    """
    Confidence band of one classifier's PRC: sample paths, aggregate per recall bin,
    and prior-balance the quantile columns if `balanced`.
    """
    paths = sample_prc_paths(table, n_samples, rng, monotonized=monotonized_sampling, sampler=sampler)
    band = infer_prc_ci(paths, n_bins=n_bins, probs=probs)
    if balanced:
        prior = class_prior(table)
        for p in probs:
            band[str(p)] = balance_precision(band[str(p)].to_numpy(), prior)
    return band
