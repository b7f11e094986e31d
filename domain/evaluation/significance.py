"""Significance of AUPRC differences between classifiers, and against random guessing."""

import logging

import numpy as np
import pandas as pd
from opik import track

from domain.evaluation.auc import calc_auc
from domain.evaluation.curves import monotonize
from domain.evaluation.intervals import prc_ci
from domain.evaluation.metrics import auprc
from domain.evaluation.paths import sample_prc_paths
from domain.evaluation.sampling import RateSampler, sample_rates
from domain.evaluation.sweep import sweep_counts, sweep_rates
from domain.schemas import (
    FP_COL,
    PRECISION_COL,
    RECALL_COL,
    TP_COL,
    ClassifierCollection,
    SignificanceResult,
)

logger = logging.getLogger(__name__)

CI_PROBS = (0.025, 0.975)


def probability_ladder(res: float) -> np.ndarray:
    """Probabilities res, 2*res, ..., 1-res."""
    if not 0 < res < 0.5:
        raise ValueError(f"res must lie in (0, 0.5), got {res}")
    steps = int(round(1.0 / res))
    return np.arange(1, steps) / steps


def auprc_quantile_ladder(table: pd.DataFrame, ps: np.ndarray, monotonized: bool = True) -> np.ndarray:
    """
    AUPRC at each probability of the ladder.

    Precision at every threshold is replaced by its p-quantile (exact grid CI), giving one
    whole curve per p, which is then integrated against the empirical recall.
    """
    quantiles = prc_ci(table[TP_COL], table[TP_COL] + table[FP_COL], probs=ps).to_numpy()
    # The +inf row calls nothing; it borrows the penultimate row like the sweep table does
    quantiles[-1] = quantiles[-2]
    if monotonized:
        quantiles = np.fmax.accumulate(quantiles, axis=0)

    recall = table[RECALL_COL].to_numpy()
    return np.array([calc_auc(recall, quantiles[:, c]) for c in range(quantiles.shape[1])])


def _ladder_cdf(ladder: np.ndarray, values: np.ndarray, ps_ext: np.ndarray) -> np.ndarray:
    """Approximate CDF: the ladder probability reached by the number of ladder values below each query."""
    below = (ladder[None, :] < values[:, None]).sum(axis=1)
    return ps_ext[below]


@track(
    name="AUPRC significance",
    type="general",
    metadata={"task": "auprc_significance"},
    capture_input=False,
    capture_output=False,
)
def auprc_signif(collection: ClassifierCollection, monotonized: bool = True, res: float = 0.001) -> SignificanceResult:
    """
    Compare the AUPRC distributions of every pair of classifiers.

    For each classifier an AUPRC quantile ladder is built from the exact precision CIs.
    The ladder defines an empirical CDF over AUPRC, from which:
      - pval[i, j] = 1 - CDF_j(AUPRC_i): chance of seeing i's AUPRC under j's distribution
      - llr[i, j] = log10( int CDF_j (1 - CDF_i) dx / int CDF_i (1 - CDF_j) dx ):
        how much more likely i's AUPRC is to exceed j's than the reverse

    Args:
        collection: classifiers to compare
        monotonized: use monotonized precision curves
        res: probability ladder (and AUPRC grid) resolution

    Returns:
        SignificanceResult with empirical AUPRC, 95% CI, LLR matrix and p-value matrix
    """
    names = collection.names
    ps = probability_ladder(res)
    ps_ext = np.concatenate(([0.0], ps))

    logger.info("Building AUPRC quantile ladders for %d classifier(s) (res=%s)", len(names), res)
    ladders = pd.DataFrame(
        {name: auprc_quantile_ladder(curve.table, ps, monotonized) for name, curve in collection.items()},
        index=ps,
    )
    emp = auprc(collection, monotonized=monotonized)

    lo = round(float(np.nanmin(ladders.to_numpy())), 2)
    hi = round(float(np.nanmax(ladders.to_numpy())), 2)
    auc_range = np.arange(lo, hi + res / 2, res)
    cdfs = {name: _ladder_cdf(ladders[name].to_numpy(), auc_range, ps_ext) for name in names}

    ci_rows = [int(np.abs(ps - p).argmin()) for p in CI_PROBS]
    ci = ladders.iloc[ci_rows].copy()
    ci.index = [str(p) for p in CI_PROBS]

    pval = pd.DataFrame(np.nan, index=names, columns=names)
    llr = pd.DataFrame(np.nan, index=names, columns=names)
    for a in names:
        for b in names:
            if a == b:
                continue
            ladder_b = ladders[b].to_numpy()
            pval.loc[a, b] = 1.0 - ps_ext[int(np.sum(ladder_b < emp[a]))]

            a_above = calc_auc(auc_range, cdfs[b] * (1.0 - cdfs[a]))
            b_above = calc_auc(auc_range, cdfs[a] * (1.0 - cdfs[b]))
            with np.errstate(divide="ignore", invalid="ignore"):
                llr.loc[a, b] = np.log10(np.divide(a_above, b_above))

    return SignificanceResult(auprc=emp, ci=ci, llr=llr, pval=pval)


def null_auprc_distribution(
    n_positive: int,
    n_negative: int,
    rng: np.random.Generator,
    cycles: int = 10000,
    monotonized: bool = True,
) -> np.ndarray:
    """AUPRC of `cycles` uniformly random scorings of a reference set with the given class totals."""
    if cycles <= 0:
        raise ValueError(f"cycles must be positive, got {cycles}")

    truth = np.concatenate((np.ones(n_positive, dtype=bool), np.zeros(n_negative, dtype=bool)))
    out = np.empty(cycles)
    for c in range(cycles):
        rates = sweep_rates(sweep_counts(truth, rng.uniform(0.0, 1.0, truth.size)))
        ppv = rates[PRECISION_COL]
        if monotonized:
            ppv = monotonize(ppv)
        out[c] = calc_auc(rates[RECALL_COL], ppv)
    return out


@track(
    name="AUPRC vs random",
    type="general",
    metadata={"task": "auprc_pvrandom"},
    capture_input=False,
    capture_output=False,
)
def auprc_pvrandom(
    collection: ClassifierCollection,
    rng: np.random.Generator,
    monotonized: bool = True,
    cycles: int = 10000,
) -> pd.Series:
    """
    Empirical p-value of each classifier's AUPRC against random scores.

    The null distribution is the AUPRC of uniformly random scores over a reference set
    with the classifier's positive/negative totals; classifiers with equal totals share
    one null distribution.

    Returns:
        Series by classifier: fraction of null AUPRCs >= the empirical AUPRC
    """
    emp = auprc(collection, monotonized=monotonized)
    nulls: dict[tuple[int, int], np.ndarray] = {}
    out: dict[str, float] = {}
    for name, curve in collection.items():
        key = (curve.n_positive, curve.n_negative)
        if key not in nulls:
            logger.info("Drawing %d null AUPRCs for %d positives / %d negatives", cycles, *key)
            nulls[key] = null_auprc_distribution(*key, rng=rng, cycles=cycles, monotonized=monotonized)
        out[name] = float(np.mean(nulls[key] >= emp[name]))
    return pd.Series(out, dtype=float)


def sample_auprc_distribution(
    table: pd.DataFrame,
    rng: np.random.Generator,
    n_samples: int = 1000,
    monotonized: bool = True,
    sampler: RateSampler = sample_rates,
) -> np.ndarray:
    """AUPRC of each of `n_samples` sampled precision/recall paths, integrated in ascending recall order."""
    paths = sample_prc_paths(table, n_samples, rng, monotonized=monotonized, sampler=sampler)
    out = np.empty(paths.n_draws)
    for d in range(paths.n_draws):
        order = np.argsort(paths.recall[d], kind="stable")
        out[d] = calc_auc(paths.recall[d][order], paths.precision[d][order])
    return out
