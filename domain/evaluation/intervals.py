"""Grid-based confidence intervals for binomial rates (precision or recall)."""

from collections.abc import Sequence

import numpy as np
import pandas as pd
from scipy.stats import binom


def rate_grid(res: float) -> np.ndarray:
    """Rates 0, res, 2*res, ..., 1."""
    if not 0 < res < 1:
        raise ValueError(f"res must lie in (0, 1), got {res}")
    steps = int(round(1.0 / res))
    return np.linspace(0.0, 1.0, steps + 1)


def prc_ci(
    successes: Sequence[int],
    trials: Sequence[int],
    probs: Sequence[float] = (0.025, 0.975),
    res: float = 0.001,
) -> pd.DataFrame:
    """
    Quantiles of the success rate given i successes out of n trials.

    The binomial likelihood of the observed count is evaluated on a grid of rates in [0, 1],
    normalised into a discretised CDF, and for each probability p the largest grid rate
    whose CDF is still below p is returned.

    Args:
        successes: successes per pair (e.g. tp)
        trials: trials per pair (e.g. tp + fp), same length as successes
        probs: probabilities to return quantiles for
        res: grid resolution

    Returns:
        DataFrame with one row per (i, n) pair and one column per probability.
        Pairs with n == 0 carry no information and yield NaN; probabilities with no grid
        point below them (p <= 0) yield 0.0.
    """
    i = np.asarray(successes, dtype=float)
    n = np.asarray(trials, dtype=float)
    if i.shape != n.shape:
        raise ValueError(f"successes and trials must have the same length, got {i.shape} and {n.shape}")

    p = np.asarray(probs, dtype=float)
    rates = rate_grid(res)

    dens = binom.pmf(i[:, None], n[:, None], rates[None, :])
    total = (dens * res).sum(axis=1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        cdf = np.cumsum(dens[:, 1:] * res, axis=1) / total
    cdf = np.concatenate((np.zeros((cdf.shape[0], 1)), cdf), axis=1)

    out = np.empty((i.size, p.size), dtype=float)
    for row in range(i.size):
        if n[row] == 0 or not np.isfinite(cdf[row, -1]):
            out[row] = np.nan
            continue
        # cdf is non-decreasing: the count of entries below p is the index just past the last one
        below = np.searchsorted(cdf[row], p, side="left")
        out[row] = np.where(below > 0, rates[np.maximum(below - 1, 0)], 0.0)

    return pd.DataFrame(out, columns=list(p))
