"""Precision post-processing: monotonization and prior balancing."""

import numpy as np
import pandas as pd

from domain.schemas import FP_COL, PRECISION_COL, TP_COL


def monotonize(xs) -> np.ndarray:
    """
    Running maximum, left to right.

    Precision is expected to be non-decreasing as the threshold rises; sampling noise and
    small counts break that. Missing values are replaced by the running maximum once one
    exists (leading missing values stay missing).
    """
    arr = np.asarray(xs, dtype=float)
    if arr.size == 0:
        return arr.copy()
    return np.fmax.accumulate(arr)


def balance_precision(precision, prior: float) -> np.ndarray:
    """
    Rescale precision observed under class prior `prior` to a balanced (0.5) prior.

    p' = p(1-prior) / (p(1-prior) + (1-p)prior); exactly 0 at p=0 and 1 at p=1.
    """
    p = np.asarray(precision, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        balanced = p * (1 - prior) / (p * (1 - prior) + (1 - p) * prior)
    balanced = np.where(p == 0, 0.0, balanced)
    balanced = np.where(p == 1, 1.0, balanced)
    return balanced


def class_prior(table: pd.DataFrame) -> float:
    """Empirical prior: precision at the most permissive threshold (every sample called positive)."""
    tp = float(table[TP_COL].iloc[0])
    fp = float(table[FP_COL].iloc[0])
    if tp + fp == 0:
        return float("nan")
    return tp / (tp + fp)


def configure_precision(table: pd.DataFrame, monotonized: bool = True, balanced: bool = False) -> np.ndarray:
    """Precision column of a sweep table, balanced first (if requested), then monotonized (if requested)."""
    ppv = table[PRECISION_COL].to_numpy(dtype=float)
    if balanced:
        ppv = balance_precision(ppv, class_prior(table))
    if monotonized:
        ppv = monotonize(ppv)
    return ppv
