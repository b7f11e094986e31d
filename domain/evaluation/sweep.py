"""Threshold sweep: confusion-matrix counts and rates at every distinct score threshold."""

import logging
from collections.abc import Mapping, Sequence

import numpy as np
import pandas as pd

from domain.errors import ShapeMismatchError, TypeMismatchError
from domain.schemas import (
    FALLOUT_COL,
    FN_COL,
    FP_COL,
    PRECISION_COL,
    RECALL_COL,
    SWEEP_COLUMNS,
    THRESH_COL,
    TN_COL,
    TP_COL,
    ClassifierCollection,
    ClassifierCurve,
)

logger = logging.getLogger(__name__)


def _as_truth_vector(truth) -> np.ndarray:
    arr = np.asarray(truth)
    if arr.dtype == object and all(isinstance(v, (bool, np.bool_)) for v in arr.ravel()):
        arr = arr.astype(bool)
    if arr.dtype != bool:
        raise TypeMismatchError(f"truth must be boolean, got dtype {arr.dtype}")
    if arr.ndim != 1:
        raise ShapeMismatchError(f"truth must be one-dimensional, got shape {arr.shape}")
    return arr


def _as_score_vector(scores) -> np.ndarray:
    arr = np.asarray(scores)
    if not np.issubdtype(arr.dtype, np.number) or np.issubdtype(arr.dtype, np.complexfloating):
        raise TypeMismatchError(f"scores must be real-valued numbers, got dtype {arr.dtype}")
    if arr.ndim != 1:
        raise ShapeMismatchError(f"scores must be one-dimensional, got shape {arr.shape}")
    return arr.astype(float)


def _rate(num: np.ndarray, den: np.ndarray) -> np.ndarray:
    """num / den, NaN where den == 0."""
    out = np.full(num.shape, np.nan, dtype=float)
    np.divide(num, den, out=out, where=den > 0)
    return out


def sweep_counts(truth: np.ndarray, scores: np.ndarray) -> dict[str, np.ndarray]:
    """
    Confusion-matrix counts for every threshold in [-inf, distinct scores..., +inf].

    A sample is called positive iff its score >= threshold. Samples with a missing score
    are excluded from all four counts. Counting uses one sort per class and a binary
    search per threshold instead of rescanning all samples.

    Args:
        truth: boolean vector
        scores: float vector (larger = more positive), NaN for missing

    Returns:
        Dict with arrays 'thresh', 'tp', 'tn', 'fp', 'fn', ascending by threshold
    """
    valid = ~np.isnan(scores)
    pos_scores = np.sort(scores[valid & truth])
    neg_scores = np.sort(scores[valid & ~truth])

    thresholds = np.concatenate(([-np.inf], np.unique(scores[valid]), [np.inf]))

    n_pos = pos_scores.size
    n_neg = neg_scores.size
    tp = n_pos - np.searchsorted(pos_scores, thresholds, side="left")
    fp = n_neg - np.searchsorted(neg_scores, thresholds, side="left")

    return {
        THRESH_COL: thresholds,
        TP_COL: tp,
        TN_COL: n_neg - fp,
        FP_COL: fp,
        FN_COL: n_pos - tp,
    }


def sweep_rates(counts: dict[str, np.ndarray]) -> dict[str, np.ndarray]:
    """Precision, recall and fallout from sweep counts (NaN for zero denominators)."""
    tp = counts[TP_COL]
    fp = counts[FP_COL]
    tn = counts[TN_COL]
    fn = counts[FN_COL]

    precision = _rate(tp, tp + fp)
    # +inf threshold calls nothing; reuse the penultimate precision instead of 0/0
    precision[-1] = precision[-2]

    return {
        PRECISION_COL: precision,
        RECALL_COL: _rate(tp, tp + fn),
        FALLOUT_COL: _rate(fp, tn + fp),
    }


def build_sweep_table(truth, scores, high: bool = True) -> pd.DataFrame:
    """
    Build the full threshold sweep table for one classifier.

    Args:
        truth: boolean ground-truth vector
        scores: numeric score vector, row-aligned with truth; NaN marks a missing score
        high: True if larger scores mean more positive; otherwise scores are sign-flipped

    Returns:
        DataFrame with columns thresh, tp, tn, fp, fn, ppv_prec, tpr_sens, fpr_fall,
        one row per threshold in ascending order

    Raises:
        ShapeMismatchError: If truth and scores differ in length
        TypeMismatchError: If truth is not boolean or scores are not numeric
    """
    truth_arr = _as_truth_vector(truth)
    score_arr = _as_score_vector(scores)
    if truth_arr.size != score_arr.size:
        raise ShapeMismatchError(f"Mismatched length: truth={truth_arr.size}, scores={score_arr.size}")

    if not high:
        score_arr = -score_arr

    counts = sweep_counts(truth_arr, score_arr)
    rates = sweep_rates(counts)

    return pd.DataFrame({**counts, **rates}, columns=SWEEP_COLUMNS)


def _score_columns(scores, names: Sequence[str] | None) -> tuple[list[np.ndarray], list[str]]:
    """Split a score matrix (DataFrame, mapping of columns, or array) into columns + names."""
    if isinstance(scores, pd.DataFrame):
        default_names = [str(c) for c in scores.columns]
        columns = [scores[c].to_numpy() for c in scores.columns]
    elif isinstance(scores, Mapping):
        default_names = [str(c) for c in scores.keys()]
        columns = [np.asarray(v) for v in scores.values()]
        lengths = {col.shape[0] if col.ndim else 0 for col in columns}
        if len(lengths) > 1:
            raise ShapeMismatchError(f"Score columns have differing lengths: {sorted(lengths)}")
    else:
        arr = np.asarray(scores)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise ShapeMismatchError(f"Score matrix must be two-dimensional, got shape {arr.shape}")
        default_names = [f"pred{k + 1}" for k in range(arr.shape[1])]
        columns = [arr[:, k] for k in range(arr.shape[1])]

    if names is None:
        names = default_names
    names = list(names)

    if not all(isinstance(n, str) for n in names):
        raise TypeMismatchError("Classifier names must be strings")
    if len(names) != len(columns):
        raise ShapeMismatchError(f"Mismatched length: names={len(names)}, score columns={len(columns)}")
    if len(set(names)) != len(names):
        raise ValueError(f"Classifier names must be unique, got {names}")

    return columns, names


def _orientation_flags(high, n_columns: int) -> list[bool]:
    if isinstance(high, (bool, np.bool_)):
        return [bool(high)] * n_columns
    flags = list(high)
    if not all(isinstance(h, (bool, np.bool_)) for h in flags):
        raise TypeMismatchError("high must be a boolean or a sequence of booleans")
    if len(flags) == 1:
        return [bool(flags[0])] * n_columns
    if len(flags) != n_columns:
        raise ShapeMismatchError(f"Mismatched length: high={len(flags)}, score columns={n_columns}")
    return [bool(h) for h in flags]


def build_collection(
    truth,
    scores,
    names: Sequence[str] | None = None,
    high: bool | Sequence[bool] = True,
) -> ClassifierCollection:
    """
    Build sweep tables for every classifier in a score matrix.

    All shape and type preconditions are checked before any table is built.

    Args:
        truth: boolean ground-truth vector (the reference set)
        scores: DataFrame, mapping of name -> column, or 2-D array; one column per classifier
        names: classifier names (defaults to the column names, or pred1..predK for arrays)
        high: one orientation flag for all classifiers, or one per classifier

    Returns:
        ClassifierCollection keyed by classifier name
    """
    truth_arr = _as_truth_vector(truth)
    columns, names = _score_columns(scores, names)
    flags = _orientation_flags(high, len(columns))

    checked = []
    for name, col in zip(names, columns, strict=True):
        col_arr = _as_score_vector(col)
        if col_arr.size != truth_arr.size:
            raise ShapeMismatchError(
                f"Mismatched length for '{name}': truth={truth_arr.size}, scores={col_arr.size}"
            )
        checked.append(col_arr)

    curves: dict[str, ClassifierCurve] = {}
    for name, col_arr, flag in zip(names, checked, flags, strict=True):
        table = build_sweep_table(truth_arr, col_arr, high=flag)
        logger.debug("Sweep table for '%s': %d thresholds (high=%s)", name, len(table), flag)
        curves[name] = ClassifierCurve(name=name, high=flag, table=table)

    return ClassifierCollection(curves=curves, reference_set_size=int(truth_arr.size))
