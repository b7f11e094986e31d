"""Scalar curve metrics per classifier: AUROC, AUPRC, recall at precision, threshold ranges."""

import math

import numpy as np
import pandas as pd

from domain.evaluation.auc import calc_auc
from domain.evaluation.curves import configure_precision
from domain.schemas import FALLOUT_COL, RECALL_COL, THRESH_COL, ClassifierCollection, ThresholdRange


def auroc(collection: ClassifierCollection) -> pd.Series:
    """Area under the ROC curve (fallout vs sensitivity) for each classifier."""
    return pd.Series(
        {name: calc_auc(curve.table[FALLOUT_COL], curve.table[RECALL_COL]) for name, curve in collection.items()},
        dtype=float,
    )


def auprc(collection: ClassifierCollection, monotonized: bool = True, balanced: bool = False) -> pd.Series:
    """Area under the (optionally monotonized / balanced) precision-recall curve for each classifier."""
    return pd.Series(
        {
            name: calc_auc(curve.table[RECALL_COL], configure_precision(curve.table, monotonized, balanced))
            for name, curve in collection.items()
        },
        dtype=float,
    )


def recall_at_precision(
    collection: ClassifierCollection,
    x: float = 0.9,
    monotonized: bool = True,
    balanced: bool = False,
) -> pd.Series:
    """
    Highest recall among thresholds whose configured precision is strictly above `x`.

    Returns:
        Series by classifier; NaN where precision never exceeds `x`
    """
    out: dict[str, float] = {}
    for name, curve in collection.items():
        ppv = configure_precision(curve.table, monotonized, balanced)
        hits = ppv > x
        out[name] = float(curve.table[RECALL_COL].to_numpy()[hits].max()) if hits.any() else math.nan
    return pd.Series(out, dtype=float)


def threshold_ranges(
    collection: ClassifierCollection,
    x: float = 0.9,
    monotonized: bool = True,
    balanced: bool = False,
) -> dict[str, ThresholdRange | None]:
    """
    Score interval around the first threshold at which configured precision exceeds `x`.

    Thresholds are reported in each classifier's original score scale, using the orientation
    flag stored with its curve.

    Returns:
        Dict name -> ThresholdRange, or None when precision never exceeds `x`
    """
    out: dict[str, ThresholdRange | None] = {}
    for name, curve in collection.items():
        ppv = configure_precision(curve.table, monotonized, balanced)
        hits = np.flatnonzero(ppv > x)
        if hits.size == 0:
            out[name] = None
            continue

        thresh = curve.table[THRESH_COL].to_numpy()
        first = int(hits[0])
        cutoff_thresh = float(thresh[first])
        previous_thresh = float(thresh[first - 1]) if first > 0 else -math.inf

        if not curve.high:
            # Table thresholds are sign-flipped; report them in the raw score scale
            cutoff_thresh = -cutoff_thresh
            previous_thresh = -previous_thresh

        out[name] = ThresholdRange(previous_thresh=previous_thresh, cutoff_thresh=cutoff_thresh)
    return out
