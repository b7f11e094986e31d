"""Trapezoid-rule area under a curve."""

import numpy as np


def calc_auc(xs, ys) -> float:
    """
    Area under the polyline through (xs[k], ys[k]), accumulated in the given order.

    Each segment contributes |x[k+1] - x[k]| * (y[k] + y[k+1]) / 2, so the caller decides
    the direction of travel and points are never re-sorted. Segments touching a missing
    (NaN) point contribute nothing.

    Args:
        xs: x coordinates
        ys: y coordinates, same length as xs

    Returns:
        The accumulated area (0.0 for fewer than two points)
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"xs and ys must have the same shape, got {x.shape} and {y.shape}")
    if x.size < 2:
        return 0.0

    segments = np.abs(np.diff(x)) * (y[:-1] + y[1:]) / 2.0
    return float(np.nansum(segments))
