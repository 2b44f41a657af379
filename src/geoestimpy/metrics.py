# SPDX-License-Identifier: MIT
"""
geoestimpy.metrics
==================

Error metrics used to score estimates against held-out observations.

- MAE  (mean absolute error)
- RMSE (root-mean-square error)
- R2   (coefficient of determination)

Paired NaNs are dropped first; degenerate inputs (empty series, zero
variance) give ``np.nan`` instead of raising.
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np


def _to_clean_pairs(
    y_true,
    y_pred,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert inputs to paired float arrays and drop NaNs pairwise.

    Raises
    ------
    ValueError
        If the two inputs have different shapes.
    """
    yt = np.asarray(y_true, dtype="float64")
    yp = np.asarray(y_pred, dtype="float64")

    if yt.shape != yp.shape:
        raise ValueError(
            f"y_true and y_pred must have the same shape. "
            f"Got {yt.shape} vs {yp.shape}."
        )

    mask = ~(np.isnan(yt) | np.isnan(yp))
    return yt[mask], yp[mask]


def mae(y_true, y_pred) -> float:
    """Mean absolute error; NaN for an empty series."""
    yt, yp = _to_clean_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    return float(np.mean(np.abs(yt - yp)))


def rmse(y_true, y_pred) -> float:
    """Root-mean-square error; NaN for an empty series."""
    yt, yp = _to_clean_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    diff = yt - yp
    return float(np.sqrt(np.mean(diff * diff)))


def r2(y_true, y_pred) -> float:
    """
    Coefficient of determination R².

    NaN when fewer than two pairs remain or ``y_true`` is constant.
    """
    yt, yp = _to_clean_pairs(y_true, y_pred)
    if yt.size < 2:
        return float("nan")

    ss_tot = float(np.sum((yt - np.mean(yt)) ** 2))
    if ss_tot == 0.0:
        return float("nan")

    ss_res = float(np.sum((yt - yp) ** 2))
    return float(1.0 - ss_res / ss_tot)


def compute_metrics(y_true, y_pred) -> Dict[str, float]:
    """
    Compute MAE, RMSE and R² for a paired series.

    Returns
    -------
    dict
        ``{"MAE": ..., "RMSE": ..., "R2": ...}``
    """
    return {
        "MAE": mae(y_true, y_pred),
        "RMSE": rmse(y_true, y_pred),
        "R2": r2(y_true, y_pred),
    }


__all__ = ["mae", "rmse", "r2", "compute_metrics"]
