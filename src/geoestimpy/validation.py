# SPDX-License-Identifier: MIT
"""
geoestimpy.validation
=====================

Leave-one-out cross-validation of an estimator.

For every target variable and every observed sample ``i``:

1. Remove sample ``i`` from the variable's sample set.
2. Estimate the value at sample ``i``'s coordinates from the remaining
   ``n - 1`` samples, using the solver's options for that variable. A
   configured neighbor count larger than ``n - 1`` is capped.
3. Compare the held-out prediction with the observation.

The result is one row per variable with MAE, RMSE and R².
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Union

import numpy as np
import pandas as pd
from tqdm.auto import tqdm

from .config import NeighborParams
from .data import GeoData
from .estimators.base import Estimator
from .metrics import compute_metrics
from .problem import validate_variables

logger = logging.getLogger(__name__)


def leave_one_out_predictions(
    data: GeoData,
    solver: Estimator,
    var: str,
    *,
    show_progress: bool = False,
) -> pd.DataFrame:
    """
    Held-out predictions for one variable.

    Returns
    -------
    pandas.DataFrame
        Columns ``["y_obs", "y_mod", "uncertainty"]`` with one row per
        observed sample, in data order.
    """
    X, z = data.samples(var)
    n = z.shape[0]
    out = pd.DataFrame({
        "y_obs": z,
        "y_mod": np.full(n, np.nan),
        "uncertainty": np.full(n, np.nan),
    })
    if n < 2:
        logger.debug("leave-one-out: '%s' has %d sample(s), nothing to validate", var, n)
        return out

    params = solver.params_for(var)
    k = min(params.resolve_neighbors(n - 1), n - 1)
    held_params = NeighborParams(neighbors=k, distance=params.distance)

    keep = np.ones(n, dtype=bool)
    iterator = tqdm(range(n), desc=f"LOO {var}", unit="pt") if show_progress else range(n)
    for i in iterator:
        keep[i] = False
        mu, sigma = solver.estimate_variable(
            X[keep], z[keep], X[i:i + 1], held_params, variable=var,
        )
        keep[i] = True
        out.loc[i, "y_mod"] = mu[0]
        out.loc[i, "uncertainty"] = sigma[0]
    return out


def leave_one_out(
    data: GeoData,
    solver: Estimator,
    targetvars: Union[str, Iterable[str], None] = None,
    *,
    show_progress: bool = False,
) -> pd.DataFrame:
    """
    Leave-one-out scores of ``solver`` on ``data``.

    Parameters
    ----------
    data : GeoData
        Scattered samples.
    solver : Estimator
        Configured IDW/LWR instance.
    targetvars : str or iterable of str, optional
        Variables to validate; all variables when omitted.
    show_progress : bool, default False
        Show a tqdm progress bar per variable.

    Returns
    -------
    pandas.DataFrame
        Columns ``["variable", "n", "MAE", "RMSE", "R2"]``.
    """
    if targetvars is None:
        variables: List[str] = data.variables
    elif isinstance(targetvars, str):
        variables = [targetvars]
    else:
        variables = list(targetvars)
    validate_variables(data, variables, context="leave_one_out")

    rows = []
    for var in variables:
        pred = leave_one_out_predictions(data, solver, var, show_progress=show_progress)
        row = {"variable": var, "n": len(pred)}
        row.update(compute_metrics(pred["y_obs"].to_numpy(), pred["y_mod"].to_numpy()))
        rows.append(row)
    return pd.DataFrame(rows, columns=["variable", "n", "MAE", "RMSE", "R2"])


__all__ = ["leave_one_out", "leave_one_out_predictions"]
