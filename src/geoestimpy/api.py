# SPDX-License-Identifier: MIT
"""
geoestimpy.api
==============

High-level, public interface for GeoEstimPy.

- :func:`solve`
    Run a configured estimator on an :class:`EstimationProblem`.

- :func:`estimate`
    One-call wrapper: build the problem from data and a domain, create the
    estimator by name and solve.

- :func:`validate`
    Leave-one-out scores of an estimator on a dataset.
"""

from __future__ import annotations

import threading
from typing import Any, Iterable, Mapping, Optional, Union

import pandas as pd

from .data import Domain, GeoData
from .estimators import Estimator, make_estimator
from .problem import EstimationProblem, EstimationSolution
from .validation import leave_one_out


def solve(
    problem: EstimationProblem,
    solver: Estimator,
    *,
    cancel_event: Optional[threading.Event] = None,
) -> EstimationSolution:
    """
    Solve ``problem`` with ``solver``.

    Raises
    ------
    TypeError
        If ``solver`` is not an :class:`~geoestimpy.estimators.Estimator`.
    """
    if not isinstance(solver, Estimator):
        raise TypeError(
            f"solver must be an Estimator instance (IDW, LWR), got {type(solver).__name__}."
        )
    return solver.solve(problem, cancel_event=cancel_event)


def estimate(
    data: GeoData,
    domain: Domain,
    targetvars: Union[str, Iterable[str], None] = None,
    *,
    method: str = "idw",
    params: Optional[Mapping[str, Any]] = None,
    **solver_kwargs,
) -> EstimationSolution:
    """
    Estimate ``targetvars`` of ``data`` on ``domain``.

    This is a thin wrapper around :class:`EstimationProblem`,
    :func:`~geoestimpy.estimators.make_estimator` and :func:`solve`.

    Parameters
    ----------
    data : GeoData
        Scattered samples.
    domain : PointSet or RegularGrid
        Query locations.
    targetvars : str or iterable of str, optional
        Variables to estimate (all when omitted).
    method : {"idw", "lwr"}, default "idw"
        Estimator kind.
    params : mapping, optional
        Per-variable options ``{var: {"neighbors": ..., "distance": ...}}``.
    **solver_kwargs
        Estimator options such as ``n_jobs`` or ``kernel``.
    """
    problem = EstimationProblem(data, domain, targetvars)
    solver = make_estimator(method, dict(params) if params else None, **solver_kwargs)
    return solve(problem, solver)


def validate(
    data: GeoData,
    solver: Estimator,
    targetvars: Union[str, Iterable[str], None] = None,
    *,
    show_progress: bool = False,
) -> pd.DataFrame:
    """Leave-one-out MAE/RMSE/R² per variable; see :func:`leave_one_out`."""
    return leave_one_out(data, solver, targetvars, show_progress=show_progress)


__all__ = ["solve", "estimate", "validate"]
