# SPDX-License-Identifier: MIT
"""
geoestimpy.estimators.lwr
=========================

Locally weighted regression (Cleveland 1979).

At each query location ``x`` a weighted linear model is fitted to the k
nearest samples and evaluated at ``x``:

1. weights ``w_i = kernel(d_i)``; the default Gaussian kernel
   ``exp(-3 δ²)`` with ``δ = d / max(d)`` is strictly positive, so no
   zero-distance special case is needed;
2. design matrix ``A = [1, X_i - x]`` (coordinates centered at the query
   point, so the intercept is the estimate and the normal equations stay
   well-scaled for large coordinate values);
3. ``β = (AᵗWA)⁻¹ AᵗWz``; estimate ``μ = β₀``;
4. uncertainty ``σ̂² ‖ℓ‖²``, where ``ℓ = W A (AᵗWA)⁻¹ e₀`` are the
   equivalent-kernel weights of the local fit (``μ = ℓ·z``) and
   ``σ̂² = Σ w_i r_i² / Σ w_i`` is the weighted residual variance.

Degenerate neighborhoods (collinear samples, fewer neighbors than
coefficients) make ``AᵗWA`` singular. With ``on_degenerate="raise"`` a
:class:`~geoestimpy.errors.NumericalDegeneracyError` aborts the run; with
``on_degenerate="mean"`` the location falls back to the kernel-weighted
mean, reporting the weighted variance of the neighbor values.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

import numpy as np

from ..config import ParamsSpec
from ..errors import NumericalDegeneracyError
from ..kernels import Kernel, make_kernel
from .base import Estimator, PointEstimate

DEGENERATE_MODES = ("raise", "mean")


def weighted_mean(ws: np.ndarray, zn: np.ndarray) -> Tuple[float, float]:
    """Kernel-weighted mean of ``zn`` and the weighted variance around it."""
    wn = ws / ws.sum()
    mu = float(np.dot(wn, zn))
    return mu, float(np.dot(wn, (zn - mu) ** 2))


class LWR(Estimator):
    """
    Locally weighted regression estimator.

    Parameters
    ----------
    params : mapping, optional
        Per-variable ``neighbors`` / ``distance`` options.
    kernel : {"gaussian", "inverse"} or callable, default "gaussian"
        Maps the neighbor distances of one location to weights. Must return
        strictly positive weights that do not increase with distance.
    on_degenerate : {"raise", "mean"}, default "raise"
        What to do when the local system is singular or ill-conditioned.
    rcond : float, default 1e-12
        A system whose condition number exceeds ``1 / rcond`` is treated as
        degenerate.
    **kwargs
        Forwarded to :class:`~geoestimpy.estimators.base.Estimator`
        (``n_jobs``, ``chunk_size``, ``show_progress`` and per-variable
        shorthand).
    """

    name = "LWR"

    def __init__(
        self,
        params: Optional[ParamsSpec] = None,
        *,
        kernel: Union[str, Kernel] = "gaussian",
        on_degenerate: str = "raise",
        rcond: float = 1e-12,
        **kwargs,
    ) -> None:
        super().__init__(params, **kwargs)
        if on_degenerate not in DEGENERATE_MODES:
            raise ValueError(
                f"on_degenerate must be one of {DEGENERATE_MODES}, got '{on_degenerate}'."
            )
        if not 0.0 < float(rcond) < 1.0:
            raise ValueError(f"rcond must be in (0, 1), got {rcond}.")
        self.kernel = make_kernel(kernel)
        self.on_degenerate = on_degenerate
        self.rcond = float(rcond)

    def _validate(self, X, z, k, variable) -> None:
        ncoef = X.shape[1] + 1
        if k < ncoef and self.on_degenerate == "raise":
            raise NumericalDegeneracyError(
                f"LWR with {X.shape[1]}-D coordinates needs at least {ncoef} "
                f"neighbors, got {k} for variable '{variable}'."
            )

    def _estimate_point(self, x, Xn, zn, ds) -> PointEstimate:
        ws = np.asarray(self.kernel(ds), dtype=float)
        if ws.shape != zn.shape or not np.all(np.isfinite(ws)) or np.any(ws <= 0):
            raise ValueError("LWR kernel must return one finite, strictly positive weight per neighbor.")

        try:
            mu, sigma = self._local_fit(x, Xn, zn, ws)
        except NumericalDegeneracyError:
            if self.on_degenerate == "raise":
                raise
            mu, sigma = weighted_mean(ws, zn)
            return mu, sigma, True
        return mu, sigma, False

    def _local_fit(self, x, Xn, zn, ws) -> Tuple[float, float]:
        A = np.column_stack([np.ones(zn.shape[0]), Xn - x])
        AtW = A.T * ws
        LHS = AtW @ A

        if not np.all(np.isfinite(LHS)) or np.linalg.cond(LHS) * self.rcond > 1.0:
            raise NumericalDegeneracyError(
                f"Singular local regression system at {np.array2string(x, precision=6)}: "
                f"neighbors are collinear or too few for a linear fit."
            )
        try:
            beta = np.linalg.solve(LHS, AtW @ zn)
            e0 = np.zeros(A.shape[1])
            e0[0] = 1.0
            ell = ws * (A @ np.linalg.solve(LHS, e0))
        except np.linalg.LinAlgError as exc:
            raise NumericalDegeneracyError(str(exc)) from exc

        resid = zn - A @ beta
        s2 = float(np.dot(ws, resid ** 2) / ws.sum())
        return float(beta[0]), s2 * float(np.dot(ell, ell))

    def __repr__(self) -> str:
        return (
            f"LWR({self.params!r}, kernel={getattr(self.kernel, '__name__', self.kernel)}, "
            f"on_degenerate={self.on_degenerate!r})"
        )


__all__ = ["LWR", "weighted_mean", "DEGENERATE_MODES"]
