# SPDX-License-Identifier: MIT
"""
geoestimpy.estimators.base
==========================

Common machinery shared by every estimator.

For each target variable the driver:

1. Resolves the variable's :class:`~geoestimpy.config.NeighborParams`.
2. Extracts the non-missing samples and validates them (empty sample set,
   neighbor count) before anything is allocated.
3. Builds one :class:`~geoestimpy.index.SpatialIndex`.
4. Walks the domain locations in chunks: one batched k-NN query per chunk,
   then the estimator-specific :meth:`Estimator._estimate_point` for each
   location, writing the mean and the uncertainty into two output arrays.

Locations are independent. With ``n_jobs != 1`` chunks are processed by a
joblib thread pool that shares the read-only index and writes disjoint
slices of the outputs. Results of a variable are only published once its
whole pass succeeded.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Tuple

import numpy as np
from joblib import Parallel, delayed
from tqdm.auto import tqdm

from ..config import NeighborParams, ParamsSpec, normalize_params, resolve_params
from ..errors import EmptySampleSetError, EstimationCancelled, NeighborCountError
from ..index import SpatialIndex
from ..problem import EstimationProblem, EstimationSolution

logger = logging.getLogger(__name__)

#: (mean, uncertainty, used_fallback) for one query location.
PointEstimate = Tuple[float, float, bool]


class Estimator:
    """
    Base class of all estimators.

    Parameters
    ----------
    params : mapping, optional
        ``{variable: NeighborParams | dict}``; tuple keys configure several
        variables at once. Unlisted variables use the defaults (all
        neighbors, Euclidean distance).
    n_jobs : int, default 1
        Number of worker threads for the location loop (``-1`` = all cores).
    chunk_size : int, default 1024
        Number of locations per batched neighbor query.
    show_progress : bool, default False
        Show a tqdm progress bar over chunks.
    **var_params
        Shorthand for ``params``, e.g. ``IDW(z={"neighbors": 3})``.
    """

    name = "estimator"

    def __init__(
        self,
        params: Optional[ParamsSpec] = None,
        *,
        n_jobs: int = 1,
        chunk_size: int = 1024,
        show_progress: bool = False,
        **var_params,
    ) -> None:
        merged = dict(params or {})
        for var, value in var_params.items():
            if var in merged:
                raise ValueError(f"Variable '{var}' is configured more than once.")
            merged[var] = value
        self.params: Dict[str, NeighborParams] = normalize_params(merged)

        if int(chunk_size) < 1:
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size}.")
        self.n_jobs = n_jobs
        self.chunk_size = int(chunk_size)
        self.show_progress = show_progress

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def params_for(self, var: str) -> NeighborParams:
        return resolve_params(self.params, var)

    def solve(
        self,
        problem: EstimationProblem,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> EstimationSolution:
        """
        Estimate every target variable of ``problem``.

        Returns
        -------
        EstimationSolution
            Mean and uncertainty arrays per variable.

        Raises
        ------
        EmptySampleSetError, NeighborCountError
            Raised for the offending variable before its outputs exist.
        EstimationCancelled
            If ``cancel_event`` is set while locations are being processed.
        """
        unknown = sorted(set(self.params) - set(problem.targetvars))
        if unknown:
            raise ValueError(
                f"{type(self).__name__} configured for variable(s) {unknown} "
                f"that are not targets of the problem {problem.targetvars}."
            )

        targets = problem.domain.all_coordinates()
        means: Dict[str, np.ndarray] = {}
        variances: Dict[str, np.ndarray] = {}

        for var in problem.targetvars:
            coords, values = problem.data.samples(var)
            mu, sigma = self.estimate_variable(
                coords,
                values,
                targets,
                self.params_for(var),
                variable=var,
                cancel_event=cancel_event,
            )
            means[var] = mu
            variances[var] = sigma
            logger.info("%s: estimated '%s' at %d location(s)", self.name, var, len(mu))

        return EstimationSolution(problem.domain, means, variances)

    def estimate_variable(
        self,
        coords,
        values,
        targets,
        params: Optional[NeighborParams] = None,
        *,
        variable: str = "<unnamed>",
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Run one estimation pass for a single variable.

        Parameters
        ----------
        coords : array-like of shape (n, dim)
            Sample coordinates (no missing values).
        values : array-like of shape (n,)
            Sample values.
        targets : array-like of shape (m, dim)
            Query coordinates.
        params : NeighborParams, optional
            Neighbor count and distance; defaults when omitted.

        Returns
        -------
        (mean, uncertainty)
            Two float arrays of length ``m``.
        """
        params = params if params is not None else NeighborParams()
        X = np.asarray(coords, dtype=float)
        if X.ndim == 1:
            X = X[:, None]
        z = np.asarray(values, dtype=float)
        Q = np.asarray(targets, dtype=float)
        if Q.ndim == 1:
            Q = Q[:, None]

        ndata = z.shape[0]
        if ndata == 0:
            raise EmptySampleSetError(variable)
        if X.shape[0] != ndata:
            raise ValueError(
                f"Got {X.shape[0]} coordinates but {ndata} values for '{variable}'."
            )
        k = params.resolve_neighbors(ndata)
        if k > ndata:
            raise NeighborCountError(k, ndata, variable)
        self._validate(X, z, k, variable)

        index = SpatialIndex.build(X, params.distance)
        logger.debug(
            "%s '%s': %s over %d samples, k=%d, %d locations",
            self.name, variable, index.kind, ndata, k, Q.shape[0],
        )

        nlocs = Q.shape[0]
        mean = np.full(nlocs, np.nan)
        sigma = np.full(nlocs, np.nan)

        def run(start: int, stop: int) -> List[int]:
            ind, dist = index.query(Q[start:stop], k)
            fellback: List[int] = []
            for j, loc in enumerate(range(start, stop)):
                if cancel_event is not None and cancel_event.is_set():
                    raise EstimationCancelled(
                        f"Estimation of '{variable}' cancelled at location {loc}."
                    )
                is_ = ind[j]
                mu, s, fb = self._estimate_point(Q[loc], X[is_], z[is_], dist[j])
                mean[loc] = mu
                sigma[loc] = s
                if fb:
                    fellback.append(loc)
            return fellback

        bounds = [(i, min(i + self.chunk_size, nlocs)) for i in range(0, nlocs, self.chunk_size)]
        chunks = tqdm(bounds, desc=f"{self.name}: {variable}", unit="chunk") if self.show_progress else bounds

        if self.n_jobs == 1:
            results = [run(a, b) for a, b in chunks]
        else:
            results = Parallel(n_jobs=self.n_jobs, prefer="threads")(
                delayed(run)(a, b) for a, b in chunks
            )

        nfallback = sum(len(r) for r in results)
        if nfallback:
            logger.warning(
                "%s '%s': fallback estimate used at %d of %d location(s)",
                self.name, variable, nfallback, nlocs,
            )
        return mean, sigma

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _validate(self, X: np.ndarray, z: np.ndarray, k: int, variable: str) -> None:
        """Extra per-variable checks run before the index is built."""

    def _estimate_point(
        self,
        x: np.ndarray,
        Xn: np.ndarray,
        zn: np.ndarray,
        ds: np.ndarray,
    ) -> PointEstimate:
        """
        Estimate at ``x`` from its neighbors.

        ``Xn``/``zn``/``ds`` are the neighbor coordinates, values and
        distances sorted by ascending distance.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.params!r})"


__all__ = ["Estimator", "PointEstimate"]
