# SPDX-License-Identifier: MIT
from __future__ import annotations

import numpy as np

from ..kernels import inverse_distance_weights
from .base import Estimator, PointEstimate


class IDW(Estimator):
    """
    Inverse distance weighting (Shepard 1968).

    At each location the estimate is the weighted mean of the k nearest
    samples with weights ``1/d`` normalized to sum to one. The reported
    uncertainty is the distance to the nearest sample.

    When a sample coincides with the query point (``d = 0``) its value is
    returned unchanged with zero uncertainty; with several coincident
    samples the first one in ascending-distance order wins.

    Per-variable options: ``neighbors`` (default all samples) and
    ``distance`` (default Euclidean), see :class:`~geoestimpy.config.NeighborParams`.
    """

    name = "IDW"

    def _estimate_point(self, x, Xn, zn, ds) -> PointEstimate:
        ws = inverse_distance_weights(ds)
        total = ws.sum()

        if not np.isfinite(total):  # some distance is zero
            j = int(np.flatnonzero(~np.isfinite(ws))[0])
            return float(zn[j]), 0.0, False

        ws = ws / total
        return float(np.dot(ws, zn)), float(ds.min()), False
