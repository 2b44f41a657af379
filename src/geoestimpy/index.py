# src/geoestimpy/index.py
# SPDX-License-Identifier: MIT
"""
Spatial index used by the estimators.

:class:`SpatialIndex` wraps a :class:`sklearn.neighbors.KDTree` when the
metric belongs to the Minkowski family and a
:class:`sklearn.neighbors.BallTree` otherwise. A k-d tree relies on
axis-aligned splits and returns wrong neighbor sets under metrics such as
the great-circle distance, so the choice is not a mere optimization.

The index is built once per variable and never modified afterwards; many
threads may query it concurrently.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
from sklearn.neighbors import BallTree, KDTree

from .distances import Distance, Euclidean, get_distance
from .errors import EmptySampleSetError, NeighborCountError

logger = logging.getLogger(__name__)


class SpatialIndex:
    """
    k-nearest-neighbor index over a fixed set of sample coordinates.

    Use :meth:`SpatialIndex.build` to construct one.

    Attributes
    ----------
    coordinates : ndarray of shape (n, dim)
        Read-only copy of the sample coordinates.
    distance : Distance
        Metric the index was built with.
    kind : {"kdtree", "balltree"}
        Tree structure chosen for the metric.
    """

    def __init__(self, tree, coordinates: np.ndarray, distance: Distance, kind: str):
        self._tree = tree
        self.coordinates = coordinates
        self.distance = distance
        self.kind = kind

    @classmethod
    def build(cls, coordinates, distance: Distance | str | None = None) -> "SpatialIndex":
        """
        Build an index over ``coordinates`` (shape ``(n, dim)``).

        Raises
        ------
        EmptySampleSetError
            If there are no coordinates.
        """
        metric = get_distance(distance) if distance is not None else Euclidean()

        coords = np.array(coordinates, dtype=float, copy=True)
        if coords.ndim == 1:
            coords = coords[:, None]
        if coords.ndim != 2:
            raise ValueError(f"coordinates must have shape (n, dim), got {coords.shape}.")
        if coords.shape[0] == 0:
            raise EmptySampleSetError("<index>")
        coords.setflags(write=False)

        name, kwargs = metric.tree_metric()
        points = np.array(metric.transform(coords), dtype=float)
        if metric.is_minkowski:
            tree = KDTree(points, metric=name, **kwargs)
            kind = "kdtree"
        else:
            tree = BallTree(points, metric=name, **kwargs)
            kind = "balltree"

        logger.debug("Built %s over %d points with %r", kind, coords.shape[0], metric)
        return cls(tree, coords, metric, kind)

    @property
    def nsamples(self) -> int:
        return self.coordinates.shape[0]

    @property
    def ndims(self) -> int:
        return self.coordinates.shape[1]

    def query(self, points, k: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Find the ``k`` nearest samples.

        Parameters
        ----------
        points : array-like of shape (dim,) or (m, dim)
            Query location(s).
        k : int
            Number of neighbors, ``1 <= k <= nsamples``.

        Returns
        -------
        (indices, distances)
            Sorted by ascending distance. Shapes are ``(k,)`` for a single
            point and ``(m, k)`` for a batch. Distances are in the metric's
            own units.
        """
        k = int(k)
        if k < 1:
            raise ValueError(f"k must be a positive integer, got {k}.")
        if k > self.nsamples:
            raise NeighborCountError(k, self.nsamples)

        pts = np.asarray(points, dtype=float)
        single = pts.ndim == 1
        if single:
            pts = pts[None, :]
        if pts.ndim != 2 or pts.shape[1] != self.ndims:
            raise ValueError(
                f"Query points must have dimension {self.ndims}, got shape {np.shape(points)}."
            )

        dist, ind = self._tree.query(self.distance.transform(pts), k=k, sort_results=True)
        dist = self.distance.scale(dist)
        if single:
            return ind[0], dist[0]
        return ind, dist

    def __repr__(self) -> str:
        return f"SpatialIndex(kind={self.kind!r}, nsamples={self.nsamples}, distance={self.distance!r})"


__all__ = ["SpatialIndex"]
