# src/geoestimpy/distances.py
# SPDX-License-Identifier: MIT
"""
Distance metrics for GeoEstimPy.

A distance is a small value object that knows three things:

- whether it belongs to the Minkowski family (fixed p-norm over the
  coordinate differences). Only those metrics may be searched with a
  k-d tree; every other metric goes to a ball tree.
- how to hand itself to :class:`sklearn.neighbors.KDTree` /
  :class:`sklearn.neighbors.BallTree` (:meth:`Distance.tree_metric`,
  :meth:`Distance.transform`, :meth:`Distance.scale`).
- how to evaluate itself between two sets of points
  (:meth:`Distance.pairwise`).

Available metrics
-----------------
- :class:`Euclidean`, :class:`Cityblock`, :class:`Chebyshev`,
  :class:`Minkowski` (Minkowski family);
- :class:`Haversine`: great-circle distance on ``(longitude, latitude)``
  coordinates in decimal degrees, returned in units of ``radius``
  (kilometers by default);
- :class:`CustomDistance`: any callable ``f(u, v) -> float`` satisfying
  the triangle inequality.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple, Union

import numpy as np

EARTH_RADIUS_KM = 6371.0


def _as_points(x) -> np.ndarray:
    """Coerce ``x`` to a float array of shape (n, dim)."""
    arr = np.asarray(x, dtype=float)
    if arr.ndim == 1:
        arr = arr[None, :]
    if arr.ndim != 2:
        raise ValueError(f"Expected points of shape (n, dim), got {arr.shape}.")
    return arr


# ---------------------------------------------------------------------------
# Basic haversine distance
# ---------------------------------------------------------------------------


def haversine_distance(
    lat1: np.ndarray,
    lon1: np.ndarray,
    lat2: np.ndarray,
    lon2: np.ndarray,
    radius: float = EARTH_RADIUS_KM,
) -> np.ndarray:
    """
    Compute great-circle distance between two sets of points.

    Parameters
    ----------
    lat1, lon1 : array-like
        Latitudes/longitudes of the first set of points in degrees.
    lat2, lon2 : array-like
        Latitudes/longitudes of the second set of points in degrees.
    radius : float, default 6371.0
        Sphere radius; the result is expressed in the same unit.

    Returns
    -------
    np.ndarray
        Distances with standard NumPy broadcasting.
    """
    lat1_rad = np.radians(lat1)
    lon1_rad = np.radians(lon1)
    lat2_rad = np.radians(lat2)
    lon2_rad = np.radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = (
        np.sin(dlat / 2.0) ** 2
        + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2.0) ** 2
    )
    # rounding can push a marginally above 1 for antipodal points
    c = 2.0 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))

    return radius * c


# ---------------------------------------------------------------------------
# Metric objects
# ---------------------------------------------------------------------------


class Distance:
    """Base class for all metrics."""

    #: Minkowski-family metrics are safe for k-d trees.
    is_minkowski: bool = False

    def tree_metric(self) -> Tuple[Any, Dict[str, Any]]:
        """Return ``(metric, kwargs)`` accepted by sklearn's KDTree/BallTree."""
        raise NotImplementedError

    def transform(self, coords: np.ndarray) -> np.ndarray:
        """Map coordinates into the space the search tree operates on."""
        return _as_points(coords)

    def scale(self, distances: np.ndarray) -> np.ndarray:
        """Map tree distances back to the metric's own units."""
        return distances

    def pairwise(self, a, b) -> np.ndarray:
        """Distances between every row of ``a`` and every row of ``b``."""
        raise NotImplementedError

    def __call__(self, u, v) -> float:
        return float(self.pairwise(u, v)[0, 0])

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self).__name__, tuple(sorted(vars(self).items()))))


class Minkowski(Distance):
    """General p-norm ``(Σ |u_i - v_i|^p)^(1/p)`` with ``p >= 1``."""

    is_minkowski = True

    def __init__(self, p: float = 2.0):
        p = float(p)
        if not p >= 1.0:
            raise ValueError(f"Minkowski distance requires p >= 1, got {p}.")
        self.p = p

    def tree_metric(self) -> Tuple[Any, Dict[str, Any]]:
        if np.isinf(self.p):
            return "chebyshev", {}
        return "minkowski", {"p": self.p}

    def pairwise(self, a, b) -> np.ndarray:
        a = _as_points(a)
        b = _as_points(b)
        diff = np.abs(a[:, None, :] - b[None, :, :])
        if np.isinf(self.p):
            return diff.max(axis=2)
        return np.sum(diff ** self.p, axis=2) ** (1.0 / self.p)

    def __repr__(self) -> str:
        return f"Minkowski(p={self.p:g})"


class Euclidean(Minkowski):
    """Straight-line (L2) distance."""

    def __init__(self):
        super().__init__(2.0)

    def tree_metric(self) -> Tuple[Any, Dict[str, Any]]:
        return "euclidean", {}

    def pairwise(self, a, b) -> np.ndarray:
        a = _as_points(a)
        b = _as_points(b)
        d2 = np.sum((a[:, None, :] - b[None, :, :]) ** 2, axis=2)
        return np.sqrt(d2)

    def __repr__(self) -> str:
        return "Euclidean()"


class Cityblock(Minkowski):
    """Manhattan (L1) distance."""

    def __init__(self):
        super().__init__(1.0)

    def tree_metric(self) -> Tuple[Any, Dict[str, Any]]:
        return "manhattan", {}

    def __repr__(self) -> str:
        return "Cityblock()"


class Chebyshev(Minkowski):
    """Maximum-coordinate (L∞) distance."""

    def __init__(self):
        super().__init__(np.inf)

    def __repr__(self) -> str:
        return "Chebyshev()"


class Haversine(Distance):
    """
    Great-circle distance on a sphere of the given ``radius``.

    Coordinates are ``(longitude, latitude)`` in decimal degrees. Search is
    done with a haversine BallTree in radians (``[lat, lon]`` order) and
    distances are scaled back by ``radius``.
    """

    is_minkowski = False

    def __init__(self, radius: float = EARTH_RADIUS_KM):
        radius = float(radius)
        if radius <= 0.0:
            raise ValueError(f"Haversine radius must be positive, got {radius}.")
        self.radius = radius

    def tree_metric(self) -> Tuple[Any, Dict[str, Any]]:
        return "haversine", {}

    def transform(self, coords: np.ndarray) -> np.ndarray:
        pts = _as_points(coords)
        if pts.shape[1] != 2:
            raise ValueError(
                "Haversine distance requires 2-D (longitude, latitude) "
                f"coordinates, got dimension {pts.shape[1]}."
            )
        return np.radians(pts[:, [1, 0]])

    def scale(self, distances: np.ndarray) -> np.ndarray:
        return distances * self.radius

    def pairwise(self, a, b) -> np.ndarray:
        a = _as_points(a)
        b = _as_points(b)
        return haversine_distance(
            a[:, None, 1], a[:, None, 0], b[None, :, 1], b[None, :, 0],
            radius=self.radius,
        )

    def __repr__(self) -> str:
        return f"Haversine(radius={self.radius:g})"


class CustomDistance(Distance):
    """
    Wrap a user callable ``func(u, v) -> float``.

    The callable must define a true metric (triangle inequality); it is
    always searched with a ball tree.
    """

    is_minkowski = False

    def __init__(self, func: Callable[[np.ndarray, np.ndarray], float]):
        if not callable(func):
            raise TypeError("CustomDistance expects a callable func(u, v).")
        self.func = func

    def tree_metric(self) -> Tuple[Any, Dict[str, Any]]:
        return "pyfunc", {"func": self.func}

    def pairwise(self, a, b) -> np.ndarray:
        a = _as_points(a)
        b = _as_points(b)
        out = np.empty((a.shape[0], b.shape[0]), dtype=float)
        for i, u in enumerate(a):
            for j, v in enumerate(b):
                out[i, j] = float(self.func(u, v))
        return out

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"CustomDistance({name})"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

SUPPORTED_DISTANCES: Dict[str, Callable[[], Distance]] = {
    "euclidean": Euclidean,
    "l2": Euclidean,
    "cityblock": Cityblock,
    "manhattan": Cityblock,
    "l1": Cityblock,
    "chebyshev": Chebyshev,
    "haversine": Haversine,
}


def get_distance(distance: Union[str, Distance, Callable, None] = None) -> Distance:
    """
    Resolve a distance name, callable or instance into a :class:`Distance`.

    Parameters
    ----------
    distance : str, Distance, callable or None
        ``None`` gives :class:`Euclidean`. Strings are looked up in
        ``SUPPORTED_DISTANCES`` (case-insensitive). Plain callables are
        wrapped in :class:`CustomDistance`.

    Raises
    ------
    ValueError
        If a string is not a known metric name.
    """
    if distance is None:
        return Euclidean()
    if isinstance(distance, Distance):
        return distance
    if isinstance(distance, str):
        key = distance.lower()
        if key not in SUPPORTED_DISTANCES:
            raise ValueError(
                f"Unsupported distance '{distance}'. "
                f"Supported names are: {sorted(SUPPORTED_DISTANCES.keys())}."
            )
        return SUPPORTED_DISTANCES[key]()
    if callable(distance):
        return CustomDistance(distance)
    raise TypeError(f"Cannot interpret {distance!r} as a distance.")


__all__ = [
    "EARTH_RADIUS_KM",
    "haversine_distance",
    "Distance",
    "Minkowski",
    "Euclidean",
    "Cityblock",
    "Chebyshev",
    "Haversine",
    "CustomDistance",
    "SUPPORTED_DISTANCES",
    "get_distance",
]
