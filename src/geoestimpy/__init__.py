# SPDX-License-Identifier: MIT
"""
geoestimpy
==========

Spatial estimation of scattered measurements on grids and point sets.

Given samples of one or more variables at known locations, each
estimator returns a mean estimate and an uncertainty proxy at every
location of a target domain:

- :class:`IDW` – inverse distance weighting. Uncertainty is the distance
  to the nearest sample (zero at sample locations).
- :class:`LWR` – locally weighted linear regression. Uncertainty is the
  weighted residual variance of the local fit scaled by the equivalent
  kernel norm.

Both search neighbors through a :class:`SpatialIndex` that uses a k-d tree
for Minkowski-family metrics and a ball tree for everything else (e.g.
:class:`Haversine`).

Quick example
-------------

>>> from geoestimpy import georef, RegularGrid, EstimationProblem, IDW
>>> data = georef({"z": [1.0, 0.0, 1.0, 0.0]},
...               [[25, 50, 75, 75], [25, 75, 50, 25]])
>>> problem = EstimationProblem(data, RegularGrid(100, 100), "z")
>>> solution = IDW(z={"neighbors": 3}).solve(problem)
>>> solution["z"].shape
(10000,)

Core submodules
---------------

- :mod:`geoestimpy.distances`  – metrics and Minkowski-family membership
- :mod:`geoestimpy.index`      – k-d tree / ball tree neighbor search
- :mod:`geoestimpy.kernels`    – distance-to-weight kernels
- :mod:`geoestimpy.estimators` – IDW and LWR
- :mod:`geoestimpy.validation` – leave-one-out scores
"""

from __future__ import annotations

# Containers
from .data import GeoData, PointSet, RegularGrid, georef
from .problem import EstimationProblem, EstimationSolution

# Configuration / metrics
from .config import NeighborParams
from .distances import (
    Chebyshev,
    Cityblock,
    CustomDistance,
    Distance,
    Euclidean,
    Haversine,
    Minkowski,
    get_distance,
)

# Search
from .index import SpatialIndex

# Estimators
from .estimators import IDW, LWR, Estimator, SUPPORTED_ESTIMATORS, make_estimator

# Errors
from .errors import (
    EmptySampleSetError,
    EstimationCancelled,
    EstimationError,
    NeighborCountError,
    NumericalDegeneracyError,
)

# High-level API
from .api import estimate, solve, validate
from .validation import leave_one_out

__all__ = [
    # Containers
    "GeoData",
    "PointSet",
    "RegularGrid",
    "georef",
    "EstimationProblem",
    "EstimationSolution",
    # Configuration
    "NeighborParams",
    # Distances
    "Distance",
    "Euclidean",
    "Cityblock",
    "Chebyshev",
    "Minkowski",
    "Haversine",
    "CustomDistance",
    "get_distance",
    # Search
    "SpatialIndex",
    # Estimators
    "Estimator",
    "IDW",
    "LWR",
    "SUPPORTED_ESTIMATORS",
    "make_estimator",
    # Errors
    "EstimationError",
    "EmptySampleSetError",
    "NeighborCountError",
    "NumericalDegeneracyError",
    "EstimationCancelled",
    # API
    "solve",
    "estimate",
    "validate",
    "leave_one_out",
]


# Sync this with pyproject.toml if you bump the version
__version__ = "0.1.0"
