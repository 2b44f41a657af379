# SPDX-License-Identifier: MIT
"""
geoestimpy.data
===============

Minimal spatial containers consumed by the estimators.

- :class:`GeoData` – scattered measurements: a coordinate array of shape
  ``(n, dim)`` plus a :class:`pandas.DataFrame` with one row per location
  and one column per variable. Missing values (NaN/None) are allowed and
  are dropped per variable by :meth:`GeoData.samples`.
- :class:`PointSet` – an arbitrary set of query locations.
- :class:`RegularGrid` – a regular Cartesian grid of query locations.

Domains share a tiny protocol: ``nelms``, ``ndims``,
``coordinates(loc)``, ``all_coordinates()`` and ``traverse()``.
"""

from __future__ import annotations

from typing import Iterator, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd


# ---------------------------------------------------------------------------
# Scattered data
# ---------------------------------------------------------------------------


class GeoData:
    """
    Georeferenced table of measurements.

    Parameters
    ----------
    table : pandas.DataFrame
        One row per location, one column per variable.
    coordinates : array-like of shape (n, dim)
        Coordinates of each row of ``table``.
    """

    def __init__(self, table: pd.DataFrame, coordinates) -> None:
        coords = np.asarray(coordinates, dtype=float)
        if coords.ndim == 1:
            coords = coords[:, None]
        if coords.ndim != 2:
            raise ValueError(f"coordinates must be 2-D, got shape {coords.shape}.")
        if coords.shape[0] != len(table):
            raise ValueError(
                f"coordinates has {coords.shape[0]} rows but the table has "
                f"{len(table)} rows."
            )
        self.table = table.reset_index(drop=True)
        self.coordinates = coords

    @property
    def nelms(self) -> int:
        return self.coordinates.shape[0]

    @property
    def ndims(self) -> int:
        return self.coordinates.shape[1]

    @property
    def variables(self) -> list:
        return list(self.table.columns)

    def samples(self, var: str) -> Tuple[np.ndarray, np.ndarray]:
        """
        Return ``(coords, values)`` of the locations where ``var`` is observed.

        Raises
        ------
        KeyError
            If ``var`` is not a column of the table.
        """
        if var not in self.table.columns:
            raise KeyError(f"Variable '{var}' not found. Available: {self.variables}.")
        col = self.table[var]
        mask = col.notna().to_numpy()
        values = col[mask].to_numpy(dtype=float)
        return self.coordinates[mask], values

    def __len__(self) -> int:
        return self.nelms

    def __repr__(self) -> str:
        return f"GeoData(nelms={self.nelms}, ndims={self.ndims}, variables={self.variables})"


def _orient_coordinates(coords, nrows: int) -> np.ndarray:
    """Return coordinates as (n, dim), accepting the (dim, n) layout too."""
    arr = np.asarray(coords, dtype=float)
    if arr.ndim == 1:
        return arr[:, None]
    if arr.ndim != 2:
        raise ValueError(f"coordinates must be 1-D or 2-D, got shape {arr.shape}.")
    if arr.shape[0] == nrows:
        return arr
    if arr.shape[1] == nrows:
        return arr.T
    raise ValueError(
        f"coordinates of shape {arr.shape} do not match {nrows} data rows."
    )


def georef(
    values: Union[pd.DataFrame, Mapping[str, Sequence[float]]],
    coords,
) -> GeoData:
    """
    Attach coordinates to a table of values.

    Parameters
    ----------
    values : DataFrame or mapping
        Variables, e.g. ``{"z": [1.0, 0.0, 1.0]}``.
    coords : array-like
        Either ``(n, dim)`` (one row per location) or ``(dim, n)`` (one column
        per location). When both axes equal ``n`` rows are assumed.

    Examples
    --------
    >>> data = georef({"y": [1.0, 0.0]}, [[25.0, 50.0], [25.0, 75.0]])
    >>> data.coordinates.shape
    (2, 2)
    """
    table = values.copy() if isinstance(values, pd.DataFrame) else pd.DataFrame(dict(values))
    return GeoData(table, _orient_coordinates(coords, len(table)))


# ---------------------------------------------------------------------------
# Domains
# ---------------------------------------------------------------------------


class PointSet:
    """Arbitrary collection of query locations, shape ``(n, dim)``."""

    def __init__(self, coords) -> None:
        arr = np.asarray(coords, dtype=float)
        if arr.ndim == 1:
            arr = arr[:, None]
        if arr.ndim != 2:
            raise ValueError(f"PointSet coordinates must be 2-D, got shape {arr.shape}.")
        self._coords = arr

    @property
    def nelms(self) -> int:
        return self._coords.shape[0]

    @property
    def ndims(self) -> int:
        return self._coords.shape[1]

    def coordinates(self, loc: int) -> np.ndarray:
        return self._coords[loc]

    def all_coordinates(self) -> np.ndarray:
        return self._coords

    def traverse(self) -> Iterator[int]:
        return iter(range(self.nelms))

    def __repr__(self) -> str:
        return f"PointSet(nelms={self.nelms}, ndims={self.ndims})"


class RegularGrid:
    """
    Regular Cartesian grid.

    Two forms are accepted::

        RegularGrid(100, 100)                          # origin 0, unit spacing
        RegularGrid((0.0,), (1.0,), dims=(100,))       # start/finish inclusive

    Locations are enumerated with the first axis varying fastest, so
    location ``loc`` sits at ``np.unravel_index(loc, dims, order="F")``.
    """

    def __init__(self, *args, dims: Optional[Sequence[int]] = None) -> None:
        if dims is None:
            if not args or not all(isinstance(a, (int, np.integer)) for a in args):
                raise ValueError(
                    "RegularGrid expects integer sizes, or start/finish with dims=."
                )
            dims = tuple(int(a) for a in args)
            start = np.zeros(len(dims))
            finish = np.asarray(dims, dtype=float) - 1.0
        else:
            if len(args) != 2:
                raise ValueError("RegularGrid with dims= expects (start, finish).")
            dims = tuple(int(d) for d in dims)
            start = np.atleast_1d(np.asarray(args[0], dtype=float))
            finish = np.atleast_1d(np.asarray(args[1], dtype=float))
            if not (len(start) == len(finish) == len(dims)):
                raise ValueError("start, finish and dims must have the same length.")

        if any(d < 1 for d in dims):
            raise ValueError(f"Grid sizes must be positive, got {dims}.")

        self.dims: Tuple[int, ...] = dims
        self.start = start
        self.finish = finish
        self.axes = [np.linspace(s, f, n) for s, f, n in zip(start, finish, dims)]

    @property
    def nelms(self) -> int:
        return int(np.prod(self.dims))

    @property
    def ndims(self) -> int:
        return len(self.dims)

    @property
    def spacing(self) -> np.ndarray:
        return np.array([
            (f - s) / (n - 1) if n > 1 else 0.0
            for s, f, n in zip(self.start, self.finish, self.dims)
        ])

    def coordinates(self, loc: int) -> np.ndarray:
        idx = np.unravel_index(int(loc), self.dims, order="F")
        return np.array([ax[i] for ax, i in zip(self.axes, idx)])

    def all_coordinates(self) -> np.ndarray:
        mesh = np.meshgrid(*self.axes, indexing="ij")
        return np.column_stack([m.ravel(order="F") for m in mesh])

    def traverse(self) -> Iterator[int]:
        return iter(range(self.nelms))

    def reshape(self, values) -> np.ndarray:
        """Reshape a linear array of ``nelms`` values into the grid shape."""
        return np.asarray(values).reshape(self.dims, order="F")

    def __repr__(self) -> str:
        return f"RegularGrid(dims={self.dims}, start={tuple(self.start)}, finish={tuple(self.finish)})"


Domain = Union[PointSet, RegularGrid]


__all__ = [
    "GeoData",
    "georef",
    "PointSet",
    "RegularGrid",
    "Domain",
]
