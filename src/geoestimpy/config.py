# SPDX-License-Identifier: MIT
"""
Per-variable solver configuration for GeoEstimPy.

Every estimator is configured with a mapping ``variable -> options``
where the options are a :class:`NeighborParams` (or a plain dict that is
turned into one). Variables that are not listed use the defaults.

Options
-------
neighbors : int, "all" or None, default None
    Number of nearest samples used at each query location. ``None`` and
    ``"all"`` use every non-missing sample of the variable.
distance : Distance, str or callable, default Euclidean()
    Metric used to search neighbors. See :mod:`geoestimpy.distances`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from .distances import Distance, Euclidean, get_distance


@dataclass(frozen=True)
class NeighborParams:
    neighbors: Optional[int] = None
    distance: Distance = field(default_factory=Euclidean)

    def __post_init__(self) -> None:
        k = self.neighbors
        if isinstance(k, str):
            if k.lower() != "all":
                raise ValueError(f"neighbors must be a positive integer or 'all', got '{k}'.")
            k = None
        if k is not None:
            if isinstance(k, bool) or int(k) != k or int(k) < 1:
                raise ValueError(f"neighbors must be a positive integer, got {k!r}.")
            k = int(k)
        object.__setattr__(self, "neighbors", k)
        object.__setattr__(self, "distance", get_distance(self.distance))

    @classmethod
    def from_value(cls, value: Union["NeighborParams", Mapping[str, Any], None]) -> "NeighborParams":
        """Build params from an instance, a dict of options or ``None``."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            known = {f.name for f in fields(cls)}
            unknown = sorted(set(value) - known)
            if unknown:
                raise ValueError(
                    f"Unknown solver option(s) {unknown}. Supported options are: {sorted(known)}."
                )
            return cls(**dict(value))
        raise TypeError(f"Cannot build NeighborParams from {value!r}.")

    def resolve_neighbors(self, nsamples: int) -> int:
        """Number of neighbors to query given ``nsamples`` available samples."""
        return nsamples if self.neighbors is None else self.neighbors


ParamsSpec = Mapping[Union[str, Tuple[str, ...]], Union[NeighborParams, Mapping[str, Any], None]]


def normalize_params(params: Optional[ParamsSpec]) -> Dict[str, NeighborParams]:
    """
    Flatten a user mapping into ``{variable: NeighborParams}``.

    Tuple keys configure several variables at once, e.g.
    ``{("a", "b"): {"neighbors": 5}}``.
    """
    out: Dict[str, NeighborParams] = {}
    if not params:
        return out
    for key, value in dict(params).items():
        names: Iterable[str] = key if isinstance(key, tuple) else (key,)
        p = NeighborParams.from_value(value)
        for name in names:
            if name in out:
                raise ValueError(f"Variable '{name}' is configured more than once.")
            out[name] = p
    return out


def resolve_params(
    configured: Mapping[str, NeighborParams],
    var: str,
) -> NeighborParams:
    """Params for ``var``: the configured ones or the defaults."""
    return configured.get(var) or NeighborParams()


__all__ = [
    "NeighborParams",
    "normalize_params",
    "resolve_params",
]
