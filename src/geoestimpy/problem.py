# SPDX-License-Identifier: MIT
"""
geoestimpy.problem
==================

Problem and solution containers.

An :class:`EstimationProblem` ties scattered data to a target domain and
names the variables to estimate. Solvers return an
:class:`EstimationSolution` holding, per variable, the mean estimate and
the uncertainty proxy, both as arrays with one entry per domain location
(in the domain's traversal order).
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .data import Domain, GeoData, RegularGrid

VARIANCE_SUFFIX = "-variance"


def validate_variables(data: GeoData, variables: Sequence[str], *, context: str = "") -> None:
    """
    Ensure that ``data`` contains all ``variables``.

    Raises
    ------
    ValueError
        If one or more variables are missing, listing them.
    """
    missing = [v for v in variables if v not in data.table.columns]
    if missing:
        prefix = f"[{context}] " if context else ""
        raise ValueError(
            f"{prefix}Missing required variables: {missing}. "
            f"Available variables: {data.variables}."
        )


class EstimationProblem:
    """
    Estimate ``targetvars`` of ``data`` at every location of ``domain``.

    Parameters
    ----------
    data : GeoData
        Scattered samples.
    domain : PointSet or RegularGrid
        Query locations.
    targetvars : str or sequence of str, optional
        Variables to estimate; all variables of ``data`` when omitted.
    """

    def __init__(
        self,
        data: GeoData,
        domain: Domain,
        targetvars: Union[str, Iterable[str], None] = None,
    ) -> None:
        if targetvars is None:
            targetvars = data.variables
        elif isinstance(targetvars, str):
            targetvars = [targetvars]
        targetvars = list(dict.fromkeys(targetvars))
        if not targetvars:
            raise ValueError("EstimationProblem requires at least one target variable.")

        validate_variables(data, targetvars, context="EstimationProblem")
        if data.ndims != domain.ndims:
            raise ValueError(
                f"Data has {data.ndims} coordinate dimension(s) but the domain "
                f"has {domain.ndims}."
            )

        self.data = data
        self.domain = domain
        self.targetvars: List[str] = targetvars

    def __repr__(self) -> str:
        return f"EstimationProblem(targetvars={self.targetvars}, domain={self.domain!r})"


class EstimationSolution:
    """
    Mean and uncertainty arrays per variable.

    ``solution["z"]`` returns the mean estimate and
    ``solution["z-variance"]`` the uncertainty proxy.
    """

    def __init__(
        self,
        domain: Domain,
        mean: Dict[str, np.ndarray],
        variance: Dict[str, np.ndarray],
    ) -> None:
        if set(mean) != set(variance):
            raise ValueError("mean and variance must describe the same variables.")
        for var in mean:
            for arr in (mean[var], variance[var]):
                if len(arr) != domain.nelms:
                    raise ValueError(
                        f"Result for '{var}' has {len(arr)} entries, "
                        f"domain has {domain.nelms} locations."
                    )
        self.domain = domain
        self.mean = dict(mean)
        self.variance = dict(variance)

    @property
    def variables(self) -> List[str]:
        return list(self.mean)

    def __getitem__(self, name: str) -> np.ndarray:
        if name in self.mean:
            return self.mean[name]
        if name.endswith(VARIANCE_SUFFIX):
            base = name[: -len(VARIANCE_SUFFIX)]
            if base in self.variance:
                return self.variance[base]
        raise KeyError(f"'{name}' not in solution. Variables: {self.variables}.")

    def __contains__(self, name: str) -> bool:
        try:
            self[name]
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self.mean)

    def items(self) -> Iterator[Tuple[str, Tuple[np.ndarray, np.ndarray]]]:
        """Yield ``(variable, (mean, variance))`` pairs."""
        for var in self.mean:
            yield var, (self.mean[var], self.variance[var])

    def as_grid(self, name: str) -> np.ndarray:
        """Reshape a result array to the grid shape (RegularGrid only)."""
        if not isinstance(self.domain, RegularGrid):
            raise TypeError("as_grid() requires a RegularGrid domain.")
        return self.domain.reshape(self[name])

    def to_dataframe(self) -> pd.DataFrame:
        """
        Long table with one row per location.

        Columns: ``x1..xn`` (domain coordinates) followed by ``var`` and
        ``var-variance`` for each variable.
        """
        coords = self.domain.all_coordinates()
        cols = {f"x{i + 1}": coords[:, i] for i in range(coords.shape[1])}
        for var in self.mean:
            cols[var] = self.mean[var]
            cols[var + VARIANCE_SUFFIX] = self.variance[var]
        return pd.DataFrame(cols)

    def __repr__(self) -> str:
        return f"EstimationSolution(variables={self.variables}, domain={self.domain!r})"


__all__ = [
    "VARIANCE_SUFFIX",
    "validate_variables",
    "EstimationProblem",
    "EstimationSolution",
]
