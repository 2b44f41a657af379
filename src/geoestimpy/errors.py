# SPDX-License-Identifier: MIT
"""
geoestimpy.errors
=================

Exception taxonomy for the estimation routines.

Every error derives from :class:`EstimationError`, itself a
:class:`ValueError`, so callers that already guard against bad input with
``except ValueError`` keep working.
"""

from __future__ import annotations


class EstimationError(ValueError):
    """Base class for all estimation failures."""


class EmptySampleSetError(EstimationError):
    """A target variable has no non-missing observations."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(
            f"Estimation requires data: variable '{variable}' has no "
            f"non-missing observations."
        )


class NeighborCountError(EstimationError):
    """The configured number of neighbors exceeds the available samples."""

    def __init__(self, neighbors: int, nsamples: int, variable: str | None = None):
        self.neighbors = int(neighbors)
        self.nsamples = int(nsamples)
        self.variable = variable
        where = f" for variable '{variable}'" if variable is not None else ""
        super().__init__(
            f"Number of neighbors ({self.neighbors}) must be smaller or equal "
            f"to the number of data points ({self.nsamples}){where}."
        )


class NumericalDegeneracyError(EstimationError):
    """The local regression system is singular or ill-conditioned."""


class EstimationCancelled(EstimationError):
    """Raised when a cancellation event is set during the location loop."""


__all__ = [
    "EstimationError",
    "EmptySampleSetError",
    "NeighborCountError",
    "NumericalDegeneracyError",
    "EstimationCancelled",
]
