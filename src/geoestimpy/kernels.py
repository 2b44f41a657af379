# SPDX-License-Identifier: MIT
"""
Distance-to-weight kernels.

- :func:`inverse_distance_weights` – raw Shepard weights ``1/d`` used by
  IDW. A zero distance yields an infinite weight; the IDW estimator
  detects that case and short-circuits.
- :func:`gaussian_kernel` – ``exp(-3 δ²)`` on distances normalized by
  the largest neighbor distance (LWR default).
- :func:`inverse_kernel` – ``1 / (1 + d)``.

LWR kernels must be strictly positive and non-increasing in distance.
"""

from __future__ import annotations

from typing import Callable, Dict, Union

import numpy as np

Kernel = Callable[[np.ndarray], np.ndarray]


def inverse_distance_weights(distances) -> np.ndarray:
    """
    Raw inverse distance weights ``1/d``.

    Examples
    --------
    >>> inverse_distance_weights(np.array([1.0, 2.0, 4.0]))
    array([1.  , 0.5 , 0.25])
    """
    d = np.asarray(distances, dtype=float)
    with np.errstate(divide="ignore", over="ignore"):
        return 1.0 / d


def gaussian_kernel(distances) -> np.ndarray:
    """
    Gaussian weights on normalized distances.

    ``δ = d / max(d)`` maps the neighborhood onto ``[0, 1]`` so the
    weights range from 1 (coincident) to ``exp(-3)`` (farthest neighbor).
    If every distance is zero all weights are 1.
    """
    d = np.asarray(distances, dtype=float)
    dmax = d.max() if d.size else 0.0
    delta = d / dmax if dmax > 0 else np.zeros_like(d)
    return np.exp(-3.0 * delta ** 2)


def inverse_kernel(distances) -> np.ndarray:
    """Weights ``1 / (1 + d)``."""
    d = np.asarray(distances, dtype=float)
    return 1.0 / (1.0 + d)


SUPPORTED_KERNELS: Dict[str, Kernel] = {
    "gaussian": gaussian_kernel,
    "inverse": inverse_kernel,
}


def make_kernel(kernel: Union[str, Kernel] = "gaussian") -> Kernel:
    """
    Resolve a kernel name or callable.

    Raises
    ------
    ValueError
        If ``kernel`` is an unknown name.
    """
    if callable(kernel):
        return kernel
    key = str(kernel).lower()
    if key not in SUPPORTED_KERNELS:
        raise ValueError(
            f"Unsupported kernel '{kernel}'. "
            f"Supported kernels are: {sorted(SUPPORTED_KERNELS.keys())}."
        )
    return SUPPORTED_KERNELS[key]


__all__ = [
    "Kernel",
    "inverse_distance_weights",
    "gaussian_kernel",
    "inverse_kernel",
    "SUPPORTED_KERNELS",
    "make_kernel",
]
