# src/geoestimpy/estimators/__init__.py
from __future__ import annotations

from typing import Any, Dict, Optional, Type

from .base import Estimator
from .idw import IDW
from .lwr import LWR

SUPPORTED_ESTIMATORS: Dict[str, Type[Estimator]] = {
    "idw": IDW,
    "lwr": LWR,
}


def make_estimator(kind: str = "idw", params: Optional[Dict[str, Any]] = None, **kwargs) -> Estimator:
    """
    Create an estimator by name (case-insensitive).

    ``params`` is the per-variable mapping, ``kwargs`` the estimator
    options (``n_jobs``, ``kernel`` for LWR, ...).
    """
    key = (kind or "idw").lower()
    if key not in SUPPORTED_ESTIMATORS:
        raise ValueError(
            f"Unsupported estimator '{kind}'. "
            f"Supported estimators are: {sorted(SUPPORTED_ESTIMATORS.keys())}."
        )
    return SUPPORTED_ESTIMATORS[key](params, **kwargs)


__all__ = [
    "Estimator",
    "IDW",
    "LWR",
    "SUPPORTED_ESTIMATORS",
    "make_estimator",
]
