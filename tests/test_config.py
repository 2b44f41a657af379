# tests/test_config.py

import pytest

from geoestimpy.config import NeighborParams, normalize_params, resolve_params
from geoestimpy.distances import Euclidean, Haversine


def test_defaults():
    p = NeighborParams()
    assert p.neighbors is None
    assert p.distance == Euclidean()
    assert p.resolve_neighbors(17) == 17


def test_all_is_none_and_strings_resolve_to_distances():
    p = NeighborParams(neighbors="all", distance="haversine")
    assert p.neighbors is None
    assert isinstance(p.distance, Haversine)


def test_neighbors_must_be_positive_integer():
    for bad in (0, -3, 2.5, "some", True):
        with pytest.raises(ValueError):
            NeighborParams(neighbors=bad)
    assert NeighborParams(neighbors=3.0).neighbors == 3


def test_from_value_rejects_unknown_options():
    with pytest.raises(ValueError):
        NeighborParams.from_value({"neighbours": 3})
    with pytest.raises(TypeError):
        NeighborParams.from_value(42)


def test_normalize_params_expands_tuple_keys():
    params = normalize_params({("a", "b"): {"neighbors": 5}, "c": None})
    assert set(params) == {"a", "b", "c"}
    assert params["a"].neighbors == 5
    assert params["b"] is params["a"]
    assert params["c"] == NeighborParams()

    assert resolve_params(params, "missing") == NeighborParams()


def test_normalize_params_rejects_duplicates():
    with pytest.raises(ValueError):
        normalize_params({("a", "b"): {}, "a": {}})
