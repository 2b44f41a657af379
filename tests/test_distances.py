# tests/test_distances.py

import numpy as np
import pytest

from geoestimpy.distances import (
    Chebyshev,
    Cityblock,
    CustomDistance,
    Euclidean,
    Haversine,
    Minkowski,
    get_distance,
    haversine_distance,
)


def test_haversine_distance_zero_and_symmetry():
    lat = np.array([0.0])
    lon = np.array([0.0])

    d0 = haversine_distance(lat, lon, lat, lon)
    assert d0.shape == (1,)
    assert d0[0] == 0.0

    dab = haversine_distance(np.array([0.0]), np.array([0.0]), np.array([0.0]), np.array([1.0]))[0]
    dba = haversine_distance(np.array([0.0]), np.array([1.0]), np.array([0.0]), np.array([0.0]))[0]
    assert np.isclose(dab, dba)

    # Rough magnitude: 1 degree lon at equator ~ 111 km
    assert np.isclose(dab, 111.0, atol=2.0)


def test_minkowski_family_membership():
    for metric in (Euclidean(), Cityblock(), Chebyshev(), Minkowski(3)):
        assert metric.is_minkowski
    for metric in (Haversine(), CustomDistance(lambda u, v: float(np.abs(u - v).sum()))):
        assert not metric.is_minkowski


def test_pairwise_values():
    a = np.array([[0.0, 0.0]])
    b = np.array([[3.0, 4.0], [1.0, 0.0]])

    assert np.allclose(Euclidean().pairwise(a, b), [[5.0, 1.0]])
    assert np.allclose(Cityblock().pairwise(a, b), [[7.0, 1.0]])
    assert np.allclose(Chebyshev().pairwise(a, b), [[4.0, 1.0]])
    assert np.allclose(Minkowski(3).pairwise(a, b), [[(27.0 + 64.0) ** (1.0 / 3.0), 1.0]])
    assert np.isclose(Euclidean()([0.0, 0.0], [3.0, 4.0]), 5.0)


def test_haversine_metric_uses_lon_lat_order_and_radius():
    # (lon, lat): 1 degree of longitude on the equator
    d_km = Haversine()([0.0, 0.0], [1.0, 0.0])
    d_unit = Haversine(1.0)([0.0, 0.0], [1.0, 0.0])
    assert np.isclose(d_km, 111.19, atol=0.1)
    assert np.isclose(d_unit, np.radians(1.0))

    # Longitude wraps around: 359 and 1 degrees are 2 degrees apart
    assert np.isclose(Haversine(1.0)([359.0, 0.0], [1.0, 0.0]), np.radians(2.0))


def test_haversine_transform_requires_2d():
    with pytest.raises(ValueError):
        Haversine().transform(np.zeros((3, 3)))


def test_custom_distance_pairwise():
    metric = CustomDistance(lambda u, v: float(np.max(np.abs(u - v))))
    out = metric.pairwise([[0.0, 0.0], [1.0, 1.0]], [[2.0, 0.5]])
    assert np.allclose(out, [[2.0], [1.0]])
    name, kwargs = metric.tree_metric()
    assert name == "pyfunc"
    assert kwargs["func"] is metric.func


def test_get_distance_resolution():
    assert isinstance(get_distance(None), Euclidean)
    assert isinstance(get_distance("Manhattan"), Cityblock)
    assert isinstance(get_distance("haversine"), Haversine)
    h = Haversine(10.0)
    assert get_distance(h) is h
    assert isinstance(get_distance(lambda u, v: 0.0), CustomDistance)

    with pytest.raises(ValueError):
        get_distance("not-a-metric")
    with pytest.raises(TypeError):
        get_distance(3.5)


def test_invalid_parameters():
    with pytest.raises(ValueError):
        Minkowski(0.5)
    with pytest.raises(ValueError):
        Haversine(-1.0)


def test_equality():
    assert Euclidean() == Euclidean()
    assert Minkowski(3) == Minkowski(3)
    assert Minkowski(3) != Minkowski(4)
    assert Haversine(1.0) != Haversine(2.0)
