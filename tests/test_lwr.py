# tests/test_lwr.py

import logging

import numpy as np
import pytest

from geoestimpy import (
    EstimationProblem,
    Haversine,
    LWR,
    NumericalDegeneracyError,
    PointSet,
    RegularGrid,
    georef,
)
from geoestimpy.metrics import mae


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _noisy_parabola(n=100, seed=2017):
    """y = x^2 plus noise growing along x, on n points in [0, 1]."""
    rng = np.random.default_rng(seed)
    x = np.linspace(0.0, 1.0, n)
    y = x ** 2 + np.arange(1, n + 1) / 1000.0 * rng.standard_normal(n)
    return x, y


def _collinear_problem():
    data = georef({"z": [0.0, 1.0, 2.0, 3.0]}, [[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
    return EstimationProblem(data, PointSet([[1.5, 1.0]]), "z")


# ----------------------------------------------------------------------
# Scenarios
# ----------------------------------------------------------------------


def test_1d_regression_tracks_parabola():
    x, y = _noisy_parabola()
    data = georef({"y": y}, x.reshape(1, -1))
    problem = EstimationProblem(data, RegularGrid((0.0,), (1.0,), dims=(100,)), "y")

    sol = LWR(y={"neighbors": 10}).solve(problem)

    yhat = sol["y"]
    yvar = sol["y-variance"]
    assert yhat.shape == (100,)
    assert np.all(np.isfinite(yhat))
    assert np.all(yvar >= 0.0)
    assert mae(x ** 2, yhat) < 0.05


def test_linear_field_is_reproduced_exactly():
    rng = np.random.default_rng(3)
    X = rng.uniform(-5.0, 5.0, size=(40, 2))
    z = 2.0 + 3.0 * X[:, 0] - X[:, 1]
    Q = rng.uniform(-4.0, 4.0, size=(25, 2))

    data = georef({"z": z}, X)
    sol = LWR(z={"neighbors": 8}).solve(EstimationProblem(data, PointSet(Q), "z"))

    assert np.allclose(sol["z"], 2.0 + 3.0 * Q[:, 0] - Q[:, 1], atol=1e-8)
    assert np.allclose(sol["z-variance"], 0.0, atol=1e-12)


@pytest.mark.parametrize("k", [3, 4])
def test_four_samples_grid(k):
    coords = np.array([[25.0, 25.0], [50.0, 75.0], [75.0, 50.0], [75.0, 25.0]])
    values = [1.0, 0.0, 1.0, 0.0]
    data = georef({"y": values}, coords.T)
    problem = EstimationProblem(data, RegularGrid(100, 100), "y")

    sol = LWR(y={"neighbors": k}).solve(problem)
    mu = sol["y"]
    sigma = sol["y-variance"]

    assert mu.shape == (10000,)
    assert np.all(np.isfinite(mu))
    assert np.all(sigma >= 0.0)

    if k == 3:
        # three non-collinear neighbors: the local plane interpolates them
        for (i, j), v in zip(coords.astype(int), values):
            assert np.isclose(mu[i + 100 * j], v, atol=1e-8)


def test_constant_field():
    rng = np.random.default_rng(11)
    X = rng.uniform(0.0, 1.0, size=(30, 2))
    data = georef({"c": np.full(30, 4.2)}, X)
    problem = EstimationProblem(data, RegularGrid((0.0, 0.0), (1.0, 1.0), dims=(5, 5)), "c")

    for kernel in ("gaussian", "inverse"):
        sol = LWR(c={"neighbors": 10}, kernel=kernel).solve(problem)
        assert np.allclose(sol["c"], 4.2)
        assert np.allclose(sol["c-variance"], 0.0, atol=1e-20)


def test_haversine_distance_runs_on_ball_tree():
    rng = np.random.default_rng(5)
    lon = rng.uniform(0.0, 360.0, size=60)
    lat = rng.uniform(-80.0, 80.0, size=60)
    z = np.cos(np.radians(lat))
    data = georef({"z": z}, np.vstack([lon, lat]))
    domain = RegularGrid((1.0, -89.0), (359.0, 89.0), dims=(18, 9))

    sol = LWR(z={"neighbors": 20, "distance": Haversine(6371.0)}).solve(
        EstimationProblem(data, domain, "z")
    )
    assert np.all(np.isfinite(sol["z"]))
    assert np.all(sol["z-variance"] >= 0.0)


# ----------------------------------------------------------------------
# Degenerate neighborhoods
# ----------------------------------------------------------------------


def test_collinear_neighbors_raise():
    with pytest.raises(NumericalDegeneracyError):
        LWR(z={"neighbors": 3}).solve(_collinear_problem())


def test_collinear_neighbors_fall_back_to_local_mean(caplog):
    with caplog.at_level(logging.WARNING, logger="geoestimpy"):
        sol = LWR(z={"neighbors": 3}, on_degenerate="mean").solve(_collinear_problem())

    assert 0.0 <= sol["z"][0] <= 3.0
    assert sol["z-variance"][0] >= 0.0
    assert any("fallback" in rec.getMessage() for rec in caplog.records)


def test_too_few_neighbors_for_the_fit():
    data = georef({"z": [0.0, 1.0, 2.0]}, [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    problem = EstimationProblem(data, PointSet([[0.2, 0.2]]), "z")

    with pytest.raises(NumericalDegeneracyError):
        LWR(z={"neighbors": 2}).solve(problem)

    sol = LWR(z={"neighbors": 2}, on_degenerate="mean").solve(problem)
    assert 0.0 <= sol["z"][0] <= 2.0


# ----------------------------------------------------------------------
# Options
# ----------------------------------------------------------------------


def test_invalid_options():
    with pytest.raises(ValueError):
        LWR(kernel="triangular")
    with pytest.raises(ValueError):
        LWR(on_degenerate="ignore")
    with pytest.raises(ValueError):
        LWR(rcond=0.0)


def test_kernel_must_return_positive_weights():
    problem = _collinear_problem()
    with pytest.raises(ValueError):
        LWR(z={"neighbors": 3}, kernel=lambda d: np.zeros_like(d)).solve(problem)


def test_flat_kernel_fallback_is_plain_neighbor_mean():
    sol = LWR(
        z={"neighbors": 4},
        kernel=lambda d: np.ones_like(d),
        on_degenerate="mean",
    ).solve(_collinear_problem())

    assert np.isclose(sol["z"][0], 1.5)
    assert np.isclose(sol["z-variance"][0], 1.25)
