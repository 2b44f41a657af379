# tests/test_driver.py

import threading

import numpy as np
import pytest

from geoestimpy import (
    EstimationCancelled,
    EstimationProblem,
    IDW,
    LWR,
    NeighborParams,
    PointSet,
    RegularGrid,
    estimate,
    georef,
    make_estimator,
    solve,
)


def _random_problem(seed=0, n=80):
    rng = np.random.default_rng(seed)
    X = rng.uniform(0.0, 10.0, size=(n, 2))
    z = np.sin(X[:, 0]) + 0.5 * X[:, 1]
    data = georef({"z": z}, X)
    domain = RegularGrid((0.0, 0.0), (10.0, 10.0), dims=(23, 17))
    return EstimationProblem(data, domain, "z")


@pytest.mark.parametrize("solver_cls", [IDW, LWR])
def test_threaded_and_chunked_runs_match_serial(solver_cls):
    problem = _random_problem()
    serial = solver_cls(z={"neighbors": 6}).solve(problem)
    threaded = solver_cls(z={"neighbors": 6}, n_jobs=3, chunk_size=37).solve(problem)

    assert np.allclose(serial["z"], threaded["z"])
    assert np.allclose(serial["z-variance"], threaded["z-variance"])
    assert not np.any(np.isnan(threaded["z"]))


def test_progress_bar_does_not_change_results():
    problem = _random_problem(seed=1)
    plain = IDW(z={"neighbors": 4}).solve(problem)
    shown = IDW(z={"neighbors": 4}, show_progress=True, chunk_size=50).solve(problem)
    assert np.array_equal(plain["z"], shown["z"])


def test_cancel_event_stops_the_loop():
    problem = _random_problem()
    event = threading.Event()
    event.set()

    with pytest.raises(EstimationCancelled):
        IDW().solve(problem, cancel_event=event)


def test_estimate_variable_without_problem():
    X = np.array([[0.0], [1.0], [2.0]])
    z = np.array([0.0, 1.0, 4.0])
    mu, sigma = IDW().estimate_variable(X, z, np.array([[1.0], [0.5]]), NeighborParams(neighbors=2))

    assert mu[0] == 1.0
    assert sigma[0] == 0.0
    assert np.isclose(mu[1], 0.5)
    assert np.isclose(sigma[1], 0.5)


def test_empty_domain_gives_empty_outputs():
    data = georef({"z": [1.0, 2.0]}, [0.0, 1.0])
    sol = IDW().solve(EstimationProblem(data, PointSet(np.empty((0, 1))), "z"))
    assert sol["z"].shape == (0,)


def test_invalid_chunk_size():
    with pytest.raises(ValueError):
        IDW(chunk_size=0)


def test_duplicate_variable_configuration():
    with pytest.raises(ValueError):
        IDW({"z": {"neighbors": 2}}, z={"neighbors": 3})


def test_api_solve_and_estimate():
    problem = _random_problem(seed=2)
    via_api = solve(problem, LWR(z={"neighbors": 8}))
    direct = LWR(z={"neighbors": 8}).solve(problem)
    assert np.allclose(via_api["z"], direct["z"])

    with pytest.raises(TypeError):
        solve(problem, "idw")

    sol = estimate(problem.data, problem.domain, "z", method="lwr", params={"z": {"neighbors": 8}})
    assert np.allclose(sol["z"], direct["z"])


def test_make_estimator():
    assert isinstance(make_estimator("IDW"), IDW)
    lwr = make_estimator("lwr", {"z": {"neighbors": 5}}, kernel="inverse")
    assert isinstance(lwr, LWR)
    assert lwr.params_for("z").neighbors == 5

    with pytest.raises(ValueError):
        make_estimator("kriging")
