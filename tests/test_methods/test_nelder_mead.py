import numpy as np
import pytest

from fnt import ConfigurationError
from fnt.methods import NelderMead
from fnt.methods.nelder_mead import State
from fnt.problems import rosenbrock


def test_rosenbrock_from_origin(run):
    method = NelderMead(2)
    method.seed(np.zeros(2))
    method.hparam_set("tolerance", 1e-6)
    method.hparam_set("max_iterations", 5000)
    run(method, rosenbrock)
    assert method.iterations <= 5000
    x = method.result("minimum x")
    assert np.linalg.norm(x - np.ones(2)) < 1e-3
    assert method.result("minimum f") < 1e-4


def test_sphere_three_dimensions(run):
    method = NelderMead(3)
    method.seed(np.array([1.0, -2.0, 0.5]))
    method.hparam_set("tolerance", 1e-7)
    method.hparam_set("max_iterations", 5000)
    run(method, lambda x: float(x @ x))
    assert np.allclose(method.result("minimum x"), 0.0, atol=1e-4)


def test_initial_simplex_from_seed_and_step():
    method = NelderMead(2)
    method.seed(np.array([1.0, 1.0]))
    method.hparam_set("step", 0.5)
    points = []
    for _ in range(3):
        x = method.next()
        points.append(x.values.copy())
        method.value(x, 0.0)
    assert np.allclose(points, [[1.0, 1.0], [1.5, 1.0], [1.0, 1.5]])


def test_reflect_then_inside_contraction():
    method = NelderMead(1)
    values = {0.0: 0.0, 1.0: 1.0, -1.0: 1.0, 0.5: 0.25}
    for expected in (0.0, 1.0, -1.0, 0.5):
        x = method.next()
        assert x[0] == pytest.approx(expected)
        method.value(x, values[expected])
        if expected == -1.0:
            assert method.state is State.CONTRACT_IN
    assert method.state is State.REFLECT
    assert sorted(method.simplex[:, 0].tolist()) == [0.0, 0.5]


def test_failed_contraction_shrinks_towards_best():
    method = NelderMead(1)
    values = {0.0: 0.0, 1.0: 1.0, -1.0: 5.0}
    for point in (0.0, 1.0, -1.0):
        method.value(method.next(), values[point])
    assert method.state is State.CONTRACT_IN
    x = method.next()
    assert x[0] == pytest.approx(0.5)
    method.value(x, 2.0)
    assert method.state is State.SHRINK
    x = method.next()
    assert x[0] == pytest.approx(0.5)
    method.value(x, 2.0)
    assert method.state is State.REFLECT
    assert method.simplex[0, 0] == 0.0
    assert method.simplex[1, 0] == pytest.approx(0.5)


def test_shrink_visits_every_non_best_vertex():
    method = NelderMead(2)
    # Vertices (0,0), (1,0), (0,1) with the origin best.
    for fx in (0.0, 1.0, 2.0):
        method.value(method.next(), fx)
    method.value(method.next(), 10.0)  # reflection worse than worst
    assert method.state is State.CONTRACT_IN
    method.value(method.next(), 10.0)  # contraction rejected
    assert method.state is State.SHRINK
    first = method.next()
    assert np.allclose(first.values, [0.0, 0.5])
    method.value(first, 0.5)
    assert method.state is State.SHRINK2
    second = method.next()
    assert np.allclose(second.values, [0.5, 0.0])
    method.value(second, 0.25)
    assert method.state is State.REFLECT
    assert np.allclose(method.fvals, [0.0, 0.25, 0.5])


def test_expansion_accepted_when_better():
    method = NelderMead(1)
    method.value(method.next(), 1.0)  # x = 0
    method.value(method.next(), 2.0)  # x = 1
    x = method.next()
    assert x[0] == pytest.approx(-1.0)
    method.value(x, 0.5)
    assert method.state is State.EXPAND
    x = method.next()
    assert x[0] == pytest.approx(-2.0)
    method.value(x, 0.1)
    assert method.state is State.REFLECT
    assert method.simplex[0, 0] == pytest.approx(-2.0)


def test_iteration_cap_stops_search(run):
    method = NelderMead(2)
    method.hparam_set("max_iterations", 10)
    evals = run(method, rosenbrock)
    assert evals == 11
    assert method.done()


def test_dist_threshold_alias():
    method = NelderMead(2)
    method.hparam_set("dist_threshold", 1e-3)
    assert method.hparam_get("tolerance") == 1e-3


def test_invalid_coefficients_rejected():
    method = NelderMead(2)
    with pytest.raises(ConfigurationError):
        method.hparam_set("beta", 1.5)
    with pytest.raises(ConfigurationError):
        method.hparam_set("alpha", -1.0)
