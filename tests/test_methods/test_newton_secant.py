import numpy as np
import pytest

from fnt import ConfigurationError, NumericalError, SequenceError
from fnt.methods import NewtonRaphson, Secant


def cubic(x: np.ndarray) -> float:
    return float(3 * x[0] ** 3 - 5 * x[0] ** 2 - 6 * x[0] + 5)


def cubic_prime(x: np.ndarray) -> np.ndarray:
    return np.array([9 * x[0] ** 2 - 10 * x[0] - 6])


def cubic_root_in(lo: float, hi: float) -> float:
    roots = np.roots([3.0, -5.0, -6.0, 5.0])
    real = roots[np.isreal(roots)].real
    return float(real[(real > lo) & (real < hi)][0])


def test_newton_and_secant_find_the_same_root(run):
    newton = NewtonRaphson(1)
    newton.hparam_set("x_0", 2.5)
    newton_evals = run(newton, cubic, grad=cubic_prime)

    secant = Secant(1)
    secant.hparam_set("x_0", 2.5)
    secant.hparam_set("x_1", 2.4)
    secant_evals = run(secant, cubic)

    expected = cubic_root_in(2.0, 3.0)
    assert newton.result("root") == pytest.approx(expected, abs=1e-6)
    assert secant.result("root") == pytest.approx(expected, abs=1e-6)
    assert newton_evals < secant_evals


def test_newton_requires_gradient():
    method = NewtonRaphson(1)
    x = method.next()
    with pytest.raises(ConfigurationError):
        method.value(x, cubic(x))
    assert not method.failed
    method.value_gradient(x, cubic(x), cubic_prime(x))
    assert method.evaluations == 1


def test_newton_vanishing_derivative_is_sticky():
    method = NewtonRaphson(1)
    x = method.next()
    assert x[0] == 0.0
    with pytest.raises(NumericalError):
        method.value_gradient(x, 1.0, np.array([0.0]))
    with pytest.raises(NumericalError):
        method.next()
    with pytest.raises(NumericalError):
        method.done()


def test_newton_seed_sets_start():
    method = NewtonRaphson(1)
    method.seed(np.array([1.75]))
    assert method.hparam_get("x_0") == 1.75
    assert method.next()[0] == 1.75
    with pytest.raises(SequenceError):
        method.seed(np.array([0.0]))


def test_value_on_seeded_start_without_next():
    method = NewtonRaphson(1)
    method.seed(np.array([2.5]))
    x = np.array([2.5])
    method.value_gradient(x, cubic(x), cubic_prime(x))
    assert method.next()[0] == pytest.approx(2.5 - cubic(x) / cubic_prime(x)[0])


def test_secant_flat_function_is_sticky():
    method = Secant(1)
    method.value(method.next(), 1.0)
    x = method.next()
    with pytest.raises(NumericalError):
        method.value(x, 1.0)
    with pytest.raises(NumericalError):
        method.next()


def test_secant_step_formula():
    method = Secant(1)
    method.hparam_set("x_0", 1.0)
    method.hparam_set("x_1", 2.0)
    # f(x) = x^2 - 2: f(1) = -1, f(2) = 2
    method.value(method.next(), -1.0)
    method.value(method.next(), 2.0)
    assert method.next()[0] == pytest.approx(2.0 - 2.0 * (2.0 - 1.0) / (2.0 - -1.0))


def test_secant_accepts_gradient_reports(run):
    method = Secant(1)
    method.hparam_set("x_0", 2.5)
    method.hparam_set("x_1", 2.4)
    run(method, cubic, grad=cubic_prime)
    assert abs(cubic(np.array([method.result("root")]))) < 1e-6
