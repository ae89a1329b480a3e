import numpy as np
import pytest

from fnt import ConfigurationError, Driver, NumericalError, Status, Vector
from fnt.methods import Bisection


def cubic(x: float) -> float:
    return 3 * x**3 - 5 * x**2 - 6 * x + 5


def make(lower: float, upper: float, x_tol: float = 1e-6, f_tol: float = 1e-5) -> Bisection:
    method = Bisection(1)
    method.hparam_set("lower", lower)
    method.hparam_set("upper", upper)
    method.hparam_set("x_tol", x_tol)
    method.hparam_set("f_tol", f_tol)
    return method


def test_bisection_converges_on_cubic(run):
    method = make(2.0, 3.0)
    run(method, lambda x: cubic(x[0]))
    root = method.result("root")
    assert 2.0 < root < 3.0
    assert abs(cubic(root)) < 1e-5
    assert method.result("upper") - method.result("lower") < 1e-6


def test_bootstrap_evaluates_bounds_then_midpoints():
    method = make(2.0, 3.0)
    x = method.next()
    assert x[0] == 2.0
    method.value(x, cubic(2.0))
    x = method.next()
    assert x[0] == 3.0
    method.value(x, cubic(3.0))
    assert method.next()[0] == pytest.approx(2.5)


def test_bounds_in_either_sign_order(run):
    method = make(0.0, 1.0)
    run(method, lambda x: 0.3 - x[0])
    assert method.result("root") == pytest.approx(0.3, abs=1e-6)


def test_same_sign_bounds_fail_permanently():
    method = make(3.0, 4.0)
    x = method.next()
    method.value(x, cubic(x[0]))
    x = method.next()
    with pytest.raises(NumericalError):
        method.value(x, cubic(x[0]))
    assert method.failed
    with pytest.raises(NumericalError):
        method.next()
    with pytest.raises(NumericalError):
        method.done()
    with pytest.raises(NumericalError):
        method.hparam_get("lower")


def test_same_sign_bounds_fail_through_driver():
    drv = Driver.open()
    assert drv.select_method("bisection", 1) is Status.SUCCESS
    drv.hparam_set("lower", 3.0)
    drv.hparam_set("upper", 4.0)
    x = Vector.allocate(1)
    assert drv.next(x) is Status.SUCCESS
    assert drv.set_value(x, cubic(x[0])) is Status.SUCCESS
    assert drv.next(x) is Status.SUCCESS
    assert drv.set_value(x, cubic(x[0])) is Status.FAILURE
    assert drv.is_done() is Status.FAILURE
    assert drv.next(x) is Status.FAILURE
    assert drv.set_value(x, 0.0) is Status.FAILURE
    assert drv.result("root")[0] is Status.FAILURE


def test_exact_zero_at_bound_finishes():
    method = make(1.0, 5.0)
    x = method.next()
    method.value(x, x[0] - 1.0)
    assert method.done()
    assert method.result("root") == 1.0


def test_exact_zero_while_running_finishes():
    method = make(0.0, 4.0)
    for fx in (-2.0, 2.0):
        method.value(method.next(), fx)
    x = method.next()
    assert x[0] == 2.0
    method.value(x, 0.0)
    assert method.done()
    assert method.result("root") == 2.0


def test_nan_report_is_rejected_without_changing_state():
    method = make(2.0, 3.0)
    for _ in range(2):
        x = method.next()
        method.value(x, cubic(x[0]))
    x = method.next()
    with pytest.raises(ConfigurationError):
        method.value(x, np.nan)
    assert not method.failed
    assert method.next()[0] == x[0]
    method.value(x, cubic(x[0]))


def test_rejects_more_than_one_dimension():
    with pytest.raises(ConfigurationError):
        Bisection(2)


def test_tolerances_must_be_positive():
    method = Bisection(1)
    with pytest.raises(ConfigurationError):
        method.hparam_set("x_tol", 0.0)
