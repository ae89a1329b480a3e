import numpy as np
import pytest

from fnt import ConfigurationError, NumericalError, SequenceError
from fnt.methods import Bisection, BrentDekker, BrentLocalMin


def cubic(x: np.ndarray) -> float:
    return float(3 * x[0] ** 3 - 5 * x[0] ** 2 - 6 * x[0] + 5)


def configure(method, **hparams):
    for key, value in hparams.items():
        method.hparam_set(key, value)
    return method


def test_brent_dekker_root_of_cubic(run):
    method = configure(BrentDekker(1), lower=2.0, upper=3.0, t=1e-10)
    evals = run(method, cubic)
    roots = np.roots([3.0, -5.0, -6.0, 5.0])
    expected = [r.real for r in roots if abs(r.imag) < 1e-12 and 2.0 < r.real < 3.0][0]
    assert method.result("root") == pytest.approx(expected, abs=1e-8)
    assert evals < 20


def test_brent_dekker_beats_bisection(run):
    def fun(x):
        return float(np.cos(x[0]) - x[0])

    brent = configure(BrentDekker(1), lower=0.0, upper=1.0, t=1e-9)
    bisect = configure(Bisection(1), lower=0.0, upper=1.0, x_tol=1e-9, f_tol=1e-12)
    brent_evals = run(brent, fun)
    bisect_evals = run(bisect, fun)
    assert brent.result("root") == pytest.approx(0.7390851332, abs=1e-8)
    assert brent_evals < bisect_evals


def test_brent_dekker_steps_stay_inside_bracket():
    method = configure(BrentDekker(1), lower=-1.0, upper=4.0)
    seen = []
    while not method.done():
        x = method.next()
        seen.append(x[0])
        method.value(x, float(np.tanh(x[0] - 1.2)))
    assert all(-1.0 <= s <= 4.0 for s in seen)
    assert method.result("root") == pytest.approx(1.2, abs=1e-5)


def test_brent_dekker_same_sign_is_sticky():
    method = configure(BrentDekker(1), lower=3.0, upper=4.0)
    method.value(method.next(), 23.0)
    x = method.next()
    with pytest.raises(NumericalError):
        method.value(x, 93.0)
    with pytest.raises(NumericalError):
        method.next()


def test_brent_dekker_exact_zero_at_bound():
    method = configure(BrentDekker(1), lower=0.0, upper=2.0)
    method.value(method.next(), -1.0)
    method.value(method.next(), 0.0)
    assert method.done()
    assert method.result("root") == 2.0


def test_localmin_quadratic(run):
    method = configure(BrentLocalMin(1), lower=0.0, upper=1.0)
    run(method, lambda x: float((x[0] - 0.3) ** 2 + 1.0))
    assert method.result("minimum x")[0] == pytest.approx(0.3, abs=1e-6)
    assert method.result("minimum f") == pytest.approx(1.0)


def test_localmin_quartic(run):
    method = configure(BrentLocalMin(1), lower=0.0, upper=2.0)
    run(method, lambda x: float(x[0] ** 4 - 3.0 * x[0]))
    assert method.result("minimum x")[0] == pytest.approx(0.75 ** (1.0 / 3.0), abs=1e-5)


def test_localmin_first_point_is_golden_section():
    method = configure(BrentLocalMin(1), lower=0.0, upper=1.0)
    assert method.next()[0] == pytest.approx((3.0 - np.sqrt(5.0)) / 2.0)


def test_localmin_interval_fixed_once_started():
    method = configure(BrentLocalMin(1), lower=0.0, upper=1.0)
    method.next()
    with pytest.raises(SequenceError):
        method.hparam_set("upper", 5.0)
    assert method.hparam_get("upper") == 1.0
