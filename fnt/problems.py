"""Standard test objectives for minimizers.

All functions take a 1-D array and return a float, matching
:class:`fnt.core.Problem`.

References:
    - M. Jamil and X.-S. Yang, "A literature survey of benchmark functions
      for global optimization problems", *Int. J. Math. Model. Numer.
      Optim.* 4(2), 2013.
"""

from __future__ import annotations

import numpy as np

from .core import Array, Problem


def rastrigin(x: Array, A: float = 10.0) -> float:
    """``A n + sum(x_i^2 - A cos(2 pi x_i))``; global minimum 0 at the origin."""
    x = np.asarray(x, dtype=float)
    return float(A * x.size + np.sum(x**2 - A * np.cos(2.0 * np.pi * x)))


def ackley(x: Array) -> float:
    """Two-dimensional Ackley function; global minimum 0 at the origin."""
    x = np.asarray(x, dtype=float)
    if x.size != 2:
        raise ValueError("ackley is defined for two variables.")
    a, b = x
    term1 = -20.0 * np.exp(-0.2 * np.sqrt(0.5 * (a**2 + b**2)))
    term2 = -np.exp(0.5 * (np.cos(2.0 * np.pi * a) + np.cos(2.0 * np.pi * b)))
    return float(term1 + term2 + np.e + 20.0)


def rosenbrock(x: Array) -> float:
    """``sum(100 (x_{i+1} - x_i^2)^2 + (1 - x_i)^2)``; minimum 0 at all ones."""
    x = np.asarray(x, dtype=float)
    return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))


def rosenbrock_grad(x: Array) -> Array:
    x = np.asarray(x, dtype=float)
    grad = np.zeros_like(x)
    diff = x[1:] - x[:-1] ** 2
    grad[:-1] += -400.0 * x[:-1] * diff - 2.0 * (1.0 - x[:-1])
    grad[1:] += 200.0 * diff
    return grad


def sphere(x: Array) -> float:
    x = np.asarray(x, dtype=float)
    return float(x @ x)


def sphere_grad(x: Array) -> Array:
    return 2.0 * np.asarray(x, dtype=float)


PROBLEMS = {
    "rastrigin": Problem(fun=rastrigin),
    "ackley": Problem(fun=ackley, dim=2),
    "rosenbrock": Problem(fun=rosenbrock, grad=rosenbrock_grad),
    "sphere": Problem(fun=sphere, grad=sphere_grad),
}


__all__ = [
    "PROBLEMS",
    "ackley",
    "rastrigin",
    "rosenbrock",
    "rosenbrock_grad",
    "sphere",
    "sphere_grad",
]
