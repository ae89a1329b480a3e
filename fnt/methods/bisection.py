"""Bisection root-finding on a sign-changing bracket."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError, NumericalError
from .base import HParam, Method, positive


class State(Enum):
    INITIAL = "initial"
    INITIAL2 = "initial2"
    RUNNING = "running"
    DONE = "done"


class Bisection(Method):
    """Halve ``[a, b]`` keeping ``f(a) < 0 < f(b)`` until the bracket is small.

    The first two evaluations are the configured bounds. The bound with the
    smaller value becomes ``a``; if both values share a sign the instance
    fails permanently.
    """

    name = "bisection"
    description = "root finding by repeated halving of a bracket"
    fixed_dimensions = 1
    hparams = (
        HParam("lower", "float", -1e6, "first bracket end"),
        HParam("upper", "float", 1e6, "second bracket end"),
        HParam("x_tol", "float", 1e-6, "stop when |b - a| falls below"),
        HParam("f_tol", "float", 1e-6, "stop when |f(b) - f(a)| falls below"),
    )
    results = ("root", "lower", "upper")

    _check_hparam = positive("x_tol", "f_tol")

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.INITIAL
        self.a: Optional[float] = None
        self.b: Optional[float] = None
        self.fa: Optional[float] = None
        self.fb: Optional[float] = None
        self.root: Optional[float] = None

    def _propose(self) -> np.ndarray:
        if self.state is State.INITIAL:
            return np.array([self.param("lower")])
        if self.state is State.INITIAL2:
            return np.array([self.param("upper")])
        return np.array([0.5 * (self.a + self.b)])

    def _update(self, x: np.ndarray, fx: float) -> None:
        if np.isnan(fx):
            raise ConfigurationError(f"{self.name}: reported value is NaN.")
        x0 = float(x[0])
        if self.state is State.INITIAL:
            self.a, self.fa = x0, fx
            if fx == 0.0:
                self.root = x0
                self.state = State.DONE
            else:
                self.state = State.INITIAL2
        elif self.state is State.INITIAL2:
            self.b, self.fb = x0, fx
            if fx == 0.0:
                self.root = x0
                self.state = State.DONE
                return
            if self.fa > self.fb:
                self.a, self.b = self.b, self.a
                self.fa, self.fb = self.fb, self.fa
            if self.fa > 0.0 or self.fb < 0.0:
                raise NumericalError(
                    f"{self.name}: f({self.a}) = {self.fa} and f({self.b}) = {self.fb} "
                    "do not bracket a root."
                )
            self.state = State.RUNNING
        else:
            if fx < 0.0:
                self.a, self.fa = x0, fx
            elif fx > 0.0:
                self.b, self.fb = x0, fx
            else:
                self.root = x0
                self.state = State.DONE
            self.log.debug("%s: bracket [%g, %g]", self.name, self.a, self.b)

    def _is_done(self) -> bool:
        if self.state is State.DONE:
            return True
        if self.state is not State.RUNNING:
            return False
        return (
            abs(self.b - self.a) < self.param("x_tol")
            or abs(self.fb - self.fa) < self.param("f_tol")
        )

    def _finish(self) -> None:
        if self.root is None:
            self.root = 0.5 * (self.a + self.b)
        self.state = State.DONE

    def _result_values(self):
        ends = [v for v in (self.a, self.b) if v is not None] or [self.root]
        return {"root": self.root, "lower": min(ends), "upper": max(ends)}
