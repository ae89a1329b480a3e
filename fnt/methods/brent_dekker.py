"""Brent-Dekker root finding.

Combines bisection, the secant rule and inverse quadratic interpolation
while always keeping a sign-changing bracket ``[b, c]``. The step is
rejected in favour of bisection whenever interpolation would not shrink
the bracket fast enough, so convergence is never slower than bisection.

References:
    - R. P. Brent, *Algorithms for Minimization without Derivatives*,
      Prentice-Hall (1973), chapter 4, procedure ``zero``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError, NumericalError
from .base import HParam, Method, positive


class State(Enum):
    INITIAL = "initial"
    INITIAL2 = "initial2"
    STARTING = "starting"
    RUNNING = "running"
    DONE = "done"


class BrentDekker(Method):
    name = "brent-dekker"
    description = "bracketed root finding with interpolation safeguards"
    fixed_dimensions = 1
    hparams = (
        HParam("lower", "float", -1e6, "first bracket end"),
        HParam("upper", "float", 1e6, "second bracket end"),
        HParam("t", "float", 1e-6, "absolute tolerance"),
        HParam("macheps", "float", float(np.finfo(float).eps), "relative machine precision"),
    )
    results = ("root",)

    _check_hparam = positive("t", "macheps")

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.INITIAL
        self.a = self.b = self.c = 0.0
        self.fa = self.fb = self.fc = 0.0
        self.d = self.e = 0.0
        self.tol = self.m = 0.0
        self.candidate: Optional[float] = None
        self.root: Optional[float] = None

    def _propose(self) -> np.ndarray:
        if self.state is State.INITIAL:
            return np.array([self.param("lower")])
        if self.state is State.INITIAL2:
            return np.array([self.param("upper")])
        return np.array([self.candidate])

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
            return

        if self.state is State.INITIAL2:
            self.b, self.fb = x0, fx
            if fx == 0.0:
                self.root = x0
                self.state = State.DONE
                return
            if (self.fa > 0.0) == (self.fb > 0.0):
                raise NumericalError(
                    f"{self.name}: f({self.a}) = {self.fa} and f({self.b}) = {self.fb} "
                    "do not bracket a root."
                )
            self._interval()
            self.state = State.STARTING
        else:
            self.a, self.fa = self.b, self.fb
            self.b, self.fb = x0, fx
            if (self.fb > 0.0) == (self.fc > 0.0):
                self._interval()
            self.state = State.RUNNING
        self._step()

    def _interval(self) -> None:
        self.c, self.fc = self.a, self.fa
        self.d = self.e = self.b - self.a

    def _step(self) -> None:
        """Reorder so ``b`` is the best point, then choose the next candidate."""
        if abs(self.fc) < abs(self.fb):
            self.a, self.b, self.c = self.b, self.c, self.b
            self.fa, self.fb, self.fc = self.fb, self.fc, self.fb

        self.tol = 2.0 * self.param("macheps") * abs(self.b) + self.param("t")
        self.m = 0.5 * (self.c - self.b)
        if abs(self.m) <= self.tol or self.fb == 0.0:
            self.candidate = None
            return

        if abs(self.e) < self.tol or abs(self.fa) <= abs(self.fb):
            self.d = self.e = self.m
        else:
            s = self.fb / self.fa
            if self.a == self.c:
                p = 2.0 * self.m * s
                q = 1.0 - s
            else:
                q = self.fa / self.fc
                r = self.fb / self.fc
                p = s * (2.0 * self.m * q * (q - r) - (self.b - self.a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            if p > 0.0:
                q = -q
            else:
                p = -p
            s = self.e
            self.e = self.d
            if 2.0 * p < 3.0 * self.m * q - abs(self.tol * q) and p < abs(0.5 * s * q):
                self.d = p / q
            else:
                self.d = self.e = self.m

        if abs(self.d) > self.tol:
            self.candidate = self.b + self.d
        else:
            self.candidate = self.b + (self.tol if self.m > 0.0 else -self.tol)
        self.log.debug("%s: b=%g c=%g -> %g", self.name, self.b, self.c, self.candidate)

    def _is_done(self) -> bool:
        if self.state is State.DONE:
            return True
        if self.state in (State.STARTING, State.RUNNING):
            return self.candidate is None
        return False

    def _finish(self) -> None:
        if self.root is None:
            self.root = self.b
        self.state = State.DONE

    def _result_values(self):
        return {"root": self.root}
