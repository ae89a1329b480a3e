"""Brent's derivative-free search for a local minimum on an interval.

Golden-section steps are mixed with successive parabolic interpolation
through the three best points seen so far (``x``, ``w``, ``v``).

References:
    - R. P. Brent, *Algorithms for Minimization without Derivatives*,
      Prentice-Hall (1973), chapter 5, procedure ``localmin``.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError
from .base import HParam, Method, positive

GOLDEN = 0.5 * (3.0 - math.sqrt(5.0))


class State(Enum):
    INITIAL = "initial"
    RUNNING = "running"
    DONE = "done"


class BrentLocalMin(Method):
    name = "brents-localmin"
    description = "local minimum of a unimodal function on [lower, upper]"
    fixed_dimensions = 1
    hparams = (
        HParam("lower", "float", 0.0, "interval start", fixed_once_started=True),
        HParam("upper", "float", 1.0, "interval end", fixed_once_started=True),
        HParam("eps", "float", math.sqrt(float(np.finfo(float).eps)), "relative tolerance"),
        HParam("t", "float", 1e-8, "absolute tolerance"),
    )
    results = ("minimum x", "minimum f")

    _check_hparam = positive("eps", "t")

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.INITIAL
        self.a = self.b = 0.0
        self.x = self.w = self.v = 0.0
        self.fx = self.fw = self.fv = 0.0
        self.d = self.e = 0.0
        self.u: Optional[float] = None

    def _interval(self) -> tuple[float, float]:
        lo, hi = self.param("lower"), self.param("upper")
        return (lo, hi) if lo <= hi else (hi, lo)

    def _propose(self) -> np.ndarray:
        if self.state is State.INITIAL:
            a, b = self._interval()
            return np.array([a + GOLDEN * (b - a)])
        return np.array([self.u])

    def _update(self, x: np.ndarray, fx: float) -> None:
        if np.isnan(fx):
            raise ConfigurationError(f"{self.name}: reported value is NaN.")
        x0 = float(x[0])
        if self.state is State.INITIAL:
            self.a, self.b = self._interval()
            self.x = self.w = self.v = x0
            self.fx = self.fw = self.fv = fx
            self.d = self.e = 0.0
            self.state = State.RUNNING
        else:
            u, fu = x0, fx
            if fu < self.fx:
                if u < self.x:
                    self.b = self.x
                else:
                    self.a = self.x
                self.v, self.fv = self.w, self.fw
                self.w, self.fw = self.x, self.fx
                self.x, self.fx = u, fu
            else:
                if u < self.x:
                    self.a = u
                else:
                    self.b = u
                if fu <= self.fw or self.w == self.x:
                    self.v, self.fv = self.w, self.fw
                    self.w, self.fw = u, fu
                elif fu <= self.fv or self.v == self.x or self.v == self.w:
                    self.v, self.fv = u, fu
        self._step()

    def _step(self) -> None:
        m = 0.5 * (self.a + self.b)
        tol = self.param("eps") * abs(self.x) + self.param("t")
        t2 = 2.0 * tol
        if abs(self.x - m) <= t2 - 0.5 * (self.b - self.a):
            self.u = None
            return

        p = q = r = 0.0
        if abs(self.e) > tol:
            r = (self.x - self.w) * (self.fx - self.fv)
            q = (self.x - self.v) * (self.fx - self.fw)
            p = (self.x - self.v) * q - (self.x - self.w) * r
            q = 2.0 * (q - r)
            if q > 0.0:
                p = -p
            else:
                q = -q
            r = self.e
            self.e = self.d

        if abs(p) < abs(0.5 * q * r) and p > q * (self.a - self.x) and p < q * (self.b - self.x):
            # parabolic interpolation
            self.d = p / q
            u = self.x + self.d
            if (u - self.a) < t2 or (self.b - u) < t2:
                self.d = tol if self.x < m else -tol
        else:
            # golden section
            self.e = (self.b if self.x < m else self.a) - self.x
            self.d = GOLDEN * self.e

        if abs(self.d) >= tol:
            self.u = self.x + self.d
        else:
            self.u = self.x + (tol if self.d > 0.0 else -tol)
        self.log.debug("%s: [%g, %g] x=%g -> %g", self.name, self.a, self.b, self.x, self.u)

    def _is_done(self) -> bool:
        return self.state is State.DONE or (self.state is State.RUNNING and self.u is None)

    def _finish(self) -> None:
        self.state = State.DONE

    def _result_values(self):
        return {"minimum x": np.array([self.x]), "minimum f": self.fx}
