"""Secant method root finding."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import NumericalError
from .base import HParam, Method, positive


class State(Enum):
    INITIAL = "initial"
    INITIAL2 = "initial2"
    RUNNING = "running"


class Secant(Method):
    """Newton iteration with the derivative replaced by a finite difference
    through the two most recent samples."""

    name = "secant"
    description = "derivative-free root finding from two starting points"
    fixed_dimensions = 1
    hparams = (
        HParam("x_0", "float", 0.0, "first starting point"),
        HParam("x_1", "float", 1.0, "second starting point"),
        HParam("f_tol", "float", 1e-6, "stop when |f(x)| falls below"),
        HParam(
            "epsilon",
            "float",
            float(np.finfo(float).eps),
            "smallest usable |f(x_k) - f(x_k-1)|",
        ),
    )
    results = ("root",)

    _check_hparam = positive("f_tol", "epsilon")

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.INITIAL
        self.x_prev: Optional[float] = None
        self.fx_prev: Optional[float] = None
        self.x_curr: Optional[float] = None
        self.fx_curr: Optional[float] = None
        self.next_x: Optional[float] = None

    def _seed(self, x: np.ndarray) -> None:
        self._params["x_0"] = float(x[0])

    def _propose(self) -> np.ndarray:
        if self.state is State.INITIAL:
            return np.array([self.param("x_0")])
        if self.state is State.INITIAL2:
            return np.array([self.param("x_1")])
        return np.array([self.next_x])

    def _update(self, x: np.ndarray, fx: float) -> None:
        x0 = float(x[0])
        if self.state is State.INITIAL:
            self.x_curr, self.fx_curr = x0, fx
            self.state = State.INITIAL2
            return
        self.x_prev, self.fx_prev = self.x_curr, self.fx_curr
        self.x_curr, self.fx_curr = x0, fx
        self.state = State.RUNNING
        if abs(fx) < self.param("f_tol"):
            return
        denom = self.fx_curr - self.fx_prev
        if not abs(denom) >= self.param("epsilon"):
            raise NumericalError(
                f"{self.name}: f({self.x_prev}) and f({self.x_curr}) are too close "
                "to form a secant."
            )
        self.next_x = self.x_curr - self.fx_curr * (self.x_curr - self.x_prev) / denom
        self.log.debug("%s: x=%g f=%g -> %g", self.name, x0, fx, self.next_x)

    def _is_done(self) -> bool:
        return self.fx_curr is not None and abs(self.fx_curr) < self.param("f_tol")

    def _result_values(self):
        return {"root": self.x_curr}
