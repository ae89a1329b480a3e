"""Newton-Raphson root finding from reported values and derivatives."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError, NumericalError
from .base import HParam, Method, positive


class State(Enum):
    INITIAL = "initial"
    RUNNING = "running"


class NewtonRaphson(Method):
    """Iterate ``x <- x - f(x) / f'(x)``.

    Values must be reported through ``value_gradient``; a plain ``value``
    is rejected without changing state.
    """

    name = "newton-raphson"
    description = "root finding with first derivatives"
    fixed_dimensions = 1
    hparams = (
        HParam("x_0", "float", 0.0, "starting point"),
        HParam("f_tol", "float", 1e-6, "stop when |f(x)| falls below"),
        HParam(
            "epsilon",
            "float",
            float(np.finfo(float).eps),
            "smallest usable |f'(x)|",
        ),
    )
    results = ("root",)

    _check_hparam = positive("f_tol", "epsilon")

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.INITIAL
        self.next_x: Optional[float] = None
        self.last_x: Optional[float] = None
        self.last_fx: Optional[float] = None

    def _seed(self, x: np.ndarray) -> None:
        self._params["x_0"] = float(x[0])

    def _propose(self) -> np.ndarray:
        if self.state is State.INITIAL:
            return np.array([self.param("x_0")])
        return np.array([self.next_x])

    def _update(self, x: np.ndarray, fx: float) -> None:
        raise ConfigurationError(
            f"{self.name} needs derivatives; report with value_gradient()."
        )

    def _update_gradient(self, x: np.ndarray, fx: float, grad: np.ndarray) -> None:
        slope = float(grad[0])
        x0 = float(x[0])
        self.last_x, self.last_fx = x0, fx
        self.state = State.RUNNING
        if abs(fx) < self.param("f_tol"):
            return
        if not abs(slope) >= self.param("epsilon"):
            raise NumericalError(
                f"{self.name}: derivative {slope} at x={x0} is too small to divide by."
            )
        self.next_x = x0 - fx / slope
        self.log.debug("%s: x=%g f=%g -> %g", self.name, x0, fx, self.next_x)

    def _is_done(self) -> bool:
        return self.last_fx is not None and abs(self.last_fx) < self.param("f_tol")

    def _result_values(self):
        return {"root": self.last_x}
