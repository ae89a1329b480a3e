"""Forward-difference gradient estimation."""

from __future__ import annotations

from enum import Enum

import numpy as np

from ..exceptions import ConfigurationError
from .base import HParam, Method


class State(Enum):
    INITIAL = "initial"
    RUNNING = "running"
    DONE = "done"


class GradientEstimate(Method):
    """Estimate ``grad f(x0)`` with ``n + 1`` evaluations.

    ``g_i = (f(x0 + h_i e_i) - f(x0)) / h_i`` where ``h_i`` comes from
    ``step_vec`` when set and from the scalar ``step`` otherwise.
    """

    name = "gradient estimate"
    description = "forward-difference gradient"
    hparams = (
        HParam("x0", "vector", lambda n: np.zeros(n), "point of differentiation"),
        HParam("step", "float", 1e-3, "step used for every coordinate"),
        HParam("step_vec", "vector", None, "per-coordinate steps, overrides step"),
    )
    results = ("gradient",)

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.INITIAL
        self.index = 0
        self.f0 = 0.0
        self.gradient = np.zeros(self.dimensions)

    def _check_hparam(self, key, value) -> None:
        if key == "step" and value == 0.0:
            raise ConfigurationError(f"{self.name}: 'step' must be non-zero.")
        if key == "step_vec" and np.any(value == 0.0):
            raise ConfigurationError(f"{self.name}: 'step_vec' entries must be non-zero.")

    def _seed(self, x: np.ndarray) -> None:
        self._params["x0"] = x.copy()

    def _steps(self) -> np.ndarray:
        step_vec = self.param("step_vec")
        if step_vec is not None:
            return step_vec
        return np.full(self.dimensions, self.param("step"))

    def _propose(self) -> np.ndarray:
        x = self.param("x0").copy()
        if self.state is State.RUNNING:
            x[self.index] += self._steps()[self.index]
        return x

    def _update(self, x: np.ndarray, fx: float) -> None:
        if self.state is State.INITIAL:
            self.f0 = fx
            self.state = State.RUNNING
            return
        h = self._steps()[self.index]
        self.gradient[self.index] = (fx - self.f0) / h
        self.index += 1
        if self.index == self.dimensions:
            self.state = State.DONE

    def _is_done(self) -> bool:
        return self.state is State.DONE

    def _result_values(self):
        return {"gradient": self.gradient.copy()}
