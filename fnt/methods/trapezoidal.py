"""Composite quadrature on regularly spaced samples.

:class:`CompositeRule` walks the ``n + 1`` nodes ``lower + k h`` and hands
the collected values to :meth:`CompositeRule._integrate`.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError
from .base import HParam, Method


class State(Enum):
    RUNNING = "running"
    DONE = "done"


class CompositeRule(Method):
    fixed_dimensions = 1
    hparams = (
        HParam("lower", "float", 0.0, "integration start", fixed_once_started=True),
        HParam("upper", "float", 1.0, "integration end", fixed_once_started=True),
        HParam(
            "n",
            "int",
            10,
            "number of subintervals",
            aliases=("subintervals",),
            fixed_once_started=True,
        ),
    )
    results = ("area",)

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.RUNNING
        self.index = 0
        self.samples: Optional[np.ndarray] = None
        self.area: Optional[float] = None

    def _check_hparam(self, key, value) -> None:
        if key == "n" and value < 1:
            raise ConfigurationError(f"{self.name}: 'n' must be at least 1, got {value}.")

    @property
    def h(self) -> float:
        return (self.param("upper") - self.param("lower")) / self.param("n")

    def _propose(self) -> np.ndarray:
        if self.samples is None:
            self.samples = np.zeros(self.param("n") + 1)
        if self.index == self.param("n"):
            return np.array([self.param("upper")])
        return np.array([self.param("lower") + self.index * self.h])

    def _update(self, x: np.ndarray, fx: float) -> None:
        self.samples[self.index] = fx
        self.index += 1

    def _is_done(self) -> bool:
        return self.state is State.DONE or (
            self.samples is not None and self.index == self.samples.size
        )

    def _finish(self) -> None:
        self.area = float(self._integrate(self.samples, self.h))
        self.state = State.DONE

    @abstractmethod
    def _integrate(self, f: np.ndarray, h: float) -> float:
        """Combine the node values into an area estimate."""

    def _result_values(self):
        return {"area": self.area}


class Trapezoidal(CompositeRule):
    name = "trapezoidal"
    description = "composite trapezoidal rule"

    def _integrate(self, f: np.ndarray, h: float) -> float:
        return h * (0.5 * f[0] + f[1:-1].sum() + 0.5 * f[-1])
