"""Differential evolution global minimization.

Two generations of ``NP`` candidates are kept. While generation ``g + 1``
is being filled, slot ``i`` receives a trial built from members of
generation ``g`` and keeps it only if it beats the slot's previous value.
The very first generation is sampled at random and accepted as is.

Trial schemes (Storn and Price naming):

- DE1, ``x_r1 + F (x_r2 - x_r3)``
- DE2, ``x_i + lambda (x_best - x_i) + F (x_r2 - x_r3)``, used when
  ``lambda != 0``

References:
    - R. Storn and K. Price, "Differential Evolution: a simple and
      efficient heuristic for global optimization over continuous spaces",
      *J. Global Optim.* 11, 1997.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError
from .base import HParam, Method


class State(Enum):
    INITIAL = "initial"
    RUNNING = "running"
    DONE = "done"


class DifferentialEvolution(Method):
    name = "differential evolution"
    description = "population-based global minimization"
    hparams = (
        HParam("NP", "int", lambda n: 10 * n, "population size (>= 3)", fixed_once_started=True),
        HParam("F", "float", 0.5, "difference weight"),
        HParam("lambda", "float", 0.1, "pull towards the best member (0 selects DE1)"),
        HParam("iterations", "int", 1000, "generations to run"),
        HParam("f_tol", "float", 0.0, "stop when a generation's value spread falls below"),
        HParam(
            "start", "vector", None, "centre of the initial population", fixed_once_started=True
        ),
        HParam("lower", "vector", None, "lower bounds", fixed_once_started=True),
        HParam("upper", "vector", None, "upper bounds", fixed_once_started=True),
        HParam(
            "rng_seed", "int", None, "seed for the sampling generator", fixed_once_started=True
        ),
    )
    results = ("minimum x", "minimum f")

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        self.state = State.INITIAL
        self.rng: Optional[np.random.Generator] = None
        self.pop: Optional[np.ndarray] = None
        self.fx: Optional[np.ndarray] = None
        self.prev_pop: Optional[np.ndarray] = None
        self.prev_fx: Optional[np.ndarray] = None
        self.lower: Optional[np.ndarray] = None
        self.upper: Optional[np.ndarray] = None
        self.curr = 0
        self.best = 0
        self.best_x: Optional[np.ndarray] = None
        self.best_f = np.inf
        self.remaining = 0
        self.generation = 0

    def _check_hparam(self, key, value) -> None:
        if key == "NP" and value < 3:
            raise ConfigurationError(f"{self.name}: 'NP' must be at least 3, got {value}.")
        if key == "iterations" and value < 0:
            raise ConfigurationError(f"{self.name}: 'iterations' must be non-negative.")
        if key == "f_tol" and value < 0:
            raise ConfigurationError(f"{self.name}: 'f_tol' must be non-negative.")

    def _seed(self, x: np.ndarray) -> None:
        self._params["start"] = x.copy()

    def _begin(self) -> None:
        n, size = self.dimensions, self.param("NP")
        self.rng = np.random.default_rng(self.param("rng_seed"))
        self.lower, self.upper = self.param("lower"), self.param("upper")
        if self.lower is not None and self.upper is not None:
            flipped = self.lower > self.upper
            if flipped.any():
                self.log.warn(
                    "%s: lower > upper in coordinates %s; swapping them.",
                    self.name,
                    np.flatnonzero(flipped).tolist(),
                )
                self.lower, self.upper = (
                    np.minimum(self.lower, self.upper),
                    np.maximum(self.lower, self.upper),
                )
        self.pop = np.zeros((size, n))
        self.fx = np.full(size, np.inf)
        self.prev_pop = np.zeros((size, n))
        self.prev_fx = np.full(size, np.inf)
        self.remaining = self.param("iterations")

    def _sampling_box(self) -> tuple[np.ndarray, np.ndarray]:
        n = self.dimensions
        if self.lower is not None and self.upper is not None:
            return self.lower, self.upper
        if self.lower is not None:
            return self.lower, self.lower + 1.0
        if self.upper is not None:
            return self.upper - 1.0, self.upper
        return -np.ones(n), np.ones(n)

    def _clip(self, x: np.ndarray) -> np.ndarray:
        if self.lower is not None:
            x = np.maximum(x, self.lower)
        if self.upper is not None:
            x = np.minimum(x, self.upper)
        return x

    def _propose(self) -> np.ndarray:
        if self.pop is None:
            self._begin()
        if self.state is State.INITIAL:
            start = self.param("start")
            if start is not None:
                return self._clip(start + self.rng.uniform(-0.5, 0.5, self.dimensions))
            lo, hi = self._sampling_box()
            return self.rng.uniform(lo, hi)

        size = self.param("NP")
        pool = np.arange(size)
        if size >= 4:
            pool = pool[pool != self.curr]
        r1, r2, r3 = self.rng.choice(pool, size=3, replace=False)
        F, lam = self.param("F"), self.param("lambda")
        diff = self.prev_pop[r2] - self.prev_pop[r3]
        if lam != 0.0:
            x_cur = self.prev_pop[self.curr]
            trial = x_cur + lam * (self.best_x - x_cur) + F * diff
        elif F != 0.0:
            trial = self.prev_pop[r1] + F * diff
        else:
            trial = self.prev_pop[r1].copy()
        return self._clip(trial)

    def _update(self, x: np.ndarray, fx: float) -> None:
        if np.isnan(fx):
            raise ConfigurationError(f"{self.name}: reported value is NaN.")
        i = self.curr
        if self.state is State.INITIAL or fx < self.prev_fx[i]:
            self.pop[i], self.fx[i] = x, fx
        else:
            self.pop[i], self.fx[i] = self.prev_pop[i], self.prev_fx[i]

        if fx < self.best_f:
            self.best, self.best_f, self.best_x = i, fx, x.copy()
            self.log.debug("%s: new best f=%g in slot %d", self.name, fx, i)

        self.curr += 1
        if self.curr == self.param("NP"):
            self._swap_generations()

    def _swap_generations(self) -> None:
        self.pop, self.prev_pop = self.prev_pop, self.pop
        self.fx, self.prev_fx = self.prev_fx, self.fx
        self.curr = 0
        self.remaining -= 1
        self.generation += 1
        self.state = State.RUNNING
        self.log.debug(
            "%s: generation %d, best f=%g, spread=%g",
            self.name,
            self.generation,
            self.best_f,
            self.spread(),
        )

    def spread(self) -> float:
        """Value range of the last completed generation."""
        if self.generation == 0:
            return np.inf
        return float(self.prev_fx.max() - self.prev_fx.min())

    def _is_done(self) -> bool:
        if self.state is State.DONE:
            return True
        if self.pop is None:
            return self.param("iterations") <= 0
        if self.remaining <= 0:
            return True
        f_tol = self.param("f_tol")
        return f_tol > 0.0 and self.curr == 0 and self.spread() < f_tol

    def _finish(self) -> None:
        self.state = State.DONE

    def _result_values(self):
        if self.best_x is None:
            return {"minimum x": np.full(self.dimensions, np.nan), "minimum f": np.inf}
        return {"minimum x": self.best_x.copy(), "minimum f": self.best_f}
