"""Nelder-Mead downhill simplex minimization.

The simplex holds ``n + 1`` vertices kept sorted by value, so ``l`` (best)
is row 0, ``s`` (second worst) row ``n - 1`` and ``h`` (worst) row ``n``.
Each reflection cycle costs one to three evaluations, a shrink costs ``n``
more, one per non-best vertex, starting with the worst.

References:
    - J. A. Nelder and R. Mead, "A simplex method for function
      minimization", *The Computer Journal* 7(4), 1965.
    - J. C. Lagarias et al., "Convergence properties of the Nelder-Mead
      simplex method in low dimensions", *SIAM J. Optim.* 9(1), 1998.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from ..exceptions import ConfigurationError
from .base import HParam, Method


class State(Enum):
    INITIAL = "initial"
    REFLECT = "reflect"
    EXPAND = "expand"
    CONTRACT_OUT = "contract_out"
    CONTRACT_IN = "contract_in"
    SHRINK = "shrink"
    SHRINK2 = "shrink2"


class NelderMead(Method):
    name = "nelder-mead"
    description = "derivative-free simplex minimization"
    hparams = (
        HParam("alpha", "float", 1.0, "reflection coefficient"),
        HParam("beta", "float", 0.5, "contraction coefficient"),
        HParam("gamma", "float", 2.0, "expansion coefficient"),
        HParam("delta", "float", 0.5, "shrink coefficient"),
        HParam("step", "float", 1.0, "edge length of the initial simplex"),
        HParam(
            "tolerance",
            "float",
            1e-5,
            "stop when |best - worst| falls below",
            aliases=("dist_threshold",),
        ),
        HParam("max_iterations", "int", 1000, "stop after this many evaluations"),
    )
    results = ("minimum x", "minimum f")

    def __init__(self, dimensions, log=None):
        super().__init__(dimensions, log)
        n = self.dimensions
        self.state = State.INITIAL
        self.start = np.zeros(n)
        self.simplex = np.zeros((n + 1, n))
        self.fvals = np.full(n + 1, np.inf)
        self.vertex = 0
        self.x_r = np.zeros(n)
        self.f_r = np.inf
        self.iterations = 0

    def _check_hparam(self, key, value) -> None:
        if key in ("alpha", "gamma", "step", "tolerance") and value <= 0:
            raise ConfigurationError(f"{self.name}: '{key}' must be positive.")
        if key in ("beta", "delta") and not 0.0 < value < 1.0:
            raise ConfigurationError(f"{self.name}: '{key}' must lie in (0, 1).")
        if key == "max_iterations" and value < 1:
            raise ConfigurationError(f"{self.name}: 'max_iterations' must be at least 1.")

    def _seed(self, x: np.ndarray) -> None:
        self.start = x.copy()

    def _centroid(self) -> np.ndarray:
        return self.simplex[:-1].mean(axis=0)

    def _propose(self) -> np.ndarray:
        n = self.dimensions
        if self.state is State.INITIAL:
            point = self.start.copy()
            if self.vertex > 0:
                point[self.vertex - 1] += self.param("step")
            return point
        best = self.simplex[0]
        if self.state is State.SHRINK:
            return best + self.param("delta") * (self.simplex[n] - best)
        if self.state is State.SHRINK2:
            return best + self.param("delta") * (self.simplex[self.vertex] - best)
        c = self._centroid()
        if self.state is State.REFLECT:
            return c + self.param("alpha") * (c - self.simplex[n])
        if self.state is State.EXPAND:
            return c + self.param("gamma") * (self.x_r - c)
        if self.state is State.CONTRACT_OUT:
            return c + self.param("beta") * (self.x_r - c)
        return c + self.param("beta") * (self.simplex[n] - c)

    def _update(self, x: np.ndarray, fx: float) -> None:
        if np.isnan(fx):
            raise ConfigurationError(f"{self.name}: reported value is NaN.")
        n = self.dimensions
        self.iterations += 1
        state = self.state

        if state is State.INITIAL:
            self._set_vertex(self.vertex, x, fx)
            self.vertex += 1
            if self.vertex == n + 1:
                self._restart_cycle()
        elif state is State.REFLECT:
            self.x_r, self.f_r = x.copy(), fx
            f_l, f_s, f_h = self.fvals[0], self.fvals[n - 1], self.fvals[n]
            if f_l <= fx < f_s:
                self._replace_worst(x, fx)
            elif fx < f_l:
                self.state = State.EXPAND
            elif fx < f_h:
                self.state = State.CONTRACT_OUT
            else:
                self.state = State.CONTRACT_IN
        elif state is State.EXPAND:
            if fx < self.f_r:
                self._replace_worst(x, fx)
            else:
                self._replace_worst(self.x_r, self.f_r)
        elif state is State.CONTRACT_OUT:
            if fx < self.f_r:
                self._replace_worst(x, fx)
            else:
                self.state = State.SHRINK
        elif state is State.CONTRACT_IN:
            if fx < self.fvals[n]:
                self._replace_worst(x, fx)
            else:
                self.state = State.SHRINK
        elif state is State.SHRINK:
            self._set_vertex(n, x, fx)
            if n > 1:
                self.vertex = n - 1
                self.state = State.SHRINK2
            else:
                self._restart_cycle()
        else:
            self._set_vertex(self.vertex, x, fx)
            self.vertex -= 1
            if self.vertex == 0:
                self._restart_cycle()
        self.log.debug(
            "%s: %s -> %s, best f=%g", self.name, state.value, self.state.value, self.fvals.min()
        )

    def _set_vertex(self, index: int, x: np.ndarray, fx: float) -> None:
        self.simplex[index] = x
        self.fvals[index] = fx

    def _replace_worst(self, x: np.ndarray, fx: float) -> None:
        self._set_vertex(self.dimensions, x, fx)
        self._restart_cycle()

    def _restart_cycle(self) -> None:
        order = np.argsort(self.fvals, kind="stable")
        self.simplex = self.simplex[order]
        self.fvals = self.fvals[order]
        self.state = State.REFLECT

    def _is_done(self) -> bool:
        if self.iterations > self.param("max_iterations"):
            return True
        if self.state is not State.REFLECT:
            return False
        spread = float(np.linalg.norm(self.simplex[0] - self.simplex[-1]))
        return spread < self.param("tolerance")

    def _result_values(self):
        i = int(np.argmin(self.fvals))
        return {"minimum x": self.simplex[i].copy(), "minimum f": float(self.fvals[i])}
