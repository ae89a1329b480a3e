"""Composite Simpson's rule."""

from __future__ import annotations

import numpy as np

from ..exceptions import ConfigurationError
from .trapezoidal import CompositeRule


class Simpson(CompositeRule):
    """``h/3 (f_0 + 4 f_1 + 2 f_2 + ... + 4 f_(n-1) + f_n)``; ``n`` must be even."""

    name = "simpson"
    description = "composite Simpson's rule"

    def _check_hparam(self, key, value) -> None:
        super()._check_hparam(key, value)
        if key == "n" and value % 2:
            raise ConfigurationError(f"{self.name}: 'n' must be even, got {value}.")

    def _integrate(self, f: np.ndarray, h: float) -> float:
        return h / 3.0 * (f[0] + f[-1] + 4.0 * f[1:-1:2].sum() + 2.0 * f[2:-1:2].sum())
