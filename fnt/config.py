"""Declarative method selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class MethodConfig:
    """
    Everything needed to select and prepare a method in one call.

    Args:
        name: Registered method name, e.g. ``"nelder-mead"``.
        dimensions: Number of variables. Must be positive.
        hparams: Hyperparameter ids and values, applied in order. Unknown ids
            make :meth:`fnt.driver.Driver.configure` fail.
        seed: Optional starting point handed to ``seed`` after the
            hyperparameters are set.
    """

    name: str
    dimensions: int = 1
    hparams: Mapping[str, Any] = field(default_factory=dict)
    seed: Optional[Sequence[float]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Method name must be a non-empty string.")
        if isinstance(self.dimensions, bool) or not isinstance(self.dimensions, int):
            raise ValueError("dimensions must be an integer.")
        if self.dimensions < 1:
            raise ValueError("dimensions must be positive.")
        if self.seed is not None and np.asarray(self.seed, dtype=float).size != self.dimensions:
            raise ValueError(
                f"seed has {np.asarray(self.seed).size} values, expected {self.dimensions}."
            )
        # Detach from the caller's mapping.
        object.__setattr__(self, "hparams", dict(self.hparams))


__all__ = ["MethodConfig"]
