"""Shared status codes, verbosity levels and problem containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, List, Optional

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]


class Status(Enum):
    """Outcome of a driver call."""

    SUCCESS = "success"
    FAILURE = "failure"
    CONTINUE = "continue"
    DONE = "done"
    UNSUPPORTED = "unsupported"


class Verbosity(IntEnum):
    """Diagnostic levels; a message is emitted when its level <= the context's."""

    NONE = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4

    @classmethod
    def parse(cls, value: "Verbosity | int | str") -> "Verbosity":
        """Accept an enum member, its integer value or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            aliases = {"WARNING": "WARN", "OFF": "NONE"}
            name = aliases.get(text.upper(), text.upper())
            try:
                return cls[name]
            except KeyError:
                raise ValueError(f"Unknown verbosity '{value}'.") from None
        return cls(int(value))


@dataclass(frozen=True)
class Problem:
    """Objective (and optional derivative) driven by :func:`fnt.driver.solve`."""

    fun: Objective
    grad: Optional[Gradient] = None
    dim: Optional[int] = None


@dataclass
class RunResult:
    """Summary of a :func:`fnt.driver.solve` run."""

    method: str
    status: Status
    x: Optional[Array]
    fun: float
    nfev: int
    njev: int
    message: str
    results: dict = field(default_factory=dict)
    history: List[Array] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is Status.DONE


__all__ = [
    "Array",
    "Gradient",
    "Objective",
    "Problem",
    "RunResult",
    "Status",
    "Verbosity",
]
