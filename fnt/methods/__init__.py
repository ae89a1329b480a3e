"""Numerical methods implementing the :class:`~fnt.methods.base.Method` contract."""

from .base import HParam, Method
from .bisection import Bisection
from .brent_dekker import BrentDekker
from .brent_localmin import BrentLocalMin
from .differential_evolution import DifferentialEvolution
from .gradient_estimate import GradientEstimate
from .nelder_mead import NelderMead
from .newton_raphson import NewtonRaphson
from .secant import Secant
from .simpson import Simpson
from .trapezoidal import CompositeRule, Trapezoidal

BUILTIN_METHODS: tuple[type[Method], ...] = (
    Bisection,
    BrentDekker,
    BrentLocalMin,
    NewtonRaphson,
    Secant,
    NelderMead,
    DifferentialEvolution,
    GradientEstimate,
    Trapezoidal,
    Simpson,
)

__all__ = [
    "BUILTIN_METHODS",
    "Bisection",
    "BrentDekker",
    "BrentLocalMin",
    "CompositeRule",
    "DifferentialEvolution",
    "GradientEstimate",
    "HParam",
    "Method",
    "NelderMead",
    "NewtonRaphson",
    "Secant",
    "Simpson",
    "Trapezoidal",
]
