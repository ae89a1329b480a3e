"""fnt - numerical toolbox with caller-owned evaluation loops.

Example
-------
>>> from fnt import Driver, Problem, solve
>>> from fnt.problems import rosenbrock
>>> drv = Driver.open()
>>> drv.select_method("nelder-mead", 2)
<Status.SUCCESS: 'success'>
>>> res = solve(drv, Problem(fun=rosenbrock, dim=2))
>>> res.success
True
"""

__version__ = "0.1.0"

from .config import MethodConfig
from .core import Problem, RunResult, Status, Verbosity
from .driver import Driver, solve
from .exceptions import (
    ConfigurationError,
    FntError,
    NumericalError,
    SequenceError,
    UnsupportedOperation,
)
from .logging import LogContext, configure_logging, get_logger, set_verbosity
from .methods import HParam, Method
from .registry import MethodDescriptor, MethodRegistry, get_registry
from .vector import Vector, add, copy, distance, l2norm, scale, sub

__all__ = [
    "ConfigurationError",
    "Driver",
    "FntError",
    "HParam",
    "LogContext",
    "Method",
    "MethodConfig",
    "MethodDescriptor",
    "MethodRegistry",
    "NumericalError",
    "Problem",
    "RunResult",
    "SequenceError",
    "Status",
    "UnsupportedOperation",
    "Vector",
    "Verbosity",
    "add",
    "configure_logging",
    "copy",
    "distance",
    "get_logger",
    "get_registry",
    "l2norm",
    "scale",
    "set_verbosity",
    "solve",
    "sub",
    "__version__",
]
