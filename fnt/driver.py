"""Status-returning facade over one active method.

Typical loop, with the caller owning the objective::

    >>> import numpy as np
    >>> from fnt import Driver, Status, Vector
    >>> drv = Driver.open()
    >>> drv.select_method("bisection", 1)
    <Status.SUCCESS: 'success'>
    >>> _ = drv.hparam_set("lower", 0.0), drv.hparam_set("upper", 2.0)
    >>> x = Vector.allocate(1)
    >>> while drv.is_done() is Status.CONTINUE:
    ...     _ = drv.next(x)
    ...     _ = drv.set_value(x, x[0] ** 2 - 2.0)
    >>> status, root = drv.result("root")
    >>> abs(root - np.sqrt(2.0)) < 1e-5
    True

Errors raised by the method never escape: they are logged through the
driver's :class:`~fnt.logging.LogContext` and reported as
:attr:`Status.FAILURE`, or :attr:`Status.UNSUPPORTED` when the method lacks
an optional operation.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from .config import MethodConfig
from .core import Problem, RunResult, Status, Verbosity
from .exceptions import ConfigurationError, FntError, SequenceError, UnsupportedOperation
from .logging import LogContext, get_logger
from .methods import Method
from .registry import MethodRegistry, get_registry
from .vector import Vector


class Driver:
    """Holds the active method, forwards calls and tracks the best value seen."""

    def __init__(
        self,
        registry: Optional[MethodRegistry] = None,
        log: Optional[LogContext] = None,
    ):
        self.registry = registry if registry is not None else get_registry()
        self.log = log if log is not None else LogContext(logger=get_logger("driver"))
        self.method: Optional[Method] = None
        self.dimensions = 0
        self._best_x: Optional[np.ndarray] = None
        self._best_f = np.inf
        self._closed = False

    @classmethod
    def open(
        cls,
        registry: Optional[MethodRegistry] = None,
        log: Optional[LogContext] = None,
    ) -> "Driver":
        return cls(registry=registry, log=log)

    def __enter__(self) -> "Driver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def set_verbosity(self, level: Verbosity | int | str) -> None:
        """Change this driver's (and its method's) diagnostic level."""
        self.log.verbosity = Verbosity.parse(level)
        if self.method is not None:
            self.method.log.verbosity = self.log.verbosity

    def select_method(self, name: str, dimensions: int) -> Status:
        """Replace the active method with a fresh instance of ``name``."""
        if self._closed:
            self.log.error("select_method: driver is closed.")
            return Status.FAILURE
        self._teardown()
        try:
            self.method = self.registry.create(name, dimensions, log=self.log.child("methods"))
        except FntError as exc:
            self.log.error("select_method: %s", exc)
            return Status.FAILURE
        self.dimensions = self.method.dimensions
        self.log.info("selected method '%s' with %d dimension(s).", name, self.dimensions)
        return Status.SUCCESS

    def configure(self, config: MethodConfig) -> Status:
        """Select, set hyperparameters and seed in one step; nothing is kept on failure."""
        status = self.select_method(config.name, config.dimensions)
        if status is not Status.SUCCESS:
            return status
        for key, value in config.hparams.items():
            status = self.hparam_set(key, value)
            if status is not Status.SUCCESS:
                self._teardown()
                return status
        if config.seed is not None:
            status = self.seed(Vector.from_values(config.seed))
            if status is not Status.SUCCESS:
                self._teardown()
                return status
        return Status.SUCCESS

    def close(self) -> Status:
        self._teardown()
        self._closed = True
        return Status.SUCCESS

    def _teardown(self) -> None:
        if self.method is not None:
            self.method.close()
            self.log.debug("released method '%s'.", self.method.name)
        self.method = None
        self.dimensions = 0
        self._best_x = None
        self._best_f = np.inf

    # ------------------------------------------------------------------
    # Forwarding
    # ------------------------------------------------------------------
    def _forward(self, operation: str, fn: Callable[[Method], Any]) -> tuple[Status, Any]:
        if self.method is None:
            self.log.error("%s: no method selected.", operation)
            return Status.FAILURE, None
        try:
            return Status.SUCCESS, fn(self.method)
        except UnsupportedOperation as exc:
            self.log.warn("%s: %s", operation, exc)
            return Status.UNSUPPORTED, None
        except FntError as exc:
            self.log.error("%s (%s): %s", operation, self.method.name, exc)
            return Status.FAILURE, None

    @property
    def method_name(self) -> Optional[str]:
        return None if self.method is None else self.method.name

    @property
    def result_ids(self) -> tuple[str, ...]:
        return () if self.method is None else tuple(self.method.results)

    def info(self) -> tuple[Status, Optional[str]]:
        return self._forward("info", lambda m: m.info())

    def hparam_set(self, key: str, value: Any) -> Status:
        return self._forward("hparam_set", lambda m: m.hparam_set(key, value))[0]

    def hparam_get(self, key: str) -> tuple[Status, Any]:
        return self._forward("hparam_get", lambda m: m.hparam_get(key))

    def seed(self, vec: Vector) -> Status:
        return self._forward("seed", lambda m: m.seed(vec))[0]

    def next(self, out: Vector) -> Status:
        """Write the next point to evaluate into ``out``."""
        status, proposal = self._forward("next", lambda m: m.next())
        if status is not Status.SUCCESS:
            return status
        if out.assign(proposal.values) is not Status.SUCCESS:
            self.log.error("next: output vector has length %d, expected %d.", out.n, proposal.n)
            return Status.FAILURE
        return Status.SUCCESS

    def set_value(self, vec: Vector, fx: float) -> Status:
        status, _ = self._forward("set_value", lambda m: m.value(vec, fx))
        if status is Status.SUCCESS:
            self._track(vec, fx)
        return status

    def set_value_gradient(self, vec: Vector, fx: float, grad: Vector) -> Status:
        status, _ = self._forward(
            "set_value_gradient", lambda m: m.value_gradient(vec, fx, grad)
        )
        if status is Status.SUCCESS:
            self._track(vec, fx)
        return status

    def is_done(self) -> Status:
        status, finished = self._forward("is_done", lambda m: m.done())
        if status is not Status.SUCCESS:
            return Status.FAILURE
        return Status.DONE if finished else Status.CONTINUE

    def result(self, key: str, out: Optional[Vector] = None) -> tuple[Status, Any]:
        """Look up a named result; vector results are also copied into ``out``."""
        status, value = self._forward("result", lambda m: m.result(key))
        if status is Status.SUCCESS and out is not None:
            if out.assign(np.atleast_1d(value)) is not Status.SUCCESS:
                self.log.error("result: output vector cannot hold '%s'.", key)
                return Status.FAILURE, value
        return status, value

    # ------------------------------------------------------------------
    # Best tracker
    # ------------------------------------------------------------------
    def _track(self, vec: Vector | np.ndarray, fx: float) -> None:
        fx = float(fx)
        if np.isnan(fx):
            return
        if self._best_x is None or fx < self._best_f:
            self._best_x = np.array(vec, dtype=float).reshape(-1).copy()
            self._best_f = fx

    @property
    def best_value(self) -> Optional[float]:
        return None if self._best_x is None else self._best_f

    def best(self, out: Vector) -> Status:
        """Copy the lowest-valued point reported so far into ``out``."""
        if self._best_x is None:
            self.log.error("best: no value has been reported yet.")
            return Status.FAILURE
        if out.assign(self._best_x) is not Status.SUCCESS:
            self.log.error("best: output vector has length %d, expected %d.", out.n, self.dimensions)
            return Status.FAILURE
        return Status.SUCCESS


def solve(
    driver: Driver,
    problem: Problem,
    max_evaluations: Optional[int] = None,
    history: bool = False,
) -> RunResult:
    """Run the standard caller loop for ``problem`` on the driver's method.

    The gradient is reported through ``set_value_gradient`` whenever
    ``problem.grad`` is given.

    Raises:
        SequenceError: If no method is selected.
        ConfigurationError: If ``problem.dim`` disagrees with the method.
    """
    if driver.method is None:
        raise SequenceError("solve() needs a selected method.")
    if problem.dim is not None and problem.dim != driver.dimensions:
        raise ConfigurationError(
            f"Problem has dimension {problem.dim}, method expects {driver.dimensions}."
        )
    x = Vector.allocate(driver.dimensions)
    nfev = njev = 0
    trace = []
    status = driver.is_done()
    while status is Status.CONTINUE:
        if max_evaluations is not None and nfev >= max_evaluations:
            break
        if driver.next(x) is not Status.SUCCESS:
            status = Status.FAILURE
            break
        point = x.values.copy()
        fx = float(problem.fun(point))
        nfev += 1
        if history:
            trace.append(point)
        if problem.grad is not None:
            grad = Vector.from_values(problem.grad(point))
            njev += 1
            reported = driver.set_value_gradient(x, fx, grad)
        else:
            reported = driver.set_value(x, fx)
        if reported is not Status.SUCCESS:
            status = Status.FAILURE
            break
        status = driver.is_done()

    results = {}
    if status is Status.DONE:
        for key in driver.result_ids:
            _, results[key] = driver.result(key)
        message = "converged"
    elif status is Status.CONTINUE:
        message = "evaluation limit reached"
    else:
        message = "method failed"

    x_best = None
    if driver.best_value is not None:
        best = Vector.allocate(driver.dimensions)
        driver.best(best)
        x_best = best.values.copy()
    return RunResult(
        method=driver.method_name or "",
        status=status,
        x=x_best,
        fun=driver.best_value if x_best is not None else np.inf,
        nfev=nfev,
        njev=njev,
        message=message,
        results=results,
        history=trace,
    )


__all__ = ["Driver", "solve"]
