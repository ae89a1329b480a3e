"""Base class for inversion-of-control numerical methods.

A method never calls the objective. The caller asks for a point with
:meth:`Method.next`, evaluates it, reports back with :meth:`Method.value`
(or :meth:`Method.value_gradient`) and polls :meth:`Method.done`. Concrete
methods are explicit state machines: every quantity that must survive
between two calls is an attribute, never a local.

Contract enforced here for every subclass:

- ``next`` is idempotent. The first call after a transition computes the
  candidate; further calls return copies of the same candidate until the
  matching ``value`` arrives.
- ``value`` needs a pending ``next`` (or, right after ``seed``, reports on
  the seeded start) and performs exactly one transition.
- Once ``done`` is true, ``next`` and ``value`` raise :class:`SequenceError`
  and ``result`` becomes available.
- A :class:`NumericalError` raised while absorbing a value is remembered and
  re-raised by every later operation. Any other error leaves the state as it
  was before the call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Optional

import numpy as np

from ..exceptions import (
    ConfigurationError,
    NumericalError,
    SequenceError,
    UnsupportedOperation,
)
from ..logging import LogContext, get_logger
from ..vector import Vector

_KINDS = ("float", "int", "vector")


@dataclass(frozen=True)
class HParam:
    """Declaration of one hyperparameter.

    ``default`` is a value, None (unset until the caller provides one) or a
    callable taking the dimensionality and returning the initial value.
    """

    key: str
    kind: str
    default: Any = None
    description: str = ""
    aliases: tuple[str, ...] = ()
    fixed_once_started: bool = False

    def __post_init__(self) -> None:
        if self.kind not in _KINDS:
            raise ValueError(f"Unknown hyperparameter kind '{self.kind}'.")


def _as_array(values: Any) -> np.ndarray:
    if isinstance(values, Vector):
        return values.values.copy()
    try:
        return np.array(values, dtype=float).reshape(-1)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Expected real values, got {values!r}.") from None


class Method(ABC):
    """Common lifecycle, bookkeeping and hyperparameter handling."""

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    hparams: ClassVar[tuple[HParam, ...]] = ()
    results: ClassVar[tuple[str, ...]] = ()
    #: Only dimensionality accepted, or None for any positive value.
    fixed_dimensions: ClassVar[Optional[int]] = None

    def __init__(self, dimensions: int, log: Optional[LogContext] = None):
        if (
            isinstance(dimensions, bool)
            or not isinstance(dimensions, (int, np.integer))
            or dimensions < 1
        ):
            raise ConfigurationError(
                f"{self.name}: dimensions must be a positive integer, got {dimensions!r}."
            )
        dimensions = int(dimensions)
        if self.fixed_dimensions is not None and dimensions != self.fixed_dimensions:
            raise ConfigurationError(
                f"{self.name} only supports dimensions={self.fixed_dimensions}, "
                f"got {dimensions}."
            )
        self.dimensions = dimensions
        if log is None:
            module = type(self).__module__.rsplit(".", 1)[-1]
            log = LogContext(logger=get_logger(f"methods.{module}"))
        self.log = log

        self.evaluations = 0
        self._params: dict[str, Any] = {}
        for spec in self.hparams:
            default = spec.default(dimensions) if callable(spec.default) else spec.default
            if spec.kind == "vector" and default is not None:
                default = _as_array(default)
            self._params[spec.key] = default

        self._pending: Optional[np.ndarray] = None
        self._started = False
        self._seeded = False
        self._finished = False
        self._closed = False
        self._failure: Optional[NumericalError] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Release the instance. Every later operation raises SequenceError."""
        self._closed = True
        self._pending = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def failed(self) -> bool:
        return self._failure is not None

    def _check_usable(self) -> None:
        if self._closed:
            raise SequenceError(f"{self.name} instance has been closed.")
        if self._failure is not None:
            raise self._failure

    # ------------------------------------------------------------------
    # Required contract
    # ------------------------------------------------------------------
    def next(self) -> Vector:
        """Return the point the caller should evaluate next."""
        self._check_usable()
        if self.done():
            raise SequenceError(f"{self.name} has finished; next() is no longer valid.")
        if self._pending is None:
            self._pending = self._checked_proposal()
            self._started = True
        return Vector.from_values(self._pending.copy())

    def value(self, vec: Vector | np.ndarray, fx: float) -> None:
        """Report ``f(vec) = fx`` for the pending candidate."""
        self._absorb(vec, fx, None)

    def value_gradient(
        self, vec: Vector | np.ndarray, fx: float, grad: Vector | np.ndarray
    ) -> None:
        """Report the value and gradient for the pending candidate.

        Methods that do not use derivatives treat this exactly like
        :meth:`value`.
        """
        g = _as_array(grad)
        if g.size != self.dimensions:
            raise ConfigurationError(
                f"{self.name}: gradient has length {g.size}, expected {self.dimensions}."
            )
        self._absorb(vec, fx, g)

    def done(self) -> bool:
        """Whether the method has reached a terminal state.

        Querying is side-effect free apart from computing the final answer
        the first time the stopping criterion holds.
        """
        self._check_usable()
        if not self._finished and self._is_done():
            self._finished = True
            self._finish()
            self.log.info("%s finished after %d evaluations.", self.name, self.evaluations)
        return self._finished

    # ------------------------------------------------------------------
    # Optional contract
    # ------------------------------------------------------------------
    def seed(self, vec: Vector | np.ndarray) -> None:
        """Provide a starting point; legal only before the first ``next``."""
        if not self.supports("seed"):
            raise UnsupportedOperation(self.name, "seed")
        self._check_usable()
        if self._started:
            raise SequenceError(f"{self.name}: seed() must precede the first next().")
        x = self._coerce_point(vec)
        self._seed(x)
        self._seeded = True

    def result(self, key: str) -> float | np.ndarray:
        """Look up a named result once the method has finished."""
        if not self.results:
            raise UnsupportedOperation(self.name, "result")
        self._check_usable()
        if key not in self.results:
            raise ConfigurationError(
                f"{self.name} has no result '{key}'. Available results: {list(self.results)}"
            )
        if not self.done():
            raise SequenceError(f"{self.name}: result '{key}' requested before completion.")
        value = self._result_values()[key]
        if isinstance(value, np.ndarray):
            return value.copy()
        return float(value)

    def hparam_set(self, key: str, value: Any) -> None:
        if not self.hparams:
            raise UnsupportedOperation(self.name, "hparam_set")
        self._check_usable()
        spec = self._lookup_hparam(key)
        if spec.fixed_once_started and self._started:
            raise SequenceError(f"{self.name}: '{spec.key}' cannot change once started.")
        coerced = self._coerce_hparam(spec, value)
        self._check_hparam(spec.key, coerced)
        self._params[spec.key] = coerced
        self.log.debug("%s: %s = %r", self.name, spec.key, coerced)

    def hparam_get(self, key: str) -> float | int | np.ndarray:
        if not self.hparams:
            raise UnsupportedOperation(self.name, "hparam_get")
        self._check_usable()
        spec = self._lookup_hparam(key)
        value = self._params[spec.key]
        if value is None:
            raise ConfigurationError(f"{self.name}: hyperparameter '{spec.key}' is not set.")
        if isinstance(value, np.ndarray):
            return value.copy()
        return value

    def info(self) -> str:
        """Human-readable summary of the method and its hyperparameters."""
        lines = [f"{self.name}: {self.description}".rstrip(": ")]
        lines.append(f"  dimensions: {self.dimensions}")
        if self.hparams:
            lines.append("  hyperparameters:")
            width = max(len(spec.key) for spec in self.hparams)
            for spec in self.hparams:
                current = self._params[spec.key]
                if isinstance(current, np.ndarray):
                    shown = np.array2string(current, precision=6)
                else:
                    shown = "<unset>" if current is None else repr(current)
                names = spec.key
                if spec.aliases:
                    names += f" ({', '.join(spec.aliases)})"
                lines.append(
                    f"    {names:<{width}}  {spec.kind:<6}  {shown}  {spec.description}".rstrip()
                )
        if self.results:
            lines.append(f"  results: {', '.join(self.results)}")
        return "\n".join(lines)

    @classmethod
    def supports(cls, operation: str) -> bool:
        """Whether the optional ``operation`` is implemented."""
        if operation == "seed":
            return cls._seed is not Method._seed
        if operation == "result":
            return bool(cls.results)
        if operation in ("hparam_set", "hparam_get"):
            return bool(cls.hparams)
        return callable(getattr(cls, operation, None))

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _propose(self) -> np.ndarray:
        """Compute the next candidate from the current state."""

    @abstractmethod
    def _update(self, x: np.ndarray, fx: float) -> None:
        """Absorb one evaluation. Must not leave partial state on error."""

    def _update_gradient(self, x: np.ndarray, fx: float, grad: np.ndarray) -> None:
        del grad
        self._update(x, fx)

    @abstractmethod
    def _is_done(self) -> bool:
        """Stopping criterion evaluated on the current state."""

    def _finish(self) -> None:
        """Compute final answers; called once, the first time ``_is_done`` holds."""

    def _result_values(self) -> dict[str, float | np.ndarray]:
        return {}

    def _seed(self, x: np.ndarray) -> None:
        raise UnsupportedOperation(self.name, "seed")

    def _check_hparam(self, key: str, value: Any) -> None:
        """Reject values that are well-typed but meaningless for ``key``."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def param(self, key: str) -> Any:
        return self._params[key]

    def _absorb(self, vec: Any, fx: float, grad: Optional[np.ndarray]) -> None:
        self._check_usable()
        if self.done():
            raise SequenceError(f"{self.name} has finished; value() is no longer valid.")
        if self._pending is None:
            if not (self._seeded and not self._started):
                raise SequenceError(f"{self.name}: value() without a pending next().")
            # Reporting directly on a seeded start: advance as if next() ran.
            self._pending = self._checked_proposal()
            self._started = True
        x = self._coerce_point(vec)
        try:
            fx = float(fx)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"{self.name}: reported value must be a number, got {fx!r}."
            ) from None
        try:
            if grad is None:
                self._update(x, fx)
            else:
                self._update_gradient(x, fx, grad)
        except NumericalError as exc:
            self._failure = exc
            raise
        self._pending = None
        self.evaluations += 1

    def _checked_proposal(self) -> np.ndarray:
        proposal = np.array(self._propose(), dtype=float).reshape(-1)
        if proposal.size != self.dimensions:
            raise SequenceError(
                f"{self.name}: proposal has length {proposal.size}, expected {self.dimensions}."
            )
        return proposal

    def _coerce_point(self, vec: Any) -> np.ndarray:
        x = _as_array(vec)
        if x.size != self.dimensions:
            raise ConfigurationError(
                f"{self.name}: vector has length {x.size}, expected {self.dimensions}."
            )
        if not np.all(np.isfinite(x)):
            raise ConfigurationError(f"{self.name}: vector must be finite, got {x}.")
        return x

    def _lookup_hparam(self, key: str) -> HParam:
        for spec in self.hparams:
            if key == spec.key or key in spec.aliases:
                return spec
        known = [spec.key for spec in self.hparams]
        raise ConfigurationError(
            f"{self.name} has no hyperparameter '{key}'. Known hyperparameters: {known}"
        )

    def _coerce_hparam(self, spec: HParam, value: Any) -> Any:
        if spec.kind == "vector":
            arr = _as_array(value)
            if arr.size != self.dimensions:
                raise ConfigurationError(
                    f"{self.name}: '{spec.key}' needs {self.dimensions} values, got {arr.size}."
                )
            if not np.all(np.isfinite(arr)):
                raise ConfigurationError(f"{self.name}: '{spec.key}' must be finite.")
            return arr
        if isinstance(value, (Vector, np.ndarray)):
            arr = _as_array(value)
            if arr.size != 1:
                raise ConfigurationError(f"{self.name}: '{spec.key}' expects a scalar.")
            value = arr[0]
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"{self.name}: '{spec.key}' expects a number, got {value!r}."
            ) from None
        if not np.isfinite(number):
            raise ConfigurationError(f"{self.name}: '{spec.key}' must be finite.")
        if spec.kind == "int":
            if number != int(number):
                raise ConfigurationError(
                    f"{self.name}: '{spec.key}' expects an integer, got {value!r}."
                )
            return int(number)
        return number

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dimensions={self.dimensions})"


def positive(*keys: str) -> Callable[[Method, str, Any], None]:
    """Build a ``_check_hparam`` that requires ``keys`` to be > 0."""

    def check(self: Method, key: str, value: Any) -> None:
        if key in keys and value <= 0:
            raise ConfigurationError(f"{self.name}: '{key}' must be positive, got {value!r}.")

    return check


__all__ = ["HParam", "Method", "positive"]
