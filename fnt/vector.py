"""Fixed-length real vectors exchanged between the caller and a method.

Operations report failure through their return value instead of raising:
:class:`~fnt.core.Status` for in-place operations and ``None`` for the
scalar-valued ones. A freed vector has length zero and makes every operation
that touches it fail.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from .core import Status


class Vector:
    """Owned, contiguous float64 buffer of a fixed length."""

    __slots__ = ("_values",)

    def __init__(self, n: int = 0):
        if n < 0:
            raise ValueError("Vector length must be non-negative.")
        self._values: Optional[np.ndarray] = np.zeros(int(n), dtype=float)

    @classmethod
    def allocate(cls, n: int) -> Optional["Vector"]:
        """Zero-filled vector of length ``n``, or ``None`` if ``n`` is not a valid length."""
        if isinstance(n, (bool, np.bool_)) or not isinstance(n, (int, np.integer)) or n < 0:
            return None
        return cls(n)

    @classmethod
    def from_values(cls, values: Iterable[float] | np.ndarray) -> "Vector":
        arr = np.array(values, dtype=float).reshape(-1)
        vec = cls(0)
        vec._values = arr
        return vec

    @property
    def n(self) -> int:
        return 0 if self._values is None else int(self._values.size)

    @property
    def values(self) -> np.ndarray:
        """The underlying buffer (a view, not a copy)."""
        if self._values is None:
            return np.zeros(0, dtype=float)
        return self._values

    @property
    def freed(self) -> bool:
        return self._values is None

    def free(self) -> None:
        self._values = None

    def reset(self) -> Status:
        if self._values is None:
            return Status.FAILURE
        self._values.fill(0.0)
        return Status.SUCCESS

    def copy(self) -> "Vector":
        return Vector.from_values(self.values.copy())

    def assign(self, values: Iterable[float] | np.ndarray) -> Status:
        """Overwrite the contents from an array of the same length."""
        arr = np.asarray(values, dtype=float).reshape(-1)
        if self._values is None or arr.size != self._values.size:
            return Status.FAILURE
        self._values[:] = arr
        return Status.SUCCESS

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, index):
        return self.values[index]

    def __setitem__(self, index, value) -> None:
        if self._values is None:
            raise IndexError("Vector has been freed.")
        self._values[index] = value

    def __iter__(self):
        return iter(self.values.tolist())

    def __array__(self, dtype=None, copy=None):
        arr = self.values
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr.copy() if copy else arr

    def __repr__(self) -> str:
        if self._values is None:
            return "Vector(<freed>)"
        return f"Vector({self._values.tolist()!r})"


def _live(*vecs: Vector) -> bool:
    if any(v.freed for v in vecs):
        return False
    return len({v.n for v in vecs}) == 1


def copy(dst: Vector, src: Vector) -> Status:
    """Copy ``src`` into ``dst``; lengths must match."""
    if not _live(dst, src):
        return Status.FAILURE
    dst.values[:] = src.values
    return Status.SUCCESS


def add(out: Vector, a: Vector, b: Vector) -> Status:
    """``out = a + b``; ``out`` may alias either operand."""
    if not _live(out, a, b):
        return Status.FAILURE
    np.add(a.values, b.values, out=out.values)
    return Status.SUCCESS


def sub(out: Vector, a: Vector, b: Vector) -> Status:
    """``out = a - b``; ``out`` may alias either operand."""
    if not _live(out, a, b):
        return Status.FAILURE
    np.subtract(a.values, b.values, out=out.values)
    return Status.SUCCESS


def scale(out: Vector, vec: Vector, factor: float) -> Status:
    """``out = factor * vec``; ``out`` may alias ``vec``."""
    if not _live(out, vec):
        return Status.FAILURE
    np.multiply(vec.values, float(factor), out=out.values)
    return Status.SUCCESS


def l2norm(vec: Vector) -> Optional[float]:
    if vec.freed:
        return None
    return float(np.sqrt(np.dot(vec.values, vec.values)))


def distance(a: Vector, b: Vector) -> Optional[float]:
    """Euclidean distance, computed through a scratch vector."""
    if not _live(a, b):
        return None
    scratch = Vector.allocate(a.n)
    sub(scratch, a, b)
    return l2norm(scratch)


__all__ = [
    "Vector",
    "add",
    "copy",
    "distance",
    "l2norm",
    "scale",
    "sub",
]
