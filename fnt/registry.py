"""Name to method-factory registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .exceptions import ConfigurationError
from .logging import LogContext, get_logger
from .methods import BUILTIN_METHODS, Method

MethodFactory = Callable[..., Method]


@dataclass(frozen=True)
class MethodDescriptor:
    """Immutable registry entry: a name and the callable that builds instances.

    The factory is called as ``factory(dimensions, log=...)``.
    """

    name: str
    factory: MethodFactory
    description: str = ""


class MethodRegistry:
    """Registry of method factories, created with the built-in methods."""

    def __init__(self, include_defaults: bool = True):
        self._methods: dict[str, MethodDescriptor] = {}
        if include_defaults:
            self._register_defaults()

    def _register_defaults(self) -> None:
        for cls in BUILTIN_METHODS:
            self.register(cls.name, cls, description=cls.description)

    def register(
        self, name: str, factory: MethodFactory, description: str = ""
    ) -> MethodDescriptor:
        """Register (or replace) the factory for ``name``."""
        if not name:
            raise ConfigurationError("Method name must be a non-empty string.")
        descriptor = MethodDescriptor(name=name, factory=factory, description=description)
        self._methods[name] = descriptor
        return descriptor

    def unregister(self, name: str) -> None:
        self._methods.pop(name, None)

    def lookup(self, name: str) -> MethodDescriptor:
        try:
            return self._methods[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown method '{name}'. Available: {self.names()}"
            ) from None

    def create(
        self, name: str, dimensions: int, log: Optional[LogContext] = None
    ) -> Method:
        """Instantiate method ``name`` for ``dimensions`` variables.

        Raises:
            ConfigurationError: If the name is unknown or the method rejects
                the dimensionality.
        """
        descriptor = self.lookup(name)
        if log is None:
            log = LogContext(logger=get_logger("methods"))
        return descriptor.factory(dimensions, log=log)

    def names(self) -> list[str]:
        return sorted(self._methods)

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __iter__(self) -> Iterator[MethodDescriptor]:
        return iter(self._methods.values())

    def __len__(self) -> int:
        return len(self._methods)


_global_registry: Optional[MethodRegistry] = None


def get_registry() -> MethodRegistry:
    """Process-wide default registry."""
    global _global_registry
    if _global_registry is None:
        _global_registry = MethodRegistry()
    return _global_registry


__all__ = ["MethodDescriptor", "MethodFactory", "MethodRegistry", "get_registry"]
