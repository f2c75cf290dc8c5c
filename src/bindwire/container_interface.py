from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, overload

if TYPE_CHECKING:
    from bindwire.contextual import ContextualBindingBuilder

T = TypeVar("T")


class IContainer(ABC):
    """Interface for container-like objects."""

    @abstractmethod
    def bounded(self, abstract: Any) -> bool:
        """Check whether ``abstract`` has a type or factory binding."""

    # Overload 1: Class binding - container.bind(Interface, Impl, *signature)
    @overload
    @abstractmethod
    def bind(self, abstract: Any, concrete: type[Any], /, *signature: Any) -> bool: ...

    # Overload 2: Factory binding - container.bind(Interface, lambda c: ...)
    @overload
    @abstractmethod
    def bind(self, abstract: Any, concrete: Callable[[IContainer], Any], /) -> bool: ...

    @abstractmethod
    def bind(self, abstract: Any, concrete: Any, /, *signature: Any) -> bool:
        """Register a type binding or a factory binding."""

    @abstractmethod
    def singleton(self, abstract: Any, concrete: Any, /, *signature: Any) -> bool:
        """Register a binding that is resolved at most once."""

    @overload
    @abstractmethod
    def resolve(self, key: type[T], /, *signature: Any) -> T: ...

    @overload
    @abstractmethod
    def resolve(self, key: Any, /, *signature: Any) -> Any: ...

    @abstractmethod
    def resolve(self, key: Any, /, *signature: Any) -> Any:
        """Build ``key`` and its transitive dependencies."""

    @abstractmethod
    def call(self, instance: Any, method_name: str, /, *signature: Any) -> Any:
        """Call ``instance.method_name`` with injected arguments."""

    @abstractmethod
    def when(self, owner: Any) -> ContextualBindingBuilder:
        """Start a contextual binding scoped to ``owner``."""

    @abstractmethod
    def add_contextual_binding(self, owner: Any, needed: Any, implementation: Any) -> bool:
        """Register a contextual type binding (class) or value binding (anything else)."""

    @abstractmethod
    def add_contextual_value(self, owner: Any, needed: Any, value: Any) -> bool:
        """Register a contextual value binding, even when ``value`` is a class."""
