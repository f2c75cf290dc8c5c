from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from bindwire.container_interface import IContainer

K = TypeVar("K")
V = TypeVar("V")

Factory = Callable[["IContainer"], Any]
"""A factory binding: receives the live container and returns an instance."""

Signature = tuple[Any, ...]
"""Ordered constructor parameter types."""

_MISSING = object()


@dataclass(frozen=True, slots=True)
class TypeBinding:
    """Concrete class bound to an abstract key.

    ``signature`` is None when the default constructor should be used.
    """

    concrete: type[Any]
    signature: Signature | None = None


class _LockedMap(Generic[K, V]):
    """Dict wrapper whose single-key operations are atomic across threads."""

    __slots__ = ("_items", "_lock")

    def __init__(self) -> None:
        self._items: dict[K, V] = {}
        self._lock = threading.Lock()

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._items[key] = value

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._items.get(key)

    def lookup(self, key: K) -> tuple[bool, V | None]:
        """Return ``(found, value)`` so stored ``None`` values stay distinguishable."""
        with self._lock:
            value = self._items.get(key, _MISSING)  # type: ignore[arg-type]
        if value is _MISSING:
            return False, None
        return True, value  # type: ignore[return-value]

    def pop(self, key: K) -> V | None:
        with self._lock:
            return self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items


class BindingRegistry:
    """Store type, factory and contextual bindings of one container.

    Every ``put_*`` replaces at most one entry and is immediately visible to
    readers on other threads. There is no transaction spanning several maps:
    a resolution racing with a rebind sees either the old or the new entry.
    """

    def __init__(self) -> None:
        self._type_bindings: _LockedMap[Any, TypeBinding] = _LockedMap()
        self._factory_bindings: _LockedMap[Any, Factory] = _LockedMap()
        self._contextual_types: _LockedMap[tuple[Any, Any], type[Any]] = _LockedMap()
        self._contextual_values: _LockedMap[tuple[Any, Any], Any] = _LockedMap()
        self._singleton_keys: _LockedMap[Any, bool] = _LockedMap()
        self._singleton_instances: _LockedMap[Any, Any] = _LockedMap()

    # Type bindings

    def put_type_binding(
        self,
        abstract: Any,
        concrete: type[Any],
        signature: Signature | None = None,
    ) -> None:
        self._type_bindings.put(abstract, TypeBinding(concrete=concrete, signature=signature))

    def get_type_binding(self, abstract: Any) -> TypeBinding | None:
        return self._type_bindings.get(abstract)

    def has_type_binding(self, abstract: Any) -> bool:
        return abstract in self._type_bindings

    # Factory bindings

    def put_factory_binding(self, abstract: Any, factory: Factory) -> None:
        self._factory_bindings.put(abstract, factory)

    def get_factory_binding(self, abstract: Any) -> Factory | None:
        return self._factory_bindings.get(abstract)

    def has_factory_binding(self, abstract: Any) -> bool:
        return abstract in self._factory_bindings

    # Contextual bindings, keyed by (owner, needed)

    def put_contextual_type(self, owner: Any, needed: Any, concrete: type[Any]) -> None:
        self._contextual_types.put((owner, needed), concrete)

    def get_contextual_type(self, owner: Any, needed: Any) -> type[Any] | None:
        return self._contextual_types.get((owner, needed))

    def has_contextual_type(self, owner: Any, needed: Any) -> bool:
        return (owner, needed) in self._contextual_types

    def put_contextual_value(self, owner: Any, needed: Any, value: Any) -> None:
        self._contextual_values.put((owner, needed), value)

    def get_contextual_value(self, owner: Any, needed: Any) -> tuple[bool, Any]:
        """Return ``(found, value)``; a bound value may itself be None."""
        return self._contextual_values.lookup((owner, needed))

    def has_contextual_value(self, owner: Any, needed: Any) -> bool:
        return (owner, needed) in self._contextual_values

    # Singletons

    def mark_singleton(self, abstract: Any, *, singleton: bool) -> None:
        """Set or clear the resolve-once flag and drop any cached instance."""
        if singleton:
            self._singleton_keys.put(abstract, True)
        else:
            self._singleton_keys.pop(abstract)
        self._singleton_instances.pop(abstract)

    def is_singleton(self, abstract: Any) -> bool:
        return abstract in self._singleton_keys

    def get_singleton_instance(self, abstract: Any) -> tuple[bool, Any]:
        return self._singleton_instances.lookup(abstract)

    def store_singleton_instance(self, abstract: Any, instance: Any) -> None:
        self._singleton_instances.put(abstract, instance)
