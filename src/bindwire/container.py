from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable, Collection
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar, overload

from bindwire._internal.type_checks import (
    classify_parameter_kind,
    erase_generic,
    is_abstract_type,
    is_runtime_class,
)
from bindwire.container_interface import IContainer
from bindwire.container_resolution_stack import (
    FACTORY_FRAME,
    SINGLETON_FRAME,
    constructor_frame,
    resolution_frame,
)
from bindwire.contextual import ContextualBindingBuilder
from bindwire.defaults import DEFAULT_ARRAY_TYPES, DEFAULT_LOCK_MODE, DEFAULT_PRIMITIVE_TYPES
from bindwire.dependencies import DependenciesExtractor, Executable, ParameterInfo
from bindwire.exceptions import (
    BindwireDependencyExtractionError,
    BindwireError,
    BindwireInvalidRegistrationError,
    BindwireInvocationError,
    BindwireNoMatchingConstructorError,
    BindwireNoMatchingMethodError,
    BindwireUnboundAbstractTypeError,
    BindwireUnsupportedParameterKindError,
)
from bindwire.lock_mode import LockMode
from bindwire.registry import BindingRegistry, Factory, Signature, TypeBinding

T = TypeVar("T")

logger = logging.getLogger(__name__)

_KEEP_DEFAULT = object()


def _provide_container(container: IContainer) -> IContainer:
    return container


class Container(IContainer):
    """Resolve types and their dependencies from a registry of bindings.

    Concrete classes need no registration: their ``__init__`` parameters are
    read from type hints and resolved recursively. Abstract types (protocols,
    ABCs, generic aliases) are resolved through a type binding
    (``bind(Abstract, Impl)``) or a factory binding
    (``bind(Abstract, lambda container: ...)``). Contextual bindings
    (``when(Owner).needs(Dep).give(Impl)``) override what one owner receives
    for one parameter type and are the only way to inject primitives.

    A class that lists ``abc.ABC`` directly among its bases counts as a marker
    interface and is abstract even without abstract methods, so it needs a
    binding. Binding a key to a protocol or an abstract class fails with
    ``BindwireUnboundAbstractTypeError`` when the key is resolved.

    Every ``resolve`` call builds a fresh object graph, except for keys
    registered with ``singleton``, which are built once and cached. Each
    container owns its registry, so independent containers can coexist.
    """

    __slots__ = (
        "_array_types",
        "_dependencies_extractor",
        "_detect_cycles",
        "_lock_mode",
        "_primitive_types",
        "_registry",
        "_singleton_locks",
        "_singleton_locks_lock",
    )

    def __init__(
        self,
        *,
        primitive_types: Collection[type[Any]] = DEFAULT_PRIMITIVE_TYPES,
        array_types: Collection[type[Any]] = DEFAULT_ARRAY_TYPES,
        lock_mode: LockMode = DEFAULT_LOCK_MODE,
        detect_cycles: bool = True,
    ) -> None:
        """Initialize a container with an empty registry.

        Args:
            primitive_types: Parameter types that are never constructed and
                must come from a contextual value binding or a default.
            array_types: Array and fixed-size-sequence parameter types with
                the same restriction.
            lock_mode: Locking strategy for singleton creation. Keep
                ``LockMode.THREAD`` when the container is shared by threads.
            detect_cycles: Track the types under construction and raise
                ``BindwireCyclicDependencyError`` on re-entry instead of
                recursing until ``RecursionError``.

        """
        self._registry = BindingRegistry()
        self._dependencies_extractor = DependenciesExtractor()
        self._primitive_types = frozenset(primitive_types)
        self._array_types = frozenset(array_types)
        self._lock_mode = lock_mode
        self._detect_cycles = detect_cycles

        # Per-key re-entrant locks for singleton creation
        self._singleton_locks: dict[Any, threading.RLock] = {}
        self._singleton_locks_lock = threading.Lock()

        self._registry.put_factory_binding(IContainer, _provide_container)
        self._registry.put_factory_binding(type(self), _provide_container)

    @property
    def registry(self) -> BindingRegistry:
        """The binding registry owned by this container."""
        return self._registry

    def bounded(self, abstract: Any) -> bool:
        """Check whether ``abstract`` has a type or factory binding.

        Args:
            abstract: Dependency key to check.

        """
        return self._registry.has_type_binding(abstract) or self._registry.has_factory_binding(
            abstract,
        )

    @overload
    def bind(self, abstract: Any, concrete: type[Any], /, *signature: Any) -> bool: ...

    @overload
    def bind(self, abstract: Any, concrete: Callable[[IContainer], Any], /) -> bool: ...

    def bind(self, abstract: Any, concrete: Any, /, *signature: Any) -> bool:
        """Register a type binding or a factory binding.

        A class registers a type binding: resolving ``abstract`` constructs
        ``concrete`` with the constructor whose parameter types equal
        ``signature`` (``__init__`` when no signature is given). Any other
        callable registers a factory binding called with this container.

        A type binding and a factory binding for the same key coexist; the
        type binding wins. Re-registering replaces the previous entry of the
        same kind.

        Args:
            abstract: Dependency key, usually a protocol, ABC or class.
            concrete: Implementation class or factory callable.
            *signature: Constructor parameter types, for class bindings only.

        Returns:
            True once the binding is registered.

        Raises:
            BindwireInvalidRegistrationError: If ``abstract`` is not hashable,
                ``concrete`` is neither a class nor callable, or a signature is
                given with a factory.

        """
        self._register(abstract, concrete, signature, singleton=False)
        return True

    def singleton(self, abstract: Any, concrete: Any, /, *signature: Any) -> bool:
        """Register a binding that is resolved at most once.

        Takes the same arguments as ``bind``. The first ``resolve(abstract)``
        builds the instance under a per-key lock; later calls, from any
        thread, return the cached instance. Rebinding ``abstract`` drops the
        cached instance.

        Returns:
            True once the binding is registered.

        """
        self._register(abstract, concrete, signature, singleton=True)
        return True

    def _register(
        self,
        abstract: Any,
        concrete: Any,
        signature: Signature,
        *,
        singleton: bool,
    ) -> None:
        self._validate_key(abstract)
        if is_runtime_class(concrete):
            self._registry.put_type_binding(abstract, concrete, signature or None)
        elif callable(concrete):
            if signature:
                msg = (
                    f"A constructor signature cannot be combined with factory {concrete!r} "
                    f"for {abstract!r}."
                )
                raise BindwireInvalidRegistrationError(msg)
            self._registry.put_factory_binding(abstract, concrete)
        else:
            msg = f"Binding for {abstract!r} must be a class or a callable, got {concrete!r}."
            raise BindwireInvalidRegistrationError(msg)
        self._registry.mark_singleton(abstract, singleton=singleton)
        logger.debug(
            "Bound %r to %r (signature=%r, singleton=%s)",
            abstract,
            concrete,
            signature or None,
            singleton,
        )

    @overload
    def resolve(self, key: type[T], /, *signature: Any) -> T: ...

    @overload
    def resolve(self, key: Any, /, *signature: Any) -> Any: ...

    def resolve(self, key: Any, /, *signature: Any) -> Any:
        """Build ``key`` and its transitive dependencies.

        Without a signature the type binding of ``key`` is used first, then
        its factory binding; unbound concrete classes are built with
        ``__init__``. With a signature ``key`` itself is built with the
        constructor whose parameter types match exactly and in order,
        ignoring bindings of ``key``.

        Args:
            key: Dependency key to resolve.
            *signature: Parameter types selecting one constructor.

        Returns:
            The resolved instance.

        Raises:
            BindwireUnboundAbstractTypeError: If an abstract type has no binding.
            BindwireNoMatchingConstructorError: If no constructor matches ``signature``.
            BindwireUnsupportedParameterKindError: If a primitive or array
                parameter has neither a contextual value nor a default.
            BindwireCyclicDependencyError: If a type depends on itself.
            BindwireInvocationError: If a constructor or factory raised.

        """
        if signature:
            return self._construct(key, signature)
        return self._resolve_key(key)

    def call(self, instance: Any, method_name: str, /, *signature: Any) -> Any:
        """Call ``instance.method_name`` with injected arguments.

        The method is looked up on ``type(instance)`` and must declare exactly
        the parameter types in ``signature``. Contextual bindings registered
        for ``type(instance)`` apply to its parameters.

        Args:
            instance: Object owning the method.
            method_name: Name of the method to call.
            *signature: Parameter types the method declares, in order.

        Returns:
            Whatever the method returns.

        Raises:
            BindwireNoMatchingMethodError: If no method with that name and
                signature exists.
            BindwireInvocationError: If the method raised.

        """
        executable = self._dependencies_extractor.get_method(instance, method_name)
        if executable is None or not executable.matches(signature):
            raise BindwireNoMatchingMethodError(type(instance), method_name, signature)
        args, kwargs = self._resolve_arguments(executable)
        logger.debug("Calling %s.%s", type(instance).__qualname__, method_name)
        return self._invoke(executable.function, executable.function, args, kwargs)

    def when(self, owner: Any) -> ContextualBindingBuilder:
        """Start a contextual binding scoped to ``owner``.

        Examples:
            .. code-block:: python

                container.when(ReportJob).needs(Storage).give(S3Storage)
                container.when(ReportJob).needs(int).give(3)

        Args:
            owner: Class whose constructor and method parameters are overridden.

        """
        return ContextualBindingBuilder(self, owner)

    def add_contextual_binding(self, owner: Any, needed: Any, implementation: Any) -> bool:
        """Register a contextual binding without the builder.

        A class becomes a contextual type binding and is resolved when
        ``owner`` needs ``needed``; any other value is injected as-is.

        Args:
            owner: Class whose parameters are overridden.
            needed: Parameter type to override.
            implementation: Concrete class or literal value.

        Returns:
            True once the binding is registered.

        """
        if not is_runtime_class(implementation):
            return self.add_contextual_value(owner, needed, implementation)
        self._validate_key((owner, needed))
        self._registry.put_contextual_type(owner, needed, implementation)
        logger.debug("Bound %r to %r when %r needs it", needed, implementation, owner)
        return True

    def add_contextual_value(self, owner: Any, needed: Any, value: Any) -> bool:
        """Register a literal injected when ``owner`` needs ``needed``.

        Args:
            owner: Class whose parameters are overridden.
            needed: Parameter type to override, for example ``int``.
            value: Value injected as-is, even when it is a class.

        Returns:
            True once the binding is registered.

        """
        self._validate_key((owner, needed))
        self._registry.put_contextual_value(owner, needed, value)
        logger.debug("Bound value for %r when %r needs it", needed, owner)
        return True

    def _validate_key(self, key: Any) -> None:
        try:
            hash(key)
        except TypeError as error:
            msg = f"Dependency keys must be hashable, got {key!r}."
            raise BindwireInvalidRegistrationError(msg) from error

    def _resolve_key(self, key: Any) -> Any:
        binding = self._registry.get_type_binding(key)
        if binding is not None:
            return self._provide(key, binding)

        factory = self._registry.get_factory_binding(key)
        if factory is not None:
            return self._provide(key, factory)

        return self._construct(key, None)

    def _provide(self, key: Any, binding: TypeBinding | Factory) -> Any:
        if not self._registry.is_singleton(key):
            return self._create(key, binding)

        found, instance = self._registry.get_singleton_instance(key)
        if found:
            return instance

        with self._frame(key, SINGLETON_FRAME), self._singleton_lock(key):
            # Second check after acquiring the lock
            found, instance = self._registry.get_singleton_instance(key)
            if found:
                return instance
            instance = self._create(key, binding)
            self._registry.store_singleton_instance(key, instance)
            logger.debug("Cached singleton %r", key)
            return instance

    def _create(self, key: Any, binding: TypeBinding | Factory) -> Any:
        if isinstance(binding, TypeBinding):
            return self._construct(binding.concrete, binding.signature)
        with self._frame(key, FACTORY_FRAME):
            return self._invoke(binding, binding, (self,), {})

    def _construct(self, cls: type[Any], signature: Signature | None) -> Any:
        if is_abstract_type(cls):
            raise BindwireUnboundAbstractTypeError(cls)
        executable = self._select_constructor(cls, signature)
        with self._frame(cls, constructor_frame(executable.name)):
            args, kwargs = self._resolve_arguments(executable)
            logger.debug("Constructing %s via %s", cls.__qualname__, executable.name)
            return self._invoke(executable.function, cls, args, kwargs)

    def _select_constructor(self, cls: type[Any], signature: Signature | None) -> Executable:
        constructors = self._dependencies_extractor.get_constructors(cls)
        if signature is None:
            return constructors[0]
        for candidate in constructors:
            if candidate.matches(signature):
                return candidate
        raise BindwireNoMatchingConstructorError(
            cls,
            signature,
            [candidate.signature for candidate in constructors],
        )

    def _resolve_arguments(self, executable: Executable) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter in executable.parameters:
            value = self._resolve_parameter(executable.owner, parameter)
            if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(parameter.default if value is _KEEP_DEFAULT else value)
            elif value is not _KEEP_DEFAULT:
                kwargs[parameter.name] = value
        return args, kwargs

    def _resolve_parameter(self, owner: Any, parameter: ParameterInfo) -> Any:
        if not parameter.is_annotated:
            if parameter.has_default:
                return _KEEP_DEFAULT
            reason = f"parameter '{parameter.name}' has no type annotation"
            raise BindwireDependencyExtractionError(owner, reason)

        annotation = parameter.annotation
        erased = erase_generic(annotation)
        lookup_keys = (annotation,) if erased is annotation else (annotation, erased)

        # Contextual overrides win over everything else
        for needed in lookup_keys:
            concrete = self._registry.get_contextual_type(owner, needed)
            if concrete is not None:
                return self._resolve_key(concrete)
            found, value = self._registry.get_contextual_value(owner, needed)
            if found:
                return value

        kind = classify_parameter_kind(
            annotation,
            primitive_types=self._primitive_types,
            array_types=self._array_types,
        )
        if kind is not None:
            if parameter.has_default:
                return _KEEP_DEFAULT
            raise BindwireUnsupportedParameterKindError(owner, parameter.name, annotation, kind)

        target = annotation if self.bounded(annotation) else erased
        if is_abstract_type(target) and not self.bounded(target):
            if parameter.has_default:
                return _KEEP_DEFAULT
            raise BindwireUnboundAbstractTypeError(target)

        return self._resolve_key(target)

    def _invoke(
        self,
        function: Callable[..., Any],
        target: Any,
        args: Collection[Any],
        kwargs: dict[str, Any],
    ) -> Any:
        try:
            return function(*args, **kwargs)
        except BindwireError:
            raise
        except Exception as error:
            raise BindwireInvocationError(target, error) from error

    def _frame(self, key: Any, mode: Any) -> AbstractContextManager[None]:
        if not self._detect_cycles:
            return nullcontext()
        return resolution_frame(key, mode)

    def _singleton_lock(self, key: Any) -> AbstractContextManager[Any]:
        if self._lock_mode is LockMode.NONE:
            return nullcontext()
        return self._get_singleton_lock(key)

    def _get_singleton_lock(self, key: Any) -> threading.RLock:
        """Get or create the lock guarding creation of singleton ``key``.

        Uses double-checked locking to minimize lock contention.
        """
        lock = self._singleton_locks.get(key)
        if lock is None:
            with self._singleton_locks_lock:
                lock = self._singleton_locks.get(key)
                if lock is None:
                    lock = threading.RLock()
                    self._singleton_locks[key] = lock
        return lock
