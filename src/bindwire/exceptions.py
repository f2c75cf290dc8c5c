from __future__ import annotations

from typing import Any


def _describe(key: Any) -> str:
    qualname = getattr(key, "__qualname__", None)
    if isinstance(key, type) and qualname is not None:
        return f"{key.__module__}.{qualname}"
    return repr(key)


def _describe_signature(signature: tuple[Any, ...]) -> str:
    return "(" + ", ".join(_describe(item) for item in signature) + ")"


class BindwireError(Exception):
    """Represent a base class for all bindwire-specific failures.

    Catch this type when you want to handle any bindwire error path without
    matching each concrete exception class individually.
    """


class BindwireInvalidRegistrationError(BindwireError):
    """Signal invalid arguments passed to a registration API.

    Raised by ``Container.bind``, ``Container.singleton`` and the contextual
    binding APIs when the key is not hashable, when the implementation is
    neither a class nor a callable factory, or when a constructor signature is
    combined with a factory.
    """


class BindwireUnboundAbstractTypeError(BindwireError):
    """Signal that resolution reached an abstract type with no binding.

    Abstract types (protocols, ABCs, generic aliases) are never
    self-constructible. Typical fixes are ``container.bind(Abstract, Impl)``,
    a factory binding, or a contextual binding scoped to the owner that needs
    the abstract type.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Unbound abstract type {_describe(key)}")


class BindwireNoMatchingConstructorError(BindwireError):
    """Signal that no constructor matches an explicitly requested signature.

    Matching is positional and exact: ``(A, list)`` and ``(list, A)`` are
    different signatures.
    """

    def __init__(
        self,
        cls: type[Any],
        signature: tuple[Any, ...],
        available: list[tuple[Any, ...]],
    ) -> None:
        self.cls = cls
        self.signature = signature
        self.available = available
        candidates = ", ".join(_describe_signature(item) for item in available) or "none"
        super().__init__(
            f"No constructor of {_describe(cls)} matches {_describe_signature(signature)}; "
            f"available: {candidates}",
        )


class BindwireNoMatchingMethodError(BindwireError):
    """Signal that a method lookup by name and signature failed."""

    def __init__(self, owner: type[Any], method_name: str, signature: tuple[Any, ...]) -> None:
        self.owner = owner
        self.method_name = method_name
        self.signature = signature
        super().__init__(
            f"No method {_describe(owner)}.{method_name}{_describe_signature(signature)}",
        )


class BindwireUnsupportedParameterKindError(BindwireError):
    """Signal a primitive or array parameter without a contextual value.

    Primitives and arrays cannot be constructed. Supply them with
    ``container.when(Owner).needs(int).give(10)`` or give the parameter a
    default value.
    """

    def __init__(self, owner: Any, parameter: str, key: Any, kind: str) -> None:
        self.owner = owner
        self.parameter = parameter
        self.key = key
        self.kind = kind
        super().__init__(
            f"Cannot resolve {kind} type {_describe(key)} for parameter "
            f"'{parameter}' of {_describe(owner)}",
        )


class BindwireInvocationError(BindwireError):
    """Signal that a constructor, factory or method body raised.

    The original exception is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, target: Any, cause: BaseException) -> None:
        self.target = target
        self.cause = cause
        super().__init__(f"Invocation of {_describe(target)} failed: {cause!r}")


class BindwirePreconditionError(BindwireError):
    """Signal misuse of the contextual binding builder.

    Raised when ``give`` is called before ``needs``, when ``needs`` is called
    twice, or when the builder is reused after its terminal ``give``.
    """


class BindwireCyclicDependencyError(BindwireError):
    """Signal that resolution re-entered a type already under construction.

    ``chain`` lists the keys on the current resolution path, ending with the
    key that closed the cycle.
    """

    def __init__(self, key: Any, chain: list[Any]) -> None:
        self.key = key
        self.chain = chain
        path = " -> ".join(_describe(item) for item in [*chain, key])
        super().__init__(f"Circular dependency detected: {path}")


class BindwireDependencyExtractionError(BindwireError):
    """Signal that parameter types of an executable cannot be determined.

    Common triggers are forward references that do not evaluate in the
    defining module and required parameters without annotations.
    """

    def __init__(self, target: Any, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Cannot extract dependencies of {_describe(target)}: {reason}")
