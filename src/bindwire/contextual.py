from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bindwire._internal.type_checks import is_runtime_class
from bindwire.exceptions import BindwireInvalidRegistrationError, BindwirePreconditionError

if TYPE_CHECKING:
    from typing_extensions import Self

    from bindwire.container_interface import IContainer

_UNSET = object()


class ContextualBindingBuilder:
    """Collect one ``when(owner).needs(dependency).give(value)`` registration.

    The builder is short-lived: ``needs`` is called exactly once, followed by
    exactly one terminal ``give``/``give_type``/``give_value`` call.
    """

    __slots__ = ("_container", "_done", "_needs", "_owner")

    def __init__(self, container: IContainer, owner: Any) -> None:
        self._container = container
        self._owner = owner
        self._needs: Any = _UNSET
        self._done = False

    def needs(self, dependency: Any) -> Self:
        """Record the parameter type the override applies to.

        Args:
            dependency: Parameter type of the owner's constructors and methods.

        Raises:
            BindwirePreconditionError: If ``needs`` was already called.

        """
        if self._needs is not _UNSET:
            msg = (
                f"needs() was already called with {self._needs!r} for "
                f"{self._owner!r}; start a new when() chain."
            )
            raise BindwirePreconditionError(msg)
        self._needs = dependency
        return self

    def give(self, implementation: Any) -> bool:
        """Bind a class (type binding) or any other value (value binding).

        Args:
            implementation: Concrete class to construct, or literal value to inject.

        Returns:
            True once the binding is registered.

        """
        needed = self._consume()
        return self._container.add_contextual_binding(self._owner, needed, implementation)

    def give_type(self, implementation: type[Any]) -> bool:
        """Bind a concrete class to construct for the pending dependency."""
        if not is_runtime_class(implementation):
            msg = f"give_type() expects a class, got {implementation!r}."
            raise BindwireInvalidRegistrationError(msg)
        return self.give(implementation)

    def give_value(self, value: Any) -> bool:
        """Bind a literal, even a class object, to inject as-is."""
        needed = self._consume()
        return self._container.add_contextual_value(self._owner, needed, value)

    def _consume(self) -> Any:
        if self._needs is _UNSET:
            msg = f"give() called before needs() for {self._owner!r}."
            raise BindwirePreconditionError(msg)
        if self._done:
            msg = f"The contextual binding for {self._owner!r} was already given."
            raise BindwirePreconditionError(msg)
        self._done = True
        return self._needs

    def __repr__(self) -> str:
        needs = "<unset>" if self._needs is _UNSET else repr(self._needs)
        return f"ContextualBindingBuilder(owner={self._owner!r}, needs={needs})"
