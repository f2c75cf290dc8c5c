from bindwire.container import Container
from bindwire.container_interface import IContainer
from bindwire.contextual import ContextualBindingBuilder
from bindwire.exceptions import (
    BindwireCyclicDependencyError,
    BindwireDependencyExtractionError,
    BindwireError,
    BindwireInvalidRegistrationError,
    BindwireInvocationError,
    BindwireNoMatchingConstructorError,
    BindwireNoMatchingMethodError,
    BindwirePreconditionError,
    BindwireUnboundAbstractTypeError,
    BindwireUnsupportedParameterKindError,
)
from bindwire.lock_mode import LockMode
from bindwire.markers import constructor
from bindwire.registry import BindingRegistry

__all__ = [
    "BindingRegistry",
    "BindwireCyclicDependencyError",
    "BindwireDependencyExtractionError",
    "BindwireError",
    "BindwireInvalidRegistrationError",
    "BindwireInvocationError",
    "BindwireNoMatchingConstructorError",
    "BindwireNoMatchingMethodError",
    "BindwirePreconditionError",
    "BindwireUnboundAbstractTypeError",
    "BindwireUnsupportedParameterKindError",
    "Container",
    "ContextualBindingBuilder",
    "IContainer",
    "LockMode",
    "constructor",
]
