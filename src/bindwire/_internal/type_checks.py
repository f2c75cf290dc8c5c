from __future__ import annotations

import inspect
import types
from abc import ABC
from collections.abc import Collection
from typing import Any, Literal, TypeGuard, Union, get_origin

ParameterKind = Literal["primitive", "array"]


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_abstract_type(candidate: object) -> bool:
    """Return true when candidate can never be instantiated directly.

    Protocols, classes with unimplemented abstract methods, marker interfaces
    deriving straight from ``abc.ABC`` and non-class keys (generic aliases,
    unions, ``NewType``) all need a binding before they can be resolved.

    Args:
        candidate: Dependency key being classified.

    """
    if not is_runtime_class(candidate):
        return True
    if getattr(candidate, "_is_protocol", False):
        return True
    return inspect.isabstract(candidate) or ABC in candidate.__bases__


def erase_generic(annotation: Any) -> Any:
    """Return the runtime origin class of a parametrised generic, else the annotation.

    Args:
        annotation: Parameter annotation such as ``deque[Service]``.

    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return annotation
    if is_runtime_class(origin):
        return origin
    return annotation


def classify_parameter_kind(
    annotation: Any,
    *,
    primitive_types: Collection[type[Any]],
    array_types: Collection[type[Any]],
) -> ParameterKind | None:
    """Return the unsupported parameter kind of an annotation, if any.

    Membership is exact so that subclasses such as ``NamedTuple`` types stay
    constructible.

    Args:
        annotation: Parameter annotation to classify.
        primitive_types: Types treated as primitives.
        array_types: Types treated as arrays or fixed-size sequences.

    """
    erased = erase_generic(annotation)
    if not is_runtime_class(erased):
        return None
    if erased in primitive_types:
        return "primitive"
    if erased in array_types:
        return "array"
    return None


__all__ = [
    "ParameterKind",
    "classify_parameter_kind",
    "erase_generic",
    "is_abstract_type",
    "is_runtime_class",
]
