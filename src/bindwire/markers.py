from __future__ import annotations

from typing import Any, TypeVar

from bindwire.exceptions import BindwireInvalidRegistrationError

F = TypeVar("F")

CONSTRUCTOR_MARKER = "__bindwire_constructor__"


def constructor(func: F) -> F:
    """Mark a classmethod as an alternate constructor.

    The container considers ``__init__`` first and then every marked
    classmethod, in class-body definition order, when it selects a
    constructor by signature. Apply it above or below ``@classmethod``.

    Examples:
        .. code-block:: python

            class Report:
                def __init__(self, source: Source, sink: Sink) -> None: ...

                @constructor
                @classmethod
                def reversed(cls, sink: Sink, source: Source) -> Report:
                    return cls(source, sink)


            container.resolve(Report, Sink, Source)

    Args:
        func: Classmethod, or the function about to be wrapped by ``classmethod``.

    Returns:
        The same object, marked.

    Raises:
        BindwireInvalidRegistrationError: If ``func`` is not a function or classmethod.

    """
    target = func.__func__ if isinstance(func, classmethod) else func
    if not callable(target):
        msg = f"@constructor expects a classmethod, got {func!r}."
        raise BindwireInvalidRegistrationError(msg)
    setattr(target, CONSTRUCTOR_MARKER, True)
    return func


def is_constructor(attribute: Any) -> bool:
    """Return true for a classmethod marked with ``@constructor``.

    Args:
        attribute: Raw class ``__dict__`` entry.

    """
    return isinstance(attribute, classmethod) and getattr(
        attribute.__func__,
        CONSTRUCTOR_MARKER,
        False,
    )
