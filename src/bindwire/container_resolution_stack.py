from __future__ import annotations

import asyncio
import threading
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, NamedTuple

from bindwire.exceptions import BindwireCyclicDependencyError

FACTORY_FRAME = ("factory",)
SINGLETON_FRAME = ("singleton",)


def constructor_frame(name: str) -> tuple[str, str]:
    return ("constructor", name)


class ResolutionFrame(NamedTuple):
    """One step of the current resolution path.

    ``mode`` tells apart building ``key`` through its factory, its singleton
    cache or one specific constructor, so a factory for ``X`` that builds
    ``X`` through a constructor is not a cycle.
    """

    key: Any
    mode: Any


# Stores (context_id, stack) so a stack inherited by another thread or task is cloned
_resolution_stack: ContextVar[tuple[tuple[int, int | None], list[ResolutionFrame]] | None] = (
    ContextVar(
        "bindwire_resolution_stack",
        default=None,
    )
)


def _get_context_id() -> tuple[int, int | None]:
    """Get an identifier for the current thread and async task, if any."""
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    return threading.get_ident(), id(task) if task is not None else None


def _get_resolution_stack() -> list[ResolutionFrame]:
    """Get the current context's resolution stack.

    When called from a different thread or async task than the one that
    created the stack, returns a cloned copy so parallel resolutions never
    share frames.
    """
    current_id = _get_context_id()
    stored = _resolution_stack.get()

    if stored is None:
        stack: list[ResolutionFrame] = []
        _resolution_stack.set((current_id, stack))
        return stack

    owner_id, stack = stored

    if owner_id != current_id:
        cloned_stack = list(stack)
        _resolution_stack.set((current_id, cloned_stack))
        return cloned_stack

    return stack


@contextmanager
def resolution_frame(key: Any, mode: Any) -> Generator[None, None, None]:
    """Push a frame for the duration of one construction step.

    Raises:
        BindwireCyclicDependencyError: If the same frame is already on the
            current resolution path.

    """
    frame = ResolutionFrame(key=key, mode=mode)
    stack = _get_resolution_stack()
    if frame in stack:
        raise BindwireCyclicDependencyError(key, [item.key for item in stack])
    stack.append(frame)
    try:
        yield
    finally:
        stack.pop()


def current_resolution_path() -> list[Any]:
    """Return the keys currently under construction, outermost first.

    A debugging helper: call it from a factory or constructor to see which
    resolution reached it. The container itself does not use it.
    """
    return [frame.key for frame in _get_resolution_stack()]
