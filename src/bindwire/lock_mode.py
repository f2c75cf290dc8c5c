from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for cached singleton resolution.

    Use ``THREAD`` (the default) when one container is shared between threads.
    ``NONE`` skips locking for hosts that resolve from a single thread.
    """

    THREAD = "thread"
    """Guard each cached singleton with its own ``threading.RLock``."""

    NONE = "none"
    """Disable locking around singleton cache reads/writes."""
