import array
from typing import Any

from bindwire.lock_mode import LockMode

DEFAULT_PRIMITIVE_TYPES: frozenset[type[Any]] = frozenset(
    {
        int,
        float,
        complex,
        bool,
        str,
        bytes,
    },
)

DEFAULT_ARRAY_TYPES: frozenset[type[Any]] = frozenset(
    {
        tuple,
        bytearray,
        memoryview,
        array.array,
    },
)

DEFAULT_LOCK_MODE = LockMode.THREAD
