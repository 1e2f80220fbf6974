"""
Process-wide decoding configuration

The maximum nesting depth accepted by the decoder can be passed explicitly to
every decode call. This module only holds the default used when a call does
not specify one. Reading or replacing the default is protected by a lock, and
a decode call reads it once before starting, so changing it never affects a
decode that is already running.
"""
import threading
from typing import Optional

DEFAULT_MAX_DEPTH = 5000

# Sentinel meaning "use the process-wide default"
USE_DEFAULT = object()

_lock = threading.Lock()
_max_depth = DEFAULT_MAX_DEPTH  # type: Optional[int]


def validate_max_depth(depth) -> Optional[int]:
    """Return depth if it is a valid depth limit (non-negative integer or None)

    TypeError is raised for non-integral values, ValueError for negative ones"""
    if depth is None:
        return None
    # bool is a subclass of int but 'True' is not a depth
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TypeError("Maximum depth must be an integer or None, not {}"
                        .format(type(depth).__name__))
    if depth < 0:
        raise ValueError("Maximum depth must be >= 0")
    return depth


def get_max_depth() -> Optional[int]:
    """Return the default maximum depth (None if depth is unbounded)"""
    with _lock:
        return _max_depth


def set_max_depth(depth: Optional[int]) -> None:
    """Set the default maximum depth used by subsequent decode calls

    None disables the limit"""
    global _max_depth
    depth = validate_max_depth(depth)
    with _lock:
        _max_depth = depth


def resolve_max_depth(depth) -> Optional[int]:
    """Return the depth limit a decode call must use"""
    if depth is USE_DEFAULT:
        return get_max_depth()
    return validate_max_depth(depth)
