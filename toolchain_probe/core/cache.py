"""
Capability cache — per-process memoization of zero-argument probes.

Entries are keyed by probe-function identity, created on first call and
kept for the life of the process.  Nothing is persisted.  A probe
declared ``force_fresh`` recomputes on every call; the policy is chosen
once, at definition time.

Not thread-safe: probes run strictly sequentially.
"""
import functools
from typing import Any, Callable, Dict, TypeVar

T = TypeVar("T")

_MISSING = object()
_cache: Dict[Callable, Any] = {}


def memoize(force_fresh: bool = False) -> Callable[[Callable[[], T]], Callable[[], T]]:
    """Decorator: cache the result of a zero-argument probe."""

    def decorator(fn: Callable[[], T]) -> Callable[[], T]:
        @functools.wraps(fn)
        def wrapper() -> T:
            if force_fresh:
                return fn()
            value = _cache.get(fn, _MISSING)
            if value is _MISSING:
                value = fn()
                _cache[fn] = value
            return value

        wrapper.force_fresh = force_fresh
        wrapper.cache_clear = lambda: _cache.pop(fn, None)
        return wrapper

    return decorator


def clear_cache() -> None:
    """Forget every cached probe result."""
    _cache.clear()
