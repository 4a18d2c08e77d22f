"""
Lift — turning side-effecting awaitables into lazy results.

    result = await attempt(lambda: sender.order_confirmed(email, name, number))
    match result:
        case Ok(_): ...
        case Error(exc): ...   # the exception the send raised
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from combinators.lift import catching_async

from orderflow._types import Lazy


def attempt[T](fn: Callable[[], Awaitable[T]]) -> Lazy[T, Exception]:
    """Run fn lazily; an exception it raises becomes the Error value."""
    return catching_async(fn, on_error=lambda e: e)


__all__ = ("attempt",)
