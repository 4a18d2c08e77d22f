"""
Domain errors.

Raised inside the workflow, carried as `Error(...)` by ops handlers and
mapped onto HTTP statuses by the wire layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class OrderError(Exception):
    """Base for caller-recoverable failures."""

    message: str
    status: int = field(default=400, kw_only=True)

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class BadRequest(OrderError):
    """Business rule violation: empty cart, stock, coupon."""


@dataclass(eq=False)
class Unauthorized(OrderError):
    """Ownership or role mismatch."""

    status: int = field(default=403, kw_only=True)


@dataclass(eq=False)
class Unauthenticated(OrderError):
    """No usable caller identity on the request."""

    message: str = "Invalid user context"
    status: int = field(default=401, kw_only=True)


@dataclass(eq=False)
class NotFound(OrderError):
    status: int = field(default=404, kw_only=True)

    @classmethod
    def entity(cls, name: str, id: int | str) -> NotFound:
        return cls(f"{name} with id '{id}' was not found.")


@dataclass(eq=False)
class OrderNumberExhausted(Exception):
    """Could not draw a free order number within the attempt budget."""

    attempts: int

    def __str__(self) -> str:
        return f"no free order number after {self.attempts} attempts"


__all__ = (
    "OrderError",
    "BadRequest",
    "Unauthorized",
    "Unauthenticated",
    "NotFound",
    "OrderNumberExhausted",
)
