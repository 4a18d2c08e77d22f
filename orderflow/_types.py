"""
Core types for orderflow.

Re-exports from kungfu + domain enums and the acting principal.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class CouponType(Enum):
    PERCENTAGE = "Percentage"
    FLAT = "Flat"


class PaymentMethod(Enum):
    CREDIT_CARD = "CreditCard"
    DEBIT_CARD = "DebitCard"
    PAYPAL = "PayPal"
    STRIPE = "Stripe"
    OTHER = "Other"


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class UserRole(Enum):
    USER = "User"
    SELLER = "Seller"
    ADMIN = "Admin"


# ═══════════════════════════════════════════════════════════════════════════════
# Actor — who is calling
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Actor:
    """Authenticated caller as resolved by the gateway."""

    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def is_seller(self) -> bool:
        return self.role is UserRole.SELLER


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every column stores."""
    return datetime.now(UTC).replace(tzinfo=None)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Lazy",
    # Enums
    "OrderStatus",
    "CouponType",
    "PaymentMethod",
    "PaymentStatus",
    "UserRole",
    # Principal
    "Actor",
    "utcnow",
)
