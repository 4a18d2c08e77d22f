"""
orderflow — order placement and fulfillment core for a multi-seller shop.

    from orderflow import orders as O    # Place, transition, read orders
    from orderflow import reports as R   # Sales rollups
    from orderflow import coupons        # Coupon evaluation
    from orderflow import ops as Ops     # Operations as data + Runner
"""

from orderflow import coupons
from orderflow import lift
from orderflow import notify
from orderflow import ops
from orderflow import orders
from orderflow import reports
from orderflow import stock
from orderflow._types import (
    Lazy,
    Actor,
    OrderStatus,
    UserRole,
)

__version__ = "0.1.0"

__all__ = (
    "coupons",
    "lift",
    "notify",
    "ops",
    "orders",
    "reports",
    "stock",
    "Lazy",
    "Actor",
    "OrderStatus",
    "UserRole",
)
