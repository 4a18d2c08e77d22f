"""
Order assembly — order numbers, the Order aggregate, its payment stub.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from orderflow._types import OrderStatus, PaymentMethod, PaymentStatus
from orderflow.db import OrderItemTable, OrderTable, PaymentTable
from orderflow.errors import OrderNumberExhausted
from orderflow.store import OrderStore

ZERO = Decimal("0")


# ═══════════════════════════════════════════════════════════════════════════════
# Order numbers
# ═══════════════════════════════════════════════════════════════════════════════


def random_suffix() -> int:
    return random.randint(100000, 999999)


def format_order_number(day: datetime, suffix: int) -> str:
    return f"ORD-{day:%Y%m%d}-{suffix:06d}"


async def generate_order_number(
    orders: OrderStore,
    *,
    now: datetime,
    draw: Callable[[], int] = random_suffix,
    attempts: int = 20,
) -> str:
    """
    Draw ORD-YYYYMMDD-NNNNNN numbers until one is unused.

    The unique index on orders.order_number still rejects a number taken
    by a concurrent placement between this check and commit.
    """
    for _ in range(attempts):
        candidate = format_order_number(now, draw())
        if not await orders.exists_order_number(candidate):
            return candidate
    raise OrderNumberExhausted(attempts)


# ═══════════════════════════════════════════════════════════════════════════════
# Aggregate
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PricedLine:
    """One cart line priced against the live product."""

    product_id: int
    quantity: int
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity


def assemble_order(
    *,
    order_number: str,
    user_id: int,
    address_id: int,
    lines: list[PricedLine],
    discount: Decimal,
    coupon_id: int | None,
    created_at: datetime,
    tax: Decimal = ZERO,
) -> OrderTable:
    sub_total = sum((line.total for line in lines), ZERO)
    total = sub_total - discount + tax
    if total < ZERO:
        total = ZERO

    order = OrderTable(
        order_number=order_number,
        user_id=user_id,
        address_id=address_id,
        status=OrderStatus.PENDING,
        sub_total=sub_total,
        discount_amount=discount if discount > ZERO else None,
        tax_amount=tax,
        total_amount=total,
        coupon_id=coupon_id,
        created_at=created_at,
    )
    order.items = [
        OrderItemTable(
            product_id=line.product_id,
            quantity=line.quantity,
            price=line.unit_price,
            total_amount=line.total,
            discount_amount=None,
            created_at=created_at,
        )
        for line in lines
    ]
    return order


def payment_placeholder(order: OrderTable) -> PaymentTable:
    """Pending payment with no gateway behind it yet."""
    return PaymentTable(
        order_id=order.id,
        transaction_id=f"ORD-{order.id}-{uuid.uuid4().hex}",
        method=PaymentMethod.OTHER,
        status=PaymentStatus.PENDING,
        amount=order.total_amount,
        created_at=order.created_at,
    )


__all__ = (
    "random_suffix",
    "format_order_number",
    "generate_order_number",
    "PricedLine",
    "assemble_order",
    "payment_placeholder",
)
