"""
Coupon evaluation — pure validity check + discount math.

No side effects: usage is incremented by the placement workflow only
after the order is durably written.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from orderflow._types import CouponType, utcnow
from orderflow.db import CouponTable
from orderflow.store import CouponStore

CENT = Decimal("0.01")
ZERO = Decimal("0")

USAGE_LIMIT_REACHED = "This coupon has reached its usage limit."


@dataclass(frozen=True, slots=True)
class CouponEvaluation:
    valid: bool
    discount_amount: Decimal = ZERO
    message: str = ""

    @classmethod
    def reject(cls, message: str) -> CouponEvaluation:
        return cls(valid=False, message=message)


def _money(amount: Decimal) -> str:
    return f"₹{amount:,.0f}"


def compute_discount(coupon: CouponTable, order_amount: Decimal) -> Decimal:
    """Discount for a coupon already known to be valid."""
    if coupon.type is CouponType.PERCENTAGE:
        discount = (order_amount * coupon.value / Decimal(100)).quantize(
            CENT, rounding=ROUND_HALF_EVEN
        )
    else:
        discount = Decimal(coupon.value)

    if coupon.max_discount_amount is not None and discount > coupon.max_discount_amount:
        discount = Decimal(coupon.max_discount_amount)
    if discount > order_amount:
        discount = order_amount
    return max(discount, ZERO)


def evaluate(
    coupon: CouponTable | None,
    order_amount: Decimal,
    *,
    now: datetime | None = None,
) -> CouponEvaluation:
    """
    Decide whether a coupon applies to an order amount.

    Checks short-circuit in order: existence, active flag, validity
    window, usage limit (0 means unlimited), minimum purchase.
    """
    if coupon is None:
        return CouponEvaluation.reject("Invalid coupon code.")
    if not coupon.is_active:
        return CouponEvaluation.reject("This coupon is no longer active.")

    now = now or utcnow()
    if now < coupon.valid_from:
        return CouponEvaluation.reject("This coupon is not yet valid.")
    if now > coupon.valid_to:
        return CouponEvaluation.reject("This coupon has expired.")
    if coupon.usage_limit > 0 and coupon.used_count >= coupon.usage_limit:
        return CouponEvaluation.reject(USAGE_LIMIT_REACHED)
    if coupon.min_purchase_amount is not None and order_amount < coupon.min_purchase_amount:
        return CouponEvaluation.reject(
            f"Minimum order amount of {_money(coupon.min_purchase_amount)} required."
        )

    return CouponEvaluation(valid=True, discount_amount=compute_discount(coupon, order_amount))


async def validate_code(
    session: AsyncSession,
    code: str,
    order_amount: Decimal,
) -> CouponEvaluation:
    """Look a code up and evaluate it; blank codes are rejected."""
    code = (code or "").strip()
    if not code:
        return CouponEvaluation.reject("Invalid coupon code.")
    coupon = await CouponStore(session).get_by_code(code)
    return evaluate(coupon, order_amount)


__all__ = (
    "USAGE_LIMIT_REACHED",
    "CouponEvaluation",
    "compute_discount",
    "evaluate",
    "validate_code",
)
