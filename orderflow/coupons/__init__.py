"""
Coupons — validity and discount evaluation.

    from orderflow import coupons

    result = coupons.evaluate(coupon, Decimal("1000"))
    if result.valid:
        total -= result.discount_amount
"""

from orderflow.coupons._evaluate import (
    USAGE_LIMIT_REACHED,
    CouponEvaluation,
    compute_discount,
    evaluate,
    validate_code,
)

__all__ = (
    "USAGE_LIMIT_REACHED",
    "CouponEvaluation",
    "compute_discount",
    "evaluate",
    "validate_code",
)
