"""Tests for coupon evaluation."""

from datetime import timedelta
from decimal import Decimal

import pytest

from orderflow import coupons
from orderflow._types import CouponType
from orderflow.db import CouponTable

from .conftest import NOW


def make_coupon(**overrides) -> CouponTable:
    values = dict(
        code="SAVE10",
        type=CouponType.FLAT,
        value=Decimal("10"),
        min_purchase_amount=None,
        max_discount_amount=None,
        valid_from=NOW - timedelta(days=1),
        valid_to=NOW + timedelta(days=1),
        usage_limit=0,
        used_count=0,
        is_active=True,
    )
    values.update(overrides)
    return CouponTable(**values)


def evaluate(coupon, amount: str):
    return coupons.evaluate(coupon, Decimal(amount), now=NOW)


class TestRejections:
    def test_missing_coupon(self):
        result = evaluate(None, "100")
        assert result.valid is False
        assert result.message == "Invalid coupon code."
        assert result.discount_amount == 0

    def test_inactive(self):
        result = evaluate(make_coupon(is_active=False), "100")
        assert not result.valid
        assert result.message == "This coupon is no longer active."

    def test_not_yet_valid(self):
        result = evaluate(make_coupon(valid_from=NOW + timedelta(hours=1)), "100")
        assert result.message == "This coupon is not yet valid."

    def test_expired(self):
        result = evaluate(make_coupon(valid_to=NOW - timedelta(seconds=1)), "100")
        assert result.message == "This coupon has expired."

    def test_usage_limit_reached(self):
        result = evaluate(make_coupon(usage_limit=5, used_count=5), "100")
        assert result.message == "This coupon has reached its usage limit."

    def test_zero_usage_limit_is_unlimited(self):
        result = evaluate(make_coupon(usage_limit=0, used_count=10_000), "100")
        assert result.valid

    def test_minimum_purchase(self):
        result = evaluate(make_coupon(min_purchase_amount=Decimal("1500")), "999")
        assert not result.valid
        assert result.message == "Minimum order amount of ₹1,500 required."

    def test_checks_short_circuit_in_order(self):
        # inactive and expired: the active flag is reported first
        coupon = make_coupon(is_active=False, valid_to=NOW - timedelta(days=5))
        assert evaluate(coupon, "100").message == "This coupon is no longer active."


class TestDiscount:
    def test_flat(self):
        result = evaluate(make_coupon(), "100")
        assert result.valid
        assert result.discount_amount == Decimal("10")

    def test_percentage(self):
        result = evaluate(make_coupon(type=CouponType.PERCENTAGE, value=Decimal("15")), "200")
        assert result.discount_amount == Decimal("30.00")

    def test_percentage_capped_by_max_discount(self):
        coupon = make_coupon(
            type=CouponType.PERCENTAGE,
            value=Decimal("50"),
            max_discount_amount=Decimal("100"),
        )
        assert evaluate(coupon, "1000").discount_amount == Decimal("100")

    def test_flat_capped_by_max_discount(self):
        coupon = make_coupon(value=Decimal("80"), max_discount_amount=Decimal("25"))
        assert evaluate(coupon, "1000").discount_amount == Decimal("25")

    def test_flat_never_exceeds_order_amount(self):
        result = evaluate(make_coupon(value=Decimal("500")), "300")
        assert result.valid
        assert result.discount_amount == Decimal("300")

    def test_percentage_rounds_half_to_even(self):
        coupon = make_coupon(type=CouponType.PERCENTAGE, value=Decimal("10"))
        assert evaluate(coupon, "0.25").discount_amount == Decimal("0.02")
        assert evaluate(coupon, "0.35").discount_amount == Decimal("0.04")

    def test_minimum_met_exactly(self):
        result = evaluate(make_coupon(min_purchase_amount=Decimal("100")), "100")
        assert result.valid


class TestValidateCode:
    @pytest.mark.parametrize("code", ["", "   "])
    async def test_blank_code(self, session_factory, code):
        async with session_factory() as session:
            result = await coupons.validate_code(session, code, Decimal("100"))
        assert not result.valid
        assert result.message == "Invalid coupon code."

    async def test_unknown_code(self, session_factory):
        async with session_factory() as session:
            result = await coupons.validate_code(session, "NOPE", Decimal("100"))
        assert result.message == "Invalid coupon code."

    async def test_stored_coupon(self, seed, session_factory):
        from orderflow._types import utcnow

        now = utcnow()
        await seed.coupon(valid_from=now - timedelta(days=1), valid_to=now + timedelta(days=1))
        async with session_factory() as session:
            result = await coupons.validate_code(session, " SAVE10 ", Decimal("100"))
        assert result.valid
        assert result.discount_amount == Decimal("10")
