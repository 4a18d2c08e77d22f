"""Tests for order views and order reads."""

from datetime import timedelta
from decimal import Decimal

import pytest

from orderflow._types import Actor, UserRole
from orderflow.errors import NotFound
from orderflow.orders import (
    OrderPage,
    PlaceOrderInput,
    get_order,
    list_admin_orders,
    list_my_orders,
    list_seller_orders,
    place_order,
)

from .conftest import NOW, RecordingSender


async def place(session_factory, shop, *lines, coupon_code=None, at=NOW, seed):
    await seed.cart(shop.customer.id, *lines)
    return await place_order(
        session_factory,
        shop.customer.id,
        PlaceOrderInput(address_id=shop.address.id, coupon_code=coupon_code),
        notifier=RecordingSender(),
        clock=lambda: at,
    )


@pytest.fixture
async def mixed(shop, seed, session_factory):
    """Widget x2 from seller A, gizmo x1 from seller B, SAVE10 applied."""
    await seed.coupon("SAVE10")
    return await place(
        session_factory, shop, (shop.widget, 2), (shop.gizmo, 1), coupon_code="SAVE10", seed=seed
    )


class TestSellerSlice:
    async def test_whole_order(self, mixed):
        assert mixed.sub_total == Decimal("130")
        assert mixed.discount_amount == Decimal("10")
        assert mixed.total_amount == Decimal("120")
        assert len(mixed.items) == 2

    async def test_seller_sees_only_own_lines(self, shop, mixed, session_factory):
        async with session_factory() as session:
            view = await get_order(session, mixed.id, shop.actor(shop.seller_a))

        assert [i.product_id for i in view.items] == [shop.widget.id]
        assert view.sub_total == Decimal("100")
        assert view.total_amount == Decimal("100")
        assert view.discount_amount is None
        assert view.tax_amount == 0

    async def test_other_seller_slice(self, shop, mixed, session_factory):
        async with session_factory() as session:
            view = await get_order(session, mixed.id, shop.actor(shop.seller_b))

        assert [i.seller_id for i in view.items] == [shop.seller_b.id]
        assert view.total_amount == Decimal("30")
        assert view.order_number == mixed.order_number


class TestGetOrder:
    async def test_customer_sees_own_order(self, shop, mixed, session_factory):
        async with session_factory() as session:
            view = await get_order(session, mixed.id, shop.actor(shop.customer))
        assert view.total_amount == Decimal("120")
        assert view.coupon_code == "SAVE10"

    async def test_customer_cannot_see_others(self, shop, mixed, session_factory):
        async with session_factory() as session:
            with pytest.raises(NotFound, match="Order not found"):
                await get_order(session, mixed.id, shop.actor(shop.other_customer))

    async def test_seller_without_lines_cannot_see(self, shop, mixed, seed, session_factory):
        stranger = await seed.user(UserRole.SELLER, "Seller", "C")
        async with session_factory() as session:
            with pytest.raises(NotFound):
                await get_order(session, mixed.id, shop.actor(stranger))

    async def test_admin_sees_whole_order(self, shop, mixed, session_factory):
        async with session_factory() as session:
            view = await get_order(session, mixed.id, shop.actor(shop.admin))
        assert len(view.items) == 2
        assert view.discount_amount == Decimal("10")

    async def test_missing(self, shop, session_factory):
        async with session_factory() as session:
            with pytest.raises(NotFound):
                await get_order(session, 404, Actor(shop.admin.id, UserRole.ADMIN))


class TestLists:
    async def test_my_orders_newest_first(self, shop, seed, session_factory):
        old = await place(session_factory, shop, (shop.widget, 1), at=NOW - timedelta(days=2), seed=seed)
        new = await place(session_factory, shop, (shop.gizmo, 1), at=NOW, seed=seed)

        async with session_factory() as session:
            views = await list_my_orders(session, shop.customer.id)
            limited = await list_my_orders(session, shop.customer.id, limit=1)
            others = await list_my_orders(session, shop.other_customer.id)

        assert [v.id for v in views] == [new.id, old.id]
        assert [v.id for v in limited] == [new.id]
        assert others == ()

    async def test_admin_pages(self, shop, seed, session_factory):
        for day in range(5):
            await place(session_factory, shop, (shop.widget, 1), at=NOW + timedelta(days=day), seed=seed)

        async with session_factory() as session:
            page = await list_admin_orders(session, page=2, page_size=2)

        assert isinstance(page, OrderPage)
        assert page.total_records == 5
        assert page.total_pages == 3
        assert [v.created_at for v in page.items] == [NOW + timedelta(days=2), NOW + timedelta(days=1)]

    async def test_seller_list_is_scoped(self, shop, seed, session_factory):
        await place(session_factory, shop, (shop.widget, 1), seed=seed)
        await place(session_factory, shop, (shop.gizmo, 1), at=NOW + timedelta(hours=1), seed=seed)
        await place(
            session_factory, shop, (shop.widget, 2), (shop.gizmo, 3), at=NOW + timedelta(hours=2), seed=seed
        )

        async with session_factory() as session:
            page = await list_seller_orders(session, shop.seller_b.id, page=1, page_size=10)

        assert page.total_records == 2
        assert [v.total_amount for v in page.items] == [Decimal("90"), Decimal("30")]
        assert all(i.seller_id == shop.seller_b.id for v in page.items for i in v.items)

    async def test_page_past_the_end(self, shop, seed, session_factory):
        await place(session_factory, shop, (shop.widget, 1), seed=seed)
        async with session_factory() as session:
            page = await list_admin_orders(session, page=3, page_size=10)
        assert page.items == ()
        assert page.total_records == 1
        assert page.total_pages == 1
