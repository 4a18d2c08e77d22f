"""
Order reads — single order by role, customer history, admin/seller lists.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from orderflow._types import Actor
from orderflow.errors import NotFound
from orderflow.orders._view import OrderPage, OrderView, seller_owns_item, to_view
from orderflow.store import OrderStore


async def get_order(session: AsyncSession, order_id: int, actor: Actor) -> OrderView:
    """
    Admin: any order. Customer: own orders only. Seller: orders holding
    one of their products, seen as the seller slice.
    Anything not visible to the caller is reported as missing.
    """
    order = await OrderStore(session).get_by_id_with_details(order_id)
    if order is None:
        raise NotFound("Order not found")

    if actor.is_admin:
        return to_view(order)
    if actor.is_seller:
        if not seller_owns_item(order, actor.user_id):
            raise NotFound("Order not found")
        return to_view(order, seller_id=actor.user_id)
    if order.user_id != actor.user_id:
        raise NotFound("Order not found")
    return to_view(order)


async def list_my_orders(
    session: AsyncSession,
    user_id: int,
    limit: int | None = None,
) -> tuple[OrderView, ...]:
    orders = await OrderStore(session).list_for_user(user_id, limit)
    return tuple(to_view(o) for o in orders)


def _offset(page: int, page_size: int) -> int:
    return (max(page, 1) - 1) * page_size


async def list_admin_orders(session: AsyncSession, page: int, page_size: int) -> OrderPage:
    store = OrderStore(session)
    orders = await store.list_page(_offset(page, page_size), page_size)
    return OrderPage(
        items=tuple(to_view(o) for o in orders),
        page=page,
        page_size=page_size,
        total_records=await store.count(),
    )


async def list_seller_orders(
    session: AsyncSession,
    seller_id: int,
    page: int,
    page_size: int,
) -> OrderPage:
    store = OrderStore(session)
    ids = await store.order_ids_for_seller(seller_id)
    orders = await store.list_page(_offset(page, page_size), page_size, ids=ids)
    return OrderPage(
        items=tuple(to_view(o, seller_id=seller_id) for o in orders),
        page=page,
        page_size=page_size,
        total_records=await store.count(ids=ids),
    )


__all__ = ("get_order", "list_my_orders", "list_admin_orders", "list_seller_orders")
