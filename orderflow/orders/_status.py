"""
Order status transitions, driven by admins and sellers.

Any status may be written from any other: this layer checks who is
asking, not whether the transition makes sense.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderflow import notify as N
from orderflow._types import Actor, OrderStatus, utcnow
from orderflow.errors import NotFound, Unauthorized
from orderflow.orders._view import OrderView, seller_owns_item, to_view
from orderflow.store import OrderStore
from orderflow.tx import transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateStatusInput:
    status: OrderStatus
    tracking_number: str | None = None


def _notification(
    notifier: N.NotificationSender,
    view: OrderView,
) -> tuple[str, Callable[[], Awaitable[None]]] | None:
    email, name, number = view.customer_email, view.customer_name, view.order_number
    match view.status:
        case OrderStatus.CONFIRMED:
            return "order confirmed", lambda: notifier.order_confirmed(email, name, number)
        case OrderStatus.CANCELLED:
            return "order cancelled", lambda: notifier.order_cancelled(email, name, number)
        case OrderStatus.DELIVERED:
            return "order delivered", lambda: notifier.order_delivered(
                email, name, number, view.delivered_date
            )
        case _:
            return None


async def update_status(
    session_factory: async_sessionmaker[AsyncSession],
    order_id: int,
    request: UpdateStatusInput,
    actor: Actor,
    *,
    notifier: N.NotificationSender,
    clock: Callable[[], datetime] = utcnow,
) -> OrderView:
    async with transaction(session_factory) as tx:
        orders = OrderStore(tx)
        order = await orders.get_by_id_with_details(order_id)
        if order is None:
            raise NotFound.entity("Order", order_id)

        if actor.is_seller:
            if not seller_owns_item(order, actor.user_id):
                raise Unauthorized("You do not have permission to update this order.")
        elif not actor.is_admin:
            raise Unauthorized("Only admin or seller can update order status.")

        now = clock()
        order.status = request.status
        order.updated_at = now
        if request.tracking_number and request.tracking_number.strip():
            order.tracking_number = request.tracking_number.strip()
        if request.status is OrderStatus.SHIPPED:
            order.shipped_date = now
        if request.status is OrderStatus.DELIVERED:
            order.delivered_date = now

    logger.info(
        "Order %s status set to %s by %s %s",
        order_id,
        request.status.value,
        actor.role.value,
        actor.user_id,
    )

    async with session_factory() as session:
        updated = await OrderStore(session).get_by_id_with_details(order_id)
        if updated is None:
            raise NotFound.entity("Order", order_id)
        view = to_view(updated)

    if view.customer_email.strip():
        pending = _notification(notifier, view)
        if pending is not None:
            what, send = pending
            await N.deliver(
                send, what=what, email=view.customer_email, order_number=view.order_number
            )

    return view


__all__ = ("UpdateStatusInput", "update_status")
