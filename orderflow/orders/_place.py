"""
Order placement — cart → priced, stock-checked, persisted order.

    view = await place_order(
        session_factory,
        user_id=7,
        request=PlaceOrderInput(address_id=3, coupon_code="SAVE10"),
        notifier=sender,
    )

Preconditions are checked on a read-only session before any write.
The body runs in one transaction: order number, live pricing, stock
deduction, order + payment rows, coupon usage, cart clean-up. Any failure
rolls all of it back and the original exception reaches the caller.
The customer notification runs after commit and can't fail the order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderflow import coupons
from orderflow import notify as N
from orderflow._types import utcnow
from orderflow.config import Settings
from orderflow.errors import BadRequest, NotFound, Unauthenticated
from orderflow.orders._assemble import (
    PricedLine,
    assemble_order,
    generate_order_number,
    payment_placeholder,
    random_suffix,
)
from orderflow.orders._view import OrderView, to_view
from orderflow.stock import StockLedger
from orderflow.store import (
    AddressStore,
    CartStore,
    CouponStore,
    OrderStore,
    PaymentStore,
    ProductStore,
    UserStore,
)
from orderflow.tx import transaction

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

EMPTY_CART = "Your cart is empty. Add items before placing an order."
BAD_ADDRESS = "Invalid or inaccessible delivery address."


# ═══════════════════════════════════════════════════════════════════════════════
# Input / snapshot
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PlaceOrderInput:
    address_id: int
    coupon_code: str | None = None


@dataclass(frozen=True, slots=True)
class CartLine:
    item_id: int
    product_id: int
    product_name: str
    quantity: int
    price: Decimal


@dataclass(frozen=True, slots=True)
class Checkout:
    """Everything validated before the transaction opens."""

    lines: tuple[CartLine, ...]
    address_id: int
    coupon_id: int | None
    discount: Decimal


# ═══════════════════════════════════════════════════════════════════════════════
# Preconditions
# ═══════════════════════════════════════════════════════════════════════════════


async def check_preconditions(
    session: AsyncSession,
    user_id: int,
    request: PlaceOrderInput,
    *,
    now: datetime,
) -> Checkout:
    cart = await CartStore(session).get_by_user(user_id)
    if cart is None or not cart.live_items:
        raise BadRequest(EMPTY_CART)

    lines = tuple(
        CartLine(
            item_id=i.id,
            product_id=i.product_id,
            product_name=i.product.name if i.product is not None else "",
            quantity=i.quantity,
            price=i.price,
        )
        for i in cart.live_items
    )

    address = await AddressStore(session).get_by_id(request.address_id)
    if address is None or address.user_id != user_id:
        raise BadRequest(BAD_ADDRESS)

    discount, coupon_id = ZERO, None
    code = (request.coupon_code or "").strip()
    if code:
        coupon = await CouponStore(session).get_by_code(code)
        snapshot_total = sum((line.price * line.quantity for line in lines), ZERO)
        evaluation = coupons.evaluate(coupon, snapshot_total, now=now)
        if coupon is None or not evaluation.valid:
            raise BadRequest(evaluation.message)
        discount, coupon_id = evaluation.discount_amount, coupon.id

    return Checkout(lines=lines, address_id=address.id, coupon_id=coupon_id, discount=discount)


# ═══════════════════════════════════════════════════════════════════════════════
# place_order()
# ═══════════════════════════════════════════════════════════════════════════════


async def place_order(
    session_factory: async_sessionmaker[AsyncSession],
    user_id: int,
    request: PlaceOrderInput,
    *,
    notifier: N.NotificationSender,
    settings: Settings | None = None,
    clock: Callable[[], datetime] = utcnow,
    draw: Callable[[], int] = random_suffix,
) -> OrderView:
    settings = settings or Settings()
    now = clock()

    async with session_factory() as session:
        checkout = await check_preconditions(session, user_id, request, now=now)

    async with transaction(session_factory) as tx:
        orders = OrderStore(tx)
        order_number = await generate_order_number(
            orders, now=now, draw=draw, attempts=settings.order_number_attempts
        )

        if await UserStore(tx).get_by_id(user_id) is None:
            raise Unauthenticated("User not found.")

        products = ProductStore(tx)
        ledger = StockLedger(tx)
        priced: list[PricedLine] = []

        # serial: each line must see the deductions of the lines before it
        for line in checkout.lines:
            product = await products.get_by_id_with_details(line.product_id)
            if product is None or not product.is_active:
                raise BadRequest(
                    f"Product '{line.product_name or 'Unknown'}' is no longer available."
                )

            available = await ledger.available(product.id)
            if available < line.quantity:
                raise BadRequest(f"Only {available} unit(s) of '{product.name}' available.")

            priced.append(PricedLine(product.id, line.quantity, product.effective_price))
            await ledger.deduct(product.id, line.quantity)

        order = await orders.add(
            assemble_order(
                order_number=order_number,
                user_id=user_id,
                address_id=checkout.address_id,
                lines=priced,
                discount=checkout.discount,
                coupon_id=checkout.coupon_id,
                created_at=now,
            )
        )
        await PaymentStore(tx).add(payment_placeholder(order))

        if checkout.coupon_id is not None:
            if not await CouponStore(tx).increment_usage(checkout.coupon_id):
                raise BadRequest(coupons.USAGE_LIMIT_REACHED)

        await CartStore(tx).mark_items_deleted(line.item_id for line in checkout.lines)
        order_id = order.id

    logger.info("Order %s placed by user %s", order_number, user_id)

    async with session_factory() as session:
        created = await OrderStore(session).get_by_id_with_details(order_id)
        if created is None:
            raise NotFound.entity("Order", order_id)
        view = to_view(created)

    if view.customer_email.strip():
        await N.deliver(
            lambda: notifier.order_placed(
                view.customer_email,
                view.customer_name,
                view.order_number,
                view.total_amount,
                view.created_at,
            ),
            what="order placed",
            email=view.customer_email,
            order_number=view.order_number,
        )

    return view


__all__ = (
    "PlaceOrderInput",
    "CartLine",
    "Checkout",
    "EMPTY_CART",
    "BAD_ADDRESS",
    "check_preconditions",
    "place_order",
)
