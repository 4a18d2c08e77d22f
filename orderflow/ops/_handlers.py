"""
Order operations — request types, their handlers and the default runner.

Every handler returns Result: domain errors (NotFound, BadRequest,
Unauthorized) come back as Error(...), anything else propagates.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from kungfu import Error, Ok, Result
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderflow import coupons
from orderflow import notify as N
from orderflow import orders as O
from orderflow import reports as R
from orderflow._types import Actor, OrderStatus, utcnow
from orderflow.config import Settings
from orderflow.errors import OrderError
from orderflow.ops._runner import Op, Runner, ops

type Sessions = async_sessionmaker[AsyncSession]


async def _settle[T](work: Awaitable[T]) -> Result[T, OrderError]:
    try:
        return Ok(await work)
    except OrderError as e:
        return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# Writes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PlaceOrder(Op[O.OrderView, OrderError]):
    user_id: int
    address_id: int
    coupon_code: str | None = None


@dataclass(frozen=True, slots=True)
class UpdateOrderStatus(Op[O.OrderView, OrderError]):
    order_id: int
    status: OrderStatus
    actor: Actor
    tracking_number: str | None = None


async def place_order(
    req: PlaceOrder,
    session_factory: Sessions,
    notifier: N.NotificationSender,
    settings: Settings,
) -> Result[O.OrderView, OrderError]:
    return await _settle(
        O.place_order(
            session_factory,
            req.user_id,
            O.PlaceOrderInput(address_id=req.address_id, coupon_code=req.coupon_code),
            notifier=notifier,
            settings=settings,
        )
    )


async def update_order_status(
    req: UpdateOrderStatus,
    session_factory: Sessions,
    notifier: N.NotificationSender,
) -> Result[O.OrderView, OrderError]:
    return await _settle(
        O.update_status(
            session_factory,
            req.order_id,
            O.UpdateStatusInput(status=req.status, tracking_number=req.tracking_number),
            req.actor,
            notifier=notifier,
        )
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Reads
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class GetOrder(Op[O.OrderView, OrderError]):
    order_id: int
    actor: Actor


@dataclass(frozen=True, slots=True)
class ListMyOrders(Op[tuple[O.OrderView, ...], OrderError]):
    user_id: int
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class ListAdminOrders(Op[O.OrderPage, OrderError]):
    page: int = 1
    page_size: int = 10


@dataclass(frozen=True, slots=True)
class ListSellerOrders(Op[O.OrderPage, OrderError]):
    seller_id: int
    page: int = 1
    page_size: int = 10


async def get_order(req: GetOrder, session_factory: Sessions) -> Result[O.OrderView, OrderError]:
    async with session_factory() as session:
        return await _settle(O.get_order(session, req.order_id, req.actor))


async def list_my_orders(
    req: ListMyOrders,
    session_factory: Sessions,
) -> Result[tuple[O.OrderView, ...], OrderError]:
    async with session_factory() as session:
        return await _settle(O.list_my_orders(session, req.user_id, req.limit))


async def list_admin_orders(
    req: ListAdminOrders,
    session_factory: Sessions,
) -> Result[O.OrderPage, OrderError]:
    async with session_factory() as session:
        return await _settle(O.list_admin_orders(session, req.page, req.page_size))


async def list_seller_orders(
    req: ListSellerOrders,
    session_factory: Sessions,
) -> Result[O.OrderPage, OrderError]:
    async with session_factory() as session:
        return await _settle(
            O.list_seller_orders(session, req.seller_id, req.page, req.page_size)
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Reports / Coupons
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AdminReportQuery(Op[R.AdminReport, OrderError]):
    from_: datetime | None = None
    to: datetime | None = None


@dataclass(frozen=True, slots=True)
class SellerReportQuery(Op[R.SellerReport, OrderError]):
    seller_id: int
    from_: datetime | None = None
    to: datetime | None = None


@dataclass(frozen=True, slots=True)
class ValidateCoupon(Op[coupons.CouponEvaluation, OrderError]):
    code: str
    order_amount: Decimal = Decimal("0")


async def admin_report(
    req: AdminReportQuery,
    session_factory: Sessions,
    settings: Settings,
) -> Result[R.AdminReport, OrderError]:
    from_utc, to_utc = R.normalize_range(
        req.from_, req.to, today=utcnow().date(), window_days=settings.report_window_days
    )
    async with session_factory() as session:
        return await _settle(R.admin_report(session, from_utc, to_utc))


async def seller_report(
    req: SellerReportQuery,
    session_factory: Sessions,
    settings: Settings,
) -> Result[R.SellerReport, OrderError]:
    from_utc, to_utc = R.normalize_range(
        req.from_, req.to, today=utcnow().date(), window_days=settings.report_window_days
    )
    async with session_factory() as session:
        return await _settle(
            R.seller_report(session, req.seller_id, from_utc, to_utc, top=settings.top_products)
        )


async def validate_coupon(
    req: ValidateCoupon,
    session_factory: Sessions,
) -> Result[coupons.CouponEvaluation, OrderError]:
    async with session_factory() as session:
        return await _settle(coupons.validate_code(session, req.code, req.order_amount))


# ═══════════════════════════════════════════════════════════════════════════════
# Runner
# ═══════════════════════════════════════════════════════════════════════════════


def build_runner(
    session_factory: Sessions,
    notifier: N.NotificationSender,
    settings: Settings,
) -> Runner:
    return (
        ops()
        .on(PlaceOrder, place_order)
        .on(UpdateOrderStatus, update_order_status)
        .on(GetOrder, get_order)
        .on(ListMyOrders, list_my_orders)
        .on(ListAdminOrders, list_admin_orders)
        .on(ListSellerOrders, list_seller_orders)
        .on(AdminReportQuery, admin_report)
        .on(SellerReportQuery, seller_report)
        .on(ValidateCoupon, validate_coupon)
        .compile()
        .inject(async_sessionmaker, session_factory)
        .inject(N.NotificationSender, notifier)
        .inject(Settings, settings)
    )


__all__ = (
    "PlaceOrder",
    "UpdateOrderStatus",
    "GetOrder",
    "ListMyOrders",
    "ListAdminOrders",
    "ListSellerOrders",
    "AdminReportQuery",
    "SellerReportQuery",
    "ValidateCoupon",
    "build_runner",
)
