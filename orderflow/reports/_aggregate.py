"""
Report aggregation — read-only rollups over orders in a date range.

Admin: whole orders. Seller: only the seller's live lines of orders that
hold at least one of them, so a mixed-seller order counts once but
contributes just that seller's revenue.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import datetime as dt
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.db import OrderItemTable, OrderTable
from orderflow.store import OrderStore

ZERO = Decimal("0")


# ═══════════════════════════════════════════════════════════════════════════════
# Report shapes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class DailyStats:
    date: dt.date
    order_count: int
    revenue: Decimal


@dataclass(frozen=True, slots=True)
class StatusCount:
    status: str
    count: int


@dataclass(frozen=True, slots=True)
class ProductSales:
    product_id: int
    product_name: str
    units_sold: int
    revenue: Decimal


@dataclass(frozen=True, slots=True)
class AdminReport:
    total_revenue: Decimal
    total_orders: int
    daily_stats: tuple[DailyStats, ...]
    orders_by_status: tuple[StatusCount, ...]


@dataclass(frozen=True, slots=True)
class SellerReport:
    total_revenue: Decimal
    total_orders: int
    daily_stats: tuple[DailyStats, ...]
    top_products: tuple[ProductSales, ...]


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _seller_lines(order: OrderTable, seller_id: int) -> list[OrderItemTable]:
    return [
        i for i in order.live_items if i.product is not None and i.product.seller_id == seller_id
    ]


def _daily(
    orders: Iterable[OrderTable],
    revenue_of: Callable[[OrderTable], Decimal],
) -> tuple[DailyStats, ...]:
    counts: dict[dt.date, int] = defaultdict(int)
    revenue: dict[dt.date, Decimal] = defaultdict(lambda: ZERO)
    for order in orders:
        day = order.created_at.date()
        counts[day] += 1
        revenue[day] += revenue_of(order)
    return tuple(DailyStats(day, counts[day], revenue[day]) for day in sorted(counts))


def _top_products(lines: Sequence[OrderItemTable], top: int) -> tuple[ProductSales, ...]:
    names: dict[int, str] = {}
    units: dict[int, int] = defaultdict(int)
    revenue: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for line in lines:
        names.setdefault(line.product_id, line.product.name if line.product else "Unknown")
        units[line.product_id] += line.quantity
        revenue[line.product_id] += line.total_amount

    # units sold descending, product id ascending on ties
    ranked = sorted(units, key=lambda pid: (-units[pid], pid))
    return tuple(
        ProductSales(pid, names[pid] or "Unknown", units[pid], revenue[pid])
        for pid in ranked[:top]
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Reports
# ═══════════════════════════════════════════════════════════════════════════════


async def admin_report(session: AsyncSession, from_utc: datetime, to_utc: datetime) -> AdminReport:
    orders = await OrderStore(session).in_range(from_utc, to_utc)

    # Counter keeps first-seen order
    by_status = Counter(o.status.value for o in orders)
    return AdminReport(
        total_revenue=sum((o.total_amount for o in orders), ZERO),
        total_orders=len(orders),
        daily_stats=_daily(orders, lambda o: o.total_amount),
        orders_by_status=tuple(StatusCount(s, n) for s, n in by_status.items()),
    )


async def seller_report(
    session: AsyncSession,
    seller_id: int,
    from_utc: datetime,
    to_utc: datetime,
    *,
    top: int = 10,
) -> SellerReport:
    store = OrderStore(session)
    ids = await store.order_ids_for_seller(seller_id)
    orders = await store.in_range(from_utc, to_utc, ids=ids)

    lines = [line for o in orders for line in _seller_lines(o, seller_id)]
    return SellerReport(
        total_revenue=sum((line.total_amount for line in lines), ZERO),
        total_orders=len(orders),
        daily_stats=_daily(
            orders,
            lambda o: sum((line.total_amount for line in _seller_lines(o, seller_id)), ZERO),
        ),
        top_products=_top_products(lines, top),
    )


__all__ = (
    "DailyStats",
    "StatusCount",
    "ProductSales",
    "AdminReport",
    "SellerReport",
    "admin_report",
    "seller_report",
)
