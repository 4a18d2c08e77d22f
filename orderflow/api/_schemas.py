"""
HTTP schemas — pydantic request models (to_domain) and enveloped
response models (from_domain).

Every response is {success, message, data, errors}; JSON keys are camelCase.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar, Self

from kungfu import Error, Ok, Result
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from orderflow import coupons
from orderflow import ops as Ops
from orderflow import orders as O
from orderflow import reports as R
from orderflow._types import Actor, OrderStatus, UserRole
from orderflow.errors import OrderError, Unauthenticated, Unauthorized
from orderflow.wire import RouteContext

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"
ACTOR_HEADERS = frozenset({USER_ID_HEADER, USER_ROLE_HEADER})

GENERIC_FAILURE = "An error occurred while processing your request."

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Actor
# ═══════════════════════════════════════════════════════════════════════════════

_ROLES = {r.value.lower(): r for r in UserRole}


def actor_from(ctx: RouteContext, *allowed: UserRole) -> Actor:
    """
    Caller identity from gateway headers.

    Missing or malformed identity is Unauthenticated (401); a role outside
    `allowed` is Unauthorized (403). No `allowed` means any role.
    """
    raw_id = ctx.header(USER_ID_HEADER)
    raw_role = ctx.header(USER_ROLE_HEADER)
    if raw_id is None or not raw_id.isdigit() or raw_role is None:
        raise Unauthenticated()
    role = _ROLES.get(raw_role.lower())
    if role is None:
        raise Unauthenticated()
    if allowed and role not in allowed:
        raise Unauthorized("You do not have access to this resource.")
    return Actor(user_id=int(raw_id), role=role)


# ═══════════════════════════════════════════════════════════════════════════════
# Envelope
# ═══════════════════════════════════════════════════════════════════════════════


class Envelope(Schema):
    success: bool = True
    message: str | None = None
    data: Any = None
    errors: list[str] | None = None

    ok_message: ClassVar[str | None] = None

    @classmethod
    def render(cls, value: Any) -> Any:
        return value

    @classmethod
    def failure(cls, message: str, errors: list[str] | None = None) -> Self:
        return cls(success=False, message=message, errors=errors)

    @classmethod
    def from_domain(cls, dom: Result[Any, Any]) -> Self:
        match dom:
            case Ok(value):
                return cls(success=True, message=cls.ok_message, data=cls.render(value))
            case Error(e):
                return cls.failure(str(e) if isinstance(e, OrderError) else GENERIC_FAILURE)


# ═══════════════════════════════════════════════════════════════════════════════
# Orders — payloads
# ═══════════════════════════════════════════════════════════════════════════════


class OrderItemData(Schema):
    id: int
    product_id: int
    product_name: str
    image_url: str | None
    unit_price: Money
    quantity: int
    discount_amount: Money | None
    total_amount: Money
    seller_id: int | None

    @classmethod
    def of(cls, item: O.OrderItemView) -> OrderItemData:
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            image_url=item.image_url,
            unit_price=item.unit_price,
            quantity=item.quantity,
            discount_amount=item.discount_amount,
            total_amount=item.total_amount,
            seller_id=item.seller_id,
        )


class OrderData(Schema):
    id: int
    order_number: str
    user_id: int
    customer_name: str
    customer_email: str
    address_id: int
    shipping_address: str
    status: OrderStatus
    status_display: str
    sub_total: Money
    discount_amount: Money | None
    tax_amount: Money
    total_amount: Money
    tracking_number: str | None
    shipped_date: datetime | None
    delivered_date: datetime | None
    created_at: datetime
    coupon_code: str | None
    items: list[OrderItemData]

    @classmethod
    def of(cls, view: O.OrderView) -> OrderData:
        return cls(
            id=view.id,
            order_number=view.order_number,
            user_id=view.user_id,
            customer_name=view.customer_name,
            customer_email=view.customer_email,
            address_id=view.address_id,
            shipping_address=view.shipping_address,
            status=view.status,
            status_display=view.status_display,
            sub_total=view.sub_total,
            discount_amount=view.discount_amount,
            tax_amount=view.tax_amount,
            total_amount=view.total_amount,
            tracking_number=view.tracking_number,
            shipped_date=view.shipped_date,
            delivered_date=view.delivered_date,
            created_at=view.created_at,
            coupon_code=view.coupon_code,
            items=[OrderItemData.of(i) for i in view.items],
        )


class OrderPageData(Schema):
    items: list[OrderData]
    page: int
    page_size: int
    total_pages: int
    total_records: int


# ═══════════════════════════════════════════════════════════════════════════════
# Orders — requests / responses
# ═══════════════════════════════════════════════════════════════════════════════


class PlaceOrderIn(Schema):
    address_id: int = Field(gt=0)
    coupon_code: str | None = Field(default=None, max_length=50)

    def to_domain(self, ctx: RouteContext) -> Ops.PlaceOrder:
        actor = actor_from(ctx, UserRole.USER)
        return Ops.PlaceOrder(
            user_id=actor.user_id,
            address_id=self.address_id,
            coupon_code=self.coupon_code,
        )


class GetOrderIn(Schema):
    def to_domain(self, ctx: RouteContext) -> Ops.GetOrder:
        return Ops.GetOrder(order_id=ctx.path["order_id"], actor=actor_from(ctx))


class MyOrdersIn(Schema):
    limit: int | None = Field(default=None, ge=1)

    def to_domain(self, ctx: RouteContext) -> Ops.ListMyOrders:
        actor = actor_from(ctx, UserRole.USER)
        return Ops.ListMyOrders(user_id=actor.user_id, limit=self.limit)


class AdminOrdersIn(Schema):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)

    def to_domain(self, ctx: RouteContext) -> Ops.ListAdminOrders:
        actor_from(ctx, UserRole.ADMIN)
        return Ops.ListAdminOrders(page=self.page, page_size=self.page_size)


class SellerOrdersIn(Schema):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)

    def to_domain(self, ctx: RouteContext) -> Ops.ListSellerOrders:
        actor = actor_from(ctx, UserRole.SELLER)
        return Ops.ListSellerOrders(
            seller_id=actor.user_id, page=self.page, page_size=self.page_size
        )


class UpdateStatusIn(Schema):
    status: OrderStatus
    tracking_number: str | None = Field(default=None, max_length=100)

    def to_domain(self, ctx: RouteContext) -> Ops.UpdateOrderStatus:
        actor = actor_from(ctx, UserRole.ADMIN, UserRole.SELLER)
        return Ops.UpdateOrderStatus(
            order_id=ctx.path["order_id"],
            status=self.status,
            actor=actor,
            tracking_number=self.tracking_number,
        )


class OrderOut(Envelope):
    data: OrderData | None = None

    @classmethod
    def render(cls, value: O.OrderView) -> OrderData:
        return OrderData.of(value)


class PlacedOrderOut(OrderOut):
    ok_message: ClassVar[str | None] = "Order placed successfully"


class UpdatedOrderOut(OrderOut):
    ok_message: ClassVar[str | None] = "Order status updated"


class OrderListOut(Envelope):
    data: list[OrderData] | None = None

    @classmethod
    def render(cls, value: tuple[O.OrderView, ...]) -> list[OrderData]:
        return [OrderData.of(v) for v in value]


class OrderPageOut(Envelope):
    data: OrderPageData | None = None

    @classmethod
    def render(cls, value: O.OrderPage) -> OrderPageData:
        return OrderPageData(
            items=[OrderData.of(v) for v in value.items],
            page=value.page,
            page_size=value.page_size,
            total_pages=value.total_pages,
            total_records=value.total_records,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Reports
# ═══════════════════════════════════════════════════════════════════════════════


class DailyStatsData(Schema):
    date: datetime
    order_count: int
    revenue: Money


class StatusCountData(Schema):
    status: str
    count: int


class ProductSalesData(Schema):
    product_id: int
    product_name: str
    units_sold: int
    revenue: Money


def _daily(stats: tuple[R.DailyStats, ...]) -> list[DailyStatsData]:
    return [
        DailyStatsData(
            date=datetime(s.date.year, s.date.month, s.date.day),
            order_count=s.order_count,
            revenue=s.revenue,
        )
        for s in stats
    ]


class AdminReportData(Schema):
    total_revenue: Money
    total_orders: int
    daily_stats: list[DailyStatsData]
    orders_by_status: list[StatusCountData]


class SellerReportData(Schema):
    total_revenue: Money
    total_orders: int
    daily_stats: list[DailyStatsData]
    top_products: list[ProductSalesData]


class AdminReportIn(Schema):
    from_: datetime | None = Field(default=None, alias="from")
    to: datetime | None = None

    def to_domain(self, ctx: RouteContext) -> Ops.AdminReportQuery:
        actor_from(ctx, UserRole.ADMIN)
        return Ops.AdminReportQuery(from_=self.from_, to=self.to)


class SellerReportIn(Schema):
    from_: datetime | None = Field(default=None, alias="from")
    to: datetime | None = None

    def to_domain(self, ctx: RouteContext) -> Ops.SellerReportQuery:
        actor = actor_from(ctx, UserRole.SELLER)
        return Ops.SellerReportQuery(seller_id=actor.user_id, from_=self.from_, to=self.to)


class AdminReportOut(Envelope):
    data: AdminReportData | None = None

    @classmethod
    def render(cls, value: R.AdminReport) -> AdminReportData:
        return AdminReportData(
            total_revenue=value.total_revenue,
            total_orders=value.total_orders,
            daily_stats=_daily(value.daily_stats),
            orders_by_status=[
                StatusCountData(status=s.status, count=s.count) for s in value.orders_by_status
            ],
        )


class SellerReportOut(Envelope):
    data: SellerReportData | None = None

    @classmethod
    def render(cls, value: R.SellerReport) -> SellerReportData:
        return SellerReportData(
            total_revenue=value.total_revenue,
            total_orders=value.total_orders,
            daily_stats=_daily(value.daily_stats),
            top_products=[
                ProductSalesData(
                    product_id=p.product_id,
                    product_name=p.product_name,
                    units_sold=p.units_sold,
                    revenue=p.revenue,
                )
                for p in value.top_products
            ],
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Coupons
# ═══════════════════════════════════════════════════════════════════════════════


class ValidateCouponData(Schema):
    valid: bool
    discount_amount: Money
    message: str


class ValidateCouponIn(Schema):
    code: str | None = None
    order_amount: Decimal = Field(default=Decimal("0"), ge=0)

    def to_domain(self, ctx: RouteContext) -> Ops.ValidateCoupon:
        return Ops.ValidateCoupon(code=self.code or "", order_amount=self.order_amount)


class ValidateCouponOut(Envelope):
    data: ValidateCouponData | None = None

    @classmethod
    def from_domain(cls, dom: Result[coupons.CouponEvaluation, OrderError]) -> Self:
        match dom:
            case Ok(evaluation):
                return cls(
                    success=True,
                    message="Coupon applied" if evaluation.valid else evaluation.message,
                    data=ValidateCouponData(
                        valid=evaluation.valid,
                        discount_amount=evaluation.discount_amount,
                        message=evaluation.message,
                    ),
                )
            case _:
                return super().from_domain(dom)


__all__ = (
    "USER_ID_HEADER",
    "USER_ROLE_HEADER",
    "ACTOR_HEADERS",
    "GENERIC_FAILURE",
    "actor_from",
    "Envelope",
    "PlaceOrderIn",
    "GetOrderIn",
    "MyOrdersIn",
    "AdminOrdersIn",
    "SellerOrdersIn",
    "UpdateStatusIn",
    "OrderOut",
    "PlacedOrderOut",
    "UpdatedOrderOut",
    "OrderListOut",
    "OrderPageOut",
    "AdminReportIn",
    "SellerReportIn",
    "AdminReportOut",
    "SellerReportOut",
    "ValidateCouponIn",
    "ValidateCouponOut",
)
