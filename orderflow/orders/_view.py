"""
Order views — read projections of a persisted order.

Two shapes: the whole order (customer/admin) and the seller slice, where
totals are recomputed from that seller's lines and the order-level
coupon and tax are left out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from orderflow._types import OrderStatus
from orderflow.db import OrderItemTable, OrderTable


@dataclass(frozen=True, slots=True)
class OrderItemView:
    id: int
    product_id: int
    product_name: str
    image_url: str | None
    unit_price: Decimal
    quantity: int
    discount_amount: Decimal | None
    total_amount: Decimal
    seller_id: int | None


@dataclass(frozen=True, slots=True)
class OrderView:
    id: int
    order_number: str
    user_id: int
    customer_name: str
    customer_email: str
    address_id: int
    shipping_address: str
    status: OrderStatus
    sub_total: Decimal
    discount_amount: Decimal | None
    tax_amount: Decimal
    total_amount: Decimal
    tracking_number: str | None
    shipped_date: datetime | None
    delivered_date: datetime | None
    created_at: datetime
    coupon_code: str | None
    items: tuple[OrderItemView, ...]

    @property
    def status_display(self) -> str:
        return self.status.value


@dataclass(frozen=True, slots=True)
class OrderPage:
    items: tuple[OrderView, ...]
    page: int
    page_size: int
    total_records: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return -(-self.total_records // self.page_size)


def _item_view(item: OrderItemTable) -> OrderItemView:
    product = item.product
    return OrderItemView(
        id=item.id,
        product_id=item.product_id,
        product_name=product.name if product is not None else "",
        image_url=product.image_url if product is not None else None,
        unit_price=item.price,
        quantity=item.quantity,
        discount_amount=item.discount_amount,
        total_amount=item.total_amount,
        seller_id=product.seller_id if product is not None else None,
    )


def seller_owns_item(order: OrderTable, seller_id: int) -> bool:
    return any(
        i.product is not None and i.product.seller_id == seller_id
        for i in order.live_items
    )


def to_view(order: OrderTable, seller_id: int | None = None) -> OrderView:
    """
    Project an order loaded with details.

    With seller_id: only that seller's live lines; sub_total and
    total_amount are their sum, discount is None, tax is 0.
    """
    lines = order.live_items
    if seller_id is not None:
        lines = [i for i in lines if i.product is not None and i.product.seller_id == seller_id]
    items = tuple(_item_view(i) for i in lines)

    if seller_id is not None:
        slice_total = sum((i.total_amount for i in items), Decimal("0"))
        sub_total, discount, tax, total = slice_total, None, Decimal("0"), slice_total
    else:
        sub_total = order.sub_total
        discount = order.discount_amount
        tax = order.tax_amount
        total = order.total_amount

    user = order.user
    return OrderView(
        id=order.id,
        order_number=order.order_number,
        user_id=order.user_id,
        customer_name=user.full_name if user is not None else "",
        customer_email=user.email if user is not None else "",
        address_id=order.address_id,
        shipping_address=order.address.one_line() if order.address is not None else "",
        status=order.status,
        sub_total=sub_total,
        discount_amount=discount,
        tax_amount=tax,
        total_amount=total,
        tracking_number=order.tracking_number,
        shipped_date=order.shipped_date,
        delivered_date=order.delivered_date,
        created_at=order.created_at,
        coupon_code=order.coupon.code if order.coupon is not None else None,
        items=items,
    )


__all__ = ("OrderItemView", "OrderView", "OrderPage", "seller_owns_item", "to_view")
