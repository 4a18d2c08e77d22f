"""
Orders — placement, status transitions, views.

    from orderflow import orders as O

    view = await O.place_order(session_factory, user_id, O.PlaceOrderInput(address_id=1), notifier=sender)
    view = await O.update_status(session_factory, view.id, O.UpdateStatusInput(OrderStatus.SHIPPED), actor, notifier=sender)
"""

from orderflow.orders._assemble import (
    PricedLine,
    assemble_order,
    format_order_number,
    generate_order_number,
    payment_placeholder,
    random_suffix,
)
from orderflow.orders._place import (
    PlaceOrderInput,
    CartLine,
    Checkout,
    check_preconditions,
    place_order,
)
from orderflow.orders._status import UpdateStatusInput, update_status
from orderflow.orders._view import (
    OrderItemView,
    OrderView,
    OrderPage,
    seller_owns_item,
    to_view,
)
from orderflow.orders._query import (
    get_order,
    list_my_orders,
    list_admin_orders,
    list_seller_orders,
)

__all__ = (
    # Assembly
    "PricedLine",
    "assemble_order",
    "format_order_number",
    "generate_order_number",
    "payment_placeholder",
    "random_suffix",
    # Placement
    "PlaceOrderInput",
    "CartLine",
    "Checkout",
    "check_preconditions",
    "place_order",
    # Status
    "UpdateStatusInput",
    "update_status",
    # Views
    "OrderItemView",
    "OrderView",
    "OrderPage",
    "seller_owns_item",
    "to_view",
    # Reads
    "get_order",
    "list_my_orders",
    "list_admin_orders",
    "list_seller_orders",
)
