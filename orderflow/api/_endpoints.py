"""
Endpoint table — every HTTP route exposed over the ops runner.

Literal paths are mounted before /api/orders/{order_id} so that
"my-orders", "admin" and "seller" never reach the id route.
"""

from __future__ import annotations

from orderflow import wire as W
from orderflow.api import _schemas as S
from orderflow.ops import Runner
from orderflow.wire import HTTPRouteTrigger, RequestResponseCodec

_ORDER_ID = {"order_id": int}


def order_endpoints(runner: Runner) -> list[W.Endpoint]:
    on = W.endpoint(runner)
    return [
        on.expose(
            HTTPRouteTrigger("POST", "/api/orders", S.ACTOR_HEADERS, summary="Place order from cart"),
            RequestResponseCodec(S.PlaceOrderIn, S.PlacedOrderOut),
        ),
        on.expose(
            HTTPRouteTrigger(
                "GET", "/api/orders/my-orders", S.ACTOR_HEADERS, summary="Current customer's orders"
            ),
            RequestResponseCodec(S.MyOrdersIn, S.OrderListOut),
        ),
        on.expose(
            HTTPRouteTrigger("GET", "/api/orders/admin", S.ACTOR_HEADERS, summary="All orders"),
            RequestResponseCodec(S.AdminOrdersIn, S.OrderPageOut),
        ),
        on.expose(
            HTTPRouteTrigger(
                "GET", "/api/orders/seller", S.ACTOR_HEADERS, summary="Orders for current seller"
            ),
            RequestResponseCodec(S.SellerOrdersIn, S.OrderPageOut),
        ),
        on.expose(
            HTTPRouteTrigger(
                "GET",
                "/api/orders/{order_id}",
                S.ACTOR_HEADERS,
                path_types=_ORDER_ID,
                summary="Order by id",
            ),
            RequestResponseCodec(S.GetOrderIn, S.OrderOut),
        ),
        on.expose(
            HTTPRouteTrigger(
                "PUT",
                "/api/orders/{order_id}/status",
                S.ACTOR_HEADERS,
                path_types=_ORDER_ID,
                summary="Update order status",
            ),
            RequestResponseCodec(S.UpdateStatusIn, S.UpdatedOrderOut),
        ),
    ]


def report_endpoints(runner: Runner) -> list[W.Endpoint]:
    on = W.endpoint(runner)
    return [
        on.expose(
            HTTPRouteTrigger("GET", "/api/reports/admin", S.ACTOR_HEADERS, summary="Admin sales report"),
            RequestResponseCodec(S.AdminReportIn, S.AdminReportOut),
        ),
        on.expose(
            HTTPRouteTrigger("GET", "/api/reports/seller", S.ACTOR_HEADERS, summary="Seller sales report"),
            RequestResponseCodec(S.SellerReportIn, S.SellerReportOut),
        ),
    ]


def coupon_endpoints(runner: Runner) -> list[W.Endpoint]:
    return [
        W.endpoint(runner).expose(
            HTTPRouteTrigger("GET", "/api/coupons/validate", summary="Validate a coupon code"),
            RequestResponseCodec(S.ValidateCouponIn, S.ValidateCouponOut),
        ),
    ]


def all_endpoints(runner: Runner) -> list[W.Endpoint]:
    return [*order_endpoints(runner), *report_endpoints(runner), *coupon_endpoints(runner)]


__all__ = ("order_endpoints", "report_endpoints", "coupon_endpoints", "all_endpoints")
