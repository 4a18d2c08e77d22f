"""
API — the HTTP surface of orderflow.

    from orderflow.api import create_app

    app = create_app()   # uvicorn orderflow.api:create_app --factory
"""

from orderflow.api._app import create_app, VALIDATION_FAILURE
from orderflow.api._endpoints import (
    all_endpoints,
    coupon_endpoints,
    order_endpoints,
    report_endpoints,
)
from orderflow.api._schemas import (
    ACTOR_HEADERS,
    GENERIC_FAILURE,
    USER_ID_HEADER,
    USER_ROLE_HEADER,
    Envelope,
    actor_from,
)

__all__ = (
    "create_app",
    "VALIDATION_FAILURE",
    "GENERIC_FAILURE",
    "all_endpoints",
    "coupon_endpoints",
    "order_endpoints",
    "report_endpoints",
    "ACTOR_HEADERS",
    "USER_ID_HEADER",
    "USER_ROLE_HEADER",
    "Envelope",
    "actor_from",
)
