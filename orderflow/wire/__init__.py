"""
Wire — expose ops over HTTP.

    from orderflow import wire as W

    endp = W.endpoint(runner).expose(
        W.HTTPRouteTrigger("GET", "/api/orders/{order_id}", path_types={"order_id": int}),
        W.RequestResponseCodec(GetOrderIn, OrderOut),
    )
    app = W.from_application(W.application().mount(endp), title="orderflow")

Request models implement `to_domain(ctx) -> Op`; response models implement
`from_domain(result)`. Writes take the request model as JSON body, reads
take it as query parameters.
"""

from orderflow.wire._http import (
    Method,
    HTTPRouteTrigger,
    RouteContext,
    ToDomain,
    FromDomain,
    RequestResponseCodec,
    Route,
    Endpoint,
    endpoint,
    Application,
    application,
)
from orderflow.wire._fastapi import (
    add_endpoint_to_app,
    from_application,
    make_handler,
)

__all__ = (
    # Model
    "Method",
    "HTTPRouteTrigger",
    "RouteContext",
    "ToDomain",
    "FromDomain",
    "RequestResponseCodec",
    "Route",
    "Endpoint",
    "endpoint",
    "Application",
    "application",
    # FastAPI
    "add_endpoint_to_app",
    "from_application",
    "make_handler",
)
