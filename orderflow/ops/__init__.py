"""
Ops — order operations as data, dispatched by a Runner.

    from orderflow import ops as Ops

    runner = Ops.build_runner(session_factory, notifier, settings)
    match await runner.run(Ops.GetOrder(order_id=7, actor=actor)):
        case Ok(view): ...
        case Error(e): ...   # OrderError with .status

Custom wiring:
    runner = Ops.ops().on(Ops.GetOrder, my_handler).compile().inject(Database, db)
"""

from orderflow.ops._runner import (
    Op,
    Returns,
    Returning,
    OpsBuilder,
    Runner,
    UnresolvedDependency,
    ops,
)
from orderflow.ops._handlers import (
    PlaceOrder,
    UpdateOrderStatus,
    GetOrder,
    ListMyOrders,
    ListAdminOrders,
    ListSellerOrders,
    AdminReportQuery,
    SellerReportQuery,
    ValidateCoupon,
    build_runner,
)

__all__ = (
    # Dispatch
    "Op",
    "Returns",
    "Returning",
    "OpsBuilder",
    "Runner",
    "UnresolvedDependency",
    "ops",
    # Operations
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
