"""
Store — data access used by the order workflow.

    from orderflow import store as St

    async with transaction(session_factory) as tx:
        cart = await St.CartStore(tx).get_by_user(user_id)
"""

from orderflow.store._stores import (
    Bound,
    UserStore,
    AddressStore,
    CartStore,
    CouponStore,
    ProductStore,
    InventoryStore,
    OrderStore,
    PaymentStore,
)

__all__ = (
    "Bound",
    "UserStore",
    "AddressStore",
    "CartStore",
    "CouponStore",
    "ProductStore",
    "InventoryStore",
    "OrderStore",
    "PaymentStore",
)
