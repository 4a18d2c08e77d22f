"""
Stock ledger — available quantity and deduction.

Inventory rows are authoritative when present; products without one
fall back to Product.stock_quantity.
"""

from __future__ import annotations

import logging

from orderflow.store import Bound, InventoryStore, ProductStore

logger = logging.getLogger(__name__)


class StockLedger:
    """Stock accessor bound to one transaction."""

    __slots__ = ("_inventory", "_products")

    def __init__(self, bound: Bound) -> None:
        self._inventory = InventoryStore(bound)
        self._products = ProductStore(bound)

    async def available(self, product_id: int) -> int:
        inventory = await self._inventory.get_by_product_id(product_id)
        if inventory is not None:
            return inventory.stock_quantity - inventory.reserved_quantity
        product = await self._products.get_by_id(product_id)
        return product.stock_quantity if product is not None else 0

    async def deduct(self, product_id: int, quantity: int) -> int:
        """Deduct and return the new stock quantity (floored at 0)."""
        product = await self._products.get_by_id(product_id)
        if product is None:
            return 0

        inventory = await self._inventory.get_by_product_id(product_id)
        if inventory is not None:
            remaining = max(0, inventory.stock_quantity - quantity)
            await self._inventory.update_stock(inventory.id, remaining)
            # mirror for readers that only look at the product
            await self._products.update_stock(product_id, remaining)
        else:
            remaining = max(0, product.stock_quantity - quantity)
            await self._products.update_stock(product_id, remaining)

        logger.debug("product %s stock -%s -> %s", product_id, quantity, remaining)
        return remaining


__all__ = ("StockLedger",)
