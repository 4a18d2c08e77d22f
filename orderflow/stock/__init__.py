"""
Stock — per-product availability and deduction.

    from orderflow.stock import StockLedger

    ledger = StockLedger(tx)
    if await ledger.available(product_id) >= qty:
        await ledger.deduct(product_id, qty)
"""

from orderflow.stock._ledger import StockLedger

__all__ = ("StockLedger",)
