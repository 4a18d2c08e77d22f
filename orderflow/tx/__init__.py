"""
Tx — explicit transaction boundary.

    from orderflow import tx as T

    async with T.transaction(session_factory) as handle:
        ...  # every store receives `handle`
"""

from orderflow.tx._transaction import Transaction, transaction

__all__ = ("Transaction", "transaction")
