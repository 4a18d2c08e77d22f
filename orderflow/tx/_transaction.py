"""
Transaction handle — explicit begin / commit / rollback over one session.

The handle is passed to every store touched inside the unit of work.
Nothing is kept in ambient state.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Transaction
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class Transaction:
    """
    One database transaction.

    Writes made through stores bound to this handle become durable on
    commit() and are all undone by rollback().
    """

    session: AsyncSession

    async def begin(self) -> None:
        if self.session.in_transaction():
            raise RuntimeError("transaction already open")
        await self.session.begin()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


# ═══════════════════════════════════════════════════════════════════════════════
# transaction() — scoped unit of work
# ═══════════════════════════════════════════════════════════════════════════════


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[Transaction]:
    """
    Open a session, begin, yield the handle.

    Commits on normal exit. On any exception rolls back and re-raises
    the original exception unchanged.

    Example:
        async with transaction(session_factory) as tx:
            await StockLedger(tx).deduct(product_id, 2)
            await CouponStore(tx).increment_usage(coupon_id)
    """
    async with session_factory() as session:
        tx = Transaction(session)
        await tx.begin()
        try:
            yield tx
        except BaseException:
            logger.debug("rolling back transaction")
            await tx.rollback()
            raise
        await tx.commit()


__all__ = ("Transaction", "transaction")
