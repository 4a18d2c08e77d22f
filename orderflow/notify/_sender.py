"""
Order notifications — sender protocol and best-effort delivery.

A notification never fails the caller: delivery errors are logged and
dropped, since the order they describe is already committed.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from kungfu import Error, Ok

from orderflow import lift as L

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Sender Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class NotificationSender(Protocol):
    async def order_placed(
        self,
        email: str,
        name: str,
        order_number: str,
        total: Decimal,
        created_at: datetime,
    ) -> None: ...

    async def order_confirmed(self, email: str, name: str, order_number: str) -> None: ...

    async def order_cancelled(self, email: str, name: str, order_number: str) -> None: ...

    async def order_delivered(
        self,
        email: str,
        name: str,
        order_number: str,
        delivered_date: datetime | None,
    ) -> None: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Logging Sender — default, no transport
# ═══════════════════════════════════════════════════════════════════════════════


class LoggingNotificationSender:
    """Writes the subject line of each message to the log."""

    def __init__(self, shop_name: str = "ECommerce") -> None:
        self.shop_name = shop_name

    def _emit(self, email: str, subject: str) -> None:
        logger.info("notify %s: %s", email, subject)

    async def order_placed(
        self,
        email: str,
        name: str,
        order_number: str,
        total: Decimal,
        created_at: datetime,
    ) -> None:
        self._emit(
            email,
            f"Order Confirmation - {order_number} - {self.shop_name} "
            f"(total {total:.2f}, {created_at:%d %b %Y %H:%M})",
        )

    async def order_confirmed(self, email: str, name: str, order_number: str) -> None:
        self._emit(email, f"Order Confirmed - {order_number} - {self.shop_name}")

    async def order_cancelled(self, email: str, name: str, order_number: str) -> None:
        self._emit(email, f"Order Cancelled - {order_number} - {self.shop_name}")

    async def order_delivered(
        self,
        email: str,
        name: str,
        order_number: str,
        delivered_date: datetime | None,
    ) -> None:
        self._emit(email, f"Order Delivered - {order_number} - {self.shop_name}")


# ═══════════════════════════════════════════════════════════════════════════════
# deliver() — best-effort send
# ═══════════════════════════════════════════════════════════════════════════════


async def deliver(
    send: Callable[[], Awaitable[None]],
    *,
    what: str,
    email: str,
    order_number: str,
) -> bool:
    """
    Run one send; report whether it went through.

    Exceptions are captured into an Error and logged at WARNING.
    """
    result = await L.attempt(send)
    match result:
        case Ok(_):
            logger.info("%s notification sent to %s for order %s", what, email, order_number)
            return True
        case Error(e):
            logger.warning(
                "Failed to send %s notification to %s for order %s: %r",
                what,
                email,
                order_number,
                e,
            )
            return False


__all__ = ("NotificationSender", "LoggingNotificationSender", "deliver")
