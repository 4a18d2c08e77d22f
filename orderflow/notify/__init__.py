"""
Notify — customer notifications about order events.

    from orderflow import notify as N

    await N.deliver(
        lambda: sender.order_confirmed(email, name, number),
        what="order confirmed", email=email, order_number=number,
    )
"""

from orderflow.notify._sender import (
    NotificationSender,
    LoggingNotificationSender,
    deliver,
)

__all__ = ("NotificationSender", "LoggingNotificationSender", "deliver")
