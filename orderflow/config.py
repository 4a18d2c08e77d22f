"""
Settings — read once from the environment.

Every variable is prefixed with ORDERFLOW_.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_PREFIX = "ORDERFLOW_"


def _env(name: str, default: str) -> str:
    return os.environ.get(_PREFIX + name, default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = "sqlite+aiosqlite:///./orderflow.db"
    log_level: str = "INFO"
    sql_echo: bool = False
    order_number_attempts: int = 20
    report_window_days: int = 30
    top_products: int = 10
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> Settings:
        # slotted: defaults live on an instance, not the class
        d = cls()
        return cls(
            database_url=_env("DATABASE_URL", d.database_url),
            log_level=_env("LOG_LEVEL", d.log_level).upper(),
            sql_echo=_env_bool("SQL_ECHO", d.sql_echo),
            order_number_attempts=int(
                _env("ORDER_NUMBER_ATTEMPTS", str(d.order_number_attempts))
            ),
            report_window_days=int(
                _env("REPORT_WINDOW_DAYS", str(d.report_window_days))
            ),
            top_products=int(_env("TOP_PRODUCTS", str(d.top_products))),
            host=_env("HOST", d.host),
            port=int(_env("PORT", str(d.port))),
        )


__all__ = ("Settings",)
