"""
FastAPI application factory.

    app = create_app()                                   # settings from ORDERFLOW_* env
    app = create_app(session_factory, notifier=sender)   # tests / embedding
"""

from __future__ import annotations

import logging

import fastapi
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderflow import notify as N
from orderflow import ops as Ops
from orderflow import wire as W
from orderflow.api._endpoints import all_endpoints
from orderflow.api._schemas import GENERIC_FAILURE, Envelope
from orderflow.config import Settings
from orderflow.db import create_engine

logger = logging.getLogger(__name__)

VALIDATION_FAILURE = "One or more validation errors occurred."


def _validation_messages(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        # drop the "body"/"query" prefix fastapi puts on every location
        loc = [str(part) for part in err.get("loc", ())[1:]]
        msg = str(err.get("msg", "Invalid value"))
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


async def _on_validation_error(
    request: fastapi.Request, exc: RequestValidationError
) -> JSONResponse:
    body = Envelope.failure(VALIDATION_FAILURE, _validation_messages(exc))
    return JSONResponse(status_code=400, content=jsonable_encoder(body))


async def _on_unexpected_error(request: fastapi.Request, exc: Exception) -> JSONResponse:
    logger.exception("An error occurred: %s", exc)
    return JSONResponse(status_code=500, content=jsonable_encoder(Envelope.failure(GENERIC_FAILURE)))


def create_app(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    *,
    settings: Settings | None = None,
    notifier: N.NotificationSender | None = None,
) -> fastapi.FastAPI:
    settings = settings or Settings.from_env()
    if session_factory is None:
        engine = create_engine(settings.database_url, echo=settings.sql_echo)
        session_factory = async_sessionmaker(engine, expire_on_commit=False)

    runner = Ops.build_runner(
        session_factory,
        notifier or N.LoggingNotificationSender(),
        settings,
    )

    app = W.from_application(
        W.application().mount(*all_endpoints(runner)),
        title="orderflow",
    )
    app.add_exception_handler(RequestValidationError, _on_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _on_unexpected_error)
    return app


__all__ = ("create_app", "VALIDATION_FAILURE")
