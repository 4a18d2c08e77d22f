"""
python -m orderflow init-db | serve
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace

from orderflow.config import Settings
from orderflow.db import create_engine, create_schema
from orderflow.logs import configure_logging

logger = logging.getLogger("orderflow.cli")


async def _init_db(settings: Settings) -> None:
    engine = create_engine(settings.database_url, echo=settings.sql_echo)
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()
    logger.info("Schema created at %s", settings.database_url)


def _serve(settings: Settings) -> None:
    import uvicorn

    from orderflow.api import create_app

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="orderflow")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="create the database schema")
    serve = sub.add_parser("serve", help="run the HTTP API under uvicorn")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    match args.command:
        case "init-db":
            asyncio.run(_init_db(settings))
        case "serve":
            overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v is not None}
            _serve(replace(settings, **overrides))


if __name__ == "__main__":
    main()
