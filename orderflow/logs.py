import logging

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the orderflow logger."""
    logger = logging.getLogger("orderflow")
    logger.setLevel(level)
    if not any(getattr(h, "_orderflow", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(FORMAT))
        handler._orderflow = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


__all__ = ("configure_logging", "FORMAT")
