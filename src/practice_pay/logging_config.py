"""Logging setup for the API and CLI entry points."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for an entry point.

    Library modules only create loggers with ``logging.getLogger(__name__)``;
    handlers are installed here so that importing the package never
    changes the host application's logging.
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("practice_pay").setLevel(resolved)
