"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from mongo_repository.observability.logging.filters import SensitiveFieldsFilter

# Namespaces of the driver's own loggers (command, connection, serverSelection)
DRIVER_LOGGERS = ("pymongo", "motor")


class JsonLoggerFactory:
    """Route structlog events through one stdlib handler that renders JSON.

    Secrets are redacted from every event; pass *sensitive_fields* to
    replace the default key set.  The driver loggers are held at
    *driver_level* so their command-level debug output does not drown the
    repository's own events.

    Usage::

        JsonLoggerFactory.configure("DEBUG")
        get_logger(__name__).info("index_created", collection="orders")
    """

    @staticmethod
    def configure(
        level: int | str = logging.INFO,
        sensitive_fields: frozenset[str] | None = None,
        stream: Any = None,
        driver_level: int | str = logging.WARNING,
    ) -> None:
        structlog.configure(
            processors=[
                *_shared_processors(sensitive_fields),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(_json_handler(stream))
        root.setLevel(level)
        for name in DRIVER_LOGGERS:
            logging.getLogger(name).setLevel(driver_level)


def _shared_processors(sensitive_fields: frozenset[str] | None) -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        SensitiveFieldsFilter(sensitive_fields),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _json_handler(stream: Any) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    return handler


__all__ = ["DRIVER_LOGGERS", "JsonLoggerFactory"]
