"""Observability – get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger for *name* with *initial_values* bound.

    Data-access components bind ``component=<class name>`` so every event
    says which component dispatched the store call.
    """
    logger = structlog.get_logger(name)
    return logger.bind(**initial_values) if initial_values else logger


__all__ = ["get_logger"]
