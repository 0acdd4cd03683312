"""Observability – structured logging helpers."""
from mongo_repository.observability.logging.factory import DRIVER_LOGGERS, JsonLoggerFactory
from mongo_repository.observability.logging.filters import (
    DEFAULT_SENSITIVE_FIELDS,
    SensitiveFieldsFilter,
    mask_credentials,
)
from mongo_repository.observability.logging.processors import get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "DRIVER_LOGGERS",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
    "mask_credentials",
]
