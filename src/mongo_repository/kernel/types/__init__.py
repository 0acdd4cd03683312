"""Kernel types – identifier generation."""
from mongo_repository.kernel.types.ids import (
    IdGenerator,
    IdPolicy,
    default_key,
    is_default_key,
    new_id,
)

__all__ = ["IdGenerator", "IdPolicy", "default_key", "is_default_key", "new_id"]
