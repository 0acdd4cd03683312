"""Config settings – MongoSettings."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar

from mongo_repository.config.settings.base import Settings
from mongo_repository.config.validation import InvalidSettingValueError

_UUID_REPRESENTATIONS = frozenset(
    {"standard", "pythonLegacy", "javaLegacy", "csharpLegacy", "unspecified"}
)


@dataclasses.dataclass
class MongoSettings(Settings):
    """Connection settings read from ``MONGO_*`` variables.

    Example ``.env``::

        MONGO_CONNECTION_STRING=mongodb://localhost:27017
        MONGO_DATABASE_NAME=shop
        MONGO_SERVER_SELECTION_TIMEOUT_MS=5000
    """

    _prefix: ClassVar[str] = "MONGO"

    connection_string: str
    database_name: str
    app_name: str | None = None
    server_selection_timeout_ms: int = 30_000
    uuid_representation: str = "standard"

    def _validate(self) -> None:
        if not self.connection_string.startswith(("mongodb://", "mongodb+srv://")):
            raise InvalidSettingValueError(
                "connection_string", self.connection_string, "must be a mongodb:// URI"
            )
        if not self.database_name:
            raise InvalidSettingValueError("database_name", self.database_name, "must not be empty")
        if self.server_selection_timeout_ms <= 0:
            raise InvalidSettingValueError(
                "server_selection_timeout_ms",
                self.server_selection_timeout_ms,
                "must be positive",
            )
        if self.uuid_representation not in _UUID_REPRESENTATIONS:
            raise InvalidSettingValueError(
                "uuid_representation",
                self.uuid_representation,
                f"expected one of {sorted(_UUID_REPRESENTATIONS)}",
            )

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments for ``MongoClient`` / ``AsyncIOMotorClient``."""
        options: dict[str, Any] = {
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "uuidRepresentation": self.uuid_representation,
        }
        if self.app_name:
            options["appname"] = self.app_name
        return options


__all__ = ["MongoSettings"]
