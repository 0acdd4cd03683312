"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError             (application.py)
    │   ├── ArgumentNullError
    │   ├── EmptyFieldSetError
    │   └── UnsupportedIdentifierTypeError
    ├── DomainError                  (domain.py)
    │   ├── WriteRejectedError
    │   │   ├── ValidationError
    │   │   └── WriteConflictError (also ConflictError)
    │   ├── NotFoundError
    │   │   └── IndexNotFoundError
    │   └── ConflictError
    └── InfrastructureError          (infrastructure.py)
        └── ConnectionError
"""

from mongo_repository.kernel.errors.application import (
    ApplicationError,
    ArgumentNullError,
    EmptyFieldSetError,
    UnsupportedIdentifierTypeError,
)
from mongo_repository.kernel.errors.base import BaseError
from mongo_repository.kernel.errors.domain import (
    ConflictError,
    DomainError,
    IndexNotFoundError,
    NotFoundError,
    ValidationError,
    WriteConflictError,
    WriteRejectedError,
)
from mongo_repository.kernel.errors.infrastructure import (
    ConnectionError,
    InfrastructureError,
)

__all__ = [
    "ApplicationError",
    "ArgumentNullError",
    "BaseError",
    "ConflictError",
    "ConnectionError",
    "DomainError",
    "EmptyFieldSetError",
    "IndexNotFoundError",
    "InfrastructureError",
    "NotFoundError",
    "UnsupportedIdentifierTypeError",
    "ValidationError",
    "WriteConflictError",
    "WriteRejectedError",
]
