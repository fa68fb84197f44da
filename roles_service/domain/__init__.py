"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from roles_service.domain.enums import RoleNameMatch, SortOrder
from roles_service.domain.exceptions import (
    ConflictException,
    InternalException,
    RemoteValidationException,
    ResourceNotFoundException,
    RolesServiceException,
    StoreNotConfiguredException,
    ValidationException,
)

__all__ = [
    # Enums
    "RoleNameMatch",
    "SortOrder",
    # Exceptions
    "ConflictException",
    "InternalException",
    "RemoteValidationException",
    "ResourceNotFoundException",
    "RolesServiceException",
    "StoreNotConfiguredException",
    "ValidationException",
]
