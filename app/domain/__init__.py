"""Domain layer: entities, value objects, enums, field policy and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import BusinessTenantEntity, PrincipalEntity
from app.domain.enums import ELEVATED_ROLES, Collection, Operation, Role
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AuthenticationException,
    AuthorizationException,
    FailedPreconditionException,
    InternalServiceException,
    PlatformException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import ScopeRef

__all__ = [
    # Entities
    "BusinessTenantEntity",
    "PrincipalEntity",
    # Enums
    "Collection",
    "ELEVATED_ROLES",
    "Operation",
    "Role",
    # Exceptions
    "AccountAlreadyExistsException",
    "AuthenticationException",
    "AuthorizationException",
    "FailedPreconditionException",
    "InternalServiceException",
    "PlatformException",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "ScopeRef",
]
