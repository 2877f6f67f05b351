"""Domain value objects (immutable, self-validating)."""

from app.domain.value_objects.core import (
    OperatorUsername,
    ScopeRef,
    tenant_id_from_scope_ref,
    tenant_scope_ref,
)

__all__ = [
    "OperatorUsername",
    "ScopeRef",
    "tenant_id_from_scope_ref",
    "tenant_scope_ref",
]
