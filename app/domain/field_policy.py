"""Field-level write policy for managed resources (points of interest).

Single source of truth for which fields a business operator may change on a
resource owned by their tenant. The policy engine enforces it and the API
publishes it (GET /policy/editable-fields) so the editing portal builds its
form from the same list. Bump the version whenever the set changes.
"""

from collections.abc import Iterable, Mapping
from typing import Any

OPERATOR_EDITABLE_FIELDS_VERSION = 3

OPERATOR_EDITABLE_FIELDS: frozenset[str] = frozenset({
    # Description
    "description",
    # Media references
    "mainImage",
    "images",
    "videos",
    # Contact fields
    "phone",
    "email",
    "website",
    "whatsapp",
    # Bookkeeping written alongside every edit
    "updatedAt",
})

# Never operator-editable: visibility, ownership, classification, admin-curated media.
OPERATOR_PROTECTED_FIELDS: frozenset[str] = frozenset({
    "active",
    "ownerBusinessRef",
    "categoryId",
    "subcategoryIds",
    "tagIds",
    "iconId",
    "iconUrl",
})

_MISSING = object()


def affected_keys(current: Mapping[str, Any] | None, patch: Mapping[str, Any]) -> set[str]:
    """Return the keys of patch whose value is new or differs from current."""
    before = current or {}
    return {
        key for key, value in patch.items()
        if before.get(key, _MISSING) != value
    }


def disallowed_operator_fields(keys: Iterable[str]) -> list[str]:
    """Return the keys (sorted) a business operator is not allowed to write."""
    return sorted(k for k in keys if k not in OPERATOR_EDITABLE_FIELDS)
