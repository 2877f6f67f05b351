"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. The ids come from the Collection enum
so the policy engine, the gateway and the repositories agree on them.

Example:
    from app.infrastructure.firebase.client import get_firestore_client
    from app.infrastructure.firebase.collections import COLLECTION_PRINCIPALS

    db = get_firestore_client()
    if db:
        snapshot = await db.collection(COLLECTION_PRINCIPALS).document(uid).get()
"""

from app.domain.enums import Collection

# Written only by the account lifecycle service and the bootstrap handler
COLLECTION_PRINCIPALS = Collection.PRINCIPALS.value
COLLECTION_TENANTS = Collection.TENANTS.value

# Content and shared assets
COLLECTION_MANAGED_RESOURCES = Collection.MANAGED_RESOURCES.value
COLLECTION_ASSETS = Collection.ASSETS.value
COLLECTION_TRIPS = Collection.TRIPS.value

# Create-only click tracking
COLLECTION_ANALYTICS_EVENTS = Collection.ANALYTICS_EVENTS.value
