"""POI platform authorization service."""
