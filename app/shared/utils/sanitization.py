"""Input checks for document writes: identifiers, field names, server values."""

import re
from datetime import datetime
from typing import Any, ClassVar

SERVER_TIMESTAMP: dict[str, str] = {".sv": "timestamp"}


class InputSanitizer:
    """
    Validate client-supplied document ids and field names, and resolve
    server-value placeholders in document bodies.

    Field names end up in Firestore update masks, so only plain
    identifiers are accepted at the top level.
    """

    IDENTIFIER_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[a-zA-Z0-9_-]+")
    FIELD_NAME_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

    @classmethod
    def sanitize_identifier(cls, value: str) -> str:
        """Return value if it is a valid document id.

        Raises:
            ValueError: If value is empty or not alphanumeric/underscore/hyphen.
        """
        if not value or not cls.IDENTIFIER_PATTERN.fullmatch(value):
            raise ValueError("Invalid identifier format")
        return value

    @classmethod
    def check_field_names(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Return data unchanged if every top-level key is a plain field name."""
        for key in data:
            if not isinstance(key, str) or not cls.FIELD_NAME_PATTERN.fullmatch(key):
                raise ValueError(f"Invalid field name: {key!r}")
        return data

    @classmethod
    def resolve_server_values(
        cls,
        data: Any,
        now: datetime,
        max_depth: int = 100,
    ) -> Any:
        """Recursively replace {".sv": "timestamp"} with now.

        Args:
            data: Decoded JSON value (dict, list or scalar).
            now: Server time to substitute.
            max_depth: Maximum recursion depth (default 100).

        Raises:
            ValueError: If max_depth <= 0 or recursion exceeds max_depth.
        """
        if max_depth <= 0:
            raise ValueError("Maximum recursion depth exceeded or invalid max_depth")
        if isinstance(data, dict):
            if data == SERVER_TIMESTAMP:
                return now
            return {
                key: cls.resolve_server_values(value, now, max_depth=max_depth - 1)
                for key, value in data.items()
            }
        if isinstance(data, list):
            return [
                cls.resolve_server_values(item, now, max_depth=max_depth - 1)
                for item in data
            ]
        return data
