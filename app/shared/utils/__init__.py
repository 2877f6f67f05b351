"""Shared utilities: datetime, generators, input checks."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import (
    SERVER_TIMESTAMP,
    InputSanitizer,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "SERVER_TIMESTAMP",
    "InputSanitizer",
]
