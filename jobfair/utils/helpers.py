"""
Small helpers shared by services and routes.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional

DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def generate_id(prefix: str) -> str:
    """Opaque primary key, e.g. assignment_3f9c0e1a2b4d4c6e."""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime the way both PostgreSQL and SQLite compare correctly.
    Timezone-aware values are converted to UTC, matching CURRENT_TIMESTAMP;
    naive values are taken as already being UTC.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(DB_TIMESTAMP_FORMAT)


def parse_json_list(value) -> List[str]:
    """Decode a JSON-encoded list column; tolerate NULL and already-decoded values."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        return []
    return decoded if isinstance(decoded, list) else []


def contains_ci(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test that treats None as empty."""
    return bool(haystack) and needle.lower() in haystack.lower()
