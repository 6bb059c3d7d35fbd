"""ULID helpers for path and metric label handling."""

from typing import Optional

import ulid


def parse_ulid(ulid_str: str) -> Optional[ulid.ULID]:
    """Parse a ULID string, returning None when it is not one."""
    try:
        return ulid.ULID.from_str(ulid_str)
    except (ValueError, TypeError, AttributeError):
        return None


def is_valid_ulid(ulid_str: str) -> bool:
    return parse_ulid(ulid_str) is not None
