"""Garden item ID generation.

IDs combine a millisecond timestamp with a random tiebreak so that two
items created in the same millisecond still differ, and lexical order
follows creation order across different milliseconds.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import secrets
import time

ITEM_ID_PATTERN = re.compile(r"^[0-9a-f]{12}-[0-9a-f]{6}$")


def generate_item_id(now_ms: int | None = None) -> str:
    """Return ``{12 hex ms timestamp}-{6 hex random}``."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{now_ms:012x}-{secrets.token_hex(3)}"


def validate_item_id(item_id: str) -> bool:
    """Check whether *item_id* has the generated ID shape."""
    return ITEM_ID_PATTERN.match(item_id) is not None
