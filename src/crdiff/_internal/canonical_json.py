"""Byte-stable JSON encoding.

Used for the JSON report, for display of enum and bound values in
finding messages, and as the identity key of enum values when diffing.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Serialize ``obj`` to canonical JSON.

    Rules:
    - Sorted keys
    - Compact separators (",", ":")
    - Non-ASCII characters are emitted as UTF-8, not escaped
    - List order is preserved (callers sort where order is not meaningful)

    Args:
        obj: JSON-compatible Python object

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )
