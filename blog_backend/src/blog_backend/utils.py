from __future__ import annotations

import math
import re
import time
from datetime import datetime, timezone
from typing import Any, Optional

_DECIMAL_LITERAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


# PUBLIC_INTERFACE
def now_ms() -> int:
    """Return the current time as integer milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


# PUBLIC_INTERFACE
def iso_now() -> str:
    """
    Return the current UTC time as an ISO8601 string with millisecond
    precision and a trailing 'Z', e.g. '2025-01-25T10:15:30.123Z'.
    """
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


# PUBLIC_INTERFACE
def parse_post_id(value: Any) -> Optional[int]:
    """
    Loosely coerce a path parameter into a post id.

    Accepts integers and plain decimal strings (surrounding whitespace
    allowed, integral floats such as '12.0' or '1.2e3' included). Python-only
    spellings like '1_000', 'nan' or 'inf' are rejected. Returns None when the
    value cannot name any post.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    s = str(value).strip()
    if not _DECIMAL_LITERAL.match(s):
        return None
    if s.lstrip("+-").isdigit():
        return int(s)
    f = float(s)
    if not math.isfinite(f) or not f.is_integer():
        return None
    return int(f)
