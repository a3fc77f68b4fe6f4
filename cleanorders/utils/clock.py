"""Wall-clock helpers for order timestamps."""

import time
from datetime import datetime


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def format_ms(value) -> str:
    """Render epoch milliseconds as a local ISO timestamp ('' if absent)."""
    if value is None:
        return ''
    return datetime.fromtimestamp(value / 1000).isoformat(timespec='seconds')
