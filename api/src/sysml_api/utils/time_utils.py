#!/usr/bin/env python3
"""Timestamp helpers shared by the services."""

import time
from datetime import datetime, timezone


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision ('...Z')."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_millis() -> int:
    """Current time in epoch milliseconds, used to build generated ids."""
    return int(time.time() * 1000)
