#!/usr/bin/env python3
"""
Helpers for reading environment variables.

Values coming from .env files edited on Windows often carry CRLF line
endings; every helper here strips them before converting.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def getenv_clean(key: str, default: str = None, strip: bool = True) -> Optional[str]:
    """Get an environment variable with line endings and whitespace removed.

    Args:
        key: Environment variable name
        default: Value returned when the variable is not set
        strip: If False, return the raw value untouched

    Returns:
        Cleaned value, or default if not set

    Example:
        >>> # .env file has: NEO4J_DATABASE=sysml\r\n
        >>> getenv_clean("NEO4J_DATABASE", "neo4j")
        'sysml'
    """
    raw_value = os.getenv(key, default)

    if raw_value is None:
        return None

    if not strip:
        return raw_value

    cleaned = raw_value.strip().rstrip("\r\n")

    if raw_value != cleaned:
        logger.warning(
            f"Environment variable {key} had trailing whitespace/line endings: "
            f"raw={repr(raw_value)}, cleaned={repr(cleaned)}"
        )

    return cleaned


def getenv_int(key: str, default: int) -> int:
    """Get an environment variable as an integer.

    Falls back to default (with a warning) when the value is not a valid integer.
    """
    raw_value = getenv_clean(key, None)

    if raw_value is None:
        return default

    try:
        return int(raw_value)
    except ValueError:
        logger.warning(
            f"Environment variable {key} is not a valid integer: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default


def getenv_list(key: str, default: list[str] = None, separator: str = ",") -> list[str]:
    """Get an environment variable as a list of cleaned strings.

    Args:
        key: Environment variable name
        default: List returned when the variable is unset or empty
        separator: Item separator (default: ",")

    Example:
        >>> # .env file has: CORS_ORIGINS=http://localhost:5173,http://localhost:3000\r\n
        >>> getenv_list("CORS_ORIGINS")
        ['http://localhost:5173', 'http://localhost:3000']
    """
    if default is None:
        default = []

    raw_value = getenv_clean(key, None)

    if raw_value is None or raw_value == "":
        return default

    items = [item.strip() for item in raw_value.split(separator) if item.strip()]
    return items if items else default
