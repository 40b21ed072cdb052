# rangeget/utils.py
"""
Shared helper functions for formatting, validation, and URL handling.
"""
from pathlib import PurePosixPath
from urllib.parse import urlparse

from rangeget.errors import InvalidConnectionCount

MAX_CONNECTIONS = 8


def format_bytes(size: int) -> str:
    """Converts bytes into a human-readable format (KiB, MiB, GiB)."""
    if not isinstance(size, (int, float)):
        return "0 B"
    if size < 1024:
        return f"{int(size)} B"
    power = 1024
    n = 0
    power_labels = {0: '', 1: 'Ki', 2: 'Mi', 3: 'Gi', 4: 'Ti'}
    while size >= power and n < len(power_labels) - 1:
        size /= power
        n += 1
    return f"{size:.2f} {power_labels[n]}B"


def is_valid_url(url: str) -> bool:
    """Performs a basic check to see if a string is a valid URL."""
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except ValueError:
        return False


def filename_from_url(url: str) -> str:
    """Last component of the URL path, or an empty string if there is none."""
    try:
        path = urlparse(str(url)).path
    except ValueError:
        return ""
    name = PurePosixPath(path).name if path else ""
    return "" if name in (".", "..") else name


def clamp_connections(value: int, limit: int = MAX_CONNECTIONS) -> int:
    return max(1, min(int(value), limit))


def parse_connections(text: str, limit: int = MAX_CONNECTIONS) -> int:
    """Parse a user-entered connection count and clamp it to [1, limit]."""
    try:
        value = int(str(text).strip())
    except ValueError:
        raise InvalidConnectionCount(f"Not a number: {text!r}") from None
    return clamp_connections(value, limit)
