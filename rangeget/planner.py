# rangeget/planner.py
"""
Splits the remote object into contiguous byte ranges.
"""
import logging
from typing import List

from rangeget.models import RangeSpec

logger = logging.getLogger(__name__)


def plan_parts(length: int, n: int) -> List[RangeSpec]:
    """Partition ``length`` bytes into ``n`` ranges; the last one absorbs the remainder."""
    if n < 1:
        raise ValueError(f"part count must be at least 1, got {n}")
    if length < 0:
        raise ValueError(f"length must not be negative, got {length}")

    logger.info("Split file into %d parts", n)
    base = length // n
    parts = []
    for i in range(n):
        size = base if i < n - 1 else length - base * (n - 1)
        parts.append(RangeSpec(index=i + 1, offset=i * base, size=size))
    return parts
