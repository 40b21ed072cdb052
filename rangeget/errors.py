# rangeget/errors.py
"""
Exceptions raised by the download pipeline.
"""
from typing import Optional


class RangeGetError(Exception):
    pass


class SegmentTransferError(RangeGetError):
    """A ranged GET was answered with a status we cannot append from."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class InvalidConnectionCount(RangeGetError, ValueError):
    pass
