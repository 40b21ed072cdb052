# rangeget/models.py
"""
Data Models for RangeGet
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass
class RangeSpec:
    """One contiguous byte interval of the remote object."""
    index: int
    offset: int
    size: int

    def to_header(self) -> str:
        """Range header value, both bounds inclusive."""
        return f"bytes={self.offset}-{self.offset + self.size - 1}"

    def skip(self, existing: int):
        """Advance past bytes already on disk; never goes below zero."""
        existing = min(existing, self.size)
        self.offset += existing
        self.size -= existing


@dataclass
class ProbeResult:
    """Outcome of the metadata-only request."""
    content_length: int = 0
    filename: str = ""


class PartStatus(Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"  # segment already satisfied on disk
    FAILED = "failed"


@dataclass
class PartReport:
    """Completion report of a single segment transfer."""
    index: int
    status: PartStatus
    bytes_written: int = 0  # segment length on disk, resumed bytes included
    total: int = 0
    resumed_from: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not PartStatus.FAILED


class DownloadStatus(Enum):
    NOT_DOWNLOADABLE = "not_downloadable"
    ALREADY_DOWNLOADED = "already_downloaded"
    COMPLETED = "completed"


@dataclass
class DownloadResult:
    """Final state of a download session"""
    status: DownloadStatus
    filename: str = ""
    path: Optional[Path] = None
    expected_size: int = 0
    actual_size: int = 0
    parts: List[PartReport] = field(default_factory=list)

    @property
    def failed_parts(self) -> List[PartReport]:
        return [part for part in self.parts if not part.ok]

    @property
    def complete(self) -> bool:
        if self.status is DownloadStatus.ALREADY_DOWNLOADED:
            return True
        return self.status is DownloadStatus.COMPLETED and self.actual_size == self.expected_size
