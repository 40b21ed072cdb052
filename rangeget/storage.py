# rangeget/storage.py
"""
On-disk segment files, one per planned range.
"""
import glob
import logging
from pathlib import Path
from typing import BinaryIO, List, Tuple

from rangeget.models import RangeSpec
from rangeget.utils import format_bytes

logger = logging.getLogger(__name__)


class SegmentStore:
    """Maps a RangeSpec to ``<parts_dir>/<filename>.part-<index>``."""

    def __init__(self, parts_dir: Path, filename: str):
        self.parts_dir = Path(parts_dir)
        self.filename = filename

    def ensure_dir(self):
        if not self.parts_dir.is_dir():
            self.parts_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Parts folder created")

    def segment_path(self, index: int) -> Path:
        return self.parts_dir / f"{self.filename}.part-{index}"

    def existing_indexes(self) -> List[int]:
        """Indexes of every segment file on disk for this target, ascending."""
        if not self.parts_dir.is_dir():
            return []
        prefix = f"{self.filename}.part-"
        indexes = []
        for path in self.parts_dir.glob(f"{glob.escape(self.filename)}.part-*"):
            suffix = path.name[len(prefix):]
            if suffix.isdigit() and path.is_file():
                indexes.append(int(suffix))
        return sorted(indexes)

    def existing_length(self, index: int) -> int:
        path = self.segment_path(index)
        return path.stat().st_size if path.exists() else 0

    def open_segment(self, spec: RangeSpec) -> Tuple[BinaryIO, int]:
        """
        Open the segment file for appending and return ``(file, existing_length)``.

        An existing file is resumed: ``spec`` is advanced past the bytes it
        already holds so the next write lands at its true next byte.
        A missing file is created empty.
        """
        path = self.segment_path(spec.index)
        if path.exists():
            existing = path.stat().st_size
            f = open(path, 'ab')
            if existing > spec.size:
                logger.warning("Segment %s is larger than its range, truncating to %d bytes",
                               path, spec.size)
                f.truncate(spec.size)
                existing = spec.size
            spec.skip(existing)
            if spec.size > 0:
                logger.info("File %s already exists, resuming from %s", path, format_bytes(existing))
            return f, existing

        return open(path, 'wb'), 0

    def remove(self, index: int) -> bool:
        """Delete a segment file if present."""
        path = self.segment_path(index)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True
