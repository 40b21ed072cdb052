# rangeget/ledger.py
"""
Persisted part count used to detect a changed partition scheme between runs.
"""
import logging
import struct
from pathlib import Path
from typing import Optional

from rangeget.storage import SegmentStore

logger = logging.getLogger(__name__)

# 4-byte signed big-endian integer
LEDGER_FORMAT = '>i'


class ResumeLedger:
    """Stores the expected part count at ``<parts_dir>/<filename>.metadata``."""

    def __init__(self, store: SegmentStore):
        self.store = store
        self.path: Path = store.parts_dir / f"{store.filename}.metadata"

    def read(self) -> Optional[int]:
        """Return the stored part count, or None when there is no usable ledger."""
        if not self.path.exists():
            return None
        raw = self.path.read_bytes()
        if len(raw) < struct.calcsize(LEDGER_FORMAT):
            logger.warning("Ignoring truncated ledger %s", self.path)
            return None
        return struct.unpack(LEDGER_FORMAT, raw[:struct.calcsize(LEDGER_FORMAT)])[0]

    def write(self, count: int):
        self.path.write_bytes(struct.pack(LEDGER_FORMAT, count))

    def check_and_reset(self, requested_n: int) -> bool:
        """
        Discard stale segments when the stored part count differs.

        Returns True when segments were discarded. The ledger always holds
        ``requested_n`` afterwards.
        """
        stored = self.read()
        reset = False
        if self.path.exists() and stored != requested_n:
            logger.info("Max number of parts has changed, restarting file download")
            # Bounded by the files on disk, not by the stored count
            for index in self.store.existing_indexes():
                if self.store.remove(index):
                    logger.debug("Removed stale segment %s", self.store.segment_path(index))
            reset = True

        self.write(requested_n)
        return reset

    def remove(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
