# rangeget/merger.py
"""
Concatenates finished segments into the output file.
"""
import logging
import shutil
from pathlib import Path
from typing import Sequence

from rangeget.ledger import ResumeLedger
from rangeget.models import RangeSpec
from rangeget.storage import SegmentStore

logger = logging.getLogger(__name__)


class Merger:
    def __init__(self, store: SegmentStore, ledger: ResumeLedger, output_path: Path):
        self.store = store
        self.ledger = ledger
        self.output_path = Path(output_path)

    def merge(self, specs: Sequence[RangeSpec]) -> int:
        """
        Append every segment to a truncated output file in ascending index order,
        deleting each segment once copied, then drop the ledger.

        Returns the size of the merged file.
        """
        ordered = sorted(specs, key=lambda spec: spec.index)
        logger.info("Merge %d parts into one file", len(ordered))
        with open(self.output_path, 'wb') as output:
            for spec in ordered:
                path = self.store.segment_path(spec.index)
                with open(path, 'rb') as segment:
                    shutil.copyfileobj(segment, output)
                path.unlink()
        self.ledger.remove()
        return self.output_path.stat().st_size
