# rangeget/fetcher.py
"""
Ranged transfer of a single segment into its on-disk file.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from rangeget.errors import SegmentTransferError
from rangeget.models import PartReport, PartStatus, RangeSpec
from rangeget.progress import NullProgress, ProgressSink
from rangeget.storage import SegmentStore
from rangeget.utils import format_bytes

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192


class SegmentFetcher:
    """Streams one RangeSpec into its segment file. Failures are reported, never retried."""

    def __init__(self, session: aiohttp.ClientSession, url: str, store: SegmentStore,
                 progress: Optional[ProgressSink] = None, chunk_size: int = DEFAULT_CHUNK_SIZE,
                 single_part: bool = False):
        self.session = session
        self.url = url
        self.store = store
        self.progress = progress or NullProgress()
        self.chunk_size = chunk_size
        self.single_part = single_part

    async def fetch(self, spec: RangeSpec) -> PartReport:
        total = spec.size
        f, existing = self.store.open_segment(spec)
        self.progress.start(spec.index, total, existing)
        report = PartReport(index=spec.index, status=PartStatus.SKIPPED,
                            bytes_written=existing, total=total, resumed_from=existing)
        try:
            with f:
                if spec.size > 0:
                    report.status = PartStatus.COMPLETED
                    report.bytes_written += await self._transfer(spec, f, existing)
                    if self.single_part:
                        report.total = report.bytes_written
        except (aiohttp.ClientError, asyncio.TimeoutError, SegmentTransferError) as e:
            report.status = PartStatus.FAILED
            report.bytes_written = self.store.existing_length(spec.index)
            report.error = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
            logger.warning("Part-%d failed: %s", spec.index, report.error)
        finally:
            self.progress.finish(spec.index)

        logger.info("Part-%d => downloaded %s of %s", spec.index,
                    format_bytes(report.bytes_written), format_bytes(report.total))
        return report

    async def _transfer(self, spec: RangeSpec, f, existing: int) -> int:
        """Append the response body to ``f``; returns the number of new bytes written."""
        written = 0
        remaining = spec.size
        headers = {'Range': spec.to_header()}
        async with self.session.get(self.url, headers=headers) as response:
            self._check_status(response.status, spec)

            async for data in response.content.iter_chunked(self.chunk_size):
                # Never grow a segment past its planned size
                if len(data) > remaining:
                    data = data[:remaining]
                f.write(data)
                written += len(data)
                remaining -= len(data)
                self.progress.report(spec.index, len(data))
                if self.single_part:
                    self.progress.set_total(spec.index, existing + written)
                if remaining == 0:
                    break

        if remaining > 0:
            raise SegmentTransferError(
                f"Stream ended {remaining} bytes short of {spec.to_header()}")
        return written

    def _check_status(self, status: int, spec: RangeSpec):
        if status == 206:
            return
        # A server that ignores Range sends the whole object, which is only usable
        # when this part is the whole object from its first byte.
        if status == 200 and self.single_part and spec.offset == 0:
            return
        raise SegmentTransferError(f"HTTP {status} for {spec.to_header()}", status=status)
