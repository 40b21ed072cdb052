# rangeget/engine.py
"""
Download session: probe, plan, fetch segments concurrently, merge.
"""

import logging
import ssl
from pathlib import Path
from typing import Callable, List, Optional

import aiohttp
import certifi

from rangeget.config import DownloadConfig
from rangeget.fetcher import SegmentFetcher
from rangeget.ledger import ResumeLedger
from rangeget.merger import Merger
from rangeget.models import DownloadResult, DownloadStatus, PartReport, RangeSpec
from rangeget.planner import plan_parts
from rangeget.prober import Prober
from rangeget.progress import ProgressSink, ProgressTracker
from rangeget.scheduler import Scheduler
from rangeget.storage import SegmentStore
from rangeget.utils import clamp_connections, format_bytes

logger = logging.getLogger(__name__)


class DownloadSession:
    """Manages the entire download process for a single URL."""

    def __init__(self, url: str, max_connections: int, config: Optional[DownloadConfig] = None,
                 session: Optional[aiohttp.ClientSession] = None,
                 progress: Optional[ProgressSink] = None):
        self.url = url
        self.config = config or DownloadConfig()
        self.max_connections = clamp_connections(max_connections, self.config.max_connections_limit)

        # Resolved once from the probe, then used for every derived path
        self.filename = ""

        self.session = session
        self._owns_session = session is None

        # Callbacks for UI updates
        self.progress_callback: Optional[Callable[[int, int], None]] = None
        self.status_callback: Optional[Callable[[str], None]] = None
        self.progress = progress or ProgressTracker(self._on_progress)

    @property
    def output_path(self) -> Path:
        return Path(self.config.work_dir) / self.filename

    def create_client(self) -> aiohttp.ClientSession:
        """Build the HTTP client used for the probe and every ranged GET."""
        self._update_status("Building async client")
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(limit_per_host=self.max_connections, ssl=ssl_context)
        timeout = aiohttp.ClientTimeout(total=None, connect=self.config.connect_timeout,
                                        sock_read=self.config.read_timeout)
        headers = {
            'User-Agent': self.config.user_agent,
            # Range offsets address the raw entity bytes
            'Accept-Encoding': 'identity',
        }
        return aiohttp.ClientSession(connector=connector, timeout=timeout, headers=headers)

    async def start(self) -> DownloadResult:
        """Main download orchestration method."""
        if self.session is None:
            self.session = self.create_client()
        try:
            return await self._run()
        finally:
            if self._owns_session and self.session is not None:
                await self.session.close()
                self.session = None

    async def _run(self) -> DownloadResult:
        probe = await Prober(self.session).probe(self.url)
        self.filename = probe.filename
        length = probe.content_length

        result = DownloadResult(status=DownloadStatus.NOT_DOWNLOADABLE, filename=self.filename,
                                expected_size=length)
        if not self.is_downloadable(length):
            return result

        result.path = self.output_path
        if self.is_already_downloaded(length):
            result.status = DownloadStatus.ALREADY_DOWNLOADED
            result.actual_size = length
            return result

        store = SegmentStore(self.config.parts_dir, self.filename)
        store.ensure_dir()
        ledger = ResumeLedger(store)
        ledger.check_and_reset(self.max_connections)

        specs = plan_parts(length, self.max_connections)
        result.parts = await self.download_parts(specs, store)

        result.actual_size = Merger(store, ledger, self.output_path).merge(specs)
        result.status = DownloadStatus.COMPLETED
        self.verify_download(result)
        return result

    async def download_parts(self, specs: List[RangeSpec], store: SegmentStore) -> List[PartReport]:
        fetcher = SegmentFetcher(self.session, self.url, store, progress=self.progress,
                                 chunk_size=self.config.chunk_size, single_part=len(specs) == 1)
        self._update_status("Start downloading")
        return await Scheduler(self.max_connections, self.config.max_connections_limit).run(
            specs, fetcher.fetch)

    def is_downloadable(self, length: int) -> bool:
        if length == 0:
            self._update_status("Remote file has no length!", logging.WARNING)
            self._update_status("Failed writing received data to disk/application", logging.WARNING)
            return False
        if not self.filename:
            self._update_status("Could not derive a file name from the URL", logging.WARNING)
            return False
        if self.filename == self.config.parts_dir_name or self.output_path.is_dir():
            self._update_status(f"Output path {self.output_path} is a directory, refusing to write there",
                                logging.WARNING)
            return False
        return True

    def is_already_downloaded(self, length: int) -> bool:
        path = self.output_path
        if path.is_file() and path.stat().st_size == length:
            self._update_status("Aborting, file already downloaded!")
            return True
        return False

    def verify_download(self, result: DownloadResult):
        """Compare the merged size against the probed length."""
        for part in result.failed_parts:
            self._update_status(f"Part-{part.index} did not finish: {part.error}", logging.WARNING)
        if result.actual_size != result.expected_size:
            self._update_status(
                f"Size mismatch for {self.filename}. Expected: {format_bytes(result.expected_size)}, "
                f"Got: {format_bytes(result.actual_size)}", logging.WARNING)
            return
        self._update_status(f"File downloaded {self.filename}")

    def _on_progress(self, downloaded: int, total: int):
        if self.progress_callback:
            self.progress_callback(downloaded, total)

    def _update_status(self, message: str, level: int = logging.INFO):
        """Log a status line and mirror it to the UI callback."""
        logger.log(level, message)
        if self.status_callback:
            self.status_callback(message)
