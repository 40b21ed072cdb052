# rangeget/scheduler.py
"""
Bounded concurrent execution of segment fetches.
"""
import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence

from rangeget.models import PartReport, RangeSpec
from rangeget.utils import MAX_CONNECTIONS, clamp_connections

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Runs one task per range, at most ``max_connections`` of them in flight.

    Every task is awaited before returning; a failed part never cancels its
    siblings because whatever it wrote is still valid resume state.
    """

    def __init__(self, max_connections: int, limit: int = MAX_CONNECTIONS):
        self.max_connections = clamp_connections(max_connections, limit)
        self.active = 0
        self.peak = 0

    async def run(self, specs: Sequence[RangeSpec],
                  fetch: Callable[[RangeSpec], Awaitable[PartReport]]) -> List[PartReport]:
        semaphore = asyncio.Semaphore(self.max_connections)

        async def worker(spec: RangeSpec) -> PartReport:
            async with semaphore:
                self.active += 1
                self.peak = max(self.peak, self.active)
                try:
                    return await fetch(spec)
                finally:
                    self.active -= 1

        tasks = [asyncio.create_task(worker(spec)) for spec in specs]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        reports = []
        first_error = None
        for spec, result in zip(specs, results):
            if isinstance(result, BaseException):
                logger.error("Part-%d aborted: %r", spec.index, result)
                if first_error is None:
                    first_error = result
            else:
                reports.append(result)

        # Only local failures (file system, programming errors) get here
        if first_error is not None:
            raise first_error
        return reports
