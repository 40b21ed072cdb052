# rangeget/progress.py
"""
Progress sinks shared by all segment fetchers of a session.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional


class ProgressSink:
    """Interface every fetcher reports to. The default implementation ignores everything."""

    def start(self, index: int, total: int, completed: int = 0):
        pass

    def report(self, index: int, delta: int):
        pass

    def set_total(self, index: int, total: int):
        pass

    def finish(self, index: int):
        pass


NullProgress = ProgressSink


@dataclass
class PartProgress:
    total: int = 0
    completed: int = 0
    finished: bool = False


class ProgressTracker(ProgressSink):
    """
    Per-part and aggregate byte counters.

    Fetchers share one event loop, so updates never interleave mid-call.
    ``progress_callback(downloaded, total)`` fires after every change.
    """

    def __init__(self, progress_callback: Optional[Callable[[int, int], None]] = None):
        self.parts: Dict[int, PartProgress] = {}
        self.progress_callback = progress_callback

    @property
    def downloaded(self) -> int:
        return sum(part.completed for part in self.parts.values())

    @property
    def total(self) -> int:
        return sum(part.total for part in self.parts.values())

    def start(self, index: int, total: int, completed: int = 0):
        self.parts[index] = PartProgress(total=total, completed=completed)
        self._notify()

    def report(self, index: int, delta: int):
        self.parts.setdefault(index, PartProgress()).completed += delta
        self._notify()

    def set_total(self, index: int, total: int):
        self.parts.setdefault(index, PartProgress()).total = total
        self._notify()

    def finish(self, index: int):
        self.parts.setdefault(index, PartProgress()).finished = True
        self._notify()

    def _notify(self):
        if self.progress_callback:
            self.progress_callback(self.downloaded, self.total)
