"""
RangeGet - resumable multi-connection downloader
Interactive command line entry point
"""

import argparse
import asyncio
import sys
import time
from typing import List, Optional

from rangeget.config import DownloadConfig
from rangeget.engine import DownloadSession
from rangeget.errors import InvalidConnectionCount
from rangeget.logging_setup import setup_logging
from rangeget.models import DownloadStatus
from rangeget.utils import format_bytes, is_valid_url, parse_connections


def user_input(msg: str) -> str:
    return input(msg).strip()


class ConsoleProgress:
    """Rewrites a single status line, at most every ``interval`` seconds."""

    def __init__(self, stream=None, interval: float = 0.2):
        self.stream = stream or sys.stdout
        self.interval = interval
        self.start_time = time.monotonic()
        self.last_update = 0.0

    def __call__(self, downloaded: int, total: int):
        now = time.monotonic()
        if now - self.last_update < self.interval and downloaded < total:
            return
        self.last_update = now
        elapsed = now - self.start_time
        speed = downloaded / elapsed if elapsed > 0 else 0
        line = f"{format_bytes(downloaded)} / {format_bytes(total)}"
        if total > 0:
            line += f" ({downloaded / total * 100:.1f}%)"
        line += f" {format_bytes(speed)}/s"
        self.stream.write(f"\r{line:<60}")
        self.stream.flush()

    def done(self):
        self.stream.write("\n")
        self.stream.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rangeget",
                                     description="Resumable multi-connection HTTP downloader")
    parser.add_argument("url", nargs="?", help="URL to download (prompted when omitted)")
    parser.add_argument("connections", nargs="?",
                        help="Number of parallel connections, 1-8 (prompted when omitted)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = DownloadConfig.from_env()
    setup_logging(config.log_level)

    url = args.url or user_input("[?] url: ")
    raw_connections = args.connections
    if raw_connections is None:
        raw_connections = user_input(f"[?] max connections (limit {config.max_connections_limit}): ")

    try:
        max_connections = parse_connections(raw_connections, config.max_connections_limit)
    except InvalidConnectionCount:
        print("[+] Enter a valid number")
        return 1

    if not is_valid_url(url):
        print("[+] Enter a valid URL")
        return 1

    console = ConsoleProgress()
    session = DownloadSession(url, max_connections, config=config)
    session.progress_callback = console

    try:
        result = asyncio.run(session.start())
    except KeyboardInterrupt:
        console.done()
        print("[+] Interrupted, partial parts kept for resume")
        return 130

    if result.status is DownloadStatus.COMPLETED:
        console.done()
    return 1 if result.status is DownloadStatus.NOT_DOWNLOADABLE else 0


if __name__ == "__main__":
    sys.exit(main())
