"""Downloader configuration with environment overrides."""

import os
from dataclasses import dataclass
from pathlib import Path

from rangeget import __version__
from rangeget.utils import MAX_CONNECTIONS


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class DownloadConfig:
    """Settings shared by every stage of a download session.

    Load from environment using DownloadConfig.from_env().
    Timeouts are in seconds.
    """

    work_dir: Path = Path(".")
    parts_dir_name: str = "parts"
    max_connections_limit: int = MAX_CONNECTIONS
    chunk_size: int = 8192
    connect_timeout: int = 30
    read_timeout: int = 30
    user_agent: str = f"RangeGet/{__version__}"
    log_level: str = "INFO"

    @property
    def parts_dir(self) -> Path:
        return Path(self.work_dir) / self.parts_dir_name

    @classmethod
    def from_env(cls) -> "DownloadConfig":
        """Load configuration from environment variables.

        Optional environment variables (with defaults):
            RANGEGET_WORK_DIR: . (default)
            RANGEGET_PARTS_DIR: parts (default)
            RANGEGET_CHUNK_SIZE: 8192 (default)
            RANGEGET_CONNECT_TIMEOUT: 30 (default)
            RANGEGET_READ_TIMEOUT: 30 (default)
            RANGEGET_USER_AGENT: RangeGet/<version> (default)
            RANGEGET_LOG_LEVEL: INFO (default)

        Raises:
            ValueError: If a numeric variable does not parse or is not positive
        """
        defaults = cls()
        config = cls(
            work_dir=Path(os.getenv("RANGEGET_WORK_DIR", str(defaults.work_dir))),
            parts_dir_name=os.getenv("RANGEGET_PARTS_DIR", defaults.parts_dir_name),
            chunk_size=_int_env("RANGEGET_CHUNK_SIZE", defaults.chunk_size),
            connect_timeout=_int_env("RANGEGET_CONNECT_TIMEOUT", defaults.connect_timeout),
            read_timeout=_int_env("RANGEGET_READ_TIMEOUT", defaults.read_timeout),
            user_agent=os.getenv("RANGEGET_USER_AGENT", defaults.user_agent),
            log_level=os.getenv("RANGEGET_LOG_LEVEL", defaults.log_level).upper(),
        )
        for name, value in (("RANGEGET_CHUNK_SIZE", config.chunk_size),
                            ("RANGEGET_CONNECT_TIMEOUT", config.connect_timeout),
                            ("RANGEGET_READ_TIMEOUT", config.read_timeout)):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        return config
