"""Progress bar, formatting, and logging utilities."""

import logging
import sys
from datetime import datetime

from tqdm import tqdm

log = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure root logger."""
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr)
    logging.getLogger().setLevel(level)


def format_size(size_bytes: int) -> str:
    """Human-readable file size."""
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if abs(size_bytes) < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024  # type: ignore[assignment]
    return f"{size_bytes:.1f} PB"


def format_time(ts: str) -> str:
    """Format an API timestamp (ISO 8601, UTC) as 'YYYY-mm-dd HH:MM:SS'."""
    if not ts:
        return "-"
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return ts
    return dt.strftime("%Y-%m-%d %H:%M:%S")


class ProgressBar:
    """Byte-counting tqdm bar; ``enabled=False`` keeps the count silently."""

    def __init__(self, total: int, desc: str = "", unit: str = "B", enabled: bool = True):
        self.total = total
        self.desc = desc
        self.n = 0
        self._bar = tqdm(
            total=total, desc=desc, unit=unit,
            unit_scale=True, unit_divisor=1024,
            disable=not enabled,
        )

    def update(self, n: int):
        self.n += n
        self._bar.update(n)

    def close(self):
        self._bar.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
