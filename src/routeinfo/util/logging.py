# routeinfo/util/logging.py
from __future__ import annotations

import datetime
import logging

LOG_FORMAT = "%(asctime)s  %(message)s"


class _IsoFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        ts = datetime.datetime.fromtimestamp(record.created).astimezone()
        return ts.isoformat(timespec="seconds")


def utc_now_iso() -> str:
    """Return current UTC timestamp as ISO-8601 string."""
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def configure_logging(verbose: bool = False) -> None:
    """Send routeinfo logs to stderr as timestamped lines (local time with timezone)."""
    handler = logging.StreamHandler()
    handler.setFormatter(_IsoFormatter(LOG_FORMAT))

    root = logging.getLogger("routeinfo")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False
