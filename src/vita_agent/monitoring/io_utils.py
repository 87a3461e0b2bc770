"""Unit conversion helpers for kernel counters.

All conversions use integer floor division: the consumer works with whole
milliseconds and megabytes.

Functions:
    bytes_to_mb: Convert bytes to megabytes
    kib_to_mb: Convert /proc kB figures to megabytes
    usec_to_ms: Convert microseconds to milliseconds
    nsec_to_ms: Convert nanoseconds to milliseconds
    read_text_or_none: Read a small pseudo-file, None when unreadable
"""

from __future__ import annotations

import logging
from pathlib import Path

from vita_agent.core.constants import BYTES_PER_MB

logger = logging.getLogger(__name__)


def bytes_to_mb(byte_count: int) -> int:
    """Convert bytes to whole megabytes (1 MB = 1,048,576 bytes)."""
    return byte_count // BYTES_PER_MB


def kib_to_mb(kib: int) -> int:
    return kib // 1024


def usec_to_ms(usec: int) -> int:
    return usec // 1000


def nsec_to_ms(nsec: int) -> int:
    return nsec // 1_000_000


def read_text_or_none(path: Path) -> str | None:
    """Read a pseudo-file, returning None if it is missing, unreadable or not text.

    cgroup and /proc files disappear whenever a pod or container exits, so a
    failed read is routine and only logged at debug level.

    Args:
        path: File to read

    Returns:
        File content, or None on any OS or decode error
    """
    try:
        return path.read_text()
    except FileNotFoundError:
        logger.debug(f"{path} not found")
    except OSError as e:
        logger.debug(f"Error reading {path}: {e}")
    except UnicodeDecodeError as e:
        logger.debug(f"Undecodable content in {path}: {e}")
    return None
