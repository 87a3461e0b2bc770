"""Counter extraction for a single resolved cgroup directory.

v2 keeps every controller in the same directory:
    cpu.stat        usage_usec <microseconds>
    memory.current  <bytes>
    memory.max      <bytes> | max

v1 splits controllers into disjoint trees that share the same relative
layout, so the memory directory is derived from the CPU directory by
textual substitution:
    /sys/fs/cgroup/cpu/kubepods/...    cpuacct.usage (nanoseconds)
    /sys/fs/cgroup/memory/kubepods/... memory.usage_in_bytes, memory.limit_in_bytes

Every field is read independently: a missing file or unparsable value
zeroes that field only.
"""

from __future__ import annotations

import logging
from pathlib import Path

from vita_agent.core.constants import (
    V1_CPU_SEGMENT,
    V1_CPU_USAGE_FILE,
    V1_MEMORY_LIMIT_FILE,
    V1_MEMORY_SEGMENT,
    V1_MEMORY_UNLIMITED_BYTES,
    V1_MEMORY_USAGE_FILE,
    V2_CPU_STAT_FILE,
    V2_CPU_USAGE_KEY,
    V2_MEMORY_CURRENT_FILE,
    V2_MEMORY_MAX_FILE,
    V2_MEMORY_MAX_SENTINEL,
)
from vita_agent.monitoring.base import CgroupStats
from vita_agent.monitoring.io_utils import (
    bytes_to_mb,
    nsec_to_ms,
    read_text_or_none,
    usec_to_ms,
)

logger = logging.getLogger(__name__)


def parse_counter(content: str | None) -> int:
    """Parse a single non-negative decimal counter, 0 if absent or malformed."""
    if content is None:
        return 0
    try:
        value = int(content.strip())
    except ValueError:
        logger.debug(f"Unparsable counter value: {content.strip()!r}")
        return 0
    return value if value >= 0 else 0


def parse_cpu_stat_usage_usec(content: str | None) -> int:
    """Extract usage_usec from cpu.stat content.

    Format:
        usage_usec 123456
        user_usec 100000
        system_usec 23456
    """
    if content is None:
        return 0
    for line in content.splitlines():
        parts = line.split()
        if len(parts) == 2 and parts[0] == V2_CPU_USAGE_KEY:
            return parse_counter(parts[1])
    return 0


def parse_v2_memory_max(content: str | None) -> int:
    """Parse memory.max into bytes; the ``max`` sentinel means no limit (0)."""
    if content is None:
        return 0
    if content.strip() == V2_MEMORY_MAX_SENTINEL:
        return 0
    return parse_counter(content)


def parse_v1_memory_limit(content: str | None) -> int:
    """Parse memory.limit_in_bytes; the page-counter ceiling means no limit (0)."""
    limit = parse_counter(content)
    if limit >= V1_MEMORY_UNLIMITED_BYTES:
        return 0
    return limit


def derive_memory_path(cpu_path: Path | str) -> Path:
    """Map a v1 CPU-controller cgroup path to the memory-controller path.

    Replaces only the first ``/cpu/`` segment of the path string. Symlinks are
    not resolved: the controller trees mirror each other by name, not by
    filesystem identity.

    Args:
        cpu_path: Absolute path under the CPU controller tree

    Returns:
        The matching path under the memory controller tree
    """
    return Path(str(cpu_path).replace(V1_CPU_SEGMENT, V1_MEMORY_SEGMENT, 1))


def read_v2_stats(cgroup_path: Path) -> CgroupStats:
    """Read CPU and memory counters from a unified-hierarchy cgroup."""
    usage_usec = parse_cpu_stat_usage_usec(read_text_or_none(cgroup_path / V2_CPU_STAT_FILE))
    memory_current = parse_counter(read_text_or_none(cgroup_path / V2_MEMORY_CURRENT_FILE))
    memory_max = parse_v2_memory_max(read_text_or_none(cgroup_path / V2_MEMORY_MAX_FILE))

    return CgroupStats(
        cpu_ms=usec_to_ms(usage_usec),
        mem_mb=bytes_to_mb(memory_current),
        mem_limit_mb=bytes_to_mb(memory_max),
    )


def read_v1_stats(cpu_path: Path) -> CgroupStats:
    """Read CPU and memory counters for a split-hierarchy cgroup.

    Args:
        cpu_path: The cgroup directory under the CPU controller tree

    Returns:
        Normalized stats; the memory fields come from the derived memory path
    """
    usage_ns = parse_counter(read_text_or_none(cpu_path / V1_CPU_USAGE_FILE))

    memory_path = derive_memory_path(cpu_path)
    memory_usage = parse_counter(read_text_or_none(memory_path / V1_MEMORY_USAGE_FILE))
    memory_limit = parse_v1_memory_limit(read_text_or_none(memory_path / V1_MEMORY_LIMIT_FILE))

    return CgroupStats(
        cpu_ms=nsec_to_ms(usage_ns),
        mem_mb=bytes_to_mb(memory_usage),
        mem_limit_mb=bytes_to_mb(memory_limit),
    )
