"""Host-wide CPU, memory, disk and network counters from /proc.

Metrics sourced:
- stat: aggregate ``cpu`` line (user, system, idle, iowait jiffies)
- meminfo: MemTotal, MemFree, MemAvailable, SwapTotal, SwapFree
- diskstats: per-device read/write operations and sectors
- net/dev: per-interface bytes, packets and errors
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from vita_agent.core.constants import DEFAULT_PROC_ROOT
from vita_agent.core.schemas import RawMetric
from vita_agent.monitoring.base import BaseCollector, BaseSink
from vita_agent.monitoring.io_utils import kib_to_mb, read_text_or_none

logger = logging.getLogger(__name__)

SKIPPED_DISK_PREFIXES = ("loop", "ram")
SKIPPED_INTERFACE_PREFIXES = ("veth",)


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        return 0


def parse_proc_stat_cpu(content: str) -> dict[str, int] | None:
    """Parse the aggregate cpu line of /proc/stat.

    Format:
        cpu  user nice system idle iowait irq softirq steal guest guest_nice
    """
    for line in content.splitlines():
        if line.startswith("cpu "):
            parts = line.split()
            if len(parts) < 5:
                return None
            return {
                "user": _to_int(parts[1]),
                "sys": _to_int(parts[3]),
                "idle": _to_int(parts[4]),
                "iowait": _to_int(parts[5]) if len(parts) > 5 else 0,
            }
    return None


def parse_meminfo(content: str) -> dict[str, int]:
    """Parse /proc/meminfo into kB values keyed by field name (without colon)."""
    result: dict[str, int] = {}
    for line in content.splitlines():
        parts = line.split()
        if len(parts) >= 2:
            result[parts[0].rstrip(":")] = _to_int(parts[1])
    return result


def parse_diskstats(content: str) -> dict[str, dict[str, int]]:
    """Parse /proc/diskstats into per-device counters.

    Loop and ram devices, and devices with no reads or writes, are skipped.
    """
    devices: dict[str, dict[str, int]] = {}
    for line in content.splitlines():
        parts = line.split()
        # major minor name reads reads_merged sectors_read time_read writes ...
        if len(parts) < 14:
            continue
        name = parts[2]
        if name.startswith(SKIPPED_DISK_PREFIXES):
            continue
        stats = {
            "reads": _to_int(parts[3]),
            "writes": _to_int(parts[7]),
            "sectors_r": _to_int(parts[5]),
            "sectors_w": _to_int(parts[9]),
        }
        if stats["reads"] > 0 or stats["writes"] > 0:
            devices[name] = stats
    return devices


def parse_net_dev(content: str) -> dict[str, dict[str, int]]:
    """Parse /proc/net/dev into per-interface counters.

    The two header lines are skipped, as are ``lo``, ``veth*`` and idle
    interfaces.
    """
    interfaces: dict[str, dict[str, int]] = {}
    for line in content.splitlines()[2:]:
        if ":" not in line:
            continue
        name, _, counters = line.partition(":")
        name = name.strip()
        parts = counters.split()
        if len(parts) < 16:
            continue
        if name == "lo" or name.startswith(SKIPPED_INTERFACE_PREFIXES):
            continue
        # rx: bytes packets errs drop fifo frame compressed multicast | tx: bytes packets errs ...
        stats = {
            "rx_bytes": _to_int(parts[0]),
            "tx_bytes": _to_int(parts[8]),
            "rx_pkts": _to_int(parts[1]),
            "tx_pkts": _to_int(parts[9]),
            "rx_errs": _to_int(parts[2]),
            "tx_errs": _to_int(parts[10]),
        }
        if stats["rx_bytes"] > 0 or stats["tx_bytes"] > 0:
            interfaces[name] = stats
    return interfaces


class SystemMetricsCollector(BaseCollector):
    """Collector for node-level counters read from the proc filesystem."""

    def __init__(self, node_name: str, proc_root: Path = DEFAULT_PROC_ROOT) -> None:
        self.node_name = node_name
        self.proc_root = Path(proc_root)

    @property
    def name(self) -> str:
        return "system"

    def collect(self, sink: BaseSink) -> int:
        """Read every /proc source once; a missing file skips only its group."""
        ts = int(time.time())
        metrics: list[RawMetric] = []
        metrics.extend(self._collect_cpu(ts))
        metrics.extend(self._collect_memory(ts))
        metrics.extend(self._collect_disks(ts))
        metrics.extend(self._collect_network(ts))

        for metric in metrics:
            sink.add_metric(metric)
        return len(metrics)

    def _emit_group(
        self, metric_type: str, values: dict[str, int], ts: int, device: str | None = None
    ) -> list[RawMetric]:
        label = f"device={device} " if device else ""
        fields = " ".join(f"{key}={value}" for key, value in values.items())
        logger.debug(f"METRIC_TYPE={metric_type} node={self.node_name} {label}{fields}")
        return [
            RawMetric(metric_type=metric_type, device=device, key=key, value=float(value), ts=ts)
            for key, value in values.items()
        ]

    def _collect_cpu(self, ts: int) -> list[RawMetric]:
        content = read_text_or_none(self.proc_root / "stat")
        if content is None:
            return []
        cpu = parse_proc_stat_cpu(content)
        if cpu is None:
            return []
        return self._emit_group("node_cpu", cpu, ts)

    def _collect_memory(self, ts: int) -> list[RawMetric]:
        content = read_text_or_none(self.proc_root / "meminfo")
        if content is None:
            return []
        info = parse_meminfo(content)
        total = info.get("MemTotal", 0)
        free = info.get("MemFree", 0)
        metrics = self._emit_group(
            "node_mem",
            {
                "total_mb": kib_to_mb(total),
                "used_mb": kib_to_mb(max(total - free, 0)),
                "free_mb": kib_to_mb(free),
                "avail_mb": kib_to_mb(info.get("MemAvailable", 0)),
            },
            ts,
        )

        swap_total = info.get("SwapTotal", 0)
        if swap_total > 0:
            swap_used = max(swap_total - info.get("SwapFree", 0), 0)
            metrics.extend(
                self._emit_group(
                    "node_swap",
                    {"total_mb": kib_to_mb(swap_total), "used_mb": kib_to_mb(swap_used)},
                    ts,
                )
            )
        return metrics

    def _collect_disks(self, ts: int) -> list[RawMetric]:
        content = read_text_or_none(self.proc_root / "diskstats")
        if content is None:
            return []
        metrics: list[RawMetric] = []
        for device, stats in parse_diskstats(content).items():
            metrics.extend(self._emit_group("node_disk", stats, ts, device=device))
        return metrics

    def _collect_network(self, ts: int) -> list[RawMetric]:
        content = read_text_or_none(self.proc_root / "net" / "dev")
        if content is None:
            return []
        metrics: list[RawMetric] = []
        for interface, stats in parse_net_dev(content).items():
            metrics.extend(self._emit_group("node_net", stats, ts, device=interface))
        return metrics
