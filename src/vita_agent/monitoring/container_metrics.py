"""Per-pod and per-container usage collection from the cgroup filesystem.

Reads kernel counters directly, without the Kubernetes API or a container
runtime socket. Each pass re-detects the hierarchy version and re-walks the
tree from scratch; nothing is cached between passes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from vita_agent.core.constants import DEFAULT_CGROUP_ROOT
from vita_agent.monitoring.base import BaseCollector, BaseSink, CgroupVersion
from vita_agent.monitoring.detector import detect_cgroup_version
from vita_agent.monitoring.emitter import SampleEmitter
from vita_agent.monitoring.v1_walker import walk_v1
from vita_agent.monitoring.v2_walker import walk_v2

logger = logging.getLogger(__name__)


class ContainerMetricsCollector(BaseCollector):
    """Collector that reports CPU and memory usage per pod (v2) or container (v1)."""

    def __init__(self, node_name: str, cgroup_root: Path = DEFAULT_CGROUP_ROOT) -> None:
        """Initialize the collector.

        Args:
            node_name: Name of this node, stamped on every sample
            cgroup_root: cgroup mount point
        """
        self.node_name = node_name
        self.cgroup_root = Path(cgroup_root)

    @property
    def name(self) -> str:
        return "containers"

    def collect(self, sink: BaseSink) -> int:
        """Walk the cgroup hierarchy once and emit a sample per discovered cgroup."""
        version = detect_cgroup_version(self.cgroup_root)
        emitter = SampleEmitter(self.node_name, sink)

        if version is CgroupVersion.V2:
            count = walk_v2(self.cgroup_root, emitter)
        else:
            count = walk_v1(self.cgroup_root, emitter)

        logger.debug(f"Collected {count} container samples from cgroup {version.value}")
        return count


def collect_container_metrics(
    node_name: str, sink: BaseSink, cgroup_root: Path = DEFAULT_CGROUP_ROOT
) -> int:
    """Run a single container-metrics pass.

    Args:
        node_name: Name of this node
        sink: Receiver for the samples
        cgroup_root: cgroup mount point

    Returns:
        Number of samples emitted
    """
    return ContainerMetricsCollector(node_name, cgroup_root).collect(sink)
