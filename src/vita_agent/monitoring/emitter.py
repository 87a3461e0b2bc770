"""Packaging of normalized stats into ResourceSample records."""

from __future__ import annotations

import logging

from vita_agent.core.schemas import ResourceSample
from vita_agent.monitoring.base import BaseSink, CgroupStats

logger = logging.getLogger(__name__)


class SampleEmitter:
    """Builds ResourceSamples for one node and hands them to a sink."""

    def __init__(self, node_id: str, sink: BaseSink) -> None:
        self.node_id = node_id
        self.sink = sink

    def emit(
        self, pod_id: str, stats: CgroupStats, container_id: str | None = None
    ) -> ResourceSample:
        """Build one sample and deliver it synchronously.

        Args:
            pod_id: Pod cgroup directory name
            stats: Normalized counters for the pod or container
            container_id: Container cgroup directory name (v1 only)

        Returns:
            The sample handed to the sink
        """
        sample = ResourceSample(
            node_id=self.node_id,
            pod_id=pod_id,
            container_id=container_id,
            cpu_ms=stats.cpu_ms,
            mem_mb=stats.mem_mb,
            mem_limit_mb=stats.mem_limit_mb,
        )
        container_field = f" container_id={container_id}" if container_id else ""
        logger.debug(
            f"METRIC_TYPE=container node={self.node_id} pod_id={pod_id}{container_field} "
            f"cpu_ms={stats.cpu_ms} mem_mb={stats.mem_mb} mem_limit_mb={stats.mem_limit_mb}"
        )
        self.sink.add_sample(sample)
        return sample
