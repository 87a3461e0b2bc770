"""Agent loop: run every collector once per tick and flush to the consumer."""

from __future__ import annotations

import logging
import time

from vita_agent.core.schemas import AgentConfig
from vita_agent.monitoring.base import BaseCollector
from vita_agent.monitoring.container_metrics import ContainerMetricsCollector
from vita_agent.monitoring.pvc_metrics import PvcMetricsCollector
from vita_agent.monitoring.system_metrics import SystemMetricsCollector
from vita_agent.sender.metrics_sender import MetricsSender

logger = logging.getLogger(__name__)


class Agent:
    """Runs the configured collectors on a fixed interval.

    A collector that raises is logged and skipped for that tick; the loop
    always moves on to the next collector and the next tick.
    """

    def __init__(self, config: AgentConfig, sender: MetricsSender | None = None) -> None:
        self.config = config
        self.sender = sender or MetricsSender(
            config.consumer_endpoint,
            config.node_name,
            timeout=config.http_timeout_seconds,
        )
        self.collectors = self._build_collectors()

    def _build_collectors(self) -> list[BaseCollector]:
        config = self.config
        collectors: list[BaseCollector] = []
        if config.collect_system:
            collectors.append(SystemMetricsCollector(config.node_name, config.proc_root))
        if config.collect_containers:
            collectors.append(ContainerMetricsCollector(config.node_name, config.cgroup_root))
        if config.collect_pvc:
            collectors.append(PvcMetricsCollector(config.node_name, config.kubelet_pods_dir))
        return collectors

    def run_once(self) -> dict[str, int]:
        """Run one tick.

        Returns:
            Number of items collected per collector name (-1 if it failed)
        """
        counts: dict[str, int] = {}
        for collector in self.collectors:
            try:
                counts[collector.name] = collector.collect(self.sender)
            except Exception as e:
                logger.warning(f"{collector.name} metrics failed: {e}")
                counts[collector.name] = -1

        self.sender.flush()
        return counts

    def run_forever(self, max_ticks: int | None = None) -> None:
        """Collect until interrupted (or for max_ticks ticks)."""
        logger.info(
            f"VitaAgent starting | node={self.config.node_name} "
            f"interval={self.config.collection_interval_seconds}s "
            f"endpoint={self.config.consumer_endpoint}"
        )
        ticks = 0
        while True:
            counts = self.run_once()
            logger.debug(f"Tick {ticks} complete: {counts}")
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            time.sleep(self.config.collection_interval_seconds)
