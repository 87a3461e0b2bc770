"""Base types shared by the collectors.

All collectors implement BaseCollector and deliver their output to a
BaseSink, which keeps the cgroup walkers independent of the transport.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from vita_agent.core.schemas import RawMetric, ResourceSample

logger = logging.getLogger(__name__)


class CgroupVersion(str, Enum):
    """cgroup hierarchy layout."""

    V1 = "v1"  # Split hierarchy, one tree per controller
    V2 = "v2"  # Unified hierarchy


class EntryKind(str, Enum):
    """Outcome of classifying a cgroup directory name."""

    POD = "pod"
    QOS = "qos"
    UNRECOGNIZED = "unrecognized"


@dataclass
class CgroupStats:
    """Normalized counters read from one cgroup directory."""

    cpu_ms: int = 0
    mem_mb: int = 0
    mem_limit_mb: int = 0  # 0 means unlimited or unknown


class BaseSink(ABC):
    """Downstream receiver for collected samples and metrics."""

    @abstractmethod
    def add_sample(self, sample: ResourceSample) -> None:
        """Accept one container/pod resource sample."""
        pass

    @abstractmethod
    def add_metric(self, metric: RawMetric) -> None:
        """Accept one node or volume metric."""
        pass


class SampleBuffer(BaseSink):
    """In-memory sink used for one-shot collection and inspection."""

    def __init__(self) -> None:
        self.samples: list[ResourceSample] = []
        self.metrics: list[RawMetric] = []

    def add_sample(self, sample: ResourceSample) -> None:
        self.samples.append(sample)

    def add_metric(self, metric: RawMetric) -> None:
        self.metrics.append(metric)

    def clear(self) -> None:
        self.samples.clear()
        self.metrics.clear()


class BaseCollector(ABC):
    """Abstract base class for per-tick collectors.

    Implementations:
    - ContainerMetricsCollector: cgroup v1/v2 pod and container usage
    - SystemMetricsCollector: host-wide counters from /proc
    - PvcMetricsCollector: per-volume capacity from statvfs
    """

    @abstractmethod
    def collect(self, sink: BaseSink) -> int:
        """Run one collection pass.

        Args:
            sink: Receiver for everything collected in this pass

        Returns:
            Number of samples or metrics delivered to the sink
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this collector."""
        pass
