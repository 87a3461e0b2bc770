"""Monitoring module - cgroup, host and volume collectors.

Provides collector implementations:
- ContainerMetricsCollector: per-pod (v2) / per-container (v1) cgroup usage
- SystemMetricsCollector: host-wide /proc counters
- PvcMetricsCollector: pod volume capacity

cgroup discovery building blocks:
- detector: hierarchy version selection
- classifiers: ordered directory-name rules
- v1_walker / v2_walker: pod and container discovery
- extractor: counter reading and unit normalization
- emitter: ResourceSample packaging
"""

from __future__ import annotations

from vita_agent.monitoring.base import (
    BaseCollector,
    BaseSink,
    CgroupStats,
    CgroupVersion,
    EntryKind,
    SampleBuffer,
)
from vita_agent.monitoring.classifiers import classify_entry, is_container_dir
from vita_agent.monitoring.container_metrics import (
    ContainerMetricsCollector,
    collect_container_metrics,
)
from vita_agent.monitoring.detector import detect_cgroup_version
from vita_agent.monitoring.emitter import SampleEmitter
from vita_agent.monitoring.extractor import derive_memory_path, read_v1_stats, read_v2_stats
from vita_agent.monitoring.pvc_metrics import PvcMetricsCollector
from vita_agent.monitoring.system_metrics import SystemMetricsCollector

__all__ = [
    "BaseCollector",
    "BaseSink",
    "CgroupStats",
    "CgroupVersion",
    "ContainerMetricsCollector",
    "EntryKind",
    "PvcMetricsCollector",
    "SampleBuffer",
    "SampleEmitter",
    "SystemMetricsCollector",
    "classify_entry",
    "collect_container_metrics",
    "derive_memory_path",
    "detect_cgroup_version",
    "is_container_dir",
    "read_v1_stats",
    "read_v2_stats",
]
