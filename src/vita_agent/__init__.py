"""VitaKube node agent - cgroup-based pod and container resource collector."""

from __future__ import annotations

from vita_agent.core.schemas import AgentConfig, RawMetric, ResourceSample

__version__ = "0.1.0"

__all__ = [
    "AgentConfig",
    "RawMetric",
    "ResourceSample",
    "__version__",
]
