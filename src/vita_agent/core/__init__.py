"""Core module - configuration, constants and schemas."""

from __future__ import annotations

from vita_agent.core.config import apply_env_overrides, load_config
from vita_agent.core.constants import BYTES_PER_MB
from vita_agent.core.schemas import AgentConfig, MetricBatch, RawMetric, ResourceSample

__all__ = [
    "AgentConfig",
    "BYTES_PER_MB",
    "MetricBatch",
    "RawMetric",
    "ResourceSample",
    "apply_env_overrides",
    "load_config",
]
