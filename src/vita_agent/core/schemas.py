"""Pydantic schemas for the VitaKube node agent.

This module defines the data contracts shared by the collectors, the
transport and the CLI: normalized container samples, the raw metric
records understood by the consumer, and the agent configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from vita_agent.core.constants import (
    DEFAULT_CGROUP_ROOT,
    DEFAULT_CONSUMER_ENDPOINT,
    DEFAULT_KUBELET_PODS_DIR,
    DEFAULT_NODE_NAME,
    DEFAULT_PROC_ROOT,
)


class ResourceSample(BaseModel):
    """One normalized resource sample for a pod (v2) or container (v1).

    Attributes:
        node_id: Name of the node the sample was taken on
        pod_id: Pod cgroup directory name
        container_id: Container cgroup directory name (v1 only)
        cpu_ms: Cumulative CPU time counter snapshot in milliseconds
        mem_mb: Current memory usage in megabytes
        mem_limit_mb: Memory limit in megabytes, 0 meaning unlimited/unknown
    """

    node_id: str
    pod_id: str = Field(..., min_length=1)
    container_id: str | None = None
    cpu_ms: int = Field(default=0, ge=0)
    mem_mb: int = Field(default=0, ge=0)
    mem_limit_mb: int = Field(default=0, ge=0)

    def metric_values(self) -> dict[str, int]:
        """Return the numeric fields keyed by their wire names."""
        return {
            "cpu_ms": self.cpu_ms,
            "mem_mb": self.mem_mb,
            "mem_limit_mb": self.mem_limit_mb,
        }


class RawMetric(BaseModel):
    """A single keyed metric value as accepted by the consumer ingest API."""

    metric_type: str = Field(..., alias="type")
    pod_id: str | None = None
    pod_uid: str | None = None
    volume: str | None = None
    container_id: str | None = None
    device: str | None = Field(default=None, description="Disk or network interface name")
    key: str
    value: float
    ts: int = Field(..., description="Unix epoch seconds")

    model_config = {"populate_by_name": True}


class MetricBatch(BaseModel):
    """Batch of raw metrics posted by one node."""

    node: str
    metrics: list[RawMetric] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """Serialize to the JSON body expected by the ingest endpoint."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AgentConfig(BaseModel):
    """Top-level agent configuration.

    Loaded from YAML/JSON files and overlaid with the environment variables
    set by the DaemonSet (NODE_NAME, CONSUMER_ENDPOINT, COLLECTION_INTERVAL).
    """

    node_name: str = Field(default=DEFAULT_NODE_NAME, min_length=1)
    consumer_endpoint: str = Field(default=DEFAULT_CONSUMER_ENDPOINT)
    collection_interval_seconds: int = Field(default=1, ge=1, description="Tick interval")
    http_timeout_seconds: float = Field(default=5.0, gt=0)
    cgroup_root: Path = Field(default=DEFAULT_CGROUP_ROOT)
    proc_root: Path = Field(default=DEFAULT_PROC_ROOT)
    kubelet_pods_dir: Path = Field(default=DEFAULT_KUBELET_PODS_DIR)
    collect_system: bool = True
    collect_containers: bool = True
    collect_pvc: bool = True

    @field_validator("consumer_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure the endpoint is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"consumer_endpoint must be an http(s) URL, got {v!r}")
        return v
