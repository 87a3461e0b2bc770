"""Shared constants for the VitaKube node agent.

The cgroup names below are the contract between the agent and the
kernel/kubelet: they are matched textually, never resolved.
"""

from __future__ import annotations

from pathlib import Path

BYTES_PER_MB = 1024 * 1024

# Default filesystem roots (overridable through AgentConfig)
DEFAULT_CGROUP_ROOT = Path("/sys/fs/cgroup")
DEFAULT_PROC_ROOT = Path("/proc")
DEFAULT_KUBELET_PODS_DIR = Path("/var/lib/kubelet/pods")

# Unified (v2) hierarchy
V2_MARKER_FILE = "cgroup.controllers"
V2_PODS_SLICE = "kubepods.slice"
V2_POD_PREFIX = "kubepods-"
V2_CPU_STAT_FILE = "cpu.stat"
V2_CPU_USAGE_KEY = "usage_usec"
V2_MEMORY_CURRENT_FILE = "memory.current"
V2_MEMORY_MAX_FILE = "memory.max"
V2_MEMORY_MAX_SENTINEL = "max"

# Split (v1) hierarchy, cgroupfs driver first then systemd driver
V1_CPU_ROOTS = ("cpu/kubepods", "cpu/kubepods.slice")
V1_CPU_SEGMENT = "/cpu/"
V1_MEMORY_SEGMENT = "/memory/"
V1_CPU_USAGE_FILE = "cpuacct.usage"
V1_MEMORY_USAGE_FILE = "memory.usage_in_bytes"
V1_MEMORY_LIMIT_FILE = "memory.limit_in_bytes"

# Largest limit the kernel page counter can hold (PAGE_COUNTER_MAX * 4096).
# Anything at or above it is the "no limit" sentinel. It is below
# (2**64 - 1) // 2 so every value past half the u64 range is covered too.
V1_MEMORY_UNLIMITED_BYTES = 0x7FFFFFFFFFFFF000

# Directory naming heuristics
HIERARCHY_ROOT_NAME = "kubepods"
POD_DIR_PREFIX = "pod"
POD_DIR_INFIX = "-pod"
QOS_CLASSES = ("burstable", "besteffort", "guaranteed")
CONTAINER_NAME_MIN_LENGTH = 20
CONTAINER_RUNTIME_PREFIXES = ("docker-", "crio-")

# Transport
DEFAULT_CONSUMER_ENDPOINT = "http://vita-consumer:8080/api/v1/ingest"
DEFAULT_NODE_NAME = "unknown"
