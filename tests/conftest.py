"""Shared fixtures: synthetic cgroup hierarchies under tmp_path."""

from pathlib import Path

import pytest

from vita_agent.monitoring.base import SampleBuffer

MB = 1024 * 1024


def write_files(directory: Path, files: dict[str, str]) -> Path:
    """Create a directory and write the given pseudo-files into it."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (directory / name).write_text(content)
    return directory


def make_v2_pod(
    cgroup_root: Path,
    *parts: str,
    usage_usec: int = 0,
    memory_current: int = 0,
    memory_max: str = "max",
) -> Path:
    """Create a v2 pod slice at cgroup_root/kubepods.slice/<parts...>."""
    return write_files(
        cgroup_root.joinpath("kubepods.slice", *parts),
        {
            "cpu.stat": f"usage_usec {usage_usec}\nuser_usec 0\nsystem_usec 0\n",
            "memory.current": f"{memory_current}\n",
            "memory.max": f"{memory_max}\n",
        },
    )


def make_v1_container(
    cgroup_root: Path,
    *parts: str,
    usage_ns: int = 0,
    memory_usage: int = 0,
    memory_limit: int = 9223372036854771712,
    kubepods: str = "kubepods",
) -> Path:
    """Create a v1 container under both the cpu and memory controller trees.

    Returns:
        The container directory under the cpu tree
    """
    cpu_dir = write_files(
        cgroup_root.joinpath("cpu", kubepods, *parts),
        {"cpuacct.usage": f"{usage_ns}\n"},
    )
    write_files(
        cgroup_root.joinpath("memory", kubepods, *parts),
        {
            "memory.usage_in_bytes": f"{memory_usage}\n",
            "memory.limit_in_bytes": f"{memory_limit}\n",
        },
    )
    return cpu_dir


@pytest.fixture
def cgroup_root(tmp_path: Path) -> Path:
    root = tmp_path / "cgroup"
    root.mkdir()
    return root


@pytest.fixture
def v2_root(cgroup_root: Path) -> Path:
    """A cgroup root exposing the unified-hierarchy marker."""
    (cgroup_root / "cgroup.controllers").write_text("cpuset cpu io memory pids\n")
    (cgroup_root / "kubepods.slice").mkdir()
    return cgroup_root


@pytest.fixture
def sink() -> SampleBuffer:
    return SampleBuffer()
