"""Per-volume capacity for pods on this node.

Volumes are found under the kubelet's pod directory:

    /var/lib/kubelet/pods/<pod-uid>/volumes/<driver>/<volume>[/mount]

CSI volumes are mounted on a ``mount`` subdirectory; other drivers
(empty-dir, configmap, ...) use the volume directory itself.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from vita_agent.core.constants import DEFAULT_KUBELET_PODS_DIR
from vita_agent.core.schemas import RawMetric
from vita_agent.monitoring.base import BaseCollector, BaseSink
from vita_agent.monitoring.io_utils import bytes_to_mb

logger = logging.getLogger(__name__)


@dataclass
class VolumeUsage:
    """Capacity of one mounted pod volume, in megabytes."""

    pod_uid: str
    volume: str
    total_mb: int = 0
    used_mb: int = 0
    free_mb: int = 0


def _child_dirs(path: Path) -> list[Path]:
    try:
        return [child for child in path.iterdir() if child.is_dir()]
    except OSError as e:
        logger.debug(f"Skipping unreadable dir {path}: {e}")
        return []


def iter_volume_mounts(pods_dir: Path) -> Iterator[tuple[str, str, Path]]:
    """Yield (pod_uid, volume_name, mount_point) for every pod volume.

    Args:
        pods_dir: kubelet pods directory

    Yields:
        One tuple per volume directory, in listing order
    """
    for pod_dir in _child_dirs(pods_dir):
        volumes_dir = pod_dir / "volumes"
        if not volumes_dir.is_dir():
            continue
        for driver_dir in _child_dirs(volumes_dir):
            for volume_dir in _child_dirs(driver_dir):
                mount = volume_dir / "mount"
                mount_point = mount if mount.exists() else volume_dir
                yield pod_dir.name, volume_dir.name, mount_point


def volume_usage(pod_uid: str, volume: str, mount_point: Path) -> VolumeUsage | None:
    """Measure one mount point with statvfs.

    Args:
        pod_uid: UID of the pod owning the volume
        volume: Volume directory name
        mount_point: Path to stat

    Returns:
        VolumeUsage, or None if statvfs failed
    """
    try:
        st = os.statvfs(mount_point)
    except OSError as e:
        logger.debug(f"statvfs failed for {mount_point}: {e}")
        return None

    total_bytes = st.f_blocks * st.f_frsize
    free_bytes = st.f_bavail * st.f_frsize  # available to unprivileged users
    used_bytes = max(total_bytes - free_bytes, 0)

    return VolumeUsage(
        pod_uid=pod_uid,
        volume=volume,
        total_mb=bytes_to_mb(total_bytes),
        used_mb=bytes_to_mb(used_bytes),
        free_mb=bytes_to_mb(free_bytes),
    )


class PvcMetricsCollector(BaseCollector):
    """Collector for pod volume capacity."""

    def __init__(self, node_name: str, pods_dir: Path = DEFAULT_KUBELET_PODS_DIR) -> None:
        self.node_name = node_name
        self.pods_dir = Path(pods_dir)

    @property
    def name(self) -> str:
        return "pvc"

    def collect(self, sink: BaseSink) -> int:
        """Report total/used/free MB for every volume larger than 1 MB."""
        if not self.pods_dir.exists():
            logger.debug(f"{self.pods_dir} does not exist, skipping volume metrics")
            return 0

        ts = int(time.time())
        count = 0
        for pod_uid, volume, mount_point in iter_volume_mounts(self.pods_dir):
            usage = volume_usage(pod_uid, volume, mount_point)
            # Tiny or pseudo filesystems report 0 MB and are noise
            if usage is None or usage.total_mb == 0:
                continue

            logger.debug(
                f"METRIC_TYPE=pvc_usage node={self.node_name} pod_uid={pod_uid} volume={volume} "
                f"total_mb={usage.total_mb} used_mb={usage.used_mb} free_mb={usage.free_mb}"
            )
            for key, value in (
                ("total_mb", usage.total_mb),
                ("used_mb", usage.used_mb),
                ("free_mb", usage.free_mb),
            ):
                sink.add_metric(
                    RawMetric(
                        metric_type="pvc_usage",
                        pod_uid=pod_uid,
                        volume=volume,
                        key=key,
                        value=float(value),
                        ts=ts,
                    )
                )
                count += 1
        return count
