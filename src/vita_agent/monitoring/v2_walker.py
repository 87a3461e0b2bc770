"""Pod discovery for the unified (v2) cgroup hierarchy.

Layout (systemd driver):
    /sys/fs/cgroup/kubepods.slice/
        kubepods-pod<uid>.slice                       (Guaranteed pods)
        kubepods-burstable.slice/
            kubepods-burstable-pod<uid>.slice
        kubepods-besteffort.slice/
            kubepods-besteffort-pod<uid>.slice

Pods are reported as a whole; container scopes below the pod slice are not
visited.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from vita_agent.core.constants import V2_POD_PREFIX, V2_PODS_SLICE
from vita_agent.monitoring.base import EntryKind
from vita_agent.monitoring.classifiers import classify_entry
from vita_agent.monitoring.emitter import SampleEmitter
from vita_agent.monitoring.extractor import read_v2_stats

logger = logging.getLogger(__name__)


def _list_prefixed_dirs(path: Path) -> list[Path]:
    """List child directories carrying the kubepods prefix, in listing order."""
    try:
        return [
            child
            for child in path.iterdir()
            if child.name.startswith(V2_POD_PREFIX) and child.is_dir()
        ]
    except FileNotFoundError:
        logger.debug(f"{path} does not exist, no v2 pods to report")
    except OSError as e:
        logger.warning(f"Failed to read dir {path}: {e}")
    return []


def iter_v2_pod_dirs(cgroup_root: Path) -> Iterator[Path]:
    """Yield pod cgroup directories under kubepods.slice.

    QoS slices (``kubepods-burstable.slice``, ``kubepods-besteffort.slice``)
    are expanded one level so their pods are reported instead of the slice
    aggregate.

    Args:
        cgroup_root: cgroup v2 mount point

    Yields:
        Pod cgroup directories in directory-listing order
    """
    for child in _list_prefixed_dirs(Path(cgroup_root) / V2_PODS_SLICE):
        if classify_entry(child.name) is EntryKind.QOS:
            yield from _list_prefixed_dirs(child)
        else:
            yield child


def walk_v2(cgroup_root: Path, emitter: SampleEmitter) -> int:
    """Emit one sample per v2 pod.

    Args:
        cgroup_root: cgroup v2 mount point
        emitter: Sample emitter for this pass

    Returns:
        Number of samples emitted
    """
    count = 0
    for pod_dir in iter_v2_pod_dirs(cgroup_root):
        emitter.emit(pod_dir.name, read_v2_stats(pod_dir))
        count += 1
    return count
