"""Pod and container discovery for the split (v1) cgroup hierarchy.

v1 inserts a QoS level between the kubepods root and the pods, except for
Guaranteed pods which sit directly under the root:

    cgroupfs driver                      systemd driver
    cpu/kubepods/                        cpu/kubepods.slice/
        pod<uid>/<container-id>              kubepods-pod<uid>.slice/...
        burstable/pod<uid>/<container-id>    kubepods-burstable.slice/
        besteffort/pod<uid>/...                  kubepods-burstable-pod<uid>.slice/
                                                     docker-<id>.scope

Discovery walks the CPU controller tree only; memory counters are read from
the mirrored memory tree by the extractor.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from vita_agent.core.constants import HIERARCHY_ROOT_NAME, V1_CPU_ROOTS
from vita_agent.monitoring.base import EntryKind
from vita_agent.monitoring.classifiers import classify_entry, is_container_dir
from vita_agent.monitoring.emitter import SampleEmitter
from vita_agent.monitoring.extractor import read_v1_stats

logger = logging.getLogger(__name__)


def find_v1_root(cgroup_root: Path) -> Path | None:
    """Return the first existing kubepods directory under the CPU controller.

    Args:
        cgroup_root: cgroup mount point

    Returns:
        The cgroupfs or systemd kubepods root, or None if neither exists
    """
    for relative in V1_CPU_ROOTS:
        candidate = Path(cgroup_root) / relative
        if candidate.exists():
            return candidate
    logger.debug(f"No v1 kubepods root under {cgroup_root}")
    return None


def _list_child_dirs(path: Path) -> list[Path] | None:
    """List child directories, or None if the listing failed.

    Directories vanish whenever the kubelet tears a pod down, so
    FileNotFoundError is expected. Other failures are only reported on paths
    inside the kubepods hierarchy.
    """
    try:
        return [child for child in path.iterdir() if child.is_dir()]
    except FileNotFoundError:
        logger.debug(f"{path} disappeared during walk")
    except OSError as e:
        if HIERARCHY_ROOT_NAME in str(path):
            logger.warning(f"Failed to read dir {path}: {e}")
        else:
            logger.debug(f"Skipping unreadable dir {path}: {e}")
    return None


def iter_v1_pod_dirs(root: Path) -> Iterator[Path]:
    """Yield pod directories below a v1 kubepods root.

    Uses an explicit stack of directory iterators rather than recursion, and
    yields pods in the same depth-first, listing order a recursive walk would.

    Args:
        root: CPU-controller kubepods root

    Yields:
        Pod cgroup directories under the CPU controller tree
    """
    children = _list_child_dirs(root)
    if children is None:
        return
    stack: list[Iterator[Path]] = [iter(children)]

    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue

        kind = classify_entry(child.name)
        if kind is EntryKind.POD:
            yield child
        elif kind is EntryKind.QOS:
            grandchildren = _list_child_dirs(child)
            if grandchildren:
                stack.append(iter(grandchildren))


def iter_v1_container_dirs(pod_dir: Path) -> Iterator[Path]:
    """Yield the container cgroups of one pod directory."""
    children = _list_child_dirs(pod_dir)
    if children is None:
        return

    found = False
    for child in children:
        if is_container_dir(child.name):
            found = True
            yield child

    if not found:
        # Normal while a pod is starting or terminating
        logger.debug(
            f"No containers found in pod {pod_dir.name}. "
            f"Contents: {[c.name for c in children]}"
        )


def walk_v1(cgroup_root: Path, emitter: SampleEmitter) -> int:
    """Emit one sample per v1 container.

    Args:
        cgroup_root: cgroup mount point
        emitter: Sample emitter for this pass

    Returns:
        Number of samples emitted
    """
    root = find_v1_root(cgroup_root)
    if root is None:
        return 0

    count = 0
    for pod_dir in iter_v1_pod_dirs(root):
        for container_dir in iter_v1_container_dirs(pod_dir):
            stats = read_v1_stats(container_dir)
            emitter.emit(pod_dir.name, stats, container_id=container_dir.name)
            count += 1
    return count
