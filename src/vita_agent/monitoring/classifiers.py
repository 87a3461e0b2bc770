"""Name-based classification of cgroup directories.

Kubernetes does not label cgroup directories, so pods, QoS slices and
containers are recognized from their names alone. The rules are ordered
predicates: the first one that matches wins. Pod detection MUST come before
QoS detection because pod slice names embed their QoS class
(e.g. ``kubepods-burstable-pod1234.slice``).
"""

from __future__ import annotations

from collections.abc import Callable

from vita_agent.core.constants import (
    CONTAINER_NAME_MIN_LENGTH,
    CONTAINER_RUNTIME_PREFIXES,
    POD_DIR_INFIX,
    POD_DIR_PREFIX,
    QOS_CLASSES,
)
from vita_agent.monitoring.base import EntryKind


def is_pod_dir(name: str) -> bool:
    """cgroupfs names pods ``pod<uid>``, systemd ``kubepods-<qos>-pod<uid>.slice``."""
    return name.startswith(POD_DIR_PREFIX) or POD_DIR_INFIX in name


def is_qos_slice(name: str) -> bool:
    return any(qos in name for qos in QOS_CLASSES)


def is_container_dir(name: str) -> bool:
    """Check if a pod child directory looks like a container cgroup.

    Container cgroups are either bare 64-char runtime IDs or carry a runtime
    prefix (``docker-<id>.scope``, ``crio-<id>.scope``). Anything else inside a
    pod directory (e.g. ``cgroup.procs`` helpers, short pause leftovers) is
    ignored.
    """
    return len(name) > CONTAINER_NAME_MIN_LENGTH or name.startswith(CONTAINER_RUNTIME_PREFIXES)


# Evaluated in order; do not reorder.
ENTRY_RULES: tuple[tuple[EntryKind, Callable[[str], bool]], ...] = (
    (EntryKind.POD, is_pod_dir),
    (EntryKind.QOS, is_qos_slice),
)


def classify_entry(name: str) -> EntryKind:
    """Classify a directory name as pod boundary, QoS slice or neither.

    Args:
        name: Directory name (not a path)

    Returns:
        The kind of the first matching rule, or EntryKind.UNRECOGNIZED
    """
    for kind, predicate in ENTRY_RULES:
        if predicate(name):
            return kind
    return EntryKind.UNRECOGNIZED
