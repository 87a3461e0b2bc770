"""cgroup hierarchy version detection."""

from __future__ import annotations

import logging
from pathlib import Path

from vita_agent.core.constants import V2_MARKER_FILE
from vita_agent.monitoring.base import CgroupVersion

logger = logging.getLogger(__name__)


def detect_cgroup_version(cgroup_root: Path) -> CgroupVersion:
    """Select the hierarchy layout for one collection pass.

    Only the existence of the unified-hierarchy marker file matters; v1-shaped
    controller directories alongside it do not change the answer.

    Args:
        cgroup_root: cgroup mount point (usually /sys/fs/cgroup)

    Returns:
        CgroupVersion.V2 if the marker exists, else CgroupVersion.V1
    """
    marker = Path(cgroup_root) / V2_MARKER_FILE
    version = CgroupVersion.V2 if marker.exists() else CgroupVersion.V1
    logger.debug(f"Detected cgroup {version.value} hierarchy at {cgroup_root}")
    return version
