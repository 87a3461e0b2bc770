"""Configuration loading utilities.

Supports YAML and JSON configuration files with schema validation, plus the
environment overrides injected by the Kubernetes DaemonSet.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from vita_agent.core.schemas import AgentConfig

logger = logging.getLogger(__name__)

ENV_NODE_NAME = "NODE_NAME"
ENV_CONSUMER_ENDPOINT = "CONSUMER_ENDPOINT"
ENV_COLLECTION_INTERVAL = "COLLECTION_INTERVAL"


def load_config(path: Path | str) -> AgentConfig:
    """Read the agent settings mounted into the DaemonSet pod.

    An empty file yields the defaults (node "unknown", cgroup root at
    /sys/fs/cgroup, one second tick). Environment overrides are not applied here;
    see apply_env_overrides.

    Args:
        path: YAML (.yaml, .yml) or JSON file, typically from a ConfigMap

    Returns:
        AgentConfig with node, endpoint and collection settings

    Raises:
        FileNotFoundError: If the ConfigMap was not mounted
        ValueError: If the suffix is neither YAML nor JSON
        pydantic.ValidationError: If a field fails validation, e.g. an interval below one second
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

    return AgentConfig.model_validate(data or {})


def apply_env_overrides(
    config: AgentConfig, environ: Mapping[str, str] | None = None
) -> AgentConfig:
    """Overlay DaemonSet environment variables onto a configuration.

    An unparsable or non-positive COLLECTION_INTERVAL is ignored and the
    configured interval is kept.

    Args:
        config: Base configuration
        environ: Environment mapping (defaults to os.environ)

    Returns:
        A new AgentConfig with overrides applied
    """
    if environ is None:
        environ = os.environ

    updates: dict[str, object] = {}

    node_name = environ.get(ENV_NODE_NAME)
    if node_name:
        updates["node_name"] = node_name

    endpoint = environ.get(ENV_CONSUMER_ENDPOINT)
    if endpoint:
        updates["consumer_endpoint"] = endpoint

    interval = environ.get(ENV_COLLECTION_INTERVAL)
    if interval:
        try:
            seconds = int(interval)
        except ValueError:
            seconds = 0
        if seconds >= 1:
            updates["collection_interval_seconds"] = seconds
        else:
            logger.warning(f"Ignoring invalid {ENV_COLLECTION_INTERVAL}={interval!r}")

    if not updates:
        return config
    return AgentConfig.model_validate({**config.model_dump(), **updates})
