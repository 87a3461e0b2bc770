"""Tests for configuration loading and environment overrides."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from vita_agent.core.config import apply_env_overrides, load_config
from vita_agent.core.schemas import AgentConfig


class TestLoadConfig:
    """Tests for load_config."""

    def test_yaml(self, tmp_path: Path) -> None:
        """YAML settings are loaded and unset fields keep defaults."""
        path = tmp_path / "agent.yaml"
        path.write_text(
            "node_name: worker-7\n"
            "collection_interval_seconds: 5\n"
            "cgroup_root: /host/sys/fs/cgroup\n"
            "collect_pvc: false\n"
        )
        config = load_config(path)
        assert config.node_name == "worker-7"
        assert config.collection_interval_seconds == 5
        assert config.cgroup_root == Path("/host/sys/fs/cgroup")
        assert config.collect_pvc is False
        assert config.collect_system is True

    def test_json(self, tmp_path: Path) -> None:
        """JSON configuration is accepted."""
        path = tmp_path / "agent.json"
        path.write_text(json.dumps({"consumer_endpoint": "https://vita.example/ingest"}))
        assert load_config(path).consumer_endpoint == "https://vita.example/ingest"

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        """An empty file yields the default config."""
        path = tmp_path / "agent.yml"
        path.write_text("")
        assert load_config(path) == AgentConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unsupported_format(self, tmp_path: Path) -> None:
        """Unknown suffixes are rejected."""
        path = tmp_path / "agent.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported config format"):
            load_config(path)

    def test_invalid_interval(self, tmp_path: Path) -> None:
        """A zero interval fails validation."""
        path = tmp_path / "agent.yaml"
        path.write_text("collection_interval_seconds: 0\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestApplyEnvOverrides:
    """Tests for apply_env_overrides."""

    def test_overrides(self) -> None:
        """DaemonSet variables replace node, endpoint and interval."""
        config = apply_env_overrides(
            AgentConfig(),
            {
                "NODE_NAME": "node-3",
                "CONSUMER_ENDPOINT": "http://localhost:8080/api/v1/ingest",
                "COLLECTION_INTERVAL": "10",
            },
        )
        assert config.node_name == "node-3"
        assert config.consumer_endpoint == "http://localhost:8080/api/v1/ingest"
        assert config.collection_interval_seconds == 10

    def test_no_overrides(self) -> None:
        """Without variables the same config object is returned."""
        base = AgentConfig(node_name="keep")
        assert apply_env_overrides(base, {}) is base

    @pytest.mark.parametrize("value", ["soon", "0", "-3"])
    def test_bad_interval_ignored(self, value: str) -> None:
        """Non-numeric or non-positive intervals are ignored."""
        config = apply_env_overrides(
            AgentConfig(collection_interval_seconds=4), {"COLLECTION_INTERVAL": value}
        )
        assert config.collection_interval_seconds == 4

    def test_other_fields_preserved(self) -> None:
        """Fields without an env override are kept."""
        base = AgentConfig(cgroup_root=Path("/host/cgroup"), collect_system=False)
        config = apply_env_overrides(base, {"NODE_NAME": "n"})
        assert config.cgroup_root == Path("/host/cgroup")
        assert config.collect_system is False
