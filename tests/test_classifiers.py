"""Tests for cgroup directory name classification."""

import pytest

from vita_agent.monitoring.base import EntryKind
from vita_agent.monitoring.classifiers import (
    ENTRY_RULES,
    classify_entry,
    is_container_dir,
    is_pod_dir,
    is_qos_slice,
)


class TestClassifyEntry:
    """Tests for the ordered pod/QoS rules."""

    @pytest.mark.parametrize(
        "name",
        [
            "pod0f3c2a1e-8b7d-4c55-9d1e-2f6a7b8c9d0e",
            "kubepods-pod0f3c2a1e_8b7d_4c55_9d1e_2f6a7b8c9d0e.slice",
            "kubepods-burstable-podABC.slice",
            "kubepods-besteffort-pod123.slice",
        ],
    )
    def test_pod_names(self, name: str) -> None:
        """cgroupfs and systemd pod names are classified as pods."""
        assert classify_entry(name) is EntryKind.POD

    @pytest.mark.parametrize(
        "name",
        ["burstable", "besteffort", "guaranteed", "kubepods-burstable.slice"],
    )
    def test_qos_names(self, name: str) -> None:
        """Bare and slice-style QoS class names are classified as QoS levels."""
        assert classify_entry(name) is EntryKind.QOS

    @pytest.mark.parametrize("name", ["system.slice", "user.slice", "kubepods", "init.scope"])
    def test_unrecognized_names(self, name: str) -> None:
        """Non-Kubernetes slices and the root itself are unrecognized."""
        assert classify_entry(name) is EntryKind.UNRECOGNIZED

    def test_pod_named_like_qos_class_is_pod(self) -> None:
        """Pod detection takes priority over QoS substrings."""
        assert is_qos_slice("pod-burstable-1234")
        assert classify_entry("pod-burstable-1234") is EntryKind.POD
        assert classify_entry("kubepods-guaranteed-pod42.slice") is EntryKind.POD

    def test_rule_order(self) -> None:
        """The pod rule is evaluated before the QoS rule."""
        assert [kind for kind, _ in ENTRY_RULES] == [EntryKind.POD, EntryKind.QOS]

    def test_is_pod_dir_infix(self) -> None:
        """"pod" may appear anywhere in the name, not only as a prefix."""
        assert is_pod_dir("anything-pod1")
        assert not is_pod_dir("kubepods.slice")


class TestIsContainerDir:
    """Tests for container directory heuristics."""

    def test_long_runtime_id(self) -> None:
        """A 64-character runtime ID is a container."""
        assert is_container_dir("a" * 64)

    def test_runtime_prefixes(self) -> None:
        """docker- and crio- scopes are containers regardless of length."""
        assert is_container_dir("docker-abc.scope")
        assert is_container_dir("crio-abc.scope")

    def test_length_threshold_is_exclusive(self) -> None:
        """Names must be longer than 20 characters to pass on length alone."""
        assert not is_container_dir("x" * 20)
        assert is_container_dir("x" * 21)

    def test_short_entries_ignored(self) -> None:
        """The pause cgroup and control files are not containers."""
        assert not is_container_dir("pause")
        assert not is_container_dir("tasks")
