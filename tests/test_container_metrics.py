"""Tests for ContainerMetricsCollector."""

from pathlib import Path

from conftest import MB, make_v1_container, make_v2_pod

from vita_agent.monitoring.base import SampleBuffer
from vita_agent.monitoring.container_metrics import (
    ContainerMetricsCollector,
    collect_container_metrics,
)


class TestContainerMetricsCollector:
    """End-to-end passes over synthetic hierarchies."""

    def test_name(self) -> None:
        """The collector reports itself as "containers"."""
        assert ContainerMetricsCollector("n").name == "containers"

    def test_v2_scenario(self, v2_root: Path, sink: SampleBuffer) -> None:
        """A v2 node yields pod-level samples."""
        make_v2_pod(v2_root, "kubepods-burstable.slice", "kubepods-burstable-podABC.slice")
        count = ContainerMetricsCollector("node-1", v2_root).collect(sink)
        assert count == 1
        assert [s.pod_id for s in sink.samples] == ["kubepods-burstable-podABC.slice"]

    def test_v2_selected_even_with_v1_layout(self, v2_root: Path, sink: SampleBuffer) -> None:
        """The v2 marker wins and v1 trees are ignored."""
        make_v2_pod(v2_root, "kubepods-pod1.slice")
        make_v1_container(v2_root, "pod9", "c" * 64)
        collect_container_metrics("n", sink, v2_root)
        assert [s.pod_id for s in sink.samples] == ["kubepods-pod1.slice"]
        assert sink.samples[0].container_id is None

    def test_v1_pass(self, cgroup_root: Path, sink: SampleBuffer) -> None:
        """A v1 node yields container-level samples."""
        make_v1_container(cgroup_root, "besteffort", "pod1", "c" * 64, memory_usage=3 * MB)
        assert collect_container_metrics("n", sink, cgroup_root) == 1
        assert sink.samples[0].container_id == "c" * 64
        assert sink.samples[0].mem_mb == 3

    def test_each_pass_is_fresh(self, v2_root: Path, sink: SampleBuffer) -> None:
        """Pods removed between passes disappear from the next pass."""
        collector = ContainerMetricsCollector("n", v2_root)
        pod = make_v2_pod(v2_root, "kubepods-pod1.slice")
        assert collector.collect(sink) == 1

        for child in pod.iterdir():
            child.unlink()
        pod.rmdir()
        sink.clear()
        assert collector.collect(sink) == 0
        assert sink.samples == []

    def test_empty_node(self, cgroup_root: Path, sink: SampleBuffer) -> None:
        """A node with no pods reports zero samples."""
        assert collect_container_metrics("n", sink, cgroup_root) == 0

    def test_undecodable_file_does_not_abort_pass(self, v2_root: Path, sink: SampleBuffer) -> None:
        """A pod with a binary counter file is still reported, and so are its siblings."""
        bad = make_v2_pod(v2_root, "kubepods-pod1.slice", memory_current=4 * MB)
        make_v2_pod(v2_root, "kubepods-pod2.slice", memory_current=2 * MB)
        (bad / "cpu.stat").write_bytes(b"usage_usec \xff\xff\n")

        assert collect_container_metrics("n", sink, v2_root) == 2
        by_pod = {s.pod_id: s for s in sink.samples}
        assert by_pod["kubepods-pod1.slice"].cpu_ms == 0
        assert by_pod["kubepods-pod1.slice"].mem_mb == 4
        assert by_pod["kubepods-pod2.slice"].mem_mb == 2
