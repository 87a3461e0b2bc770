"""Tests for the batching HTTP sender."""

import json
from http.client import BadStatusLine, IncompleteRead
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest

from vita_agent.core.schemas import RawMetric, ResourceSample
from vita_agent.sender.metrics_sender import MetricsSender, sample_to_metrics

ENDPOINT = "http://consumer.test/api/v1/ingest"


def make_sample(**overrides) -> ResourceSample:
    fields = {
        "node_id": "node-1",
        "pod_id": "kubepods-burstable-podABC.slice",
        "cpu_ms": 1500,
        "mem_mb": 64,
        "mem_limit_mb": 0,
    }
    fields.update(overrides)
    return ResourceSample(**fields)


@pytest.fixture
def mock_urlopen():
    with patch("vita_agent.sender.metrics_sender.urlopen") as mock:
        mock.return_value.__enter__.return_value.status = 202
        yield mock


class TestSampleToMetrics:
    """Tests for sample_to_metrics."""

    def test_one_metric_per_field(self) -> None:
        """A sample expands to cpu, memory and limit metrics."""
        metrics = sample_to_metrics(make_sample(), ts=1700000000)
        assert [(m.key, m.value) for m in metrics] == [
            ("cpu_ms", 1500.0),
            ("mem_mb", 64.0),
            ("mem_limit_mb", 0.0),
        ]
        assert all(m.metric_type == "container" for m in metrics)
        assert all(m.ts == 1700000000 for m in metrics)

    def test_container_id_carried(self) -> None:
        """The container ID is copied onto every metric."""
        metrics = sample_to_metrics(make_sample(container_id="docker-abc.scope"))
        assert {m.container_id for m in metrics} == {"docker-abc.scope"}


class TestMetricsSender:
    """Tests for MetricsSender."""

    def test_flush_posts_batch(self, mock_urlopen: MagicMock) -> None:
        """Buffered metrics are POSTed as one JSON batch and cleared."""
        sender = MetricsSender(ENDPOINT, "node-1")
        sender.add_sample(make_sample())
        assert sender.pending == 3

        assert sender.flush() is True
        assert sender.pending == 0

        request = mock_urlopen.call_args.args[0]
        assert request.full_url == ENDPOINT
        assert request.get_method() == "POST"
        payload = json.loads(request.data)
        assert payload["node"] == "node-1"
        assert len(payload["metrics"]) == 3
        first = payload["metrics"][0]
        assert first["type"] == "container"
        assert first["pod_id"] == "kubepods-burstable-podABC.slice"
        assert "container_id" not in first
        assert "volume" not in first

    def test_empty_batch_not_sent(self, mock_urlopen: MagicMock) -> None:
        """Nothing is POSTed when the buffer is empty."""
        assert MetricsSender(ENDPOINT, "n").flush() is True
        mock_urlopen.assert_not_called()

    def test_add_metric(self, mock_urlopen: MagicMock) -> None:
        """Raw metrics are sent with their optional labels only."""
        sender = MetricsSender(ENDPOINT, "n")
        sender.add_metric(
            RawMetric(
                metric_type="pvc_usage", pod_uid="u", volume="v", key="used_mb", value=1, ts=1
            )
        )
        sender.flush()
        metric = json.loads(mock_urlopen.call_args.args[0].data)["metrics"][0]
        assert metric == {
            "type": "pvc_usage",
            "pod_uid": "u",
            "volume": "v",
            "key": "used_mb",
            "value": 1.0,
            "ts": 1,
        }

    def test_timeout_passed(self, mock_urlopen: MagicMock) -> None:
        """The configured timeout reaches urlopen."""
        sender = MetricsSender(ENDPOINT, "n", timeout=2.5)
        sender.add_sample(make_sample())
        sender.flush()
        assert mock_urlopen.call_args.kwargs["timeout"] == 2.5

    @pytest.mark.parametrize(
        "error",
        [
            HTTPError(ENDPOINT, 503, "Service Unavailable", {}, None),
            URLError("connection refused"),
            TimeoutError("timed out"),
            BadStatusLine("NOT-HTTP garbage"),
            IncompleteRead(b"partial"),
        ],
    )
    def test_delivery_failure_drops_batch(
        self, mock_urlopen: MagicMock, error: Exception, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Transport and protocol errors drop the batch and return False."""
        mock_urlopen.side_effect = error
        sender = MetricsSender(ENDPOINT, "n")
        sender.add_sample(make_sample())

        assert sender.flush() is False
        assert sender.pending == 0
        assert "Failed to send metrics" in caplog.text
