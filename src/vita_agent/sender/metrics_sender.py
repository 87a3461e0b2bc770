"""Batching HTTP transport to the VitaKube consumer.

Collected samples are buffered for one tick and POSTed as a single JSON
document:

    {"node": "<node>", "metrics": [{"type": "container", "pod_id": ..., "key": "cpu_ms",
                                    "value": 1234.0, "ts": 1700000000}, ...]}
"""

from __future__ import annotations

import json
import logging
import time
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from vita_agent import __version__
from vita_agent.core.schemas import MetricBatch, RawMetric, ResourceSample
from vita_agent.monitoring.base import BaseSink

logger = logging.getLogger(__name__)


def sample_to_metrics(sample: ResourceSample, ts: int | None = None) -> list[RawMetric]:
    """Split a container sample into one RawMetric per numeric field.

    Args:
        sample: Normalized container sample
        ts: Unix timestamp (defaults to now)

    Returns:
        cpu_ms, mem_mb and mem_limit_mb metrics of type ``container``
    """
    if ts is None:
        ts = int(time.time())
    return [
        RawMetric(
            metric_type="container",
            pod_id=sample.pod_id,
            container_id=sample.container_id,
            key=key,
            value=float(value),
            ts=ts,
        )
        for key, value in sample.metric_values().items()
    ]


class MetricsSender(BaseSink):
    """Sink that batches metrics and ships them to the consumer on flush()."""

    def __init__(self, endpoint: str, node_name: str, timeout: float = 5.0) -> None:
        """Initialize the sender.

        Args:
            endpoint: Consumer ingest URL
            node_name: Name of this node, sent as the batch ``node``
            timeout: HTTP timeout in seconds
        """
        self.endpoint = endpoint
        self.node_name = node_name
        self.timeout = timeout
        self._batch: list[RawMetric] = []

    @property
    def pending(self) -> int:
        """Number of metrics waiting for the next flush."""
        return len(self._batch)

    def add_sample(self, sample: ResourceSample) -> None:
        self._batch.extend(sample_to_metrics(sample))

    def add_metric(self, metric: RawMetric) -> None:
        self._batch.append(metric)

    def flush(self) -> bool:
        """Send the pending batch.

        The batch is detached before sending, so a failed delivery drops it
        rather than growing without bound.

        Returns:
            True if the batch was accepted (or there was nothing to send)
        """
        if not self._batch:
            return True

        batch = MetricBatch(node=self.node_name, metrics=self._batch)
        self._batch = []

        body = json.dumps(batch.to_payload()).encode("utf-8")
        req = Request(
            self.endpoint,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"vita-agent/{__version__}",
            },
        )

        try:
            with urlopen(req, timeout=self.timeout) as response:
                status = response.status
        except HTTPError as e:
            logger.warning(f"Failed to send metrics: HTTP {e.code}")
            return False
        except (URLError, HTTPException, OSError) as e:
            logger.warning(f"Failed to send metrics: {e}")
            return False

        if not 200 <= status < 300:
            logger.warning(f"Failed to send metrics: HTTP {status}")
            return False

        logger.debug(f"Sent {len(batch.metrics)} metrics to {self.endpoint}")
        return True
