"""Sender module - delivery of collected metrics to the consumer."""

from __future__ import annotations

from vita_agent.sender.metrics_sender import MetricsSender, sample_to_metrics

__all__ = ["MetricsSender", "sample_to_metrics"]
