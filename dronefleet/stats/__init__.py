"""Streaming statistics with bounded memory.

Exports:
    RunningMean: Incremental mean
    RingBufferPercentile: Sliding-window percentile over the last K samples
    StreamingStatistics: Means, P95 window and capped history of completed orders
    MetricsSnapshot: Frozen view published to renderers and callers
"""

from .estimators import RingBufferPercentile, RunningMean
from .statistics import P95, MetricsSnapshot, StreamingStatistics

__all__ = [
    "RunningMean",
    "RingBufferPercentile",
    "StreamingStatistics",
    "MetricsSnapshot",
    "P95",
]
