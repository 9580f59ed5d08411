"""Aggregation, snapshot, and executor boundary."""

from bepindex.core.aggregator import AggregatorClosedError, BepAggregator, aggregate
from bepindex.core.executor import BuildExecutor, ThreadPoolBuildExecutor, aggregate_async
from bepindex.core.snapshot import EMPTY_BUILD_ID, BepOutputSnapshot

__all__ = [
    "BepAggregator",
    "AggregatorClosedError",
    "aggregate",
    "BepOutputSnapshot",
    "EMPTY_BUILD_ID",
    "BuildExecutor",
    "ThreadPoolBuildExecutor",
    "aggregate_async",
]
