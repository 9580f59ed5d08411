"""Task-submission boundary for running aggregation off the caller's thread.

Defines the ``BuildExecutor`` Protocol that a host's shared worker pool
must satisfy, and a ``concurrent.futures`` default. The index itself never
schedules anything; it only runs inside a task a caller submitted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Protocol, TypeVar, runtime_checkable

from bepindex.config import settings
from bepindex.core.aggregator import aggregate
from bepindex.core.snapshot import BepOutputSnapshot
from bepindex.models.events import BuildEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class BuildExecutor(Protocol):
    """Protocol for a shared worker pool.

    Any object with ``submit(fn, *args, **kwargs) -> Future`` and an
    ``executor`` attribute satisfies it, including adapters over a host
    application's own pool.
    """

    def submit(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
        """Schedule *fn* and return a future for its result."""
        ...

    @property
    def executor(self) -> Executor:
        """The underlying pool, for callers that need to share it."""
        ...


# ---------------------------------------------------------------------------
# Default implementation
# ---------------------------------------------------------------------------


class ThreadPoolBuildExecutor:
    """``BuildExecutor`` backed by a ``ThreadPoolExecutor``.

    Parameters
    ----------
    max_workers:
        Pool size. Defaults to ``settings.max_workers``.
    thread_name_prefix:
        Worker thread name prefix. Defaults to ``settings.thread_name_prefix``.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        thread_name_prefix: str | None = None,
    ) -> None:
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers or settings.max_workers,
            thread_name_prefix=thread_name_prefix or settings.thread_name_prefix,
        )

    def submit(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
        return self._pool.submit(fn, *args, **kwargs)

    @property
    def executor(self) -> Executor:
        return self._pool

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> ThreadPoolBuildExecutor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def aggregate_async(
    executor: BuildExecutor,
    events: Iterable[BuildEvent | tuple[BuildEvent, int]],
    sync_start_time_millis: int | None = None,
) -> Future[BepOutputSnapshot]:
    """Submit aggregation of *events* to *executor*.

    The events are consumed on the worker thread, so *events* must not be
    read by anyone else until the future completes.
    """
    logger.debug("Submitting event stream aggregation")
    return executor.submit(aggregate, events, sync_start_time_millis)
