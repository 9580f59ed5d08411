"""Single-writer aggregation of decoded build events into a snapshot.

The aggregator consumes one build's events exactly once, in stream order,
and accumulates the raw maps a ``BepOutputSnapshot`` is made from. Output
group and target membership is resolved in ``build()``, not as events
arrive, so a target may reference a named set announced later in the
stream. Membership flows from a referenced set to every set nested under it.

Design:
- Only ``accept()`` mutates state; ``build()`` hands everything over once.
- After ``build()`` the aggregator is closed and refuses further use.
- References to named sets that never appeared are dropped, so the snapshot
  never holds a dangling file set id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bepindex.config import settings
from bepindex.core.snapshot import BepOutputSnapshot
from bepindex.models.artifacts import OutputArtifact
from bepindex.models.events import (
    BuildEvent,
    BuildEventKind,
    BuildFinished,
    BuildStarted,
    NamedSetOfFiles,
    TargetAborted,
    TargetComplete,
    WorkspaceStatus,
)
from bepindex.models.filesets import FileSet

logger = logging.getLogger(__name__)


class AggregatorClosedError(RuntimeError):
    """Raised when an aggregator is used after ``build()``."""


class _PendingFileSet:
    """Mutable accumulator for one named set while the stream is read."""

    __slots__ = ("artifacts", "children", "output_groups", "targets")

    def __init__(self, files: Iterable[OutputArtifact], children: Iterable[str]) -> None:
        self.artifacts: dict[OutputArtifact, None] = dict.fromkeys(files)
        self.children: tuple[str, ...] = tuple(children)
        self.output_groups: set[str] = set()
        self.targets: set[str] = set()

    def freeze(self) -> FileSet:
        return FileSet(
            artifacts=tuple(self.artifacts),
            output_groups=frozenset(self.output_groups),
            targets=frozenset(self.targets),
        )


class BepAggregator:
    """Accumulates build events and freezes them into a ``BepOutputSnapshot``.

    Parameters
    ----------
    sync_start_time_millis:
        Start timestamp to record. When ``None``, the ``BuildStarted``
        event's timestamp is used (0 if the stream has none).
    warn_on_dangling_file_sets:
        Log dropped references at WARNING instead of DEBUG. Defaults to
        ``settings.warn_on_dangling_file_sets``.
    """

    def __init__(
        self,
        sync_start_time_millis: int | None = None,
        *,
        warn_on_dangling_file_sets: bool | None = None,
    ) -> None:
        self._sync_start_time_millis = sync_start_time_millis
        self._warn_on_dangling = (
            settings.warn_on_dangling_file_sets
            if warn_on_dangling_file_sets is None
            else warn_on_dangling_file_sets
        )

        self._build_id: str | None = None
        self._started_at_millis = 0
        self._workspace_status: dict[str, str] = {}
        self._file_sets: dict[str, _PendingFileSet] = {}
        # (label, output group, file set id) in stream order
        self._references: list[tuple[str, str, str]] = []
        self._targets_with_errors: set[str] = set()
        self._build_result = 0
        self._bytes_consumed = 0
        self._closed = False

        self._handlers = {
            BuildEventKind.BUILD_STARTED: self._on_build_started,
            BuildEventKind.WORKSPACE_STATUS: self._on_workspace_status,
            BuildEventKind.NAMED_SET_OF_FILES: self._on_named_set,
            BuildEventKind.TARGET_COMPLETE: self._on_target_complete,
            BuildEventKind.TARGET_ABORTED: self._on_target_aborted,
            BuildEventKind.BUILD_FINISHED: self._on_build_finished,
        }

    # ------------------------------------------------------------------
    # Consume
    # ------------------------------------------------------------------

    def accept(self, event: BuildEvent, size_bytes: int = 0) -> BepAggregator:
        """Fold one event into the aggregate.

        *size_bytes* is the encoded size the decoding layer read for this
        event; it is added to the bytes-consumed counter.
        """
        self._check_open()
        self._bytes_consumed += size_bytes
        self._handlers[event.event_kind](event)
        return self

    def accept_all(
        self, events: Iterable[BuildEvent | tuple[BuildEvent, int]]
    ) -> BepAggregator:
        """Accept each item in order; items are events or ``(event, size_bytes)`` pairs."""
        for item in events:
            if isinstance(item, tuple):
                self.accept(*item)
            else:
                self.accept(item)
        return self

    def _on_build_started(self, event: BuildStarted) -> None:
        self._build_id = event.uuid
        self._started_at_millis = event.start_time_millis

    def _on_workspace_status(self, event: WorkspaceStatus) -> None:
        self._workspace_status.update(event.items)

    def _on_named_set(self, event: NamedSetOfFiles) -> None:
        if event.id in self._file_sets:
            logger.debug("Ignoring repeated named set %s", event.id)
            return
        self._file_sets[event.id] = _PendingFileSet(event.files, event.file_sets)

    def _on_target_complete(self, event: TargetComplete) -> None:
        for group in event.output_groups:
            for file_set_id in group.file_sets:
                self._references.append((event.label, group.name, file_set_id))
        if not event.success:
            self._targets_with_errors.add(event.label)

    def _on_target_aborted(self, event: TargetAborted) -> None:
        self._targets_with_errors.add(event.label)

    def _on_build_finished(self, event: BuildFinished) -> None:
        self._build_result = event.exit_code

    # ------------------------------------------------------------------
    # Freeze
    # ------------------------------------------------------------------

    def build(self) -> BepOutputSnapshot:
        """Resolve membership and return the immutable snapshot.

        Closes the aggregator.
        """
        self._check_open()
        self._closed = True

        target_file_sets: dict[str, dict[str, None]] = {}
        for label, group, file_set_id in self._references:
            if file_set_id not in self._file_sets:
                logger.log(
                    logging.WARNING if self._warn_on_dangling else logging.DEBUG,
                    "Dropping reference from %s (%s) to undefined file set %s",
                    label,
                    group,
                    file_set_id,
                )
                continue
            target_file_sets.setdefault(label, {})[file_set_id] = None
            for pending in self._transitive_file_sets(file_set_id):
                pending.output_groups.add(group)
                pending.targets.add(label)

        snapshot = BepOutputSnapshot(
            build_id=self._build_id,
            workspace_status=dict(self._workspace_status),
            file_sets={
                file_set_id: pending.freeze()
                for file_set_id, pending in self._file_sets.items()
            },
            target_file_sets={
                label: tuple(ids) for label, ids in target_file_sets.items()
            },
            sync_start_time_millis=(
                self._started_at_millis
                if self._sync_start_time_millis is None
                else self._sync_start_time_millis
            ),
            build_result=self._build_result,
            bep_bytes_consumed=self._bytes_consumed,
            targets_with_errors=frozenset(self._targets_with_errors),
        )
        logger.info(
            "Built snapshot for build %s: %d file sets, %d targets, %d with errors",
            snapshot.build_id,
            len(snapshot.file_sets),
            len(snapshot.target_file_sets),
            len(snapshot.targets_with_errors),
        )
        return snapshot

    def _transitive_file_sets(self, root_id: str) -> list[_PendingFileSet]:
        """The set *root_id* plus every defined set nested under it, each once."""
        found: list[_PendingFileSet] = []
        seen: set[str] = set()
        stack = [root_id]
        while stack:
            file_set_id = stack.pop()
            if file_set_id in seen:
                continue
            seen.add(file_set_id)
            pending = self._file_sets.get(file_set_id)
            if pending is None:
                logger.debug("Nested file set %s was never defined", file_set_id)
                continue
            found.append(pending)
            stack.extend(pending.children)
        return found

    def _check_open(self) -> None:
        if self._closed:
            raise AggregatorClosedError(
                "Aggregator already produced its snapshot; start a new one per build"
            )


def aggregate(
    events: Iterable[BuildEvent | tuple[BuildEvent, int]],
    sync_start_time_millis: int | None = None,
) -> BepOutputSnapshot:
    """Aggregate a complete event stream in one call."""
    return BepAggregator(sync_start_time_millis).accept_all(events).build()
