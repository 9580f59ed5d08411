"""Decoded build events consumed by the aggregator.

These are the already-decoded shapes of the build event protocol messages
the index cares about. Turning raw stream bytes into these models is the
decoding layer's job; every model validates on construction, so the
aggregator never sees a malformed event.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from bepindex.models.artifacts import OutputArtifact


class BuildEventKind(str, Enum):
    """The event kinds the aggregator understands."""

    BUILD_STARTED = "build_started"
    WORKSPACE_STATUS = "workspace_status"
    NAMED_SET_OF_FILES = "named_set_of_files"
    TARGET_COMPLETE = "target_complete"
    TARGET_ABORTED = "target_aborted"
    BUILD_FINISHED = "build_finished"


class BuildEvent(BaseModel):
    """Base for all decoded build events."""

    model_config = ConfigDict(frozen=True)

    event_kind: BuildEventKind

    @field_validator("event_kind")
    @classmethod
    def _kind_matches_model(cls, value: BuildEventKind) -> BuildEventKind:
        """Each subclass only accepts its own kind."""
        expected = cls.model_fields["event_kind"].default
        if isinstance(expected, BuildEventKind) and value != expected:
            raise ValueError(
                f"{cls.__name__} requires event_kind={expected.value!r}, got {value.value!r}"
            )
        return value


class BuildStarted(BuildEvent):
    """First event of a build. ``uuid`` may be absent for a build with no id yet."""

    event_kind: BuildEventKind = BuildEventKind.BUILD_STARTED
    uuid: str | None = None
    start_time_millis: int = 0


class WorkspaceStatus(BuildEvent):
    """Source-control state reported by the workspace status command."""

    event_kind: BuildEventKind = BuildEventKind.WORKSPACE_STATUS
    items: dict[str, str] = {}


class NamedSetOfFiles(BuildEvent):
    """A named set of output files, possibly referencing nested sets by id."""

    event_kind: BuildEventKind = BuildEventKind.NAMED_SET_OF_FILES
    id: str
    files: tuple[OutputArtifact, ...] = ()
    file_sets: tuple[str, ...] = ()


class OutputGroup(BaseModel):
    """One output group of a completed target, as a list of named-set ids."""

    model_config = ConfigDict(frozen=True)

    name: str
    file_sets: tuple[str, ...] = ()


class TargetComplete(BuildEvent):
    """A target finished; its output groups name the sets it produced."""

    event_kind: BuildEventKind = BuildEventKind.TARGET_COMPLETE
    label: str
    success: bool = True
    output_groups: tuple[OutputGroup, ...] = ()


class TargetAborted(BuildEvent):
    """A target that never completed."""

    event_kind: BuildEventKind = BuildEventKind.TARGET_ABORTED
    label: str


class BuildFinished(BuildEvent):
    """Last event of a build, carrying its exit code."""

    event_kind: BuildEventKind = BuildEventKind.BUILD_FINISHED
    exit_code: int = 0


# Registry for construction by event_kind
EVENT_TYPE_MAP: dict[BuildEventKind, type[BuildEvent]] = {
    BuildEventKind.BUILD_STARTED: BuildStarted,
    BuildEventKind.WORKSPACE_STATUS: WorkspaceStatus,
    BuildEventKind.NAMED_SET_OF_FILES: NamedSetOfFiles,
    BuildEventKind.TARGET_COMPLETE: TargetComplete,
    BuildEventKind.TARGET_ABORTED: TargetAborted,
    BuildEventKind.BUILD_FINISHED: BuildFinished,
}


def parse_event(data: dict[str, Any]) -> BuildEvent:
    """Build the event model named by ``data["event_kind"]``.

    Raises
    ------
    ValueError
        If ``event_kind`` is missing or unknown.
    pydantic.ValidationError
        If the payload does not match the event model.
    """
    try:
        kind = BuildEventKind(data["event_kind"])
    except KeyError:
        raise ValueError("Event payload has no 'event_kind'") from None
    return EVENT_TYPE_MAP[kind].model_validate(data)
