"""bepindex data models — all Pydantic v2, all frozen (immutable)."""

from bepindex.models.artifacts import BepArtifactData, OutputArtifact
from bepindex.models.events import (
    EVENT_TYPE_MAP,
    BuildEvent,
    BuildEventKind,
    BuildFinished,
    BuildStarted,
    NamedSetOfFiles,
    OutputGroup,
    TargetAborted,
    TargetComplete,
    WorkspaceStatus,
    parse_event,
)
from bepindex.models.filesets import FileSet

__all__ = [
    # artifacts
    "OutputArtifact",
    "BepArtifactData",
    # file sets
    "FileSet",
    # events
    "BuildEventKind",
    "BuildEvent",
    "BuildStarted",
    "WorkspaceStatus",
    "NamedSetOfFiles",
    "OutputGroup",
    "TargetComplete",
    "TargetAborted",
    "BuildFinished",
    "EVENT_TYPE_MAP",
    "parse_event",
]
