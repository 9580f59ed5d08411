"""Frozen, queryable index over one build's event protocol output.

A ``BepOutputSnapshot`` is built once per build invocation (normally by
``BepAggregator.build()``) and never updated; the next build produces a new
snapshot. Every query is read-only and answers unknown groups or labels
with an empty result, so a snapshot with no data needs no special casing.
"""

from __future__ import annotations

import warnings
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from bepindex.models.artifacts import BepArtifactData, OutputArtifact
from bepindex.models.filesets import FileSet

EMPTY_BUILD_ID = "build-id"


def _distinct(artifacts: Iterable[OutputArtifact]) -> tuple[OutputArtifact, ...]:
    """De-duplicate by key, keeping first-seen order."""
    return tuple(dict.fromkeys(artifacts))


class BepOutputSnapshot(BaseModel):
    """The aggregated outputs of a single build.

    Mapping fields are read-only views over private copies of the input, so
    a snapshot can be shared between threads without locking. Snapshots are
    compared by value but are not hashable.

    Parameters
    ----------
    build_id:
        Invocation id, or ``None`` if the build had none yet.
    workspace_status:
        Ordered key/value source-control state.
    file_sets:
        File set id to ``FileSet``, in stream order.
    target_file_sets:
        Label to the ids of the file sets that target directly produced.
        Every id must be a key of ``file_sets``.
    sync_start_time_millis:
        Start timestamp of the build, in milliseconds.
    build_result:
        The build's exit code, passed through verbatim.
    bep_bytes_consumed:
        Number of protocol bytes read to produce this snapshot.
    targets_with_errors:
        Labels reported as failed or aborted.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    build_id: str | None = None
    workspace_status: Mapping[str, str] = {}
    file_sets: Mapping[str, FileSet] = {}
    target_file_sets: Mapping[str, tuple[str, ...]] = {}
    sync_start_time_millis: int = 0
    build_result: int = 0
    bep_bytes_consumed: int = 0
    targets_with_errors: frozenset[str] = frozenset()

    __hash__ = None  # type: ignore[assignment]

    @field_validator("workspace_status", "file_sets", "target_file_sets")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("workspace_status", "file_sets", "target_file_sets")
    def _as_dict(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    @classmethod
    def empty(cls) -> BepOutputSnapshot:
        """Snapshot standing in for "no build data"."""
        return cls(build_id=EMPTY_BUILD_ID)

    # ------------------------------------------------------------------
    # Index helpers
    # ------------------------------------------------------------------

    def _artifacts_where(
        self, predicate: Callable[[FileSet], bool]
    ) -> tuple[OutputArtifact, ...]:
        return _distinct(
            artifact
            for file_set in self.file_sets.values()
            if predicate(file_set)
            for artifact in file_set.artifacts
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all_output_artifacts(self) -> frozenset[OutputArtifact]:
        """Every artifact referenced by any file set. For tests and debugging."""
        return frozenset(
            artifact
            for file_set in self.file_sets.values()
            for artifact in file_set.artifacts
        )

    def direct_artifacts_for_target(self, label: str) -> tuple[OutputArtifact, ...]:
        """Artifacts of every file set *label* directly produced, in any output group.

        .. deprecated::
            Ignores output groups. Use ``output_group_target_artifacts``.
        """
        warnings.warn(
            "direct_artifacts_for_target() ignores output groups; "
            "use output_group_target_artifacts() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return _distinct(
            artifact
            for file_set_id in self.target_file_sets.get(label, ())
            for artifact in self.file_sets[file_set_id].artifacts
        )

    def output_group_target_artifacts(
        self, output_group: str, label: str
    ) -> tuple[OutputArtifact, ...]:
        """Artifacts of file sets that both belong to *output_group* and were built by *label*."""
        return self._artifacts_where(
            lambda f: label in f.targets and output_group in f.output_groups
        )

    def output_group_artifacts(self, output_group: str) -> tuple[OutputArtifact, ...]:
        """Artifacts of every file set in *output_group*, across all targets."""
        return self._artifacts_where(lambda f: output_group in f.output_groups)

    def full_artifact_data(self) -> dict[str, BepArtifactData]:
        """Map each artifact key to its merged ``BepArtifactData``.

        Emits one record per (file set, artifact) pair, groups them by key and
        folds each group with ``BepArtifactData.combine``. This walks every
        file set; call it once per snapshot rather than per lookup.
        """
        by_key: defaultdict[str, list[BepArtifactData]] = defaultdict(list)
        for file_set in self.file_sets.values():
            for data in file_set.to_per_artifact_data():
                by_key[data.key].append(data)
        return {
            key: BepArtifactData.combine_all(records)
            for key, records in by_key.items()
        }

    def output_groups(self) -> tuple[str, ...]:
        """Every output group name seen in this build, sorted."""
        return tuple(
            sorted({g for f in self.file_sets.values() for g in f.output_groups})
        )

    def targets(self) -> tuple[str, ...]:
        """Labels that directly produced at least one file set, in stream order."""
        return tuple(self.target_file_sets)
