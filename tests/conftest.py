"""Shared test fixtures for bepindex."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from bepindex.core.aggregator import BepAggregator
from bepindex.core.snapshot import BepOutputSnapshot
from bepindex.models.artifacts import OutputArtifact
from bepindex.models.events import NamedSetOfFiles, OutputGroup, TargetComplete
from bepindex.models.filesets import FileSet

BIN = ("bazel-out", "k8-fastbuild", "bin")


@pytest.fixture
def aggregator() -> BepAggregator:
    """Provide a fresh aggregator with a fixed start time."""
    return BepAggregator(sync_start_time_millis=1_000)


@pytest.fixture
def empty_snapshot() -> BepOutputSnapshot:
    return BepOutputSnapshot.empty()


# ---------------------------------------------------------------------------
# Factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_artifact() -> Callable[..., OutputArtifact]:
    """Factory fixture: an artifact under bazel-out/k8-fastbuild/bin."""

    def _factory(name: str, **overrides: Any) -> OutputArtifact:
        defaults: dict[str, Any] = {"name": name, "path_prefix": BIN}
        defaults.update(overrides)
        return OutputArtifact(**defaults)

    return _factory


@pytest.fixture
def make_named_set() -> Callable[..., NamedSetOfFiles]:
    """Factory fixture: a NamedSetOfFiles event."""

    def _factory(
        set_id: str,
        files: tuple[OutputArtifact, ...] = (),
        children: tuple[str, ...] = (),
    ) -> NamedSetOfFiles:
        return NamedSetOfFiles(id=set_id, files=files, file_sets=children)

    return _factory


@pytest.fixture
def make_target_complete() -> Callable[..., TargetComplete]:
    """Factory fixture: a TargetComplete event from ``{group: [set ids]}``."""

    def _factory(
        label: str,
        groups: dict[str, list[str]] | None = None,
        success: bool = True,
    ) -> TargetComplete:
        return TargetComplete(
            label=label,
            success=success,
            output_groups=tuple(
                OutputGroup(name=name, file_sets=tuple(ids))
                for name, ids in (groups or {}).items()
            ),
        )

    return _factory


# ---------------------------------------------------------------------------
# The two-file-set scenario: fs1 = [A1, A2] in "default", fs2 = [A1] in
# "test", both produced by //x:y.
# ---------------------------------------------------------------------------


@pytest.fixture
def a1(make_artifact: Callable[..., OutputArtifact]) -> OutputArtifact:
    return make_artifact("x/A1")


@pytest.fixture
def a2(make_artifact: Callable[..., OutputArtifact]) -> OutputArtifact:
    return make_artifact("x/A2")


@pytest.fixture
def scenario_snapshot(a1: OutputArtifact, a2: OutputArtifact) -> BepOutputSnapshot:
    """Snapshot built directly from already-aggregated maps."""
    return BepOutputSnapshot(
        build_id="build-123",
        workspace_status={"BUILD_SCM_REVISION": "abc123"},
        file_sets={
            "fs1": FileSet(
                artifacts=(a1, a2),
                output_groups=frozenset({"default"}),
                targets=frozenset({"//x:y"}),
            ),
            "fs2": FileSet(
                artifacts=(a1,),
                output_groups=frozenset({"test"}),
                targets=frozenset({"//x:y"}),
            ),
        },
        target_file_sets={"//x:y": ("fs1", "fs2")},
        sync_start_time_millis=1_000,
        build_result=0,
        bep_bytes_consumed=512,
    )
