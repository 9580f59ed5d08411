"""Output artifact models and the per-artifact merge record.

An ``OutputArtifact`` is identified solely by its output-relative path.
Two artifacts reported under different file sets with the same path are
the same artifact, and their provenance is merged rather than replaced.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import reduce

from pydantic import BaseModel, ConfigDict


class OutputArtifact(BaseModel):
    """A build output, referenced by path.

    The core never resolves or reads the file; ``key`` is the only thing
    that matters for identity.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path_prefix: tuple[str, ...] = ()
    uri: str | None = None

    @property
    def key(self) -> str:
        """Output-relative path, e.g. ``bazel-out/k8-fastbuild/bin/x/y.jar``."""
        return "/".join((*self.path_prefix, self.name))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OutputArtifact):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class BepArtifactData(BaseModel):
    """Everything the build reported about one artifact.

    ``output_groups`` and ``targets`` are the unions over every file set
    that referenced the artifact.
    """

    model_config = ConfigDict(frozen=True)

    artifact: OutputArtifact
    output_groups: frozenset[str] = frozenset()
    targets: frozenset[str] = frozenset()

    @property
    def key(self) -> str:
        return self.artifact.key

    def combine(self, other: BepArtifactData) -> BepArtifactData:
        """Merge two records for the same artifact.

        Both inputs must share an artifact key. The result is independent
        of argument order and of how a sequence of combines is grouped.
        """
        return BepArtifactData(
            artifact=self.artifact,
            output_groups=self.output_groups | other.output_groups,
            targets=self.targets | other.targets,
        )

    @classmethod
    def combine_all(cls, records: Iterable[BepArtifactData]) -> BepArtifactData:
        """Fold ``combine`` over records that all share one artifact key.

        Raises
        ------
        ValueError
            If *records* is empty.
        """
        records = list(records)
        if not records:
            raise ValueError("combine_all() requires at least one record")
        return reduce(cls.combine, records)
