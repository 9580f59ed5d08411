"""Named file set model (one ``namedSetOfFiles`` after aggregation)."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

from bepindex.models.artifacts import BepArtifactData, OutputArtifact


class FileSet(BaseModel):
    """A grouping of artifacts sharing provenance.

    ``artifacts`` keeps first-seen stream order with duplicates removed.
    ``output_groups`` and ``targets`` include membership inherited from a
    parent set that referenced this one.
    """

    model_config = ConfigDict(frozen=True)

    artifacts: tuple[OutputArtifact, ...] = ()
    output_groups: frozenset[str] = frozenset()
    targets: frozenset[str] = frozenset()

    def to_per_artifact_data(self) -> Iterator[BepArtifactData]:
        """Yield one record per artifact, seeded with this set's groups and targets."""
        for artifact in self.artifacts:
            yield BepArtifactData(
                artifact=artifact,
                output_groups=self.output_groups,
                targets=self.targets,
            )
