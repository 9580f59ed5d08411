"""bepindex: an immutable, queryable index of a build's event protocol output.

Decoded build events go into a ``BepAggregator``; ``build()`` freezes them
into a ``BepOutputSnapshot`` that answers per-target, per-output-group and
per-artifact queries without re-reading the stream.
"""

__version__ = "0.1.0"
__description__ = "Immutable, queryable index of build event protocol output"

from bepindex.core.aggregator import BepAggregator, aggregate
from bepindex.core.snapshot import BepOutputSnapshot
from bepindex.models.artifacts import BepArtifactData, OutputArtifact
from bepindex.models.filesets import FileSet

__all__ = [
    "BepAggregator",
    "BepOutputSnapshot",
    "BepArtifactData",
    "FileSet",
    "OutputArtifact",
    "aggregate",
    "__version__",
]
