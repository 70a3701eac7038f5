"""Command model, errors and the artifact shared by both phases."""

from .artifact import artifact_path, read_artifact, write_artifact
from .errors import (
    ArtifactFormatError,
    ArtifactMissingError,
    ArtifactWriteError,
    CollectorError,
    DuplicateCommandError,
    ManifestError,
    ModuleResolutionError,
    ParseError,
)
from .model import CollectionArtifact, CommandCandidate, CommandEntry, CommandList

__all__ = [
    "artifact_path",
    "read_artifact",
    "write_artifact",
    "ArtifactFormatError",
    "ArtifactMissingError",
    "ArtifactWriteError",
    "CollectorError",
    "DuplicateCommandError",
    "ManifestError",
    "ModuleResolutionError",
    "ParseError",
    "CollectionArtifact",
    "CommandCandidate",
    "CommandEntry",
    "CommandList",
]
