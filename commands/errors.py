"""Error types raised while collecting and rendering commands."""

from pathlib import Path
from typing import Optional, Union


class CollectorError(Exception):
    """
    Base class for every collector failure.

    Carries the offending path so the build log can point at it.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class ManifestError(CollectorError):
    """The workspace descriptor or a member manifest is missing or malformed."""


class ModuleResolutionError(CollectorError):
    """A declared submodule has no backing file. Recoverable."""

    def __init__(self, message: str, path=None, module: str = ""):
        self.module = module
        super().__init__(message, path)


class ParseError(CollectorError):
    """A source file could not be read or parsed."""


class DuplicateCommandError(CollectorError):
    """Two functions resolve to the same fully-qualified path."""

    def __init__(self, qualified_path: str, first: str, second: str, path=None):
        self.qualified_path = qualified_path
        self.first = first
        self.second = second
        super().__init__(
            f"duplicate command `{qualified_path}` defined at {first} and {second}",
            path,
        )


class ArtifactWriteError(CollectorError):
    """The command artifact could not be written."""


class ArtifactMissingError(CollectorError):
    """No command artifact exists; the scan step probably never ran."""


class ArtifactFormatError(CollectorError):
    """The command artifact exists but cannot be understood."""
