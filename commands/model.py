"""Data model for workspaces, module trees and collected commands."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import DuplicateCommandError

# A Rust identifier, raw identifiers (r#type) included.
IDENT_PATTERN = r"(?:r#)?[A-Za-z_][A-Za-z0-9_]*"
_IDENT_RE = re.compile(rf"^{IDENT_PATTERN}$")
_PATH_RE = re.compile(rf"^{IDENT_PATTERN}(?:::{IDENT_PATTERN})*$")


def is_identifier(name: str) -> bool:
    """Check if a string is a valid Rust identifier."""
    return bool(_IDENT_RE.match(name))


def is_qualified_path(value: str) -> bool:
    """Check if a string is a `::`-separated path of identifiers."""
    return bool(_PATH_RE.match(value))


def crate_identifier(package_name: str) -> str:
    """Turn a Cargo package name into the identifier used in Rust paths."""
    return package_name.replace("-", "_")


@dataclass(frozen=True)
class WorkspaceDescriptor:
    """Workspace root and its member crate directories, root first."""

    root: Path
    members: Tuple[Path, ...]
    manifests: Tuple[Path, ...] = ()


@dataclass(frozen=True)
class CrateUnit:
    """A member crate ready to be walked."""

    root: Path
    package_name: str
    entry: Path

    @property
    def ident(self) -> str:
        return crate_identifier(self.package_name)


@dataclass
class ModuleNode:
    """
    One module of a crate's module tree.

    `path` is the logical module path below the crate root (empty for the
    root module). `body` is the tree-sitter node holding the module items:
    the `source_file` for file-backed modules, the `declaration_list` for
    inline ones. `source` holds the bytes the node spans refer to.
    """

    path: Tuple[str, ...]
    file: Path
    body: Any = None
    source: bytes = b""
    children: List["ModuleNode"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return "::".join(self.path) if self.path else "crate"

    def walk(self) -> Iterator["ModuleNode"]:
        """Yield this module and its descendants, depth-first, parents first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class CommandCandidate:
    """
    A function found in a module, tagged with the markers it carries.

    `marked` means the library collection marker is present, `framework`
    means the host framework's own command marker is present.
    """

    name: str
    module_path: Tuple[str, ...]
    crate: str
    marked: bool = False
    framework: bool = False
    file: Optional[Path] = None
    line: int = 0

    @property
    def qualified_path(self) -> str:
        return "::".join((self.crate,) + tuple(self.module_path) + (self.name,))

    @property
    def location(self) -> str:
        if self.file is None:
            return "<unknown>"
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class CommandEntry:
    """A collected command, identified by its fully-qualified path."""

    path: str

    @property
    def segments(self) -> Tuple[str, ...]:
        return tuple(self.path.split("::"))

    @property
    def crate(self) -> str:
        return self.segments[0]

    @property
    def name(self) -> str:
        return self.segments[-1]

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while scanning."""

    message: str
    path: Optional[Path] = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class CollectionArtifact:
    """The ordered command list as read back from disk."""

    entries: Tuple[CommandEntry, ...]
    version: int = 1
    path: Optional[Path] = None

    @property
    def paths(self) -> List[str]:
        return [entry.path for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(self.entries)


class CommandList:
    """
    Ordered, duplicate-free list of collected commands.

    Entries keep the order they were added in. Recoverable diagnostics and
    the source files visited during the scan are tracked alongside.
    """

    def __init__(self):
        self._entries: List[CommandEntry] = []
        self._origins: Dict[str, CommandCandidate] = {}
        self._diagnostics: List[Diagnostic] = []
        self._sources: List[Path] = []

    @property
    def entries(self) -> List[CommandEntry]:
        """Return the collected entries in insertion order."""
        return list(self._entries)

    @property
    def paths(self) -> List[str]:
        """Return the fully-qualified paths in insertion order."""
        return [entry.path for entry in self._entries]

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def sources(self) -> List[Path]:
        """Return every manifest and source file read during the scan."""
        return list(self._sources)

    def add(self, candidate: CommandCandidate) -> CommandEntry:
        """
        Append a candidate as a new entry.

        Args:
            candidate: The extracted function.

        Returns:
            The created entry.

        Raises:
            DuplicateCommandError: If the qualified path is already present.
        """
        qualified = candidate.qualified_path
        if qualified in self._origins:
            first = self._origins[qualified]
            raise DuplicateCommandError(qualified, first.location, candidate.location, candidate.file)
        entry = CommandEntry(qualified)
        self._origins[qualified] = candidate
        self._entries.append(entry)
        return entry

    def add_diagnostic(self, message: str, path: Optional[Path] = None) -> None:
        self._diagnostics.append(Diagnostic(message, path))

    def add_source(self, path: Path) -> None:
        if path not in self._sources:
            self._sources.append(path)

    def has_diagnostics(self) -> bool:
        return bool(self._diagnostics)

    def extend(self, other: "CommandList") -> None:
        """Merge another list into this one, keeping its order after ours."""
        for entry in other._entries:
            self.add(other._origins[entry.path])
        self._diagnostics.extend(other._diagnostics)
        for source in other._sources:
            self.add_source(source)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: str) -> bool:
        return path in self._origins

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"CommandList(entries={len(self._entries)}, diagnostics={len(self._diagnostics)})"
