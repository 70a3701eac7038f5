"""Workspace descriptor (Cargo.toml) loading and member resolution."""

import glob
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from commands.errors import ManifestError
from commands.model import CrateUnit, WorkspaceDescriptor

MANIFEST_NAME = "Cargo.toml"
GLOB_CHARS = set("*?[")


def load_manifest(path: Path) -> Dict[str, Any]:
    """
    Parse a Cargo manifest.

    Args:
        path: Path to a `Cargo.toml` file.

    Returns:
        The parsed manifest as a dictionary.

    Raises:
        ManifestError: If the file is missing or is not valid TOML.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ManifestError("manifest not found", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"cannot read manifest: {e}", path) from e

    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"malformed manifest: {e}", path) from e


def find_workspace_root(start: Path, single_crate: bool = False) -> Path:
    """
    Find the workspace root above a directory.

    Walks upward from `start` to the first directory whose manifest
    declares a `[workspace]` table.

    Args:
        start: Directory to start from, usually the crate being built.
        single_crate: If True and no workspace is found, fall back to the
            nearest directory holding a manifest.

    Raises:
        ManifestError: If no such directory exists.
    """
    start = Path(start).resolve()
    nearest: Optional[Path] = None
    for directory in [start, *start.parents]:
        manifest = directory / MANIFEST_NAME
        if not manifest.is_file():
            continue
        if nearest is None:
            nearest = directory
        if "workspace" in load_manifest(manifest):
            return directory
    if single_crate and nearest is not None:
        return nearest
    raise ManifestError("no workspace root found", start)


def resolve_workspace(root: Path) -> WorkspaceDescriptor:
    """
    Resolve the member crates of a workspace.

    The root is always the first member. Members follow in the order the
    descriptor lists them; a glob expands to its matches in lexical order.
    A manifest without a `[workspace]` table is a one-crate workspace.

    Args:
        root: Workspace root directory.

    Returns:
        WorkspaceDescriptor with canonical, unique member paths.

    Raises:
        ManifestError: If the descriptor is missing or malformed, or a
            listed member does not exist.
    """
    root = Path(root).resolve()
    root_manifest = root / MANIFEST_NAME
    data = load_manifest(root_manifest)

    workspace = data.get("workspace", {})
    if not isinstance(workspace, dict):
        raise ManifestError("`workspace` must be a table", root_manifest)

    patterns = _string_list(workspace, "members", root_manifest)
    excluded = {
        (root / entry).resolve()
        for entry in _string_list(workspace, "exclude", root_manifest)
    }

    members: List[Path] = [root]
    for pattern in patterns:
        for member in _expand_member(root, pattern, excluded, root_manifest):
            if member not in members:
                members.append(member)

    manifests = tuple(member / MANIFEST_NAME for member in members)
    return WorkspaceDescriptor(root=root, members=tuple(members), manifests=manifests)


def load_crate(member: Path) -> Optional[CrateUnit]:
    """
    Load the crate a member directory holds.

    Returns None for a virtual manifest (no `[package]` table), which has
    no sources of its own.

    Raises:
        ManifestError: If the package has no name or no entry module.
    """
    manifest_path = member / MANIFEST_NAME
    data = load_manifest(manifest_path)

    package = data.get("package")
    if package is None:
        return None
    if not isinstance(package, dict) or not isinstance(package.get("name"), str):
        raise ManifestError("`package.name` must be a string", manifest_path)

    entry = _entry_module(member, data, manifest_path)
    return CrateUnit(root=member, package_name=package["name"], entry=entry)


def _entry_module(member: Path, data: Dict[str, Any], manifest_path: Path) -> Path:
    lib = data.get("lib")
    if isinstance(lib, dict) and isinstance(lib.get("path"), str):
        entry = member / lib["path"]
        if not entry.is_file():
            raise ManifestError(f"library entry `{lib['path']}` does not exist", manifest_path)
        return entry.resolve()

    for candidate in ("src/lib.rs", "src/main.rs"):
        entry = member / candidate
        if entry.is_file():
            return entry.resolve()

    raise ManifestError("crate has neither src/lib.rs nor src/main.rs", manifest_path)


def _string_list(table: Dict[str, Any], key: str, manifest_path: Path) -> List[str]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ManifestError(f"`workspace.{key}` must be a list of paths", manifest_path)
    return value


def _expand_member(root: Path, pattern: str, excluded: set, manifest_path: Path) -> List[Path]:
    """Expand one `members` entry into crate directories."""
    if not any(char in GLOB_CHARS for char in pattern):
        member = (root / pattern).resolve()
        if not member.is_dir():
            raise ManifestError(f"workspace member `{pattern}` does not exist", manifest_path)
        if not (member / MANIFEST_NAME).is_file():
            raise ManifestError(f"workspace member `{pattern}` has no {MANIFEST_NAME}", manifest_path)
        return [member]

    # Absolute patterns replace the root when joined
    try:
        found = sorted(glob.glob(str(root / pattern)))
    except (OSError, ValueError) as e:
        raise ManifestError(f"cannot expand workspace member `{pattern}`: {e}", manifest_path) from e

    matches = []
    for match in found:
        member = Path(match).resolve()
        if member in excluded:
            continue
        if member.is_dir() and (member / MANIFEST_NAME).is_file():
            matches.append(member)
    return matches
