"""
The command artifact: the only channel between the scan and render phases.

The artifact is a UTF-8 text file at a fixed location under the build
output directory. The first line is a versioned header, every following
non-blank line is one fully-qualified command path, in collection order:

    # command-collector artifact v1
    app::cmds::greet
    app::cmds::sum
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .errors import ArtifactFormatError, ArtifactMissingError, ArtifactWriteError
from .model import CollectionArtifact, CommandEntry, is_qualified_path

ARTIFACT_VERSION = 1
ARTIFACT_HEADER = "# command-collector artifact v{version}"
ARTIFACT_DIR = "command_collector"
ARTIFACT_NAME = "commands.txt"

_HEADER_RE = re.compile(r"^# command-collector artifact v(\d+)$")


def artifact_path(workspace_root: Path, target_dir: Optional[Path] = None) -> Path:
    """
    Get the location of the artifact for a workspace.

    The location follows the build output directory: `$CARGO_TARGET_DIR`
    when the build sets it, otherwise `<workspace_root>/target`.

    Args:
        workspace_root: Root directory of the workspace.
        target_dir: Explicit build output directory, overriding the above.

    Returns:
        Absolute path of the artifact file.
    """
    root = Path(workspace_root).resolve()
    if target_dir is None:
        env_target = os.environ.get("CARGO_TARGET_DIR")
        # Cargo resolves a relative CARGO_TARGET_DIR against the working directory
        target_dir = Path(env_target).resolve() if env_target else Path("target")
    target = root / target_dir
    return target / ARTIFACT_DIR / ARTIFACT_NAME


def serialize_artifact(paths: Iterable[Union[str, CommandEntry]]) -> str:
    """Render command paths into the artifact text format."""
    lines = [ARTIFACT_HEADER.format(version=ARTIFACT_VERSION)]
    lines.extend(str(path) for path in paths)
    return "\n".join(lines) + "\n"


def write_artifact(commands: Iterable[Union[str, CommandEntry]], path: Path) -> Path:
    """
    Atomically replace the artifact with the given commands.

    The text goes to a temporary file in the target directory first and is
    then renamed over the artifact, so readers see either the old or the new
    file, never a partial one.

    Args:
        commands: Command paths or entries, in final order.
        path: Artifact location, usually from `artifact_path`.

    Returns:
        The path written.

    Raises:
        ArtifactWriteError: On any I/O failure.
    """
    data = serialize_artifact(commands)
    tmp_path: Optional[Path] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="\n",
        ) as temp_file:
            tmp_path = Path(temp_file.name)
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ArtifactWriteError(f"cannot write command artifact: {e}", path) from e
    return path


def parse_artifact(text: str, path: Optional[Path] = None) -> CollectionArtifact:
    """
    Parse artifact text.

    Raises:
        ArtifactFormatError: If the header is missing or has an unknown
            version, or a line is not a valid command path.
    """
    lines = text.splitlines()
    if not lines:
        raise ArtifactFormatError("empty command artifact", path)

    match = _HEADER_RE.match(lines[0].strip())
    if match is None:
        raise ArtifactFormatError("missing command artifact header", path)
    version = int(match.group(1))
    if version != ARTIFACT_VERSION:
        raise ArtifactFormatError(f"unsupported command artifact version {version}", path)

    entries: List[CommandEntry] = []
    for number, line in enumerate(lines[1:], start=2):
        value = line.strip()
        if not value:
            continue
        if not is_qualified_path(value):
            raise ArtifactFormatError(f"invalid command path `{value}` on line {number}", path)
        entries.append(CommandEntry(value))

    return CollectionArtifact(entries=tuple(entries), version=version, path=path)


def read_artifact(path: Path) -> CollectionArtifact:
    """
    Read the artifact written by the scan phase.

    Raises:
        ArtifactMissingError: If no artifact exists at `path`.
        ArtifactFormatError: If the artifact cannot be parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ArtifactMissingError(
            "no command artifact found; run `cmdcollect scan` from the build script first",
            path,
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ArtifactFormatError(f"cannot read command artifact: {e}", path) from e
    return parse_artifact(text, path)
