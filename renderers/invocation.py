"""Shared helpers for rendering collected command paths."""

import logging
from typing import Iterable, List, Optional, Union

from commands.model import CommandEntry

logger = logging.getLogger(__name__)

Entries = Iterable[Union[CommandEntry, str]]


def command_paths(entries: Entries, calling_crate: Optional[str] = None) -> List[str]:
    """
    Project entries to the paths used in generated code, in artifact order.

    Args:
        entries: Collected entries, e.g. a CollectionArtifact.
        calling_crate: Crate the generated code is compiled into. Its own
            entries are written relative to `crate::`, since a crate cannot
            refer to itself by its package name.

    Returns:
        One path per entry.
    """
    own = calling_crate.replace("-", "_") if calling_crate else None
    paths = []
    for entry in entries:
        if not isinstance(entry, CommandEntry):
            entry = CommandEntry(str(entry))
        if own is not None and entry.crate == own:
            paths.append("::".join(("crate",) + entry.segments[1:]))
        else:
            paths.append(entry.path)
    return paths


def macro_invocation(macro: str, arguments: List[str], indent: str = "    ") -> str:
    """
    Render `macro![a, b, c]`, one argument per line.

    Args:
        macro: Macro path without the `!`.
        arguments: Macro arguments in order.
        indent: Indentation for each argument line.
    """
    if not arguments:
        logger.warning(
            "%s! rendered with no commands; mark functions with #[auto_collect_command]",
            macro,
        )
        return f"{macro}![]"
    lines = [f"{macro}!["]
    lines.extend(f"{indent}{argument}," for argument in arguments)
    lines.append("]")
    return "\n".join(lines)
