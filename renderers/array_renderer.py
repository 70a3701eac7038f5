"""Array renderer: the plain list of command names, for introspection."""

import json
import sys
from typing import Optional, TextIO

from .invocation import Entries, command_paths


def to_array(
    entries: Entries,
    calling_crate: Optional[str] = None,
    echo: bool = False,
    stream: Optional[TextIO] = None,
) -> str:
    """
    Render the collected commands as a Rust array of string literals.

    Args:
        entries: Collected entries in artifact order.
        calling_crate: Crate the array is compiled into.
        echo: If True, also write each name to `stream`.
        stream: Diagnostic stream for `echo` (default: stderr).

    Returns:
        e.g. `["app::cmds::greet", "app::cmds::sum"]`.
    """
    names = command_paths(entries, calling_crate)

    if echo:
        out = stream if stream is not None else sys.stderr
        for name in names:
            print(name, file=out)

    return "[" + ", ".join(json.dumps(name) for name in names) + "]"
