"""Renders the typed-binding collector invocation."""

from typing import Optional

from .invocation import Entries, command_paths, macro_invocation

BINDINGS_MACRO = "tauri_specta::collect_commands"


def to_bindings(entries: Entries, calling_crate: Optional[str] = None) -> str:
    """Render `tauri_specta::collect_commands![...]` with the same arguments as the handler."""
    return macro_invocation(BINDINGS_MACRO, command_paths(entries, calling_crate))
