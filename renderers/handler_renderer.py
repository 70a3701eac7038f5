"""Renders the handler registration invocation."""

from typing import Optional

from .invocation import Entries, command_paths, macro_invocation

HANDLER_MACRO = "tauri::generate_handler"


def to_handler(entries: Entries, calling_crate: Optional[str] = None) -> str:
    """
    Render `tauri::generate_handler![...]` listing every collected command.

    Args:
        entries: Collected entries in artifact order.
        calling_crate: Crate the invocation is compiled into.

    Returns:
        Rust source for the invocation.
    """
    return macro_invocation(HANDLER_MACRO, command_paths(entries, calling_crate))
