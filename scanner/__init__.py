"""Scanner module for workspace resolution and command extraction."""

from .manifest import find_workspace_root, resolve_workspace, load_crate
from .modules import ModuleGraphWalker, walk_crate
from .extractor import extract_commands
from .builder import CollectorOptions, collect_commands, generate_command_file

__all__ = [
    "find_workspace_root",
    "resolve_workspace",
    "load_crate",
    "ModuleGraphWalker",
    "walk_crate",
    "extract_commands",
    "CollectorOptions",
    "collect_commands",
    "generate_command_file",
]
