"""Command extraction from module bodies."""

import logging
from typing import List

from commands.errors import ParseError
from commands.model import CommandCandidate, ModuleNode, is_identifier
from .parser import attribute_path, item_line, item_name, iter_items

logger = logging.getLogger(__name__)

# The library's own collection marker
COLLECT_MARKER = "auto_collect_command"

# The host framework's command marker, honoured only when collecting all
FRAMEWORK_MARKER = "tauri::command"


def is_collect_marker(path: str) -> bool:
    """Check if an attribute path is the collection marker, qualified or not."""
    return path == COLLECT_MARKER or path.endswith("::" + COLLECT_MARKER)


def is_framework_marker(path: str) -> bool:
    return path == FRAMEWORK_MARKER


def find_candidates(node: ModuleNode, crate: str) -> List[CommandCandidate]:
    """
    Find every top-level function of a module that carries a marker.

    Functions nested in other items (function bodies, impl blocks, traits)
    are never candidates. Nested modules are separate ModuleNodes.

    Args:
        node: The module to scan.
        crate: Identifier of the crate the module belongs to.

    Returns:
        Tagged candidates in declaration order.
    """
    candidates: List[CommandCandidate] = []
    for item, attributes in iter_items(node.body):
        if item.type != "function_item":
            continue

        paths = [attribute_path(attribute, node.source) for attribute in attributes]
        marked = any(is_collect_marker(path) for path in paths)
        framework = any(is_framework_marker(path) for path in paths)
        if not (marked or framework):
            continue

        name = item_name(item, node.source)
        line = item_line(item)
        if not is_identifier(name):
            raise ParseError(f"function name `{name}` on line {line} is not a valid identifier", node.file)

        candidates.append(CommandCandidate(
            name=name,
            module_path=node.path,
            crate=crate,
            marked=marked,
            framework=framework,
            file=node.file,
            line=line,
        ))
    return candidates


def select_commands(candidates: List[CommandCandidate], collect_all: bool = False) -> List[CommandCandidate]:
    """
    Filter candidates by collection mode.

    In the default mode only functions with the collection marker are kept.
    With `collect_all`, any function carrying the framework's command marker
    is kept as well, whether or not it opted in.
    """
    if collect_all:
        return [c for c in candidates if c.marked or c.framework]
    return [c for c in candidates if c.marked]


def extract_commands(node: ModuleNode, crate: str, collect_all: bool = False) -> List[CommandCandidate]:
    """Extract the commands of one module for the given collection mode."""
    commands = select_commands(find_candidates(node, crate), collect_all)
    for command in commands:
        logger.debug("found: %s", command.qualified_path)
    return commands
