"""Rust source parsing with tree-sitter, plus attribute helpers."""

import re
from functools import cache
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from commands.errors import ParseError

# Nodes that may sit between an attribute and the item it belongs to
TRIVIA_NODES = {"line_comment", "block_comment"}

_ATTRIBUTE_PATH_RE = re.compile(r"^\s*(::)?\s*([A-Za-z_]\w*(?:\s*::\s*[A-Za-z_]\w*)*)")
_PATH_VALUE_RE = re.compile(r'^\s*path\s*=\s*"((?:[^"\\]|\\.)*)"\s*$')
_CFG_TEST_RE = re.compile(r"^\s*cfg\s*\(\s*test\s*\)\s*$")


@cache
def rust_language() -> Language:
    return Language(tree_sitter_rust.language())


def parse_source(source: bytes, path: Optional[Path] = None) -> Node:
    """
    Parse Rust source bytes into a syntax tree.

    Args:
        source: File contents.
        path: File the bytes came from, for error messages.

    Returns:
        The root `source_file` node.

    Raises:
        ParseError: If the source contains syntax errors.
    """
    parser = Parser(rust_language())
    tree = parser.parse(source)
    root = tree.root_node
    if root.has_error:
        line = _first_error_line(root)
        where = f" near line {line}" if line else ""
        raise ParseError(f"syntax error{where}", path)
    return root


def parse_file(path: Path) -> Tuple[Node, bytes]:
    """
    Read and parse a Rust source file.

    Returns:
        The root node and the bytes it was parsed from.

    Raises:
        ParseError: If the file cannot be read or parsed.
    """
    try:
        source = path.read_bytes()
    except OSError as e:
        raise ParseError(f"cannot read source file: {e}", path) from e
    return parse_source(source, path), source


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def iter_items(body: Node) -> Iterator[Tuple[Node, List[Node]]]:
    """
    Iterate over the items of a module body with their outer attributes.

    Args:
        body: A `source_file` or `declaration_list` node.

    Yields:
        (item, attributes) tuples in source order. Attributes are the
        `attribute_item` nodes directly preceding the item.
    """
    pending: List[Node] = []
    for child in body.named_children:
        if child.type == "attribute_item":
            pending.append(child)
        elif child.type in TRIVIA_NODES:
            continue
        else:
            yield child, pending
            pending = []


def attribute_body(attribute: Node, source: bytes) -> str:
    """Get the text between `#[` and `]` of an attribute item."""
    text = node_text(attribute, source).strip()
    if text.startswith("#[") and text.endswith("]"):
        return text[2:-1]
    return text


def attribute_path(attribute: Node, source: bytes) -> str:
    """
    Get the path of an attribute, without its arguments.

    `#[tauri::command(rename_all = "snake_case")]` gives `tauri::command`.
    """
    match = _ATTRIBUTE_PATH_RE.match(attribute_body(attribute, source))
    if match is None:
        return ""
    return re.sub(r"\s+", "", match.group(2))


def path_attribute_value(attributes: List[Node], source: bytes) -> Optional[str]:
    """Get the value of a `#[path = "..."]` attribute, if present."""
    for attribute in attributes:
        match = _PATH_VALUE_RE.match(attribute_body(attribute, source))
        if match:
            return match.group(1)
    return None


def is_test_only(attributes: List[Node], source: bytes) -> bool:
    """Check if an item is gated behind `#[cfg(test)]`."""
    return any(_CFG_TEST_RE.match(attribute_body(attribute, source)) for attribute in attributes)


def item_name(item: Node, source: bytes) -> str:
    name = item.child_by_field_name("name")
    if name is None:
        return ""
    return node_text(name, source)


def item_line(item: Node) -> int:
    return item.start_point[0] + 1


def _first_error_line(node: Node) -> Optional[int]:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            return _first_error_line(child)
    return None
