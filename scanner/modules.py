"""
Module tree construction for a crate.

Only modules declared with `mod` items are part of a crate. Starting from
the crate's entry file, declarations are followed depth-first in source
order; files that sit in the source directory without being declared are
never visited.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from commands.errors import ModuleResolutionError
from commands.model import CrateUnit, ModuleNode
from .parser import (
    is_test_only,
    item_line,
    item_name,
    iter_items,
    parse_file,
    path_attribute_value,
)

logger = logging.getLogger(__name__)

# Files whose submodules live next to them rather than in a sibling directory
MOD_RS_NAMES = {"mod.rs", "lib.rs", "main.rs"}


class ModuleGraphWalker:
    """
    Builds the declared module tree of one crate.

    Declared submodules without a backing file are recoverable: they are
    recorded in `diagnostics` and their subtree is skipped. Unreadable or
    unparsable files raise ParseError.
    """

    def __init__(self, crate: CrateUnit):
        self.crate = crate
        self.diagnostics: List[ModuleResolutionError] = []
        self.files: List[Path] = []
        self._stack: List[Path] = []

    def build(self) -> ModuleNode:
        """Parse the entry file and build the full module tree."""
        entry = self.crate.entry.resolve()
        return self._visit_file(entry, (), mod_rs=True)

    def walk(self) -> List[ModuleNode]:
        """Return the crate's modules in declaration order, parents first."""
        return list(self.build().walk())

    def _visit_file(self, file: Path, module_path: Tuple[str, ...], mod_rs: bool) -> ModuleNode:
        if file not in self.files:
            self.files.append(file)
        root, source = parse_file(file)

        node = ModuleNode(path=module_path, file=file, body=root, source=source)
        child_dir = file.parent if mod_rs else file.parent / file.stem
        self._stack.append(file)
        try:
            self._collect_children(node, child_dir, inline=False)
        finally:
            self._stack.pop()
        return node

    def _collect_children(self, node: ModuleNode, child_dir: Path, inline: bool) -> None:
        source = node.source
        for item, attributes in iter_items(node.body):
            if item.type != "mod_item":
                continue
            if is_test_only(attributes, source):
                continue

            name = item_name(item, source)
            child_path = node.path + (name,)
            path_value = path_attribute_value(attributes, source)
            body = item.child_by_field_name("body")

            if body is not None:
                child = ModuleNode(path=child_path, file=node.file, body=body, source=source)
                inline_dir = child_dir / (path_value or _file_stem(name))
                self._collect_children(child, inline_dir, inline=True)
                node.children.append(child)
                continue

            try:
                child_file, mod_rs = self._resolve(node, name, path_value, child_dir, inline)
            except ModuleResolutionError as e:
                e.module = "::".join(child_path)
                self.diagnostics.append(e)
                logger.warning("skipping module `%s`: %s", e.module, e)
                continue

            logger.debug("module %s -> %s (line %d)", "::".join(child_path), child_file, item_line(item))
            node.children.append(self._visit_file(child_file, child_path, mod_rs))

    def _resolve(
        self,
        parent: ModuleNode,
        name: str,
        path_value: Optional[str],
        child_dir: Path,
        inline: bool,
    ) -> Tuple[Path, bool]:
        """
        Find the file backing a `mod name;` declaration.

        Returns:
            The resolved file and whether it is a mod-rs style file.

        Raises:
            ModuleResolutionError: If no backing file exists, or the file is
                one of the declaring module's own ancestors.
        """
        if path_value is not None:
            base = child_dir if inline else parent.file.parent
            candidate = (base / path_value).resolve()
            if not candidate.is_file():
                raise ModuleResolutionError(
                    f"`#[path = \"{path_value}\"]` for module `{name}` does not exist",
                    candidate,
                )
            return self._not_ancestor(candidate, name), True

        stem = _file_stem(name)
        flat = child_dir / f"{stem}.rs"
        nested = child_dir / stem / "mod.rs"

        if flat.is_file():
            if nested.is_file():
                ambiguous = ModuleResolutionError(
                    f"both {flat.name} and {stem}/mod.rs exist, using {flat.name}",
                    flat,
                    module="::".join(parent.path + (name,)),
                )
                self.diagnostics.append(ambiguous)
                logger.warning("ambiguous module `%s`: %s", ambiguous.module, ambiguous)
            return self._not_ancestor(flat.resolve(), name), False
        if nested.is_file():
            return self._not_ancestor(nested.resolve(), name), True

        raise ModuleResolutionError(
            f"file not found for module `{name}` (looked for {flat} and {nested})",
            parent.file,
        )

    def _not_ancestor(self, file: Path, name: str) -> Path:
        if file in self._stack:
            raise ModuleResolutionError(f"module `{name}` includes one of its own ancestors", file)
        return file


def walk_crate(crate: CrateUnit) -> List[ModuleNode]:
    """Return the declared modules of a crate in declaration order."""
    return ModuleGraphWalker(crate).walk()


def _file_stem(name: str) -> str:
    return name[2:] if name.startswith("r#") else name
