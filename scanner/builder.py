"""Scan orchestration: workspace -> crates -> modules -> commands -> artifact."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from commands.artifact import artifact_path, write_artifact
from commands.model import CommandList, CrateUnit
from .extractor import extract_commands
from .manifest import load_crate, resolve_workspace
from .modules import ModuleGraphWalker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectorOptions:
    """
    Options for a scan.

    collect_all: Also collect functions that only carry the framework's
        command marker. Prefer marking commands explicitly; this picks up
        every such function in every workspace member.
    jobs: Number of crates scanned in parallel. Never changes the output.
    """

    collect_all: bool = False
    jobs: int = 1


def scan_crate(crate: CrateUnit, collect_all: bool = False) -> CommandList:
    """
    Collect the commands of a single crate.

    Args:
        crate: The crate to scan.
        collect_all: Collection mode, see CollectorOptions.

    Returns:
        CommandList holding the crate's commands, diagnostics and the
        source files read.
    """
    commands = CommandList()
    walker = ModuleGraphWalker(crate)
    modules = walker.walk()

    for file in walker.files:
        commands.add_source(file)
    for error in walker.diagnostics:
        commands.add_diagnostic(error.message, error.path)

    for module in modules:
        for candidate in extract_commands(module, crate.ident, collect_all):
            commands.add(candidate)

    logger.debug("crate %s: %d modules, %d commands", crate.package_name, len(modules), len(commands))
    return commands


def collect_commands(root: Path, options: Optional[CollectorOptions] = None) -> CommandList:
    """
    Scan a workspace and collect its commands.

    Crates are scanned in manifest order, or in parallel when `jobs > 1`;
    either way their results are merged in manifest order, so the list is
    the same for every run over an unchanged tree.

    Args:
        root: Workspace root directory.
        options: Scan options (default: marked commands only, one job).

    Returns:
        CommandList with every collected command.
    """
    if options is None:
        options = CollectorOptions()

    workspace = resolve_workspace(root)
    result = CommandList()
    for manifest in workspace.manifests:
        result.add_source(manifest)

    crates: List[CrateUnit] = []
    for member in workspace.members:
        crate = load_crate(member)
        if crate is None:
            logger.debug("skipping virtual manifest at %s", member)
            continue
        crates.append(crate)

    if options.jobs > 1 and len(crates) > 1:
        with ThreadPoolExecutor(max_workers=options.jobs) as pool:
            per_crate = list(pool.map(lambda c: scan_crate(c, options.collect_all), crates))
    else:
        per_crate = [scan_crate(crate, options.collect_all) for crate in crates]

    for commands in per_crate:
        result.extend(commands)

    if not len(result):
        logger.warning(
            "no commands were collected; mark functions with #[auto_collect_command]"
        )
    return result


def generate_command_file(
    root: Path,
    options: Optional[CollectorOptions] = None,
    target_dir: Optional[Path] = None,
) -> Tuple[Path, CommandList]:
    """
    Scan a workspace and write the command artifact.

    Returns:
        The artifact path and the collected commands.
    """
    commands = collect_commands(root, options)
    path = artifact_path(root, target_dir)
    write_artifact(commands.entries, path)
    logger.info("wrote %d commands to %s", len(commands), path)
    return path, commands
