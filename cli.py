#!/usr/bin/env python3
"""
Command Collector CLI

Collects marked command functions across a Cargo workspace into an artifact
at build time, and renders that artifact into registration code later.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from commands.artifact import artifact_path, read_artifact
from commands.errors import CollectorError
from renderers import RENDERERS
from scanner.builder import CollectorOptions, generate_command_file
from scanner.manifest import find_workspace_root


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="cmdcollect",
        description="Collect command functions across a Cargo workspace and render them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cmdcollect scan                    # Scan the workspace around $CARGO_MANIFEST_DIR or .
  cmdcollect scan --cargo            # Also print cargo:rerun-if-changed directives
  cmdcollect scan . --collect-all    # Collect every #[tauri::command] (not recommended)
  cmdcollect render handler          # tauri::generate_handler![...]
  cmdcollect render bindings -o src/commands.rs
  cmdcollect render array --echo     # Print the names to stderr as well
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every module and command found",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Scan the workspace and write the command artifact")
    _add_root_argument(scan)
    scan.add_argument(
        "--collect-all",
        action="store_true",
        help="Collect every #[tauri::command] function, even without #[auto_collect_command]",
    )
    scan.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="Number of crates scanned in parallel (default: 1)",
    )
    scan.add_argument(
        "--cargo",
        action="store_true",
        help="Print cargo:rerun-if-changed and cargo:warning directives for build scripts",
    )

    render = subparsers.add_parser("render", help="Render the command artifact")
    render.add_argument(
        "shape",
        choices=["handler", "bindings", "array"],
        help="Output shape",
    )
    _add_root_argument(render)
    render.add_argument(
        "--calling-crate",
        type=str,
        default=None,
        help="Crate the output is compiled into; its commands are written as crate::...",
    )
    render.add_argument(
        "--echo",
        action="store_true",
        help="Also print each command name to stderr (array shape only)",
    )
    render.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parsed = parser.parse_args(args)
    if parsed.command == "render" and parsed.echo and parsed.shape != "array":
        render.error("--echo only applies to the array shape")
    return parsed


def _add_root_argument(parser):
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Directory inside the workspace (default: $CARGO_MANIFEST_DIR or current directory)",
    )


def _workspace_root(parsed) -> Path:
    start = parsed.root or os.environ.get("CARGO_MANIFEST_DIR") or "."
    return find_workspace_root(Path(start), single_crate=True)


def run_scan(parsed) -> int:
    root = _workspace_root(parsed)
    options = CollectorOptions(collect_all=parsed.collect_all, jobs=max(1, parsed.jobs))
    path, commands = generate_command_file(root, options)

    if parsed.cargo:
        for source in commands.sources:
            print(f"cargo:rerun-if-changed={source}")
        for diagnostic in commands.diagnostics:
            print(f"cargo:warning={diagnostic}")
    else:
        for diagnostic in commands.diagnostics:
            print(f"Warning: {diagnostic}", file=sys.stderr)
        print(path)

    return 0


def run_render(parsed) -> int:
    root = _workspace_root(parsed)
    artifact = read_artifact(artifact_path(root))

    render = RENDERERS[parsed.shape]
    if parsed.shape == "array":
        output = render(artifact, parsed.calling_crate, echo=parsed.echo)
    else:
        output = render(artifact, parsed.calling_crate)

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output + "\n", encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if parsed.command == "scan":
            return run_scan(parsed)
        return run_render(parsed)
    except CollectorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
