"""Shared fixtures: small Cargo workspaces written to a temporary directory."""

from pathlib import Path
from textwrap import dedent

import pytest


def write_files(root: Path, files: dict) -> Path:
    """Write {relative path: content} under root and return root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content).lstrip("\n"), encoding="utf-8")
    return root


def package_manifest(name: str) -> str:
    return f'[package]\nname = "{name}"\nversion = "0.1.0"\nedition = "2021"\n'


SCENARIO = {
    "Cargo.toml": """
        [workspace]
        members = ["app", "plugin"]
    """,
    "app/Cargo.toml": package_manifest("app"),
    "app/src/lib.rs": """
        mod cmds;

        pub fn run() {}
    """,
    "app/src/cmds.rs": """
        use tauri_helper::auto_collect_command;

        #[tauri::command]
        #[auto_collect_command]
        pub fn greet(name: String) -> String {
            format!("Hello, {}!", name)
        }

        pub fn not_a_command() {}

        #[tauri::command]
        #[auto_collect_command]
        pub fn sum(a: i32, b: i32) -> i32 {
            a + b
        }
    """,
    "app/src/orphan.rs": """
        #[auto_collect_command]
        pub fn never_compiled() {}
    """,
    "plugin/Cargo.toml": package_manifest("plugin"),
    "plugin/src/lib.rs": """
        pub mod util;
    """,
    "plugin/src/util/mod.rs": """
        #[tauri::command]
        #[auto_collect_command]
        pub fn ping() -> &'static str {
            "pong"
        }

        #[tauri::command]
        pub fn internal_helper() {}
    """,
}


@pytest.fixture
def write_tree(tmp_path):
    """Return a function writing a file mapping into the temporary directory."""
    def _write(files: dict) -> Path:
        return write_files(tmp_path, files)
    return _write


@pytest.fixture
def scenario(tmp_path) -> Path:
    """Workspace with an `app` and a `plugin` crate."""
    return write_files(tmp_path, SCENARIO)
