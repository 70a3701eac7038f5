"""Tests for command extraction."""

from pathlib import Path
from textwrap import dedent

import pytest

from commands.errors import ParseError
from commands.model import ModuleNode
from scanner.extractor import (
    extract_commands,
    find_candidates,
    is_collect_marker,
    is_framework_marker,
    select_commands,
)
from scanner.parser import parse_source


def module(source: str, path=("cmds",)) -> ModuleNode:
    data = dedent(source).encode("utf-8")
    return ModuleNode(path=tuple(path), file=Path("src/cmds.rs"), body=parse_source(data), source=data)


SOURCE = """
    #[tauri::command]
    #[auto_collect_command]
    pub fn greet() {}

    #[tauri::command]
    pub fn framework_only() {}

    pub fn plain() {}

    #[auto_collect_command]
    pub async fn marker_only() {}
"""


class TestMarkers:
    """Tests for marker recognition."""

    def test_collect_marker(self):
        assert is_collect_marker("auto_collect_command")
        assert is_collect_marker("tauri_helper::auto_collect_command")
        assert not is_collect_marker("auto_collect_commands")

    def test_framework_marker(self):
        assert is_framework_marker("tauri::command")
        assert not is_framework_marker("command")


class TestExtractCommands:
    """Tests for extract_commands in both collection modes."""

    def test_marked_only(self):
        """Only functions with the collection marker are collected by default."""
        commands = extract_commands(module(SOURCE), "app")

        assert [c.qualified_path for c in commands] == [
            "app::cmds::greet",
            "app::cmds::marker_only",
        ]

    def test_collect_all(self):
        """All-commands mode adds framework-marked functions in declaration order."""
        commands = extract_commands(module(SOURCE), "app", collect_all=True)

        assert [c.name for c in commands] == ["greet", "framework_only", "marker_only"]

    def test_candidates_are_tagged(self):
        """Candidates record which markers they carry."""
        candidates = {c.name: c for c in find_candidates(module(SOURCE), "app")}

        assert candidates["greet"].marked and candidates["greet"].framework
        assert not candidates["framework_only"].marked
        assert candidates["framework_only"].framework
        assert "plain" not in candidates

    def test_select_is_a_pure_filter(self):
        """Selecting never reorders candidates."""
        candidates = find_candidates(module(SOURCE), "app")

        selected = select_commands(candidates, collect_all=True)

        assert selected == candidates

    def test_root_module_path(self):
        """Functions in the crate root have no module segment."""
        commands = extract_commands(module(SOURCE, path=()), "app")

        assert commands[0].qualified_path == "app::greet"

    def test_nested_functions_are_ignored(self):
        """Functions inside functions, impls and traits are not candidates."""
        source = """
            pub fn outer() {
                #[auto_collect_command]
                fn inner() {}
            }

            pub struct State;

            impl State {
                #[auto_collect_command]
                pub fn method(&self) {}
            }
        """

        assert extract_commands(module(source), "app") == []

    def test_comments_between_attributes(self):
        """Doc comments and plain comments do not detach the marker."""
        source = """
            #[auto_collect_command]
            /// Says hello.
            // keep in sync with the frontend
            #[tauri::command(rename_all = "snake_case")]
            pub fn hello() {}
        """

        commands = extract_commands(module(source), "app")

        assert [c.name for c in commands] == ["hello"]
        assert commands[0].framework

    def test_marker_does_not_leak_to_next_item(self):
        """An attribute belongs only to the item right after it."""
        source = """
            #[auto_collect_command]
            pub struct NotAFunction;

            pub fn after_struct() {}
        """

        assert extract_commands(module(source), "app") == []

    def test_raw_identifier(self):
        """Raw identifiers are valid command names."""
        source = """
            #[auto_collect_command]
            pub fn r#match() {}
        """

        commands = extract_commands(module(source), "app")

        assert commands[0].qualified_path == "app::cmds::r#match"

    def test_line_numbers(self):
        """Candidates remember where they were declared."""
        commands = extract_commands(module(SOURCE), "app")

        assert commands[0].line == 4
        assert commands[0].location == "src/cmds.rs:4"


class TestParseSource:
    """Tests for parse_source."""

    def test_syntax_error(self):
        """Broken source raises ParseError."""
        with pytest.raises(ParseError):
            parse_source(b"fn broken( {")

    def test_valid_source(self):
        root = parse_source(b"fn ok() {}\n")

        assert root.type == "source_file"
