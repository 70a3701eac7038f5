"""Tests for renderers."""

import io
import re

from commands.model import CollectionArtifact, CommandEntry
from renderers import RENDERERS, to_array, to_bindings, to_handler
from renderers.invocation import command_paths


def artifact(*paths):
    return CollectionArtifact(entries=tuple(CommandEntry(p) for p in paths))


SAMPLE = artifact("app::cmds::greet", "app::cmds::sum", "plugin::util::ping")


def macro_arguments(output: str):
    body = re.search(r"!\[(.*)\]", output, re.DOTALL).group(1)
    return [arg.strip() for arg in body.split(",") if arg.strip()]


class TestHandlerRenderer:
    """Tests for the handler registration renderer."""

    def test_invocation(self):
        output = to_handler(SAMPLE)

        assert output == (
            "tauri::generate_handler![\n"
            "    app::cmds::greet,\n"
            "    app::cmds::sum,\n"
            "    plugin::util::ping,\n"
            "]"
        )

    def test_empty_artifact(self):
        assert to_handler(artifact()) == "tauri::generate_handler![]"

    def test_calling_crate_uses_crate_prefix(self):
        """The calling crate's own commands are written relative to `crate::`."""
        output = to_handler(SAMPLE, calling_crate="app")

        assert macro_arguments(output) == [
            "crate::cmds::greet",
            "crate::cmds::sum",
            "plugin::util::ping",
        ]

    def test_calling_crate_with_dash(self):
        assert command_paths(SAMPLE, calling_crate="plug-in") == SAMPLE.paths
        assert command_paths(artifact("plug_in::x"), calling_crate="plug-in") == ["crate::x"]


class TestBindingsRenderer:
    """Tests for the typed-binding renderer."""

    def test_invocation(self):
        output = to_bindings(SAMPLE)

        assert output.startswith("tauri_specta::collect_commands![")
        assert macro_arguments(output) == SAMPLE.paths

    def test_same_arguments_as_handler(self):
        """Handler and bindings differ only in the macro they wrap."""
        for calling_crate in (None, "app", "plugin"):
            handler = to_handler(SAMPLE, calling_crate)
            bindings = to_bindings(SAMPLE, calling_crate)

            assert macro_arguments(handler) == macro_arguments(bindings)
            assert handler.split("![", 1)[1] == bindings.split("![", 1)[1]


class TestArrayRenderer:
    """Tests for the array renderer."""

    def test_array(self):
        assert to_array(SAMPLE) == '["app::cmds::greet", "app::cmds::sum", "plugin::util::ping"]'

    def test_empty(self):
        assert to_array(artifact()) == "[]"

    def test_echo(self):
        """Echo writes one name per line to the given stream."""
        stream = io.StringIO()

        to_array(SAMPLE, echo=True, stream=stream)

        assert stream.getvalue().splitlines() == SAMPLE.paths

    def test_no_echo_by_default(self, capsys):
        to_array(SAMPLE)

        assert capsys.readouterr().err == ""

    def test_accepts_plain_strings(self):
        assert to_array(["a::b"]) == '["a::b"]'


def test_renderer_table():
    assert set(RENDERERS) == {"handler", "bindings", "array"}
