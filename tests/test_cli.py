"""Tests for the command line interface."""

import pytest

import cli


class TestScan:
    """Tests for `cmdcollect scan`."""

    def test_scan_writes_artifact(self, scenario, capsys, monkeypatch):
        monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)

        assert cli.main(["scan", str(scenario / "app")]) == 0

        out = capsys.readouterr().out.strip()
        assert out.endswith("commands.txt")
        assert (scenario / "target" / "command_collector" / "commands.txt").is_file()

    def test_cargo_directives(self, scenario, capsys, monkeypatch):
        """--cargo prints rerun-if-changed for every file read."""
        monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)

        assert cli.main(["scan", str(scenario), "--cargo"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert all(line.startswith("cargo:") for line in lines)
        assert any(line.endswith("cmds.rs") for line in lines)
        assert not any(line.endswith("orphan.rs") for line in lines)

    def test_cargo_manifest_dir_default(self, scenario, capsys, monkeypatch):
        """Without a root argument the crate being built locates the workspace."""
        monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)
        monkeypatch.setenv("CARGO_MANIFEST_DIR", str(scenario / "plugin"))

        assert cli.main(["scan"]) == 0

    def test_manifest_error(self, tmp_path, capsys):
        assert cli.main(["scan", str(tmp_path)]) == 1
        assert "Error:" in capsys.readouterr().err


class TestRender:
    """Tests for `cmdcollect render`."""

    def test_render_after_scan(self, scenario, capsys, monkeypatch):
        monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)
        cli.main(["scan", str(scenario), "--collect-all"])
        capsys.readouterr()

        assert cli.main(["render", "array", str(scenario)]) == 0

        out = capsys.readouterr().out.strip()
        assert out == (
            '["app::cmds::greet", "app::cmds::sum", '
            '"plugin::util::ping", "plugin::util::internal_helper"]'
        )

    def test_render_to_file(self, scenario, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)
        cli.main(["scan", str(scenario)])
        output = tmp_path / "handler.rs"

        assert cli.main([
            "render", "handler", str(scenario),
            "--calling-crate", "app", "-o", str(output),
        ]) == 0

        text = output.read_text(encoding="utf-8")
        assert "crate::cmds::greet," in text
        assert "plugin::util::ping," in text

    def test_echo_requires_array_shape(self, scenario, capsys):
        """--echo is rejected for the invocation shapes."""
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["render", "handler", str(scenario), "--echo"])

        assert excinfo.value.code == 2
        assert "--echo only applies to the array shape" in capsys.readouterr().err

    def test_missing_artifact(self, scenario, capsys, monkeypatch):
        """Rendering before scanning fails with a pointer to the scan step."""
        monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)

        assert cli.main(["render", "bindings", str(scenario)]) == 1
        assert "cmdcollect scan" in capsys.readouterr().err
