# =============================================================================
# test_cli.py - Compiler CLI Tests
# =============================================================================
# Tests for the inkasm command: output files, policies and exit codes.
# =============================================================================

import pytest
from click.testing import CliRunner

from inkasm.cli.errors import ExitCode
from inkasm.cli.inkasm import main


STORY = """Do you like it?
+ [Yes] -> like
+ [No] -> hate
=== like
Thank you!
-> END
=== hate
Oh, I see
-> END
"""

STORY_OUTPUT = b"P;Do you like it?|Q;Yes;00039;No;00055|P;Thank you!|E;|P;Oh, I see|E;"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def story(tmp_path):
    """Write the sample story to a temporary script file."""
    path = tmp_path / "story.ink"
    path.write_text(STORY, encoding="utf-8")
    return path


class TestCompileCommand:
    """Test successful compilations."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Compile branching-dialogue scripts" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "inkasm" in result.output

    def test_default_output_name(self, runner, story):
        result = runner.invoke(main, [str(story)])
        assert result.exit_code == ExitCode.SUCCESS
        assert story.with_suffix(".inkb").read_bytes() == STORY_OUTPUT

    def test_explicit_output(self, runner, story, tmp_path):
        out = tmp_path / "out.bin"
        result = runner.invoke(main, [str(story), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_bytes() == STORY_OUTPUT

    def test_symbols_and_listing(self, runner, story, tmp_path):
        sym = tmp_path / "story.sym"
        lst = tmp_path / "story.lst"
        result = runner.invoke(main, [str(story), "-s", str(sym), "-l", str(lst)])
        assert result.exit_code == 0
        assert "hate 00055\nlike 00039\n" in sym.read_text(encoding="utf-8")
        assert "Label Table" in lst.read_text(encoding="utf-8")

    def test_verbose(self, runner, story):
        result = runner.invoke(main, [str(story), "-v"])
        assert result.exit_code == 0
        assert "Policies: unclassified=truncate, duplicate-labels=overwrite" in result.output
        assert "2 labels" in result.output

    def test_multiple_inputs(self, runner, story, tmp_path):
        other = tmp_path / "other.ink"
        other.write_text("Hello\n-> END", encoding="utf-8")
        result = runner.invoke(main, [str(story), str(other)])
        assert result.exit_code == 0
        assert other.with_suffix(".inkb").read_bytes() == b"P;Hello|E;"


class TestPolicyOptions:
    """Test unclassified and duplicate-label handling from the command line."""

    def test_truncation_warns(self, runner, tmp_path):
        script = tmp_path / "notes.ink"
        script.write_text("Hello\n* note\nWorld", encoding="utf-8")
        result = runner.invoke(main, [str(script)])
        assert result.exit_code == 0
        assert "stopped at unrecognized line '* note'" in result.output
        assert script.with_suffix(".inkb").read_bytes() == b"P;Hello|"

    def test_strict_fails_on_unclassified(self, runner, tmp_path):
        script = tmp_path / "notes.ink"
        script.write_text("Hello\n* note\nWorld", encoding="utf-8")
        result = runner.invoke(main, ["--strict", str(script)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "unrecognized line" in result.output
        assert not script.with_suffix(".inkb").exists()

    def test_duplicate_labels_error(self, runner, tmp_path):
        script = tmp_path / "dup.ink"
        script.write_text("=== a\nHello\n=== a\nWorld", encoding="utf-8")
        result = runner.invoke(main, ["--duplicate-labels", "error", str(script)])
        assert result.exit_code == 1
        assert "duplicate label 'a'" in result.output

    def test_environment_policy(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "error")
        script = tmp_path / "notes.ink"
        script.write_text("Hello\n* note", encoding="utf-8")
        result = runner.invoke(main, [str(script)])
        assert result.exit_code == 1

    def test_option_beats_environment(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "error")
        script = tmp_path / "notes.ink"
        script.write_text("Hello\n* note", encoding="utf-8")
        result = runner.invoke(main, ["--unclassified", "truncate", str(script)])
        assert result.exit_code == 0

    def test_invalid_environment_policy(self, runner, story, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "skip")
        result = runner.invoke(main, [str(story)])
        assert result.exit_code == ExitCode.INVALID_ARGS


class TestFailures:
    """Test error reporting and exit codes."""

    def test_unresolved_label(self, runner, tmp_path):
        script = tmp_path / "broken.ink"
        script.write_text("Hello\n+ [Go] -> nowhere", encoding="utf-8")
        result = runner.invoke(main, [str(script)])
        assert result.exit_code == 1
        assert "undefined label 'nowhere'" in result.output
        assert "1 error, 0 warnings" in result.output

    def test_errors_from_several_files_reported_together(self, runner, tmp_path):
        first = tmp_path / "first.ink"
        first.write_text("+ broken", encoding="utf-8")
        second = tmp_path / "second.ink"
        second.write_text("Hi\n- oops", encoding="utf-8")
        result = runner.invoke(main, [str(first), str(second)])
        assert result.exit_code == 1
        assert "no '[prompt]'" in result.output
        assert "malformed terminator" in result.output
        assert "2 errors" in result.output

    def test_output_with_several_inputs(self, runner, story, tmp_path):
        other = tmp_path / "other.ink"
        other.write_text("Hello", encoding="utf-8")
        result = runner.invoke(main, [str(story), str(other), "-o", str(tmp_path / "x.inkb")])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "require a single input file" in result.output

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.ink")])
        assert result.exit_code == 2

    def test_no_input(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == 2

    def test_script_not_utf8(self, runner, tmp_path):
        script = tmp_path / "latin1.ink"
        script.write_bytes("Caf\xe9".encode("latin-1"))
        result = runner.invoke(main, [str(script)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "not valid UTF-8" in result.output

    def test_output_directory_missing(self, runner, story, tmp_path):
        out = tmp_path / "nowhere" / "story.inkb"
        result = runner.invoke(main, [str(story), "-o", str(out)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert f"cannot access {out}" in result.output
