"""Tests for the command-line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from imagemanifest import __version__
from imagemanifest.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def manifest(tmp_path):
    path = tmp_path / "list.csv"
    path.write_text(
        ";sample manifest\n"
        "alice,alice.webp\n"
        "crop,crop.webp,1,2,3,4\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def noisy_manifest(tmp_path):
    path = tmp_path / "noisy.csv"
    path.write_text(
        "alice,alice.webp\n"
        "bad,bad.webp,x,2,3,4\n"
        "lonely\n",
        encoding="utf-8",
    )
    return path


class TestShow:
    """Tests for the show command."""

    def test_table(self, runner, manifest):
        """Images and partial images are listed."""
        result = runner.invoke(main, ["show", str(manifest)])
        assert result.exit_code == 0
        assert "Images" in result.output
        assert "Partial images" in result.output
        assert "alice" in result.output
        assert "crop" in result.output

    def test_json(self, runner, manifest):
        """JSON output carries all three sequences."""
        result = runner.invoke(main, ["show", str(manifest), "--format", "json"])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["images"] == [{"name": "alice", "path": "alice.webp"}]
        assert data["partial_images"][0]["bx"] == 3
        assert data["warnings"] == []

    def test_yaml(self, runner, manifest):
        """YAML output parses back to the same data."""
        result = runner.invoke(main, ["show", str(manifest), "-f", "yaml"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["images"][0]["name"] == "alice"

    def test_warnings_do_not_fail(self, runner, noisy_manifest):
        """Warnings are reported but the command succeeds."""
        result = runner.invoke(main, ["show", str(noisy_manifest)])
        assert result.exit_code == 0
        assert f"warnings for image CSV file {noisy_manifest}" in result.output
        assert "failed to parse image coordinate ax" in result.output
        assert "invalid number of image CSV fields (1)" in result.output

    def test_fatal_error(self, runner, tmp_path):
        """A broken manifest exits with status 1."""
        path = tmp_path / "broken.csv"
        path.write_text('"unterminated,"quote\n')
        result = runner.invoke(main, ["show", str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_file(self, runner, tmp_path):
        """A missing manifest exits with status 1."""
        result = runner.invoke(main, ["show", str(tmp_path / "nope.csv")])
        assert result.exit_code == 1
        assert "cannot open manifest" in result.output

    def test_delimiter_override(self, runner, tmp_path):
        """Dialect flags change how the manifest is read."""
        path = tmp_path / "list.tsv"
        path.write_text("#note\na|a.webp\n")
        result = runner.invoke(
            main,
            ["show", str(path), "-d", "|", "--comment", "#", "-f", "json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["images"][0]["path"] == "a.webp"

    def test_config_file(self, runner, tmp_path):
        """Options can come from a YAML file."""
        config = tmp_path / "options.yaml"
        config.write_text('delimiter: "|"\n')
        path = tmp_path / "list.csv"
        path.write_text("a|a.webp\n")
        result = runner.invoke(main, ["show", str(path), "-c", str(config), "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["images"][0]["name"] == "a"

    def test_invalid_options(self, runner, manifest):
        """Conflicting dialect flags are rejected."""
        result = runner.invoke(main, ["show", str(manifest), "-d", ";"])
        assert result.exit_code == 1
        assert "Error loading options" in result.output

    def test_no_comment(self, runner, tmp_path):
        """--no-comment reads ';' lines as records."""
        path = tmp_path / "list.csv"
        path.write_text(";semi,semi.webp\n")
        result = runner.invoke(main, ["show", str(path), "--no-comment", "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["images"] == [{"name": ";semi", "path": "semi.webp"}]

    def test_comment_flags_conflict(self, runner, manifest):
        """--comment and --no-comment cannot be combined."""
        result = runner.invoke(main, ["show", str(manifest), "--comment", "#", "--no-comment"])
        assert result.exit_code == 1
        assert "conflict" in result.output


class TestCheck:
    """Tests for the check command."""

    def test_summary(self, runner, manifest):
        """Counts are summarized on one line."""
        result = runner.invoke(main, ["check", str(manifest)])
        assert result.exit_code == 0
        assert "1 images, 1 partial images, 0 warnings" in result.output

    def test_warnings_pass_without_strict(self, runner, noisy_manifest):
        """Warnings alone do not fail the check."""
        result = runner.invoke(main, ["check", str(noisy_manifest)])
        assert result.exit_code == 0
        assert "2 warnings" in result.output

    def test_strict(self, runner, noisy_manifest):
        """Strict mode fails on warnings."""
        result = runner.invoke(main, ["check", str(noisy_manifest), "--strict"])
        assert result.exit_code == 1

    def test_strict_clean(self, runner, manifest):
        """Strict mode passes a clean manifest."""
        result = runner.invoke(main, ["check", str(manifest), "--strict"])
        assert result.exit_code == 0

    def test_json(self, runner, noisy_manifest):
        """JSON output lists each warning with its details."""
        result = runner.invoke(main, ["check", str(noisy_manifest), "-f", "json"])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["images"] == 1
        assert data["partial_images"] == 0
        assert [w["kind"] for w in data["warnings"]] == [
            "invalid_coordinate",
            "invalid_field_count",
        ]
        assert data["warnings"][0]["field"] == "x"
        assert data["warnings"][1]["line"] == 3


def test_version(runner):
    """--version prints the package version."""
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
