"""Integration tests for the CLI commands.

Git enumeration is replaced by the ``tracked`` fixture except in the one
test that runs against a real repository.
"""

import json

import pytest
from typer.testing import CliRunner

from source_bundle.cli import app


@pytest.fixture
def runner():
    """Create a CliRunner for in-process testing."""
    return CliRunner()


@pytest.fixture
def project(tmp_path, tracked, write_file):
    write_file("src/main.ts", "export const x = 1;\n")
    write_file("README.md", "# Demo\n")
    tracked.extend(["src/main.ts", "README.md"])
    return tmp_path


class TestGenerate:

    def test_first_run(self, runner, project):
        result = runner.invoke(app, ["generate", str(project), "-V", "1.0.0"])

        assert result.exit_code == 0, result.output
        assert "Version: 1.0.0" in result.output
        assert "Snapshot saved for version 1.0.0" in result.output
        assert "Source bundle generated" in result.output
        assert (project / "src" / "generated" / "source-code.ts").exists()
        assert (project / ".source-snapshot.json").exists()

    def test_same_version_rerun(self, runner, project):
        runner.invoke(app, ["generate", str(project), "-V", "1.0.0"])
        result = runner.invoke(app, ["generate", str(project), "-V", "1.0.0"])

        assert result.exit_code == 0, result.output
        assert "Same version (1.0.0)" in result.output
        assert "Snapshot saved" not in result.output

    def test_version_bump_shows_changes(self, runner, project, write_file, tracked):
        runner.invoke(app, ["generate", str(project), "-V", "1.0.0"])
        write_file("src/extra.ts", "a\nb\n")
        tracked.append("src/extra.ts")

        result = runner.invoke(app, ["generate", str(project), "-V", "1.1.0"])

        assert result.exit_code == 0, result.output
        assert "Previous version: 1.0.0" in result.output
        assert "+1 added" in result.output
        assert "src/extra.ts" in result.output

    def test_json_output(self, runner, project):
        result = runner.invoke(app, [
            "generate", str(project), "-V", "2.0.0", "-f", "json", "-o", "out/bundle.json",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads((project / "out" / "bundle.json").read_text(encoding="utf-8"))
        assert data["version"] == "2.0.0"
        assert sorted(data["files"]) == ["README.md", "src/main.ts"]

    def test_no_snapshot(self, runner, project):
        result = runner.invoke(app, ["generate", str(project), "-V", "1.0.0", "--no-snapshot"])

        assert result.exit_code == 0, result.output
        assert not (project / ".source-snapshot.json").exists()

    def test_custom_snapshot_location(self, runner, project):
        result = runner.invoke(app, [
            "generate", str(project), "-V", "1.0.0", "--snapshot", "meta/snap.json",
        ])

        assert result.exit_code == 0, result.output
        assert json.loads((project / "meta" / "snap.json").read_text())["version"] == "1.0.0"

    def test_invalid_format(self, runner, project):
        result = runner.invoke(app, ["generate", str(project), "-f", "xml"])

        assert result.exit_code == 1
        assert "Unknown output format" in result.output

    def test_invalid_directory(self, runner, tmp_path):
        result = runner.invoke(app, ["generate", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Invalid directory" in result.output

    def test_bad_config(self, runner, project):
        (project / ".source-bundle.yaml").write_text("format: [oops\n")

        result = runner.invoke(app, ["generate", str(project)])

        assert result.exit_code == 1

    def test_enumeration_failure(self, runner, tmp_path, monkeypatch):
        from source_bundle.errors import EnumerationError

        def fail(root, warnings=None):
            raise EnumerationError(root, "not a git repository")
        monkeypatch.setattr("source_bundle.sources.list_tracked_files", fail)

        result = runner.invoke(app, ["generate", str(tmp_path)])

        assert result.exit_code == 1
        assert "Could not list tracked files" in result.output
        assert not (tmp_path / ".source-snapshot.json").exists()

    def test_config_file_used(self, runner, project):
        (project / ".source-bundle.yaml").write_text("format: json\noutput: dist/bundle.json\n")

        result = runner.invoke(app, ["generate", str(project), "-V", "1.0.0"])

        assert result.exit_code == 0, result.output
        assert (project / "dist" / "bundle.json").exists()


class TestStatus:

    def test_without_snapshot(self, runner, project):
        result = runner.invoke(app, ["status", str(project)])

        assert result.exit_code == 0, result.output
        assert "No snapshot yet" in result.output

    def test_reports_changes(self, runner, project, write_file):
        runner.invoke(app, ["generate", str(project), "-V", "1.0.0"])
        write_file("README.md", "# Demo\n\nMore text\n")

        result = runner.invoke(app, ["status", str(project), "-V", "1.0.0"])

        assert result.exit_code == 0, result.output
        assert "Snapshot: 1.0.0" in result.output
        assert "~1 modified" in result.output

    def test_up_to_date(self, runner, project):
        runner.invoke(app, ["generate", str(project), "-V", "1.0.0"])

        result = runner.invoke(app, ["status", str(project), "-V", "1.0.0"])

        assert result.exit_code == 0, result.output
        assert "No changes since the snapshot" in result.output


class TestRealRepository:

    def test_generate_in_git_repo(self, runner, git_project):
        result = runner.invoke(app, ["generate", str(git_project), "-V", "0.1.0", "-f", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads((git_project / "source-bundle.json").read_text(encoding="utf-8"))
        assert "CLAUDE.md" not in data["files"]
        assert "yarn.lock" not in data["files"]
        assert list(data["images"]) == ["assets/logo.png"]

    def test_non_utf8_file_name_warns(self, runner, non_utf8_project):
        result = runner.invoke(app, ["generate", str(non_utf8_project), "-V", "1.0.0", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert "not valid UTF-8" in result.output
        data = json.loads((non_utf8_project / "source-bundle.json").read_text(encoding="utf-8"))
        assert list(data["files"]) == ["ok.ts"]
