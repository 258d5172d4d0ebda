"""Tests for the ignore pattern system."""

import warnings
from pathlib import Path

from source_bundle.config import BundleSettings
from source_bundle.context import ProjectContext
from source_bundle.ignore import DEFAULTS, IgnoreSpec


class TestIgnoreSpec:
    """Test ignore pattern matching."""

    def test_default_patterns(self, tmp_path):
        ignore = IgnoreSpec(tmp_path)

        assert ignore.is_ignored("node_modules/react/index.js")
        assert ignore.is_ignored("packages/ui/node_modules/x.js")
        assert ignore.is_ignored("bun.lock")
        assert ignore.is_ignored("src-tauri/Cargo.lock")
        assert ignore.is_ignored("logs/debug.log")
        assert ignore.is_ignored("src/generated/source-code.ts")
        assert ignore.is_ignored(".source-snapshot.json")
        assert ignore.is_ignored(".github/workflows/ci.yml")
        assert ignore.is_ignored(".vscode/settings.json")

        assert not ignore.is_ignored("src/main.ts")
        assert not ignore.is_ignored("README.md")
        assert not ignore.is_ignored("docs/.github/note.md")  # Only root .github is excluded

    def test_custom_patterns(self, tmp_path):
        (tmp_path / ".sourcebundleignore").write_text("""
# Comments should be ignored
*.snap
fixtures/
!fixtures/keep.json
""")
        ignore = IgnoreSpec(tmp_path)

        assert ignore.is_ignored("tests/__snapshots__/a.snap")
        assert ignore.is_ignored("fixtures/data.json")
        assert not ignore.is_ignored("src/main.ts")

    def test_extra_patterns(self, tmp_path):
        ignore = IgnoreSpec(tmp_path, extra=["CLAUDE.md", "/dist/bundle.json"])

        assert ignore.is_ignored("CLAUDE.md")
        assert ignore.is_ignored("nested/CLAUDE.md")
        assert ignore.is_ignored("dist/bundle.json")
        assert not ignore.is_ignored("other/dist/bundle.json")

    def test_defaults_listed(self):
        assert "*.lock" in DEFAULTS
        assert "*.log" in DEFAULTS

    def test_compiles_without_deprecation_warnings(self, tmp_path):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            ignore = IgnoreSpec(tmp_path, extra=["CLAUDE.md"])
        assert ignore.is_ignored("CLAUDE.md")


class TestContextIgnore:
    """ProjectContext adds private files and generated outputs."""

    def test_private_files(self, tmp_path):
        ctx = ProjectContext(tmp_path, settings=BundleSettings())
        assert ctx.should_ignore("CLAUDE.md")
        assert ctx.should_ignore("CONTRIBUTING.md")
        assert ctx.should_ignore(Path("docs") / "CLAUDE.md")

    def test_configured_output_and_snapshot(self, tmp_path):
        settings = BundleSettings(output="public/bundle.json", format="json", snapshot_file="state/snap.json")
        ctx = ProjectContext(tmp_path, settings=settings)

        assert ctx.should_ignore("public/bundle.json")
        assert ctx.should_ignore("state/snap.json")
        assert not ctx.should_ignore("public/index.html")

    def test_absolute_output_inside_root(self, tmp_path):
        settings = BundleSettings(output=str(tmp_path / "out" / "b.json"), format="json")
        ctx = ProjectContext(tmp_path, settings=settings)
        assert ctx.should_ignore("out/b.json")

    def test_absolute_output_outside_root(self, tmp_path):
        root = tmp_path / "project"
        root.mkdir()
        settings = BundleSettings(output=str(tmp_path / "elsewhere.json"), format="json")
        ctx = ProjectContext(root, settings=settings)
        assert not ctx.should_ignore("elsewhere.json")

    def test_config_excludes(self, tmp_path):
        ctx = ProjectContext(tmp_path, settings=BundleSettings(exclude=["secrets/"]))
        assert ctx.should_ignore("secrets/key.json")
