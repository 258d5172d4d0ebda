"""Shared test fixtures and utilities."""

import os
import shutil
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

from source_bundle.bundle_service import BundleDeps, BundleService
from source_bundle.config import BundleSettings
from source_bundle.context import ProjectContext
from source_bundle.snapshot import SnapshotStore


FIXED_NOW = datetime(2025, 8, 26, 2, 51, 17, 317000, tzinfo=timezone.utc)


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content: str = "test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content.encode("utf-8"))
        return file_path
    return _write


@pytest.fixture
def tracked(monkeypatch):
    """Replace git enumeration with a fixed list of paths.

    Returns a list; tests mutate it to change what is "tracked".
    """
    paths = []
    monkeypatch.setattr(
        "source_bundle.sources.list_tracked_files",
        lambda root, warnings=None: list(paths),
    )
    return paths


@pytest.fixture
def make_service(tmp_path):
    """Factory for a BundleService rooted at tmp_path with a fixed clock."""
    def _make(settings: BundleSettings = None, now=lambda: FIXED_NOW):
        ctx = ProjectContext(tmp_path, settings=settings or BundleSettings())
        return BundleService(deps=BundleDeps(
            ctx=ctx,
            store=SnapshotStore(ctx.snapshot_path),
            now=now,
        ))
    return _make


def _git(root, *args):
    subprocess.run(["git", *args], cwd=root, check=True, capture_output=True)


@pytest.fixture
def git_project(tmp_path):
    """A real git work tree with a few staged files."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    _git(tmp_path, "init", "-q")
    files = {
        "README.md": "# Demo\n",
        "src/main.ts": "export const x = 1;\n",
        "src/util/helpers.ts": "export function h() {}\n",
        "logs/app.log": "noise\n",
        "yarn.lock": "lock\n",
        "CLAUDE.md": "private\n",
        "assets/logo.png": None,
        "notes.bin": "binary-ish\n",
    }
    for rel, content in files.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if content is None:
            path.write_bytes(b"\x89PNG\r\n\x1a\n")
        else:
            path.write_text(content)
    _git(tmp_path, "add", "-A")
    return tmp_path


@pytest.fixture
def non_utf8_project(tmp_path):
    """A git work tree tracking ok.ts and a file whose name is Latin-1 bytes."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    if sys.platform != "linux":
        pytest.skip("file system rejects non-UTF-8 names")

    _git(tmp_path, "init", "-q")
    (tmp_path / "ok.ts").write_text("export const ok = 1;\n")
    with open(os.fsencode(tmp_path) + b"/caf\xe9.ts", "wb") as f:
        f.write(b"export const cafe = 1;\n")
    _git(tmp_path, "add", "-A")
    return tmp_path
