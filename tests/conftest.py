"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def package_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A working directory holding a minimal package.json."""
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "my-package", "version": "1.2.3", "private": False})
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """A pyproject.toml carrying a [tool.cut-release] table."""
    content = """\
[project]
name = "js-wrapper"
version = "0.1.0"

[tool.cut-release]
tag = "next"
preids = ["beta", "rc"]
message = "chore: release %s"
self-update = false
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject
