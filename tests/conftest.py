"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from src.health.layout import ProjectLayout


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Root of a minimal web project with an empty src/ tree."""
    root = tmp_path / "site"
    (root / "src").mkdir(parents=True)
    return root


@pytest.fixture
def layout(project: Path) -> ProjectLayout:
    return ProjectLayout.for_root(project)


@pytest.fixture
def write(project: Path) -> Callable[[str, str], Path]:
    """Write a file relative to the project root, creating directories."""

    def _write(rel: str, content: str = "") -> Path:
        path = project / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def clean_project(project: Path, write: Callable[[str, str], Path]) -> Path:
    """A project where every detector passes: empty tree, empty manifest."""
    write("SITE_MANIFEST.json", json.dumps({"components": []}))
    return project
