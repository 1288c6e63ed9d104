"""Shared fixtures: build instruction trees under tmp_path."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

BASE_PATH = ".github/copilot-instructions.md"
SCOPED_DIR = ".github/instructions"


def doc_text(title: str | None = None, apply_to: str | None = None, body: str = "Body.\n") -> str:
    """Build document text with a front-matter block."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if apply_to is not None:
        lines.append(f'applyTo: "{apply_to}"')
    lines.append("---")
    return "\n".join(lines) + "\n" + body


WriteDoc = Callable[..., Path]


@pytest.fixture
def write_doc(tmp_path: Path) -> WriteDoc:
    """Return a helper writing a document at a path relative to tmp_path."""

    def _write(
        rel_path: str,
        title: str | None = None,
        apply_to: str | None = None,
        body: str = "Body.\n",
        raw: str | None = None,
    ) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        text = raw if raw is not None else doc_text(title, apply_to, body)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def repo(tmp_path: Path, write_doc: WriteDoc) -> Path:
    """A registry root with a base document and three scoped documents."""
    write_doc(BASE_PATH, title="Base", body="Follow the house style.\n")
    write_doc(f"{SCOPED_DIR}/tests.instructions.md", title="Tests", apply_to="**/*.test.ts")
    write_doc(
        f"{SCOPED_DIR}/typescript.instructions.md",
        title="TypeScript",
        apply_to="**/*.ts,**/*.tsx",
        body="Prefer strict types.\n",
    )
    write_doc(
        f"{SCOPED_DIR}/frontend/react.instructions.md",
        title="React",
        apply_to="src/components/**",
    )
    return tmp_path
