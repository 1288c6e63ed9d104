"""Instruction registry loader.

Reads the base document and every scoped instruction document under a
configuration root into an immutable :class:`~applyto.models.Registry`.
Problems with individual documents are recorded and logged, and loading
continues; an ambiguous base document aborts the load.

Typical usage:
    >>> from applyto.registry import load
    >>> registry = load(Path("."))
    >>> [doc.title for doc in registry.all()]
"""

from __future__ import annotations

import logging
from pathlib import Path

from applyto.errors import DuplicateBaseDocument, RegistryRootError
from applyto.frontmatter import parse_document
from applyto.layouts import default_layout
from applyto.models import InstructionDocument, IssueKind, Layout, LoadIssue, Registry

__all__ = ["Registry", "discover", "load"]

logger = logging.getLogger(__name__)


def discover(root: Path, layout: Layout) -> list[str]:
    """List the instruction document paths a layout defines under a root.

    The base path comes first when it exists, followed by every file in the
    instructions directory (recursively) whose name ends with the suffix,
    sorted by path.

    Args:
        root: Configuration root.
        layout: Layout describing where documents live.

    Returns:
        Slash-separated paths relative to the root.
    """
    found: list[str] = []
    base = root / layout.base_path
    if base.is_file():
        found.append(layout.base_path)

    scoped_dir = root / layout.instructions_dir
    if scoped_dir.is_dir():
        scoped = sorted(
            p.relative_to(root).as_posix()
            for p in scoped_dir.rglob(f"*{layout.suffix}")
            if p.is_file()
        )
        found.extend(p for p in scoped if p != layout.base_path)
    return found


def _read(root: Path, rel_path: str) -> str | LoadIssue:
    try:
        return (root / rel_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return LoadIssue(rel_path, IssueKind.MALFORMED_DOCUMENT, f"cannot read file: {e}")


def _record(issues: list[LoadIssue], issue: LoadIssue) -> None:
    logger.warning("Skipping %s: %s", issue.path, issue.message)
    issues.append(issue)


def load(
    root: Path | str,
    layout: Layout | None = None,
    *,
    case_sensitive: bool = True,
) -> Registry:
    """Load every instruction document under a configuration root.

    Args:
        root: Configuration root directory.
        layout: Where documents live. Defaults to the copilot layout.
        case_sensitive: Compile ``applyTo`` patterns case-sensitively.

    Returns:
        A fresh, immutable registry snapshot.

    Raises:
        RegistryRootError: If the root is not a directory.
        DuplicateBaseDocument: If more than one document has no ``applyTo``.
    """
    root = Path(root)
    layout = layout or default_layout()
    if not root.is_dir():
        raise RegistryRootError(f"Registry root is not a directory: {root}")

    issues: list[LoadIssue] = []
    base_candidates: list[InstructionDocument] = []
    scoped: list[InstructionDocument] = []

    for rel_path in discover(root, layout):
        text = _read(root, rel_path)
        if isinstance(text, LoadIssue):
            _record(issues, text)
            continue

        outcome = parse_document(rel_path, text, case_sensitive=case_sensitive)
        doc = outcome.document
        if doc is None:
            if outcome.issue is not None:
                _record(issues, outcome.issue)
            continue

        if rel_path == layout.base_path and not doc.is_base:
            _record(
                issues,
                LoadIssue(
                    rel_path,
                    IssueKind.MALFORMED_DOCUMENT,
                    "base document must not declare applyTo",
                ),
            )
            continue

        if doc.is_base:
            base_candidates.append(doc)
        else:
            scoped.append(doc)
        logger.debug("Loaded %s (%s)", rel_path, doc.title)

    if len(base_candidates) > 1:
        raise DuplicateBaseDocument([d.path for d in base_candidates])

    base = base_candidates[0] if base_candidates else None
    if base is None:
        logger.warning("No base document found at %s; resolving without one", layout.base_path)
        issues.append(
            LoadIssue(
                layout.base_path,
                IssueKind.MISSING_BASE_DOCUMENT,
                "no base document found; resolving without one",
            )
        )

    return Registry(
        root=root,
        layout=layout,
        base=base,
        documents=tuple(sorted(scoped, key=lambda d: d.path)),
        issues=tuple(issues),
        case_sensitive=case_sensitive,
    )
