"""Resolve which instruction documents apply to a file."""

from __future__ import annotations

from applyto.models import Match, Registry, ResolutionResult
from applyto.patterns import normalize_path


def resolve(registry: Registry, file_path: str) -> ResolutionResult:
    """Compute the ordered instruction documents for a file.

    The base document comes first when the registry has one. Every scoped
    document with at least one matching pattern follows, in registry order
    (sorted by document path). A document matched by several patterns is
    listed once, with all of its matching patterns.

    Args:
        registry: A loaded registry snapshot. Not modified.
        file_path: Slash-separated path relative to the registry root.

    Returns:
        The resolution result; base only (or empty) when nothing matches.
    """
    path = normalize_path(file_path)
    found: list[Match] = []
    for doc in registry.documents:
        hit = doc.matching_patterns(path)
        if hit:
            found.append(Match(document=doc, patterns=tuple(hit)))
    return ResolutionResult(path=path, base=registry.base, matches=tuple(found))
