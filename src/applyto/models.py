"""Core data models for applyto."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from applyto.errors import MissingBaseDocument


class IssueKind(StrEnum):
    """Category of a non-fatal load problem.

    Attributes:
        PATTERN_ERROR: An ``applyTo`` pattern could not be compiled.
        MALFORMED_DOCUMENT: Front matter missing, unreadable, or invalid.
        MISSING_BASE_DOCUMENT: No unscoped base document was found.
    """

    PATTERN_ERROR = "pattern-error"
    MALFORMED_DOCUMENT = "malformed-document"
    MISSING_BASE_DOCUMENT = "missing-base-document"


class FrontMatter(BaseModel):
    """Validated front-matter block of an instruction document.

    Unknown keys are kept so callers can inspect them, but only ``title``
    and ``applyTo`` drive resolution.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    title: str = Field(min_length=1)
    apply_to: str | None = Field(default=None, alias="applyTo")
    description: str | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

    @property
    def extras(self) -> dict[str, str]:
        """Front-matter keys outside the schema."""
        return dict(self.model_extra or {})


@dataclass(frozen=True)
class GlobPattern:
    """One compiled ``applyTo`` glob.

    Args:
        source: The pattern as written in the document.
        regex: Compiled full-path matcher.
    """

    source: str
    regex: re.Pattern[str] = field(compare=False, repr=False)

    def matches(self, path: str) -> bool:
        """Return True if the normalized path matches this glob."""
        return self.regex.fullmatch(path) is not None


@dataclass(frozen=True)
class InstructionDocument:
    """An instruction document loaded from the configuration root.

    Args:
        path: Slash-separated path relative to the registry root.
        title: Document title from front matter.
        apply_to: Raw ``applyTo`` value, or None when absent.
        patterns: Compiled patterns; empty for the base document.
        body: Markdown text after the front matter.
        description: Optional description from front matter.
        extras: Other front-matter keys.
    """

    path: str
    title: str
    apply_to: str | None
    patterns: tuple[GlobPattern, ...]
    body: str
    description: str | None = None
    extras: dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def is_base(self) -> bool:
        """True when the document has no scope and applies everywhere."""
        return not self.patterns

    def matching_patterns(self, path: str) -> list[str]:
        """Return the source of every pattern that matches the path."""
        return [p.source for p in self.patterns if p.matches(path)]


@dataclass(frozen=True)
class LoadIssue:
    """A problem recorded while loading a registry.

    Args:
        path: Relative path of the document concerned.
        kind: Issue category.
        message: Human-readable explanation.
    """

    path: str
    kind: IssueKind
    message: str


@dataclass(frozen=True)
class ParseOutcome:
    """Tagged result of parsing one document: exactly one field is set."""

    document: InstructionDocument | None = None
    issue: LoadIssue | None = None

    @property
    def ok(self) -> bool:
        return self.document is not None


@dataclass(frozen=True)
class Layout:
    """Where a registry keeps its instruction documents.

    Args:
        id: Unique identifier (e.g., "copilot").
        base_path: Base document path relative to the root.
        instructions_dir: Directory scanned recursively for scoped documents.
        suffix: Filename suffix that marks an instruction document.
        description: Short explanation for listings.
    """

    id: str
    base_path: str
    instructions_dir: str
    suffix: str
    description: str = ""


@dataclass(frozen=True)
class Registry:
    """Immutable snapshot of the instruction documents under a root.

    Args:
        root: Configuration root the documents were read from.
        layout: Layout used to find the documents.
        base: The unscoped base document, or None if there is none.
        documents: Scoped documents, sorted by path.
        issues: Problems recorded while loading.
        case_sensitive: Whether patterns were compiled case-sensitively.
    """

    root: Path
    layout: Layout
    base: InstructionDocument | None
    documents: tuple[InstructionDocument, ...]
    issues: tuple[LoadIssue, ...] = ()
    case_sensitive: bool = True

    def all(self) -> list[InstructionDocument]:
        """Return every loaded document, base first.

        Returns:
            List of documents.
        """
        docs = list(self.documents)
        if self.base is not None:
            docs.insert(0, self.base)
        return docs

    def get(self, path: str) -> InstructionDocument | None:
        """Look up a loaded document by relative path."""
        for doc in self.all():
            if doc.path == path:
                return doc
        return None

    def require_base(self) -> InstructionDocument:
        """Return the base document.

        Raises:
            MissingBaseDocument: If the registry has none.
        """
        if self.base is None:
            raise MissingBaseDocument(
                f"No base document found (expected {self.layout.base_path})"
            )
        return self.base

    @property
    def ok(self) -> bool:
        """True when the load produced no issues."""
        return not self.issues


@dataclass(frozen=True)
class Match:
    """A scoped document that applies to a file.

    Args:
        document: The matching document.
        patterns: Sources of the patterns that matched.
    """

    document: InstructionDocument
    patterns: tuple[str, ...]


@dataclass(frozen=True)
class ResolutionResult:
    """Ordered instruction documents applying to one file.

    Args:
        path: Normalized path that was resolved.
        base: Base document, if the registry has one.
        matches: Scoped documents that apply, in registry order.
    """

    path: str
    base: InstructionDocument | None
    matches: tuple[Match, ...] = ()

    @property
    def documents(self) -> list[InstructionDocument]:
        """Base document first, then every matching scoped document."""
        docs = [m.document for m in self.matches]
        if self.base is not None:
            docs.insert(0, self.base)
        return docs

    @property
    def titles(self) -> list[str]:
        return [d.title for d in self.documents]
