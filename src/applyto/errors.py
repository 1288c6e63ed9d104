"""Exception taxonomy for instruction loading and resolution.

Per-document errors (PatternError, MalformedDocument) are caught by the
registry loader and recorded as load issues. Registry-level errors
(DuplicateBaseDocument, RegistryRootError) propagate to the caller.
"""

from __future__ import annotations


class InstructionError(Exception):
    """Base class for all applyto errors."""


class PatternError(InstructionError):
    """An ``applyTo`` glob pattern cannot be parsed.

    Args:
        pattern: The offending pattern text.
        reason: What is wrong with it.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class MalformedDocument(InstructionError):
    """A document's front matter is missing or fails validation."""


class MissingBaseDocument(InstructionError):
    """No base document exists where one is required."""


class DuplicateBaseDocument(InstructionError):
    """More than one unscoped document was found.

    Args:
        paths: Relative paths of every base candidate.
    """

    def __init__(self, paths: list[str]) -> None:
        self.paths = paths
        super().__init__(
            f"Found {len(paths)} base documents (expected one): {', '.join(paths)}"
        )


class RegistryRootError(InstructionError):
    """The configuration root does not exist or is not a directory."""
