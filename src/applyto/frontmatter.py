"""Front-matter parsing for instruction documents.

A document opens with a block of ``key: value`` lines fenced by ``---``::

    ---
    title: Tests
    applyTo: "**/*.test.ts,**/*.spec.ts"
    ---
    Body text...

Values may be wrapped in single or double quotes. The block is validated
against :class:`~applyto.models.FrontMatter`; anything that does not fit is
a :class:`~applyto.errors.MalformedDocument`.
"""

from __future__ import annotations

import re

from pydantic import ValidationError

from applyto.errors import MalformedDocument, PatternError
from applyto.models import FrontMatter, InstructionDocument, IssueKind, LoadIssue, ParseOutcome
from applyto.patterns import compile_apply_to

_FENCE = "---"
_KEY_VALUE = re.compile(r"^(?P<key>[A-Za-z_][\w-]*)\s*:\s*(?P<value>.*)$")


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _format_validation_error(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "front matter"
        messages.append(f"{loc}: {err['msg']}")
    return "; ".join(messages)


def parse_front_matter(text: str) -> tuple[FrontMatter, str]:
    """Split a document into validated front matter and body.

    Args:
        text: Full document text.

    Returns:
        The validated front matter and the remaining body.

    Raises:
        MalformedDocument: If the block is missing, unterminated, contains
            a line that is not ``key: value``, repeats a key, or fails
            schema validation.
    """
    lines = text.removeprefix("\ufeff").splitlines(keepends=True)
    if not lines or lines[0].strip() != _FENCE:
        raise MalformedDocument("missing front matter (expected a leading '---' line)")

    fields: dict[str, str] = {}
    for index, line in enumerate(lines[1:], start=1):
        stripped = line.strip()
        if stripped == _FENCE:
            body = "".join(lines[index + 1 :])
            break
        if not stripped or stripped.startswith("#"):
            continue
        match = _KEY_VALUE.match(stripped)
        if match is None:
            raise MalformedDocument(f"line {index + 1}: expected 'key: value', got {stripped!r}")
        key = match.group("key")
        if key in fields:
            raise MalformedDocument(f"line {index + 1}: duplicate key {key!r}")
        fields[key] = _unquote(match.group("value"))
    else:
        raise MalformedDocument("unterminated front matter (no closing '---')")

    try:
        front_matter = FrontMatter.model_validate(fields)
    except ValidationError as e:
        raise MalformedDocument(_format_validation_error(e)) from e
    return front_matter, body


def parse_document(path: str, text: str, *, case_sensitive: bool = True) -> ParseOutcome:
    """Parse one instruction document without raising for document errors.

    Args:
        path: Relative path of the document (used in the result).
        text: Full document text.
        case_sensitive: Compile ``applyTo`` patterns case-sensitively.

    Returns:
        A ParseOutcome holding either the document or the LoadIssue that
        prevented it from loading.
    """
    try:
        front_matter, body = parse_front_matter(text)
    except MalformedDocument as e:
        return ParseOutcome(issue=LoadIssue(path, IssueKind.MALFORMED_DOCUMENT, str(e)))

    try:
        patterns = compile_apply_to(front_matter.apply_to or "", case_sensitive=case_sensitive)
    except PatternError as e:
        return ParseOutcome(issue=LoadIssue(path, IssueKind.PATTERN_ERROR, str(e)))

    document = InstructionDocument(
        path=path,
        title=front_matter.title,
        apply_to=front_matter.apply_to,
        patterns=patterns,
        body=body,
        description=front_matter.description,
        extras=front_matter.extras,
    )
    return ParseOutcome(document=document)
