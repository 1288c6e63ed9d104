"""Glob pattern matching for ``applyTo`` scopes.

Patterns are translated to regular expressions once, at load time, and
matched against whole slash-separated relative paths:

    *       any run of characters within one path segment
    **      any run of characters across segments; ``**/`` also matches
            zero segments, so ``**/*.tsx`` matches ``Button.tsx``
    ?       one character other than ``/``
    [abc]   character class, ``[!abc]`` or ``[^abc]`` to negate
    {a,b}   alternation, nestable
    \\x     literal ``x``

An ``applyTo`` value holds several patterns separated by commas; a document
applies when any one of them matches.
"""

from __future__ import annotations

import re
from functools import lru_cache

from applyto.errors import PatternError
from applyto.models import GlobPattern


def normalize_path(path: str) -> str:
    """Normalize a file path for matching.

    Backslashes become slashes; empty and ``.`` segments are dropped, which
    removes ``./`` prefixes, leading slashes and doubled separators.

    Args:
        path: A relative file path in any common notation.

    Returns:
        Slash-separated path with no leading slash.
    """
    text = path.strip().replace("\\", "/")
    return "/".join(part for part in text.split("/") if part not in ("", "."))


def split_patterns(apply_to: str) -> list[str]:
    """Split an ``applyTo`` value into individual patterns.

    Commas inside ``{...}`` or ``[...]`` belong to the pattern and do not
    split it. Surrounding whitespace is stripped and empty entries dropped.

    Args:
        apply_to: Raw ``applyTo`` front-matter value.

    Returns:
        The individual glob patterns, in written order.
    """
    parts: list[str] = []
    depth = 0
    in_class = False
    start = 0
    i = 0
    while i < len(apply_to):
        c = apply_to[i]
        if c == "\\":
            i += 2
            continue
        if in_class:
            if c == "]":
                in_class = False
        elif c == "[":
            in_class = True
        elif c == "{":
            depth += 1
        elif c == "}":
            depth = max(depth - 1, 0)
        elif c == "," and depth == 0:
            parts.append(apply_to[start:i])
            start = i + 1
        i += 1
    parts.append(apply_to[start:])
    return [p.strip() for p in parts if p.strip()]


def _class_end(pattern: str, start: int) -> int | None:
    """Return the index of the ``]`` closing the class opened at ``start``."""
    i = start + 1
    if i < len(pattern) and pattern[i] in "!^":
        i += 1
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    end = pattern.find("]", i)
    return end if end != -1 else None


def _at_segment_start(pattern: str, i: int, groups: list[bool]) -> bool:
    """True when position ``i`` begins a path segment.

    The first character of a brace alternative starts a segment exactly when
    its group opened at one.
    """
    if i == 0 or pattern[i - 1] == "/":
        return True
    return bool(groups) and pattern[i - 1] in "{," and groups[-1]


def _translate(pattern: str, original: str) -> str:
    """Translate one glob into a regular expression body.

    Brace groups become non-capturing regex groups, so the output grows
    linearly with the pattern.
    """
    out: list[str] = []
    # one entry per open brace group: did it open at a segment start
    groups: list[bool] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            if j - i == 1:
                out.append("[^/]*")
                i = j
                continue
            if _at_segment_start(pattern, i, groups) and j < n and pattern[j] == "/":
                out.append("(?:.*/)?")
                i = j + 1
            else:
                out.append(".*")
                i = j
            continue
        if c == "?":
            out.append("[^/]")
        elif c == "[":
            end = _class_end(pattern, i)
            if end is None:
                raise PatternError(original, "unterminated character class")
            body = pattern[i + 1 : end]
            negate = body[:1] in ("!", "^")
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
            # a class never matches "/", not even through a range
            out.append(f"[^/{body}]" if negate else f"(?!/)[{body}]")
            i = end + 1
            continue
        elif c == "{":
            if i + 1 < n and pattern[i + 1] == "}":
                raise PatternError(original, "empty brace group")
            groups.append(_at_segment_start(pattern, i, groups))
            out.append("(?:")
        elif c == "}":
            if not groups:
                raise PatternError(original, "unbalanced '}'")
            groups.pop()
            out.append(")")
        elif c == "," and groups:
            out.append("|")
        elif c == "\\":
            if i + 1 >= n:
                raise PatternError(original, "trailing backslash")
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(c))
        i += 1
    if groups:
        raise PatternError(original, "unbalanced '{'")
    return "".join(out)


@lru_cache(maxsize=512)
def _compile_regex(source: str, case_sensitive: bool) -> re.Pattern[str]:
    # patterns are anchored at the root; backslashes stay escapes
    pattern = source
    while pattern.startswith(("./", "/")):
        pattern = pattern[2:] if pattern.startswith("./") else pattern[1:]
    pattern = pattern.rstrip("/")
    if not pattern:
        raise PatternError(source, "empty pattern")
    # "src/" scopes everything below the directory
    if source.endswith("/"):
        pattern += "/**"
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(_translate(pattern, source), flags)


def compile_pattern(pattern: str, *, case_sensitive: bool = True) -> GlobPattern:
    """Compile a single glob pattern.

    Args:
        pattern: One glob expression (no top-level commas).
        case_sensitive: Match letter case exactly when True.

    Returns:
        The compiled pattern.

    Raises:
        PatternError: If the pattern is empty or malformed.
    """
    source = pattern.strip()
    return GlobPattern(source=source, regex=_compile_regex(source, case_sensitive))


def compile_apply_to(apply_to: str, *, case_sensitive: bool = True) -> tuple[GlobPattern, ...]:
    """Compile every pattern of an ``applyTo`` value.

    Args:
        apply_to: Raw comma-separated ``applyTo`` value.
        case_sensitive: Match letter case exactly when True.

    Returns:
        Compiled patterns in written order; empty when the value holds none.

    Raises:
        PatternError: On the first malformed pattern.
    """
    return tuple(
        compile_pattern(p, case_sensitive=case_sensitive) for p in split_patterns(apply_to)
    )


def matches(pattern: str, path: str, *, case_sensitive: bool = True) -> bool:
    """Return True if the glob pattern matches the file path.

    Args:
        pattern: One glob expression. An empty pattern never matches.
        path: Slash-separated relative file path.
        case_sensitive: Match letter case exactly when True.

    Raises:
        PatternError: If the pattern is malformed.
    """
    if not pattern.strip():
        return False
    regex = _compile_regex(pattern.strip(), case_sensitive)
    return regex.fullmatch(normalize_path(path)) is not None
