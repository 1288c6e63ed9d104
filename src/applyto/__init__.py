"""applyto -- resolve which AI-assistant instruction documents apply to a file."""

import logging

from applyto.errors import (
    DuplicateBaseDocument,
    InstructionError,
    MalformedDocument,
    MissingBaseDocument,
    PatternError,
    RegistryRootError,
)
from applyto.patterns import matches
from applyto.registry import Registry, load
from applyto.resolver import resolve

__all__ = [
    "DuplicateBaseDocument",
    "InstructionError",
    "MalformedDocument",
    "MissingBaseDocument",
    "PatternError",
    "Registry",
    "RegistryRootError",
    "load",
    "matches",
    "resolve",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
