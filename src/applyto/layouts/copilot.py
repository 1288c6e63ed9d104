"""GitHub Copilot repository instructions layout."""

from __future__ import annotations

from applyto.layouts import register
from applyto.models import Layout

COPILOT = Layout(
    id="copilot",
    base_path=".github/copilot-instructions.md",
    instructions_dir=".github/instructions",
    suffix=".instructions.md",
    description="Repository-wide copilot-instructions.md plus path-scoped *.instructions.md",
)

register(COPILOT)
