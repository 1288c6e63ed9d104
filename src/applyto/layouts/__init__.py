"""Layout registry -- where each assistant keeps its instruction documents.

A layout names the base document path, the directory scanned for scoped
documents, and the filename suffix that marks them. Each layout module
registers itself at import time.
"""

from __future__ import annotations

from applyto.models import Layout

_registry: dict[str, Layout] = {}

DEFAULT_LAYOUT_ID = "copilot"


def register(layout: Layout) -> None:
    """Register a layout in the global registry.

    Args:
        layout: The layout to register.
    """
    _registry[layout.id] = layout


def get_layout(layout_id: str) -> Layout | None:
    """Look up a layout by ID.

    Args:
        layout_id: The layout identifier.

    Returns:
        The layout, or None if not found.
    """
    return _registry.get(layout_id)


def list_layouts() -> list[Layout]:
    """Return all registered layouts.

    Returns:
        List of all layouts.
    """
    return list(_registry.values())


def default_layout() -> Layout:
    """Return the layout used when none is requested."""
    return _registry[DEFAULT_LAYOUT_ID]


# Auto-import to trigger registration
from applyto.layouts import copilot  # noqa: E402, F401
