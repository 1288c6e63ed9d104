"""Compose the applicable instruction documents into one Markdown context.

The output is what an assistant would read for a file: the base document
followed by every scoped document that applies, each under its title and
source path.
"""

from __future__ import annotations

from importlib.resources import files as resource_files

from jinja2 import Environment, StrictUndefined

from applyto.models import ResolutionResult

_TEMPLATE_NAME = "context.md.j2"


def _load_template(name: str) -> str:
    """Load a Jinja2 template shipped with the package.

    Args:
        name: Template filename under ``applyto/templates``.

    Returns:
        Raw Jinja2 template string.
    """
    return (resource_files("applyto") / "templates" / name).read_text(encoding="utf-8")


_env = Environment(
    autoescape=False,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)


def render_context(result: ResolutionResult) -> str:
    """Render the resolved documents as one Markdown text.

    Args:
        result: Resolution for a single file.

    Returns:
        Markdown with one section per document, base first.
    """
    template = _env.from_string(_load_template(_TEMPLATE_NAME))
    sections = [
        {"title": doc.title, "path": doc.path, "body": doc.body.strip()}
        for doc in result.documents
    ]
    return template.render(path=result.path, sections=sections)
