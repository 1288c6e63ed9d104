"""applyto commands -- resolve instruction documents for a file.

Commands:
    resolve   List the instruction documents that apply to a file
    render    Print the composed instruction context for a file
    list      List every loaded instruction document
    check     Report documents that failed to load
    layouts   List supported repository layouts

Usage:
    $ applyto resolve src/components/Button.tsx
    $ applyto resolve src/foo.test.ts --explain
    $ applyto render src/foo.test.ts --output context.md
    $ applyto check --root path/to/repo

Exit codes:
    0  success
    1  output produced, but the base document is missing or documents
       were skipped (one warning per problem on stderr)
    2  fatal configuration error
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from applyto.errors import InstructionError
from applyto.layouts import DEFAULT_LAYOUT_ID, get_layout, list_layouts
from applyto.models import Registry, ResolutionResult
from applyto.registry import load
from applyto.render import render_context
from applyto.resolver import resolve as resolve_path

app = typer.Typer(
    help="Resolve which AI-assistant instruction documents apply to a file.",
    no_args_is_help=True,
)

RootOption = Annotated[
    Path, typer.Option("--root", help="Configuration root (default: current directory).")
]
LayoutOption = Annotated[str, typer.Option("--layout", help="Layout ID (see 'layouts').")]
BaseOption = Annotated[
    str | None, typer.Option("--base", help="Override the base document path.")
]
DirOption = Annotated[
    str | None, typer.Option("--dir", help="Override the scoped documents directory.")
]
SuffixOption = Annotated[
    str | None, typer.Option("--suffix", help="Override the instruction filename suffix.")
]
IgnoreCaseOption = Annotated[
    bool, typer.Option("--ignore-case", help="Match applyTo patterns case-insensitively.")
]


def _fatal(message: str) -> NoReturn:
    """Print error and exit with the fatal status."""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=2)


def _load_registry(
    root: Path,
    layout_id: str,
    base: str | None,
    directory: str | None,
    suffix: str | None,
    ignore_case: bool,
) -> Registry:
    layout = get_layout(layout_id)
    if layout is None:
        _fatal(f"Unknown layout: {layout_id}")
    overrides = {
        k: v
        for k, v in (("base_path", base), ("instructions_dir", directory), ("suffix", suffix))
        if v
    }
    if overrides:
        layout = replace(layout, id=f"{layout.id}+custom", **overrides)
    try:
        return load(root, layout, case_sensitive=not ignore_case)
    except InstructionError as e:
        _fatal(str(e))


def _relative_path(path: str, root: Path) -> str:
    """Express a queried path relative to the registry root."""
    candidate = Path(path)
    if not candidate.is_absolute():
        return path
    try:
        return candidate.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        _fatal(f"Path is outside the registry root {root}: {path}")


def _warn_issues(registry: Registry) -> None:
    """Print one warning per load issue and exit 1 if there were any."""
    for issue in registry.issues:
        typer.echo(f"Warning: {issue.path}: {issue.message}", err=True)
    if registry.issues:
        raise typer.Exit(code=1)


def _result_to_dict(result: ResolutionResult) -> dict[str, Any]:
    documents = []
    if result.base is not None:
        documents.append(
            {"path": result.base.path, "title": result.base.title, "base": True, "patterns": []}
        )
    for m in result.matches:
        documents.append(
            {
                "path": m.document.path,
                "title": m.document.title,
                "base": False,
                "patterns": list(m.patterns),
            }
        )
    return {"path": result.path, "documents": documents}


def _not_reported(record: logging.LogRecord) -> bool:
    """Drop applyto warnings; the commands report load issues themselves."""
    return record.levelno < logging.WARNING or not record.name.startswith("applyto")


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log loading details to stderr.")
    ] = False,
) -> None:
    """Resolve which AI-assistant instruction documents apply to a file."""
    if verbose:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.addFilter(_not_reported)
        logging.basicConfig(
            level=logging.DEBUG, format="%(message)s", handlers=[handler], force=True
        )


@app.command()
def resolve(
    path: Annotated[str, typer.Argument(help="File path, relative to the root.")],
    root: RootOption = Path("."),
    layout: LayoutOption = DEFAULT_LAYOUT_ID,
    base: BaseOption = None,
    directory: DirOption = None,
    suffix: SuffixOption = None,
    ignore_case: IgnoreCaseOption = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
    explain: Annotated[bool, typer.Option(help="Show which patterns matched.")] = False,
) -> None:
    """List the instruction documents that apply to a file, base first."""
    registry = _load_registry(root, layout, base, directory, suffix, ignore_case)
    result = resolve_path(registry, _relative_path(path, root))

    if as_json:
        typer.echo(json.dumps(_result_to_dict(result), indent=2))
    elif not result.documents:
        typer.echo(f"No instruction documents apply to {result.path}.")
    else:
        typer.echo(f"{'#':<4} {'Document':<50} Title")
        typer.echo("-" * 80)
        for position, doc in enumerate(result.documents, start=1):
            typer.echo(f"{position:<4} {doc.path:<50} {doc.title}")
            if explain:
                if doc.is_base:
                    typer.echo(f"{'':<4}   base document, applies to every file")
                else:
                    matched = ", ".join(doc.matching_patterns(result.path))
                    typer.echo(f"{'':<4}   matched: {matched}")

    _warn_issues(registry)


@app.command()
def render(
    path: Annotated[str, typer.Argument(help="File path, relative to the root.")],
    root: RootOption = Path("."),
    layout: LayoutOption = DEFAULT_LAYOUT_ID,
    base: BaseOption = None,
    directory: DirOption = None,
    suffix: SuffixOption = None,
    ignore_case: IgnoreCaseOption = False,
    output_path: Annotated[
        Path | None, typer.Option("--output", help="Write to file instead of stdout.")
    ] = None,
) -> None:
    """Print the composed instruction context for a file."""
    registry = _load_registry(root, layout, base, directory, suffix, ignore_case)
    result = resolve_path(registry, _relative_path(path, root))
    content = render_context(result)

    if output_path:
        output_path.write_text(content, encoding="utf-8")
        typer.echo(f"Context written to {output_path}")
    else:
        typer.echo(content, nl=False)

    _warn_issues(registry)


@app.command("list")
def list_documents(
    root: RootOption = Path("."),
    layout: LayoutOption = DEFAULT_LAYOUT_ID,
    base: BaseOption = None,
    directory: DirOption = None,
    suffix: SuffixOption = None,
) -> None:
    """List every loaded instruction document."""
    registry = _load_registry(root, layout, base, directory, suffix, False)
    docs = registry.all()
    if not docs:
        typer.echo("No instruction documents found.")
    else:
        typer.echo(f"{'Document':<50} {'Title':<30} applyTo")
        typer.echo("-" * 100)
        for doc in docs:
            scope = "(base)" if doc.is_base else ", ".join(p.source for p in doc.patterns)
            typer.echo(f"{doc.path:<50} {doc.title:<30} {scope}")

    _warn_issues(registry)


@app.command()
def check(
    root: RootOption = Path("."),
    layout: LayoutOption = DEFAULT_LAYOUT_ID,
    base: BaseOption = None,
    directory: DirOption = None,
    suffix: SuffixOption = None,
) -> None:
    """Report documents that failed to load."""
    registry = _load_registry(root, layout, base, directory, suffix, False)
    loaded = len(registry.all())
    if registry.ok and registry.base is not None:
        typer.echo(f"OK: {loaded} document(s) loaded, base: {registry.base.path}")
        return

    typer.echo(f"{loaded} document(s) loaded, {len(registry.issues)} problem(s):")
    for issue in registry.issues:
        typer.echo(f"  [{issue.kind}] {issue.path}: {issue.message}")
    raise typer.Exit(code=1)


@app.command()
def layouts() -> None:
    """List supported repository layouts."""
    items = list_layouts()
    if not items:
        typer.echo("No layouts registered.")
        return
    typer.echo(f"{'ID':<12} {'Base document':<35} {'Scoped documents':<45}")
    typer.echo("-" * 92)
    for item in items:
        scoped = f"{item.instructions_dir}/**/*{item.suffix}"
        typer.echo(f"{item.id:<12} {item.base_path:<35} {scoped:<45}")
        if item.description:
            typer.echo(f"{'':<12} {item.description}")
