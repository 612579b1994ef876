from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import Settings
from .errors import ResourceNotFoundError
from .graph.context import build_context
from .graph.extract import MAX_ENTITIES, extract
from .kb.search import search as kb_search
from .kb.store import KnowledgeStore
from .logs import configure_logging
from .tools import SECTION_CHOICES, ToolRegistry


app = typer.Typer(add_completion=False, help="LLM Toolshed: keyword search and entity tools over a static knowledge base.")
console = Console()


def _store(data: Path | None) -> KnowledgeStore:
    settings = Settings()
    configure_logging(settings.log_level)
    return KnowledgeStore(data or settings.data_path)


def _check_section(section: str) -> str:
    if section not in SECTION_CHOICES:
        raise typer.BadParameter(f"section must be one of: {', '.join(SECTION_CHOICES)}")
    return section


@app.command()
def serve(
    data: Path | None = typer.Option(None, "--data", help="Knowledge-base JSON path"),
    http: bool = typer.Option(False, "--http", help="Serve the HTTP API (FastAPI) instead of MCP over stdio"),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Run the MCP server on stdio (or the HTTP API with --http)."""
    settings = Settings()
    configure_logging(settings.log_level)
    data_path = str(data or settings.data_path)

    if not http:
        from .server.mcp_server import run

        run(data_path)
        return

    try:
        import uvicorn
    except ImportError:
        console.print("Missing web dependencies. Install: `pip install -e '.[web]'`", style="red")
        raise typer.Exit(code=2)

    from .web.server import create_app

    uvicorn.run(create_app(data_path=data_path), host=host, port=int(port))


@app.command()
def search(
    query: str = typer.Argument(...),
    section: str = typer.Option("all", "--section", callback=_check_section, help="Section to search"),
    max_results: int | None = typer.Option(None, "--max-results", help="Max excerpts to show"),
    data: Path | None = typer.Option(None, "--data", help="Knowledge-base JSON path"),
):
    """Keyword search: one excerpt per matching section."""
    kb = _store(data).load()
    limit = max_results if max_results is not None else Settings().max_results
    outcome = kb_search(kb, query, section=section, max_results=limit)

    table = Table(title=f"{len(outcome.results)} of {outcome.total_found} sections")
    table.add_column("#", justify="right", width=4)
    table.add_column("section")
    table.add_column("length", justify="right")
    table.add_column("excerpt")

    for i, h in enumerate(outcome.results, start=1):
        table.add_row(
            Text(str(i)),
            Text(h.section),
            Text(str(h.full_length)),
            Text(" ".join(h.excerpt.split())),
        )

    console.print(table)


@app.command()
def context(
    entity: str = typer.Argument(...),
    depth: int = typer.Option(2, "--depth", help="Reported back only; context is always one hop"),
    data: Path | None = typer.Option(None, "--data", help="Knowledge-base JSON path"),
):
    """Show which sections mention an entity."""
    ctx = build_context(_store(data).load(), entity, depth=depth)

    console.print(ctx.context_summary, markup=False, style="bold")
    if not ctx.relationships:
        console.print("No sections mention it.", style="yellow")
        return
    for r in ctx.relationships:
        console.print(f"- {r.type} {r.target} ({r.relevance})", markup=False)


@app.command()
def entities(
    section: str = typer.Option("all", "--section", callback=_check_section, help="Section to extract from"),
    data: Path | None = typer.Option(None, "--data", help="Knowledge-base JSON path"),
):
    """Extract entities (fixed vocabulary + capitalized word pairs)."""
    outcome = extract(_store(data).load(), section)

    table = Table(title=f"Entities ({len(outcome.entities)} shown, {outcome.total_extracted} unique, cap {MAX_ENTITIES})")
    table.add_column("entity")
    table.add_column("source")
    for e in outcome.entities:
        table.add_row(Text(e.entity), Text(e.source))

    console.print(table)


@app.command()
def metadata(
    data: Path | None = typer.Option(None, "--data", help="Knowledge-base JSON path"),
):
    """Print knowledge-base metadata as JSON."""
    resp = ToolRegistry(_store(data)).call_tool("get_metadata", {})
    console.print(resp.text, markup=False)


@app.command()
def show(
    uri: str = typer.Argument(..., help="Resource URI, e.g. kb://data/faq"),
    data: Path | None = typer.Option(None, "--data", help="Knowledge-base JSON path"),
):
    """Print a resource (a section's text or the whole document)."""
    registry = ToolRegistry(_store(data))
    try:
        res = registry.read_resource(uri)
    except ResourceNotFoundError as e:
        console.print(str(e), style="red", markup=False)
        known = ", ".join(r.uri for r in registry.list_resources())
        console.print(f"Known resources: {known}", style="yellow", markup=False)
        raise typer.Exit(code=2)

    console.print(res.text, markup=False)


@app.command()
def doctor(
    data: Path | None = typer.Option(None, "--data", help="Knowledge-base JSON path"),
):
    """Check the knowledge-base file and print actionable fixes."""
    store = _store(data)
    path = store.resolved_path()
    ok = True

    console.print("Knowledge base:")
    if not path.exists():
        console.print(f"- Missing file: {path}", style="red")
        console.print("  Fix: set TOOLSHED_DATA_PATH or pass --data.", style="yellow")
        raise typer.Exit(code=1)

    try:
        json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        console.print(f"- Unreadable or not valid JSON: {e}", style="red")
        raise typer.Exit(code=1)

    kb = store.load()
    if not kb.available:
        console.print(f"- Could not load {path}", style="red")
        raise typer.Exit(code=1)

    names = kb.section_names()
    console.print(f"- File OK: {path}", style="green")
    console.print(f"- Sections: {len(names)} ({', '.join(names)})", style="green" if names else "yellow")
    if not names:
        console.print("  Fix: the document has no `content` mapping; every search will be empty.", style="yellow")
        ok = False

    for r in ToolRegistry(store).list_resources():
        if r.section is not None and kb.section(r.section) is None:
            console.print(f"- Resource {r.uri} has no `{r.section}` section.", style="yellow")

    if not ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
