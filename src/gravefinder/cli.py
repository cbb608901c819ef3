"""CLI interface for gravefinder."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="gravefinder",
    help="Find burial plots from conversational English/Filipino queries",
    add_completion=False,
)
console = Console()


def get_config():
    """Load engine configuration, honouring a local .env file."""
    from dotenv import load_dotenv

    load_dotenv()

    from .config import EngineConfig
    from .logging import configure_logging

    configure_logging()
    return EngineConfig()


@app.command()
def parse(
    query: str = typer.Argument(..., help="Search query in natural language"),
    today: str = typer.Option(None, "--today", help="Reference date (YYYY-MM-DD) for relative expressions"),
):
    """Show how a query is interpreted."""
    from .interpret import describe_context, parse_query

    ctx = parse_query(query, today=_parse_today(today))
    console.print(Panel(describe_context(ctx), title="Interpretation"))
    console.print_json(ctx.model_dump_json(exclude_defaults=True))


@app.command()
def search(
    corpus: Path = typer.Argument(..., help="Burial records file (.json or .csv)"),
    query: str = typer.Argument(..., help="Search query in natural language"),
    page: int = typer.Option(1, "--page", "-p", help="Result page"),
    page_size: int = typer.Option(None, "--page-size", "-n", help="Results per page"),
    cemetery_id: str = typer.Option(None, "--cemetery", "-c", help="Restrict to one cemetery id"),
    semantic: bool = typer.Option(False, "--semantic", help="Use the embedding provider for base similarity"),
    rank: bool = typer.Option(True, "--rank/--no-rank", help="Re-rank the store page by relevance"),
    as_json: bool = typer.Option(False, "--json", help="Print the full response as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show score breakdown"),
):
    """Search a burial corpus and print ranked results."""
    from .engine import interpret_and_rank_async, search as run_search
    from .exceptions import StoreError
    from .interpret import parse_query
    from .ranking import EmbeddingSimilarity
    from .store import InMemoryBurialStore

    config = get_config()

    if not corpus.exists():
        console.print(f"[red]Error: File not found: {corpus}[/red]")
        raise typer.Exit(1)
    try:
        store = InMemoryBurialStore.load(corpus, config)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if semantic:
        if not config.embeddings_api_key:
            console.print("[red]Error: --semantic needs XAI_API_KEY to be set.[/red]")
            raise typer.Exit(1)

        async def run():
            from dataclasses import replace

            cfg = replace(config, embeddings_enabled=True)
            candidates, pagination = store.search(
                parse_query(query), page=page, page_size=page_size, cemetery_id=cemetery_id
            )
            async with EmbeddingSimilarity(cfg) as provider:
                response = await interpret_and_rank_async(
                    query, candidates, provider=provider, corpus=store.name_corpus(), config=cfg
                )
            return response.model_copy(update={"pagination": pagination})

        response = asyncio.run(run())
    else:
        response = run_search(
            query, store, page=page, page_size=page_size, cemetery_id=cemetery_id, rank=rank, config=config
        )

    if as_json:
        console.print_json(response.model_dump_json())
        return

    _display_response(response, verbose)


@app.command()
def complete(
    corpus: Path = typer.Argument(..., help="Burial records file (.json or .csv)"),
    prefix: str = typer.Argument(..., help="Start of a first, last or full name"),
    cemetery_id: str = typer.Option(None, "--cemetery", "-c", help="Restrict to one cemetery id"),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum number of names"),
):
    """Suggest full names for a partially typed name."""
    from .engine import autocomplete
    from .exceptions import StoreError
    from .store import InMemoryBurialStore

    config = get_config()
    try:
        store = InMemoryBurialStore.load(corpus, config)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    names = autocomplete(prefix, store, cemetery_id=cemetery_id, limit=limit)
    if not names:
        console.print("[yellow]No matching names.[/yellow]")
        return
    for name in names:
        console.print(name)


def _parse_today(value: str | None):
    if not value:
        return None
    from datetime import date

    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Error: --today must be YYYY-MM-DD, got {value!r}[/red]")
        raise typer.Exit(1)


def _display_response(response, verbose: bool):
    """Display ranked results or did-you-mean suggestions."""
    from .ranking import field_boosts

    console.print(Panel(response.interpretation, title=f"[bold]{response.context.raw_query}[/bold]"))

    if not response.results:
        console.print("[yellow]No matching burials found.[/yellow]")
        if response.suggestions:
            console.print("\n[bold]Did you mean:[/bold]")
            for name in response.suggestions:
                console.print(f"  • {name}")
        return

    table = Table(title="Search Results")
    table.add_column("Score", justify="right")
    table.add_column("Name")
    table.add_column("Died")
    table.add_column("Plot")
    table.add_column("Cemetery")
    if verbose:
        table.add_column("Matched")

    for candidate in response.results:
        record = candidate.record
        row = [
            f"{candidate.score:.2f}",
            record.full_name,
            record.date_of_death.isoformat() if record.date_of_death else "",
            record.plot_number or "",
            record.cemetery_name or "",
        ]
        if verbose:
            boosts = field_boosts(candidate.context, record)
            row.append(", ".join(f"{k} +{v:.2f}" for k, v in boosts.items()))
        table.add_row(*row)

    console.print(table)

    if response.pagination:
        p = response.pagination
        console.print(
            f"[dim]Page {p.page} of {max(p.total_pages, 1)} ({p.total_results} candidates)"
            f"{' - AI ranking' if response.ai_enabled else ''}[/dim]"
        )


if __name__ == "__main__":
    app()
