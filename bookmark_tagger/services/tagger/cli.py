"""CLI for the bookmark tag generator."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from bookmark_tagger.lib.config_manager import config as config_manager, get_config
from bookmark_tagger.lib.logging_config import setup_logging

from .config import TaggerConfig
from .corpus import JsonTagCorpusStore
from .errors import CorpusStoreError, ServiceCallError
from .generator import SimpleTagGenerator, create_tag_generator
from .completion import PydanticAICompletionService
from .models import TagGenerationOptions


app = typer.Typer(help="Tag suggestions for bookmarks from a team's tag corpus and an LLM")
console = Console()
logger = logging.getLogger(__name__)


def _load_corpus(corpus_path: Optional[Path]) -> JsonTagCorpusStore:
    path = corpus_path or Path(get_config("TAG_CORPUS_PATH"))
    try:
        return JsonTagCorpusStore(path)
    except CorpusStoreError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (defaults to LOG_LEVEL)"
    ),
):
    """Configure logging for every command."""
    ctx.obj = setup_logging("bookmark-tagger", level=log_level or get_config("LOG_LEVEL"))


@app.command()
def generate(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", "-t", help="Bookmark title"),
    description: str = typer.Option("", "--description", "-d", help="Bookmark description"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Bookmark URL"),
    team_id: Optional[str] = typer.Option(None, "--team", help="Team whose corpus is matched"),
    manual_tags: List[str] = typer.Option([], "--tag", help="Manual tag (repeatable)"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Override TAGGER_MODEL"),
    simple: bool = typer.Option(False, "--simple", help="Single prompt, no corpus matching"),
    corpus_path: Optional[Path] = typer.Option(None, "--corpus", help="Tag corpus JSON file"),
):
    """Generate tags for a bookmark."""
    if ctx.obj is not None:
        run_id = ctx.obj.new_run()
        logger.info(f"Starting tag generation run {run_id}")
    asyncio.run(
        _generate(title, description, url, team_id, manual_tags, model, simple, corpus_path)
    )


async def _generate(
    title: str,
    description: str,
    url: Optional[str],
    team_id: Optional[str],
    manual_tags: List[str],
    model: Optional[str],
    simple: bool,
    corpus_path: Optional[Path],
):
    """Async implementation of generate."""
    config = TaggerConfig()
    if model:
        config.model = model

    if simple:
        completion = PydanticAICompletionService(
            model=config.model,
            request_timeout=config.request_timeout,
            max_retries=config.max_retries,
        )
        generator = SimpleTagGenerator(completion, config=config)
    else:
        generator = create_tag_generator(config=config, corpus=_load_corpus(corpus_path))

    options = TagGenerationOptions(
        url=url,
        title=title,
        description=description,
        team_id=team_id,
        manual_tags=manual_tags,
    )
    content = f"{title} {description}".strip()

    try:
        with console.status("[bold yellow]Generating tags..."):
            tags = await generator.generate_tags(content, options=options)
    except ServiceCallError as e:
        console.print(f"[bold red]Tag generation failed:[/bold red] {e}")
        raise typer.Exit(1)

    if not tags:
        console.print("[dim]No tags generated[/dim]")
        return

    console.print("[bold green]Tags:[/bold green] " + ", ".join(f"[cyan]{t}[/cyan]" for t in tags))


@app.command()
def tags(
    team_id: str = typer.Argument(..., help="Team ID"),
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum tags to show"),
    corpus_path: Optional[Path] = typer.Option(None, "--corpus", help="Tag corpus JSON file"),
):
    """List a team's existing tags by usage."""
    corpus = _load_corpus(corpus_path)
    usages = asyncio.run(corpus.get_popular_tags(team_id, limit=limit))

    if not usages:
        console.print(f"[dim]No tags found for team {team_id}[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Tag", style="cyan")
    table.add_column("Uses", style="white", justify="right")

    for i, usage in enumerate(usages, 1):
        table.add_row(str(i), usage.tag_name, str(usage.usage_count))

    console.print(f"\n[bold blue]Tags for team {team_id}[/bold blue]\n")
    console.print(table)


@app.command()
def record(
    team_id: str = typer.Argument(..., help="Team ID"),
    tag_names: List[str] = typer.Argument(..., help="Tags to record"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User who applied the tags"),
    corpus_path: Optional[Path] = typer.Option(None, "--corpus", help="Tag corpus JSON file"),
):
    """Record tag usage for a team."""
    corpus = _load_corpus(corpus_path)
    corpus.record_tags(team_id, tag_names, user_id=user_id)

    try:
        corpus.save()
    except CorpusStoreError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold green]Recorded {len(tag_names)} tags for team {team_id}[/bold green]")


@app.command()
def stats(
    corpus_path: Optional[Path] = typer.Option(None, "--corpus", help="Tag corpus JSON file"),
):
    """Show tag corpus statistics."""
    corpus = _load_corpus(corpus_path)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    for key, value in corpus.get_stats().items():
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)


@app.command("config")
def show_config(
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Print API keys unmasked"),
):
    """Show resolved configuration (.env, environment, defaults)."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in config_manager.get_all(mask_sensitive=not show_secrets).items():
        table.add_row(key, "" if value is None else str(value))

    console.print(table)


if __name__ == "__main__":
    app()
