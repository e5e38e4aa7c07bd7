"""
Bus factor command line interface.

Lists the most-starred repositories of a language and reports the bus factor
of each.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from busfactor.client import BusFactorClient
from busfactor.config import DEFAULT_CONCURRENCY, DEFAULT_TOKEN_PATH, PipelineConfig, load_token
from busfactor.exceptions import BusFactorError, ConfigurationError
from busfactor.logging import configure_logging
from busfactor.report import build_table, format_plain
from busfactor.types.results import BusFactorResult, ProgressEvent

app = typer.Typer(
    name="bus-factor",
    help="Gather bus factor statistics from the most popular GitHub repositories of a language.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


async def _run(config: PipelineConfig, show_progress: bool) -> list[BusFactorResult]:
    async with BusFactorClient.from_config(config) as client:
        if not show_progress:
            return await client.run(config.language, config.project_count)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=err_console,
            transient=True,
        ) as progress:
            task = progress.add_task("Querying for repositories...", total=None)

            def on_progress(event: ProgressEvent) -> None:
                progress.update(
                    task,
                    description=f"Calculating bus factor ({event.result.repository.full_name})",
                    completed=event.completed,
                    total=event.total,
                )

            return await client.run(
                config.language, config.project_count, on_progress=on_progress
            )


@app.command()
def main(
    language: str = typer.Option(..., "--language", "-l", help="Programming language name"),
    project_count: int = typer.Option(..., "--project-count", "-p", help="Number of projects to consider (search serves at most 1000)"),
    token_path: Path = typer.Option(Path(DEFAULT_TOKEN_PATH), "--token-path", "-t", help="File holding the API token"),
    concurrency: int = typer.Option(DEFAULT_CONCURRENCY, "--concurrency", "-c", help="Maximum concurrent contributor fetches"),
    highlight_share: float = typer.Option(0.75, "--highlight-share", help="Highlight repositories whose top contributor holds this share of commits"),
    plain: bool = typer.Option(False, "--plain", help="Print one plain line per repository"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Compute the bus factor of the top repositories for a language."""
    configure_logging(level=logging.DEBUG if verbose else logging.WARNING)

    try:
        config = PipelineConfig(
            language=language,
            project_count=project_count,
            token=load_token(token_path),
            concurrency_limit=concurrency,
        ).validate()
    except ConfigurationError as e:
        err_console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=2) from e

    try:
        results = asyncio.run(_run(config, show_progress=not plain))
    except BusFactorError as e:
        err_console.print(f"[red]Could not list repositories: {e}[/red]")
        raise typer.Exit(code=1) from e

    if plain:
        for result in results:
            console.print(format_plain(result), highlight=False, markup=False, soft_wrap=True)
    else:
        console.print(build_table(results, language, highlight_share))

    failures = sum(1 for result in results if not result.ok)
    if failures:
        err_console.print(f"[yellow]{failures} of {len(results)} repositories could not be analysed[/yellow]")


if __name__ == "__main__":
    app()
