"""
Command-line interface for the market feed core.

Uses Typer to expose the pipeline, the source rater, the similarity
scorer and the daily request budget.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import AppConfig, load_config
from .core.budget import RequestBudget
from .core.similarity import similarity as score_similarity
from .core.source_quality import SourceRater
from .core.storage import JsonFileStore
from .runner import run_pipeline

app = typer.Typer(add_completion=False)
budget_app = typer.Typer(add_completion=False, help="Inspect or spend the daily 'today' request budget.")
app.add_typer(budget_app, name="budget")
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", exists=True, help="YAML config file.")


@app.command()
def run(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    output: Path = typer.Option(Path("out/articles.json"), "--output", "-o"),
    config: Path | None = ConfigOption,
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    similarity_pass: bool | None = typer.Option(
        None, "--similarity-pass/--no-similarity-pass", help="Run the near-duplicate title pass."
    ),
    limit_sports: bool | None = typer.Option(
        None, "--limit-sports/--no-limit-sports", help="Cap the number of sports articles."
    ),
):
    """Deduplicate and annotate a JSON article export.

    Args:
        input: JSON file with fetched articles
        output: Destination for the annotated article list
        config: Optional path to YAML config file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        similarity_pass: Enable/disable the near-duplicate title pass
        limit_sports: Enable/disable the sports article cap
    """
    cfg = _load(config)

    if log_level:
        cfg.logging.level = log_level
    if similarity_pass is not None:
        cfg.dedup.similarity_pass = similarity_pass
    if limit_sports is not None:
        cfg.curation.limit_sports = limit_sports

    result = run_pipeline(input, output, cfg)
    console.print(
        f"Kept {result.stats.output} of {result.stats.input} articles "
        f"({result.stats.duplicates_removed} duplicates removed): {output}"
    )


@app.command()
def rate(
    sources: list[str] = typer.Argument(..., help="Publisher display names."),
    config: Path | None = ConfigOption,
):
    """Show the credibility rating of one or more publishers."""
    cfg = _load(config)
    rater = SourceRater.from_config(cfg.source_quality)

    table = Table("Source", "Score", "Tier", "Description")
    for name in sources:
        quality = rater.rate(name)
        table.add_row(name, str(quality.score), quality.tier, quality.description)
    console.print(table)


@app.command()
def similarity(text_a: str, text_b: str):
    """Print the Jaccard word similarity of two texts."""
    console.print(f"{score_similarity(text_a, text_b):.4f}")


@budget_app.command("status")
def budget_status(config: Path | None = ConfigOption):
    """Show how many 'today' requests are left."""
    budget = _budget(_load(config))
    state = budget.state()
    console.print(
        f"{budget.remaining()} of {budget.max_requests} requests left for {budget.today()} "
        f"(stored: date={state.date or '-'} count={state.count})"
    )


@budget_app.command("consume")
def budget_consume(config: Path | None = ConfigOption):
    """Spend one 'today' request, failing when the budget is exhausted."""
    budget = _budget(_load(config))
    if not budget.try_acquire():
        console.print(
            f"[red]Daily limit of {budget.max_requests} 'today' requests reached. "
            "The budget resets at midnight.[/red]"
        )
        raise typer.Exit(code=1)
    console.print(f"Request allowed, {budget.remaining()} left today.")


def _load(config: Path | None) -> AppConfig:
    return load_config(str(config) if config else None)


def _budget(cfg: AppConfig) -> RequestBudget:
    return RequestBudget.from_config(cfg.budget, JsonFileStore(cfg.budget.state_file))


if __name__ == "__main__":
    app()
