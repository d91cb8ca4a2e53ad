from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from fuzzy_browse import __version__
from fuzzy_browse.catalog import default_catalog_path, load_workflows
from fuzzy_browse.config import (
    DEFAULT_MAX_RESULTS,
    BrowseSettings,
    configure_logging,
    env_var,
)
from fuzzy_browse.exceptions import CatalogError, ConfigurationError
from fuzzy_browse.models import ResultRow, Workflows
from fuzzy_browse.ranking import fuzzy_filter
from fuzzy_browse.rendering import render_results_table
from fuzzy_browse.scoring import ScoreModel
from fuzzy_browse.search import Matcher
from fuzzy_browse.tui import FuzzyBrowseTui

__all__ = [
    "FuzzyBrowseTui",
    "cli",
    "run",
]

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"fuzzy-browse {__version__}")
    raise typer.Exit()


def _score_option(flag: str, name: str, help_text: str) -> Any:
    return typer.Option(
        None,
        flag,
        envvar=env_var(name),
        help=help_text,
        rich_help_panel="Scoring",
    )


cli = typer.Typer(
    add_completion=False,
    help="Fuzzy-filter a catalog of workflows, interactively or from the shell.",
)


def filter_workflows(
    query: str, workflows: Workflows, settings: BrowseSettings
) -> list[ResultRow]:
    hits = fuzzy_filter(
        query,
        workflows,
        max_results=settings.max_results,
        matcher=Matcher(settings.score_model),
        workers=settings.workers,
    )
    return [
        ResultRow(workflow=workflow, score=result.score, positions=result.positions)
        for workflow, result in hits
    ]


def _rows_as_json(rows: list[ResultRow]) -> str:
    return json.dumps(
        [
            {
                "title": row.workflow.repo,
                "subtitle": row.workflow.description,
                "uid": row.workflow.repo,
                "arg": row.workflow.url,
                "score": row.score,
            }
            for row in rows
        ],
        indent=2,
    )


@cli.command()
def run(
    query: str = typer.Argument(
        "",
        help="Filter query. When given, results are printed instead of opening the TUI.",
    ),
    catalog: Path | None = typer.Option(
        None,
        "--catalog",
        "-f",
        envvar=env_var("catalog"),
        help="JSON file listing the workflows to browse.",
    ),
    max_results: int = typer.Option(
        DEFAULT_MAX_RESULTS,
        "--max-results",
        "-n",
        envvar=env_var("max_results"),
        help="Maximum number of results. 0 or less means unbounded.",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        "-w",
        envvar=env_var("workers"),
        help="Ranking threads. 0 uses one per CPU.",
    ),
    print_results: bool = typer.Option(
        False,
        "--print",
        help="Print results even for an empty query instead of opening the TUI.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print results as JSON.",
    ),
    adjacency_bonus: float | None = _score_option(
        "--adjacency-bonus",
        "adjacency_bonus",
        "Bonus when a match directly follows the previous match.",
    ),
    camel_bonus: float | None = _score_option(
        "--camel-bonus",
        "camel_bonus",
        "Bonus for matching an uppercase letter after a lowercase one.",
    ),
    separator_bonus: float | None = _score_option(
        "--separator-bonus",
        "separator_bonus",
        "Bonus for matching right after a separator.",
    ),
    leading_letter_penalty: float | None = _score_option(
        "--leading-letter-penalty",
        "leading_letter_penalty",
        "Penalty per character before the first match.",
    ),
    max_leading_letter_penalty: float | None = _score_option(
        "--max-leading-letter-penalty",
        "max_leading_letter_penalty",
        "Floor of the accumulated leading-letter penalty.",
    ),
    unmatched_letter_penalty: float | None = _score_option(
        "--unmatched-letter-penalty",
        "unmatched_letter_penalty",
        "Penalty per unmatched character.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity. Repeat for debug output.",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        envvar=env_var("log_file"),
        help="Write logs to this file.",
    ),
    _version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    interactive = not (query or print_results or as_json)
    configure_logging(verbose, log_file=log_file, interactive=interactive)

    try:
        score_model = ScoreModel.from_options(
            adjacency_bonus=adjacency_bonus,
            camel_bonus=camel_bonus,
            separator_bonus=separator_bonus,
            leading_letter_penalty=leading_letter_penalty,
            max_leading_letter_penalty=max_leading_letter_penalty,
            unmatched_letter_penalty=unmatched_letter_penalty,
        )
    except ConfigurationError as exc:
        typer.echo(f"Invalid scoring options: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    settings = BrowseSettings(
        catalog_path=catalog if catalog is not None else default_catalog_path(),
        max_results=max_results,
        workers=workers,
        score_model=score_model,
    )
    try:
        workflows = load_workflows(settings.catalog_path).sorted_by_repo()
    except CatalogError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    if interactive:
        FuzzyBrowseTui(workflows=workflows, settings=settings).run()
        return

    logger.info("query=%r", query)
    rows = filter_workflows(query, workflows, settings)
    logger.info("%d/%d workflows match %r", len(rows), len(workflows), query)

    if as_json:
        typer.echo(_rows_as_json(rows))
        return
    if not rows:
        typer.echo("No matching workflows. Try a different query?", err=True)
        return
    Console().print(render_results_table(rows, show_scores=bool(query)))


if __name__ == "__main__":
    cli()
