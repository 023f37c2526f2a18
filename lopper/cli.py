"""Click CLI with analyse, detect, and serve subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from lopper import __version__
from lopper.config import parse_weights
from lopper.formatter import FORMAT_CHOICES, format_report
from lopper.models import AnalysisConfig, Language
from lopper.pipeline import AUTO_LANGUAGE, run_analysis
from lopper.scanner import detect_languages

_LANGUAGE_CHOICES = [AUTO_LANGUAGE] + [lang.value for lang in Language]


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Log progress (-v) or per-file detail (-vv)")
def cli(verbose: int):
    """lopper: Find declared dependencies your code barely uses."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("repo", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".")
@click.option("--language", "-l", type=click.Choice(_LANGUAGE_CHOICES), default=AUTO_LANGUAGE, help="Language to analyse")
@click.option("--dependency", "-d", help="Report on a single dependency")
@click.option("--top", "-n", "top_n", type=click.IntRange(min=1), help="Rank the N most wasteful dependencies")
@click.option("--format", "-f", "fmt", type=click.Choice(FORMAT_CHOICES), default="table", help="Output format")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Threshold config file")
@click.option("--threshold", type=click.IntRange(0, 100), help="Minimum used percent before recommending a smaller surface")
@click.option("--weights", help="Removal-candidate weights as USAGE,IMPACT,CONFIDENCE")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=1, help="Threads for per-dependency synthesis")
@click.option("--fail-on-unused", is_flag=True, help="Exit with status 1 when an unused dependency is found")
def analyse(
    repo: Path,
    language: str,
    dependency: str | None,
    top_n: int | None,
    fmt: str,
    config_path: Path | None,
    threshold: int | None,
    weights: str | None,
    workers: int,
    fail_on_unused: bool,
):
    """Measure how much of each dependency a repository uses."""
    if dependency and top_n:
        raise click.UsageError("--dependency and --top are mutually exclusive")
    if not dependency and not top_n:
        raise click.UsageError("Specify --dependency NAME or --top N")

    try:
        config = AnalysisConfig(
            repo_path=repo,
            language=language,
            dependency=dependency,
            top_n=top_n or 0,
            workers=workers,
            config_path=config_path,
            min_usage_percent=threshold,
            weights=parse_weights(weights) if weights else None,
        )
        report = run_analysis(config)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(format_report(report, fmt), nl=False)

    if fail_on_unused:
        unused = [
            dep.name for dep in report.dependencies
            if any(rec.code == "remove-unused-dependency" for rec in dep.recommendations)
        ]
        if unused:
            click.echo(f"Unused dependencies: {', '.join(unused)}", err=True)
            raise SystemExit(1)


@cli.command()
@click.argument("repo", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".")
def detect(repo: Path):
    """List the languages a repository appears to use."""
    detections = detect_languages(repo)
    if not detections:
        click.echo("No supported languages detected.")
        return
    for detection in detections:
        click.echo(f"{detection.language.value:<8} {detection.confidence:>3}%")


@cli.command()
@click.option("--port", "-p", default=8421, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the HTTP API. "
            "Install with: pip install 'lopper[web]'"
        )

    from lopper.web import create_app

    click.echo(f"Starting lopper API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
