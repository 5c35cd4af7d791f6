"""larascope command line.

Example::

    larascope detect --project-root ~/src/shop
    larascope analyze --force-refresh --external
    larascope read-file app/Models/Cart.php
    larascope list-files app/Http --filter Controller

Every command prints JSON to stdout; logs go to stderr.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from larascope import SERVICE_NAME, __version__
from larascope.analyzer import ProjectAnalyzer
from larascope.core.config import Settings, get_settings
from larascope.core.logging import configure_structlog
from larascope.core.security import SecurityError
from larascope.detector.classifier import ProjectClassifier

app = typer.Typer(add_help_option=True, no_args_is_help=True)

_ROOT_HELP = "Laravel project root (defaults to LARASCOPE_PROJECT_ROOT or the current directory)"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _settings(project_root: Optional[Path]) -> Settings:
    settings = get_settings()
    if project_root is not None:
        settings = settings.model_copy(update={"project_root": project_root})
    configure_structlog(debug=settings.debug, level=settings.log_level)
    return settings


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


def _fail(exc: Exception) -> None:
    typer.echo(f"[error] {exc}", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def info(
    project_root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
):
    """Print version and effective configuration."""
    settings = _settings(project_root)
    _emit({
        "service": SERVICE_NAME,
        "version": __version__,
        "project_root": str(settings.project_root),
        "score_floor": settings.score_floor,
        "category_priority": settings.category_priority,
        "developer_mode": settings.developer_mode,
        "phpstan_enabled": settings.phpstan_enabled,
    })


@app.command()
def detect(
    project_root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
):
    """Classify the project and print category, confidence and rule scores."""
    classifier = ProjectClassifier.from_settings(_settings(project_root))
    result = classifier.classify()
    _emit({
        "type": result.category,
        "confidence": classifier.get_confidence(),
        "suggested_handler": classifier.suggested_handler(),
        "reason": result.reason,
        "scores": {name: s.to_dict() for name, s in result.scores.items()},
    })


@app.command()
def describe(
    project_root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
):
    """Print the project characteristics summary."""
    classifier = ProjectClassifier.from_settings(_settings(project_root))
    _emit(classifier.describe().to_dict())


@app.command()
def analyze(
    force_refresh: bool = typer.Option(False, "--force-refresh", help="Ignore any cached analysis"),
    external: bool = typer.Option(False, "--external", help="Include PHPStan results when enabled"),
    project_root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
):
    """Run the full project analysis."""
    analyzer = ProjectAnalyzer(_settings(project_root))
    _emit(analyzer.analyze_project({
        "force_refresh": force_refresh,
        "include_external_analysis": external,
    }))


@app.command("read-file")
def read_file(
    path: str = typer.Argument(..., help="Project-relative path of a PHP file"),
    project_root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
):
    """Analyse one PHP file."""
    analyzer = ProjectAnalyzer(_settings(project_root))
    try:
        _emit(analyzer.read_file(path))
    except SecurityError as exc:
        _fail(exc)


@app.command("list-files")
def list_files(
    directory: str = typer.Argument("app", help="Project-relative directory"),
    name_filter: Optional[str] = typer.Option(None, "--filter", help="Case-insensitive path substring"),
    include_tests: bool = typer.Option(False, "--include-tests", help="Include files under tests/"),
    project_root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
):
    """List PHP files, sorted by category then name."""
    analyzer = ProjectAnalyzer(_settings(project_root))
    try:
        _emit(analyzer.list_files(directory, name_filter=name_filter, include_tests=include_tests))
    except SecurityError as exc:
        _fail(exc)


if __name__ == "__main__":
    app()
