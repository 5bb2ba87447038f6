"""mlops-parser CLI -- typer-based command interface.

Commands:
    mlops-parser ingest file <path>          Register a manifest's items locally
    mlops-parser hook <event> <pkgid>        Run a package lifecycle hook
    mlops-parser classify <key>              Show the kind of a section key
    mlops-parser manifest-path <root> <res>  Show where a package's manifest lives
"""

from __future__ import annotations

import os

import typer

from mlops_parser.cli import hook, ingest
from mlops_parser.cli._errors import handle_error
from mlops_parser.config import get_config
from mlops_parser.core.classifier import classify_section, known_sections
from mlops_parser.core.models import manifest_path
from mlops_parser.observability.config import ObservabilityConfig
from mlops_parser.observability.logging import setup_logging

app = typer.Typer(
    name="mlops-parser",
    help="Register ML models, pipelines and resources declared in package manifests.",
    no_args_is_help=True,
)

app.add_typer(ingest.app, name="ingest")
app.add_typer(hook.app, name="hook")


@app.callback()
def _configure(
    log_level: str = typer.Option(
        None, "--log-level", help="Log level (default: $MLOPS_PARSER_LOG_LEVEL or WARNING)"
    ),
    log_format: str = typer.Option(
        None, "--log-format", help="json or console (default: $MLOPS_PARSER_LOG_FORMAT)"
    ),
) -> None:
    config = ObservabilityConfig()
    config.log_level = log_level or _cli_level(config)
    if log_format:
        config.log_format = log_format
    try:
        setup_logging(config)
    except ValueError as e:
        handle_error(str(e))


def _cli_level(config: ObservabilityConfig) -> str:
    # Quieter than the library default unless asked for
    return config.log_level if "MLOPS_PARSER_LOG_LEVEL" in os.environ else "WARNING"


@app.command("classify")
def classify(key: str = typer.Argument(..., help="Top-level manifest key")) -> None:
    """Print the declaration kind a manifest key maps to."""
    kind = classify_section(key)
    if kind is None:
        handle_error(f"{key!r} is not a known section. Known: {', '.join(known_sections())}")
    typer.echo(kind.value)


@app.command("manifest-path")
def show_manifest_path(
    root: str = typer.Argument(..., help="Package install root"),
    res_type: str = typer.Argument(..., help="Resource type"),
) -> None:
    """Print the manifest location for an installed package."""
    typer.echo(str(manifest_path(root, res_type, get_config().manifest_filename)))


def main() -> None:
    """Entry point for the mlops-parser CLI."""
    app()
