"""CLI command for ingesting a manifest file without a package manager."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from mlops_parser.cli._errors import handle_error
from mlops_parser.core.dispatcher import Dispatcher
from mlops_parser.core.errors import StructuralError
from mlops_parser.core.loader import load_manifest
from mlops_parser.core.models import IngestionReport, PackageContext
from mlops_parser.registry.base import registry_session
from mlops_parser.registry.memory import InMemoryRegistry

app = typer.Typer(help="Ingest manifests into a local registry.", no_args_is_help=True)


def _print_report(report: IngestionReport) -> None:
    for o in report.outcomes:
        mark = "ok  " if o.ok else "FAIL"
        target = f"{o.name}" if o.name else "<unnamed>"
        if o.path:
            target += f" [{o.path}]"
        if o.version is not None:
            target += f" v{o.version}"
        typer.echo(f"  {mark} {o.kind.value:<8} {target}: {o.detail}")
    typer.echo(f"\n{report.succeeded}/{report.total} item(s) registered, {report.failed} failed")


@app.command("file")
def ingest_file(
    path: Path = typer.Argument(..., help="Path to a manifest JSON file"),
    pkg_id: str = typer.Option("local", "--pkg-id", help="Package id to attribute entries to"),
    app_id: str = typer.Option("", "--app-id", help="Application id"),
    res_type: str = typer.Option("", "--res-type", help="Resource type"),
    res_version: str = typer.Option("", "--res-version", help="Resource version"),
    as_json: bool = typer.Option(False, "--json", help="Print report and registry as JSON"),
) -> None:
    """Load a manifest and register its items in an in-memory registry.

    Exits with status 1 on structural errors (missing file, invalid JSON,
    unknown section). Per-item failures are reported but do not change the
    exit status.

    Examples:
        mlops-parser ingest file rpk_config.json
        mlops-parser ingest file rpk_config.json --pkg-id org.example.mnist --json
    """
    try:
        manifest = load_manifest(path)
    except StructuralError as e:
        handle_error(str(e))

    context = PackageContext(
        pkg_id=pkg_id, app_id=app_id, res_type=res_type, res_version=res_version
    )
    registry = InMemoryRegistry()
    with registry_session(registry) as reg:
        report = Dispatcher(reg, context).dispatch(manifest)

    if as_json:
        typer.echo(
            json.dumps(
                {"report": report.to_dict(), "registry": registry.snapshot()},
                indent=2,
            )
        )
        return

    typer.echo(f"Manifest: {path}")
    _print_report(report)
