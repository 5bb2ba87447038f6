"""CLI commands that run package lifecycle hooks.

One subcommand per lifecycle event. Package metadata comes from a YAML
package table (see StaticPackageInspector); entries go to an in-memory
registry whose final contents are printed with --show-registry.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer

from mlops_parser.cli._errors import handle_error
from mlops_parser.config import get_config
from mlops_parser.inspector.static import StaticPackageInspector
from mlops_parser.lifecycle import HOOK_OK, LifecycleEvent, PackageGate
from mlops_parser.registry.memory import InMemoryRegistry

app = typer.Typer(help="Run package lifecycle hooks.", no_args_is_help=True)

_DESCRIPTIONS = {
    LifecycleEvent.INSTALL: "Register the manifest items of an installed package.",
    LifecycleEvent.UNINSTALL: "Uninstall hook (registered entries are kept).",
    LifecycleEvent.UPGRADE: "Uninstall, then install.",
    LifecycleEvent.RECOVERINSTALL: "Recover from a failed install (same as uninstall).",
    LifecycleEvent.RECOVERUPGRADE: "Recover from a failed upgrade (same as upgrade).",
    LifecycleEvent.RECOVERUNINSTALL: "Recover from a failed uninstall (same as install).",
    LifecycleEvent.CLEAN: "Post-install cleanup (no-op).",
    LifecycleEvent.UNDO: "Undo after a failed install (no-op).",
}


def _parse_metadata(pairs: list[str]) -> list[tuple[str, str]]:
    metadata: list[tuple[str, str]] = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            handle_error(f"Metadata must be KEY=VALUE, got {pair!r}")
        metadata.append((key, value))
    return metadata


def _make_command(event: LifecycleEvent) -> Callable[..., None]:
    def command(
        pkgid: str = typer.Argument(..., help="Package id"),
        app_id: str = typer.Option(None, "--app-id", help="Application id"),
        packages: Path = typer.Option(
            None, "--packages", "-p", help="YAML package table (default: $MLOPS_PARSER_PACKAGES)"
        ),
        metadata: list[str] = typer.Option(
            [], "--metadata", "-m", help="Metadata KEY=VALUE (repeatable)"
        ),
        show_registry: bool = typer.Option(
            False, "--show-registry", help="Print registry contents afterwards"
        ),
    ) -> None:
        config = get_config()
        try:
            inspector = StaticPackageInspector.from_yaml(packages or config.packages_file)
        except ValueError as e:
            handle_error(str(e))

        registry = InMemoryRegistry()
        gate = PackageGate(inspector, registry, config)
        status = gate.handle(event, pkgid, app_id, _parse_metadata(metadata))

        if show_registry:
            typer.echo(registry.to_json())
        if status != HOOK_OK:
            typer.echo(f"{event.value} failed for {pkgid}", err=True)
            raise typer.Exit(1)
        typer.echo(f"{event.value}: {pkgid} ok")

    command.__name__ = f"hook_{event.value}"
    command.__doc__ = _DESCRIPTIONS[event]
    return command


for _event in LifecycleEvent:
    app.command(_event.value)(_make_command(_event))
