from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from routedoc.config import get_settings
from routedoc.extractors.fastapi.routes import load_app
from routedoc.lib.logging_utils import setup_logging
from routedoc.models.discovery import discover_model_classes
from routedoc.models.schema_builder import ModelSchemaBuilder
from routedoc.orchestrator.pipeline import BuildResult, run_build


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, help="Override ROUTEDOC_LOG_LEVEL"),
) -> None:
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_category_list)


def _build(app_path: str, models: Optional[List[str]], app_dir: str) -> BuildResult:
    root = str(Path(app_dir).expanduser().resolve())
    if root not in sys.path:
        sys.path.insert(0, root)
    try:
        target = load_app(app_path)
    except (ValueError, ImportError, AttributeError) as exc:
        raise typer.BadParameter(f"Cannot load app {app_path!r}: {exc}") from exc
    return run_build(target, model_packages=models or None)


@app.command()
def build(
    app_path: str = typer.Argument(..., help="Application to document, as module:attribute"),
    models: Optional[List[str]] = typer.Option(None, "--models", help="Package to scan for models (repeatable)"),
    app_dir: str = typer.Option(".", help="Directory added to sys.path before importing"),
) -> None:
    result = _build(app_path, models, app_dir)
    listing = result.listing

    console.print(f"[bold green]routedoc[/bold green] build: {app_path}")
    console.print(f"API version: {listing.api_version}  base path: {listing.base_path}")
    console.print(f"Routes discovered: {len(result.routes)}")
    console.print(f"Models: {len(listing.models)}")
    for model_id, replaced, replacing in result.model_conflicts:
        console.print(f"  [yellow]model {model_id}:[/yellow] {replacing} replaced {replaced}")
    console.print("")

    table = Table(show_header=True, header_style="bold")
    table.add_column("RESOURCE", no_wrap=True)
    table.add_column("NAME")
    table.add_column("ENDPOINTS", justify="right")
    table.add_column("OPERATIONS", justify="right")
    table.add_column("DESCRIPTION")

    for key, entry in listing.apis.items():
        doc = result.assembler.get_documentation(key)
        endpoints = len(doc.endpoints) if doc else 0
        operations = sum(len(e.operations) for e in doc.endpoints.values()) if doc else 0
        table.add_row(
            key,
            doc.display_name if doc else "-",
            str(endpoints),
            str(operations),
            entry.description,
        )
    console.print(table)

    s = result.stats
    console.print("")
    console.print(
        f"Operations: added={s.operations_added}, hidden={s.operations_hidden}, failed={s.operations_failed}"
    )
    console.print(f"Routes skipped: {s.routes_skipped}")


@app.command()
def show(
    app_path: str = typer.Argument(..., help="Application to document, as module:attribute"),
    name: str = typer.Argument(..., help="Resource display name or path"),
    models: Optional[List[str]] = typer.Option(None, "--models", help="Package to scan for models (repeatable)"),
    app_dir: str = typer.Option(".", help="Directory added to sys.path before importing"),
) -> None:
    result = _build(app_path, models, app_dir)
    doc = result.assembler.get_documentation(name)
    if doc is None:
        console.print(f"[bold red]No resource named[/bold red] {name!r}")
        raise typer.Exit(code=1)

    console.print(f"[bold]{doc.display_name}[/bold] ({doc.resource_path})")
    if doc.description:
        console.print(doc.description)

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("PATH")
    table.add_column("NICKNAME")
    table.add_column("SUMMARY")
    table.add_column("PARAMS")
    table.add_column("RESPONSE", no_wrap=True)

    for endpoint in doc.endpoints.values():
        for op in endpoint.operations:
            params = ", ".join(f"{p.name}:{p.data_type}" for p in op.parameters)
            table.add_row(
                op.http_method,
                endpoint.path,
                op.nickname,
                op.summary or "",
                params,
                op.response_class,
            )
    console.print(table)


@app.command("models")
def models_cmd(
    packages: List[str] = typer.Argument(..., help="Packages to scan"),
    app_dir: str = typer.Option(".", help="Directory added to sys.path before importing"),
) -> None:
    root = str(Path(app_dir).expanduser().resolve())
    if root not in sys.path:
        sys.path.insert(0, root)

    builder = ModelSchemaBuilder()
    schemas = builder.scan(discover_model_classes(packages))

    console.print(f"[bold]Models:[/bold] {len(schemas)}")
    for schema in schemas.values():
        console.print("")
        console.print(f"[bold]{schema.id}[/bold] {schema.name} - {schema.description}")
        table = Table(show_header=True, header_style="bold")
        table.add_column("PROPERTY", no_wrap=True)
        table.add_column("TYPE", no_wrap=True)
        table.add_column("REQUIRED", no_wrap=True)
        table.add_column("ALLOWED")
        table.add_column("DESCRIPTION")
        for prop in schema.properties.values():
            allowed = ",".join(prop.allowable_values.values) if prop.allowable_values else ""
            table.add_row(prop.name, prop.type, "yes" if prop.required else "", allowed, prop.description)
        console.print(table)


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
