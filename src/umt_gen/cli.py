"""CLI interface for the universal mod template generator."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from umt_gen import __version__
from umt_gen.config import get_settings
from umt_gen.core.catalog import CatalogService
from umt_gen.template.customizer import TemplateCustomizer
from umt_gen.template.errors import TemplateError
from umt_gen.versions.schemas import SELECTABLE_LOADERS, LoaderKind, Selection
from umt_gen.versions.toolchain import java_version_for

app = typer.Typer(
    name="umt-gen",
    help="Generate customized universal mod templates for Fabric, Forge and NeoForge",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"umt-gen version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show debug logging")] = False,
):
    """Universal Mod Template Generator - scaffold multi-loader Minecraft mods."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_loaders(values: list[str]) -> list[LoaderKind]:
    loaders = []
    for value in values:
        try:
            kind = LoaderKind(value.lower())
        except ValueError:
            kind = None
        if kind is None or not kind.selectable:
            choices = ", ".join(k.value for k in SELECTABLE_LOADERS)
            console.print(f"[red]Unknown loader: {value}[/] (choose from {choices})")
            raise typer.Exit(1)
        loaders.append(kind)
    return loaders


@app.command()
def versions(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Rows to show (0 = all)")] = 20,
    loader: Annotated[
        Optional[str], typer.Option("--loader", "-l", help="Only versions supporting this loader")
    ] = None,
):
    """Fetch all feeds and show the compatibility matrix."""
    only = _parse_loaders([loader])[0] if loader else None

    catalog = CatalogService(get_settings())
    try:
        with console.status("Fetching version feeds..."):
            snapshot = catalog.refresh_all()
    finally:
        catalog.close()

    rows = [r for r in snapshot.matrix if only is None or r.supports(only)]
    if not rows:
        console.print("[yellow]No Minecraft versions available[/]")
        raise typer.Exit(1)

    table = Table(title="Compatible Minecraft Versions")
    table.add_column("Minecraft", style="cyan")
    table.add_column("Java", justify="right")
    table.add_column("Fabric")
    table.add_column("Fabric API")
    table.add_column("Forge")
    table.add_column("NeoForge")

    shown = rows if limit <= 0 else rows[:limit]
    for record in shown:
        table.add_row(
            record.id,
            str(java_version_for(record.id)),
            record.version_of(LoaderKind.FABRIC) or "[dim]-[/]",
            record.version_of(LoaderKind.FABRIC_API) or "[dim]-[/]",
            record.version_of(LoaderKind.FORGE) or "[dim]-[/]",
            record.version_of(LoaderKind.NEOFORGE) or "[dim]-[/]",
        )
    console.print(table)
    if len(shown) < len(rows):
        console.print(f"[dim]{len(rows) - len(shown)} more, use --limit 0 to show all[/]")


@app.command()
def generate(
    mod_id: Annotated[str, typer.Option("--mod-id", help="Mod identifier, e.g. mymod")],
    mod_name: Annotated[str, typer.Option("--mod-name", help="Display name, e.g. 'My Mod'")],
    package: Annotated[str, typer.Option("--package", help="Java package, e.g. com.example.mymod")],
    loader: Annotated[
        list[str], typer.Option("--loader", "-l", help="Loader to include (repeatable)")
    ],
    mc: Annotated[
        list[str], typer.Option("--mc", help="Minecraft version (repeatable, first is primary)")
    ],
    template: Annotated[
        Optional[Path], typer.Option("--template", "-t", help="Local template zip")
    ] = None,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Output directory")
    ] = None,
):
    """Generate a customized template zip."""
    settings = get_settings()
    loaders = _parse_loaders(loader)

    catalog = CatalogService(settings)
    try:
        with console.status("Fetching version feeds..."):
            snapshot = catalog.refresh_all()

        records = []
        for version_id in mc:
            record = snapshot.record(version_id)
            if record is None:
                console.print(f"[red]Unknown Minecraft version: {version_id}[/]")
                raise typer.Exit(1)
            records.append(record)

        if template:
            if not template.exists():
                console.print(f"[red]Template not found: {template}[/]")
                raise typer.Exit(1)
            archive = template.read_bytes()
        else:
            with console.status("Fetching template..."):
                archive = catalog.template()
            if archive is None:
                console.print("[red]Template not available[/]")
                raise typer.Exit(1)
    finally:
        catalog.close()

    try:
        selection = Selection(
            mod_id=mod_id,
            mod_name=mod_name,
            package_name=package,
            loaders=loaders,
            versions=records,
        )
    except ValidationError as e:
        for error in e.errors(include_url=False):
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"[red]{field}: {error['msg']}[/]")
        raise typer.Exit(1)

    try:
        artifact = TemplateCustomizer().generate(archive, selection)
    except TemplateError as e:
        console.print(f"[red]Failed to generate template: {e}[/]")
        raise typer.Exit(1)

    output_dir = output or settings.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / artifact.filename
    output_path.write_bytes(artifact.data)

    for record in records:
        supported = [k.value for k in selection.ordered_loaders() if record.supports(k)]
        builds_for = ", ".join(supported) or "[yellow]none[/]"
        console.print(f"  [cyan]{record.id}[/] builds for {builds_for}")
    console.print(f"[green]Template written to {output_path}[/]")


@app.command()
def serve(
    port: Annotated[int, typer.Option("--port", "-p", help="Port to serve on")] = 3000,
    host: Annotated[str, typer.Option("--host", help="Host to bind to")] = "127.0.0.1",
    dev: Annotated[bool, typer.Option("--dev", help="Development mode (permissive CORS)")] = False,
):
    """Serve the HTTP API."""
    import uvicorn

    from umt_gen.api.app import create_app

    console.print(f"[bold green]Template generator API[/] http://{host}:{port}")
    console.print(f"[dim]API docs: http://{host}:{port}/api/docs[/]")
    uvicorn.run(create_app(dev=dev), host=host, port=port, log_level="info")


if __name__ == "__main__":
    app()
