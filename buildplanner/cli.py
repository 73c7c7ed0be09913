"""
BuildPlanner CLI.

Command-line interface for resolving and rendering build plans.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.config import get_config
from .core.exceptions import BuildPlannerError
from .core.logging import setup_logging
from .loaders import load_descriptor
from .models.descriptor import BuildDescriptor

app = typer.Typer(
    name="buildplanner",
    help="Resolve signing, SDK and optimization settings into a build plan",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"BuildPlanner v{__version__}")
        raise typer.Exit()


def _descriptor(descriptor_path: Path | None, application_id: str | None) -> BuildDescriptor:
    """Load the descriptor, or fall back to the stock one for an application ID."""
    path = descriptor_path or get_config().descriptor_path
    if not path.is_file() and application_id:
        return BuildDescriptor.default(application_id, base_dir=Path.cwd())
    return load_descriptor(path)


def _resolver(descriptor: BuildDescriptor):
    from .services.resolver import BuildPlanResolver

    return BuildPlanResolver(descriptor, config=get_config())


DescriptorOption = typer.Option(
    None,
    "--descriptor",
    "-d",
    help="Build descriptor JSON (default: android/app/buildplan.json)",
)
SharedConfigOption = typer.Option(
    None,
    "--shared-config",
    "-s",
    help="Shared framework configuration (default: android/local.properties)",
)
ApplicationIdOption = typer.Option(
    None,
    "--application-id",
    "-a",
    help="Use the stock debug/release descriptor for this application ID when none exists",
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """BuildPlanner: build-variant resolution for app packaging."""
    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)


@app.command()
def plan(
    variant: str = typer.Argument(..., help="Variant to resolve (e.g., debug, release)"),
    descriptor_path: Optional[Path] = DescriptorOption,
    shared_config: Optional[Path] = SharedConfigOption,
    application_id: Optional[str] = ApplicationIdOption,
) -> None:
    """Resolve a build plan and print it with credentials masked."""
    try:
        descriptor = _descriptor(descriptor_path, application_id)
    except BuildPlannerError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
        raise typer.Exit(1)

    result = _resolver(descriptor).plan(variant, shared_config or get_config().shared_config_path)
    if not result.success:
        console.print("\n[bold red]✗ Build plan failed![/bold red]")
        console.print(f"Error: {escape(result.error or '')}")
        raise typer.Exit(1)

    table = Table(title=f"Build Plan: {variant}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    for key, value in result.data.summary.items():
        table.add_row(key, value)
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]! {warning}[/yellow]")


@app.command()
def render(
    variant: str = typer.Argument(..., help="Variant to render"),
    descriptor_path: Optional[Path] = DescriptorOption,
    shared_config: Optional[Path] = SharedConfigOption,
    application_id: Optional[str] = ApplicationIdOption,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the build script here instead of stdout",
    ),
) -> None:
    """Render the resolved plan as a Gradle Kotlin DSL build script."""
    from .services.render import GradleRenderer

    try:
        descriptor = _descriptor(descriptor_path, application_id)
        resolved = _resolver(descriptor).build_plan(
            variant, shared_config or get_config().shared_config_path
        )
    except BuildPlannerError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
        raise typer.Exit(1)

    renderer = GradleRenderer(
        credential_env_prefix=get_config().signing.credential_env_prefix,
        plugins=descriptor.plugins,
    )
    if output:
        renderer.write(resolved, output)
        console.print(f"[bold green]✓[/bold green] Wrote {output}")
    else:
        typer.echo(renderer.render(resolved))


@app.command()
def variants(
    descriptor_path: Optional[Path] = DescriptorOption,
    application_id: Optional[str] = ApplicationIdOption,
) -> None:
    """List the variants declared by the descriptor."""
    try:
        descriptor = _descriptor(descriptor_path, application_id)
    except BuildPlannerError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
        raise typer.Exit(1)

    resolver = _resolver(descriptor)
    table = Table(title="Build Variants")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Signing")
    table.add_column("Shrink code")
    table.add_column("Shrink resources")

    for v in descriptor.variants(resolver.default_flags):
        table.add_row(
            v.name,
            v.kind.value,
            v.signing_config or ("debug" if v.is_debug else "[red]none[/red]"),
            str(v.optimization.shrink_code).lower(),
            str(v.optimization.shrink_resources).lower(),
        )

    console.print(Panel.fit(f"[bold]{descriptor.application_id}[/bold]", border_style="blue"))
    console.print(table)


if __name__ == "__main__":
    app()
