"""Command-line interface for the localization lanes."""

import logging
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from . import __version__
from . import lanes
from .config import config, build_pipeline_settings, PipelineSettings
from .errors import PipelineError
from .models.variants import ProductVariant
from .translation.progress import ProgressReport
from .validation.coverage import locale_coverage

console = Console()

VARIANT_CHOICES = ["wordpress", "jetpack", "all"]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_settings() -> PipelineSettings:
    errors = config.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise click.Abort()
    try:
        return build_pipeline_settings(config)
    except PipelineError as e:
        _fail(e)


def _fail(error: PipelineError) -> None:
    console.print(f"[red]Error:[/red] {error}")
    raise click.Abort()


def _selected_variants(settings: PipelineSettings, variant: str) -> List[ProductVariant]:
    # "all" is a sequential run of each single-variant lane
    if variant == "all":
        return list(settings.variants.values())
    return [settings.variant(variant)]


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
def cli(verbose: bool):
    """WordPress iOS localization and App Store metadata lanes."""
    _setup_logging(verbose)


@cli.command("generate-strings-file")
@click.option(
    "--skip-commit",
    is_flag=True,
    help="Leave the generated files uncommitted"
)
def generate_strings_file(skip_commit: bool):
    """Generate Localizable.strings for GlotPress from code and manual files."""
    settings = _load_settings()
    ctx = lanes.LaneContext.create(settings)

    console.print(f"[blue]Scanning:[/blue] {', '.join(settings.extraction.paths)}")
    try:
        report = lanes.generate_strings_file_for_glotpress(ctx, commit=not skip_commit)
    except PipelineError as e:
        _fail(e)

    console.print(
        f"[green]Merged manual strings:[/green] {len(report.added)} added, "
        f"{len(report.updated)} updated, {len(report.unchanged)} unchanged"
    )
    console.print("[green]Done![/green]")


@cli.command("update-appstore-strings")
@click.option(
    "--version",
    "version",
    required=True,
    help="Current x.y version of the app, used to key the release notes"
)
@click.option(
    "--variant",
    type=click.Choice(VARIANT_CHOICES),
    default="all",
    help="Product variant to update"
)
def update_appstore_strings(version: str, variant: str):
    """Update AppStoreStrings.po with the latest metadata sources."""
    settings = _load_settings()
    ctx = lanes.LaneContext.create(settings)

    try:
        for product in _selected_variants(settings, variant):
            po_path = lanes.update_appstore_strings(ctx, product, version)
            console.print(f"[green]{product.display_name}:[/green] wrote {po_path}")
    except PipelineError as e:
        _fail(e)


@cli.command("download-localized-strings-and-metadata")
@click.option(
    "--skip-metadata",
    is_flag=True,
    help="Only download the app strings"
)
def download_localized_strings_and_metadata(skip_metadata: bool):
    """Download app translations and App Store metadata from GlotPress."""
    settings = _load_settings()
    ctx = lanes.LaneContext.create(settings)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Downloading", total=len(settings.locale_table))

            def update_progress(current, total, locale):
                progress.update(task, completed=current, description=f"[{locale}] downloaded")

            downloaded, modified = lanes.download_localized_strings(ctx, progress_callback=update_progress)

        console.print(f"[green]Downloaded:[/green] {len(downloaded)} locales")
        console.print(f"[green]Updated manual strings files:[/green] {len(modified)}")

        if not skip_metadata:
            for product in settings.variants.values():
                console.print(f"\n[bold cyan]Downloading {product.display_name} metadata...[/bold cyan]")
                lanes.download_localized_app_store_metadata(ctx, product)
    except PipelineError as e:
        _fail(e)

    console.print("[green]Done![/green]")


@cli.command("download-app-store-metadata")
@click.option(
    "--variant",
    type=click.Choice(VARIANT_CHOICES),
    default="all",
    help="Product variant to download"
)
def download_app_store_metadata(variant: str):
    """Download localized App Store metadata from GlotPress."""
    settings = _load_settings()
    ctx = lanes.LaneContext.create(settings)

    try:
        for product in _selected_variants(settings, variant):
            committed = lanes.download_localized_app_store_metadata(ctx, product)
            status = "committed" if committed else "nothing to commit"
            console.print(f"[green]{product.display_name}:[/green] {status}")
    except PipelineError as e:
        _fail(e)


@cli.command("update-metadata-on-app-store-connect")
@click.option(
    "--with-screenshots",
    is_flag=True,
    help="Also upload the latest screenshots"
)
@click.option(
    "--variant",
    type=click.Choice(VARIANT_CHOICES),
    default="all",
    help="Product variant to upload"
)
def update_metadata_on_app_store_connect(with_screenshots: bool, variant: str):
    """Upload the localized metadata to App Store Connect."""
    settings = _load_settings()
    ctx = lanes.LaneContext.create(settings)

    try:
        common = settings.common_upload_parameters()
        for product in _selected_variants(settings, variant):
            console.print(f"[blue]Uploading:[/blue] {product.display_name} {common.app_version}")
            lanes.update_metadata_on_app_store_connect(ctx, product, with_screenshots, common=common)
    except PipelineError as e:
        _fail(e)

    console.print("[green]Done![/green]")


@cli.command("check-all-translations")
@click.option(
    "--interactive",
    is_flag=True,
    help="Ask for confirmation when a locale is below the threshold"
)
@click.option(
    "--threshold",
    type=float,
    default=None,
    help="Minimum acceptable translation percentage (0-100)"
)
def check_all_translations(interactive: bool, threshold: Optional[float]):
    """Check translation progress of every GlotPress project."""
    settings = _load_settings()
    ctx = lanes.LaneContext.create(settings)
    threshold = config.translation_threshold if threshold is None else threshold

    try:
        reports = lanes.check_all_translations(ctx, threshold)
    except PipelineError as e:
        _fail(e)

    for report in reports:
        _print_progress(report)

    violations = sum(len(report.violations) for report in reports)
    if not violations:
        console.print("[green]All locales are above the threshold[/green]")
        return

    console.print(f"[yellow]{violations} locale(s) below {threshold:.0f}%[/yellow]")
    if interactive and not click.confirm("Continue anyway?"):
        raise click.Abort()


@cli.command()
@click.option(
    "--resource-root", "-r",
    "resource_root",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Folder holding the .lproj folders (defaults to the app resources)"
)
def stats(resource_root: Optional[str]):
    """Show translation coverage of the local Localizable.strings files."""
    settings = _load_settings()
    root = resource_root or str(Path(settings.project_root) / settings.extraction.resources_dir)

    try:
        coverage = locale_coverage(root, settings.locale_table)
    except (PipelineError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()

    table = Table(title=f"Coverage for {root}")
    table.add_column("Locale", style="cyan")
    table.add_column("Translated", justify="right")
    table.add_column("Coverage", justify="right")
    table.add_column("Stale", justify="right")

    for item in coverage:
        if not item.exists:
            table.add_row(item.lproj_code, "[dim]missing[/dim]", "", "")
            continue
        table.add_row(
            item.lproj_code,
            f"{item.translated}/{item.total}",
            f"{item.percentage:.1f}%",
            str(item.stale),
        )

    console.print(table)


def _print_progress(report: ProgressReport):
    """Print translation progress of a project."""
    table = Table(title=report.project_url)
    table.add_column("Locale", style="cyan")
    table.add_column("Translated", justify="right")
    table.add_column("Untranslated", justify="right")

    for item in report.locales:
        color = "green" if item.percent_translated >= report.threshold else "red"
        table.add_row(
            item.locale,
            f"[{color}]{item.percent_translated:.0f}%[/{color}]",
            str(item.untranslated_count),
        )

    console.print(table)
    if report.violations:
        below = ", ".join(item.locale for item in report.violations)
        console.print(Panel(f"[yellow]Below {report.threshold:.0f}%:[/yellow] {below}", title="Warning"))


if __name__ == "__main__":
    cli()
