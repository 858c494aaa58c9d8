"""
Command-line interface for ropdfx.
"""

import json
import logging
import sys

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from ropdfx import __version__
from ropdfx.assemble import assemble, registry
from ropdfx.assets import SIGNATURE_ROLES, BrandingAssets, SignatureAsset, load_image_asset
from ropdfx.exceptions import RoPdfError
from ropdfx.extract import ExtractionConfig, ExtractionRouter, ImagePlan, SourceDocument
from ropdfx.recognition import build_payload
from ropdfx.records import CaseRecord
from ropdfx.utils import format_file_size

console = Console()


def _fail(error) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


def _load_json(path):
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def parse_signature(value):
    """Parse ``ROLE=FILE[:NAME]`` into a :class:`SignatureAsset`."""

    role, separator, rest = value.partition("=")
    role = role.strip().lower()
    if not separator or not rest:
        raise click.BadParameter(f"Expected ROLE=FILE[:NAME], got '{value}'")
    if role not in SIGNATURE_ROLES:
        raise click.BadParameter(f"Unknown role '{role}'. Choose from: {', '.join(SIGNATURE_ROLES)}")
    image_path, _, name = rest.partition(":")
    return SignatureAsset(role=role, image=load_image_asset(image_path), signer_name=name.strip() or None)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """
    ropdfx - route repair order PDFs for recognition and render case reports.
    """
    logging.getLogger("ropdfx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="extract")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--threshold", default=100, show_default=True, type=int, help="Minimum characters for the text path")
@click.option("--max-pages", default=10, show_default=True, type=int, help="Maximum pages to rasterize")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the recognition payload as JSON")
def extract(input_pdf, threshold, max_pages, output):
    """
    Decide how INPUT_PDF should be sent to the recognition service.

    Examples:

        ropdfx extract repair_order.pdf

        ropdfx extract scan.pdf --max-pages 5 -o payload.json
    """
    try:
        config = ExtractionConfig(text_threshold=threshold, max_pages=max_pages)
        document = SourceDocument.from_path(input_pdf)
        router = ExtractionRouter(config)

        plan = None
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Extracting", total=100)
            for event in router.stream(document):
                progress.update(task, completed=event.percent, description=event.message)
                if event.plan is not None:
                    plan = event.plan

        table = Table(title=f"Extraction Plan: {document.name}", show_header=False)
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")
        table.add_row("Pages", str(document.page_count))
        table.add_row("Size", format_file_size(len(document.data)))
        table.add_row("Path", plan.kind)
        if isinstance(plan, ImagePlan):
            table.add_row("Page images", str(len(plan.page_images)))
            table.add_row("Scale / quality", f"{plan.policy.scale} / {plan.policy.quality}")
        else:
            table.add_row("Characters", str(len(plan.content)))
        console.print()
        console.print(table)

        if output:
            with open(output, "w", encoding="utf-8") as handle:
                json.dump(build_payload(plan), handle, indent=2)
            console.print(f"\n[bold green]✓ Payload written to {output}[/bold green]")
        console.print()

    except (RoPdfError, ValueError, OSError) as e:
        _fail(e)


@cli.command(name="render")
@click.argument("record_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--kind", "-k", type=click.Choice(list(registry.kinds())), default="packet", show_default=True)
@click.option("--profile", type=click.Path(exists=True, dir_okay=False), help="Company profile JSON")
@click.option("--logo", type=click.Path(exists=True, dir_okay=False), help="Logo image")
@click.option("--signature", "signatures", multiple=True, help="Signature as ROLE=FILE[:NAME]; repeatable")
@click.option("--output-dir", "-o", default="./output", type=click.Path(file_okay=False), help="Output directory")
def render(record_json, kind, profile, logo, signatures, output_dir):
    """
    Render RECORD_JSON as a finished PDF document.

    Examples:

        ropdfx render case.json --kind packet

        ropdfx render case.json -k summary --logo logo.png --signature technician=sig.png:Jane Doe
    """
    try:
        record = CaseRecord.from_dict(_load_json(record_json))
        branding = BrandingAssets.from_profile(_load_json(profile) if profile else None, logo=logo)
        signature_assets = [parse_signature(value) for value in signatures]

        document = assemble(kind, record, branding, signature_assets)
        target = document.save(output_dir)

        console.print(f"\n[bold green]✓ Generated {document.file_name}[/bold green]")
        console.print(f"[dim]Pages: {document.page_count} | Size: {format_file_size(len(document.data))}[/dim]")
        console.print(f"[dim]Output: {target}[/dim]\n")

    except (RoPdfError, ValueError, OSError) as e:
        _fail(e)


def main():
    cli()


if __name__ == "__main__":
    main()
