"""
Command-line interface for PDF Handouts.
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pdf_handouts import __version__
from pdf_handouts.dates import resolve_date_text
from pdf_handouts.exceptions import PdfHandoutsError
from pdf_handouts.layout import OverlayConfig
from pdf_handouts.merge import merge_documents, merge_pdfs, write_document
from pdf_handouts.metadata import extract_metadata
from pdf_handouts.overlay import apply, apply_to_file
from pdf_handouts.styles import parse_font_spec
from pdf_handouts.utils import expand_inputs, get_logger

console = Console()

FONT_SPEC_HELP = 'Font spec: "[bold] [italic] [size[pt]] [family] [#rrggbb]"'


def overlay_options(func):
    """Options shared by the ``headers`` and ``build`` commands."""

    options = [
        click.option('--title', help='Title centered at the top of the first page'),
        click.option('--footer-left', help='Left footer text (use | or [br] for line breaks)'),
        click.option('--footer-center', help='Center footer text'),
        click.option('--footer-right', help='Right footer text'),
        click.option('--date', 'date_expr', help='Value for [date]: today, 2026-01-14, tuesday, tuesday+1'),
        click.option('--font', help=f'{FONT_SPEC_HELP} for header and footer'),
        click.option('--header-font', help='Font spec for the header (overrides --font)'),
        click.option('--footer-font', help='Font spec for the footer (overrides --font)'),
        click.option('--font-file', type=click.Path(exists=True, dir_okay=False), help='TrueType file to embed'),
        click.option('--open', 'open_after', is_flag=True, help='Open the output file when done'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_config(title, footer_left, footer_center, footer_right, date_expr, font, header_font, footer_font):
    """Turn command-line values into an :class:`OverlayConfig`."""

    base = font or None
    header_spec = header_font or base
    footer_spec = footer_font or base
    return OverlayConfig(
        title=title,
        footer_left=footer_left,
        footer_center=footer_center,
        footer_right=footer_right,
        date=resolve_date_text(date_expr),
        header_style=parse_font_spec(header_spec) if header_spec else None,
        footer_style=parse_font_spec(footer_spec) if footer_spec else None,
    )


def report_overlay(result):
    console.print(f"[bold green]✓ Stamped {len(result.stamped)} page(s)[/bold green]")
    if result.skipped:
        table = Table(title="Skipped pages")
        table.add_column("Page", style="cyan", no_wrap=True)
        table.add_column("Reason", style="yellow")
        for skipped in result.skipped:
            table.add_row(str(skipped.index + 1), escape(skipped.reason))
        console.print(table)


def finish(output, open_after):
    console.print(f"[dim]Output: {output}[/dim]\n")
    if open_after:
        click.launch(str(output))


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def cli(verbose):
    """
    PDF Handouts - merge PDFs and add headers and footers.
    """
    logger = get_logger("pdf_handouts")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="merge")
@click.argument('inputs', nargs=-1, required=True)
@click.option('--output', '-o', required=True, type=click.Path(dir_okay=False), help='Output PDF file')
@click.option('--open', 'open_after', is_flag=True, help='Open the output file when done')
def merge_command(inputs, output, open_after):
    """
    Merge PDF files in order. Glob patterns are expanded and sorted.

    Example:

        pdf-handouts merge "[0-9]*.pdf" -o handout.pdf
    """
    try:
        paths = expand_inputs(inputs)
        console.print(f"\n[bold cyan]Merging {len(paths)} PDF files...[/bold cyan]")
        output_path = merge_pdfs(paths, output)
        console.print(f"[bold green]✓ Merged to:[/bold green] {output_path}")
        finish(output_path, open_after)
    except (PdfHandoutsError, FileNotFoundError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {escape(str(e))}")
        sys.exit(1)


@cli.command(name="headers")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', required=True, type=click.Path(dir_okay=False), help='Output PDF file')
@overlay_options
def headers_command(input_pdf, output, title, footer_left, footer_center, footer_right,
                    date_expr, font, header_font, footer_font, font_file, open_after):
    """
    Add a title and footers to an existing PDF.

    Example:

        pdf-handouts headers in.pdf -o out.pdf --title "My Document" --footer-right "[date]" --date today
    """
    try:
        config = build_config(title, footer_left, footer_center, footer_right,
                              date_expr, font, header_font, footer_font)
        console.print("\n[bold cyan]Adding headers and footers...[/bold cyan]")
        result = apply_to_file(input_pdf, output, config, font_file=font_file)
        report_overlay(result)
        finish(output, open_after)
    except PdfHandoutsError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {escape(str(e))}")
        sys.exit(1)


@cli.command(name="build")
@click.argument('inputs', nargs=-1, required=True)
@click.option('--output', '-o', required=True, type=click.Path(dir_okay=False), help='Output PDF file')
@overlay_options
def build_command(inputs, output, title, footer_left, footer_center, footer_right,
                  date_expr, font, header_font, footer_font, font_file, open_after):
    """
    Merge PDFs and add headers and footers in one step.

    Example:

        pdf-handouts build *.pdf -o handout.pdf --footer-center "Page [page] of [pages]"
    """
    try:
        config = build_config(title, footer_left, footer_center, footer_right,
                              date_expr, font, header_font, footer_font)
        paths = expand_inputs(inputs)
        console.print(f"\n[bold cyan]Step 1: Merging {len(paths)} PDF files...[/bold cyan]")
        merged = merge_documents(paths)
        console.print("[bold cyan]Step 2: Adding headers and footers...[/bold cyan]")
        result = apply(merged, config, font_file=font_file)
        output_path = write_document(result.document, output)
        report_overlay(result)
        finish(output_path, open_after)
    except (PdfHandoutsError, FileNotFoundError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {escape(str(e))}")
        sys.exit(1)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
def info_command(input_pdf):
    """
    Display information about a PDF file.

    Example:

        pdf-handouts info handout.pdf
    """
    try:
        info = extract_metadata(input_pdf)

        table = Table(title=f"PDF Information: {info.path.name}")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        table.add_row("File Path", str(info.path))
        table.add_row("Pages", str(info.page_count))
        if info.page_size_mm:
            width, height = info.page_size_mm
            table.add_row("Page Size", f"{width} x {height} mm")
        table.add_row("Title", info.title or "-")
        table.add_row("Author", info.author or "-")

        console.print()
        console.print(table)
        console.print()
    except PdfHandoutsError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {escape(str(e))}")
        sys.exit(1)


if __name__ == '__main__':
    cli()
