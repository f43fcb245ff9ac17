"""
Command-line interface for PDF builder.
"""

import logging
import os
import sys
import threading
from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from pdf_builder.builder import BuildCoordinator
from pdf_builder.config import (
    DEFAULT_ENCODING,
    ENV_ENCODING,
    ENV_PARALLELISM,
    REPORT_FILENAME,
    BuildSettings,
    default_parallelism,
)
from pdf_builder.exceptions import ConfigurationError, LoadFileError
from pdf_builder.importers import load_collection
from pdf_builder.report import write_build_report
from pdf_builder.utils import configure_logging, format_file_size, time_block

console = Console()
LOGGER = logging.getLogger(__name__)


def _fail(message):
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}")
    sys.exit(1)


def _run_cancellable(coordinator, settings, collection):
    """Run the build on a worker thread so Ctrl-C can cancel pending documents."""
    cancel_event = threading.Event()
    outcome = {}

    def target():
        try:
            outcome['log'] = coordinator.run(
                collection,
                settings.input_root,
                settings.output_dir,
                settings.parallelism,
                cancel_event=cancel_event,
            )
        except BaseException as exc:  # re-raised on the main thread
            outcome['error'] = exc

    worker = threading.Thread(target=target, name="pdf-builder-run", daemon=True)
    worker.start()
    while worker.is_alive():
        try:
            worker.join(timeout=0.2)
        except KeyboardInterrupt:
            console.print("\n[bold yellow]⚠ Cancelling: waiting for documents in progress...[/bold yellow]")
            cancel_event.set()

    if 'error' in outcome:
        raise outcome['error']
    return outcome['log']


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    PDF Builder CLI - Convert load-file image sets into one PDF per document.
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="build")
@click.argument('load_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output-dir', '-o',
    required=True,
    help='Output directory for the PDFs',
    type=click.Path(file_okay=False)
)
@click.option(
    '--parallelism', '-t',
    default=default_parallelism,
    show_default="number of CPUs",
    envvar=ENV_PARALLELISM,
    help='Maximum number of documents built at once',
    type=int
)
@click.option(
    '--encoding', '-e',
    default=DEFAULT_ENCODING,
    show_default=True,
    envvar=ENV_ENCODING,
    help='Text encoding of the load file',
    type=str
)
@click.option(
    '--log-file',
    help=f'Build report path (default: {REPORT_FILENAME} next to the load file)',
    type=click.Path(dir_okay=False)
)
@click.option('--no-log', is_flag=True, help='Do not write a build report')
def build(load_file, output_dir, parallelism, encoding, log_file, no_log):
    """
    Build one PDF per document listed in an OPT or LFP load file.

    Examples:

        pdf-builder build export.opt -o ./pdfs

        pdf-builder build export.lfp -o ./pdfs -t 8 --encoding utf-8
    """
    load_path = Path(load_file)
    report_path = None
    if not no_log:
        report_path = Path(log_file) if log_file else load_path.resolve().parent / REPORT_FILENAME

    try:
        settings = BuildSettings(
            load_file=load_path,
            output_dir=Path(output_dir),
            parallelism=parallelism,
            encoding=encoding,
            report_path=report_path,
        ).validate()

        console.print("\n[bold cyan]Importing load file...[/bold cyan]")
        collection = load_collection(settings.load_file, settings.encoding)
    except (ConfigurationError, LoadFileError) as e:
        _fail(e)

    info_table = Table(title="Build Information", show_header=False)
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")
    info_table.add_row("Load File", load_path.name)
    info_table.add_row("Documents", str(collection.document_count))
    info_table.add_row("Images", str(collection.image_count))
    info_table.add_row("Parallelism", str(settings.parallelism))
    info_table.add_row("Output Directory", os.path.abspath(output_dir))
    console.print(info_table)

    if not collection.document_count:
        console.print(f"\n[bold yellow]⚠ No documents found in {load_path.name}[/bold yellow]")
        sys.exit(0)

    settings.output_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"\n[bold cyan]Building {collection.document_count} PDF(s)...[/bold cyan]\n")

    try:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console
        ) as progress:
            task = progress.add_task("Building PDFs", total=100)

            def update_progress(percent):
                progress.update(task, completed=percent)

            coordinator = BuildCoordinator(progress_callback=update_progress)
            with time_block(LOGGER, f"Build of {load_path.name}"):
                log = _run_cancellable(coordinator, settings, collection)
    except ConfigurationError as e:
        _fail(e)

    console.print("\n[bold]Build Summary[/bold]")
    console.print("=" * 50)

    summary_table = Table(show_header=False)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="green")
    summary_table.add_row("Documents", str(log.document_count))
    summary_table.add_row("Images", str(log.image_count))
    summary_table.add_row("✓ PDFs Created", f"[green]{len(log.pdfs)}[/green]")
    summary_table.add_row("✗ Failed", f"[red]{len(log.errors)}[/red]")
    if log.skipped:
        summary_table.add_row("⚠ Cancelled", f"[yellow]{len(log.skipped)}[/yellow]")
    summary_table.add_row(
        "Output Size", format_file_size(sum(pdf.stat().st_size for pdf in log.pdfs if pdf.exists()))
    )
    summary_table.add_row("Elapsed", f"{log.elapsed_seconds / 60:.1f} minutes")
    console.print(summary_table)

    if log.errors:
        console.print("\n[bold red]Errors:[/bold red]")
        for message in log.errors[:10]:
            console.print(f"  ✗ {message}")
        if len(log.errors) > 10:
            console.print(f"  ... and {len(log.errors) - 10} more")

    if settings.report_path is not None:
        try:
            written = write_build_report(log, settings.report_path, load_file=load_path)
            console.print(f"\n[dim]Build report: {written}[/dim]")
        except OSError as e:
            console.print(f"\n[bold yellow]⚠ Could not write build report:[/bold yellow] {e}")

    console.print()
    sys.exit(0 if log.succeeded else 1)


@cli.command(name="info")
@click.argument('load_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--encoding', '-e',
    default=DEFAULT_ENCODING,
    show_default=True,
    envvar=ENV_ENCODING,
    help='Text encoding of the load file',
    type=str
)
def show_info(load_file, encoding):
    """
    Display document and image counts for a load file.

    Example:

        pdf-builder info export.opt
    """
    try:
        collection = load_collection(load_file, encoding)
    except LoadFileError as e:
        _fail(e)

    table = Table(title=f"Load File: {os.path.basename(load_file)}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("File Path", os.path.abspath(load_file))
    table.add_row("Documents", str(collection.document_count))
    table.add_row("Images", str(collection.image_count))

    console.print()
    console.print(table)

    if collection.document_count:
        docs_table = Table(title="Documents", show_header=True)
        docs_table.add_column("#", style="cyan", width=4)
        docs_table.add_column("Key", style="green")
        docs_table.add_column("Pages", style="green")
        for idx, document in enumerate(collection.documents[:10], 1):
            docs_table.add_row(str(idx), document.key, str(document.image_count))
        if collection.document_count > 10:
            docs_table.add_row("...", f"and {collection.document_count - 10} more", "")
        console.print(docs_table)
    console.print()


if __name__ == '__main__':
    cli()
