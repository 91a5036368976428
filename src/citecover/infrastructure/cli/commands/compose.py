"""Compose a cited PDF from a local file and an item in the catalog."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

import typer
from rich.console import Console

from ...adapters.json_metadata_repository import JsonMetadataRepository
from ...adapters.pymupdf_page_composer import PyMuPdfPageComposer
from ...config.environment import get_config_path
from ...config.settings import Settings
from ...logging import configure_logging, set_correlation_id
from ....domain.errors import CitationDocumentError, ItemNotFound

app = typer.Typer(help="Compose cited documents")
console = Console()
logger = logging.getLogger(__name__)


@app.command()
def run(
    original: Path = typer.Argument(..., help="Path to the original PDF"),
    item: str = typer.Option(..., "--item", "-i", help="Item handle in the catalog (e.g. 123456789/42)"),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the cited PDF"),
    template: str | None = typer.Option(None, "--template", "-t", help="Cover page template (overrides configuration)"),
    first_page: bool | None = typer.Option(
        None,
        "--first-page/--last-page",
        help="Insert the citation page first or last (defaults to configuration)",
    ),
    config_path: str | None = typer.Option(None, "--config", help="Path to citecover.toml configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs and MuPDF messages"),
) -> None:
    """
    Add a citation page to a PDF.

    Examples:
        citecover compose run thesis.pdf --item 123456789/42 -o thesis-cited.pdf
        citecover compose run thesis.pdf -i 123456789/42 -o out.pdf --last-page --template cover.pdf
    """
    configure_logging(logging.DEBUG if verbose else logging.INFO, verbose=verbose)
    correlation_id = str(uuid.uuid4())
    set_correlation_id(correlation_id)

    try:
        settings = Settings.from_toml(config_path or get_config_path())
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    try:
        repository = JsonMetadataRepository.from_json(settings.paths.catalog_path)
        cited_item = repository.get_item(item)
    except (FileNotFoundError, ValueError, ItemNotFound) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not original.is_file():
        console.print(f"[red]Error: original PDF not found: {original}[/red]")
        raise typer.Exit(1)

    policy = settings.to_policy(repository)
    template_path = template or policy.template_path
    insert_first = policy.citation_as_first_page if first_page is None else first_page

    composer = PyMuPdfPageComposer.from_policy(repository, policy)
    try:
        composed = composer.compose(original.read_bytes(), cited_item, template_path, insert_first=insert_first)
    except CitationDocumentError as e:
        logger.error(f"Composition failed: {e}", extra={"correlation_id": correlation_id})
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(composed.data)

    console.print(
        f"[green]✓ Wrote {output} ({composed.page_count} pages, {composed.length} bytes, "
        f"citation page {composed.citation_page})[/green]"
    )
    typer.echo(f"correlation_id={correlation_id}")
