"""Serve a stored bitstream the way a download request would receive it."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

import typer
from rich.console import Console

from ....application.dto.citation import CitationRequest
from ....application.use_cases.make_cited_document import make_cited_document
from ....domain.errors import CitationDocumentError, ItemNotFound
from ...adapters.filesystem_content_store import FilesystemContentStore
from ...adapters.json_metadata_repository import JsonMetadataRepository
from ...adapters.pymupdf_page_composer import PyMuPdfPageComposer
from ...config.environment import get_config_path
from ...config.settings import Settings
from ...logging import configure_logging, set_correlation_id

app = typer.Typer(help="Produce the rendition served for a stored bitstream")
console = Console()
logger = logging.getLogger(__name__)


@app.command()
def run(
    bitstream_id: str = typer.Argument(..., help="Bitstream identifier in the catalog"),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the served document"),
    admin: bool = typer.Option(False, "--admin", help="Request as an administrator (always gets the original)"),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of serving the original when composition fails"),
    config_path: str | None = typer.Option(None, "--config", help="Path to citecover.toml configuration file"),
) -> None:
    """
    Apply eligibility rules and write either the cited document or the original.

    Examples:
        citecover cite run thesis.pdf -o served.pdf
        citecover cite run thesis.pdf -o served.pdf --admin
    """
    configure_logging(logging.INFO)
    correlation_id = str(uuid.uuid4())
    set_correlation_id(correlation_id)

    try:
        settings = Settings.from_toml(config_path or get_config_path())
        repository = JsonMetadataRepository.from_json(settings.paths.catalog_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    policy = settings.to_policy(repository)
    request = CitationRequest(bitstream_id=bitstream_id, is_admin=admin, fallback_to_original=not strict)

    try:
        result = make_cited_document(
            request,
            repository=repository,
            content_store=FilesystemContentStore(settings.paths.storage_dir),
            composer=PyMuPdfPageComposer.from_policy(repository, policy),
            policy=policy,
            correlation_id=correlation_id,
        )
    except (ItemNotFound, FileNotFoundError, PermissionError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except CitationDocumentError as e:
        logger.error(f"Composition failed: {e}", extra={"correlation_id": correlation_id})
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.data)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
    if result.cited:
        console.print(f"[green]✓ Wrote cited document {output} ({result.page_count} pages, {result.length} bytes)[/green]")
    else:
        console.print(f"[cyan]Wrote original document {output} ({result.length} bytes)[/cyan]")
    typer.echo(f"correlation_id={correlation_id}")
