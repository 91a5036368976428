"""Inspect cover page template fields and the values an item would give them."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ....application.services.field_value_resolver import FieldValueResolver
from ....domain.errors import CitationDocumentError, ItemNotFound
from ....domain.models.field_spec import FieldSpec
from ...adapters.json_metadata_repository import JsonMetadataRepository
from ...adapters.pymupdf_template_populator import read_template_field_names
from ...config.environment import get_config_path
from ...config.settings import Settings

app = typer.Typer(help="Inspect cover page templates")
console = Console()


@app.command()
def fields(
    item: str | None = typer.Option(None, "--item", "-i", help="Item handle used to preview resolved values"),
    template: str | None = typer.Option(None, "--template", "-t", help="Cover page template (overrides configuration)"),
    config_path: str | None = typer.Option(None, "--config", help="Path to citecover.toml configuration file"),
) -> None:
    """
    List the form fields of the cover page template.

    With --item, also shows the value each field would receive.

    Examples:
        citecover inspect fields
        citecover inspect fields --item 123456789/42
    """
    try:
        settings = Settings.from_toml(config_path or get_config_path())
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    template_path = template or settings.citation_page.template_path
    html_fields = frozenset(settings.citation_page.html_fields)

    repository: JsonMetadataRepository | None = None
    cited_item = None
    if item:
        try:
            repository = JsonMetadataRepository.from_json(settings.paths.catalog_path)
            cited_item = repository.get_item(item)
        except (FileNotFoundError, ValueError, ItemNotFound) as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    resolver = FieldValueResolver(repository, html_fields=html_fields) if repository else None
    try:
        names = read_template_field_names(template_path)
    except CitationDocumentError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not names:
        console.print(f"[yellow]Template {template_path} declares no form fields.[/yellow]")
        return

    table = Table(title=f"Template fields: {template_path}")
    table.add_column("Field", style="cyan")
    table.add_column("Source", style="white")
    if cited_item is not None:
        table.add_column("Value", style="green")

    for name in names:
        spec = FieldSpec.from_field_name(name)
        if spec.is_community or spec.is_collection:
            source = f"owning {spec.name}"
        else:
            source = " → ".join(alternative.strip() for alternative in spec.alternatives)
        row = [escape(name), escape(source)]
        if cited_item is not None and resolver is not None:
            value = resolver.resolve(name, cited_item)
            row.append("[dim](no value)[/dim]" if value is None else escape(value))
        table.add_row(*row)

    console.print(table)
