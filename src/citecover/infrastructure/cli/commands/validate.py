"""Validate configuration, catalog and cover page template."""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from ....domain.errors import CitationDocumentError
from ...adapters.json_metadata_repository import JsonMetadataRepository
from ...adapters.pymupdf_page_composer import is_encrypted
from ...adapters.pymupdf_template_populator import MUPDF_LOCK, open_template, template_field_names
from ...config.environment import ENVIRONMENT_OVERRIDES, get_config_path, get_env
from ...config.settings import Settings

app = typer.Typer(help="Validate configuration and template")
console = Console()


@app.command()
def run(
    config_path: str | None = typer.Option(None, "--config", help="Path to citecover.toml configuration file"),
) -> None:
    """
    Validate citation page configuration.

    Checks:
    - Template file presence, readability and encryption
    - Template form fields
    - Catalog loading
    - Enabled collections and communities resolve in the catalog
    - Active CITECOVER_* environment overrides

    Examples:
        citecover validate run
        citecover validate run --config /etc/citecover.toml
    """
    try:
        settings = Settings.from_toml(config_path or get_config_path())
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    results: list[dict[str, Any]] = []
    results.extend(_validate_template(settings.citation_page.template_path))
    results.extend(_validate_catalog(settings))
    results.extend(_validate_environment())

    _display_results_table(results)

    if all(r["status"] != "FAIL" for r in results):
        console.print("\n[green]✓ All validation checks passed![/green]")
        raise typer.Exit(0)
    console.print("\n[red]✗ Some validation checks failed. See details above.[/red]")
    raise typer.Exit(1)


def _validate_template(template_path: str) -> list[dict[str, Any]]:
    results: list[dict[str, Any]] = []
    try:
        with MUPDF_LOCK:
            doc = open_template(template_path)
            try:
                encrypted = is_encrypted(doc)
                names = template_field_names(doc)
                page_count = doc.page_count
            finally:
                doc.close()
    except CitationDocumentError as e:
        results.append({"check": "Template", "status": "FAIL", "details": str(e)})
        return results

    results.append({"check": "Template", "status": "PASS", "details": f"{template_path} ({page_count} page(s))"})
    if encrypted:
        results.append({"check": "Template encryption", "status": "FAIL", "details": "Template is encrypted"})
    if names:
        results.append({"check": "Template fields", "status": "PASS", "details": ", ".join(names)})
    else:
        results.append({
            "check": "Template fields",
            "status": "WARN",
            "details": "No form fields; the citation page will be static",
        })
    if page_count > 1:
        results.append({
            "check": "Template pages",
            "status": "WARN",
            "details": "Only the first template page is used",
        })
    return results


def _validate_catalog(settings: Settings) -> list[dict[str, Any]]:
    results: list[dict[str, Any]] = []
    try:
        repository = JsonMetadataRepository.from_json(settings.paths.catalog_path)
    except (FileNotFoundError, ValueError) as e:
        results.append({"check": "Catalog", "status": "FAIL", "details": str(e)})
        return results

    results.append({"check": "Catalog", "status": "PASS", "details": settings.paths.catalog_path})

    page = settings.citation_page
    missing_collections = [h for h in page.enabled_collections if repository.get_collection(h) is None]
    if missing_collections:
        results.append({
            "check": "Enabled collections",
            "status": "FAIL",
            "details": f"Unknown collections: {', '.join(missing_collections)}",
        })
    elif page.enabled_collections:
        results.append({"check": "Enabled collections", "status": "PASS", "details": ", ".join(page.enabled_collections)})

    missing_communities = [h for h in page.enabled_communities if repository.get_community(h) is None]
    if missing_communities:
        results.append({
            "check": "Enabled communities",
            "status": "FAIL",
            "details": f"Unknown communities: {', '.join(missing_communities)}",
        })
    elif page.enabled_communities:
        policy = settings.to_policy(repository)
        results.append({
            "check": "Enabled communities",
            "status": "PASS",
            "details": f"{len(policy.enabled_collections)} collection(s) enabled in total",
        })

    if not page.enable_globally and not page.enabled_collections and not page.enabled_communities:
        results.append({
            "check": "Eligibility",
            "status": "WARN",
            "details": "Citation pages are disabled: nothing enabled globally or per collection",
        })
    return results


def _validate_environment() -> list[dict[str, Any]]:
    active = []
    for name, description in ENVIRONMENT_OVERRIDES.items():
        value = get_env(name)
        if value:
            active.append(f"{name}={value} ({description})")
    if not active:
        return [{"check": "Environment overrides", "status": "PASS", "details": "None set"}]
    return [{"check": "Environment overrides", "status": "PASS", "details": "; ".join(active)}]


def _display_results_table(results: list[dict[str, Any]]) -> None:
    table = Table(title="Validation Results")
    table.add_column("Check", style="cyan")
    table.add_column("Status", style="white")
    table.add_column("Details", style="white")

    status_styles = {"PASS": "[green]PASS[/green]", "WARN": "[yellow]WARN[/yellow]", "FAIL": "[red]FAIL[/red]"}
    for result in results:
        table.add_row(result["check"], status_styles[result["status"]], result["details"])

    console.print(table)
