"""Pydantic settings for citecover.toml configuration."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ...application.ports.metadata_repository import MetadataRepositoryPort
from ...application.services.eligibility import expand_enabled_collections
from ...domain.policy.citation_policy import PDF_MIME_TYPES, CitationPolicy
from .environment import get_env, get_env_bool, load_environment_variables


class CitationPageSettings(BaseModel):
    """Citation page configuration settings."""

    enable_globally: bool = False
    enabled_collections: list[str] = Field(default_factory=list)
    enabled_communities: list[str] = Field(default_factory=list)
    citation_as_first_page: bool = True
    html_fields: list[str] = Field(default_factory=list)
    template_path: str = "citation-page-template.pdf"
    valid_mime_types: list[str] = Field(default_factory=lambda: sorted(PDF_MIME_TYPES))

    def __init__(self, **data: Any) -> None:
        """Initialize with environment variable precedence."""
        load_environment_variables()

        # Environment variables take precedence over TOML values
        env_template = get_env("CITECOVER_TEMPLATE_PATH")
        if env_template:
            data["template_path"] = env_template

        if get_env("CITECOVER_ENABLE_GLOBALLY") is not None:
            data["enable_globally"] = get_env_bool(
                "CITECOVER_ENABLE_GLOBALLY", data.get("enable_globally", False)
            )

        if get_env("CITECOVER_CITATION_AS_FIRST_PAGE") is not None:
            data["citation_as_first_page"] = get_env_bool(
                "CITECOVER_CITATION_AS_FIRST_PAGE", data.get("citation_as_first_page", True)
            )

        super().__init__(**data)

    @field_validator(
        "enabled_collections", "enabled_communities", "html_fields", "valid_mime_types", mode="before"
    )
    @classmethod
    def split_comma_separated(cls, v: Any) -> Any:
        """Accept "a, b" strings as well as TOML arrays."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class PathsSettings(BaseModel):
    """Path configuration settings."""

    catalog_path: str = "catalog.json"
    storage_dir: str = "assets/bitstreams"


class Settings(BaseModel):
    """Main settings loaded from citecover.toml."""

    citation_page: CitationPageSettings = Field(default_factory=CitationPageSettings)
    paths: PathsSettings = Field(default_factory=PathsSettings)

    @classmethod
    def from_toml(cls, toml_path: Path | str = "citecover.toml") -> "Settings":
        """
        Load settings from citecover.toml file with environment variable precedence.

        Environment variables (system env > .env file) override TOML values.

        Args:
            toml_path: Path to citecover.toml file

        Returns:
            Settings instance with loaded configuration (defaults if the file is missing)
        """
        load_environment_variables()

        toml_path = Path(toml_path)

        if not toml_path.exists():
            return cls()

        with toml_path.open("rb") as f:
            data = tomllib.load(f)

        citation_page = CitationPageSettings(**data.get("citation_page", {}))
        paths = PathsSettings(**data.get("paths", {}))

        return cls(citation_page=citation_page, paths=paths)

    def to_policy(self, repository: MetadataRepositoryPort | None = None) -> CitationPolicy:
        """
        Build the immutable policy snapshot shared by all compose calls.

        Args:
            repository: Repository used to expand enabled communities into collections.
                        Without one, enabled_communities are ignored.

        Returns:
            CitationPolicy
        """
        page = self.citation_page
        if repository is not None:
            enabled = expand_enabled_collections(
                page.enabled_collections, page.enabled_communities, repository
            )
        else:
            enabled = frozenset(handle.strip() for handle in page.enabled_collections if handle.strip())

        return CitationPolicy(
            template_path=page.template_path,
            enable_globally=page.enable_globally,
            enabled_collections=enabled,
            citation_as_first_page=page.citation_as_first_page,
            html_fields=frozenset(page.html_fields),
            valid_mime_types=frozenset(page.valid_mime_types),
        )
