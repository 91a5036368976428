"""Metadata repository backed by a JSON catalog file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ...domain.errors import InvalidMetadataKey, ItemNotFound
from ...domain.models.item import Bitstream, Collection, Community, Item, MetadataValue
from ...domain.types import MetadataKey

logger = logging.getLogger(__name__)


class MetadataEntry(BaseModel):
    key: str
    value: str
    place: int | None = None

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        try:
            MetadataKey.parse(v)
        except InvalidMetadataKey as e:
            raise ValueError(str(e)) from e
        return v.strip()


class CollectionRecord(BaseModel):
    name: str


class CommunityRecord(BaseModel):
    name: str
    collections: list[str] = Field(default_factory=list)
    subcommunities: list[str] = Field(default_factory=list)


class ItemRecord(BaseModel):
    """Item entry; metadata is a list of entries or a mapping of key -> values."""

    metadata: list[MetadataEntry] = Field(default_factory=list)
    owning_collection: str | None = None
    collections: list[str] = Field(default_factory=list)

    @field_validator("metadata", mode="before")
    @classmethod
    def expand_metadata_mapping(cls, v: Any) -> Any:
        """Convert {"dc.title": ["A", "B"]} into entry dicts."""
        if isinstance(v, dict):
            entries: list[dict[str, Any]] = []
            for key, values in v.items():
                if isinstance(values, str):
                    values = [values]
                entries.extend({"key": key, "value": value} for value in values)
            return entries
        return v


class BitstreamRecord(BaseModel):
    item: str
    name: str
    mime_type: str = "application/pdf"
    bundles: list[str] = Field(default_factory=lambda: ["ORIGINAL"])


class Catalog(BaseModel):
    """Top-level JSON catalog layout."""

    collections: dict[str, CollectionRecord] = Field(default_factory=dict)
    communities: dict[str, CommunityRecord] = Field(default_factory=dict)
    items: dict[str, ItemRecord] = Field(default_factory=dict)
    bitstreams: dict[str, BitstreamRecord] = Field(default_factory=dict)


class JsonMetadataRepository:
    """
    Adapter serving items, bitstreams and the community tree from a JSON catalog.

    The catalog is read once at construction; the adapter is read-only afterwards.
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._parents: dict[str, str] = {}
        for handle, community in catalog.communities.items():
            for sub in community.subcommunities:
                self._parents[sub] = handle

    @classmethod
    def from_json(cls, catalog_path: Path | str) -> JsonMetadataRepository:
        """
        Load a catalog file.

        Args:
            catalog_path: Path to the JSON catalog

        Returns:
            Repository over the catalog

        Raises:
            FileNotFoundError: If the catalog file does not exist
            ValueError: If the catalog is not valid JSON or does not match the layout
        """
        catalog_path = Path(catalog_path)
        if not catalog_path.exists():
            raise FileNotFoundError(f"Catalog not found: {catalog_path}")

        try:
            data = json.loads(catalog_path.read_text(encoding="utf-8"))
            catalog = Catalog.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ValueError(f"Invalid catalog {catalog_path}: {e}") from e

        logger.info(
            f"Loaded catalog with {len(catalog.items)} items and {len(catalog.bitstreams)} bitstreams",
            extra={"catalog_path": str(catalog_path)},
        )
        return cls(catalog)

    def get_metadata_values(self, item: Item, field_key: str) -> list[str]:
        key = MetadataKey.parse(field_key)
        return [value.text for value in item.metadata_values(key)]

    def get_owning_collection_name(self, item: Item) -> str | None:
        if item.owning_collection is None:
            return None
        return item.owning_collection.name

    def get_owning_community_name(self, item: Item) -> str | None:
        if not item.communities:
            return None
        return item.communities[0].name

    def get_collection(self, handle: str) -> Collection | None:
        record = self._catalog.collections.get(handle)
        if record is None:
            return None
        return Collection(handle=handle, name=record.name)

    def get_community(self, handle: str) -> Community | None:
        record = self._catalog.communities.get(handle)
        if record is None:
            return None
        return Community(
            handle=handle,
            name=record.name,
            collections=tuple(record.collections),
            subcommunities=tuple(record.subcommunities),
        )

    def get_item(self, handle: str) -> Item:
        record = self._catalog.items.get(handle)
        if record is None:
            raise ItemNotFound(handle, hint="Check the 'items' section of the catalog")

        metadata = tuple(
            MetadataValue(
                key=MetadataKey.parse(entry.key),
                text=entry.value,
                place=entry.place if entry.place is not None else position,
            )
            for position, entry in enumerate(record.metadata)
        )
        owning = self.get_collection(record.owning_collection) if record.owning_collection else None
        collection_handles = list(record.collections)
        if record.owning_collection and record.owning_collection not in collection_handles:
            collection_handles.insert(0, record.owning_collection)
        collections = tuple(
            collection
            for collection in (self.get_collection(handle) for handle in collection_handles)
            if collection is not None
        )
        return Item(
            handle=handle,
            metadata=metadata,
            owning_collection=owning,
            collections=collections,
            communities=self._community_chain(record.owning_collection),
        )

    def get_bitstream(self, bitstream_id: str) -> Bitstream:
        record = self._catalog.bitstreams.get(bitstream_id)
        if record is None:
            raise ItemNotFound(bitstream_id, hint="Check the 'bitstreams' section of the catalog")
        return Bitstream(
            id=bitstream_id,
            item_handle=record.item,
            name=record.name,
            mime_type=record.mime_type,
            bundles=tuple(record.bundles),
        )

    def _community_chain(self, collection_handle: str | None) -> tuple[Community, ...]:
        """Communities above a collection, nearest first."""
        if collection_handle is None:
            return ()
        current = next(
            (
                handle
                for handle, record in self._catalog.communities.items()
                if collection_handle in record.collections
            ),
            None,
        )
        chain: list[Community] = []
        while current is not None and all(c.handle != current for c in chain):
            community = self.get_community(current)
            if community is None:
                break
            chain.append(community)
            current = self._parents.get(current)
        return tuple(chain)
