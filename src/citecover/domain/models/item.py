from __future__ import annotations

from dataclasses import dataclass, field

from ..types import MetadataKey


@dataclass(frozen=True)
class MetadataValue:
    """
    Single metadata value stored on an item.

    Fields:
        key: Metadata key the value is stored under
        text: Raw stored text (may contain HTML markup or entities)
        place: Storage order among values of the same key
    """

    key: MetadataKey
    text: str
    place: int = 0


@dataclass(frozen=True)
class Collection:
    handle: str
    name: str


@dataclass(frozen=True)
class Community:
    """
    Community grouping collections and sub-communities.

    Fields:
        handle: Community handle
        name: Display name
        collections: Handles of collections directly under this community
        subcommunities: Handles of direct sub-communities
    """

    handle: str
    name: str
    collections: tuple[str, ...] = ()
    subcommunities: tuple[str, ...] = ()


@dataclass(frozen=True)
class Bitstream:
    """
    Stored file belonging to an item.

    Fields:
        id: Storage identifier, resolved by a content store
        item_handle: Handle of the owning item
        name: File name
        mime_type: MIME type of the stored format
        bundles: Names of the bundles containing this bitstream (e.g. ORIGINAL, DISPLAY)
    """

    id: str
    item_handle: str
    name: str
    mime_type: str = "application/pdf"
    bundles: tuple[str, ...] = ("ORIGINAL",)


@dataclass(frozen=True)
class Item:
    """
    Bibliographic record being cited. Read-only for the composition engine.

    Fields:
        handle: Persistent identifier (e.g. '123456789/42')
        metadata: Stored metadata values, in storage order
        owning_collection: Collection that owns the item (optional)
        collections: All collections the item is mapped into
        communities: Communities above the owning collection, nearest first
    """

    handle: str
    metadata: tuple[MetadataValue, ...] = ()
    owning_collection: Collection | None = None
    collections: tuple[Collection, ...] = ()
    communities: tuple[Community, ...] = field(default_factory=tuple)

    def metadata_values(self, key: MetadataKey) -> list[MetadataValue]:
        """Return values selected by key, ordered by place (stable for equal places)."""
        selected = [value for value in self.metadata if key.matches(value.key)]
        return sorted(selected, key=lambda value: value.place)
