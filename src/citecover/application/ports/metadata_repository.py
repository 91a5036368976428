from typing import Protocol, runtime_checkable

from ...domain.models.item import Bitstream, Collection, Community, Item


@runtime_checkable
class MetadataRepositoryPort(Protocol):
    """Protocol for reading item metadata and the collection/community structure."""

    def get_metadata_values(self, item: Item, field_key: str) -> list[str]:
        """
        Get the metadata values of an item for a dotted field key.

        Args:
            item: Item to read from
            field_key: Key in schema.element[.qualifier] format ("*" allowed as wildcard)

        Returns:
            Value texts in storage order (empty list if the item has none)

        Raises:
            InvalidMetadataKey: If field_key is malformed
        """
        ...

    def get_owning_collection_name(self, item: Item) -> str | None:
        """Return the name of the collection that owns the item, or None."""
        ...

    def get_owning_community_name(self, item: Item) -> str | None:
        """Return the name of the community nearest to the item, or None."""
        ...

    def get_item(self, handle: str) -> Item:
        """
        Look up an item by handle.

        Raises:
            ItemNotFound: If no item has this handle
        """
        ...

    def get_bitstream(self, bitstream_id: str) -> Bitstream:
        """
        Look up a stored file by identifier.

        Raises:
            ItemNotFound: If no bitstream has this identifier
        """
        ...

    def get_collection(self, handle: str) -> Collection | None:
        ...

    def get_community(self, handle: str) -> Community | None:
        ...
