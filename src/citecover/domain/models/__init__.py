"""Domain models for citation document composition."""

from .composed_document import ComposedDocument
from .field_spec import COLLECTION_FIELD, COMMUNITY_FIELD, FieldSpec
from .item import Bitstream, Collection, Community, Item, MetadataValue

__all__ = [
    "Bitstream",
    "Collection",
    "Community",
    "ComposedDocument",
    "COLLECTION_FIELD",
    "COMMUNITY_FIELD",
    "FieldSpec",
    "Item",
    "MetadataValue",
]
