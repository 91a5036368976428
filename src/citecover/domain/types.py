from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidMetadataKey

ANY = "*"


@dataclass(frozen=True)
class MetadataKey:
    """
    Schema/element/qualifier triple identifying a metadata field (e.g. dc.contributor.author).

    "*" in any position matches anything. A key without qualifier only matches
    unqualified values.
    """

    schema: str
    element: str
    qualifier: str | None = None

    @classmethod
    def parse(cls, key: str) -> MetadataKey:
        """
        Parse a dotted metadata key.

        Raises:
            InvalidMetadataKey: If key is not schema.element or schema.element.qualifier
        """
        parts = key.strip().split(".")
        if len(parts) not in (2, 3) or any(not part for part in parts):
            raise InvalidMetadataKey(key)
        qualifier = parts[2] if len(parts) == 3 else None
        return cls(schema=parts[0], element=parts[1], qualifier=qualifier)

    def matches(self, other: MetadataKey) -> bool:
        """Check whether a stored value's key is selected by this (possibly wildcard) key."""
        if self.schema != ANY and self.schema != other.schema:
            return False
        if self.element != ANY and self.element != other.element:
            return False
        if self.qualifier == ANY:
            return True
        return self.qualifier == other.qualifier

    def __str__(self) -> str:
        if self.qualifier is None:
            return f"{self.schema}.{self.element}"
        return f"{self.schema}.{self.element}.{self.qualifier}"
