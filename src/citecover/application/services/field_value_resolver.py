"""Application service mapping cover page form fields to item metadata."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Collection as AbstractCollection

from ..ports.metadata_repository import MetadataRepositoryPort
from ...domain.models.field_spec import FieldSpec
from ...domain.models.item import Item

logger = logging.getLogger(__name__)

VALUE_SEPARATOR = "; "
BLANK_PLACEHOLDER = " "

# A tag must not start with a space, so plain "a < b" text is preserved
_HTML_TAG_RE = re.compile(r"<[^ ][^>]*>")


def strip_html_tags(text: str) -> str:
    return _HTML_TAG_RE.sub("", text)


class FieldValueResolver:
    """
    Resolves the text to write into a single form field.

    Field names are either the reserved "community"/"collection" names or a
    "|"-separated chain of metadata keys. The first key with non-blank values wins;
    its values are joined with "; ".
    """

    def __init__(
        self,
        repository: MetadataRepositoryPort,
        html_fields: AbstractCollection[str] = frozenset(),
    ) -> None:
        """
        Initialize resolver.

        Args:
            repository: Metadata repository used for value and owner lookups
            html_fields: Metadata keys whose values get HTML tags stripped
        """
        self.repository = repository
        self.html_fields = frozenset(html_fields)

    def resolve(
        self,
        field_name: str,
        item: Item,
        html_stripped_fields: AbstractCollection[str] | None = None,
    ) -> str | None:
        """
        Resolve the value for a form field.

        Args:
            field_name: Form field name (reserved name or "|"-separated metadata keys)
            item: Item being cited
            html_stripped_fields: Overrides the configured html_fields for this call

        Returns:
            Text to write, or None if no alternative yields non-blank text.
            The reserved names always yield text (a single space when unknown).
        """
        spec = FieldSpec.from_field_name(field_name)
        if spec.is_community:
            return self._owner_name(self.repository.get_owning_community_name, item, field_name)
        if spec.is_collection:
            return self._owner_name(self.repository.get_owning_collection_name, item, field_name)

        stripped = self.html_fields if html_stripped_fields is None else html_stripped_fields
        for alternative in spec.alternatives:
            try:
                values = self.repository.get_metadata_values(item, alternative.strip())
            except Exception as e:
                # e.g. invalid key, lookups assume schema.element.qualifier format
                logger.error(
                    f"Error in processing field {alternative} for item {item.handle}: {e}",
                    extra={"field_name": field_name, "item_handle": item.handle},
                )
                continue

            text = self._join_values(values, strip_tags=self._is_html_field(alternative, stripped))
            if text:
                return text

        logger.debug(
            f"No value for field '{field_name}' on item {item.handle}",
            extra={"field_name": field_name, "item_handle": item.handle},
        )
        return None

    @staticmethod
    def _is_html_field(alternative: str, stripped: AbstractCollection[str]) -> bool:
        return alternative in stripped or alternative.strip() in stripped

    @staticmethod
    def _join_values(values: list[str], strip_tags: bool) -> str:
        parts: list[str] = []
        for value in values:
            if strip_tags:
                value = strip_html_tags(value)
            text = html.unescape(value)
            if not text.strip():
                continue
            parts.append(text)
        return VALUE_SEPARATOR.join(parts)

    @staticmethod
    def _owner_name(lookup, item: Item, field_name: str) -> str:
        try:
            name = lookup(item)
        except Exception as e:
            logger.error(
                f"Could not resolve {field_name} for item {item.handle}: {e}",
                extra={"field_name": field_name, "item_handle": item.handle},
            )
            return BLANK_PLACEHOLDER
        return name if name else BLANK_PLACEHOLDER
