from typing import Protocol, runtime_checkable

from ...domain.models.composed_document import ComposedDocument
from ...domain.models.item import Item


@runtime_checkable
class TemplatePopulatorPort(Protocol):
    """Protocol for filling a cover page form template with item metadata."""

    def populate(self, template_path: str, item: Item) -> bytes:
        """
        Fill every field of the template form and flatten it.

        Args:
            template_path: Path to the PDF form used as cover page
            item: Item whose metadata fills the fields

        Returns:
            Single-page PDF with the form flattened into static content

        Raises:
            MissingTemplate: If template_path does not exist
            CompositionIOError: If the template cannot be read or written
        """
        ...

    def field_names(self, template_path: str) -> list[str]:
        """Return the form field names declared by the template, in declaration order."""
        ...


@runtime_checkable
class PageComposerPort(Protocol):
    """Protocol for merging a populated citation page into an original PDF."""

    def compose(
        self,
        original: bytes,
        item: Item,
        template_path: str,
        insert_first: bool = True,
    ) -> ComposedDocument:
        """
        Compose a cited document.

        Args:
            original: Original PDF bytes
            item: Item whose metadata fills the citation page
            template_path: Path to the PDF form used as cover page
            insert_first: Insert the citation page first (True) or last (False)

        Returns:
            ComposedDocument with one page more than the original

        Raises:
            EncryptedDocument: If the original is encrypted
            MissingTemplate: If template_path does not exist
            CompositionIOError: If any PDF read/write step fails
        """
        ...
