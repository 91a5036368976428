"""PyMuPDF adapter composing the citation page with the original PDF."""

from __future__ import annotations

import logging

import fitz  # PyMuPDF

from ...application.ports.metadata_repository import MetadataRepositoryPort
from ...application.ports.page_composer import TemplatePopulatorPort
from ...application.services.field_value_resolver import FieldValueResolver
from ...domain.errors import CitationDocumentError, CompositionIOError, EncryptedDocument
from ...domain.models.composed_document import ComposedDocument
from ...domain.models.item import Item
from ...domain.policy.citation_policy import CitationPolicy
from .pymupdf_template_populator import MUPDF_LOCK, PyMuPdfTemplatePopulator

logger = logging.getLogger(__name__)


def is_encrypted(doc: fitz.Document) -> bool:
    """Check for any encryption, including owner-password-only documents."""
    if doc.needs_pass or doc.is_encrypted:
        return True
    metadata = doc.metadata or {}
    return bool(metadata.get("encryption"))


class PyMuPdfPageComposer:
    """
    Inserts the populated cover page into the original PDF as its first or last page.

    The flattened template page is imported as a Form XObject and drawn on a new
    blank page sized like the template page. Original pages are left untouched.
    """

    def __init__(self, populator: TemplatePopulatorPort) -> None:
        self.populator = populator

    @classmethod
    def from_policy(cls, repository: MetadataRepositoryPort, policy: CitationPolicy) -> PyMuPdfPageComposer:
        """Wire resolver and populator for the configured HTML-stripped fields."""
        resolver = FieldValueResolver(repository, html_fields=policy.html_fields)
        return cls(PyMuPdfTemplatePopulator(resolver))

    def compose(
        self,
        original: bytes,
        item: Item,
        template_path: str,
        insert_first: bool = True,
    ) -> ComposedDocument:
        doc = self._open_original(original, item)
        try:
            # the populator takes MUPDF_LOCK itself and resolves metadata without it
            cover_bytes = self.populator.populate(template_path, item)

            with MUPDF_LOCK:
                original_pages = doc.page_count
                with fitz.open(stream=cover_bytes, filetype="pdf") as cover:
                    cover_rect = cover[0].rect
                    # new_page inserts before pno; -1 appends after the last page
                    page = doc.new_page(
                        pno=0 if insert_first else -1,
                        width=cover_rect.width,
                        height=cover_rect.height,
                    )
                    page.show_pdf_page(page.rect, cover, 0)

                data = doc.tobytes(garbage=3, deflate=True)
                page_count = original_pages + 1
                citation_page = 1 if insert_first else page_count
        except CitationDocumentError:
            raise
        except Exception as e:
            raise CompositionIOError(f"Could not add citation page for item {item.handle}", str(e)) from e
        finally:
            with MUPDF_LOCK:
                doc.close()

        logger.debug(
            f"Inserted citation page at position {citation_page} of {page_count}",
            extra={"item_handle": item.handle, "template_path": template_path},
        )
        return ComposedDocument(data=data, page_count=page_count, citation_page=citation_page)

    @staticmethod
    def _open_original(original: bytes, item: Item) -> fitz.Document:
        """
        Open the original PDF, refusing encrypted or empty documents.

        Raises:
            EncryptedDocument: If the original carries any encryption
            CompositionIOError: If the original cannot be parsed or has no pages
        """
        with MUPDF_LOCK:
            try:
                doc = fitz.open(stream=original, filetype="pdf")
            except Exception as e:
                raise CompositionIOError(f"Could not open original PDF of item {item.handle}", str(e)) from e

            if is_encrypted(doc):
                doc.close()
                raise EncryptedDocument(item.handle)
            if doc.page_count == 0:
                doc.close()
                raise CompositionIOError(f"Could not open original PDF of item {item.handle}", "document has no pages")
            return doc
