"""PyMuPDF adapter that fills and flattens the cover page form template."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import fitz  # PyMuPDF

from ...application.services.field_value_resolver import FieldValueResolver
from ...domain.errors import CompositionIOError, MissingTemplate, TemplateConsumed
from ...domain.models.item import Item

logger = logging.getLogger(__name__)

# MuPDF keeps global state; native calls from several threads must not interleave
MUPDF_LOCK = threading.RLock()

# Field types that receive resolved text
TEXT_FIELD_TYPES = (fitz.PDF_WIDGET_TYPE_TEXT, fitz.PDF_WIDGET_TYPE_COMBOBOX)


def _get_widgets(page: fitz.Page) -> list[fitz.Widget]:
    return list(page.widgets() or [])


def template_field_names(doc: fitz.Document) -> list[str]:
    """Return distinct form field names in the order the template declares them."""
    names: list[str] = []
    seen: set[str] = set()
    for page in doc:
        for widget in _get_widgets(page):
            name = widget.field_name or ""
            if name and name not in seen:
                seen.add(name)
                names.append(name)
    return names


def open_template(template_path: str) -> fitz.Document:
    """
    Load a fresh copy of the template.

    Raises:
        MissingTemplate: If template_path does not point to a file
        CompositionIOError: If the template cannot be parsed or is password protected
    """
    path = Path(template_path)
    if not path.is_file():
        raise MissingTemplate(
            template_path,
            hint="Set citation_page.template_path in citecover.toml or CITECOVER_TEMPLATE_PATH",
        )
    try:
        data = path.read_bytes()
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise CompositionIOError(f"Could not read cover page template {template_path}", str(e)) from e
    if doc.needs_pass:
        doc.close()
        raise CompositionIOError(f"Could not read cover page template {template_path}", "template is password protected")
    if doc.page_count == 0:
        doc.close()
        raise CompositionIOError(f"Could not read cover page template {template_path}", "template has no pages")
    return doc


def read_template_field_names(template_path: str) -> list[str]:
    """Open the template and list its field names without writing anything."""
    with MUPDF_LOCK:
        doc = open_template(template_path)
        try:
            return template_field_names(doc)
        finally:
            doc.close()


class PopulatedTemplate:
    """
    Template whose form fields have been filled, owned until it is flattened.

    flatten() consumes the instance: the underlying document is closed and any
    further call raises TemplateConsumed.
    """

    def __init__(self, doc: fitz.Document, template_path: str, fields_written: dict[str, str]) -> None:
        self._doc: fitz.Document | None = doc
        self.template_path = template_path
        self.fields_written = fields_written

    @property
    def consumed(self) -> bool:
        return self._doc is None

    def flatten(self) -> bytes:
        """
        Bake form fields into static page content.

        Returns:
            One-page PDF holding the first template page

        Raises:
            TemplateConsumed: If the template was already flattened
            CompositionIOError: If baking or serializing fails
        """
        if self._doc is None:
            raise TemplateConsumed(self.template_path)
        doc, self._doc = self._doc, None
        try:
            with MUPDF_LOCK:
                doc.bake(annots=True, widgets=True)
                if doc.page_count > 1:
                    doc.select([0])
                return doc.tobytes(garbage=3, deflate=True)
        except Exception as e:
            raise CompositionIOError(f"Could not flatten cover page template {self.template_path}", str(e)) from e
        finally:
            doc.close()


class PyMuPdfTemplatePopulator:
    """Fills every form field of the cover page template using a FieldValueResolver."""

    def __init__(self, resolver: FieldValueResolver) -> None:
        self.resolver = resolver

    def field_names(self, template_path: str) -> list[str]:
        return read_template_field_names(template_path)

    def load(self, template_path: str, item: Item) -> PopulatedTemplate:
        """
        Load the template and write the resolved value of every field.

        A field backed by several widgets is resolved once and written to all of them.
        Fields without a value are left unset.

        Args:
            template_path: Path to the PDF form
            item: Item being cited

        Returns:
            PopulatedTemplate ready to be flattened
        """
        with MUPDF_LOCK:
            doc = open_template(template_path)
            names = template_field_names(doc)

        # metadata lookups run outside MUPDF_LOCK
        try:
            resolved = {name: self.resolver.resolve(name, item) for name in names}
        except Exception:
            with MUPDF_LOCK:
                doc.close()
            raise

        written: dict[str, str] = {}
        with MUPDF_LOCK:
            try:
                for page in doc:
                    for widget in _get_widgets(page):
                        name = widget.field_name or ""
                        value = resolved.get(name)
                        if value is None:
                            continue
                        if widget.field_type not in TEXT_FIELD_TYPES:
                            logger.debug(
                                f"Skipping non-text field '{name}' ({widget.field_type_string})",
                                extra={"field_name": name, "template_path": template_path},
                            )
                            continue
                        widget.field_value = value
                        widget.update()
                        written[name] = value
            except Exception as e:
                doc.close()
                raise CompositionIOError(f"Could not fill cover page template {template_path}", str(e)) from e

        logger.debug(
            f"Filled {len(written)} of {len(resolved)} template fields for item {item.handle}",
            extra={"template_path": template_path, "item_handle": item.handle},
        )
        return PopulatedTemplate(doc, template_path, written)

    def populate(self, template_path: str, item: Item) -> bytes:
        return self.load(template_path, item).flatten()
