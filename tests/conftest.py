"""Shared fixtures: catalog data and PDFs built on the fly with PyMuPDF."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import fitz
import pytest

from citecover.infrastructure.adapters.json_metadata_repository import Catalog, JsonMetadataRepository

TEMPLATE_FIELDS = [
    "dc.title",
    "dc.contributor.author|dc.creator",
    "dc.date.issued",
    "dc.description.abstract",
    "dc.identifier.uri",
    "community",
    "collection",
]


def build_pdf(page_count: int, label: str = "Original", width: float = 612, height: float = 792) -> bytes:
    """Plain PDF whose pages read '<label> page <n>'."""
    doc = fitz.open()
    for number in range(1, page_count + 1):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"{label} page {number}", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


def build_template(path: Path, field_names: list[str], heading: str = "Citation", width: float = 595, height: float = 842) -> Path:
    """One-page PDF form with a text field per name."""
    doc = fitz.open()
    page = doc.new_page(width=width, height=height)
    page.insert_text((72, 60), heading, fontsize=16)
    for index, name in enumerate(field_names):
        widget = fitz.Widget()
        widget.field_name = name
        widget.field_type = fitz.PDF_WIDGET_TYPE_TEXT
        widget.rect = fitz.Rect(72, 90 + index * 40, 540, 115 + index * 40)
        widget.text_fontsize = 10
        widget.field_value = ""
        page.add_widget(widget)
    doc.save(str(path))
    doc.close()
    return path


def page_texts(data: bytes) -> list[str]:
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [page.get_text() for page in doc]


def catalog_data() -> dict[str, Any]:
    return {
        "collections": {
            "123456789/10": {"name": "Doctoral Theses"},
            "123456789/11": {"name": "Working Papers"},
            "123456789/12": {"name": "Datasets"},
        },
        "communities": {
            "123456789/1": {
                "name": "Faculty of Science",
                "collections": ["123456789/10"],
                "subcommunities": ["123456789/2"],
            },
            "123456789/2": {"name": "Department of Physics", "collections": ["123456789/11"]},
        },
        "items": {
            "123456789/42": {
                "metadata": [
                    {"key": "dc.title", "value": "Quantum Widgets"},
                    {"key": "dc.contributor.author", "value": "Doe, Jane"},
                    {"key": "dc.contributor.author", "value": " "},
                    {"key": "dc.contributor.author", "value": "Roe, Richard"},
                    {"key": "dc.date.issued", "value": "2021"},
                    {"key": "dc.description.abstract", "value": "<p>Widgets &amp; gadgets</p>"},
                    {"key": "dc.identifier.uri", "value": "http://hdl.handle.net/123456789/42"},
                ],
                "owning_collection": "123456789/10",
                "collections": ["123456789/10"],
            },
            "123456789/43": {
                "metadata": {
                    "dc.title": "Orphan Notes",
                    "dc.creator": ["Smith, Ann"],
                },
            },
            "123456789/44": {
                "metadata": {"dc.title": "Physics Preprint"},
                "owning_collection": "123456789/11",
                "collections": ["123456789/11", "123456789/12"],
            },
        },
        "bitstreams": {
            "thesis.pdf": {"item": "123456789/42", "name": "thesis.pdf"},
            "notes.pdf": {"item": "123456789/43", "name": "notes.pdf"},
            "preprint.pdf": {"item": "123456789/44", "name": "preprint.pdf"},
            "display.pdf": {"item": "123456789/42", "name": "display.pdf", "bundles": ["DISPLAY"]},
            "data.csv": {"item": "123456789/44", "name": "data.csv", "mime_type": "text/csv"},
        },
    }


@pytest.fixture()
def repository() -> JsonMetadataRepository:
    return JsonMetadataRepository(Catalog.model_validate(catalog_data()))


@pytest.fixture()
def catalog_path(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog_data()), encoding="utf-8")
    return path


@pytest.fixture()
def template_path(tmp_path: Path) -> Path:
    return build_template(tmp_path / "template.pdf", TEMPLATE_FIELDS)
