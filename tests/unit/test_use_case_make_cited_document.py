"""Unit tests for make_cited_document use case."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from citecover.application.dto.citation import CitationRequest, CitedDocumentResult
from citecover.application.use_cases.make_cited_document import make_cited_document
from citecover.domain.errors import EncryptedDocument, ItemNotFound, MissingTemplate
from citecover.domain.models.composed_document import ComposedDocument
from citecover.domain.models.item import Bitstream, Item
from citecover.domain.policy.citation_policy import CitationPolicy
from citecover.infrastructure.logging import get_correlation_id

ORIGINAL = b"%PDF-original"


class MockContentStore:
    """Mock content store returning fixed bytes."""

    def __init__(self) -> None:
        self.requested: list[str] = []

    def retrieve(self, bitstream: Bitstream) -> bytes:
        self.requested.append(bitstream.id)
        return ORIGINAL


class MockComposer:
    """Mock composer recording its arguments."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[bytes, str, str, bool]] = []

    def compose(self, original: bytes, item: Item, template_path: str, insert_first: bool = True) -> ComposedDocument:
        self.calls.append((original, item.handle, template_path, insert_first))
        if self.error is not None:
            raise self.error
        return ComposedDocument(data=b"%PDF-cited", page_count=6, citation_page=1 if insert_first else 6)


def _policy(**kwargs) -> CitationPolicy:
    defaults = {"template_path": "cover.pdf", "enable_globally": True}
    defaults.update(kwargs)
    return CitationPolicy(**defaults)


def test_eligible_document_is_composed(repository):
    composer = MockComposer()

    result = make_cited_document(
        CitationRequest(bitstream_id="thesis.pdf"),
        repository=repository,
        content_store=MockContentStore(),
        composer=composer,
        policy=_policy(citation_as_first_page=False),
    )

    assert isinstance(result, CitedDocumentResult)
    assert result.cited is True
    assert result.data == b"%PDF-cited"
    assert result.length == len(b"%PDF-cited")
    assert result.page_count == 6
    assert composer.calls == [(ORIGINAL, "123456789/42", "cover.pdf", False)]


def test_ineligible_document_is_served_unchanged(repository):
    composer = MockComposer()

    result = make_cited_document(
        CitationRequest(bitstream_id="thesis.pdf", is_admin=True),
        repository=repository,
        content_store=MockContentStore(),
        composer=composer,
        policy=_policy(),
    )

    assert result.cited is False
    assert result.data == ORIGINAL
    assert result.length == len(ORIGINAL)
    assert composer.calls == []


def test_composition_failure_falls_back_to_original(repository):
    result = make_cited_document(
        CitationRequest(bitstream_id="thesis.pdf"),
        repository=repository,
        content_store=MockContentStore(),
        composer=MockComposer(error=EncryptedDocument("123456789/42")),
        policy=_policy(),
    )

    assert result.cited is False
    assert result.data == ORIGINAL
    assert len(result.warnings) == 1
    assert "encrypted" in result.warnings[0]


def test_composition_failure_propagates_without_fallback(repository):
    with pytest.raises(MissingTemplate):
        make_cited_document(
            CitationRequest(bitstream_id="thesis.pdf", fallback_to_original=False),
            repository=repository,
            content_store=MockContentStore(),
            composer=MockComposer(error=MissingTemplate("cover.pdf")),
            policy=_policy(),
        )


def test_unknown_bitstream_raises(repository):
    with pytest.raises(ItemNotFound):
        make_cited_document(
            CitationRequest(bitstream_id="missing.pdf"),
            repository=repository,
            content_store=MockContentStore(),
            composer=MockComposer(),
            policy=_policy(),
        )


def test_custom_eligibility_is_used(repository):
    eligibility = Mock()
    eligibility.is_eligible.return_value = False

    result = make_cited_document(
        CitationRequest(bitstream_id="thesis.pdf"),
        repository=repository,
        content_store=MockContentStore(),
        composer=MockComposer(),
        policy=_policy(),
        eligibility=eligibility,
    )

    assert result.cited is False
    eligibility.is_eligible.assert_called_once()


def test_explicit_correlation_id_reaches_collaborators(repository):
    seen_ids: list[str] = []

    class RecordingComposer(MockComposer):
        def compose(self, original, item, template_path, insert_first=True):
            seen_ids.append(get_correlation_id())
            return super().compose(original, item, template_path, insert_first)

    make_cited_document(
        CitationRequest(bitstream_id="thesis.pdf"),
        repository=repository,
        content_store=MockContentStore(),
        composer=RecordingComposer(),
        policy=_policy(),
        correlation_id="request-77",
    )

    assert seen_ids == ["request-77"]
