"""Unit tests for domain types and models: MetadataKey, FieldSpec, Item, ComposedDocument, CitationPolicy."""

import pytest

from citecover.domain.errors import InvalidMetadataKey
from citecover.domain.models.composed_document import ComposedDocument
from citecover.domain.models.field_spec import FieldSpec
from citecover.domain.models.item import Item, MetadataValue
from citecover.domain.policy.citation_policy import PDF_MIME_TYPES, CitationPolicy
from citecover.domain.types import MetadataKey


def test_metadata_key_parse_qualified_and_unqualified():
    assert MetadataKey.parse("dc.contributor.author") == MetadataKey("dc", "contributor", "author")
    assert MetadataKey.parse("dc.title") == MetadataKey("dc", "title", None)
    assert MetadataKey.parse(" dc.title ") == MetadataKey("dc", "title")


@pytest.mark.parametrize("key", ["dc", "", "dc..author", "dc.a.b.c", "community"])
def test_metadata_key_parse_rejects_malformed(key):
    with pytest.raises(InvalidMetadataKey):
        MetadataKey.parse(key)


def test_metadata_key_structural_equality_and_hash():
    a = MetadataKey.parse("dc.date.issued")
    b = MetadataKey("dc", "date", "issued")
    assert a == b
    assert len({a, b}) == 1
    assert str(a) == "dc.date.issued"


def test_metadata_key_unqualified_matches_only_unqualified():
    key = MetadataKey.parse("dc.title")
    assert key.matches(MetadataKey("dc", "title"))
    assert not key.matches(MetadataKey("dc", "title", "alternative"))


def test_metadata_key_wildcards():
    assert MetadataKey.parse("dc.contributor.*").matches(MetadataKey("dc", "contributor", "advisor"))
    assert MetadataKey.parse("dc.contributor.*").matches(MetadataKey("dc", "contributor"))
    assert MetadataKey.parse("*.title").matches(MetadataKey("local", "title"))
    assert not MetadataKey.parse("dc.contributor.*").matches(MetadataKey("dc", "creator"))


def test_field_spec_splits_alternatives_in_order():
    spec = FieldSpec.from_field_name("dc.contributor.author|dc.creator|dc.contributor")
    assert spec.alternatives == ("dc.contributor.author", "dc.creator", "dc.contributor")
    assert not spec.is_community and not spec.is_collection


def test_field_spec_reserved_names_are_not_split():
    assert FieldSpec.from_field_name("community").is_community
    assert FieldSpec.from_field_name("collection").alternatives == ()
    assert FieldSpec.from_field_name("community|collection").alternatives == ("community", "collection")


def test_item_metadata_values_ordered_by_place_without_dedup():
    author = MetadataKey.parse("dc.contributor.author")
    item = Item(
        handle="1/1",
        metadata=(
            MetadataValue(author, "B", place=1),
            MetadataValue(MetadataKey.parse("dc.title"), "T", place=0),
            MetadataValue(author, "A", place=0),
            MetadataValue(author, "A", place=2),
        ),
    )
    assert [v.text for v in item.metadata_values(author)] == ["A", "B", "A"]


def test_composed_document_validation_and_length():
    doc = ComposedDocument(data=b"%PDF-1.7", page_count=3, citation_page=3)
    assert doc.length == 8

    with pytest.raises(ValueError):
        ComposedDocument(data=b"", page_count=1, citation_page=1)
    with pytest.raises(ValueError):
        ComposedDocument(data=b"x", page_count=2, citation_page=3)


def test_citation_policy_defaults():
    policy = CitationPolicy(template_path="cover.pdf")
    assert policy.citation_as_first_page is True
    assert policy.enable_globally is False
    assert policy.valid_mime_types == PDF_MIME_TYPES
    assert "application/x-pdf" in policy.valid_mime_types


def test_citation_policy_requires_template_path():
    with pytest.raises(ValueError):
        CitationPolicy(template_path="  ")
