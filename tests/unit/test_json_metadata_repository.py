"""Unit tests for the JSON catalog metadata repository."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from citecover.domain.errors import InvalidMetadataKey, ItemNotFound
from citecover.infrastructure.adapters.json_metadata_repository import JsonMetadataRepository


def test_from_json_loads_catalog(catalog_path: Path):
    repository = JsonMetadataRepository.from_json(catalog_path)

    assert repository.get_item("123456789/42").handle == "123456789/42"


def test_from_json_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        JsonMetadataRepository.from_json(tmp_path / "absent.json")


def test_from_json_rejects_malformed_metadata_key(tmp_path: Path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"items": {"1/1": {"metadata": [{"key": "title", "value": "x"}]}}}))

    with pytest.raises(ValueError, match="Invalid catalog"):
        JsonMetadataRepository.from_json(path)


def test_metadata_values_keep_order_and_duplicates(repository):
    item = repository.get_item("123456789/42")

    assert repository.get_metadata_values(item, "dc.contributor.author") == ["Doe, Jane", " ", "Roe, Richard"]
    assert repository.get_metadata_values(item, "dc.contributor.*") == ["Doe, Jane", " ", "Roe, Richard"]
    assert repository.get_metadata_values(item, "dc.subject") == []


def test_metadata_mapping_form(repository):
    item = repository.get_item("123456789/43")

    assert repository.get_metadata_values(item, "dc.creator") == ["Smith, Ann"]
    assert repository.get_metadata_values(item, "dc.title") == ["Orphan Notes"]


def test_malformed_lookup_key_raises(repository):
    item = repository.get_item("123456789/42")

    with pytest.raises(InvalidMetadataKey):
        repository.get_metadata_values(item, "title")


def test_owning_collection_and_community_chain(repository):
    item = repository.get_item("123456789/44")

    assert repository.get_owning_collection_name(item) == "Working Papers"
    assert repository.get_owning_community_name(item) == "Department of Physics"
    assert [c.name for c in item.communities] == ["Department of Physics", "Faculty of Science"]
    assert [c.handle for c in item.collections] == ["123456789/11", "123456789/12"]


def test_item_without_owner(repository):
    item = repository.get_item("123456789/43")

    assert repository.get_owning_collection_name(item) is None
    assert repository.get_owning_community_name(item) is None


def test_unknown_item_and_bitstream(repository):
    with pytest.raises(ItemNotFound):
        repository.get_item("0/0")
    with pytest.raises(ItemNotFound):
        repository.get_bitstream("nothing.pdf")


def test_bitstream_defaults(repository):
    bitstream = repository.get_bitstream("thesis.pdf")

    assert bitstream.mime_type == "application/pdf"
    assert bitstream.bundles == ("ORIGINAL",)
    assert bitstream.item_handle == "123456789/42"
