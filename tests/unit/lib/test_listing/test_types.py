"""Unit tests for listing data types."""

import pytest

from meta_depot.lib.listing.types import CompressionType, ListingDescriptor, listing_filenames

_ENTRY = {
    "name": "neoforge/21.1.72",
    "last_modified": "2024-10-01T08:00:00.000Z",
    "url": "neoforge/21.1.72.json",
    "size": 28,
    "sha256": "a" * 64,
    "brotli": {"url": "neoforge/21.1.72.json.br", "size": 20, "sha256": "b" * 64},
    "gzip": {"url": "neoforge/21.1.72.json.gz", "size": 40, "sha256": "c" * 64},
}


class TestListingDescriptor:
    """Tests for ListingDescriptor (de)serialization."""

    def test_from_dict(self) -> None:
        descriptor = ListingDescriptor.from_dict(_ENTRY)

        assert descriptor.name == "neoforge/21.1.72"
        assert descriptor.size == 28
        assert descriptor.gzip.sha256 == "c" * 64

    def test_to_dict_matches_index_shape(self) -> None:
        assert ListingDescriptor.from_dict(_ENTRY).to_dict() == _ENTRY

    def test_compressed_is_looked_up_by_tag(self) -> None:
        descriptor = ListingDescriptor.from_dict(_ENTRY)

        assert descriptor.compressed(CompressionType.BROTLI).url == "neoforge/21.1.72.json.br"
        assert descriptor.compressed(CompressionType.GZIP).url == "neoforge/21.1.72.json.gz"

    def test_compressed_rejects_unknown_tag(self) -> None:
        with pytest.raises(ValueError):
            ListingDescriptor.from_dict(_ENTRY).compressed("zstd")  # type: ignore[arg-type]

    def test_missing_field_raises(self) -> None:
        entry = {k: v for k, v in _ENTRY.items() if k != "sha256"}

        with pytest.raises(ValueError, match="Invalid listing descriptor"):
            ListingDescriptor.from_dict(entry)

    def test_descriptor_is_immutable(self) -> None:
        descriptor = ListingDescriptor.from_dict(_ENTRY)

        with pytest.raises(AttributeError):
            descriptor.sha256 = "d" * 64  # type: ignore[misc]


class TestListingFilenames:
    """Tests for listing_filenames()."""

    def test_plain_json_first(self) -> None:
        assert listing_filenames("index") == ["index.json", "index.json.br", "index.json.gz"]
