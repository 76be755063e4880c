"""Tests for the metadata/body splitter."""

from __future__ import annotations

import json

import pytest
from pydantic import BaseModel

from docindex.errors import MetadataDecodeError
from docindex.ingestion.splitter import decode_metadata, parse_document, split_document
from docindex.models import MetadataCodec


class Metadata(BaseModel):
    Title: str = ""
    Tags: list[str] = []


@pytest.fixture
def codec() -> MetadataCodec:
    return MetadataCodec.for_model(Metadata)


class TestSplitDocument:
    """Test split_document function."""

    def test_metadata_and_body(self) -> None:
        """Should split at the first blank line."""
        segment, body = split_document(b'{"Title":"foo"}\n\nHello from foo.\n')

        assert segment == b'{"Title":"foo"}'
        assert body == b"Hello from foo.\n"

    def test_no_boundary(self) -> None:
        """Should return the full content as body."""
        data = b"just one paragraph\nwith two lines\n"

        segment, body = split_document(data)

        assert segment is None
        assert body == data

    def test_only_first_boundary_counts(self) -> None:
        """Should keep later blank lines in the body."""
        segment, body = split_document(b"meta\n\npara one\n\npara two")

        assert segment == b"meta"
        assert body == b"para one\n\npara two"

    def test_boundary_at_start(self) -> None:
        """Should yield an empty metadata segment."""
        segment, body = split_document(b"\n\nbody")

        assert segment == b""
        assert body == b"body"

    def test_boundary_at_end(self) -> None:
        """Should yield an empty body."""
        segment, body = split_document(b"meta\n\n")

        assert segment == b"meta"
        assert body == b""

    def test_empty_input(self) -> None:
        """Should treat empty content as body-only."""
        assert split_document(b"") == (None, b"")

    def test_custom_delimiter(self) -> None:
        """Should honour a different delimiter."""
        segment, body = split_document(b"meta\r\n\r\nbody", b"\r\n\r\n")

        assert segment == b"meta"
        assert body == b"body"


class TestDecodeMetadata:
    """Test decode_metadata function."""

    def test_decodes_into_schema(self, codec: MetadataCodec) -> None:
        """Should build a record of the schema type."""
        record = decode_metadata("a.txt", b'{"Title":"a","Tags":["x"]}', codec)

        assert record == Metadata(Title="a", Tags=["x"])

    def test_unknown_fields_ignored(self, codec: MetadataCodec) -> None:
        """Should follow pydantic's default handling of extra fields."""
        record = decode_metadata("a.txt", b'{"Title":"a","Author":"me"}', codec)

        assert record == Metadata(Title="a")

    def test_malformed_json(self, codec: MetadataCodec) -> None:
        """Should raise MetadataDecodeError naming the file."""
        with pytest.raises(MetadataDecodeError) as excinfo:
            decode_metadata("bad.txt", b"{not json", codec)

        assert excinfo.value.filename == "bad.txt"
        assert isinstance(excinfo.value, ValueError)
        assert "bad.txt" in str(excinfo.value)

    def test_wrong_field_type(self, codec: MetadataCodec) -> None:
        """Should reject values that do not match the schema."""
        with pytest.raises(MetadataDecodeError):
            decode_metadata("bad.txt", b'{"Tags": 5}', codec)

    def test_non_utf8_metadata(self, codec: MetadataCodec) -> None:
        """Should reject a metadata block that is not valid UTF-8."""
        with pytest.raises(MetadataDecodeError) as excinfo:
            parse_document("binary.txt", b"\xff\xfe\n\nbody", codec)

        assert excinfo.value.filename == "binary.txt"

    def test_non_utf8_with_json_codec(self) -> None:
        """Should wrap UnicodeDecodeError from a plain json decoder."""
        codec = MetadataCodec(schema=dict, decode=json.loads, empty=dict)

        with pytest.raises(MetadataDecodeError):
            decode_metadata("binary.txt", b'{"a": "\xff"}', codec)

    def test_decoder_returning_other_type(self) -> None:
        """Should reject a decoder that produces a foreign type."""
        codec = MetadataCodec(schema=dict, decode=json.loads, empty=dict)

        with pytest.raises(MetadataDecodeError):
            decode_metadata("list.txt", b"[]", codec)


class TestParseDocument:
    """Test parse_document function."""

    def test_with_metadata(self, codec: MetadataCodec) -> None:
        """Should decode metadata and keep the body bytes."""
        parsed = parse_document("foo.txt", b'{"Title":"foo"}\n\nBODY', codec)

        assert parsed.filename == "foo.txt"
        assert parsed.metadata == Metadata(Title="foo")
        assert parsed.body == b"BODY"

    def test_without_metadata(self, codec: MetadataCodec) -> None:
        """Should leave metadata absent when there is no blank line."""
        parsed = parse_document("plain.txt", b"plain text\n", codec)

        assert parsed.metadata is None
        assert parsed.body == b"plain text\n"

    def test_fresh_records(self, codec: MetadataCodec) -> None:
        """Should not share record instances between documents."""
        first = parse_document("a.txt", b'{"Title":"x"}\n\n', codec)
        second = parse_document("b.txt", b'{"Title":"x"}\n\n', codec)

        assert first.metadata == second.metadata
        assert first.metadata is not second.metadata
