"""Splitting documents into a metadata block and a body.

A document is an optional metadata block, a blank line, then the body. The
first occurrence of the delimiter (``b"\\n\\n"`` by default) marks the
boundary; files without it are body-only.
"""

from __future__ import annotations

import logging
from typing import Any

from docindex.config import DEFAULT_DELIMITER
from docindex.errors import MetadataDecodeError
from docindex.models import MetadataCodec, ParsedDocument

LOGGER = logging.getLogger(__name__)


def split_document(data: bytes, delimiter: bytes = DEFAULT_DELIMITER) -> tuple[bytes | None, bytes]:
    """Return ``(metadata_segment, body)``; the segment is None without a boundary."""
    boundary = data.find(delimiter)
    if boundary < 0:
        return None, data
    return data[:boundary], data[boundary + len(delimiter) :]


def decode_metadata(filename: str, segment: bytes, codec: MetadataCodec[Any]) -> Any:
    try:
        record = codec.decode(segment)
    except (ValueError, TypeError) as exc:  # pydantic.ValidationError is a ValueError
        raise MetadataDecodeError(filename, str(exc)) from exc
    if not isinstance(record, codec.schema):
        raise MetadataDecodeError(
            filename,
            f"decoder returned {type(record).__name__}, expected {codec.schema.__name__}",
        )
    return record


def parse_document(
    filename: str,
    data: bytes,
    codec: MetadataCodec[Any],
    *,
    delimiter: bytes = DEFAULT_DELIMITER,
) -> ParsedDocument[Any]:
    """Split ``data`` and decode its metadata block, if any."""
    segment, body = split_document(data, delimiter)
    if segment is None:
        LOGGER.debug("No metadata block in %s", filename)
        return ParsedDocument(filename=filename, metadata=None, body=body)
    return ParsedDocument(
        filename=filename,
        metadata=decode_metadata(filename, segment, codec),
        body=body,
    )
