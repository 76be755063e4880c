"""Core docindex data models."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

RecordT = TypeVar("RecordT")


def _zero_model(model_cls: type[BaseModel]) -> BaseModel:
    """Build a record holding only field defaults, without validation.

    Required fields without a default are left unset.
    """
    return model_cls.model_construct()


@dataclass(frozen=True, slots=True)
class MetadataCodec(Generic[RecordT]):
    """Describes how metadata blocks map onto a single record type."""

    schema: type[RecordT]
    decode: Callable[[bytes], RecordT]
    empty: Callable[[], RecordT]
    copy: Callable[[RecordT], RecordT] = field(default=deepcopy)

    @classmethod
    def for_model(cls, model_cls: type[BaseModel]) -> "MetadataCodec[Any]":
        """Build a codec that decodes JSON metadata into a pydantic model."""
        return cls(
            schema=model_cls,
            decode=model_cls.model_validate_json,
            empty=lambda: _zero_model(model_cls),
            copy=lambda record: record.model_copy(deep=True),
        )

    @classmethod
    def coerce(cls, schema: Any) -> "MetadataCodec[Any]":
        if isinstance(schema, MetadataCodec):
            return schema
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            return cls.for_model(schema)
        raise TypeError(
            f"metadata schema must be a pydantic model class or MetadataCodec, got {schema!r}"
        )


@dataclass(frozen=True, slots=True)
class ParsedDocument(Generic[RecordT]):
    """Result of splitting one file into its metadata and body."""

    filename: str
    metadata: RecordT | None
    body: bytes


@dataclass(frozen=True, slots=True)
class Document(Generic[RecordT]):
    """A document as returned by index lookups."""

    filename: str
    metadata: RecordT
    body: bytes
    has_metadata: bool
