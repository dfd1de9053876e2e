from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

CONFIDENCE_LEVELS = ("VERY_HIGH", "HIGH", "MEDIUM", "LOW")
DOCUMENT_TYPES = ("pdf", "html", "txt", "other")

ATTR_FILE_TYPE = "_file_type"
ATTR_PAGE_NUMBER = "_excerpt_page_number"
ATTR_LANGUAGE = "_language_code"
ATTR_SOURCE_URI = "_source_uri"
ATTR_MODIFIED_AT = "_modified_at"


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
    return None


@dataclass(frozen=True, slots=True)
class Passage:
    """One excerpt hit returned by the search backend."""

    source_id: str | None = None
    source_uri: str | None = None
    title: str | None = None
    content: str = ""
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)
    confidence: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def page_number(self) -> int | None:
        return _as_int(self.attributes.get(ATTR_PAGE_NUMBER))

    @property
    def file_type(self) -> str | None:
        value = self.attributes.get(ATTR_FILE_TYPE)
        return value if isinstance(value, str) and value else None

    def with_content(self, content: str) -> Passage:
        return replace(self, content=content)


@dataclass(frozen=True, slots=True)
class RankedPassage:
    passage: Passage
    score: float


@dataclass(slots=True)
class DocumentMetadata:
    document_type: str
    confidence: str
    language: str
    content_length: int
    relevance_score: float
    page_number: int | None = None
    source_uri: str | None = None
    last_modified: str | None = None
