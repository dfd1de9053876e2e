from __future__ import annotations

from ragrank.config import ScoringConfig
from ragrank.models import ATTR_LANGUAGE, ATTR_MODIFIED_AT, ATTR_SOURCE_URI, CONFIDENCE_LEVELS, DocumentMetadata, Passage
from ragrank.rank.score import score_passage


def _text_attr(passage: Passage, key: str) -> str | None:
    value = passage.attributes.get(key)
    if value is None or value == "":
        return None
    return str(value)


def extract_metadata(passage: Passage, config: ScoringConfig) -> DocumentMetadata:
    return DocumentMetadata(
        document_type=passage.file_type or "text",
        confidence=(passage.confidence if passage.confidence in CONFIDENCE_LEVELS else "MEDIUM").lower(),
        language=_text_attr(passage, ATTR_LANGUAGE) or "unknown",
        content_length=len(passage.content or ""),
        relevance_score=score_passage(passage, config),
        page_number=passage.page_number,
        source_uri=_text_attr(passage, ATTR_SOURCE_URI),
        last_modified=_text_attr(passage, ATTR_MODIFIED_AT),
    )
