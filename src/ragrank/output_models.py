from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ragrank.config import ScoringConfig
from ragrank.metadata import extract_metadata
from ragrank.metrics import RagMetrics
from ragrank.models import Passage
from ragrank.rank.merge import passage_key, source_key
from ragrank.rank.score import confidence_weight, document_type_bonus, length_adjustment, title_bonus


class MetadataOutput(BaseModel):
    document_type: str
    confidence: str
    language: str
    content_length: int
    page_number: int | None = None
    source_uri: str | None = None
    last_modified: str | None = None


class ScoreOutput(BaseModel):
    overall: float
    confidence: float
    length: float
    document_type: float
    title: float


class PassageOutput(BaseModel):
    key: str
    source: str
    source_id: str | None = None
    source_uri: str | None = None
    title: str | None = None
    content: str
    attributes: dict[str, Any] = {}
    metadata: MetadataOutput
    scores: ScoreOutput


class MetricsOutput(BaseModel):
    query_optimization_success: bool
    documents_retrieved: int
    documents_after_filtering: int
    average_document_score: float
    processing_time_ms: float
    timestamp: str


class RankOutput(BaseModel):
    query: str | None = None
    passages: list[PassageOutput] = []
    metrics: MetricsOutput | None = None


def passage_output(passage: Passage, config: ScoringConfig) -> PassageOutput:
    md = extract_metadata(passage, config)
    return PassageOutput(
        key=passage_key(passage),
        source=source_key(passage),
        source_id=passage.source_id,
        source_uri=passage.source_uri,
        title=passage.title,
        content=passage.content,
        attributes=dict(passage.attributes),
        metadata=MetadataOutput(
            document_type=md.document_type,
            confidence=md.confidence,
            language=md.language,
            content_length=md.content_length,
            page_number=md.page_number,
            source_uri=md.source_uri,
            last_modified=md.last_modified,
        ),
        scores=ScoreOutput(
            overall=md.relevance_score,
            confidence=confidence_weight(passage.confidence, config),
            length=length_adjustment(md.content_length, config),
            document_type=document_type_bonus(passage.file_type, config),
            title=title_bonus(passage.title, config),
        ),
    )


def metrics_output(metrics: RagMetrics) -> MetricsOutput:
    return MetricsOutput(**metrics.to_dict())
