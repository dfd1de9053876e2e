from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
import json
import logging
from typing import Sequence

from ragrank.config import MetricsConfig, ScoringConfig
from ragrank.models import Passage
from ragrank.rank.score import score_passage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RagMetrics:
    query_optimization_success: bool
    documents_retrieved: int
    documents_after_filtering: int
    average_document_score: float
    processing_time_ms: float
    timestamp: datetime

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


def average_score(passages: Sequence[Passage], config: ScoringConfig) -> float:
    if not passages:
        return 0.0
    return sum(score_passage(p, config) for p in passages) / len(passages)


def build_metrics(
    original_query: str,
    used_query: str,
    retrieved_count: int,
    final_passages: Sequence[Passage],
    config: ScoringConfig,
    processing_time_ms: float,
    timestamp: datetime | None = None,
) -> RagMetrics:
    return RagMetrics(
        query_optimization_success=used_query != original_query,
        documents_retrieved=retrieved_count,
        documents_after_filtering=len(final_passages),
        average_document_score=average_score(final_passages, config),
        processing_time_ms=processing_time_ms,
        timestamp=timestamp or datetime.now(timezone.utc),
    )


def collect_metrics(metrics: RagMetrics, config: MetricsConfig) -> None:
    if not config.enabled:
        return
    logger.log(config.level, "RAG metrics: %s", json.dumps(metrics.to_dict(), sort_keys=True))
