from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Callable, Sequence

from ragrank.config import RagConfig
from ragrank.metrics import RagMetrics, build_metrics, collect_metrics
from ragrank.models import Passage
from ragrank.query.normalize import normalize_query
from ragrank.rank.arrange import arrange_passages
from ragrank.rank.filter import filter_quality
from ragrank.rank.score import score_passage

logger = logging.getLogger(__name__)

SearchFn = Callable[[str], Sequence[Passage]]
RewriteFn = Callable[[Sequence[str]], str]
MetricsSink = Callable[[RagMetrics], None]


class RetrievalError(RuntimeError):
    """The search backend failed for a turn."""


@dataclass(slots=True)
class TurnResult:
    query: str
    arranged: list[Passage]
    passages: list[Passage]
    metrics: RagMetrics

    @property
    def empty(self) -> bool:
        return not self.passages


class RagService:
    """Runs the retrieval half of one question/answer turn.

    ``search`` maps a query string to backend passages. ``rewrite`` (optional)
    receives the previous user questions followed by the current one and
    returns a model-produced search query.
    """

    def __init__(
        self,
        config: RagConfig,
        search: SearchFn,
        rewrite: RewriteFn | None = None,
        metrics_sink: MetricsSink | None = None,
    ):
        self.config = config
        self.search = search
        self.rewrite = rewrite
        self.metrics_sink = metrics_sink

    def resolve_query(self, question: str, history: Sequence[str] = ()) -> str:
        if self.rewrite is None:
            return question
        try:
            raw = self.rewrite([*history, question])
        except Exception:
            logger.warning("query rewrite failed; using original question", exc_info=True)
            return question
        query = normalize_query(raw, question, self.config.query)
        logger.info("optimized query: original=%r optimized=%r", question, query)
        return query

    def retrieve(self, question: str, history: Sequence[str] = ()) -> TurnResult:
        started = time.perf_counter()
        query = self.resolve_query(question, history)

        try:
            retrieved = list(self.search(query))
        except Exception as exc:
            raise RetrievalError(f"search failed for query {query!r}") from exc

        doc_cfg = self.config.document
        arranged = arrange_passages(retrieved, doc_cfg.scoring)
        passages = filter_quality(arranged, config=doc_cfg)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        metrics = build_metrics(
            original_query=question,
            used_query=query,
            retrieved_count=len(retrieved),
            final_passages=passages,
            config=doc_cfg.scoring,
            processing_time_ms=elapsed_ms,
        )
        self._report(metrics)

        for p in passages:
            logger.debug(
                "retrieved passage title=%r score=%.2f confidence=%s length=%d",
                p.title,
                score_passage(p, doc_cfg.scoring),
                p.confidence,
                len(p.content),
            )
        return TurnResult(query=query, arranged=arranged, passages=passages, metrics=metrics)

    def _report(self, metrics: RagMetrics) -> None:
        if self.metrics_sink is not None:
            self.metrics_sink(metrics)
            return
        collect_metrics(metrics, self.config.metrics)
