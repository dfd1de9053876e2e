from __future__ import annotations

from dataclasses import dataclass
import logging

from ragrank.config import QueryConfig

logger = logging.getLogger(__name__)

INSUFFICIENT_QUERY = "INSUFFICIENT_QUERY"

STATUS_OK = "ok"
STATUS_INSUFFICIENT = "insufficient"
STATUS_TOO_SHORT = "too_short"
STATUS_TRUNCATED = "truncated"

_DEFAULTS = QueryConfig()


@dataclass(frozen=True, slots=True)
class QueryRewrite:
    query: str
    status: str

    @property
    def fell_back(self) -> bool:
        return self.status in (STATUS_INSUFFICIENT, STATUS_TOO_SHORT)


def rewrite_query(raw_query: str | None, original_query: str, config: QueryConfig | None = None) -> QueryRewrite:
    cfg = config or _DEFAULTS
    trimmed = (raw_query or "").strip()
    if trimmed == INSUFFICIENT_QUERY:
        return QueryRewrite(original_query, STATUS_INSUFFICIENT)
    if not trimmed or len(trimmed) < cfg.min_length:
        return QueryRewrite(original_query, STATUS_TOO_SHORT)
    if len(trimmed) > cfg.max_length:
        return QueryRewrite(trimmed[: cfg.max_length], STATUS_TRUNCATED)
    return QueryRewrite(trimmed, STATUS_OK)


def normalize_query(raw_query: str | None, original_query: str, config: QueryConfig | None = None) -> str:
    """Pick the search string from a model-rewritten query.

    Falls back to ``original_query`` when the rewrite declined
    (``INSUFFICIENT_QUERY``), is blank or is shorter than ``min_length``; truncates
    rewrites longer than ``max_length``. Never raises.
    """
    cfg = config or _DEFAULTS
    result = rewrite_query(raw_query, original_query, cfg)
    if result.status == STATUS_INSUFFICIENT:
        logger.warning("query rewrite returned %s; using original query %r", INSUFFICIENT_QUERY, original_query)
    elif result.status == STATUS_TOO_SHORT:
        logger.warning(
            "query rewrite too short (%r, min_length=%d); using original query %r",
            (raw_query or "").strip(),
            cfg.min_length,
            original_query,
        )
    elif result.status == STATUS_TRUNCATED:
        logger.warning("query rewrite too long; truncated to %d characters", cfg.max_length)
    return result.query
