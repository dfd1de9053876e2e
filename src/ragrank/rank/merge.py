from __future__ import annotations

from typing import Iterable

from ragrank.config import ScoringConfig
from ragrank.models import Passage
from ragrank.rank.score import score_passage

UNKNOWN_SOURCE = "unknown"
MERGE_SEPARATOR = "\n\n...\n\n"


def source_key(passage: Passage) -> str:
    return passage.source_uri or passage.source_id or UNKNOWN_SOURCE


def passage_key(passage: Passage) -> str:
    """Key unique per source document and page, e.g. ``"https://x/doc.pdf_3"``."""
    page = passage.page_number
    return f"{source_key(passage)}_{'' if page is None else page}"


def group_by_source(passages: Iterable[Passage]) -> dict[str, list[Passage]]:
    # dict keeps first-seen key order, which fixes the merge output order.
    groups: dict[str, list[Passage]] = {}
    for passage in passages:
        groups.setdefault(source_key(passage), []).append(passage)
    return groups


def _page_prefix(passage: Passage) -> str:
    page = passage.page_number
    return "" if page is None else f"[Page {page}] "


def merge_group(group: list[Passage], config: ScoringConfig | None = None) -> Passage:
    """Collapse passages from one source document into a single passage.

    Members are ordered by page number (missing pages sort as 0) and their
    contents joined with page prefixes. Metadata comes from the
    highest-scoring member; the earliest member in page order wins ties.
    """
    if not group:
        raise ValueError("cannot merge an empty group")
    if len(group) == 1:
        return group[0]

    ordered = sorted(group, key=lambda p: p.page_number or 0)

    base = ordered[0]
    best = score_passage(base, config)
    for candidate in ordered[1:]:
        candidate_score = score_passage(candidate, config)
        if candidate_score > best:
            base, best = candidate, candidate_score

    merged = MERGE_SEPARATOR.join(_page_prefix(p) + (p.content or "") for p in ordered)
    return base.with_content(merged)
