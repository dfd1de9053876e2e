from __future__ import annotations

from typing import Iterable

from ragrank.config import ScoringConfig
from ragrank.models import Passage, RankedPassage
from ragrank.rank.merge import group_by_source, merge_group
from ragrank.rank.score import score_passage


def sort_by_score(passages: Iterable[Passage], config: ScoringConfig | None = None) -> list[Passage]:
    # sorted() is stable with reverse=True, so equal scores keep input order.
    return sorted(passages, key=lambda p: score_passage(p, config), reverse=True)


def arrange_passages(passages: Iterable[Passage], config: ScoringConfig | None = None) -> list[Passage]:
    """Score, group by source, merge each group and re-sort by score.

    Groups are merged in first-seen key order of the score-sorted input, so
    ties in the final sort resolve to that order.
    """
    ordered = sort_by_score(passages, config)
    if not ordered:
        return []
    groups = group_by_source(ordered)
    merged = [merge_group(group, config) for group in groups.values()]
    return sort_by_score(merged, config)


def rank_passages(passages: Iterable[Passage], config: ScoringConfig | None = None) -> list[RankedPassage]:
    return [RankedPassage(passage=p, score=score_passage(p, config)) for p in arrange_passages(passages, config)]
