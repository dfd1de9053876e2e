from __future__ import annotations

from ragrank.config import ScoringConfig
from ragrank.models import Passage
from ragrank.rank.arrange import arrange_passages, rank_passages
from ragrank.rank.merge import source_key

CFG = ScoringConfig()


def test_arrange_empty() -> None:
    assert arrange_passages([], CFG) == []


def test_arrange_merges_same_source(lambda_passages) -> None:
    result = arrange_passages(lambda_passages, CFG)

    assert len(result) == 4
    intro, events = lambda_passages[0], lambda_passages[1]
    merged = [p for p in result if p.source_uri == intro.source_uri]
    assert len(merged) == 1
    assert merged[0].content == f"[Page 1] {intro.content}\n\n...\n\n[Page 1] {events.content}"


def test_arrange_sorts_by_score(lambda_passages) -> None:
    result = arrange_passages(lambda_passages, CFG)

    assert [p.source_id for p in result] == ["doc3", "doc1", "doc2", "doc4"]
    assert result[0].confidence == "VERY_HIGH"
    assert result[-1].confidence == "LOW"


def test_arrange_every_source_appears_once(lambda_passages) -> None:
    result = arrange_passages(lambda_passages, CFG)
    keys = [source_key(p) for p in result]
    assert sorted(keys) == sorted({source_key(p) for p in lambda_passages})


def test_arrange_does_not_mutate_input(lambda_passages) -> None:
    snapshot = list(lambda_passages)
    arrange_passages(lambda_passages, CFG)
    assert lambda_passages == snapshot


def test_arrange_ties_follow_first_seen_source_order() -> None:
    items = [
        Passage(source_id="b", content="x" * 200, confidence="HIGH"),
        Passage(source_id="a", content="y" * 200, confidence="HIGH"),
        Passage(source_id="c", content="z" * 200, confidence="HIGH"),
    ]
    assert [p.source_id for p in arrange_passages(items, CFG)] == ["b", "a", "c"]


def test_rank_passages_attaches_scores(lambda_passages) -> None:
    ranked = rank_passages(lambda_passages, CFG)
    assert [r.score for r in ranked] == [6.5, 4.0, 3.0, 0.0]


def test_default_scoring_config_is_balanced(lambda_passages) -> None:
    assert arrange_passages(lambda_passages) == arrange_passages(lambda_passages, CFG)
