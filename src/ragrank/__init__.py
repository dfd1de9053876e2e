from ragrank.config import DocumentConfig, MetricsConfig, QueryConfig, RagConfig, ScoringConfig, get_preset, load_config
from ragrank.models import Passage, RankedPassage
from ragrank.query.normalize import normalize_query
from ragrank.rank.arrange import arrange_passages, rank_passages
from ragrank.rank.filter import filter_quality
from ragrank.rank.merge import group_by_source, merge_group
from ragrank.rank.score import score_passage

__all__ = [
    "DocumentConfig",
    "MetricsConfig",
    "Passage",
    "QueryConfig",
    "RagConfig",
    "RankedPassage",
    "ScoringConfig",
    "arrange_passages",
    "filter_quality",
    "get_preset",
    "group_by_source",
    "load_config",
    "merge_group",
    "normalize_query",
    "rank_passages",
    "score_passage",
]
