from __future__ import annotations

from ragrank.config import ScoringConfig
from ragrank.models import CONFIDENCE_LEVELS, DOCUMENT_TYPES, Passage

_DEFAULTS = ScoringConfig()


def confidence_weight(confidence: str | None, config: ScoringConfig) -> float:
    if confidence in CONFIDENCE_LEVELS:
        return config.confidence_weights[confidence]
    return config.confidence_weights["LOW"]


def length_adjustment(length: int, config: ScoringConfig) -> float:
    # First matching band wins. Lengths from short.threshold up to and
    # including medium.threshold fall through with no adjustment.
    if length > config.long.threshold:
        return config.long.adjustment
    if length > config.medium.threshold:
        return config.medium.adjustment
    if length < config.short.threshold:
        return config.short.adjustment
    return 0.0


def document_type_bonus(file_type: str | None, config: ScoringConfig) -> float:
    if file_type not in DOCUMENT_TYPES:
        return 0.0
    return config.document_type_bonus.get(file_type, 0.0)


def title_bonus(title: str | None, config: ScoringConfig) -> float:
    if title and len(title) > config.title_min_length:
        return config.title_quality_bonus
    return 0.0


def score_passage(passage: Passage, config: ScoringConfig | None = None) -> float:
    config = config or _DEFAULTS
    score = confidence_weight(passage.confidence, config)
    score += length_adjustment(len(passage.content or ""), config)
    score += document_type_bonus(passage.file_type, config)
    score += title_bonus(passage.title, config)
    return max(0.0, score)
