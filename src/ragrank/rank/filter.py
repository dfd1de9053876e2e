from __future__ import annotations

from typing import Iterable

from ragrank.config import DocumentConfig
from ragrank.models import Passage

_DEFAULTS = DocumentConfig()


def filter_quality(
    passages: Iterable[Passage],
    min_content_length: int | None = None,
    max_count: int | None = None,
    config: DocumentConfig | None = None,
) -> list[Passage]:
    """Drop passages shorter than ``min_content_length`` and keep the first ``max_count``.

    Input order is preserved; callers pass an already ranked list. Unset
    limits come from ``config`` (or the default document config).
    """
    cfg = config or _DEFAULTS
    min_len = cfg.min_content_length if min_content_length is None else min_content_length
    limit = cfg.max_documents if max_count is None else max_count
    kept = [p for p in passages if len(p.content or "") >= min_len]
    return kept[: max(0, limit)]
