from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from ragrank.models import Passage


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _attribute_value(value: Any) -> Any:
    # Kendra wraps scalars as {"StringValue": ...} / {"LongValue": ...}.
    if isinstance(value, Mapping):
        for key in ("StringValue", "LongValue", "DateValue"):
            if value.get(key) is not None:
                return value[key]
        return None
    return value


def passage_from_result_item(item: Mapping[str, Any]) -> Passage:
    """Convert a Kendra ``RetrieveResultItem`` mapping into a :class:`Passage`."""
    attributes: dict[str, Any] = {}
    for attr in item.get("DocumentAttributes") or []:
        if not isinstance(attr, Mapping) or not attr.get("Key"):
            continue
        value = _attribute_value(attr.get("Value"))
        if value is not None:
            attributes[str(attr["Key"])] = value
    score_attrs = item.get("ScoreAttributes") or {}
    return Passage(
        source_id=_str_or_none(item.get("DocumentId")),
        source_uri=_str_or_none(item.get("DocumentURI")),
        title=_str_or_none(item.get("DocumentTitle")),
        content=str(item.get("Content") or ""),
        attributes=attributes,
        confidence=_str_or_none(score_attrs.get("ScoreConfidence")),
    )


def passage_from_dict(item: Mapping[str, Any]) -> Passage:
    if not isinstance(item, Mapping):
        raise ValueError(f"passage record must be a mapping, got {type(item).__name__}")
    if "DocumentId" in item or "DocumentURI" in item or "DocumentAttributes" in item:
        return passage_from_result_item(item)
    attributes = item.get("attributes") or {}
    if not isinstance(attributes, Mapping):
        raise ValueError("passage attributes must be a mapping")
    return Passage(
        source_id=_str_or_none(item.get("source_id")),
        source_uri=_str_or_none(item.get("source_uri")),
        title=_str_or_none(item.get("title")),
        content=str(item.get("content") or ""),
        attributes=dict(attributes),
        confidence=_str_or_none(item.get("confidence")),
    )


def passages_from_records(records: Iterable[Mapping[str, Any]]) -> list[Passage]:
    return [passage_from_dict(r) for r in records]


def load_passages(path: Path) -> list[Passage]:
    """Read passages from a JSON or YAML file.

    The top level is either a list of records or a mapping holding the list
    under ``ResultItems`` (a raw retrieve response) or ``passages``.
    """
    text = path.read_text()
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if isinstance(data, Mapping):
        for key in ("ResultItems", "passages"):
            if key in data:
                data = data[key] or []
                break
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of passages, ResultItems or passages")
    return passages_from_records(data)
