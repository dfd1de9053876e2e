from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from ragrank.models import CONFIDENCE_LEVELS
from ragrank.paths import default_config_path

FALLBACK_STRATEGIES = ("original",)
LOG_LEVELS = ("debug", "info", "warning", "error")


def _check_finite(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")


@dataclass(frozen=True, slots=True)
class LengthBand:
    threshold: int
    adjustment: float

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError(f"length threshold must be >= 0, got {self.threshold}")
        _check_finite("length adjustment", self.adjustment)


def _default_confidence_weights() -> dict[str, float]:
    return {"VERY_HIGH": 4.0, "HIGH": 3.0, "MEDIUM": 2.0, "LOW": 1.0}


def _default_document_type_bonus() -> dict[str, float]:
    return {"pdf": 1.0, "html": 0.5, "txt": 0.0}


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    confidence_weights: Mapping[str, float] = field(default_factory=_default_confidence_weights, hash=False)
    long: LengthBand = field(default_factory=lambda: LengthBand(1000, 2.0))
    medium: LengthBand = field(default_factory=lambda: LengthBand(500, 1.0))
    short: LengthBand = field(default_factory=lambda: LengthBand(100, -1.0))
    document_type_bonus: Mapping[str, float] = field(default_factory=_default_document_type_bonus, hash=False)
    title_quality_bonus: float = 0.5
    title_min_length: int = 10

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence_weights", MappingProxyType(dict(self.confidence_weights)))
        object.__setattr__(self, "document_type_bonus", MappingProxyType(dict(self.document_type_bonus)))
        missing = [label for label in CONFIDENCE_LEVELS if label not in self.confidence_weights]
        if missing:
            raise ValueError(f"confidence_weights missing labels: {', '.join(missing)}")
        for label, weight in self.confidence_weights.items():
            _check_finite(f"confidence weight {label}", weight)
        for doc_type, bonus in self.document_type_bonus.items():
            _check_finite(f"document type bonus {doc_type}", bonus)
        _check_finite("title_quality_bonus", self.title_quality_bonus)
        if self.title_min_length < 0:
            raise ValueError(f"title_min_length must be >= 0, got {self.title_min_length}")


@dataclass(frozen=True, slots=True)
class DocumentConfig:
    min_content_length: int = 50
    max_documents: int = 5
    scoring: ScoringConfig = field(default_factory=ScoringConfig)

    def __post_init__(self) -> None:
        if self.min_content_length < 0:
            raise ValueError(f"min_content_length must be >= 0, got {self.min_content_length}")
        if self.max_documents < 0:
            raise ValueError(f"max_documents must be >= 0, got {self.max_documents}")


@dataclass(frozen=True, slots=True)
class QueryConfig:
    min_length: int = 3
    max_length: int = 100
    fallback_strategy: str = "original"

    def __post_init__(self) -> None:
        if self.min_length < 0:
            raise ValueError(f"min_length must be >= 0, got {self.min_length}")
        if self.min_length > self.max_length:
            raise ValueError(f"min_length ({self.min_length}) exceeds max_length ({self.max_length})")
        if self.fallback_strategy not in FALLBACK_STRATEGIES:
            raise ValueError(f"unknown fallback_strategy: {self.fallback_strategy}")


@dataclass(frozen=True, slots=True)
class MetricsConfig:
    enabled: bool = True
    log_level: str = "info"

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"unknown log_level: {self.log_level}")

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@dataclass(frozen=True, slots=True)
class RagConfig:
    preset: str = "balanced"
    document: DocumentConfig = field(default_factory=DocumentConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)


BALANCED: dict[str, Any] = {
    "preset": "balanced",
    "document": {
        "min_content_length": 50,
        "max_documents": 5,
        "scoring": {
            "confidence_weights": {"VERY_HIGH": 4, "HIGH": 3, "MEDIUM": 2, "LOW": 1},
            "content_length": {
                "long": {"threshold": 1000, "bonus": 2},
                "medium": {"threshold": 500, "bonus": 1},
                "short": {"threshold": 100, "penalty": -1},
            },
            "document_type_bonus": {"pdf": 1, "html": 0.5, "txt": 0},
            "title_quality_bonus": 0.5,
            "title_min_length": 10,
        },
    },
    "query": {"min_length": 3, "max_length": 100, "fallback_strategy": "original"},
    "metrics": {"enabled": True, "log_level": "info"},
}

PRESET_OVERRIDES: dict[str, dict[str, Any]] = {
    "balanced": {},
    "high_precision": {
        "document": {
            "min_content_length": 100,
            "max_documents": 3,
            "scoring": {"confidence_weights": {"VERY_HIGH": 5, "HIGH": 3.5, "MEDIUM": 1.5, "LOW": 0.5}},
        },
    },
    "high_recall": {
        "document": {
            "min_content_length": 20,
            "max_documents": 10,
            "scoring": {"confidence_weights": {"VERY_HIGH": 4, "HIGH": 3.5, "MEDIUM": 3, "LOW": 2.5}},
        },
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def preset_data(name: str) -> dict[str, Any]:
    if name not in PRESET_OVERRIDES:
        raise ValueError(f"unknown preset: {name} (expected one of {', '.join(PRESET_OVERRIDES)})")
    return _merge(BALANCED, {**PRESET_OVERRIDES[name], "preset": name})


def _band(data: dict[str, Any], key: str) -> float:
    return float(data.get(key, 0.0))


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ValueError(f"config section {key!r} must be a mapping, got {type(value).__name__}")
    return value


def _to_scoring(data: Mapping[str, Any]) -> ScoringConfig:
    bands = _section(data, "content_length")
    return ScoringConfig(
        confidence_weights={str(k): float(v) for k, v in _section(data, "confidence_weights").items()},
        long=LengthBand(int(bands["long"]["threshold"]), _band(bands["long"], "bonus")),
        medium=LengthBand(int(bands["medium"]["threshold"]), _band(bands["medium"], "bonus")),
        short=LengthBand(int(bands["short"]["threshold"]), _band(bands["short"], "penalty")),
        document_type_bonus={str(k): float(v) for k, v in _section(data, "document_type_bonus").items()},
        title_quality_bonus=float(data.get("title_quality_bonus", 0.0)),
        title_min_length=int(data.get("title_min_length", 10)),
    )


def _to_config(data: Mapping[str, Any]) -> RagConfig:
    doc = _section(data, "document")
    return RagConfig(
        preset=str(data.get("preset", "balanced")),
        document=DocumentConfig(
            min_content_length=int(doc.get("min_content_length", 50)),
            max_documents=int(doc.get("max_documents", 5)),
            scoring=_to_scoring(_section(doc, "scoring")),
        ),
        query=QueryConfig(**_section(data, "query")),
        metrics=MetricsConfig(**_section(data, "metrics")),
    )


def get_preset(name: str) -> RagConfig:
    return _to_config(preset_data(name))


PRESETS: dict[str, RagConfig] = {name: get_preset(name) for name in PRESET_OVERRIDES}


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    preset: str | None = None,
) -> RagConfig:
    """Build a config from a preset, an optional YAML file and explicit overrides.

    Precedence, lowest first: the preset (``preset`` argument, else the
    file's ``preset`` key, else ``balanced``), the file contents, then
    ``overrides``. A missing file is not an error.
    """
    path = config_path or default_config_path()
    loaded: dict[str, Any] = {}
    if path.exists():
        try:
            raw = yaml.safe_load(path.read_text())
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: invalid YAML: {exc}") from exc
        if isinstance(raw, dict):
            loaded = raw
    name = preset or str(loaded.get("preset", "balanced"))
    data = _merge(preset_data(name), loaded)
    if overrides:
        data = _merge(data, overrides)
    data["preset"] = name
    try:
        return _to_config(data)
    except (AttributeError, KeyError, TypeError) as exc:
        raise ValueError(f"invalid config: {exc}") from exc


def write_default_config(path: Path | None = None, preset: str = "balanced") -> Path:
    target = path or default_config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.exists():
        return target
    target.write_text(yaml.safe_dump(preset_data(preset), sort_keys=False))
    return target
