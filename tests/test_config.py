from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from ragrank.config import PRESETS, DocumentConfig, QueryConfig, RagConfig, get_preset, load_config, write_default_config


def test_defaults_match_balanced_preset() -> None:
    assert get_preset("balanced") == RagConfig()
    cfg = RagConfig()
    assert cfg.document.min_content_length == 50
    assert cfg.document.max_documents == 5
    assert cfg.document.scoring.confidence_weights == {"VERY_HIGH": 4, "HIGH": 3, "MEDIUM": 2, "LOW": 1}
    assert cfg.query.min_length == 3
    assert cfg.query.max_length == 100


def test_presets_differ() -> None:
    assert set(PRESETS) == {"balanced", "high_precision", "high_recall"}
    precision = PRESETS["high_precision"]
    recall = PRESETS["high_recall"]
    assert precision.document.max_documents < recall.document.max_documents
    assert precision.document.min_content_length > recall.document.min_content_length
    assert precision.document.scoring.confidence_weights["LOW"] < recall.document.scoring.confidence_weights["LOW"]
    assert precision.preset == "high_precision"


def test_unknown_preset_rejected() -> None:
    with pytest.raises(ValueError):
        get_preset("aggressive")


def test_load_config_missing_file_uses_preset(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.yaml", preset="high_recall")
    assert cfg == PRESETS["high_recall"]


def test_load_config_merges_file_and_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "preset": "high_precision",
                "document": {"scoring": {"document_type_bonus": {"pdf": 3}}},
                "query": {"max_length": 80},
            }
        )
    )
    cfg = load_config(path, overrides={"document": {"max_documents": 7}})
    assert cfg.preset == "high_precision"
    assert cfg.document.max_documents == 7
    assert cfg.document.min_content_length == 100
    assert cfg.document.scoring.document_type_bonus == {"pdf": 3.0, "html": 0.5, "txt": 0.0}
    assert cfg.document.scoring.confidence_weights["VERY_HIGH"] == 5
    assert cfg.query.max_length == 80


def test_write_default_config_round_trips(tmp_path: Path) -> None:
    path = write_default_config(tmp_path / "sub" / "config.yaml")
    assert path.exists()
    assert load_config(path) == RagConfig()

    path.write_text("preset: high_recall\n")
    assert write_default_config(path) == path
    assert path.read_text() == "preset: high_recall\n"


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValueError):
        QueryConfig(min_length=10, max_length=5)
    with pytest.raises(ValueError):
        QueryConfig(fallback_strategy="drop")
    with pytest.raises(ValueError):
        DocumentConfig(max_documents=-1)


@pytest.mark.parametrize(
    "text",
    [
        "document: null\n",
        "query: null\n",
        "metrics: null\n",
        "document: [1, 2]\n",
        "document:\n  scoring: 3\n",
        "document:\n  scoring:\n    content_length:\n      long: fast\n",
        "query:\n  shortest: 2\n",
        "document: [unclosed\n",
    ],
)
def test_malformed_config_raises_value_error(tmp_path: Path, text: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    with pytest.raises(ValueError):
        load_config(path)


def test_scoring_config_is_read_only_and_hashable() -> None:
    cfg = get_preset("balanced")
    with pytest.raises(TypeError):
        cfg.document.scoring.confidence_weights["LOW"] = 10  # type: ignore[index]
    with pytest.raises(TypeError):
        cfg.document.scoring.document_type_bonus["pdf"] = 10  # type: ignore[index]
    assert hash(cfg) == hash(get_preset("balanced"))
    assert len({cfg, get_preset("balanced")}) == 1
