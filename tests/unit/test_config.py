"""Test configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from confluence_engine.config import (
    ClassifierConfig,
    EngineConfig,
    IndicatorConfig,
    LightweightConfig,
    WeightsConfig,
    deep_merge,
    load_config,
    resolved_config_hash,
    save_config,
)


class TestSchema:
    """Test pydantic validation."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.min_candles == 50
        assert sum(config.weights.as_dict().values()) == 100.0
        assert config.scoring.neutral_vote_limit == 4
        assert config.scoring.min_margin == 10.0
        assert (config.risk.stop_atr_mult, config.risk.target_atr_mult) == (1.5, 2.5)
        assert (config.gate.min_score, config.gate.min_confidence) == (60.0, 66.0)
        assert config.lightweight.min_candles == 20

    def test_weights_must_sum_to_100(self):
        with pytest.raises(ValidationError, match="must sum to 100"):
            WeightsConfig(rsi=30)

    def test_macd_periods_ordered(self):
        with pytest.raises(ValueError, match="macd_fast must be < macd_slow"):
            IndicatorConfig(macd_fast=26, macd_slow=12)

    def test_ema_periods_ordered(self):
        with pytest.raises(ValueError, match="ema_fast must be < ema_slow"):
            IndicatorConfig(ema_fast=50, ema_slow=20)

    def test_rsi_thresholds_ordered(self):
        with pytest.raises(ValueError, match="rsi_oversold must be < rsi_overbought"):
            ClassifierConfig(rsi_oversold=70, rsi_overbought=30)

    def test_lightweight_validation(self):
        with pytest.raises(ValueError, match="ema_fast must be < ema_slow"):
            LightweightConfig(ema_fast=21, ema_slow=9)

    def test_empty_name(self):
        with pytest.raises(ValueError, match="name cannot be empty"):
            EngineConfig(name="  ")


class TestLoader:
    """Test YAML loading and merging."""

    def test_defaults_only(self):
        config = load_config()

        assert config == EngineConfig()

    def test_config_loading(self, tmp_path: Path):
        config_yaml = """
name: Test_Engine
version: "2.0"

min_candles: 60

scoring:
  min_margin: 5

gate:
  min_score: 50
"""
        config_file = tmp_path / "engine.yaml"
        config_file.write_text(config_yaml)

        config = load_config(config_file)

        assert config.name == "Test_Engine"
        assert config.min_candles == 60
        assert config.scoring.min_margin == 5.0
        # Untouched keys keep their defaults
        assert config.scoring.neutral_vote_limit == 4
        assert config.gate.min_score == 50.0
        assert config.gate.min_confidence == 66.0

    def test_overrides_take_precedence(self, tmp_path: Path):
        config_file = tmp_path / "engine.yaml"
        config_file.write_text("gate:\n  min_score: 50\n")

        config = load_config(config_file, overrides={"gate": {"min_score": 70}})

        assert config.gate.min_score == 70.0

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_config(self, tmp_path: Path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("weights:\n  rsi: 50\n")

        with pytest.raises(ValueError, match="Config validation failed"):
            load_config(config_file)

    def test_deep_merge(self):
        base = {"a": 1, "nested": {"x": 1, "y": 2}}
        merged = deep_merge(base, {"nested": {"y": 3}, "b": 2})

        assert merged == {"a": 1, "b": 2, "nested": {"x": 1, "y": 3}}
        assert base["nested"]["y"] == 2

    def test_hash_is_stable(self):
        assert resolved_config_hash(EngineConfig()) == resolved_config_hash(load_config())
        assert len(resolved_config_hash(EngineConfig())) == 16

    def test_hash_changes_with_config(self):
        assert resolved_config_hash(EngineConfig()) != resolved_config_hash(
            EngineConfig(min_candles=60)
        )

    def test_hash_ignores_logging_settings(self):
        assert resolved_config_hash(EngineConfig()) == resolved_config_hash(
            EngineConfig(log_level="DEBUG", log_to_file=True)
        )

    def test_save_and_reload(self, tmp_path: Path):
        config = EngineConfig(name="Saved", min_candles=70)
        path = tmp_path / "out" / "saved.yaml"

        save_config(config, path)
        reloaded = load_config(path, use_defaults=False)

        assert reloaded == config
