"""Configuration management for the confluence engine.

Handles loading, validation, merging, and hashing of engine parameters.
"""

from .schema import (
    EngineConfig,
    WeightsConfig,
    IndicatorConfig,
    ClassifierConfig,
    TrendConfig,
    LevelsConfig,
    ScoringConfig,
    RiskConfig,
    GateConfig,
    LightweightConfig,
)
from .loader import (
    load_config,
    get_default_config,
    resolved_config_hash,
    save_config,
    deep_merge,
)

__all__ = [
    # Main config
    "EngineConfig",
    # Component configs
    "WeightsConfig",
    "IndicatorConfig",
    "ClassifierConfig",
    "TrendConfig",
    "LevelsConfig",
    "ScoringConfig",
    "RiskConfig",
    "GateConfig",
    "LightweightConfig",
    # Loaders
    "load_config",
    "get_default_config",
    "resolved_config_hash",
    "save_config",
    "deep_merge",
]
