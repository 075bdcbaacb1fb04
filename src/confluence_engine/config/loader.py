"""Configuration loader with YAML merging and hashing."""

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger
from ruamel.yaml import YAML

from .schema import EngineConfig


def deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries (override takes precedence).

    Args:
        base: Base dictionary.
        override: Override dictionary.

    Returns:
        Merged dictionary.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file to dict.

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    yaml = YAML(typ="safe")
    with path.open("r") as f:
        data = yaml.load(f)

    return data if data is not None else {}


def get_default_config() -> Path:
    """Get path to the packaged defaults.yaml.

    Raises:
        FileNotFoundError: If defaults.yaml not found.
    """
    default_path = Path(__file__).parent / "defaults.yaml"

    if not default_path.exists():
        raise FileNotFoundError(f"Default config not found: {default_path}")

    return default_path


def load_config(
    path: Optional[Path | str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    use_defaults: bool = True,
) -> EngineConfig:
    """Load engine configuration.

    Layers, lowest precedence first: packaged defaults.yaml, the user file,
    then ``overrides``.

    Args:
        path: Path to user configuration file. If None, defaults only.
        overrides: Nested dict applied last (e.g. from CLI flags).
        use_defaults: Whether to merge with defaults.yaml.

    Returns:
        Validated EngineConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    raw_config: Dict[str, Any] = {}

    if use_defaults:
        raw_config = load_yaml(get_default_config())
        logger.debug("Loaded defaults configuration")

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        raw_config = deep_merge(raw_config, load_yaml(path))
        logger.debug(f"Merged user configuration from {path}")

    if overrides:
        raw_config = deep_merge(raw_config, overrides)

    try:
        config = EngineConfig(**raw_config)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}") from e

    logger.info(f"Loaded configuration: {config.name} v{config.version}")
    return config


# Settings that change how a run is logged but never what it signals
_UNHASHED_FIELDS = {"log_level", "log_to_file"}


def resolved_config_hash(config: EngineConfig) -> str:
    """Fingerprint of the analysis policy in ``config``.

    Logging settings are left out, so two runs that can only differ in their
    log output share a hash. Returns the first 16 hex chars of a SHA256 over
    the canonical JSON dump.
    """
    policy = config.model_dump(mode="json", exclude=_UNHASHED_FIELDS)
    canonical = json.dumps(policy, sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
    logger.debug(f"Config hash: {digest}")
    return digest


def save_config(config: EngineConfig, path: Path | str) -> Path:
    """Write the resolved configuration as YAML loadable by ``load_config``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False
    with path.open("w") as f:
        yaml.dump(config.model_dump(mode="json"), f)

    logger.info(f"Saved configuration {config.name} ({resolved_config_hash(config)}) to {path}")
    return path
