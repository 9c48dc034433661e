"""Settings for wordnet-ris, read from a YAML file and the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from wordnet_ris.cache import DEFAULT_CAPACITY
from wordnet_ris.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Default locations
DEFAULT_DATABASE_PATH = Path.home() / ".wordnet-ris.json.gz"
DEFAULT_CONFIG_PATH = Path.home() / ".wordnet-ris.yaml"

ENV_CONFIG = "WORDNET_RIS_CONFIG"
ENV_DATABASE = "WORDNET_RIS_DATABASE"
ENV_CACHE_SIZE = "WORDNET_RIS_CACHE_SIZE"


@dataclass(frozen=True)
class Settings:
    """Resolved settings; CLI flags are applied on top with ``replace``."""

    database: Path | None = DEFAULT_DATABASE_PATH
    cache_size: int = DEFAULT_CAPACITY


def load_settings(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Merge defaults, the YAML config file and environment variables.

    Args:
        path: Config file; defaults to ``$WORDNET_RIS_CONFIG`` or
            ``~/.wordnet-ris.yaml``. A missing default file is ignored,
            a missing explicit file is an error.
        env: Environment mapping (``os.environ`` when omitted)

    Raises:
        ConfigurationError: If the file is malformed or a value is invalid
    """
    env = os.environ if env is None else env
    settings = Settings()

    explicit = path is not None or ENV_CONFIG in env
    config_path = Path(path or env.get(ENV_CONFIG) or DEFAULT_CONFIG_PATH)
    if config_path.exists():
        settings = _apply(settings, _load_yaml_file(config_path), str(config_path))
    elif explicit:
        raise ConfigurationError(f"Config file not found: {config_path}")

    overrides: dict[str, Any] = {}
    if env.get(ENV_DATABASE):
        overrides["database"] = env[ENV_DATABASE]
    if env.get(ENV_CACHE_SIZE):
        overrides["cache_size"] = env[ENV_CACHE_SIZE]
    return _apply(settings, overrides, "environment")


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: YAML root must be a mapping")
    return data


def _apply(settings: Settings, values: Mapping[str, Any], origin: str) -> Settings:
    unknown = set(values) - {"database", "cache_size"}
    if unknown:
        logger.warning(f"Ignoring unknown settings from {origin}: {sorted(unknown)}")

    changes: dict[str, Any] = {}
    if "database" in values:
        database = values["database"]
        changes["database"] = Path(database).expanduser() if database else None
    if "cache_size" in values:
        changes["cache_size"] = parse_cache_size(values["cache_size"], origin)
    return replace(settings, **changes)


def parse_cache_size(value: Any, origin: str = "argument") -> int:
    """Validate a cache size given as int or digit string."""
    if isinstance(value, int) and not isinstance(value, bool):
        size = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        size = int(value.strip())
    else:
        raise ConfigurationError(
            f"Invalid cache_size from {origin}: {value!r}"
        )
    if size < 1:
        raise ConfigurationError(
            f"cache_size from {origin} must be a positive integer, got {value!r}"
        )
    return size
