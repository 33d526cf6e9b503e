import contextlib
import copy
import logging
import os
import pathlib
from collections.abc import Generator
from typing import Any, cast

import pydantic
import ruamel.yaml

from graphtutor import exceptions
from graphtutor.config import models

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GRAPHTUTOR_CONFIG"
LOCAL_CONFIG_NAME = "graphtutor.yaml"

# Module-level cache for merged config to avoid repeated disk I/O
_merged_config_cache: models.GraphTutorConfig | None = None


def get_global_config_path() -> pathlib.Path:
    """Get user-level config path (~/.config/graphtutor/config.yaml).

    GRAPHTUTOR_CONFIG replaces this path when set.
    """
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        return pathlib.Path(env_path)
    return pathlib.Path.home() / ".config" / "graphtutor" / "config.yaml"


def get_local_config_path() -> pathlib.Path:
    """Get working-directory config path (./graphtutor.yaml)."""
    return pathlib.Path.cwd() / LOCAL_CONFIG_NAME


def load_config_file(path: pathlib.Path) -> dict[str, Any]:
    """Load YAML config as plain dict, returns empty dict if missing."""
    if not path.exists():
        return {}

    try:
        yaml = ruamel.yaml.YAML(typ="safe")
        with path.open() as f:
            data = yaml.load(f)
    except ruamel.yaml.YAMLError as e:
        raise exceptions.ConfigError(f"Invalid YAML in {path}: {e}") from e
    except PermissionError:
        raise exceptions.ConfigError(f"Permission denied reading {path}") from None
    except OSError as e:
        raise exceptions.ConfigError(f"Error reading {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise exceptions.ConfigError(f"Config in {path} must be a mapping")
    return cast("dict[str, Any]", data)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base, recursively for nested dicts."""
    result = copy.deepcopy(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            nested_override = cast("dict[str, Any]", val)
            result[key] = deep_merge(result[key], nested_override)
        else:
            result[key] = copy.deepcopy(val)
    return result


def _validate(data: dict[str, Any], source: str) -> models.GraphTutorConfig:
    try:
        return models.GraphTutorConfig.model_validate(data)
    except pydantic.ValidationError as e:
        raise exceptions.ConfigError(f"Invalid configuration ({source}): {e}") from e


def load_config(path: pathlib.Path) -> models.GraphTutorConfig:
    """Load a single config file on top of the defaults."""
    defaults = models.GraphTutorConfig.get_default().model_dump()
    return _validate(deep_merge(defaults, load_config_file(path)), str(path))


def get_merged_config() -> models.GraphTutorConfig:
    """Load and merge configs: defaults < global < local.

    Results are cached to avoid repeated disk I/O.
    Call clear_config_cache() to reset (e.g., in tests).
    """
    global _merged_config_cache
    if _merged_config_cache is not None:
        return _merged_config_cache

    merged = models.GraphTutorConfig.get_default().model_dump()
    for path in (get_global_config_path(), get_local_config_path()):
        data = load_config_file(path)
        if data:
            logger.debug(f"Loaded config from {path}")
        merged = deep_merge(merged, data)

    _merged_config_cache = _validate(merged, "merged")
    return _merged_config_cache


def clear_config_cache() -> None:
    """Clear the merged config cache. Call this when config files change."""
    global _merged_config_cache
    _merged_config_cache = None


@contextlib.contextmanager
def override_config(**sections: Any) -> Generator[models.GraphTutorConfig]:
    """Temporarily replace the merged config with overridden values.

    Usage:
        with override_config(solver={"max_trails": 5}):
            ...
    """
    global _merged_config_cache
    previous = _merged_config_cache
    merged = deep_merge(get_merged_config().model_dump(), sections)
    _merged_config_cache = _validate(merged, "override")
    try:
        yield _merged_config_cache
    finally:
        _merged_config_cache = previous


def get_solver_config() -> models.SolverConfig:
    """Get solver limits from merged config."""
    return get_merged_config().solver


def get_display_precision() -> int:
    """Get number of significant digits used when printing weights."""
    return get_merged_config().display.precision
