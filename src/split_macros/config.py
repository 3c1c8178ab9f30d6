from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from split_macros.domain.errors import ConfigError
from split_macros.domain.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Mapping


class StoreBackend(StrEnum):
    SQLITE = "sqlite"
    REDIS = "redis"


_DEFAULTS: dict[str, object] = {
    "store": {
        "backend": "sqlite",
        "sqlite_path": "~/.config/split-macros/splits.db",
        "redis_url": "redis://localhost:6379/0",
    },
    "query": {
        "default_season": 2025,
    },
    "rebuild": {
        "timeout_seconds": 30,
    },
}


@dataclass(frozen=True)
class Settings:
    backend: StoreBackend
    sqlite_path: Path
    redis_url: str
    default_season: int
    rebuild_timeout: float | None


def create_config(
    yaml_path: str = "splits.yaml",
    env_prefix: str = "SPLITS",
    defaults: dict[str, object] | None = None,
    *,
    overrides: Mapping[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file; a missing file is ignored.
        env_prefix: Prefix for environment variables, e.g. ``SPLITS__STORE__BACKEND``.
        defaults: Default configuration values.
        overrides: Nested values that win over every other layer.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(dict(overrides)))
    return ConfigurationSet(*layers)


def load_settings(cfg: ConfigurationSet | None = None) -> Result[Settings, ConfigError]:
    if cfg is None:
        cfg = create_config()

    raw_backend = str(cfg["store.backend"]).strip().lower()
    try:
        backend = StoreBackend(raw_backend)
    except ValueError:
        return Err(
            ConfigError(
                message=f"store.backend must be one of {', '.join(b.value for b in StoreBackend)}, got '{raw_backend}'",
                unrecognized_keys=("store.backend",),
            )
        )

    try:
        default_season = int(str(cfg["query.default_season"]))
    except ValueError:
        return Err(
            ConfigError(
                message=f"query.default_season must be an integer, got '{cfg['query.default_season']}'",
                unrecognized_keys=("query.default_season",),
            )
        )

    try:
        timeout = float(str(cfg["rebuild.timeout_seconds"]))
    except ValueError:
        return Err(
            ConfigError(
                message=f"rebuild.timeout_seconds must be a number, got '{cfg['rebuild.timeout_seconds']}'",
                unrecognized_keys=("rebuild.timeout_seconds",),
            )
        )
    if timeout < 0:
        return Err(
            ConfigError(
                message="rebuild.timeout_seconds must not be negative",
                unrecognized_keys=("rebuild.timeout_seconds",),
            )
        )

    return Ok(
        Settings(
            backend=backend,
            sqlite_path=Path(str(cfg["store.sqlite_path"])).expanduser(),
            redis_url=str(cfg["store.redis_url"]),
            default_season=default_season,
            rebuild_timeout=timeout or None,
        )
    )
