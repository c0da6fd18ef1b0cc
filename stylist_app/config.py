"""Configuration helpers for the outfit composition engine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "models/gemini-1.5-flash-002"
DEFAULT_TARGET_OUTFITS = 3
DEFAULT_MIN_POOL_SIZE = 14
DEFAULT_PER_SLOT_LIMIT = 8

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Configuration values for a styling run.

    ``api_key`` is only needed when the Gemini generator is used; without it
    the engine assembles outfits locally.
    """

    model: str = DEFAULT_GEMINI_MODEL
    api_key: Optional[str] = None
    target_outfits: int = DEFAULT_TARGET_OUTFITS
    min_pool_size: int = DEFAULT_MIN_POOL_SIZE
    per_slot_limit: int = DEFAULT_PER_SLOT_LIMIT
    environment: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets can be
        injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("STYLIST_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        def get_int(key: str, default: int) -> int:
            raw = get_value(key)
            if raw is None or str(raw).strip() == "":
                return default
            try:
                value = int(str(raw).strip())
            except ValueError:
                logger.warning("Ignoring non-integer %s=%r; using %s", key, raw, default)
                return default
            if value < 1:
                logger.warning("Ignoring non-positive %s=%r; using %s", key, raw, default)
                return default
            return value

        model = get_value("stylist_model", DEFAULT_GEMINI_MODEL)

        return cls(
            model=str(model or DEFAULT_GEMINI_MODEL),
            api_key=get_value("google_api_key"),
            target_outfits=get_int("target_outfits", DEFAULT_TARGET_OUTFITS),
            min_pool_size=get_int("min_pool_size", DEFAULT_MIN_POOL_SIZE),
            per_slot_limit=get_int("per_slot_limit", DEFAULT_PER_SLOT_LIMIT),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal ``key: value`` config file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["DEFAULT_GEMINI_MODEL", "EngineConfig"]
