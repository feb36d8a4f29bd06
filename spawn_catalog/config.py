"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      - committed static defaults
  2. ``config/local.toml``        - optional local overrides (gitignored)
  3. ``.env``                     - local env overrides (gitignored)
  4. Environment variables        - ``SPAWN_CATALOG_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The catalog builder and CLI commands receive config models, never raw dicts
or env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class ContentConfig(BaseModel):
    """Where the content backend reads its data tables from."""

    model_config = ConfigDict(frozen=True)

    content_dir: str = "data/content"


class CatalogConfig(BaseModel):
    """Catalog construction settings.

    ``negated_tag_policy`` decides how a ``!tag`` entry in a pond rule is
    matched: ``require_absent`` treats it as "tag must be missing", ``literal``
    compares the raw string.
    """

    model_config = ConfigDict(frozen=True)

    custom_id_offset: int = 1000
    wallpaper_count: int = 112
    flooring_count: int = 56
    include_variants: bool = True
    negated_tag_policy: Literal["require_absent", "literal"] = "require_absent"

    @field_validator("custom_id_offset")
    @classmethod
    def validate_offset(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"custom_id_offset must be positive, got {v}.")
        return v

    @field_validator("wallpaper_count", "flooring_count")
    @classmethod
    def validate_count(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Counts must be non-negative, got {v}.")
        return v


class ExportConfig(BaseModel):
    """Catalog export settings."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/exports"
    default_format: Literal["json", "csv", "parquet"] = "json"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: Optional[str] = None
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    content: ContentConfig = ContentConfig()
    catalog: CatalogConfig = CatalogConfig()
    export: ExportConfig = ExportConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            missing, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        config_path = root / "config" / "default.toml"

    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        # Also merge local.toml if present (gitignored local overrides)
        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                raw = _deep_merge(raw, tomllib.load(f))

    # 3. Apply SPAWN_CATALOG_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SPAWN_CATALOG_* env vars to the raw config dict.

    Supported overrides:
      SPAWN_CATALOG_CONTENT_DIR → raw["content"]["content_dir"]
      SPAWN_CATALOG_LOG_LEVEL   → raw["logging"]["level"]
      SPAWN_CATALOG_DEBUG       → raw["debug"]
    """
    if content_dir := os.environ.get("SPAWN_CATALOG_CONTENT_DIR"):
        raw.setdefault("content", {})["content_dir"] = content_dir

    if log_level := os.environ.get("SPAWN_CATALOG_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("SPAWN_CATALOG_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        content=ContentConfig(**raw.get("content", {})),
        catalog=CatalogConfig(**raw.get("catalog", {})),
        export=ExportConfig(**raw.get("export", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
