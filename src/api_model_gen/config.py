"""Crawler settings.

Values are resolved from, lowest to highest precedence: built-in defaults,
an optional YAML file, ``API_MODEL_GEN_*`` environment variables, and
explicit overrides (CLI flags).
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from api_model_gen.client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from api_model_gen.errors import ConfigError
from api_model_gen.parser.documentation import DOCS_BASE_URL

INDEX_URL = "https://start.exactonline.nl/docs/HlpRestAPIResources.aspx"
ENV_PREFIX = "API_MODEL_GEN_"


class FailedDetailPolicy(str, Enum):
    """What to do with a resource whose detail page could not be fetched or parsed."""

    DROP = "drop"  # leave it out of the results
    KEEP_MINIMAL = "keep_minimal"  # keep the index-only version


class CrawlerSettings(BaseModel):
    """Settings for one crawl run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    index_url: str = INDEX_URL
    docs_base_url: str = DOCS_BASE_URL
    concurrency: int = Field(default=5, ge=1)
    batch_delay: float = Field(default=1.0, ge=0)
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    failed_detail_policy: FailedDetailPolicy = FailedDetailPolicy.DROP
    target: Literal["python", "php"] = "python"


def _from_env(environ: dict[str, str]) -> dict[str, str]:
    values = {}
    for name in CrawlerSettings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = environ[key]
    return values


def _from_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    return data


def load_settings(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
) -> CrawlerSettings:
    """Build settings from a YAML file, the environment and explicit overrides.

    ``None`` values in *overrides* are ignored so unset CLI options do not
    mask lower-precedence sources.
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_from_file(config_path))
    values.update(_from_env(dict(os.environ) if environ is None else environ))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return CrawlerSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid settings: {e}") from e
