import os
from datetime import timedelta
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from graphite_stats.exceptions import ConfigurationError
from graphite_stats.utils.formatters import MetricNameFormat
from graphite_stats.utils.metric_path import MetricPath
from graphite_stats.utils.time import DEFAULT_LOOKBACK, parse_lookback

DEFAULT_ROOT_PREFIX = "telegraf.vsphere_metrics.oob.qa.dell"
DEFAULT_METRICS_DIR = "snmp"


class Settings(BaseModel):
    graphite_url: str
    root_prefix: str = DEFAULT_ROOT_PREFIX
    metrics_dir: str = DEFAULT_METRICS_DIR
    lookback: timedelta = DEFAULT_LOOKBACK
    timeout: float = Field(default=30.0, gt=0)
    max_concurrency: int = Field(default=4, ge=1)
    name_format: MetricNameFormat = MetricNameFormat.RAW
    log_level: str = "INFO"

    @field_validator("graphite_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("GRAPHITE_URL must not be empty")
        return value

    @field_validator("root_prefix")
    @classmethod
    def check_root_prefix(cls, value: str) -> str:
        return str(MetricPath.parse(value))

    @field_validator("lookback", mode="before")
    @classmethod
    def parse_window(cls, value):
        if isinstance(value, str):
            return parse_lookback(value)
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from GRAPHITE_* environment variables"""
        env = os.environ if environ is None else environ

        graphite_url = env.get("GRAPHITE_URL", "")
        if not graphite_url.strip():
            raise ConfigurationError("GRAPHITE_URL environment variable is not set")

        values = {"graphite_url": graphite_url}
        optional = {
            "root_prefix": "GRAPHITE_ROOT_PREFIX",
            "metrics_dir": "GRAPHITE_METRICS_DIR",
            "lookback": "GRAPHITE_LOOKBACK",
            "timeout": "GRAPHITE_TIMEOUT",
            "max_concurrency": "GRAPHITE_MAX_CONCURRENCY",
            "name_format": "GRAPHITE_NAME_FORMAT",
            "log_level": "LOG_LEVEL",
        }
        for field, variable in optional.items():
            if variable in env:
                values[field] = env[variable]

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
