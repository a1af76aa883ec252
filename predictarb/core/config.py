"""
Configuration management for predictarb.

Supports:
- Environment settings: .env file / environment variables
- YAML config for analyzer rules (config/config.yaml)
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from predictarb.core.errors import ConfigurationError

# Fields of AnalysisResult the ranker can order by
RANKABLE_FIELDS = (
    "expected_profit_pct",
    "guaranteed_profit_pct",
    "sell_shares_advantage_pct",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==============================================
    # Environment
    # ==============================================
    predictarb_env: str = Field(default="local", description="Environment: local/server")
    log_level: str = Field(default="INFO")
    timezone: str = Field(default="America/New_York")

    # ==============================================
    # PredictIt
    # ==============================================
    predictit_api_url: str = Field(
        default="https://www.predictit.org/api/marketdata/all",
        description="Full market snapshot endpoint",
    )

    # ==============================================
    # Runtime Config
    # ==============================================
    cache_ttl: int = Field(default=30, description="Snapshot cache TTL in seconds")
    http_timeout: int = Field(default=30, description="HTTP timeout in seconds")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @property
    def is_local(self) -> bool:
        return self.predictarb_env == "local"


class AnalyzerConfig(BaseModel):
    """
    Business rules for the evaluation engine.

    Passed explicitly into every evaluation so that runs are deterministic
    and independent of module state.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Markets where the position is already built to capacity
    fully_invested_market_ids: frozenset[int] = Field(
        default=frozenset({6653, 6941}),
    )
    annual_return_rate: float = Field(default=0.4, description="Required yearly return")
    default_sort_field: str = Field(default="expected_profit_pct")
    alert_threshold: float = Field(default=0.01, description="Fractional profit that rings the alert")
    priority_threshold: float = Field(default=0.01, description="Percent value used for labels")
    fee_factor: float = Field(default=0.9, description="Share of winnings kept after fees")

    @field_validator("annual_return_rate")
    @classmethod
    def validate_rate(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"annual_return_rate must be positive, got {v}")
        return v

    @field_validator("fee_factor")
    @classmethod
    def validate_fee_factor(cls, v: float) -> float:
        if not 0 < v <= 1:
            raise ValueError(f"fee_factor must be in (0, 1], got {v}")
        return v

    @field_validator("default_sort_field")
    @classmethod
    def validate_sort_field(cls, v: str) -> str:
        if v not in RANKABLE_FIELDS:
            raise ValueError(f"Invalid sort field: {v}. Must be one of {RANKABLE_FIELDS}")
        return v

    def is_fully_invested(self, market_id: int) -> bool:
        return market_id in self.fully_invested_market_ids

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "AnalyzerConfig":
        """Build from the `analyzer` section of config.yaml."""
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid analyzer configuration: {e}",
                details={"errors": e.errors(include_url=False)},
            ) from e


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def find_project_root() -> Optional[Path]:
    """Locate the directory holding pyproject.toml, if any."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


def load_yaml_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to config file. Defaults to config/config.yaml,
            or $PREDICTARB_CONFIG when set.

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = os.getenv("PREDICTARB_CONFIG")

    if config_path is None:
        root = find_project_root()
        if root is not None:
            config_path = str(root / "config" / "config.yaml")
        else:
            config_path = "config/config.yaml"

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_analyzer_config(config_path: Optional[str] = None) -> AnalyzerConfig:
    """
    Load the analyzer section of the YAML config.

    Falls back to built-in defaults only when the auto-detected
    config/config.yaml is missing. A path given as argument or through
    $PREDICTARB_CONFIG must exist.

    Raises:
        ConfigurationError: Explicit config file missing or invalid
    """
    explicit_path = config_path or os.getenv("PREDICTARB_CONFIG")
    try:
        yaml_config = load_yaml_config(explicit_path)
    except FileNotFoundError:
        if explicit_path:
            raise ConfigurationError(
                f"Config file not found: {explicit_path}",
                details={"config_path": explicit_path},
            )
        return AnalyzerConfig()

    return AnalyzerConfig.from_dict(yaml_config.get("analyzer"))
