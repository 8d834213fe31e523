"""Configuration system for CliffGuard.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the tax, cliff and radar
components.

Usage:
    from cliffguard_core.config import CliffGuardConfig

    # Load from environment variables and .env file
    config = CliffGuardConfig()

    # Access radar settings
    print(config.radar.debounce_seconds)

    # Use the external tax calculator
    if config.policyengine.enabled:
        print(config.policyengine.base_url)
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .parameters.federal import FEDERAL_TAX_TABLES


class RadarConfig(BaseSettings):
    """Radar (real-time change detection) settings.

    Environment Variables:
        CLIFFGUARD_RADAR_DEBOUNCE_SECONDS: Quiet period before evaluating
        CLIFFGUARD_RADAR_TIMEOUT_SECONDS: Upper bound on one evaluation
        CLIFFGUARD_RADAR_MATERIALITY_THRESHOLD_CENTS: Smallest monthly change
            that produces an amount alert
    """

    model_config = SettingsConfigDict(
        env_prefix="CLIFFGUARD_RADAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debounce_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Debounce window for household updates in seconds",
    )
    timeout_seconds: float = Field(
        default=2.0,
        gt=0.0,
        le=60.0,
        description="Evaluation timeout in seconds",
    )
    materiality_threshold_cents: int = Field(
        default=500,
        ge=0,
        description="Minimum monthly change (cents) that triggers an amount alert",
    )


class CliffConfig(BaseSettings):
    """Cliff severity classification settings.

    Losses are measured as a fraction of the wage increase.

    Environment Variables:
        CLIFFGUARD_CLIFF_MINOR_LOSS_FRACTION: Upper bound (exclusive) for minor
        CLIFFGUARD_CLIFF_SEVERE_LOSS_FRACTION: Lower bound (exclusive) for severe
        CLIFFGUARD_CLIFF_SEVERE_FLOOR_CENTS: Absolute loss that is always severe
        CLIFFGUARD_CLIFF_THRESHOLDS_VERSION: Version tag reported on results
    """

    model_config = SettingsConfigDict(
        env_prefix="CLIFFGUARD_CLIFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    minor_loss_fraction: Decimal = Field(default=Decimal("0.10"), gt=0, le=1)
    severe_loss_fraction: Decimal = Field(default=Decimal("0.40"), gt=0, le=1)
    severe_floor_cents: int = Field(default=100000, ge=0)
    thresholds_version: str = Field(default="2024.1")

    @field_validator("thresholds_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Ensure version tag is not empty."""
        if not v or not v.strip():
            raise ValueError("Thresholds version cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def validate_ordering(self) -> "CliffConfig":
        if self.minor_loss_fraction >= self.severe_loss_fraction:
            raise ValueError("minor_loss_fraction must be below severe_loss_fraction")
        return self


class ExternalTaxConfig(BaseSettings):
    """PolicyEngine tax calculation settings.

    Environment Variables:
        CLIFFGUARD_POLICYENGINE_ENABLED: Use PolicyEngine instead of the
            in-process calculator
        CLIFFGUARD_POLICYENGINE_BASE_URL: Calculate endpoint URL
        CLIFFGUARD_POLICYENGINE_TIMEOUT: Request timeout in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="CLIFFGUARD_POLICYENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = False
    base_url: str = Field(default="https://api.policyengine.org/us/calculate")
    timeout: float = Field(default=30.0, gt=0, le=300.0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v


class CliffGuardConfig(BaseSettings):
    """Root configuration for CliffGuard.

    Environment Variables:
        CLIFFGUARD_DEFAULT_TAX_YEAR: Year used when a request names none
        CLIFFGUARD_DEFAULT_STATE_CODE: State used when a request names none

    Example:
        config = CliffGuardConfig(
            radar=RadarConfig(debounce_seconds=0.1),
            cliff=CliffConfig(severe_floor_cents=50000),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="CLIFFGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_tax_year: int = Field(default=2024)
    default_state_code: str = Field(default="MD", min_length=2, max_length=2)

    radar: RadarConfig = Field(default_factory=RadarConfig)
    cliff: CliffConfig = Field(default_factory=CliffConfig)
    policyengine: ExternalTaxConfig = Field(default_factory=ExternalTaxConfig)

    @field_validator("default_tax_year")
    @classmethod
    def validate_default_tax_year(cls, v: int) -> int:
        if v not in FEDERAL_TAX_TABLES:
            raise ValueError(
                f"Unsupported default tax year: {v}. Must be one of: {sorted(FEDERAL_TAX_TABLES)}"
            )
        return v

    @field_validator("default_state_code")
    @classmethod
    def validate_default_state_code(cls, v: str) -> str:
        return v.strip().upper()


def load_config(**overrides) -> CliffGuardConfig:
    """Build a CliffGuardConfig, reporting invalid settings as ConfigurationError."""
    try:
        return CliffGuardConfig(**overrides)
    except ValidationError as e:
        first = e.errors(include_url=False)[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid configuration: {first.get('msg', 'validation failed')}",
            config_key=key or None,
            actual=first.get("input") if isinstance(first.get("input"), (str, int, float)) else None,
        ) from e


_config: Optional[CliffGuardConfig] = None


def get_config() -> CliffGuardConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[CliffGuardConfig]) -> None:
    """Replace (or with None, reset) the process-wide configuration."""
    global _config
    _config = config
