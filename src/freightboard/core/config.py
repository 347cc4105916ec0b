"""
Configuration management for the freight board.

Handles loading and accessing:
- Business configuration (config.yaml)
- Environment variables (Supabase credentials, logging)
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingConfig(BaseModel):
    """Constants behind the freight arithmetic."""

    sack_weight_kg: Decimal = Field(Decimal("60"), gt=0)
    advance_ratio: Decimal = Field(Decimal("0.70"), ge=0, le=1)
    commission_per_ton: Decimal = Field(Decimal("5.00"), ge=0)
    currency: str = "BRL"

    @property
    def balance_ratio(self) -> Decimal:
        """Share of the total paid on delivery."""
        return Decimal("1") - self.advance_ratio


class CompanyInfo(BaseModel):
    """Company identification shown on reports and exports."""

    name: str = "Freight Board"
    document: Optional[str] = None
    city: Optional[str] = None


class EnvironmentSettings(BaseSettings):
    """Environment variables configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Supabase
    supabase_url: Optional[str] = Field(None, alias="SUPABASE_URL")
    supabase_key: Optional[str] = Field(None, alias="SUPABASE_KEY")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("console", alias="LOG_FORMAT")

    @property
    def supabase_configured(self) -> bool:
        """Check if Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_key)


class ConfigManager:
    """
    Central configuration manager for the freight board.

    Loads and provides access to:
    - Business configuration from config/config.yaml
    - Environment variables from .env
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional path to config directory. Defaults to
                $FREIGHTBOARD_CONFIG_DIR, then ./config.
        """
        if config_dir is None:
            config_dir = Path(os.getenv("FREIGHTBOARD_CONFIG_DIR", "config"))

        self.config_dir = Path(config_dir)
        self._business_config: Optional[dict[str, Any]] = None
        self._env_settings: Optional[EnvironmentSettings] = None

    @property
    def business_config(self) -> dict[str, Any]:
        """Load and return business configuration from config.yaml."""
        if self._business_config is None:
            config_path = self.config_dir / "config.yaml"
            if config_path.exists():
                with open(config_path, "r", encoding="utf-8") as f:
                    self._business_config = yaml.safe_load(f) or {}
            else:
                self._business_config = {}
        return self._business_config

    @property
    def env(self) -> EnvironmentSettings:
        """Load and return environment settings."""
        if self._env_settings is None:
            self._env_settings = EnvironmentSettings()
        return self._env_settings

    def get_pricing(self) -> PricingConfig:
        """Get pricing constants from business config."""
        return PricingConfig(**self.business_config.get("pricing", {}))

    def get_company_info(self) -> CompanyInfo:
        """Get company information from business config."""
        return CompanyInfo(**self.business_config.get("company", {}))


# Global config instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        ConfigManager singleton instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reset_config() -> None:
    """Drop the global instance so the next get_config() reloads."""
    global _config_manager
    _config_manager = None
