"""
Configuration management using Pydantic for Watimage.
Provides type-safe configuration with validation and environment variable support.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from watimage.common.constants import (
    APIConstants,
    ImageConstants,
    SystemConstants,
    WatermarkConstants,
)
from watimage.core.enums import AnchorPosition
from watimage.core.image.colors import parse_color

logger = logging.getLogger(__name__)


class ImageConfig(BaseSettings):
    """Image encoding and pipeline defaults."""

    jpeg_quality: int = Field(
        default=ImageConstants.DEFAULT_QUALITY,
        ge=ImageConstants.MIN_QUALITY,
        le=ImageConstants.MAX_QUALITY,
        description="Default JPEG quality",
    )
    png_compression: int = Field(
        default=ImageConstants.DEFAULT_COMPRESSION,
        ge=ImageConstants.MIN_COMPRESSION,
        le=ImageConstants.MAX_COMPRESSION,
        description="Default PNG compression level",
    )
    matte_color: str = Field(
        default=ImageConstants.DEFAULT_MATTE_COLOR,
        description="Background used when transparency is flattened for JPEG output",
    )
    watermark_position: str = Field(
        default=WatermarkConstants.DEFAULT_POSITION,
        description="Default watermark anchor",
    )
    max_pixels: int = Field(
        default=ImageConstants.DEFAULT_MAX_PIXELS,
        ge=1,
        description="Largest accepted image (width * height)",
    )

    @field_validator("matte_color")
    @classmethod
    def validate_matte_color(cls, v):
        """Ensure the matte colour parses."""
        parse_color(v)
        return v

    @field_validator("watermark_position")
    @classmethod
    def validate_watermark_position(cls, v):
        """Normalize the default anchor."""
        return AnchorPosition.parse(v).value

    model_config = SettingsConfigDict(env_prefix="WATIMAGE_IMAGE_", extra="ignore")


class APIConfig(BaseSettings):
    """API configuration."""

    host: str = Field(default="0.0.0.0", description="API host address")
    port: int = Field(default=8000, ge=1, le=65535, description="API port")
    api_version: str = Field(default=APIConstants.API_VERSION, description="API version")
    cors_enabled: bool = Field(default=True, description="Enable CORS")
    cors_origins: List[str] = Field(default=["*"], description="CORS allowed origins")
    max_upload_size_mb: int = Field(
        default=APIConstants.MAX_UPLOAD_SIZE_MB,
        ge=1,
        le=500,
        description="Maximum decoded upload size in MB",
    )

    model_config = SettingsConfigDict(env_prefix="WATIMAGE_API_", extra="ignore")


class SystemConfig(BaseSettings):
    """System configuration."""

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    model_config = SettingsConfigDict(env_prefix="WATIMAGE_SYSTEM_", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-configurations
    image: ImageConfig = Field(default_factory=ImageConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    environment: str = Field(
        default="production", description="Environment (development, staging, production)"
    )

    config_file: Optional[str] = Field(default=None, description="Path to YAML config file")

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values):
        """Load configuration from YAML file if specified."""
        config_file = values.get("config_file") or os.getenv("WATIMAGE_CONFIG_FILE")

        if config_file and Path(config_file).exists():
            import yaml

            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f)
                    if file_config:
                        # Explicit values take precedence over the file
                        for key, value in file_config.items():
                            if key not in values or values[key] is None:
                                values[key] = value
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")

        return values

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_envs = ["development", "staging", "production", "test"]
        if v not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of {valid_envs}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(exclude_none=True)

    def save_to_file(self, path: str) -> None:
        """Save current configuration to YAML file."""
        import yaml

        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    model_config = SettingsConfigDict(
        env_prefix="WATIMAGE_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with validated configuration
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings object
    """
    get_settings.cache_clear()
    return get_settings()
