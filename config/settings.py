"""
Configuration settings for Wind Profile Import.

This module provides type-safe configuration management using Pydantic.
Settings are loaded from environment variables and .env file.

Usage:
    from config.settings import get_settings

    settings = get_settings()
    print(settings.import_speed_unit)
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the project root directory (parent of config/)
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """
    Application settings with validation.

    Settings are loaded from environment variables, with fallback to .env file.
    The import_* values are the defaults applied to files that do not declare
    their own units; metadata detected inside a file always takes precedence.
    """

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Import Defaults
    # ==========================================================================
    import_altitude_unit: str = Field(
        default="meters",
        description="Altitude unit assumed for imported files: 'meters' or 'feet'"
    )

    import_speed_unit: str = Field(
        default="kmh",
        description="Speed unit assumed for imported files: 'kmh', 'ms' or 'knots'"
    )

    import_direction_mode: str = Field(
        default="from",
        description="Whether imported directions are where the wind comes 'from' or goes 'to'"
    )

    import_direction_reference: str = Field(
        default="true",
        description="North reference of imported directions: 'true' or 'magnetic'"
    )

    import_altitude_reference: str = Field(
        default="msl",
        description="Altitude reference of imported files: 'msl' or 'agl'"
    )

    # ==========================================================================
    # Site Configuration
    # ==========================================================================
    launch_elevation: float = Field(
        default=0.0,
        ge=-500,
        le=9000,
        description="Launch site elevation in meters MSL (used for AGL files)"
    )

    magnetic_declination: float = Field(
        default=0.0,
        ge=-180,
        le=180,
        description="Local magnetic declination in degrees, east positive"
    )

    # ==========================================================================
    # Display
    # ==========================================================================
    wind_direction_mode: str = Field(
        default="from",
        description="Direction convention used when comparing headings in wind search"
    )

    # ==========================================================================
    # Directory Configuration
    # ==========================================================================
    export_dir: Path = Field(
        default=PROJECT_ROOT / "data" / "exports",
        description="Directory for exported wind profiles"
    )

    # ==========================================================================
    # Validators
    # ==========================================================================
    @field_validator("import_altitude_unit")
    @classmethod
    def validate_altitude_unit(cls, v: str) -> str:
        """Validate altitude unit."""
        return _one_of(v, {"meters", "feet"}, "Altitude unit")

    @field_validator("import_speed_unit")
    @classmethod
    def validate_speed_unit(cls, v: str) -> str:
        """Validate speed unit."""
        return _one_of(v, {"kmh", "ms", "knots"}, "Speed unit")

    @field_validator("import_direction_mode", "wind_direction_mode")
    @classmethod
    def validate_direction_mode(cls, v: str) -> str:
        """Validate from/to convention."""
        return _one_of(v, {"from", "to"}, "Direction mode")

    @field_validator("import_direction_reference")
    @classmethod
    def validate_direction_reference(cls, v: str) -> str:
        """Validate north reference."""
        return _one_of(v, {"true", "magnetic"}, "Direction reference")

    @field_validator("import_altitude_reference")
    @classmethod
    def validate_altitude_reference(cls, v: str) -> str:
        """Validate altitude reference."""
        return _one_of(v, {"msl", "agl"}, "Altitude reference")

    @field_validator("export_dir", mode="before")
    @classmethod
    def resolve_path(cls, v) -> Path:
        """Convert string paths to Path objects and resolve relative paths."""
        if isinstance(v, str):
            v = Path(v)
        if not v.is_absolute():
            v = PROJECT_ROOT / v
        return v

    # ==========================================================================
    # Methods
    # ==========================================================================
    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.export_dir.mkdir(parents=True, exist_ok=True)


def _one_of(value: str, valid: set, label: str) -> str:
    v_lower = value.strip().lower()
    if v_lower not in valid:
        raise ValueError(f"{label} must be one of: {sorted(valid)}")
    return v_lower


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance (cached for performance)

    Note:
        Uses lru_cache to avoid re-reading .env file on every call.
        Call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Force reload settings from environment.

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()


# =============================================================================
# Peer Profile Colors (assigned in order to profiles loaded for wind search)
# =============================================================================
PEER_COLORS = [
    "#ef4444",
    "#22c55e",
    "#f59e0b",
    "#a855f7",
    "#ec4899",
    "#14b8a6",
]

OWN_PROFILE_COLOR = "#3b82f6"
