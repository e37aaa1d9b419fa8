"""
Data module for wind profile models and unit normalization.
"""

from windprofile.data.models import (
    AltitudeReference,
    AltitudeUnit,
    DetectedSettings,
    DirectionMode,
    DirectionReference,
    ImportFormat,
    ImportResult,
    ImportSettings,
    ParsedRow,
    PeerProfile,
    SearchResult,
    SpeedUnit,
    WindLayer,
    WindSource,
)
from windprofile.data.processor import (
    convert_wind_speed,
    default_import_settings,
    layers_to_dataframe,
    normalize_rows,
)

__all__ = [
    # Settings enumerations
    "AltitudeReference",
    "AltitudeUnit",
    "DirectionMode",
    "DirectionReference",
    "SpeedUnit",
    # Models
    "DetectedSettings",
    "ImportFormat",
    "ImportResult",
    "ImportSettings",
    "ParsedRow",
    "PeerProfile",
    "SearchResult",
    "WindLayer",
    "WindSource",
    # Processing
    "convert_wind_speed",
    "default_import_settings",
    "layers_to_dataframe",
    "normalize_rows",
]
