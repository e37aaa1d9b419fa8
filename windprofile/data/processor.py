"""
Data processing module for wind profile import.

This module converts parsed rows from their declared units and reference
frames into canonical wind layers, and turns layer lists into analysis-ready
DataFrames.

Usage:
    from windprofile.data.processor import normalize_rows

    layers = normalize_rows(result.rows, settings, WindSource.PIBAL)
"""

import logging
import math
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import pandas as pd

from config.settings import Settings, get_settings
from windprofile.data.models import (
    AltitudeReference,
    AltitudeUnit,
    DirectionMode,
    DirectionReference,
    ImportSettings,
    ParsedRow,
    WindLayer,
    WindSource,
    round_half_up,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Unit Conversion Constants
# =============================================================================

FEET_TO_METERS = 0.3048

# Conversion factors to kilometers per hour (canonical unit)
WIND_SPEED_TO_KMH = {
    "kmh": 1.0,            # kilometers per hour (base)
    "km/h": 1.0,
    "kph": 1.0,
    "ms": 3.6,             # meters per second
    "m/s": 3.6,
    "knots": 1.852,        # nautical miles per hour
    "kts": 1.852,
    "kt": 1.852,
}

LAYER_COLUMNS = [
    "altitude", "direction", "speed", "source",
    "timestamp", "is_stable", "vario",
]


# =============================================================================
# Unit Conversion
# =============================================================================

def convert_wind_speed(
    value: float,
    from_unit: str,
    to_unit: str
) -> float:
    """
    Convert wind speed between units.

    Supported units: kmh (km/h, kph), ms (m/s), knots (kts, kt)

    Args:
        value: Wind speed value to convert
        from_unit: Source unit
        to_unit: Target unit

    Returns:
        Converted wind speed value

    Raises:
        ValueError: If unit not supported
    """
    from_unit = str(getattr(from_unit, "value", from_unit)).lower()
    to_unit = str(getattr(to_unit, "value", to_unit)).lower()

    if from_unit not in WIND_SPEED_TO_KMH:
        raise ValueError(f"Unknown source unit: {from_unit}. Supported: {list(WIND_SPEED_TO_KMH.keys())}")
    if to_unit not in WIND_SPEED_TO_KMH:
        raise ValueError(f"Unknown target unit: {to_unit}. Supported: {list(WIND_SPEED_TO_KMH.keys())}")

    if WIND_SPEED_TO_KMH[from_unit] == WIND_SPEED_TO_KMH[to_unit]:
        return value

    if math.isnan(value):
        return value

    value_kmh = value * WIND_SPEED_TO_KMH[from_unit]
    return value_kmh / WIND_SPEED_TO_KMH[to_unit]


def convert_altitude_to_meters(value: float, unit: AltitudeUnit) -> float:
    """Convert an altitude in the given unit to meters."""
    if unit == AltitudeUnit.FEET:
        return value * FEET_TO_METERS
    return value


def to_true_from_direction(direction: float, settings: ImportSettings) -> int:
    """
    Convert a direction to whole degrees true, "from" convention.

    Args:
        direction: Direction in the convention and reference of settings
        settings: Import settings describing the direction

    Returns:
        Direction in degrees, 0-359
    """
    if settings.direction_mode == DirectionMode.TO:
        direction = (direction + 180) % 360
    if settings.direction_reference == DirectionReference.MAGNETIC:
        direction = (direction + settings.magnetic_declination) % 360
    return round_half_up(direction) % 360


# =============================================================================
# Normalization
# =============================================================================

def default_import_settings(settings: Optional[Settings] = None) -> ImportSettings:
    """
    Build import settings from the configured defaults.

    Args:
        settings: Settings object (uses default if not provided)

    Returns:
        ImportSettings populated from configuration
    """
    settings = settings or get_settings()
    return ImportSettings(
        altitude_unit=settings.import_altitude_unit,
        speed_unit=settings.import_speed_unit,
        direction_mode=settings.import_direction_mode,
        direction_reference=settings.import_direction_reference,
        altitude_reference=settings.import_altitude_reference,
        launch_elevation=settings.launch_elevation,
        magnetic_declination=settings.magnetic_declination,
    )


def normalize_rows(
    rows: Iterable[ParsedRow],
    settings: ImportSettings,
    source: WindSource = WindSource.PIBAL,
) -> List[WindLayer]:
    """
    Convert parsed rows into canonical wind layers.

    Altitudes become whole meters MSL, speeds km/h rounded to 0.1 and
    directions whole degrees true in the "from" convention. When several
    rows round to the same altitude the last one wins.

    Args:
        rows: Parsed rows in the units described by settings
        settings: Units and reference frames of the rows
        source: Source tag attached to every layer

    Returns:
        Wind layers sorted ascending by altitude, one per altitude
    """
    source = WindSource(source)
    now = datetime.now(timezone.utc)
    layers_by_altitude: Dict[int, WindLayer] = {}
    replaced = 0

    for row in rows:
        altitude = convert_altitude_to_meters(row.altitude, settings.altitude_unit)
        if settings.altitude_reference == AltitudeReference.AGL:
            altitude += settings.launch_elevation
        altitude_m = round_half_up(altitude)

        # Last occurrence wins
        if altitude_m in layers_by_altitude:
            del layers_by_altitude[altitude_m]
            replaced += 1

        speed_kmh = convert_wind_speed(row.speed, settings.speed_unit, "kmh")

        layers_by_altitude[altitude_m] = WindLayer(
            altitude=altitude_m,
            direction=to_true_from_direction(row.direction, settings),
            speed=round_half_up(speed_kmh * 10) / 10,
            timestamp=now,
            source=source,
        )

    if replaced:
        logger.debug(f"Replaced {replaced} rows with duplicate altitudes")

    layers = sorted(layers_by_altitude.values(), key=lambda layer: layer.altitude)
    logger.debug(f"Normalized {len(layers)} wind layers (source={source.value})")
    return layers


# =============================================================================
# DataFrame Conversion
# =============================================================================

def layers_to_dataframe(layers: Iterable[WindLayer]) -> pd.DataFrame:
    """
    Convert wind layers to a pandas DataFrame.

    Args:
        layers: Wind layers in canonical units

    Returns:
        DataFrame with columns: altitude, direction, speed, source,
        timestamp, is_stable, vario; sorted by altitude
    """
    data = [
        {
            "altitude": layer.altitude,
            "direction": layer.direction,
            "speed": layer.speed,
            "source": layer.source.value,
            "timestamp": layer.timestamp,
            "is_stable": layer.is_stable,
            "vario": layer.vario,
        }
        for layer in layers
    ]

    if not data:
        logger.warning("No wind layers - returning empty DataFrame")
        return pd.DataFrame(columns=LAYER_COLUMNS)

    df = pd.DataFrame(data, columns=LAYER_COLUMNS)
    df = df.sort_values("altitude").reset_index(drop=True)
    df.attrs["units"] = {"altitude": "m MSL", "direction": "deg true (from)", "speed": "km/h"}

    logger.debug(f"Created DataFrame with {len(df)} rows")

    return df
