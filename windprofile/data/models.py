"""
Data models for wind profile import.

This module defines Pydantic models for parsed measurement rows, import
settings, canonical wind layers, import results and wind search results.

Canonical units throughout the package are meters MSL for altitude, km/h for
speed and true-north degrees in the meteorological "from" convention for
direction. Only WindLayer is guaranteed to be in canonical units; ParsedRow
still carries whatever units the source file declared.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Enumerations
# =============================================================================

class AltitudeUnit(str, Enum):
    METERS = "meters"
    FEET = "feet"


class SpeedUnit(str, Enum):
    KMH = "kmh"
    MS = "ms"
    KNOTS = "knots"


class DirectionMode(str, Enum):
    """Whether a direction names where the wind comes from or goes to."""
    FROM = "from"
    TO = "to"


class DirectionReference(str, Enum):
    TRUE = "true"
    MAGNETIC = "magnetic"


class AltitudeReference(str, Enum):
    MSL = "msl"
    AGL = "agl"


class WindSource(str, Enum):
    """Origin of a wind layer."""
    MEASURED = "measured"
    PIBAL = "pibal"
    WINDSOND = "windsond"
    FORECAST = "forecast"
    MANUAL = "manual"
    CALCULATED = "calculated"


class ImportFormat(str, Enum):
    """
    Format classification of an imported wind file.

    CSV and WHITESPACE are the two variants of delimited text.
    """
    XML_TARGET = "xml_target"
    CSV = "csv"
    WHITESPACE = "whitespace"
    UNKNOWN = "unknown"

    @property
    def is_delimited(self) -> bool:
        """Check if this is one of the delimited-text variants."""
        return self in (ImportFormat.CSV, ImportFormat.WHITESPACE)


# =============================================================================
# Import Models
# =============================================================================

class ParsedRow(BaseModel):
    """
    Single measurement as read from a file, still in the file's units.

    Attributes:
        altitude: Altitude in the declared altitude unit and reference
        direction: Direction in degrees, declared convention and reference
        speed: Speed in the declared speed unit
    """

    altitude: float
    direction: float
    speed: float


class ImportSettings(BaseModel):
    """
    Unit and reference-frame configuration for normalizing parsed rows.

    Attributes:
        altitude_unit: Unit of row altitudes
        speed_unit: Unit of row speeds
        direction_mode: Whether row directions are "from" or "to"
        direction_reference: True or magnetic north
        altitude_reference: MSL or AGL altitudes
        launch_elevation: Meters MSL added to AGL altitudes
        magnetic_declination: Degrees added to magnetic directions
    """

    altitude_unit: AltitudeUnit = AltitudeUnit.METERS
    speed_unit: SpeedUnit = SpeedUnit.KMH
    direction_mode: DirectionMode = DirectionMode.FROM
    direction_reference: DirectionReference = DirectionReference.TRUE
    altitude_reference: AltitudeReference = AltitudeReference.MSL
    launch_elevation: float = Field(default=0.0, description="Launch elevation in meters MSL")
    magnetic_declination: float = Field(
        default=0.0,
        ge=-180,
        le=180,
        description="Magnetic declination in degrees, east positive"
    )

    def merged_with(self, detected: Optional["DetectedSettings"]) -> "ImportSettings":
        """
        Apply settings detected in a file on top of these settings.

        Every field the file declared wins; all other fields keep this
        object's value.
        """
        if detected is None:
            return self.model_copy()
        return ImportSettings.model_validate(
            {**self.model_dump(), **detected.model_dump(exclude_none=True)}
        )


class DetectedSettings(BaseModel):
    """Sparse override of ImportSettings; None means not declared by the file."""

    altitude_unit: Optional[AltitudeUnit] = None
    speed_unit: Optional[SpeedUnit] = None
    direction_mode: Optional[DirectionMode] = None
    direction_reference: Optional[DirectionReference] = None
    altitude_reference: Optional[AltitudeReference] = None
    launch_elevation: Optional[float] = None
    magnetic_declination: Optional[float] = Field(default=None, ge=-180, le=180)

    @property
    def is_empty(self) -> bool:
        """Check if the file declared nothing."""
        return not self.model_dump(exclude_none=True)


class ImportResult(BaseModel):
    """
    Outcome of parsing one wind file.

    Attributes:
        success: True if at least one row was parsed
        format: Detected file format
        rows: Parsed rows in declared units
        detected_settings: Settings declared by file metadata, if any
        errors: Reasons the import failed or aborted
        warnings: Recoverable row-level problems
    """

    success: bool = False
    format: ImportFormat = ImportFormat.UNKNOWN
    rows: List[ParsedRow] = Field(default_factory=list)
    detected_settings: Optional[DetectedSettings] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def row_count(self) -> int:
        """Number of parsed rows."""
        return len(self.rows)


# =============================================================================
# Canonical Wind Layer
# =============================================================================

class WindLayer(BaseModel):
    """
    Wind at one altitude, in canonical units.

    Attributes:
        altitude: Meters MSL
        direction: Degrees true, where the wind comes from (0-359)
        speed: km/h, rounded to 0.1
        timestamp: When the layer was measured or imported (UTC)
        source: Where the layer came from
        is_stable: True if measured while vertical speed was steady
        stable_since: When the measurement became stable
        vario: Vertical speed in m/s at measurement time
    """

    altitude: int = Field(..., description="Altitude in meters MSL")
    direction: int = Field(..., ge=0, le=359, description="Direction in degrees true (from)")
    speed: float = Field(..., description="Speed in km/h")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Measurement or import time"
    )
    source: WindSource = Field(default=WindSource.MANUAL, description="Layer origin")
    is_stable: Optional[bool] = None
    stable_since: Optional[datetime] = None
    vario: Optional[float] = Field(default=None, description="Vertical speed in m/s")

    @field_validator("altitude", mode="before")
    @classmethod
    def round_altitude(cls, v):
        """Round fractional altitudes to whole meters."""
        if isinstance(v, float):
            return round_half_up(v)
        return v

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v):
        """Round to whole degrees and wrap into 0-359."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return v
        return round_half_up(float(v)) % 360

    @field_validator("source", mode="before")
    @classmethod
    def fallback_source(cls, v):
        """Unknown source tags are treated as manual entries."""
        if v is None:
            return WindSource.MANUAL
        if isinstance(v, str) and v not in {s.value for s in WindSource}:
            return WindSource.MANUAL
        return v


class PeerProfile(BaseModel):
    """
    Wind profile shared by another pilot.

    Attributes:
        id: Stable identifier of the profile owner
        display_name: Name shown next to search results
        color: Display color of the owner
        layers: The owner's wind layers
    """

    id: str
    display_name: str
    color: str
    layers: List[WindLayer] = Field(default_factory=list)


class SearchResult(BaseModel):
    """
    One ranked match of a wind search.

    Attributes:
        source_id: Profile the layer belongs to
        display_name: Name of that profile
        color: Color of that profile
        layer: The matching wind layer
        direction_diff: Angular distance to the target heading (0-180)
        turn_direction: 'L', 'R' or '' when already on heading
        score: Ranking score, lower is better
    """

    source_id: str
    display_name: str
    color: str
    layer: WindLayer
    direction_diff: float = Field(..., ge=0, le=180)
    turn_direction: str = Field(default="", pattern="^[LR]?$")
    score: float
