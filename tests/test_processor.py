"""
Tests for unit normalization and DataFrame conversion.
"""

import math

import pytest

from config.settings import Settings
from windprofile.data.models import (
    AltitudeReference,
    AltitudeUnit,
    DirectionMode,
    DirectionReference,
    ImportSettings,
    ParsedRow,
    SpeedUnit,
    WindSource,
)
from windprofile.data.processor import (
    LAYER_COLUMNS,
    convert_wind_speed,
    default_import_settings,
    layers_to_dataframe,
    normalize_rows,
)


def _row(altitude, direction, speed):
    return ParsedRow(altitude=altitude, direction=direction, speed=speed)


def _values(layers):
    return [(l.altitude, l.direction, l.speed) for l in layers]


class TestNormalizeRows:
    """Conversion of parsed rows to canonical layers."""

    def test_default_settings_are_identity(self):
        """Meters, km/h, from, true, MSL need no conversion."""
        layers = normalize_rows([_row(600, 180, 20), _row(1500, 270, 35)], ImportSettings())

        assert _values(layers) == [(600, 180, 20.0), (1500, 270, 35.0)]

    def test_feet_knots_to(self):
        """2000 ft, 90° "to", 10 kn becomes 610 m, 270°, 18.5 km/h."""
        settings = ImportSettings(
            altitude_unit=AltitudeUnit.FEET,
            speed_unit=SpeedUnit.KNOTS,
            direction_mode=DirectionMode.TO,
        )
        layers = normalize_rows([_row(2000, 90, 10)], settings)

        assert _values(layers) == [(610, 270, 18.5)]

    def test_meters_per_second(self):
        """m/s are multiplied by 3.6."""
        layers = normalize_rows([_row(100, 0, 10)], ImportSettings(speed_unit=SpeedUnit.MS))
        assert layers[0].speed == 36.0

    def test_agl_adds_launch_elevation(self):
        """AGL altitudes are shifted by the launch elevation."""
        settings = ImportSettings(altitude_reference=AltitudeReference.AGL, launch_elevation=450)
        layers = normalize_rows([_row(100, 0, 5)], settings)

        assert layers[0].altitude == 550

    def test_msl_ignores_launch_elevation(self):
        """The launch elevation only applies to AGL files."""
        layers = normalize_rows([_row(100, 0, 5)], ImportSettings(launch_elevation=450))
        assert layers[0].altitude == 100

    @pytest.mark.parametrize("direction,declination,expected", [
        (350, 15, 5),
        (10, -20, 350),
        (180, 0, 180),
    ])
    def test_magnetic_declination(self, direction, declination, expected):
        """Magnetic directions are rotated by the declination and wrapped."""
        settings = ImportSettings(
            direction_reference=DirectionReference.MAGNETIC,
            magnetic_declination=declination,
        )
        layers = normalize_rows([_row(100, direction, 5)], settings)

        assert layers[0].direction == expected

    def test_declination_ignored_for_true_north(self):
        """The declination only applies to magnetic files."""
        layers = normalize_rows([_row(100, 350, 5)], ImportSettings(magnetic_declination=15))
        assert layers[0].direction == 350

    def test_to_and_magnetic(self):
        """"to" is flipped before the declination is applied."""
        settings = ImportSettings(
            direction_mode=DirectionMode.TO,
            direction_reference=DirectionReference.MAGNETIC,
            magnetic_declination=5,
        )
        layers = normalize_rows([_row(100, 90, 5)], settings)

        assert layers[0].direction == 275

    @pytest.mark.parametrize("direction,expected", [
        (359.6, 0),
        (360, 0),
        (0.4, 0),
        (179.5, 180),
    ])
    def test_direction_rounding(self, direction, expected):
        """Directions are rounded to whole degrees within 0-359."""
        layers = normalize_rows([_row(100, direction, 5)], ImportSettings())
        assert layers[0].direction == expected

    def test_speed_rounded_to_tenth(self):
        """Speeds keep one decimal."""
        layers = normalize_rows([_row(100, 0, 3.33)], ImportSettings(speed_unit=SpeedUnit.MS))
        assert layers[0].speed == 12.0

    def test_output_sorted_by_altitude(self):
        """Layers come out ascending by altitude whatever the input order."""
        rows = [_row(1500, 270, 35), _row(300, 200, 10), _row(900, 220, 15)]
        layers = normalize_rows(rows, ImportSettings())

        altitudes = [l.altitude for l in layers]
        assert altitudes == sorted(altitudes) == [300, 900, 1500]

    def test_duplicate_altitude_last_wins(self):
        """Rows rounding to the same altitude keep only the later one."""
        rows = [_row(600, 180, 20), _row(1500, 270, 35), _row(600.4, 90, 30)]
        layers = normalize_rows(rows, ImportSettings())

        assert _values(layers) == [(600, 90, 30.0), (1500, 270, 35.0)]

    def test_duplicate_after_feet_conversion(self):
        """1968.5 ft and 1969 ft both land on 600 m."""
        settings = ImportSettings(altitude_unit=AltitudeUnit.FEET)
        layers = normalize_rows([_row(1968.5, 100, 10), _row(1969, 200, 20)], settings)

        assert len(layers) == 1
        assert _values(layers) == [(600, 200, 20.0)]

    def test_unit_systems_agree(self):
        """The same physical wind normalizes identically from both unit systems."""
        imperial = ImportSettings(
            altitude_unit=AltitudeUnit.FEET,
            speed_unit=SpeedUnit.KNOTS,
            direction_mode=DirectionMode.TO,
            direction_reference=DirectionReference.MAGNETIC,
            magnetic_declination=10,
        )
        metric = ImportSettings()

        # 3000 ft, true "from" 250° = magnetic "from" 240° = magnetic "to" 60°, 20 kn
        from_imperial = normalize_rows([_row(3000, 60, 20)], imperial)[0]
        from_metric = normalize_rows([_row(914.4, 250, 37.04)], metric)[0]

        assert abs(from_imperial.altitude - from_metric.altitude) <= 1
        assert from_imperial.direction == from_metric.direction == 250
        assert abs(from_imperial.speed - from_metric.speed) <= 0.1

    def test_source_and_timestamp(self):
        """Every layer gets the source and the same import timestamp."""
        layers = normalize_rows([_row(100, 0, 5), _row(200, 0, 5)], ImportSettings(), "forecast")

        assert all(l.source == WindSource.FORECAST for l in layers)
        assert layers[0].timestamp == layers[1].timestamp
        assert layers[0].timestamp.tzinfo is not None

    def test_empty(self):
        """No rows, no layers."""
        assert normalize_rows([], ImportSettings()) == []


class TestConvertWindSpeed:
    """Generic speed conversion helper."""

    def test_knots_to_kmh(self):
        assert convert_wind_speed(10, "knots", "kmh") == pytest.approx(18.52)

    def test_kmh_to_ms(self):
        assert convert_wind_speed(36, "km/h", "m/s") == pytest.approx(10)

    def test_header_alias(self):
        assert convert_wind_speed(10, "kt", "km/h") == pytest.approx(18.52)

    def test_enum_units(self):
        assert convert_wind_speed(10, SpeedUnit.MS, SpeedUnit.KMH) == pytest.approx(36)

    def test_same_unit_alias(self):
        assert convert_wind_speed(12.3, "kts", "knots") == 12.3

    def test_nan_passes_through(self):
        assert math.isnan(convert_wind_speed(float("nan"), "knots", "kmh"))

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            convert_wind_speed(10, "furlongs", "kmh")

    def test_mph_not_supported(self):
        with pytest.raises(ValueError):
            convert_wind_speed(10, "mph", "kmh")


class TestDefaultImportSettings:
    """Import defaults come from configuration."""

    def test_defaults(self):
        assert default_import_settings() == ImportSettings()

    def test_from_settings(self):
        settings = Settings(
            import_speed_unit="KNOTS",
            import_altitude_reference="agl",
            launch_elevation=320,
        )
        result = default_import_settings(settings)

        assert result.speed_unit == SpeedUnit.KNOTS
        assert result.altitude_reference == AltitudeReference.AGL
        assert result.launch_elevation == 320


class TestLayersToDataFrame:
    """Tabular view of a profile."""

    def test_columns_and_order(self, make_layer):
        layers = [make_layer(altitude=900, direction=200), make_layer(altitude=300, vario=0.5)]
        df = layers_to_dataframe(layers)

        assert list(df.columns) == LAYER_COLUMNS
        assert list(df["altitude"]) == [300, 900]
        assert df.loc[0, "vario"] == 0.5
        assert df.loc[0, "source"] == "manual"

    def test_empty(self):
        df = layers_to_dataframe([])

        assert df.empty
        assert list(df.columns) == LAYER_COLUMNS
