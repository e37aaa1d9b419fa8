"""
Tests for format dispatch and file-level import.
"""

import json
import logging

import pytest

from windprofile.data.models import (
    AltitudeUnit,
    ImportFormat,
    ImportSettings,
    SpeedUnit,
    WindSource,
)
from windprofile.exceptions import UnsupportedFileError, WindImportError
from windprofile.parsers.wind_file import (
    FileKind,
    classify_file,
    format_name,
    infer_wind_source,
    load_wind_layers,
    parse_wind_file,
)


class TestParseWindFile:

    def test_empty_content(self):
        """Nothing to detect means an unknown format."""
        result = parse_wind_file("")

        assert result.format == ImportFormat.UNKNOWN
        assert result.success is False
        assert result.errors == ["unknown format"]

    def test_csv(self):
        result = parse_wind_file("600,180,20\n1500,270,35")

        assert result.success
        assert result.format == ImportFormat.CSV
        assert result.row_count == 2

    def test_whitespace(self, sounding_dat):
        result = parse_wind_file(sounding_dat)

        assert result.format == ImportFormat.WHITESPACE
        assert result.row_count == 3

    def test_xml(self, pibal_xml):
        result = parse_wind_file(pibal_xml)

        assert result.format == ImportFormat.XML_TARGET
        assert result.row_count == 1
        assert result.detected_settings.speed_unit == SpeedUnit.KNOTS

    def test_prose(self):
        result = parse_wind_file("just some notes\nabout the weather")
        assert result.errors == ["unknown format"]

    def test_byte_order_mark(self):
        """A leading byte-order mark does not cost the first row."""
        result = parse_wind_file("\ufeff600 180 20\n1500 270 35")

        assert result.row_count == 2
        assert result.warnings == []


class TestHelpers:

    @pytest.mark.parametrize("file_format,name", [
        (ImportFormat.XML_TARGET, "oziTarget XML"),
        (ImportFormat.WHITESPACE, "Windsond/Text"),
        (ImportFormat.CSV, "CSV"),
        (ImportFormat.UNKNOWN, "Unknown"),
    ])
    def test_format_name(self, file_format, name):
        assert format_name(file_format) == name

    @pytest.mark.parametrize("filename,kind", [
        ("track.gpx", FileKind.TRAJECTORY),
        ("FLIGHT.KML", FileKind.TRAJECTORY),
        ("profile.json", FileKind.SAVED_PROFILE),
        ("sounding.dat", FileKind.WIND_DATA),
        ("winds.csv", FileKind.WIND_DATA),
        ("noextension", FileKind.WIND_DATA),
    ])
    def test_classify_file(self, filename, kind):
        assert classify_file(filename) == kind

    def test_source_from_filename(self):
        assert infer_wind_source(ImportFormat.CSV, "Windsond_0612.csv") == WindSource.WINDSOND
        assert infer_wind_source(ImportFormat.WHITESPACE, "forecast.txt") == WindSource.FORECAST

    def test_source_from_format(self):
        assert infer_wind_source(ImportFormat.XML_TARGET) == WindSource.PIBAL
        assert infer_wind_source(ImportFormat.WHITESPACE, "data.dat") == WindSource.WINDSOND
        assert infer_wind_source(ImportFormat.UNKNOWN) == WindSource.MANUAL


class TestLoadWindLayers:
    """Reading, detecting and normalizing files from disk."""

    def test_xml_header_units(self, tmp_path):
        """Header units are applied without any settings being passed."""
        path = tmp_path / "site.xml"
        path.write_text(
            "<wRs><SpdUnits>Kts</SpdUnits><AltUnits>Feet</AltUnits>"
            "<DirToFrom>To</DirToFrom></wRs>\n"
            "<wR>2000 90 10</wR>\n",
            encoding="utf-8",
        )
        layers = load_wind_layers(path)

        assert len(layers) == 1
        assert (layers[0].altitude, layers[0].direction, layers[0].speed) == (610, 270, 18.5)
        assert layers[0].source == WindSource.PIBAL

    def test_detected_settings_override_given(self, tmp_path):
        """File metadata wins over caller settings for the fields it declares."""
        path = tmp_path / "site.xml"
        path.write_text(
            "<wRs><AltUnits>Meters</AltUnits></wRs><wR>1000 180 10</wR>",
            encoding="utf-8",
        )
        settings = ImportSettings(altitude_unit=AltitudeUnit.FEET, speed_unit=SpeedUnit.MS)
        layers = load_wind_layers(path, settings)

        assert layers[0].altitude == 1000
        assert layers[0].speed == 36.0

    def test_text_with_settings(self, tmp_path):
        path = tmp_path / "winds.csv"
        path.write_text("600,180,20\n1500,270,35\n", encoding="utf-8")
        layers = load_wind_layers(path, ImportSettings(speed_unit=SpeedUnit.MS), "forecast")

        assert [l.speed for l in layers] == [72.0, 126.0]
        assert all(l.source == WindSource.FORECAST for l in layers)

    def test_warnings_are_logged(self, tmp_path, sounding_dat, caplog):
        path = tmp_path / "sounding.dat"
        path.write_text(sounding_dat, encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="windprofile.parsers.wind_file"):
            layers = load_wind_layers(path)

        assert len(layers) == 3
        assert "skipped (header)" in caplog.text
        assert layers[0].source == WindSource.WINDSOND

    def test_saved_profile(self, tmp_path):
        path = tmp_path / "anna.json"
        path.write_text(json.dumps([{"altitude": 800, "direction": 45, "speed": 14}]), encoding="utf-8")
        layers = load_wind_layers(path)

        assert layers[0].altitude == 800
        assert layers[0].source == WindSource.MANUAL

    def test_trajectory_rejected(self, tmp_path):
        path = tmp_path / "flight.gpx"
        path.write_text("<gpx/>", encoding="utf-8")

        with pytest.raises(UnsupportedFileError):
            load_wind_layers(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_wind_layers(tmp_path / "nope.dat")

    def test_unknown_format(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("no wind here", encoding="utf-8")

        with pytest.raises(WindImportError) as exc_info:
            load_wind_layers(path)
        assert exc_info.value.errors == ["unknown format"]

    def test_utf8_with_byte_order_mark(self, tmp_path):
        """Files saved as UTF-8 with BOM keep their first row."""
        path = tmp_path / "winds.csv"
        path.write_bytes("600,180,20\n1500,270,35\n".encode("utf-8-sig"))

        layers = load_wind_layers(path)

        assert [l.altitude for l in layers] == [600, 1500]

    def test_saved_profile_with_byte_order_mark(self, tmp_path):
        path = tmp_path / "anna.json"
        path.write_bytes(json.dumps([{"altitude": 800, "direction": 45, "speed": 14}]).encode("utf-8-sig"))

        assert load_wind_layers(path)[0].altitude == 800

    def test_filename_hint_for_source(self, tmp_path):
        """An explicit filename overrides the on-disk name for source inference."""
        path = tmp_path / "upload_1234.csv"
        path.write_text("600,180,20\n", encoding="utf-8")

        assert load_wind_layers(path)[0].source == WindSource.PIBAL
        assert load_wind_layers(path, filename="Windsond_0612.csv")[0].source == WindSource.WINDSOND

    def test_explicit_source_beats_filename(self, tmp_path):
        path = tmp_path / "winds.csv"
        path.write_text("600,180,20\n", encoding="utf-8")

        layers = load_wind_layers(path, source=WindSource.MANUAL, filename="forecast.csv")
        assert layers[0].source == WindSource.MANUAL
