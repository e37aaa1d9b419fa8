"""
Wind file import entry points.

parse_wind_file() detects the format of raw text and dispatches it to the
matching parser. load_wind_layers() is the file-level helper used by the CLI:
it routes by file extension, parses, applies detected settings and returns
normalized wind layers.

Usage:
    from windprofile.parsers.wind_file import load_wind_layers, parse_wind_file

    result = parse_wind_file(content)
    layers = load_wind_layers("sounding.dat")
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from windprofile.data.models import ImportFormat, ImportResult, ImportSettings, WindLayer, WindSource
from windprofile.data.processor import default_import_settings, normalize_rows
from windprofile.exceptions import UnsupportedFileError, WindImportError
from windprofile.parsers.detector import detect_format
from windprofile.parsers.profile_json import load_profile
from windprofile.parsers.text import parse_text_wind_file
from windprofile.parsers.xml_target import parse_xml_target

logger = logging.getLogger(__name__)


class FileKind(str, Enum):
    """Which importer a file belongs to."""
    WIND_DATA = "wind_data"
    TRAJECTORY = "trajectory"
    SAVED_PROFILE = "saved_profile"


BYTE_ORDER_MARK = "\ufeff"

TRAJECTORY_EXTENSIONS = {".gpx", ".kml"}
SAVED_PROFILE_EXTENSIONS = {".json"}

FORMAT_NAMES = {
    ImportFormat.XML_TARGET: "oziTarget XML",
    ImportFormat.WHITESPACE: "Windsond/Text",
    ImportFormat.CSV: "CSV",
    ImportFormat.UNKNOWN: "Unknown",
}

# Filename hints checked before falling back to the format default
FILENAME_SOURCES = [
    (("windsond", "windwatch"), WindSource.WINDSOND),
    (("pibal",), WindSource.PIBAL),
    (("forecast", "prognose"), WindSource.FORECAST),
]

FORMAT_SOURCES = {
    ImportFormat.XML_TARGET: WindSource.PIBAL,
    ImportFormat.WHITESPACE: WindSource.WINDSOND,
    ImportFormat.CSV: WindSource.PIBAL,
    ImportFormat.UNKNOWN: WindSource.MANUAL,
}


def parse_wind_file(content: str) -> ImportResult:
    """
    Detect the format of wind file content and parse it.

    Args:
        content: Complete file text

    Returns:
        ImportResult; unknown formats yield success=False with the
        error "unknown format"
    """
    content = content.lstrip(BYTE_ORDER_MARK)
    file_format = detect_format(content)
    logger.debug(f"Detected format: {format_name(file_format)}")

    if file_format == ImportFormat.XML_TARGET:
        return parse_xml_target(content)
    if file_format.is_delimited:
        return parse_text_wind_file(content)
    return ImportResult(format=ImportFormat.UNKNOWN, errors=["unknown format"])


def format_name(file_format: ImportFormat) -> str:
    """Get display name for a format."""
    return FORMAT_NAMES.get(ImportFormat(file_format), "Unknown")


def infer_wind_source(file_format: ImportFormat, filename: Optional[str] = None) -> WindSource:
    """
    Guess the origin of imported layers.

    Args:
        file_format: Detected file format
        filename: Optional name of the imported file

    Returns:
        WindSource from filename hints, else the format's default source
    """
    if filename:
        lower = filename.lower()
        for hints, source in FILENAME_SOURCES:
            if any(hint in lower for hint in hints):
                return source
    return FORMAT_SOURCES.get(ImportFormat(file_format), WindSource.MANUAL)


def classify_file(filename: Union[str, Path]) -> FileKind:
    """Route a file by extension to the importer responsible for it."""
    suffix = Path(filename).suffix.lower()
    if suffix in TRAJECTORY_EXTENSIONS:
        return FileKind.TRAJECTORY
    if suffix in SAVED_PROFILE_EXTENSIONS:
        return FileKind.SAVED_PROFILE
    return FileKind.WIND_DATA


def load_wind_layers(
    path: Union[str, Path],
    settings: Optional[ImportSettings] = None,
    source: Optional[WindSource] = None,
    filename: Optional[str] = None,
) -> List[WindLayer]:
    """
    Read a wind file from disk and return normalized wind layers.

    Settings declared inside the file override the given settings for the
    fields it declares.

    Args:
        path: Path to a wind data file or saved profile
        settings: Import settings (uses configured defaults if None)
        source: Source tag (inferred from format and filename if None)
        filename: Name used for source inference (defaults to the file name)

    Returns:
        Wind layers sorted ascending by altitude

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedFileError: If the file is a trajectory
        ProfileFormatError: If a saved profile cannot be read
        WindImportError: If no wind data could be parsed
    """
    path = Path(path)
    kind = classify_file(path)

    if kind == FileKind.TRAJECTORY:
        raise UnsupportedFileError(f"{path.name} is a trajectory file, not wind data")

    if not path.exists():
        raise FileNotFoundError(f"Wind file not found: {path}")

    content = path.read_text(encoding="utf-8-sig", errors="replace")

    if kind == FileKind.SAVED_PROFILE:
        return load_profile(content, default_source=source or WindSource.MANUAL)

    result = parse_wind_file(content)
    for warning in result.warnings:
        logger.warning(f"{path.name}: {warning}")

    if not result.success:
        raise WindImportError(
            f"Could not import {path.name}: {'; '.join(result.errors)}",
            errors=result.errors,
        )

    if result.detected_settings is not None and not result.detected_settings.is_empty:
        logger.info(
            f"{path.name} declares {result.detected_settings.model_dump(exclude_none=True)}"
        )
    effective = (settings or default_import_settings()).merged_with(result.detected_settings)
    if source:
        source = WindSource(source)
    else:
        source = infer_wind_source(result.format, filename or path.name)

    logger.info(
        f"Imported {result.row_count} rows from {path.name} "
        f"({format_name(result.format)}, source={source.value})"
    )
    return normalize_rows(result.rows, effective, source)
