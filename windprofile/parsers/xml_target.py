"""
Parser for pibal XML wind files.

These files carry an optional <wRs> header describing units and reference
frames, and one <wR> element per measurement whose text holds
"altitude direction speed". Files are often written as a bare sequence of
elements without a single document root.

Usage:
    from windprofile.parsers.xml_target import parse_xml_target

    result = parse_xml_target(content)
    if result.success:
        settings = settings.merged_with(result.detected_settings)
"""

import logging
import re
from typing import Callable, Dict, Optional
from xml.etree import ElementTree

from windprofile.data.models import (
    AltitudeReference,
    AltitudeUnit,
    DetectedSettings,
    DirectionMode,
    DirectionReference,
    ImportFormat,
    ImportResult,
    ParsedRow,
    SpeedUnit,
    round_half_up,
)
from windprofile.data.processor import convert_altitude_to_meters
from windprofile.parsers.tokens import XML_FIELD_SEPARATOR, parse_number, parse_numbers

logger = logging.getLogger(__name__)

# Parses XML text into an element tree; raises ParseError or ValueError
XmlTreeParser = Callable[[str], ElementTree.Element]

HEADER_TAG = "wRs"
ROW_TAG = "wR"
ROOT_TAG = "root"

MAX_DECLINATION = 180.0

XML_DECLARATION = re.compile(r"^<\?xml[^>]*\?>")
LEADING_TAG = re.compile(r"^<[a-zA-Z]+[^>]*>")

# =============================================================================
# Header Vocabulary (matched case-insensitively)
# =============================================================================

SPEED_UNITS: Dict[str, SpeedUnit] = {
    "km/h": SpeedUnit.KMH,
    "kmh": SpeedUnit.KMH,
    "kph": SpeedUnit.KMH,
    "m/s": SpeedUnit.MS,
    "ms": SpeedUnit.MS,
    "kts": SpeedUnit.KNOTS,
    "kt": SpeedUnit.KNOTS,
    "knots": SpeedUnit.KNOTS,
}

ALTITUDE_UNITS: Dict[str, AltitudeUnit] = {
    "feet": AltitudeUnit.FEET,
    "ft": AltitudeUnit.FEET,
    "meters": AltitudeUnit.METERS,
    "metres": AltitudeUnit.METERS,
    "m": AltitudeUnit.METERS,
}

DIRECTION_MODES: Dict[str, DirectionMode] = {
    "from": DirectionMode.FROM,
    "to": DirectionMode.TO,
}

DIRECTION_REFERENCES: Dict[str, DirectionReference] = {
    "true": DirectionReference.TRUE,
    "magnetic": DirectionReference.MAGNETIC,
    "mag": DirectionReference.MAGNETIC,
}

ALTITUDE_REFERENCES: Dict[str, AltitudeReference] = {
    "amsl": AltitudeReference.MSL,
    "msl": AltitudeReference.MSL,
    "agl": AltitudeReference.AGL,
}


def parse_xml_target(
    content: str,
    xml_parser: XmlTreeParser = ElementTree.fromstring,
) -> ImportResult:
    """
    Parse pibal XML content into rows and header metadata.

    Never raises: malformed documents and unreadable elements are reported
    through the result's errors and warnings.

    Args:
        content: Complete file text
        xml_parser: Callable turning XML text into an element tree

    Returns:
        ImportResult with format XML_TARGET
    """
    result = ImportResult(format=ImportFormat.XML_TARGET, detected_settings=DetectedSettings())

    text = content.strip()
    prepared = text if _is_document(text) else _wrap(text)

    try:
        root = xml_parser(prepared)
    except (ElementTree.ParseError, ValueError) as e:
        wrapped = _wrap(text)
        if wrapped == prepared:
            logger.debug(f"XML parse failed: {e}")
            result.errors.append("XML could not be parsed")
            return result
        logger.debug(f"XML parse failed ({e}), retrying with synthetic root")
        try:
            root = xml_parser(wrapped)
        except (ElementTree.ParseError, ValueError) as retry_error:
            logger.debug(f"XML parse failed after wrapping: {retry_error}")
            result.errors.append("XML could not be parsed")
            return result

    header = next(root.iter(HEADER_TAG), None)
    if header is not None:
        _read_header(header, result)

    for index, element in enumerate(root.iter(ROW_TAG), start=1):
        row_text = _text_of(element)
        fields = [f for f in XML_FIELD_SEPARATOR.split(row_text) if f]
        values = parse_numbers(fields[:3]) if len(fields) >= 3 else None
        if values is None:
            result.warnings.append(f'wR element {index} could not be parsed: "{row_text}"')
            continue
        result.rows.append(ParsedRow(altitude=values[0], direction=values[1], speed=values[2]))

    result.success = len(result.rows) > 0
    if not result.rows and not result.errors:
        result.errors.append("no measurement elements found")

    logger.debug(
        f"Parsed {len(result.rows)} XML wind rows, {len(result.warnings)} warnings"
    )
    return result


def _is_document(text: str) -> bool:
    return text.startswith("<?xml") or bool(LEADING_TAG.match(text))


def _wrap(text: str) -> str:
    body = XML_DECLARATION.sub("", text, count=1).strip()
    return f"<{ROOT_TAG}>{body}</{ROOT_TAG}>"


def _text_of(element: ElementTree.Element) -> str:
    return "".join(element.itertext()).strip()


def _header_value(header: ElementTree.Element, tag: str) -> Optional[str]:
    element = header.find(f".//{tag}")
    if element is None:
        return None
    return _text_of(element) or None


def _lookup(header: ElementTree.Element, tag: str, vocabulary: Dict):
    value = _header_value(header, tag)
    if value is None:
        return None
    return vocabulary.get(value.lower())


def _read_header(header: ElementTree.Element, result: ImportResult) -> None:
    """Fill detected settings from the <wRs> header; unknown values are skipped."""
    detected = result.detected_settings
    detected.speed_unit = _lookup(header, "SpdUnits", SPEED_UNITS)
    detected.altitude_unit = _lookup(header, "AltUnits", ALTITUDE_UNITS)
    detected.direction_mode = _lookup(header, "DirToFrom", DIRECTION_MODES)
    detected.direction_reference = _lookup(header, "DirMagTrue", DIRECTION_REFERENCES)
    detected.altitude_reference = _lookup(header, "AglAmsl", ALTITUDE_REFERENCES)

    # Elevation is given in the file's altitude unit
    elevation_text = _header_value(header, "Elevation")
    elevation = parse_number(elevation_text) if elevation_text else None
    if elevation is not None:
        unit = detected.altitude_unit or AltitudeUnit.METERS
        detected.launch_elevation = float(round_half_up(convert_altitude_to_meters(elevation, unit)))

    variation_text = _header_value(header, "MagVariation")
    variation = parse_number(variation_text) if variation_text else None
    if variation is not None and abs(variation) <= MAX_DECLINATION:
        detected.magnetic_declination = variation
    elif variation is not None:
        result.warnings.append(f'MagVariation out of range, ignored: "{variation_text}"')

    logger.debug(f"Header settings: {detected.model_dump(exclude_none=True)}")
