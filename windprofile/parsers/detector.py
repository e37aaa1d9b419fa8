"""
Wind file format detection.

Classification is purely textual: pibal XML is recognized by its wind-row
tags, delimited text by the shape of its data lines.

Usage:
    from windprofile.parsers.detector import detect_format

    fmt = detect_format(content)
"""

import logging

from windprofile.data.models import ImportFormat
from windprofile.parsers.tokens import data_lines, parse_numbers

logger = logging.getLogger(__name__)

XML_TARGET_MARKERS = ("<wR>", "<wRs>", "<wR ")

# A CSV file needs a majority of comma lines; a whitespace file needs just one
# numeric line.
CSV_MAJORITY = 0.5
MIN_FIELDS = 3


def detect_format(content: str) -> ImportFormat:
    """
    Classify wind file content.

    Args:
        content: Complete file text

    Returns:
        ImportFormat.XML_TARGET, ImportFormat.CSV, ImportFormat.WHITESPACE
        or ImportFormat.UNKNOWN
    """
    trimmed = content.strip()
    if any(marker in trimmed for marker in XML_TARGET_MARKERS):
        logger.debug("Detected pibal XML wind rows")
        return ImportFormat.XML_TARGET

    lines = data_lines(trimmed)
    if not lines:
        return ImportFormat.UNKNOWN

    csv_lines = [line for line in lines if len(line.split(",")) >= MIN_FIELDS]
    if len(csv_lines) > len(lines) * CSV_MAJORITY:
        logger.debug(f"Detected CSV ({len(csv_lines)}/{len(lines)} comma lines)")
        return ImportFormat.CSV

    for line in lines:
        parts = line.split()
        if len(parts) >= MIN_FIELDS and parse_numbers(parts[:MIN_FIELDS]) is not None:
            logger.debug("Detected whitespace-separated sounding")
            return ImportFormat.WHITESPACE

    return ImportFormat.UNKNOWN
