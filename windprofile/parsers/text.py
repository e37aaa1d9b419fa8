"""
Parser for CSV and whitespace-separated wind files.

Each data line holds "altitude, direction, speed" (further columns are
ignored). The separator is chosen per line, so files mixing commas and
whitespace are accepted. Blank lines and '#' or '//' comments are skipped,
and unreadable lines are reported as warnings without aborting the import.
"""

import logging
import re

from windprofile.data.models import ImportFormat, ImportResult, ParsedRow
from windprofile.parsers.tokens import is_comment, parse_numbers, split_lines

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")


def parse_text_wind_file(content: str) -> ImportResult:
    """
    Parse delimited wind text into rows.

    Args:
        content: Complete file text

    Returns:
        ImportResult with format CSV if any line used commas, otherwise
        WHITESPACE
    """
    result = ImportResult(format=ImportFormat.WHITESPACE)
    has_commas = False

    for index, raw_line in enumerate(split_lines(content)):
        line = raw_line.strip()
        if not line or is_comment(line):
            continue

        if "," in line:
            has_commas = True
            parts = [p.strip() for p in line.split(",")]
        else:
            parts = WHITESPACE.split(line)
        parts = [p for p in parts if p]

        if len(parts) < 3:
            continue

        values = parse_numbers(parts[:3])
        if values is not None:
            result.rows.append(ParsedRow(altitude=values[0], direction=values[1], speed=values[2]))
        elif index == 0 or not result.rows:
            result.warnings.append(f'line {index + 1} skipped (header): "{line}"')
        else:
            result.warnings.append(f'line {index + 1} could not be parsed: "{line}"')

    if has_commas:
        result.format = ImportFormat.CSV
    result.success = len(result.rows) > 0
    if not result.rows and not result.errors:
        result.errors.append("no wind data found")

    logger.debug(
        f"Parsed {len(result.rows)} {result.format.value} wind rows, "
        f"{len(result.warnings)} warnings"
    )
    return result
