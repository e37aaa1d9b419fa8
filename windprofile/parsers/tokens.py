"""
Tokenizing helpers shared by the format detector and the parsers.
"""

import math
import re
from typing import List, Optional

# Plain decimal numbers with optional sign and exponent
NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

LINE_BREAK = re.compile(r"\r?\n")
XML_FIELD_SEPARATOR = re.compile(r"[\s,]+")

COMMENT_PREFIXES = ("#", "//")


def parse_number(token: str) -> Optional[float]:
    """Return the token as a finite float, or None if it is not a number."""
    token = token.strip()
    if not NUMBER_PATTERN.match(token):
        return None
    value = float(token)
    if not math.isfinite(value):
        return None
    return value


def parse_numbers(tokens: List[str]) -> Optional[List[float]]:
    """Convert every token, or return None if any of them is not numeric."""
    values = []
    for token in tokens:
        value = parse_number(token)
        if value is None:
            return None
        values.append(value)
    return values


def split_lines(content: str) -> List[str]:
    return LINE_BREAK.split(content)


def is_comment(line: str) -> bool:
    """Check if a line is a '#' or '//' comment."""
    return line.strip().startswith(COMMENT_PREFIXES)


def data_lines(content: str) -> List[str]:
    """Non-blank, non-comment lines of the content."""
    return [line for line in split_lines(content) if line.strip() and not is_comment(line)]
