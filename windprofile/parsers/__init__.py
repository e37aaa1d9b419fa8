"""
Parsers module for wind file formats.
"""

from windprofile.parsers.detector import detect_format
from windprofile.parsers.xml_target import parse_xml_target
from windprofile.parsers.text import parse_text_wind_file
from windprofile.parsers.profile_json import load_profile, dump_profile
from windprofile.parsers.wind_file import (
    FileKind,
    classify_file,
    format_name,
    infer_wind_source,
    load_wind_layers,
    parse_wind_file,
)

__all__ = [
    # Detection and dispatch
    "detect_format",
    "parse_wind_file",
    # Format parsers
    "parse_xml_target",
    "parse_text_wind_file",
    # Saved profiles
    "load_profile",
    "dump_profile",
    # File-level helpers
    "FileKind",
    "classify_file",
    "format_name",
    "infer_wind_source",
    "load_wind_layers",
]
