#!/usr/bin/env python
"""
Command-line interface for wind profile import.

This module provides a CLI for importing pibal XML, CSV and Windsond text
files, printing the normalized wind layers, exporting them and searching
them (together with profiles shared by other pilots) for a target heading.

Usage:
    python -m windprofile.cli sounding.dat
    python -m windprofile.cli pibal.xml --altitude-reference agl --launch-elevation 450
    python -m windprofile.cli winds.csv --search 270 --peer anna.json --peer ben.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from config.settings import PEER_COLORS, get_settings
from windprofile.analysis.search import search_winds
from windprofile.data.models import (
    AltitudeReference,
    AltitudeUnit,
    DirectionMode,
    DirectionReference,
    ImportSettings,
    PeerProfile,
    SearchResult,
    SpeedUnit,
    WindLayer,
    WindSource,
)
from windprofile.data.processor import default_import_settings, layers_to_dataframe
from windprofile.exceptions import WindImportError
from windprofile.parsers.profile_json import dump_profile
from windprofile.parsers.wind_file import load_wind_layers


logger = logging.getLogger(__name__)


def _choices(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Import wind soundings and search them for a target heading.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the layers of a Windsond sounding
  python -m windprofile.cli sounding.dat

  # CSV in feet and knots, directions given as "to"
  python -m windprofile.cli winds.csv --altitude-unit feet --speed-unit knots --direction-mode to

  # Find the best layers for heading 270 across your and two shared profiles
  python -m windprofile.cli pibal.xml --search 270 --peer anna.json --peer ben.json

  # Save the normalized profile
  python -m windprofile.cli pibal.xml --export-json profile.json --export-csv profile.csv
        """
    )

    parser.add_argument(
        'file',
        type=Path,
        help='Wind file (.xml, .dat, .csv, .txt) or saved profile (.json)'
    )

    # Unit arguments
    unit_group = parser.add_argument_group('Units (file metadata takes precedence)')
    unit_group.add_argument(
        '--altitude-unit',
        choices=_choices(AltitudeUnit),
        default=None,
        help='Altitude unit of the file. Default: from settings'
    )
    unit_group.add_argument(
        '--speed-unit',
        choices=_choices(SpeedUnit),
        default=None,
        help='Speed unit of the file. Default: from settings'
    )
    unit_group.add_argument(
        '--direction-mode',
        choices=_choices(DirectionMode),
        default=None,
        help='Whether directions are where the wind comes from or goes to'
    )
    unit_group.add_argument(
        '--direction-reference',
        choices=_choices(DirectionReference),
        default=None,
        help='True or magnetic north'
    )
    unit_group.add_argument(
        '--altitude-reference',
        choices=_choices(AltitudeReference),
        default=None,
        help='Altitudes above mean sea level or above launch'
    )
    unit_group.add_argument(
        '--launch-elevation',
        type=float,
        default=None,
        help='Launch elevation in meters MSL (for AGL files)'
    )
    unit_group.add_argument(
        '--declination',
        type=float,
        default=None,
        help='Magnetic declination in degrees, east positive'
    )
    unit_group.add_argument(
        '--source',
        choices=_choices(WindSource),
        default=None,
        help='Source tag for the layers. Default: inferred from file'
    )

    # Search arguments
    search_group = parser.add_argument_group('Wind Search')
    search_group.add_argument(
        '--search',
        type=str,
        default=None,
        metavar='DEG',
        help='Target heading in degrees (0-360)'
    )
    search_group.add_argument(
        '--peer',
        type=Path,
        action='append',
        default=[],
        help='Saved profile (.json) of another pilot to include in the search'
    )
    search_group.add_argument(
        '--display-mode',
        choices=_choices(DirectionMode),
        default=None,
        help='Convention of the target heading. Default: from settings'
    )

    # Output arguments
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '--export-json',
        type=Path,
        default=None,
        help='Write the normalized profile as JSON'
    )
    output_group.add_argument(
        '--export-csv',
        type=Path,
        default=None,
        help='Write the normalized profile as CSV'
    )
    output_group.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def build_import_settings(args: argparse.Namespace) -> ImportSettings:
    """Configured defaults overridden by any unit options given."""
    settings = default_import_settings()
    overrides = {
        'altitude_unit': args.altitude_unit,
        'speed_unit': args.speed_unit,
        'direction_mode': args.direction_mode,
        'direction_reference': args.direction_reference,
        'altitude_reference': args.altitude_reference,
        'launch_elevation': args.launch_elevation,
        'magnetic_declination': args.declination,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return ImportSettings(**{**settings.model_dump(), **overrides})


def load_peer_profiles(paths: List[Path]) -> List[PeerProfile]:
    """Load saved profiles of other pilots, one color per profile."""
    peers = []
    for i, path in enumerate(paths):
        peers.append(PeerProfile(
            id=path.stem,
            display_name=path.stem,
            color=PEER_COLORS[i % len(PEER_COLORS)],
            layers=load_wind_layers(path),
        ))
    return peers


def print_layers(layers: List[WindLayer]) -> None:
    """Print layers from the highest down, like a sounding chart."""
    print(f"{'Altitude':>10}  {'Dir':>5}  {'Speed':>8}  Source")
    for layer in reversed(layers):
        print(f"{layer.altitude:>8} m  {layer.direction:>4}°  "
              f"{layer.speed:>5.1f} km/h  {layer.source.value}")


def print_search_results(results: List[SearchResult], target: str) -> None:
    if not results:
        print(f"\nNo wind layers found for heading {target}")
        return
    print(f"\nBest layers for heading {target}:")
    for i, r in enumerate(results, start=1):
        turn = f" turn {r.turn_direction}" if r.turn_direction else ""
        print(f"  {i}. {r.display_name}: {r.layer.altitude} m, {r.layer.direction}°, "
              f"{r.layer.speed:.1f} km/h (off by {r.direction_diff:.0f}°{turn}, "
              f"score {r.score:.1f})")


def _export_path(path: Path) -> Path:
    """Relative export paths are placed in the configured export directory."""
    if path.is_absolute():
        return path
    settings = get_settings()
    settings.ensure_directories()
    return settings.export_dir / path


def run_import(
    path: Path,
    import_settings: ImportSettings,
    source: Optional[str] = None,
    search: Optional[str] = None,
    peer_paths: Optional[List[Path]] = None,
    display_mode: Optional[str] = None,
    export_json: Optional[Path] = None,
    export_csv: Optional[Path] = None,
) -> dict:
    """
    Import a wind file, optionally search and export it.

    Args:
        path: Wind file or saved profile
        import_settings: Settings for fields the file does not declare
        source: Source tag (None = infer)
        search: Target heading for wind search (None = no search)
        peer_paths: Saved profiles of other pilots for the search
        display_mode: Convention of the target heading (None = settings)
        export_json: Output path for profile JSON
        export_csv: Output path for profile CSV

    Returns:
        Dictionary with 'layers', 'results' and paths of written files
    """
    layers = load_wind_layers(path, import_settings, WindSource(source) if source else None)
    logger.info(f"Loaded {len(layers)} wind layers from {path.name}")

    output = {'layers': layers, 'results': []}

    if search is not None:
        peers = load_peer_profiles(peer_paths or [])
        mode = display_mode or get_settings().wind_direction_mode
        output['results'] = search_winds(search, layers, peers, direction_mode=mode)

    if export_json:
        export_json = _export_path(export_json)
        export_json.parent.mkdir(parents=True, exist_ok=True)
        export_json.write_text(dump_profile(layers), encoding="utf-8")
        output['json'] = export_json
        logger.info(f"  Saved: {export_json}")

    if export_csv:
        export_csv = _export_path(export_csv)
        export_csv.parent.mkdir(parents=True, exist_ok=True)
        layers_to_dataframe(layers).to_csv(export_csv, index=False)
        output['csv'] = export_csv
        logger.info(f"  Saved: {export_csv}")

    return output


def main(argv: Optional[list] = None) -> int:
    """Main entry point for CLI."""
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    parser = create_parser()
    args = parser.parse_args(argv)

    # Set log level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        import_settings = build_import_settings(args)
    except ValueError as e:
        logger.error(f"Invalid import settings: {e}")
        return 1

    try:
        output = run_import(
            path=args.file,
            import_settings=import_settings,
            source=args.source,
            search=args.search,
            peer_paths=args.peer,
            display_mode=args.display_mode,
            export_json=args.export_json,
            export_csv=args.export_csv,
        )
    except (WindImportError, FileNotFoundError) as e:
        logger.error(f"Error importing {args.file}: {e}")
        return 1

    print_layers(output['layers'])
    if args.search is not None:
        print_search_results(output['results'], args.search)

    return 0


if __name__ == "__main__":
    sys.exit(main())
