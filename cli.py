#!/usr/bin/env python
"""
Command-line interface for Address Survey

Usage:
    python cli.py survey --lat 55.7512 --lon 37.6184
    python cli.py survey --track walk.csv --cycles 20
    python cli.py buildings --lat 55.7512 --lon 37.6184 --output buildings.geojson
    python cli.py format street=Ленина number=5 levels=3
"""

import os
import sys
import argparse
import select
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from address_survey.config import load_config, validate_config
from address_survey.exceptions import FetchFailure
from address_survey.geo import GeoPoint
from address_survey.models import BuildingFeature, BuildingFeatureCollection
from address_survey.pipeline import SurveyApp
from address_survey.osm.api_client import OverpassAPIClient
from address_survey.osm.buildings import BuildingGraphReconstructor
from address_survey.osm.fetcher import BuildingFetcher, FetchState
from address_survey.survey import (
    ConsoleInput, ConsoleNotifier, TerminalMapSurface, ShapeStatus,
    StaticLocationProvider, TrackLocationProvider, StopSurvey, get_formatter
)


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def _apply_overrides(config, args):
    if getattr(args, "radius", None):
        config.fetch_radius_m = args.radius
    if getattr(args, "format", None):
        config.format_mode = args.format
    if getattr(args, "locale", None):
        config.locale = args.locale
    if getattr(args, "interval", None) is not None:
        config.location_check_interval_s = args.interval
    validate_config(config)
    return config


def _prompt_choice(prompt: str, timeout: float):
    """
    Read one line from stdin, giving up after timeout seconds
    
    Returns:
        Stripped line, or None if nothing was typed in time
        
    Raises:
        EOFError: If stdin is closed
    """
    print(prompt, end="", file=sys.stderr, flush=True)
    ready, _, _ = select.select([sys.stdin], [], [], max(timeout, 0))
    if not ready:
        print(file=sys.stderr)
        return None
    line = sys.stdin.readline()
    if not line:
        raise EOFError
    return line.strip()


def _make_idle(map_surface: TerminalMapSurface):
    """Between location checks, let the surveyor pick buildings to tag"""
    def idle(seconds: float):
        deadline = time.monotonic() + seconds
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            lines = map_surface.describe()
            if lines:
                print("\nBuildings:", file=sys.stderr)
                for line in lines:
                    print(line, file=sys.stderr)
            try:
                choice = _prompt_choice(
                    f"Building id to tag, Enter to re-check location, q to quit ({remaining:.0f}s): ",
                    remaining
                )
            except EOFError:
                raise StopSurvey()
            if not choice:
                return
            if choice.lower() in ("q", "quit", "exit"):
                raise StopSurvey()
            if not map_surface.click(choice):
                print(f"No building with id {choice}", file=sys.stderr)
    return idle


def cmd_survey(args):
    """Run an interactive survey session"""
    setup_logging(args.verbose)

    try:
        config = _apply_overrides(load_config(args.env_file), args)
    except ValueError as e:
        logger.error(str(e))
        return 1

    if args.track:
        if not os.path.exists(args.track):
            logger.error(f"Track file not found: {args.track}")
            return 1
        provider = TrackLocationProvider.from_csv(args.track)
    elif args.lat is not None and args.lon is not None:
        provider = StaticLocationProvider(GeoPoint(lat=args.lat, lon=args.lon), args.accuracy)
    else:
        logger.error("Either --track or both --lat and --lon are required")
        return 1

    map_surface = TerminalMapSurface()
    try:
        app = SurveyApp(config, provider, map_surface, ConsoleInput(), ConsoleNotifier())
    except ValueError as e:
        logger.error(str(e))
        return 1

    idle = None if args.no_interactive else _make_idle(map_surface)
    cycles = app.run(max_cycles=args.cycles, idle=idle)

    submitted = [s for s in app.fetcher.shapes.values() if s.status == ShapeStatus.SUBMITTED]
    logger.info(f"✓ Survey finished after {cycles} location checks")
    logger.info(f"  Buildings on map: {len(app.fetcher.shapes)}")
    logger.info(f"  Notes published: {len(submitted)}")
    return 0


def cmd_buildings(args):
    """Export unaddressed buildings around a location as GeoJSON"""
    setup_logging(args.verbose)

    try:
        config = _apply_overrides(load_config(args.env_file), args)
    except ValueError as e:
        logger.error(str(e))
        return 1

    fetcher = BuildingFetcher(
        config,
        OverpassAPIClient(config.api),
        BuildingGraphReconstructor(),
        map_surface=None,
        tagger=None,
        fetch_state=FetchState(),
        notifier=ConsoleNotifier(wait=False)
    )
    try:
        polygons = fetcher.fetch_buildings(GeoPoint(lat=args.lat, lon=args.lon))
    except FetchFailure as e:
        logger.error(f"Failed to fetch buildings: {e}")
        return 1

    collection = BuildingFeatureCollection(
        features=[BuildingFeature.from_polygon(p) for p in polygons]
    )
    output = collection.model_dump_json(indent=2)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info(f"✓ Saved {len(polygons)} buildings to: {args.output}")
    else:
        print(output)
    return 0


def cmd_format(args):
    """Preview note text for key=value answers"""
    setup_logging(args.verbose)

    answer = {}
    for item in args.fields:
        key, sep, value = item.partition("=")
        if not sep:
            logger.error(f"Expected key=value, got {item!r}")
            return 1
        value = value.strip()
        if value:
            answer[key.strip()] = value

    try:
        formatter = get_formatter(args.format or "composed", args.locale or "ru")
    except ValueError as e:
        logger.error(str(e))
        return 1

    print(formatter.format(answer))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Address Survey CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Survey around a fixed position:
    python cli.py survey --lat 55.7512 --lon 37.6184

  Replay a recorded walk (columns: lat,lon,accuracy):
    python cli.py survey --track walk.csv --interval 5

  Export unaddressed buildings:
    python cli.py buildings --lat 55.7512 --lon 37.6184 -o buildings.geojson

  Preview note text:
    python cli.py format street=Lenina number=5 levels=3 --locale en
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Survey command
    survey_parser = subparsers.add_parser("survey", help="Run an interactive survey session")
    survey_parser.add_argument("--lat", type=float, help="Latitude (fixed position)")
    survey_parser.add_argument("--lon", type=float, help="Longitude (fixed position)")
    survey_parser.add_argument("--accuracy", type=float, default=10.0, help="Accuracy of the fixed position in meters")
    survey_parser.add_argument("--track", help="CSV track to replay instead of a fixed position")
    survey_parser.add_argument("--cycles", type=int, help="Stop after this many location checks")
    survey_parser.add_argument("--interval", type=float, help="Seconds between location checks")
    survey_parser.add_argument("--radius", "-r", type=float, help="Fetch radius in meters")
    survey_parser.add_argument("--format", choices=["composed", "key_value"], help="Note text format")
    survey_parser.add_argument("--locale", choices=["ru", "en"], help="Note text language")
    survey_parser.add_argument("--no-interactive", action="store_true", help="Only track location, never prompt")
    survey_parser.add_argument("--env-file", help="Optional .env file with SURVEY_* settings")
    survey_parser.set_defaults(func=cmd_survey)

    # Buildings command
    buildings_parser = subparsers.add_parser("buildings", help="Export unaddressed buildings as GeoJSON")
    buildings_parser.add_argument("--lat", type=float, required=True, help="Latitude")
    buildings_parser.add_argument("--lon", type=float, required=True, help="Longitude")
    buildings_parser.add_argument("--radius", "-r", type=float, help="Search radius in meters")
    buildings_parser.add_argument("--output", "-o", help="Output GeoJSON file (stdout if not specified)")
    buildings_parser.add_argument("--env-file", help="Optional .env file with SURVEY_* settings")
    buildings_parser.set_defaults(func=cmd_buildings)

    # Format command
    format_parser = subparsers.add_parser("format", help="Preview note text for answers")
    format_parser.add_argument("fields", nargs="+", help="Answers as key=value")
    format_parser.add_argument("--format", choices=["composed", "key_value"], help="Note text format")
    format_parser.add_argument("--locale", choices=["ru", "en"], help="Note text language")
    format_parser.set_defaults(func=cmd_format)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
