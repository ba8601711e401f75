"""
Survey workflow: location tracking, answer collection, formatting, tagging
"""

from .surfaces import ShapeStatus, TerminalMapSurface, ConsoleInput, ConsoleNotifier
from .answers import AnswerCollector, FieldPrompt, DEFAULT_FIELDS
from .formatting import (
    AddressFormatter, ComposedAddressFormatter, KeyValueFormatter, get_formatter, levels_word
)
from .tagging import BuildingShape, BuildingTagger, TaggingSession
from .location import (
    LocationFix, LocationTracker, StaticLocationProvider, TrackLocationProvider, StopSurvey
)

__all__ = [
    "ShapeStatus",
    "TerminalMapSurface",
    "ConsoleInput",
    "ConsoleNotifier",
    "AnswerCollector",
    "FieldPrompt",
    "DEFAULT_FIELDS",
    "AddressFormatter",
    "ComposedAddressFormatter",
    "KeyValueFormatter",
    "get_formatter",
    "levels_word",
    "BuildingShape",
    "BuildingTagger",
    "TaggingSession",
    "LocationFix",
    "LocationTracker",
    "StaticLocationProvider",
    "TrackLocationProvider",
    "StopSurvey",
]
