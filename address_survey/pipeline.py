"""
Survey application

Wires the survey components together:

  LocationTracker -> BuildingFetcher -> BuildingGraphReconstructor
                                     -> map shapes -> BuildingTagger
  BuildingTagger  -> AnswerCollector -> AddressFormatter -> NotesAPIClient

Data Sources:
  - OpenStreetMap (Overpass API): unaddressed buildings
  - OpenStreetMap notes API: published addresses
"""

from typing import Callable, Optional

from loguru import logger

from .config import SurveyConfig, validate_config
from .osm.api_client import OverpassAPIClient
from .osm.buildings import BuildingGraphReconstructor
from .osm.fetcher import BuildingFetcher, FetchState
from .osm.notes import NotesAPIClient
from .survey.answers import AnswerCollector
from .survey.formatting import get_formatter
from .survey.location import LocationProvider, LocationTracker
from .survey.surfaces import InputSurface, MapSurface, Notifier
from .survey.tagging import BuildingTagger


class SurveyApp:
    """
    Survey session for one surveyor
    
    Usage:
        app = SurveyApp(config, provider, map_surface, ConsoleInput(), ConsoleNotifier())
        app.run()
    """
    
    def __init__(
        self,
        config: SurveyConfig,
        provider: LocationProvider,
        map_surface: MapSurface,
        input_surface: InputSurface,
        notifier: Notifier,
        overpass_client: Optional[OverpassAPIClient] = None,
        notes_client: Optional[NotesAPIClient] = None
    ):
        validate_config(config)
        self.config = config
        self.map_surface = map_surface
        self.fetch_state = FetchState()
        
        self.overpass_client = overpass_client or OverpassAPIClient(config.api)
        self.notes_client = notes_client or NotesAPIClient(config.api)
        self.formatter = get_formatter(config.format_mode, config.locale)
        
        self.tagger = BuildingTagger(
            map_surface,
            AnswerCollector(input_surface),
            self.formatter,
            self.notes_client,
            notifier
        )
        self.fetcher = BuildingFetcher(
            config,
            self.overpass_client,
            BuildingGraphReconstructor(),
            map_surface,
            self.tagger,
            self.fetch_state,
            notifier
        )
        self.tracker = LocationTracker(
            config,
            provider,
            self.fetcher,
            self.fetch_state,
            map_surface,
            notifier
        )
    
    def run(
        self,
        max_cycles: Optional[int] = None,
        idle: Optional[Callable[[float], None]] = None
    ) -> int:
        logger.info(
            f"Survey started: fetch radius {self.config.fetch_radius_m:.0f}m, "
            f"check every {self.config.location_check_interval_s:.0f}s, "
            f"format '{self.formatter.name}'"
        )
        return self.tracker.start(max_cycles=max_cycles, idle=idle)
