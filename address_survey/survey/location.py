"""
Location tracking

Polls the location provider in a self-resubmitting loop: each check waits
for its fix (or error) before the next one is scheduled, so requests never
overlap. A usable fix far enough from the last fetch origin triggers a
building fetch.
"""

import csv
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol

from loguru import logger

from ..config import SurveyConfig
from ..exceptions import LocationUnavailable, LowAccuracy, POSITION_UNAVAILABLE
from ..geo import GeoPoint
from .surfaces import MapSurface, Notifier

if TYPE_CHECKING:
    from ..osm.fetcher import BuildingFetcher, FetchState


@dataclass(frozen=True)
class LocationFix:
    point: GeoPoint
    accuracy_m: float
    timestamp: datetime = field(default_factory=datetime.now)


class LocationProvider(Protocol):
    def get_current_position(
        self,
        enable_high_accuracy: bool,
        timeout: float,
        maximum_age: float
    ) -> LocationFix:
        """Return a fix or raise LocationUnavailable"""
        ...


class StaticLocationProvider:
    """Always reports the same position"""
    
    def __init__(self, point: GeoPoint, accuracy_m: float = 10.0):
        self.point = point
        self.accuracy_m = accuracy_m
    
    def get_current_position(self, enable_high_accuracy: bool, timeout: float, maximum_age: float) -> LocationFix:
        return LocationFix(point=self.point, accuracy_m=self.accuracy_m)


class TrackLocationProvider:
    """Replays a recorded track, one fix per request"""
    
    def __init__(self, fixes: Iterable[LocationFix]):
        self._fixes = iter(list(fixes))
    
    @classmethod
    def from_csv(cls, path: str) -> "TrackLocationProvider":
        """
        Load a track from a CSV file with lat, lon and optional accuracy columns
        """
        fixes = []
        with open(path, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                try:
                    fixes.append(LocationFix(
                        point=GeoPoint(lat=float(row["lat"]), lon=float(row["lon"])),
                        accuracy_m=float(row.get("accuracy") or 10.0)
                    ))
                except (KeyError, ValueError) as e:
                    logger.warning(f"Skipping invalid track row: {e}")
        logger.info(f"Loaded {len(fixes)} fixes from {path}")
        return cls(fixes)
    
    def get_current_position(self, enable_high_accuracy: bool, timeout: float, maximum_age: float) -> LocationFix:
        try:
            return next(self._fixes)
        except StopIteration:
            raise LocationUnavailable(POSITION_UNAVAILABLE, "track exhausted") from None


def low_accuracy_message(accuracy_m: float) -> str:
    return (
        "К сожалению, ваше устройство не смогло достаточно точно определить своё местоположение. "
        f"Текущая точность: {accuracy_m:g} м. "
        "Пожалуйста, убедитесь, что службы геолокации (GPS) включены. "
        "Если это так, попробуйте выйти на более открытое пространство."
    )


class StopSurvey(Exception):
    """Raised by an idle callback to end the tracking loop"""


class LocationTracker:
    """Keeps the map on the surveyor and buildings loaded around them"""
    
    def __init__(
        self,
        config: SurveyConfig,
        provider: LocationProvider,
        fetcher: "BuildingFetcher",
        fetch_state: "FetchState",
        map_surface: MapSurface,
        notifier: Notifier
    ):
        self.config = config
        self.provider = provider
        self.fetcher = fetcher
        self.fetch_state = fetch_state
        self.map_surface = map_surface
        self.notifier = notifier
        self.current_location: Optional[GeoPoint] = None
    
    def check_location(self) -> Optional[LocationFix]:
        """
        Request one fix and act on it
        
        Returns:
            The fix, or None if the provider reported an error
        """
        try:
            fix = self.provider.get_current_position(
                enable_high_accuracy=True,
                timeout=self.config.location_timeout_s,
                maximum_age=0
            )
        except LocationUnavailable as e:
            logger.warning(f"Location unavailable: {e}")
            self.notifier.alert(f"Error {e.code}: {e.message} :(")
            return None
        
        try:
            self.on_location_found(fix)
        except LowAccuracy as e:
            logger.warning(str(e))
            self.notifier.alert(low_accuracy_message(e.accuracy_m))
        return fix
    
    def on_location_found(self, fix: LocationFix) -> None:
        """
        Raises:
            LowAccuracy: If the fix is too coarse to use
        """
        self.map_surface.set_view(fix.point, self.config.max_zoom)
        self.map_surface.show_location(fix.point, fix.accuracy_m)
        
        if fix.accuracy_m > self.config.max_acceptable_accuracy_m:
            raise LowAccuracy(fix.accuracy_m, self.config.max_acceptable_accuracy_m)
        
        distance = fix.point.distance_to(self.fetch_state.last_fetch_origin)
        if distance > self.config.fetch_radius_m:
            if self.fetch_state.last_fetch_origin is None:
                logger.info("No previous fetch, fetching buildings")
            else:
                logger.info(f"Moved {distance:.0f}m from last fetch origin, fetching buildings")
            self.fetcher.fetch_around(fix.point)
        self.current_location = fix.point
    
    def start(
        self,
        max_cycles: Optional[int] = None,
        idle: Optional[Callable[[float], None]] = None
    ) -> int:
        """
        Run location checks until stopped
        
        Args:
            max_cycles: Stop after this many checks (None runs until interrupted)
            idle: Called with the check interval between checks; defaults to time.sleep
            
        Returns:
            Number of checks performed
        """
        idle = idle or time.sleep
        cycles = 0
        try:
            while max_cycles is None or cycles < max_cycles:
                self.check_location()
                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    break
                idle(self.config.location_check_interval_s)
        except (StopSurvey, KeyboardInterrupt):
            logger.info("Survey stopped")
        return cycles
