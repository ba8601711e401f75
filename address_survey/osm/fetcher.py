"""
Building fetcher

Queries Overpass for unaddressed buildings around the surveyor and puts
them on the map as clickable shapes
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger

from ..config import SurveyConfig
from ..exceptions import FetchFailure
from ..geo import GeoPoint
from ..survey.surfaces import MapSurface, Notifier, ShapeStatus
from ..survey.tagging import BuildingShape, BuildingTagger
from .api_client import OverpassAPIClient
from .buildings import BuildingGraphReconstructor
from .models import BuildingPolygon


@dataclass
class FetchState:
    """Where buildings were last fetched; None means never"""
    last_fetch_origin: Optional[GeoPoint] = None


def build_query(point: GeoPoint, radius_m: float) -> str:
    """
    Overpass QL for building ways around point without a house number,
    recursed down to their nodes
    """
    return (
        "[out:json];"
        f"way(around:{radius_m:.1f},{point.lat},{point.lon})[building];"
        "(._; - way._['addr:housenumber'];);"
        "(._;>;);"
        "out;"
    )


class BuildingFetcher:
    """
    Fetch unaddressed buildings around a point and draw them
    
    Buildings already on the map are not drawn twice when a new fetch
    overlaps an earlier one.
    """
    
    def __init__(
        self,
        config: SurveyConfig,
        api_client: OverpassAPIClient,
        reconstructor: BuildingGraphReconstructor,
        map_surface: MapSurface,
        tagger: BuildingTagger,
        fetch_state: FetchState,
        notifier: Notifier
    ):
        self.config = config
        self.api_client = api_client
        self.reconstructor = reconstructor
        self.map_surface = map_surface
        self.tagger = tagger
        self.fetch_state = fetch_state
        self.notifier = notifier
        self.shapes: Dict[int, BuildingShape] = {}
    
    def fetch_buildings(self, point: GeoPoint) -> List[BuildingPolygon]:
        """
        Query and reconstruct buildings around point, without touching the map
        
        Raises:
            FetchFailure: If the query fails
        """
        radius_m = self.config.fetch_radius_m
        logger.info(f"Fetching unaddressed buildings within {radius_m:.0f}m of ({point.lat:.6f}, {point.lon:.6f})")
        data = self.api_client.query(build_query(point, radius_m))
        return self.reconstructor.reconstruct(data["elements"])
    
    def fetch_around(self, point: GeoPoint) -> List[str]:
        """
        Fetch buildings around point and add new ones to the map
        
        Failures are reported to the surveyor; the next qualifying fix
        triggers the next attempt.
        
        Returns:
            Shape ids added by this fetch
        """
        try:
            polygons = self.fetch_buildings(point)
        except FetchFailure as e:
            self.notifier.alert(f"Не удалось загрузить здания: {e}")
            return []
        
        self.fetch_state.last_fetch_origin = point
        
        added = []
        for polygon in polygons:
            if polygon.way_id in self.shapes:
                continue
            shape_id = self.map_surface.add_shape(polygon, ShapeStatus.UNTAGGED)
            shape = BuildingShape(shape_id=shape_id, polygon=polygon)
            self.shapes[polygon.way_id] = shape
            self.map_surface.on_click(shape_id, self._click_handler(shape))
            added.append(shape_id)
        
        logger.info(f"Fetched {len(polygons)} unaddressed buildings, {len(added)} new on map")
        return added
    
    def _click_handler(self, shape: BuildingShape):
        def on_click():
            self.tagger.tag(shape)
        return on_click
