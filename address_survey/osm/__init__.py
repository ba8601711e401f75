"""
OpenStreetMap access

- API client: Overpass API communication
- Models: Data structures (OSMNode, OSMWay, BuildingPolygon)
- Parser: Response parsing
- Buildings: Building polygon reconstruction
- Notes: Note publishing
- Fetcher: Query, reconstruct and draw buildings (import from .fetcher)
"""

from .models import OSMNode, OSMWay, BuildingPolygon
from .parser import OSMResponseParser
from .buildings import BuildingGraphReconstructor
from .api_client import OverpassAPIClient
from .notes import NotesAPIClient

__all__ = [
    "OSMNode",
    "OSMWay",
    "BuildingPolygon",
    "OSMResponseParser",
    "BuildingGraphReconstructor",
    "OverpassAPIClient",
    "NotesAPIClient",
]
