"""
OSM data models

Data classes for representing OSM nodes, ways and reconstructed buildings
"""

from typing import List, Dict, Tuple
from dataclasses import dataclass, field

from ..geo import GeoPoint, bounds_center


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)
    
    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)


@dataclass
class OSMWay:
    """Represents an OSM way as an ordered list of node references"""
    id: int
    node_ids: List[int]
    tags: Dict[str, str] = field(default_factory=dict)
    
    def is_unaddressed_building(self) -> bool:
        """True for building ways that still lack a house number"""
        return "building" in self.tags and "addr:housenumber" not in self.tags


@dataclass(frozen=True)
class BuildingPolygon:
    """Building footprint reconstructed from a way"""
    way_id: int
    vertices: Tuple[GeoPoint, ...]
    tags: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    
    def bounds_center(self) -> GeoPoint:
        return bounds_center(self.vertices)
    
    def get_coordinates(self) -> List[List[float]]:
        """Get coordinates as [lon, lat] list"""
        return [[p.lon, p.lat] for p in self.vertices]
