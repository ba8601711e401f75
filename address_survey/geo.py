"""
Geographic primitives

Points, great-circle distance and polygon bounds used across the survey
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from shapely.geometry import MultiPoint

# Spherical Earth radius (meters), the value the map surface measures with
EARTH_RADIUS_M = 6378137.0


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float
) -> float:
    """Calculate distance between two points in meters"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)
    
    a = math.sin(delta_phi/2)**2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda/2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))
    
    return EARTH_RADIUS_M * c


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 coordinate"""
    lat: float
    lon: float
    
    def distance_to(self, other: Optional["GeoPoint"]) -> float:
        """Great-circle distance in meters; infinite when other is None"""
        if other is None:
            return math.inf
        return haversine_distance(self.lat, self.lon, other.lat, other.lon)
    
    def to_lon_lat(self) -> Tuple[float, float]:
        return (self.lon, self.lat)


def bounds_center(points: Sequence[GeoPoint]) -> GeoPoint:
    """
    Center of the bounding box of points
    
    Args:
        points: Polygon vertices
        
    Returns:
        GeoPoint halfway between the min and max latitude/longitude
    """
    if not points:
        raise ValueError("Cannot compute bounds of an empty point set")
    min_lon, min_lat, max_lon, max_lat = MultiPoint([p.to_lon_lat() for p in points]).bounds
    return GeoPoint(lat=(min_lat + max_lat) / 2, lon=(min_lon + max_lon) / 2)
