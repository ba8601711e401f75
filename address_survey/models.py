"""
Pydantic models for survey output
GeoJSON export of fetched buildings and the note payload
"""

from typing import List, Dict, Literal
from pydantic import BaseModel, Field

from .osm.models import BuildingPolygon


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...]]


class BuildingFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    id: str
    geometry: GeoJSONPolygon
    properties: Dict[str, str] = Field(default_factory=dict)
    
    @classmethod
    def from_polygon(cls, polygon: BuildingPolygon) -> "BuildingFeature":
        return cls(
            id=f"way/{polygon.way_id}",
            geometry=GeoJSONPolygon(coordinates=[polygon.get_coordinates()]),
            properties=dict(polygon.tags),
        )


class BuildingFeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[BuildingFeature] = Field(default_factory=list)


# ============================================================
# Notes
# ============================================================

class Note(BaseModel):
    """Form payload accepted by the notes API"""
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    text: str = Field(min_length=1)
