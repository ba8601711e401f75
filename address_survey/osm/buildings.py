"""
Building-specific logic

Rebuilds unaddressed building footprints from Overpass node/way elements
"""

from typing import Any, Dict, Iterable, List, Optional
from loguru import logger

from .models import BuildingPolygon, OSMNode, OSMWay
from .parser import OSMResponseParser


class BuildingGraphReconstructor:
    """Turns a flat Overpass element list into building polygons"""
    
    def __init__(self, parser: Optional[OSMResponseParser] = None):
        self.parser = parser or OSMResponseParser()
    
    def reconstruct(self, elements: Iterable[Dict[str, Any]]) -> List[BuildingPolygon]:
        """
        Reconstruct polygons for every unaddressed building way
        
        A way that references a node missing from the response is dropped as
        a whole rather than drawn with a gap.
        
        Args:
            elements: Raw Overpass elements (nodes and ways, any order)
            
        Returns:
            List of BuildingPolygon in response order
        """
        nodes, ways = self.parser.parse_elements(elements)
        
        polygons = []
        for way in ways:
            if not way.is_unaddressed_building():
                continue
            polygon = self._build_polygon(way, nodes)
            if polygon is not None:
                polygons.append(polygon)
        
        logger.debug(f"Reconstructed {len(polygons)} building polygons from {len(ways)} ways, {len(nodes)} nodes")
        return polygons
    
    def _build_polygon(self, way: OSMWay, nodes: Dict[int, OSMNode]) -> Optional[BuildingPolygon]:
        vertices = []
        for node_id in way.node_ids:
            node = nodes.get(node_id)
            if node is None:
                logger.debug(f"Building way {way.id}: node {node_id} missing from response, dropping way")
                return None
            vertices.append(node.point)
        
        # Skip point/line buildings (less than 3 unique points)
        if len(set(vertices)) < 3:
            logger.debug(f"Building way {way.id}: fewer than 3 distinct vertices, dropping way")
            return None
        
        return BuildingPolygon(way_id=way.id, vertices=tuple(vertices), tags=dict(way.tags))
