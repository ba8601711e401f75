"""
OSM response parser

Parses Overpass API responses into OSMNode and OSMWay objects
"""

from typing import Dict, Any, Iterable, Tuple, List
from loguru import logger

from ..exceptions import FetchFailure
from .models import OSMNode, OSMWay


class OSMResponseParser:
    """Parses Overpass API responses"""
    
    @staticmethod
    def parse_elements(elements: Iterable[Dict[str, Any]]) -> Tuple[Dict[int, OSMNode], List[OSMWay]]:
        """
        Partition raw Overpass elements into a node index and a way list
        
        Nodes may appear before or after the ways that reference them, so the
        index is built over the whole collection.
        
        Args:
            elements: The 'elements' array of an Overpass JSON response
            
        Returns:
            Tuple of (nodes by id, ways in response order)
            
        Raises:
            FetchFailure: If an element lacks required fields or has the wrong shape
        """
        nodes = {}
        ways = []
        
        for index, element in enumerate(elements):
            try:
                element_type = element.get("type")
                if element_type == "node":
                    nodes[element["id"]] = OSMNode(
                        id=element["id"],
                        lat=float(element["lat"]),
                        lon=float(element["lon"]),
                        tags=dict(element.get("tags") or {})
                    )
                elif element_type == "way":
                    ways.append(OSMWay(
                        id=element["id"],
                        node_ids=[int(node_id) for node_id in element.get("nodes") or []],
                        tags=dict(element.get("tags") or {})
                    ))
                else:
                    logger.debug(f"Skipping {element_type} element {element.get('id')}")
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.error(f"Malformed Overpass element #{index}: {element!r}")
                raise FetchFailure(f"Overpass API returned a malformed element (#{index}): {e!r}") from e
        
        return nodes, ways
