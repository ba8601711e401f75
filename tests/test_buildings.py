"""
Tests for building polygon reconstruction
"""

import pytest

from address_survey.exceptions import FetchFailure
from address_survey.geo import GeoPoint
from address_survey.osm.buildings import BuildingGraphReconstructor
from address_survey.osm.parser import OSMResponseParser
from conftest import square_elements


def node(node_id, lat, lon):
    return {"type": "node", "id": node_id, "lat": lat, "lon": lon}


def way(way_id, nodes, tags=None):
    return {"type": "way", "id": way_id, "nodes": nodes, "tags": tags if tags is not None else {"building": "yes"}}


def test_parser_partitions_nodes_and_ways():
    elements = [way(5, [1, 2]), node(1, 1.0, 2.0), node(2, 3.0, 4.0), {"type": "relation", "id": 9}]
    nodes, ways = OSMResponseParser.parse_elements(elements)
    assert set(nodes) == {1, 2}
    assert [w.id for w in ways] == [5]
    assert ways[0].node_ids == [1, 2]


def test_four_distinct_nodes_keep_order():
    elements = [
        node(1, 55.0, 37.0),
        node(2, 55.0, 37.1),
        node(3, 55.1, 37.1),
        node(4, 55.1, 37.0),
        way(10, [1, 2, 3, 4]),
    ]
    polygons = BuildingGraphReconstructor().reconstruct(elements)
    assert len(polygons) == 1
    assert polygons[0].way_id == 10
    assert polygons[0].vertices == (
        GeoPoint(55.0, 37.0),
        GeoPoint(55.0, 37.1),
        GeoPoint(55.1, 37.1),
        GeoPoint(55.1, 37.0),
    )


def test_nodes_after_way_are_resolved():
    elements = [way(10, [1, 2, 3, 1]), node(3, 1.0, 1.0), node(2, 1.0, 0.0), node(1, 0.0, 0.0)]
    polygons = BuildingGraphReconstructor().reconstruct(elements)
    assert len(polygons) == 1
    assert len(polygons[0].vertices) == 4


def test_way_with_missing_node_is_dropped():
    elements = [node(1, 0.0, 0.0), node(2, 1.0, 0.0), way(10, [1, 2, 3, 1])]
    assert BuildingGraphReconstructor().reconstruct(elements) == []


def test_missing_node_only_drops_its_own_way():
    elements = square_elements(way_id=10) + [way(11, [1, 2, 99, 1])]
    polygons = BuildingGraphReconstructor().reconstruct(elements)
    assert [p.way_id for p in polygons] == [10]


def test_addressed_buildings_are_skipped():
    elements = square_elements(tags={"building": "house", "addr:housenumber": "7"})
    assert BuildingGraphReconstructor().reconstruct(elements) == []


def test_non_building_ways_are_skipped():
    elements = square_elements(tags={"highway": "residential"})
    assert BuildingGraphReconstructor().reconstruct(elements) == []


def test_degenerate_way_is_dropped():
    elements = [node(1, 0.0, 0.0), node(2, 1.0, 0.0), way(10, [1, 2, 1])]
    assert BuildingGraphReconstructor().reconstruct(elements) == []


def test_bounds_center_of_square():
    polygon = BuildingGraphReconstructor().reconstruct(square_elements())[0]
    center = polygon.bounds_center()
    assert abs(center.lat - 55.0005) < 1e-9
    assert abs(center.lon - 37.0005) < 1e-9


def test_tags_are_carried_over():
    polygon = BuildingGraphReconstructor().reconstruct(square_elements(tags={"building": "garage"}))[0]
    assert polygon.tags == {"building": "garage"}


@pytest.mark.parametrize("element", [
    {"type": "node", "id": 1},
    {"type": "node", "lat": 1.0, "lon": 2.0},
    {"type": "node", "id": 1, "lat": "north", "lon": 2.0},
    {"type": "way", "nodes": [1, 2, 3]},
    {"type": "way", "id": 5, "nodes": [1, [2], 3]},
    {"type": "way", "id": 5, "nodes": [1, 2, 3], "tags": "building"},
    "node",
    None,
])
def test_parser_rejects_malformed_elements(element):
    with pytest.raises(FetchFailure, match="malformed"):
        OSMResponseParser.parse_elements([element])
