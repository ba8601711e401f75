"""
Shared fakes for survey tests
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from address_survey.config import SurveyConfig
from address_survey.exceptions import SubmissionFailure


class RecordingMapSurface:
    """Map surface that records every call"""
    
    def __init__(self):
        self.shapes = {}
        self.style_changes = []
        self.views = []
        self.locations = []
        self.handlers = {}
    
    def add_shape(self, polygon, status):
        shape_id = str(polygon.way_id)
        self.shapes[shape_id] = (polygon, status)
        return shape_id
    
    def set_shape_style(self, shape_id, status):
        self.style_changes.append((shape_id, status))
    
    def set_view(self, point, zoom):
        self.views.append((point, zoom))
    
    def show_location(self, point, accuracy_m):
        self.locations.append((point, accuracy_m))
    
    def on_click(self, shape_id, handler):
        self.handlers.setdefault(shape_id, []).append(handler)
    
    def click(self, shape_id):
        for handler in self.handlers[shape_id]:
            handler()


class ScriptedInput:
    """Input surface replaying prepared replies; None means cancel"""
    
    def __init__(self, replies):
        self.replies = list(replies)
        self.labels = []
    
    def ask(self, label):
        self.labels.append(label)
        return self.replies.pop(0)


class RecordingNotifier:
    def __init__(self):
        self.messages = []
    
    def alert(self, message):
        self.messages.append(message)


class FakeNotesClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.notes = []
    
    def post_note(self, note):
        self.notes.append(note)
        if self.fail:
            raise SubmissionFailure("Notes API HTTP error 503")
        return {"type": "Feature"}


@pytest.fixture
def config():
    return SurveyConfig()


@pytest.fixture
def map_surface():
    return RecordingMapSurface()


@pytest.fixture
def notifier():
    return RecordingNotifier()


def square_elements(way_id=10, tags=None, first_node=1):
    """Overpass elements for one closed square building way"""
    ids = [first_node, first_node + 1, first_node + 2, first_node + 3]
    coords = [(55.0, 37.0), (55.0, 37.001), (55.001, 37.001), (55.001, 37.0)]
    elements = [
        {"type": "node", "id": node_id, "lat": lat, "lon": lon}
        for node_id, (lat, lon) in zip(ids, coords)
    ]
    elements.append({
        "type": "way",
        "id": way_id,
        "nodes": ids + [ids[0]],
        "tags": tags if tags is not None else {"building": "yes"},
    })
    return elements
