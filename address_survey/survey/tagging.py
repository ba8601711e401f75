"""
Building tagging workflow

Clicking an untagged building asks for its address, publishes it as a
note and recolors the building:

    UNTAGGED -> IN_PROGRESS -> SUBMITTED
    UNTAGGED -> IN_PROGRESS -> UNTAGGED    (cancelled)

A failed post leaves the building IN_PROGRESS; clicking it again retries.
"""

from dataclasses import dataclass
from typing import Sequence

from loguru import logger

from ..exceptions import SubmissionFailure
from ..models import Note
from ..osm.models import BuildingPolygon
from ..osm.notes import NotesAPIClient
from .answers import AnswerCollector, DEFAULT_FIELDS, FieldPrompt
from .formatting import AddressFormatter
from .surfaces import MapSurface, Notifier, ShapeStatus


@dataclass
class BuildingShape:
    """A building drawn on the map and its tagging status"""
    shape_id: str
    polygon: BuildingPolygon
    status: ShapeStatus = ShapeStatus.UNTAGGED


class TaggingSession:
    """One pass of the tagging workflow for one building"""
    
    def __init__(
        self,
        shape: BuildingShape,
        map_surface: MapSurface,
        collector: AnswerCollector,
        formatter: AddressFormatter,
        notes_client: NotesAPIClient,
        notifier: Notifier,
        fields: Sequence[FieldPrompt] = DEFAULT_FIELDS
    ):
        self.shape = shape
        self.map_surface = map_surface
        self.collector = collector
        self.formatter = formatter
        self.notes_client = notes_client
        self.notifier = notifier
        self.fields = fields
    
    def _transition(self, status: ShapeStatus):
        if self.shape.status != status:
            self.map_surface.set_shape_style(self.shape.shape_id, status)
        self.shape.status = status
    
    def run(self) -> ShapeStatus:
        """
        Run the workflow to completion
        
        Returns:
            Status the building is left in
        """
        shape = self.shape
        if shape.status == ShapeStatus.SUBMITTED:
            logger.debug(f"Building {shape.shape_id} already submitted, ignoring click")
            return shape.status
        
        self._transition(ShapeStatus.IN_PROGRESS)
        answer = self.collector.collect(self.fields)
        if not answer:
            logger.info(f"Building {shape.shape_id}: no answer, reverting")
            self._transition(ShapeStatus.UNTAGGED)
            return shape.status
        
        text = self.formatter.format(answer).strip()
        if not text:
            logger.info(f"Building {shape.shape_id}: answer has nothing to publish, reverting")
            self._transition(ShapeStatus.UNTAGGED)
            return shape.status
        
        center = shape.polygon.bounds_center()
        note = Note(lat=center.lat, lon=center.lon, text=text)
        try:
            self.notes_client.post_note(note)
        except SubmissionFailure as e:
            self.notifier.alert(f"Не удалось отправить заметку: {e}")
            return shape.status
        
        logger.info(f"Building {shape.shape_id}: note published")
        self._transition(ShapeStatus.SUBMITTED)
        return shape.status


class BuildingTagger:
    """Starts tagging sessions with shared collaborators"""
    
    def __init__(
        self,
        map_surface: MapSurface,
        collector: AnswerCollector,
        formatter: AddressFormatter,
        notes_client: NotesAPIClient,
        notifier: Notifier,
        fields: Sequence[FieldPrompt] = DEFAULT_FIELDS
    ):
        self.map_surface = map_surface
        self.collector = collector
        self.formatter = formatter
        self.notes_client = notes_client
        self.notifier = notifier
        self.fields = fields
    
    def tag(self, shape: BuildingShape) -> ShapeStatus:
        session = TaggingSession(
            shape,
            self.map_surface,
            self.collector,
            self.formatter,
            self.notes_client,
            self.notifier,
            self.fields
        )
        return session.run()
