"""
Host-environment surfaces

The map, text input and notification primitives the survey drives. The
terminal implementations back the command-line survey; tests use fakes.
"""

import sys
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol

from loguru import logger

from ..geo import GeoPoint
from ..osm.models import BuildingPolygon


class ShapeStatus(str, Enum):
    UNTAGGED = "untagged"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


# Outline color per status
SHAPE_COLORS = {
    ShapeStatus.UNTAGGED: "red",
    ShapeStatus.IN_PROGRESS: "orange",
    ShapeStatus.SUBMITTED: "green",
}


ClickHandler = Callable[[], None]


class MapSurface(Protocol):
    def add_shape(self, polygon: BuildingPolygon, status: ShapeStatus) -> str: ...

    def set_shape_style(self, shape_id: str, status: ShapeStatus) -> None: ...

    def set_view(self, point: GeoPoint, zoom: int) -> None: ...

    def show_location(self, point: GeoPoint, accuracy_m: float) -> None: ...

    def on_click(self, shape_id: str, handler: ClickHandler) -> None: ...


class InputSurface(Protocol):
    def ask(self, label: str) -> Optional[str]:
        """Return typed text, or None when the surveyor cancels"""
        ...


class Notifier(Protocol):
    def alert(self, message: str) -> None: ...


class TerminalMapSurface:
    """In-memory shape registry standing in for an interactive map"""
    
    def __init__(self):
        self.shapes: Dict[str, BuildingPolygon] = {}
        self.styles: Dict[str, ShapeStatus] = {}
        self._handlers: Dict[str, List[ClickHandler]] = {}
        self.view: Optional[GeoPoint] = None
        self.zoom: Optional[int] = None
    
    def add_shape(self, polygon: BuildingPolygon, status: ShapeStatus) -> str:
        shape_id = str(polygon.way_id)
        self.shapes[shape_id] = polygon
        self.styles[shape_id] = status
        logger.debug(f"Shape {shape_id} added ({SHAPE_COLORS[status]})")
        return shape_id
    
    def set_shape_style(self, shape_id: str, status: ShapeStatus) -> None:
        self.styles[shape_id] = status
        logger.debug(f"Shape {shape_id} restyled ({SHAPE_COLORS[status]})")
    
    def set_view(self, point: GeoPoint, zoom: int) -> None:
        self.view = point
        self.zoom = zoom
    
    def show_location(self, point: GeoPoint, accuracy_m: float) -> None:
        logger.info(f"Located at ({point.lat:.6f}, {point.lon:.6f}) ±{accuracy_m:.0f}m")
    
    def on_click(self, shape_id: str, handler: ClickHandler) -> None:
        self._handlers.setdefault(shape_id, []).append(handler)
    
    def click(self, shape_id: str) -> bool:
        """Dispatch a click; False if no such shape"""
        handlers = self._handlers.get(shape_id)
        if not handlers:
            return False
        for handler in handlers:
            handler()
        return True
    
    def describe(self) -> List[str]:
        """One line per shape: id, status, center"""
        lines = []
        for shape_id, polygon in self.shapes.items():
            center = polygon.bounds_center()
            status = self.styles[shape_id]
            lines.append(f"{shape_id:>12}  {status.value:<12} ({center.lat:.6f}, {center.lon:.6f})")
        return lines


class ConsoleInput:
    """Reads answers from stdin; EOF cancels"""
    
    def ask(self, label: str) -> Optional[str]:
        try:
            return input(f"{label} ")
        except EOFError:
            print(file=sys.stderr)
            return None


class ConsoleNotifier:
    """Blocking user-visible message on stderr"""
    
    def __init__(self, wait: Optional[bool] = None):
        # Pause for acknowledgement only when someone is at the keyboard
        self.wait = sys.stdin.isatty() if wait is None else wait
    
    def alert(self, message: str) -> None:
        logger.warning(message)
        print(f"\n!! {message}\n", file=sys.stderr)
        if self.wait:
            try:
                input("Press Enter to continue...")
            except EOFError:
                pass
