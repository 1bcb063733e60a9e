"""
Map Rendering Surface

The simulation core is render-agnostic: it only places/removes markers,
draws/removes shapes, listens for clicks and asks for the current view.
A UI toolkit binds these primitives; InMemoryMapSurface is the headless
implementation used by the API server and the tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from riskroute.models import GPSCoordinate, MapBounds

ClickCallback = Callable[[str], Any]


class MapSurface(ABC):
    """Abstract 2D map the simulation draws on"""

    @abstractmethod
    def place_marker(
        self,
        marker_id: str,
        position: GPSCoordinate,
        icon: Optional[Dict[str, Any]] = None,
        rotation: float = 0.0,
        title: str = ""
    ):
        """Create or move a marker"""

    @abstractmethod
    def remove_marker(self, marker_id: str):
        """Remove a marker if present"""

    @abstractmethod
    def draw_circle(
        self,
        shape_id: str,
        center: GPSCoordinate,
        radius_meters: float,
        fill_color: str,
        stroke_color: str,
        opacity: float = 0.35
    ):
        """Draw a circle zone"""

    @abstractmethod
    def draw_polygon(
        self,
        shape_id: str,
        vertices: Sequence[GPSCoordinate],
        fill_color: str,
        stroke_color: str,
        opacity: float = 0.35
    ):
        """Draw a polygon zone"""

    @abstractmethod
    def draw_polyline(self, shape_id: str, path: Sequence[GPSCoordinate], stroke_color: str, weight: int = 3):
        """Draw a route line"""

    @abstractmethod
    def remove_shape(self, shape_id: str):
        """Remove a shape if present"""

    @abstractmethod
    def add_click_listener(self, element_id: str, callback: ClickCallback):
        """Call `callback(element_id)` when a marker or shape is clicked"""

    @abstractmethod
    def current_view(self) -> Optional[MapBounds]:
        """Bounds of the visible map area, None before the map is laid out"""

    def fit_bounds(self, bounds: MapBounds, padding: float = 0.1):
        """Move the camera to show `bounds`; surfaces without a camera ignore it"""


@dataclass
class MarkerState:
    position: GPSCoordinate
    icon: Dict[str, Any] = field(default_factory=dict)
    rotation: float = 0.0
    title: str = ""


@dataclass
class ShapeState:
    kind: str                                    # circle | polygon | polyline
    points: List[GPSCoordinate]
    radius_meters: Optional[float] = None
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    opacity: Optional[float] = None


class InMemoryMapSurface(MapSurface):
    """
    Headless surface that records what would be drawn

    Usage:
        surface = InMemoryMapSurface(view=MapBounds(...))
        simulation = RouteSimulation(path, surface=surface)
        surface.markers["vehicle"].position
    """

    def __init__(self, view: Optional[MapBounds] = None):
        self.view = view
        self.markers: Dict[str, MarkerState] = {}
        self.shapes: Dict[str, ShapeState] = {}
        self.listeners: Dict[str, List[ClickCallback]] = {}

    def place_marker(self, marker_id, position, icon=None, rotation=0.0, title=""):
        self.markers[marker_id] = MarkerState(
            position=position,
            icon=dict(icon or {}),
            rotation=rotation,
            title=title
        )

    def remove_marker(self, marker_id):
        self.markers.pop(marker_id, None)
        self.listeners.pop(marker_id, None)

    def draw_circle(self, shape_id, center, radius_meters, fill_color, stroke_color, opacity=0.35):
        self.shapes[shape_id] = ShapeState(
            kind="circle",
            points=[center],
            radius_meters=radius_meters,
            fill_color=fill_color,
            stroke_color=stroke_color,
            opacity=opacity
        )

    def draw_polygon(self, shape_id, vertices, fill_color, stroke_color, opacity=0.35):
        self.shapes[shape_id] = ShapeState(
            kind="polygon",
            points=list(vertices),
            fill_color=fill_color,
            stroke_color=stroke_color,
            opacity=opacity
        )

    def draw_polyline(self, shape_id, path, stroke_color, weight=3):
        self.shapes[shape_id] = ShapeState(kind="polyline", points=list(path), stroke_color=stroke_color)

    def remove_shape(self, shape_id):
        self.shapes.pop(shape_id, None)
        self.listeners.pop(shape_id, None)

    def add_click_listener(self, element_id, callback):
        self.listeners.setdefault(element_id, []).append(callback)

    def current_view(self) -> Optional[MapBounds]:
        return self.view

    def fit_bounds(self, bounds: MapBounds, padding: float = 0.1):
        """Set the view to a padded box around `bounds`"""
        self.view = bounds.padded(padding)

    def click(self, element_id: str) -> List[Any]:
        """Simulate a click; returns each listener's result"""
        return [callback(element_id) for callback in self.listeners.get(element_id, [])]

    def clear(self):
        self.markers.clear()
        self.shapes.clear()
        self.listeners.clear()
