"""
Route Path

Ordered, immutable sequence of time-stamped samples describing where the
simulated vehicle should be at each elapsed millisecond.
"""

from bisect import bisect_right
from typing import Iterable, Iterator, List, Sequence, Union

from riskroute.exceptions import EmptyRouteError
from riskroute.models import GPSCoordinate, MapBounds, RoutePoint, RouteSegment, TripRoute
from riskroute.geometry import interpolate

# Synthesized sample spacing and cosmetic speed ramp for untimed sources
DEFAULT_SAMPLE_INTERVAL_MS = 1000
DEFAULT_BASE_SPEED = 30.0
DEFAULT_SPEED_STEP = 5.0

CoordinateLike = Union[GPSCoordinate, RoutePoint, tuple, dict]


def _to_coordinate(item: CoordinateLike) -> GPSCoordinate:
    if isinstance(item, GPSCoordinate):
        return item
    if isinstance(item, RoutePoint):
        return item.coordinate
    if isinstance(item, dict):
        return GPSCoordinate(lat=item['lat'], lon=item.get('lon', item.get('lng')))
    lat, lon = item
    return GPSCoordinate(lat=lat, lon=lon)


class RoutePath:
    """
    Ground-truth trajectory for one simulation

    Built once and never mutated; a new route needs a new RoutePath.

    Usage:
        path = RoutePath.from_coordinates([(0, 0), (0, 1), (0, 2)])
        segment = path.point_at(1500)
        segment.index, segment.progress   # -> 1, 0.5
    """

    def __init__(self, points: Sequence[RoutePoint]):
        """
        Args:
            points: Samples with non-decreasing timestamps

        Raises:
            EmptyRouteError: If no points are given
            ValueError: If timestamps decrease
        """
        points = tuple(points)
        if not points:
            raise EmptyRouteError()

        for prev, curr in zip(points, points[1:]):
            if curr.timestamp_ms < prev.timestamp_ms:
                raise ValueError(
                    f"Route timestamps must be non-decreasing "
                    f"({curr.timestamp_ms} after {prev.timestamp_ms})"
                )

        self._points = points
        self._timestamps: List[int] = [p.timestamp_ms for p in points]

    @classmethod
    def from_coordinates(
        cls,
        coordinates: Iterable[CoordinateLike],
        interval_ms: int = DEFAULT_SAMPLE_INTERVAL_MS,
        base_speed: float = DEFAULT_BASE_SPEED,
        speed_step: float = DEFAULT_SPEED_STEP
    ) -> "RoutePath":
        """
        Build a path from untimed coordinates

        One sample per `interval_ms` in sequence order, with a speed field
        ramping by `speed_step` per sample.
        """
        points = []
        for index, item in enumerate(coordinates):
            coord = _to_coordinate(item)
            points.append(RoutePoint(
                lat=coord.lat,
                lon=coord.lon,
                timestamp_ms=index * interval_ms,
                speed=base_speed + index * speed_step
            ))
        return cls(points)

    @classmethod
    def load(cls, source: Iterable[CoordinateLike], interval_ms: int = DEFAULT_SAMPLE_INTERVAL_MS) -> "RoutePath":
        """
        Build from an externally supplied ordered sequence

        RoutePoint items keep their own timestamps; anything else is treated
        as an untimed coordinate.
        """
        items = list(source)
        if items and all(isinstance(item, RoutePoint) for item in items):
            return cls(items)
        return cls.from_coordinates(items, interval_ms=interval_ms)

    @classmethod
    def from_trip_route(cls, route: TripRoute, interval_ms: int = DEFAULT_SAMPLE_INTERVAL_MS) -> "RoutePath":
        """Path from a directions result, falling back to start/end when the polyline is empty"""
        coords = route.path or [route.start.coordinate, route.end.coordinate]
        return cls.from_coordinates(coords, interval_ms=interval_ms)

    # ============================================
    # Accessors
    # ============================================

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[RoutePoint]:
        return iter(self._points)

    def __getitem__(self, index: int) -> RoutePoint:
        return self._points[index]

    @property
    def points(self) -> tuple:
        return self._points

    @property
    def first(self) -> RoutePoint:
        return self._points[0]

    @property
    def last(self) -> RoutePoint:
        return self._points[-1]

    @property
    def duration_ms(self) -> int:
        """Timestamp of the last sample relative to the first"""
        return self._timestamps[-1] - self._timestamps[0]

    @property
    def is_animatable(self) -> bool:
        """At least two samples are needed to move"""
        return len(self._points) >= 2

    def coordinates(self) -> List[GPSCoordinate]:
        return [p.coordinate for p in self._points]

    def bounds(self) -> MapBounds:
        return MapBounds.from_points([(p.lat, p.lon) for p in self._points])

    # ============================================
    # Time lookup
    # ============================================

    def point_at(self, time_ms: float) -> RouteSegment:
        """
        Find the bracketing pair for an elapsed time

        The route is clamped: before the first sample the first pair is used
        with progress 0, at or after the last sample the final pair is used
        with progress 1. A zero-length pair has progress 0.
        """
        points = self._points
        timestamps = self._timestamps
        n = len(points)

        if n == 1:
            return RouteSegment(index=0, start=points[0], end=points[0], progress=0.0)

        if time_ms >= timestamps[-1]:
            return RouteSegment(index=n - 2, start=points[n - 2], end=points[n - 1], progress=1.0)

        if time_ms <= timestamps[0]:
            index = 0
        else:
            index = min(bisect_right(timestamps, time_ms) - 1, n - 2)

        start, end = points[index], points[index + 1]
        span = end.timestamp_ms - start.timestamp_ms
        if span == 0:
            progress = 0.0
        else:
            progress = (time_ms - start.timestamp_ms) / span
            progress = min(max(progress, 0.0), 1.0)

        return RouteSegment(index=index, start=start, end=end, progress=progress)

    def position_at(self, time_ms: float) -> tuple[float, float]:
        """Interpolated (lat, lon) for an elapsed time"""
        segment = self.point_at(time_ms)
        return interpolate(
            segment.start.lat, segment.start.lon,
            segment.end.lat, segment.end.lon,
            segment.progress
        )

    def __repr__(self) -> str:
        return f"RoutePath(points={len(self._points)}, duration_ms={self.duration_ms})"
