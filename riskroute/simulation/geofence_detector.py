"""
Geofence Detector

Tracks per-geofence membership of the vehicle and records enter/exit
transitions. `active_geofence_ids` is a cache of `history`: an id is in the
set exactly when its latest event is an enter.
"""

from typing import Callable, Dict, Iterable, List, Optional, Set

from riskroute.geometry import is_point_inside_geofence
from riskroute.models import Geofence, GeofenceAction, GeofenceEvent, GPSCoordinate
from .scheduler import wall_clock_ms


class GeofenceDetector:
    """
    Enter/exit detection against a set of geofences

    Geofences are evaluated independently, so overlapping zones each
    track their own membership.
    """

    def __init__(
        self,
        clock: Callable[[], float] = wall_clock_ms,
        active_geofence_ids: Optional[Set[str]] = None,
        history: Optional[List[GeofenceEvent]] = None
    ):
        self.clock = clock
        self.geofences: Dict[str, Geofence] = {}
        # Containers may be shared with a SimulationState; only mutated in place
        self.active_geofence_ids: Set[str] = active_geofence_ids if active_geofence_ids is not None else set()
        self.history: List[GeofenceEvent] = history if history is not None else []
        self.fault_count = 0
        self._last_position: Optional[GPSCoordinate] = None
        self._last_elapsed_ms = 0.0

    # ============================================
    # Registration
    # ============================================

    def add(self, geofence: Geofence):
        if geofence.id in self.geofences:
            raise ValueError(f"Duplicate geofence id: {geofence.id}")
        self.geofences[geofence.id] = geofence

    def add_all(self, geofences: Iterable[Geofence]):
        for geofence in geofences:
            self.add(geofence)

    def get(self, geofence_id: str) -> Optional[Geofence]:
        return self.geofences.get(geofence_id)

    def remove(self, geofence_id: str) -> Optional[GeofenceEvent]:
        """
        Unregister a geofence

        Returns:
            The exit event recorded if the vehicle was inside it
        """
        geofence = self.geofences.pop(geofence_id, None)
        if geofence is None:
            return None
        return self._force_exit(geofence)

    def clear(self) -> List[GeofenceEvent]:
        """Unregister every geofence, closing any open memberships"""
        events = [e for e in (self.remove(gid) for gid in list(self.geofences)) if e]
        return events

    def set_active(self, geofence_id: str, active: bool) -> Optional[GeofenceEvent]:
        """
        Toggle `is_active`

        Deactivating a zone the vehicle is inside records an exit.

        Raises:
            KeyError: Unknown geofence id
        """
        geofence = self.geofences[geofence_id]
        geofence.is_active = active
        if not active:
            return self._force_exit(geofence)
        return None

    # ============================================
    # Detection
    # ============================================

    def evaluate(self, lat: float, lon: float, elapsed_ms: float = 0.0) -> List[GeofenceEvent]:
        """
        Run one detection pass at a position

        A geofence whose containment check raises is logged and skipped for
        this pass; the remaining geofences are still evaluated.

        Returns:
            Events recorded during this pass
        """
        position = GPSCoordinate(lat=lat, lon=lon)
        self._last_position = position
        self._last_elapsed_ms = elapsed_ms
        events: List[GeofenceEvent] = []

        for geofence in list(self.geofences.values()):
            if not geofence.is_active:
                continue

            try:
                is_inside = is_point_inside_geofence(lat, lon, geofence)
            except Exception as e:
                self.fault_count += 1
                print(f"[GeofenceDetector] Skipping {geofence.id} this tick: {e}")
                continue

            was_inside = geofence.id in self.active_geofence_ids

            if is_inside and not was_inside:
                self.active_geofence_ids.add(geofence.id)
                events.append(self._record(geofence, GeofenceAction.ENTER, position, elapsed_ms))
            elif not is_inside and was_inside:
                self.active_geofence_ids.discard(geofence.id)
                events.append(self._record(geofence, GeofenceAction.EXIT, position, elapsed_ms))

        return events

    def containing(self, lat: float, lon: float) -> List[Geofence]:
        """Active geofences containing a position (no state change)"""
        return [
            g for g in self.geofences.values()
            if g.is_active and is_point_inside_geofence(lat, lon, g)
        ]

    def reset(self):
        """Forget memberships and history, keep the geofences"""
        self.active_geofence_ids.clear()
        self.history.clear()
        self._last_position = None
        self._last_elapsed_ms = 0.0

    def _record(
        self,
        geofence: Geofence,
        action: GeofenceAction,
        position: GPSCoordinate,
        elapsed_ms: float
    ) -> GeofenceEvent:
        event = GeofenceEvent(
            geofence_id=geofence.id,
            action=action,
            timestamp_ms=self.clock(),
            elapsed_ms=elapsed_ms,
            position=position,
            geofence_name=geofence.name,
            risk_level=geofence.risk_level
        )
        self.history.append(event)
        return event

    def _force_exit(self, geofence: Geofence) -> Optional[GeofenceEvent]:
        if geofence.id not in self.active_geofence_ids:
            return None
        self.active_geofence_ids.discard(geofence.id)
        position = self._last_position or geofence.center
        return self._record(geofence, GeofenceAction.EXIT, position, self._last_elapsed_ms)

    def events_for(self, geofence_id: str) -> List[GeofenceEvent]:
        return [e for e in self.history if e.geofence_id == geofence_id]
