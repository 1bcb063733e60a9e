"""
Geofence Detector & Notification Tests
"""

import pytest

from riskroute.models import (
    GeofenceAction,
    GeofenceEvent,
    GPSCoordinate,
    RiskLevel,
)
from riskroute.simulation import GeofenceDetector, ManualClock, NotificationCenter


# ============================================
# GeofenceDetector
# ============================================

class TestGeofenceDetector:
    """Test enter/exit transitions outside of a running simulation"""

    @pytest.fixture
    def detector(self, make_zone):
        detector = GeofenceDetector(clock=ManualClock(start_ms=42))
        detector.add(make_zone("zone", 0, 0, 1000))
        return detector

    def test_enter_then_exit(self, detector):
        assert detector.evaluate(5, 5) == []

        entered = detector.evaluate(0, 0, elapsed_ms=100)
        assert [e.action for e in entered] == [GeofenceAction.ENTER]
        assert entered[0].timestamp_ms == 42
        assert entered[0].elapsed_ms == 100
        assert detector.active_geofence_ids == {"zone"}

        # Still inside: no event
        assert detector.evaluate(0, 0.001) == []

        exited = detector.evaluate(1, 1)
        assert [e.action for e in exited] == [GeofenceAction.EXIT]
        assert detector.active_geofence_ids == set()
        assert len(detector.history) == 2

    def test_duplicate_id_rejected(self, detector, make_zone):
        with pytest.raises(ValueError):
            detector.add(make_zone("zone", 1, 1, 10))

    def test_inactive_zone_ignored(self, detector):
        detector.set_active("zone", False)
        assert detector.evaluate(0, 0) == []
        assert detector.containing(0, 0) == []

    def test_deactivate_while_inside_forces_exit(self, detector):
        detector.evaluate(0, 0.001, elapsed_ms=50)
        event = detector.set_active("zone", False)

        assert event.action == GeofenceAction.EXIT
        assert event.position == GPSCoordinate(lat=0, lon=0.001)
        assert event.elapsed_ms == 50
        assert detector.active_geofence_ids == set()

    def test_deactivate_while_outside(self, detector):
        assert detector.set_active("zone", False) is None
        assert detector.history == []

    def test_set_active_unknown(self, detector):
        with pytest.raises(KeyError):
            detector.set_active("missing", True)

    def test_remove_while_inside_forces_exit(self, detector):
        detector.evaluate(0, 0)
        event = detector.remove("zone")

        assert event.action == GeofenceAction.EXIT
        assert detector.get("zone") is None
        assert detector.remove("zone") is None

    def test_clear(self, detector, make_zone):
        detector.add(make_zone("far", 10, 10, 1000))
        detector.evaluate(0, 0)

        events = detector.clear()

        assert [e.geofence_id for e in events] == ["zone"]
        assert detector.geofences == {}

    def test_reset_keeps_geofences(self, detector):
        detector.evaluate(0, 0)
        detector.reset()

        assert detector.history == []
        assert detector.active_geofence_ids == set()
        assert detector.get("zone") is not None

    def test_shared_containers_mutated_in_place(self, make_zone):
        active, history = set(), []
        detector = GeofenceDetector(active_geofence_ids=active, history=history)
        detector.add(make_zone("zone", 0, 0, 1000))

        detector.evaluate(0, 0)
        detector.reset()
        detector.evaluate(0, 0)

        assert active == {"zone"}
        assert len(history) == 1

    def test_events_for(self, detector, make_zone):
        detector.add(make_zone("other", 0, 0, 5000))
        detector.evaluate(0, 0)

        assert len(detector.events_for("zone")) == 1
        assert len(detector.events_for("other")) == 1


# ============================================
# NotificationCenter
# ============================================

def _event(geofence_id: str = "zone", action: GeofenceAction = GeofenceAction.ENTER) -> GeofenceEvent:
    return GeofenceEvent(
        geofence_id=geofence_id,
        action=action,
        timestamp_ms=0,
        position=GPSCoordinate(lat=0, lon=0),
        geofence_name="Danger Area 1",
        risk_level=RiskLevel.HIGH,
    )


class TestNotificationCenter:
    """Test notification debounce, expiry and limits"""

    @pytest.fixture
    def clock(self):
        return ManualClock()

    @pytest.fixture
    def center(self, clock):
        return NotificationCenter(auto_dismiss_ms=5000, debounce_ms=1000, max_visible=3, clock=clock)

    def test_notification_content(self, center):
        notification = center.notify(_event())

        assert notification.title == "ENTER: Danger Area 1"
        assert notification.subtitle == "HIGH RISK"
        assert notification.icon == "🚨 🔴"
        assert notification.color == "#F44336"
        assert notification.expires_at_ms == 5000

    def test_debounce_same_event(self, center, clock):
        assert center.notify(_event()) is not None
        clock.advance(500)
        assert center.notify(_event()) is None
        assert center.total_debounced == 1

        clock.advance(600)
        assert center.notify(_event()) is not None

    def test_enter_and_exit_not_debounced_together(self, center):
        assert center.notify(_event(action=GeofenceAction.ENTER)) is not None
        assert center.notify(_event(action=GeofenceAction.EXIT)) is not None

    def test_auto_dismiss(self, center, clock):
        center.notify(_event())
        clock.advance(4999)
        assert len(center.visible()) == 1
        clock.advance(1)
        assert center.visible() == []

    def test_max_visible(self, center):
        for i in range(5):
            center.notify(_event(geofence_id=f"zone-{i}"))

        visible = center.visible()
        assert [n.geofence_id for n in visible] == ["zone-2", "zone-3", "zone-4"]

    def test_dismiss(self, center):
        notification = center.notify(_event())
        assert center.dismiss(notification.id) is True
        assert center.dismiss(notification.id) is False
        assert center.visible() == []

    def test_to_dict_and_stats(self, center):
        data = center.notify(_event()).to_dict()
        assert data["geofenceId"] == "zone"
        assert data["action"] == "enter"
        assert center.get_stats()["totalPosted"] == 1
