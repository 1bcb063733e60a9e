"""
Geofence Notifications

Turns enter/exit events into user-facing notifications with auto-dismiss
and debouncing. The UI polls `visible()` (or listens on the websocket);
nothing here touches a rendering toolkit.
"""

import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from riskroute.models import GeofenceAction, GeofenceEvent, RiskLevel, RISK_ZONE_PROPERTIES
from .scheduler import wall_clock_ms

ACTION_ICONS = {
    GeofenceAction.ENTER: "🚨",
    GeofenceAction.EXIT: "✅",
}

RISK_EMOJIS = {
    RiskLevel.LOW: "🟢",
    RiskLevel.MEDIUM: "🟡",
    RiskLevel.HIGH: "🔴",
    RiskLevel.CRITICAL: "🟣",
}


@dataclass
class Notification:
    """Popup shown for a single enter/exit event"""
    id: str
    geofence_id: str
    geofence_name: str
    action: GeofenceAction
    risk_level: RiskLevel
    title: str
    subtitle: str
    icon: str
    color: str
    created_at_ms: float
    expires_at_ms: float

    def is_expired(self, now_ms: float) -> bool:
        return now_ms >= self.expires_at_ms

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'geofenceId': self.geofence_id,
            'geofenceName': self.geofence_name,
            'action': self.action.value,
            'riskLevel': self.risk_level.value,
            'title': self.title,
            'subtitle': self.subtitle,
            'icon': self.icon,
            'color': self.color,
            'createdAt': self.created_at_ms,
            'expiresAt': self.expires_at_ms,
        }


class NotificationCenter:
    """
    Notification queue for geofence events

    - Each notification auto-dismisses after `auto_dismiss_ms`
    - A repeat of the same (geofence, action) within `debounce_ms` is dropped
    - At most `max_visible` notifications are kept, oldest dropped first
    """

    def __init__(
        self,
        auto_dismiss_ms: float = 5000,
        debounce_ms: float = 1000,
        max_visible: int = 5,
        clock: Callable[[], float] = wall_clock_ms
    ):
        self.auto_dismiss_ms = auto_dismiss_ms
        self.debounce_ms = debounce_ms
        self.max_visible = max_visible
        self.clock = clock

        self._notifications: List[Notification] = []
        self._last_posted: Dict[Tuple[str, GeofenceAction], float] = {}

        # Statistics
        self.total_posted = 0
        self.total_debounced = 0

    def notify(self, event: GeofenceEvent) -> Optional[Notification]:
        """
        Post a notification for an event

        Returns:
            The notification, or None when debounced
        """
        now = self.clock()
        key = (event.geofence_id, event.action)

        last = self._last_posted.get(key)
        if last is not None and now - last < self.debounce_ms:
            self.total_debounced += 1
            return None
        self._last_posted[key] = now

        risk_emoji = RISK_EMOJIS.get(event.risk_level, "⚪")
        notification = Notification(
            id=f"ntf-{uuid.uuid4().hex[:8]}",
            geofence_id=event.geofence_id,
            geofence_name=event.geofence_name,
            action=event.action,
            risk_level=event.risk_level,
            title=f"{event.action.value.upper()}: {event.geofence_name}",
            subtitle=f"{event.risk_level.value.upper()} RISK",
            icon=f"{ACTION_ICONS[event.action]} {risk_emoji}",
            color=RISK_ZONE_PROPERTIES[event.risk_level]["color"],
            created_at_ms=now,
            expires_at_ms=now + self.auto_dismiss_ms
        )

        self._prune(now)
        self._notifications.append(notification)
        if len(self._notifications) > self.max_visible:
            self._notifications = self._notifications[-self.max_visible:]

        self.total_posted += 1
        return notification

    def dismiss(self, notification_id: str) -> bool:
        """Click-to-dismiss; returns False if it was already gone"""
        before = len(self._notifications)
        self._notifications = [n for n in self._notifications if n.id != notification_id]
        return len(self._notifications) < before

    def visible(self, now_ms: Optional[float] = None) -> List[Notification]:
        """Notifications still on screen"""
        self._prune(self.clock() if now_ms is None else now_ms)
        return list(self._notifications)

    def clear(self):
        self._notifications.clear()
        self._last_posted.clear()

    def _prune(self, now_ms: float):
        self._notifications = [n for n in self._notifications if not n.is_expired(now_ms)]

    def get_stats(self) -> Dict:
        return {
            'visible': len(self._notifications),
            'totalPosted': self.total_posted,
            'totalDebounced': self.total_debounced,
        }
