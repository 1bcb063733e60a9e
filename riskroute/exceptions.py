"""
Error Taxonomy

Exceptions raised by route loading, route calculation and simulation control.
Setup errors propagate to the caller; the running tick loop never raises.
"""


class RiskRouteError(Exception):
    """Base class for all RiskRoute errors"""


class EmptyRouteError(RiskRouteError, ValueError):
    """Route path built with zero points"""

    def __init__(self, message: str = "Route path requires at least one point"):
        super().__init__(message)


class TrackSourceError(RiskRouteError):
    """Track file could not be fetched or parsed"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load track from {source}: {reason}")


class GeocodingError(RiskRouteError):
    """Address could not be resolved to coordinates"""

    def __init__(self, address: str, status: str = "ZERO_RESULTS"):
        self.address = address
        self.status = status
        super().__init__(f"Could not find coordinates for: {address} (status {status})")


class RouteNotFoundError(RiskRouteError):
    """Directions lookup returned no route between two points"""

    def __init__(self, start: str, end: str):
        self.start = start
        self.end = end
        super().__init__(f"No route found between {start} and {end}")


class InvalidSpeedMultiplierError(RiskRouteError, ValueError):
    """Non-positive or non-finite speed multiplier supplied"""

    def __init__(self, multiplier: float):
        self.multiplier = multiplier
        super().__init__(f"Speed multiplier must be a finite number > 0, got {multiplier}")
