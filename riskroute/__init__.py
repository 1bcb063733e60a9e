"""
RiskRoute Travel Risk Monitoring
Backend Application Package

Route simulation, geofence risk-zone detection, hotspot generation and the
map/weather collaborators used by the travel-risk dashboard.
"""

__version__ = "1.0.0"
__author__ = "RiskRoute Team"
