"""
WebSocket Package

Real-time push of geofence transitions and simulation state using Socket.IO.

Components:
- events: Event type definitions and data models
- emitter: Server→Client event emission
- handlers: Client→Server simulation commands

Usage:
    from riskroute.websocket import WebSocketEmitter, WebSocketHandlers

    emitter = WebSocketEmitter(sio)
    handlers = WebSocketHandlers(sio, emitter, lambda: planner.simulation)
"""

from .events import ServerEvent, ClientEvent
from .emitter import WebSocketEmitter, get_emitter, set_emitter
from .handlers import WebSocketHandlers, get_handlers, set_handlers

__all__ = [
    "ServerEvent",
    "ClientEvent",
    "WebSocketEmitter",
    "WebSocketHandlers",
    "get_emitter",
    "set_emitter",
    "get_handlers",
    "set_handlers",
]
