"""Client transports.

A transport moves opaque binary frames over one persistent connection and
reports open/close/error/frame signals to a listener:
- WebSocket - wRAC (ws://) and wRACs (wss://) servers
- Mock - in-memory, for tests and host applications
"""

from .base import BaseClientTransport, CloseInfo, TransportListener, TransportState
from .mock import MockClientTransport, create_mock_transport
from .websocket import WebSocketClientTransport, create_websocket_transport

__all__ = [
    # Base abstractions
    "BaseClientTransport",
    "CloseInfo",
    "TransportListener",
    "TransportState",
    # WebSocket implementation
    "WebSocketClientTransport",
    "create_websocket_transport",
    # Mock implementation
    "MockClientTransport",
    "create_mock_transport",
]
