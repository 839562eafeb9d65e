"""wRAC client - binary chat protocol over WebSocket.

Two layers:
- WracClient: command methods returning futures, plus "open", "close",
  "error" and "messages" events
- Transports: WebSocket (ws:// and wss://) and an in-memory mock for tests
"""

from .bus import ClientEvent, EventBus
from .client import WracClient, create_client, create_test_client
from .config import ClientConfig
from .exceptions import NotConnectedError, WracError
from .protocol import AuthResult, CommandKind, RegisterResult, ServerInfo
from .transport import (
    BaseClientTransport,
    CloseInfo,
    MockClientTransport,
    TransportState,
    WebSocketClientTransport,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "WracClient",
    "create_client",
    "create_test_client",
    "ClientConfig",
    # Events
    "ClientEvent",
    "EventBus",
    # Reply values
    "AuthResult",
    "RegisterResult",
    "ServerInfo",
    "CommandKind",
    # Transports
    "BaseClientTransport",
    "CloseInfo",
    "TransportState",
    "WebSocketClientTransport",
    "MockClientTransport",
    # Errors
    "WracError",
    "NotConnectedError",
]
