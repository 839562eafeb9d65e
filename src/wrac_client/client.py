"""wRAC client.

Issues commands over one shared transport and hands back an
``asyncio.Future`` per request. Replies carry no request ID, so at most one
request per kind can be outstanding: a second call of the same kind before
the first is answered takes over the slot and the first future never
completes. Nothing here times out; use ``asyncio.wait_for`` together with
``forget(kind)`` for that.

Usage:
    client = create_client("ws://localhost:42666")
    client.subscribe("messages", print)
    await client.connect()

    info = await client.get_server_info()
    messages = await client.read_all_messages()
    client.send_message("hello")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from .adapter import TransportAdapter
from .bus import ClientEvent, EventBus, EventHandler
from .config import ClientConfig
from .dispatcher import ResponseDispatcher
from .pending import PendingRequestTable
from .protocol.commands import (
    AuthMessage,
    Command,
    CommandKind,
    GetServerInfo,
    GetSize,
    PlainMessage,
    ReadAll,
    ReadChunked,
    Register,
)
from .protocol.types import AuthResult, RegisterResult, ServerInfo
from .transport.base import BaseClientTransport, TransportState
from .transport.mock import MockClientTransport
from .transport.websocket import WebSocketClientTransport

logger = logging.getLogger(__name__)


class WracClient:
    """Client for a wRAC or wRACs chat server."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: BaseClientTransport | None = None,
    ):
        if transport is not None:
            self.config = config or transport.config
        else:
            self.config = config or ClientConfig()
            transport = WebSocketClientTransport(self.config)

        self._bus = EventBus()
        self._pending = PendingRequestTable()
        self._dispatcher = ResponseDispatcher(self._pending, on_messages=self._on_messages)
        self._adapter = TransportAdapter(transport, self._bus, self._dispatcher)

    @property
    def transport(self) -> BaseClientTransport:
        return self._adapter.transport

    @property
    def state(self) -> TransportState:
        """Current connection state."""
        return self._adapter.state

    @property
    def is_connected(self) -> bool:
        return self._adapter.state == TransportState.OPEN

    @property
    def last_received_messages(self) -> list[str]:
        """Snapshot of the last message list received. Not authoritative."""
        return self._dispatcher.last_messages

    # Lifecycle

    async def connect(self) -> None:
        """Connect to the server. No-op while already connected.

        Raises:
            ConnectionError: If the connection fails (also published as "error")
        """
        await self._adapter.connect()

    async def disconnect(self) -> None:
        """Close the connection. Pending requests are left as they are."""
        await self._adapter.disconnect()

    async def __aenter__(self) -> WracClient:
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.disconnect()

    # Events

    def subscribe(self, event: str | ClientEvent, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to "open", "close", "error" or "messages".

        Returns:
            Unsubscribe function
        """
        return self._bus.subscribe(event, handler)

    def unsubscribe(self, event: str | ClientEvent, handler: EventHandler) -> bool:
        return self._bus.unsubscribe(event, handler)

    # Commands

    def send_message(self, text: str) -> None:
        """Send an unauthenticated message. The server does not reply.

        Raises:
            NotConnectedError: If not connected
        """
        self._send(PlainMessage(text=text))

    def send_auth_message(
        self, username: str, password: str, text: str
    ) -> asyncio.Future[AuthResult]:
        """Send a message as a registered user.

        Resolves with "no_user" or "bad_pass" on an error reply, or "ok" as
        soon as any other frame arrives first.
        """
        return self._request(AuthMessage(username=username, password=password, text=text))

    def register(self, username: str, password: str) -> asyncio.Future[RegisterResult]:
        """Register a user. Resolves with "username_taken" or "ok"."""
        return self._request(Register(username=username, password=password))

    def get_message_size(self) -> asyncio.Future[int]:
        """Total size in bytes of the server's message log."""
        return self._request(GetSize())

    def read_all_messages(self) -> asyncio.Future[list[str]]:
        return self._request(ReadAll())

    def read_chunked_messages(self, last_size: int) -> asyncio.Future[list[str]]:
        """Messages written after ``last_size`` bytes of the log.

        Pair with ``get_message_size()`` to poll for new messages.
        """
        return self._request(ReadChunked(last_size=last_size))

    def get_server_info(self) -> asyncio.Future[ServerInfo]:
        """Protocol version and server name."""
        return self._request(GetServerInfo())

    # Pending requests

    def is_pending(self, kind: CommandKind) -> bool:
        return self._pending.has(kind)

    def forget(self, kind: CommandKind) -> bool:
        """Stop waiting for the reply to ``kind`` and cancel its future.

        Returns:
            True if a request of that kind was pending
        """
        return self._pending.forget(kind)

    # Internal

    def _send(self, command: Command) -> None:
        data = command.encode()
        self._adapter.send(data)
        logger.debug(f"Sent {command.kind.value} ({len(data)} bytes)")

    def _request(self, command: Command) -> asyncio.Future[Any]:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._send(command)
        self._pending.register(command.kind, future)
        return future

    def _on_messages(self, messages: list[str]) -> None:
        self._bus.publish(ClientEvent.MESSAGES, messages)


# Factory functions


def create_client(url: str | None = None, config: ClientConfig | None = None) -> WracClient:
    """Create a client that connects over WebSocket.

    Args:
        url: Server URL; overrides ``config.url``
        config: Client configuration (default: from WRAC_* environment)
    """
    config = config or ClientConfig.from_env()
    if url is not None:
        config = replace(config, url=url)
    return WracClient(config=config)


def create_test_client() -> tuple[WracClient, MockClientTransport]:
    """Create a client on a mock transport.

    Returns:
        (client, transport) so tests can inject frames and read sent ones
    """
    transport = MockClientTransport()
    return WracClient(transport=transport), transport
