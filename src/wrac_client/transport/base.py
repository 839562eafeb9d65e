"""Client-side transport abstraction.

A transport carries opaque binary frames over a persistent, message-oriented
connection. It knows nothing about wRAC: it reports four signals to a bound
listener and sends bytes when asked.

Architecture:
- TransportListener is the PROTOCOL a transport reports to
- BaseClientTransport holds the state machine and the background reader
- Implementations handle the wire and connection management
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from ..config import ClientConfig
from ..exceptions import NotConnectedError

logger = logging.getLogger(__name__)


class TransportState(str, Enum):
    """Connection state machine."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


@dataclass(frozen=True)
class CloseInfo:
    """Why a connection closed."""

    code: int | None = None
    reason: str = ""
    local: bool = False


@runtime_checkable
class TransportListener(Protocol):
    """Receives transport signals. Called from the event loop, never concurrently."""

    def on_open(self) -> None: ...

    def on_close(self, info: CloseInfo) -> None: ...

    def on_error(self, error: Exception) -> None: ...

    def on_frame(self, data: bytes) -> None: ...


class BaseClientTransport(ABC):
    """Base class for client transports with common functionality.

    Provides:
    - State management
    - Background reader task management
    - Signal delivery to the bound listener
    """

    def __init__(self, config: ClientConfig):
        self.config = config
        self._state = TransportState.DISCONNECTED
        self._listener: TransportListener | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._lock = asyncio.Lock()

    @property
    def state(self) -> TransportState:
        """Current connection state."""
        return self._state

    @property
    def is_open(self) -> bool:
        """Check if frames can be sent."""
        return self._state == TransportState.OPEN

    def bind(self, listener: TransportListener) -> None:
        """Set the listener that receives open/close/error/frame signals."""
        self._listener = listener

    async def connect(self) -> None:
        """Open the connection. No-op if already open.

        Raises:
            ConnectionError: If the connection cannot be established
        """
        async with self._lock:
            if self._state == TransportState.OPEN:
                return

            # Let a peer close that is still being handled finish first
            if self._reader_task is not None and not self._reader_task.done():
                with contextlib.suppress(asyncio.CancelledError):
                    await self._reader_task

            self._state = TransportState.CONNECTING
            try:
                await self._do_connect()
            except Exception as e:
                self._state = TransportState.DISCONNECTED
                self._emit_error(e)
                raise ConnectionError(f"Failed to connect: {e}") from e

            self._state = TransportState.OPEN
            self._reader_task = asyncio.create_task(self._read_loop())
            logger.info(f"{self.__class__.__name__} connected to {self.config.url}")
            self._emit_open()

    async def disconnect(self) -> None:
        """Close the connection gracefully."""
        async with self._lock:
            if self._state == TransportState.DISCONNECTED:
                return

            self._state = TransportState.CLOSING

            if self._reader_task:
                task, self._reader_task = self._reader_task, None
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

            # The peer may have finished closing while we waited
            if self._state == TransportState.DISCONNECTED:
                return

            info = await self._do_disconnect()
            self._state = TransportState.DISCONNECTED
            logger.info(f"{self.__class__.__name__} disconnected (local={info.local})")
            self._emit_close(info)

    def send(self, data: bytes) -> None:
        """Queue ``data`` as one binary frame.

        Raises:
            NotConnectedError: If the transport is not open
        """
        if not self.is_open:
            raise NotConnectedError(f"Transport is {self._state.value}, not open")
        self._do_send(bytes(data))

    async def _read_loop(self) -> None:
        """Background task delivering inbound frames until the peer closes."""
        try:
            async for data in self._receive_frames():
                self._deliver(data)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Read loop error: {e}")
            self._emit_error(e)

        if self._state != TransportState.OPEN:
            # disconnect() owns the close
            return

        self._state = TransportState.CLOSING
        info = await self._do_disconnect()
        self._reader_task = None
        self._state = TransportState.DISCONNECTED
        logger.info(f"{self.__class__.__name__} closed by peer: {info.code} {info.reason}")
        self._emit_close(info)

    def _deliver(self, data: bytes | bytearray | memoryview | str) -> None:
        """Hand one inbound frame to the listener. Text frames are dropped."""
        if isinstance(data, str):
            logger.warning(f"Ignoring text frame ({len(data)} chars); protocol is binary-only")
            return
        if self._listener is not None:
            self._listener.on_frame(bytes(data))

    def _emit_open(self) -> None:
        if self._listener is not None:
            self._listener.on_open()

    def _emit_close(self, info: CloseInfo) -> None:
        if self._listener is not None:
            self._listener.on_close(info)

    def _emit_error(self, error: Exception) -> None:
        if self._listener is not None:
            self._listener.on_error(error)

    # Abstract methods for subclasses
    @abstractmethod
    async def _do_connect(self) -> None:
        """Implementation-specific connection logic."""
        ...

    @abstractmethod
    async def _do_disconnect(self) -> CloseInfo:
        """Release the connection and report how it closed.

        Must be safe to call after the peer closed. ``local`` is True only when
        this call started the close.
        """
        ...

    @abstractmethod
    def _do_send(self, data: bytes) -> None:
        """Implementation-specific send logic. Must not block."""
        ...

    @abstractmethod
    def _receive_frames(self) -> AsyncIterator[bytes | str]:
        """Implementation-specific receive logic. Must be an async generator."""
        ...

    async def __aenter__(self) -> BaseClientTransport:
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.disconnect()
