"""WebSocket client transport.

wRAC runs over plain WebSocket (ws://) and wRACs over TLS (wss://). Every
protocol frame is one binary WebSocket message; text messages are not part
of the protocol and are dropped.

Sends are synchronous for callers: frames go onto a queue drained by a
writer task, so they leave in call order.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from dataclasses import replace
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed

from ..config import ClientConfig
from .base import BaseClientTransport, CloseInfo

logger = logging.getLogger(__name__)


class WebSocketClientTransport(BaseClientTransport):
    """Transport over a single WebSocket connection."""

    def __init__(self, config: ClientConfig | None = None):
        super().__init__(config or ClientConfig())
        self._ws: Any = None  # websockets ClientConnection
        self._outbox: asyncio.Queue[bytes] = asyncio.Queue()
        self._writer_task: asyncio.Task[None] | None = None

    async def _do_connect(self) -> None:
        """Open the WebSocket and start the writer."""
        self._ws = await websockets.connect(
            self.config.url,
            open_timeout=self.config.open_timeout,
            close_timeout=self.config.close_timeout,
            ping_interval=self.config.ping_interval,
            ping_timeout=self.config.ping_timeout,
            max_size=self.config.max_size,
        )
        self._outbox = asyncio.Queue()
        self._writer_task = asyncio.create_task(self._write_loop(self._ws, self._outbox))

    async def _do_disconnect(self) -> CloseInfo:
        """Flush queued frames, stop the writer and close the WebSocket."""
        if self._writer_task and not self._writer_task.done():
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._outbox.join(), timeout=self.config.close_timeout)

        if self._writer_task:
            self._writer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._writer_task
            self._writer_task = None

        ws, self._ws = self._ws, None
        if ws is None:
            return CloseInfo()

        # A close code is only known once the closing handshake is done
        local = ws.close_code is None
        await ws.close()
        return CloseInfo(code=ws.close_code, reason=ws.close_reason or "", local=local)

    def _do_send(self, data: bytes) -> None:
        """Queue one binary frame for the writer task."""
        logger.debug(f"Queueing frame: {len(data)} bytes, opcode {data[:1].hex() or '-'}")
        self._outbox.put_nowait(data)

    async def _write_loop(self, ws: Any, outbox: asyncio.Queue[bytes]) -> None:
        """Background task sending queued frames in order."""
        try:
            while True:
                data = await outbox.get()
                try:
                    await ws.send(data)
                finally:
                    outbox.task_done()
        except ConnectionClosed as e:
            # The reader sees the same close and reports it
            logger.debug(f"Writer stopped, connection closed: {e}")
            while not outbox.empty():
                outbox.get_nowait()
                outbox.task_done()

    async def _receive_frames(self) -> AsyncIterator[bytes | str]:
        """Yield WebSocket messages until the connection closes."""
        ws = self._ws
        if ws is None:
            raise ConnectionError("WebSocket not connected")

        try:
            async for data in ws:
                yield data
        except ConnectionClosed as e:
            logger.warning(f"WebSocket closed abnormally: {e}")


def create_websocket_transport(
    url: str | None = None,
    config: ClientConfig | None = None,
) -> WebSocketClientTransport:
    """Create a WebSocket transport.

    Args:
        url: Server URL (http:// is converted to ws://)
        config: Full configuration; ``url`` overrides its URL when given

    Returns:
        WebSocketClientTransport ready to connect
    """
    config = config or ClientConfig()
    if url is not None:
        config = replace(config, url=url)
    return WebSocketClientTransport(config)
