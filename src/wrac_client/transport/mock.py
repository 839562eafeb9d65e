"""Mock transport for testing.

No actual I/O - everything is in-memory. Sent frames are recorded, inbound
frames and connection faults are injected by the test.

Usage:
    transport = MockClientTransport()
    client = WracClient(transport=transport)
    await client.connect()

    size = client.get_message_size()
    assert transport.sent_frames == [b"\\x00"]

    transport.inject_frame(b"42")
    assert await size == 42
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from ..config import ClientConfig
from .base import BaseClientTransport, CloseInfo


class MockClientTransport(BaseClientTransport):
    """In-memory transport recording outbound frames."""

    def __init__(self, config: ClientConfig | None = None, fail_connect: Exception | None = None):
        super().__init__(config or ClientConfig())
        self.fail_connect = fail_connect
        self._sent_frames: list[bytes] = []
        self._replies: dict[bytes, list[bytes | str]] = {}
        self._closed: asyncio.Event = asyncio.Event()
        self._close_info = CloseInfo()
        self._receive_error: Exception | None = None
        self.connect_count = 0

    @property
    def sent_frames(self) -> list[bytes]:
        """Get all frames sent through this transport."""
        return self._sent_frames.copy()

    def set_reply(self, request: bytes, *frames: bytes | str) -> None:
        """Answer every future send of exactly ``request`` with ``frames``.

        Replies are delivered on the next event loop iteration, in order.
        """
        self._replies[bytes(request)] = list(frames)

    def clear(self) -> None:
        """Forget recorded frames and canned replies."""
        self._sent_frames.clear()
        self._replies.clear()

    def inject_frame(self, data: bytes | str) -> None:
        """Deliver an inbound frame to the listener immediately."""
        self._deliver(data)

    def simulate_close(self, code: int | None = 1000, reason: str = "") -> None:
        """Make the peer close the connection. Signals arrive once the loop runs."""
        self._close_info = CloseInfo(code=code, reason=reason)
        self._closed.set()

    def simulate_error(self, error: Exception) -> None:
        """Make the connection fail with ``error``, then close (code 1006)."""
        self._receive_error = error
        self.simulate_close(code=1006, reason=str(error))

    async def _do_connect(self) -> None:
        self.connect_count += 1
        if self.fail_connect is not None:
            raise self.fail_connect
        self._closed = asyncio.Event()
        self._close_info = CloseInfo()
        self._receive_error = None

    async def _do_disconnect(self) -> CloseInfo:
        if not self._closed.is_set():
            self._close_info = CloseInfo(code=1000, local=True)
            self._closed.set()
        return self._close_info

    def _do_send(self, data: bytes) -> None:
        self._sent_frames.append(data)
        loop = asyncio.get_running_loop()
        for frame in self._replies.get(data, []):
            loop.call_soon(self._deliver_if_open, frame)

    def _deliver_if_open(self, data: bytes | str) -> None:
        if self.is_open:
            self._deliver(data)

    async def _receive_frames(self) -> AsyncIterator[bytes | str]:
        """Frames are pushed by inject_frame(); this only waits for the close."""
        await self._closed.wait()
        if self._receive_error is not None:
            raise self._receive_error
        return
        yield  # Make this a generator


def create_mock_transport() -> MockClientTransport:
    """Create a mock transport for testing.

    Returns:
        MockClientTransport for testing
    """
    return MockClientTransport()
