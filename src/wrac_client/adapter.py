"""Transport adapter.

Binds a transport to the client: lifecycle signals become bus events and
inbound frames go to the dispatcher.
"""

from __future__ import annotations

import logging

from .bus import ClientEvent, EventBus
from .dispatcher import ResponseDispatcher
from .transport.base import BaseClientTransport, CloseInfo, TransportState

logger = logging.getLogger(__name__)


class TransportAdapter:
    """Listener for a single transport.

    ``disconnect()`` while a connect is still in flight suppresses the
    ``open`` event that connect would otherwise publish.
    """

    def __init__(
        self,
        transport: BaseClientTransport,
        bus: EventBus,
        dispatcher: ResponseDispatcher,
    ):
        self._transport = transport
        self._bus = bus
        self._dispatcher = dispatcher
        self._open_requested = False
        transport.bind(self)

    @property
    def transport(self) -> BaseClientTransport:
        return self._transport

    @property
    def state(self) -> TransportState:
        return self._transport.state

    async def connect(self) -> None:
        """Connect the transport. No-op while already open."""
        if self._transport.is_open:
            return
        self._open_requested = True
        await self._transport.connect()

    async def disconnect(self) -> None:
        self._open_requested = False
        await self._transport.disconnect()

    def send(self, data: bytes) -> None:
        self._transport.send(data)

    # TransportListener

    def on_open(self) -> None:
        if not self._open_requested:
            logger.info("Connection opened after disconnect was requested; not publishing open")
            return
        self._bus.publish(ClientEvent.OPEN)

    def on_close(self, info: CloseInfo) -> None:
        self._bus.publish(ClientEvent.CLOSE, info)

    def on_error(self, error: Exception) -> None:
        self._bus.publish(ClientEvent.ERROR, error)

    def on_frame(self, data: bytes) -> None:
        self._dispatcher.dispatch(data)
