"""Response dispatcher.

Decides which pending request an inbound frame resolves. Replies carry no
correlation ID or type tag, so the decision depends on the frame's shape and
on which request kinds are outstanding, checked in a fixed order:

1. 0x01 -> AuthMessage ("no_user"), else Register ("username_taken")
2. 0x02 -> AuthMessage ("bad_pass")
3. digits -> GetSize
4. ReadAll / ReadChunked -> message list (also emitted as "messages")
5. GetServerInfo (frames longer than one byte) -> version + name
6. anything else -> message list emitted as "messages"

Steps 1 and 2 stop even when nothing matches. Every frame that is not an
error code also acknowledges a pending AuthMessage or Register with "ok";
the protocol has no positive acknowledgement of its own.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .pending import PendingRequestTable
from .protocol.commands import CommandKind
from .protocol.frames import FrameKind, InboundFrame, decode_frame
from .protocol.types import AuthResult, RegisterResult

logger = logging.getLogger(__name__)

MessagesCallback = Callable[[list[str]], None]


class ResponseDispatcher:
    """Routes inbound frames to pending requests or to the messages callback."""

    def __init__(
        self,
        pending: PendingRequestTable,
        on_messages: MessagesCallback | None = None,
    ):
        self._pending = pending
        self._on_messages = on_messages
        self._last_messages: list[str] = []

    @property
    def last_messages(self) -> list[str]:
        """Copy of the most recent message list delivered."""
        return list(self._last_messages)

    def dispatch(self, data: bytes) -> InboundFrame:
        """Classify ``data`` and apply it. Returns the classified frame."""
        frame = decode_frame(data)
        logger.debug(
            f"Inbound frame: {len(frame)} bytes, {frame.kind.value}, "
            f"pending={[k.value for k in self._pending.kinds()]}"
        )

        if frame.kind is FrameKind.ERROR_NO_USER:
            self._handle_no_user()
            return frame
        if frame.kind is FrameKind.ERROR_BAD_PASS:
            self._handle_bad_pass()
            return frame

        self._route(frame)
        self._acknowledge()
        return frame

    def _handle_no_user(self) -> None:
        if self._pending.resolve(CommandKind.AUTH_MESSAGE, AuthResult.NO_USER):
            return
        if self._pending.resolve(CommandKind.REGISTER, RegisterResult.USERNAME_TAKEN):
            return
        logger.debug("Error code 0x01 with no auth or register pending; ignored")

    def _handle_bad_pass(self) -> None:
        if not self._pending.resolve(CommandKind.AUTH_MESSAGE, AuthResult.BAD_PASS):
            logger.debug("Error code 0x02 with no auth pending; ignored")

    def _route(self, frame: InboundFrame) -> None:
        pending = self._pending

        if frame.kind is FrameKind.NUMERIC_SIZE and pending.has(CommandKind.GET_SIZE):
            pending.resolve(CommandKind.GET_SIZE, frame.size)
            return

        if pending.has(CommandKind.READ_ALL) or pending.has(CommandKind.READ_CHUNKED):
            messages = frame.message_list()
            for kind in (CommandKind.READ_ALL, CommandKind.READ_CHUNKED):
                if pending.has(kind):
                    pending.resolve(kind, list(messages))
            self._deliver(messages)
            return

        if pending.has(CommandKind.GET_SERVER_INFO) and len(frame) > 1:
            pending.resolve(CommandKind.GET_SERVER_INFO, frame.server_info())
            return

        self._deliver(frame.message_list())

    def _acknowledge(self) -> None:
        self._pending.resolve(CommandKind.AUTH_MESSAGE, AuthResult.OK)
        self._pending.resolve(CommandKind.REGISTER, RegisterResult.OK)

    def _deliver(self, messages: list[str]) -> None:
        self._last_messages = messages
        if self._on_messages is not None:
            self._on_messages(list(messages))
