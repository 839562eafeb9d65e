"""Pending request table.

One slot per command kind. The wire has no request IDs, so a second
request of the same kind cannot be told apart from the first: the newer
future takes the slot and the older one is orphaned (never resolved, never
cancelled). Servers assume single-flight per kind, so this is kept as is.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .protocol.commands import CommandKind

logger = logging.getLogger(__name__)


class PendingRequestTable:
    """Maps a command kind to the future waiting for its reply.

    Only accessed from the event loop thread.
    """

    def __init__(self) -> None:
        self._slots: dict[CommandKind, asyncio.Future[Any]] = {}

    def register(
        self, kind: CommandKind, future: asyncio.Future[Any]
    ) -> asyncio.Future[Any] | None:
        """Install ``future`` for ``kind``, replacing any existing one.

        Returns:
            The orphaned future, if one was replaced.
        """
        if not kind.expects_reply:
            raise ValueError(f"{kind.value} does not expect a reply")

        previous = self._slots.get(kind)
        self._slots[kind] = future
        if previous is not None and not previous.done():
            logger.warning(f"Pending {kind.value} request replaced; previous caller is orphaned")
            return previous
        return None

    def take(self, kind: CommandKind) -> asyncio.Future[Any] | None:
        """Remove and return the future for ``kind``."""
        return self._slots.pop(kind, None)

    def has(self, kind: CommandKind) -> bool:
        """Whether a caller is still waiting on ``kind``.

        A slot whose future was cancelled by its caller is cleared here, so
        it does not claim frames meant for other requests.
        """
        future = self._slots.get(kind)
        if future is None:
            return False
        if future.done():
            del self._slots[kind]
            return False
        return True

    def resolve(self, kind: CommandKind, value: Any) -> bool:
        """Take the future for ``kind`` and set its result.

        Returns:
            True if a waiting caller received ``value``.
        """
        if not self.has(kind):
            return False
        future = self._slots.pop(kind)
        future.set_result(value)
        return True

    def forget(self, kind: CommandKind) -> bool:
        """Drop the pending request for ``kind`` and cancel its future.

        Lets a host apply its own timeout policy.
        """
        future = self.take(kind)
        if future is None:
            return False
        future.cancel()
        return True

    def kinds(self) -> list[CommandKind]:
        """Kinds with a caller still waiting, in registration order."""
        return [kind for kind in list(self._slots) if self.has(kind)]

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, CommandKind) and self.has(kind)

    def __len__(self) -> int:
        return len(self.kinds())
