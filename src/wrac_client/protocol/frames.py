"""Inbound frame classification.

Replies carry no request ID and no type tag. Classification here only looks
at the frame itself; which pending request a frame resolves is decided by
the dispatcher, which also knows what is outstanding.

Order of checks:
1. Single byte 0x01 / 0x02 are error codes.
2. The payload is decoded as UTF-8 and stripped.
3. Text made only of ASCII digits is a numeric size.
4. Anything else is text (a message list, or server info when the
   dispatcher is waiting for one).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .types import ServerInfo

ERROR_NO_USER = 0x01
ERROR_BAD_PASS = 0x02

_DIGITS = re.compile(r"[0-9]+")


class FrameKind(str, Enum):
    """Shape of an inbound frame."""

    ERROR_NO_USER = "error_no_user"
    ERROR_BAD_PASS = "error_bad_pass"
    NUMERIC_SIZE = "numeric_size"
    TEXT = "text"

    @property
    def is_error(self) -> bool:
        return self in (FrameKind.ERROR_NO_USER, FrameKind.ERROR_BAD_PASS)


@dataclass(frozen=True)
class InboundFrame:
    """A classified inbound frame."""

    raw: bytes
    kind: FrameKind
    text: str = ""
    size: int | None = None

    def message_list(self) -> list[str]:
        """Split the text into messages, dropping empty lines."""
        return split_messages(self.text)

    def server_info(self) -> ServerInfo:
        """Read the frame as ``version byte + UTF-8 name``."""
        if len(self.raw) < 2:
            raise ValueError("Server info frame needs a version byte and a name")
        return ServerInfo(
            version=self.raw[0],
            name=self.raw[1:].decode("utf-8", errors="replace"),
        )

    def __len__(self) -> int:
        return len(self.raw)


def split_messages(text: str) -> list[str]:
    return [line for line in text.split("\n") if line]


def decode_frame(data: bytes) -> InboundFrame:
    """Classify raw frame bytes. Pure, never raises."""
    raw = bytes(data)

    if len(raw) == 1:
        if raw[0] == ERROR_NO_USER:
            return InboundFrame(raw=raw, kind=FrameKind.ERROR_NO_USER)
        if raw[0] == ERROR_BAD_PASS:
            return InboundFrame(raw=raw, kind=FrameKind.ERROR_BAD_PASS)

    text = raw.decode("utf-8", errors="replace").strip()

    if _DIGITS.fullmatch(text):
        return InboundFrame(raw=raw, kind=FrameKind.NUMERIC_SIZE, text=text, size=int(text))

    return InboundFrame(raw=raw, kind=FrameKind.TEXT, text=text)
