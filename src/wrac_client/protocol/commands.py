"""Command definitions for the wRAC protocol.

Commands are the request side of the protocol. Each command knows its own
binary layout: an opcode byte followed by the payload, with no length
prefixes and no escaping. Fields are joined with a single newline, so a
username, password or message containing "\\n" produces an ambiguous frame.
That is a protocol limitation and is not validated here.

Example:
    >>> AuthMessage(username="alice", password="pw", text="hi").encode()
    b'\\x02alice\\npw\\nhi'
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

SEPARATOR = b"\n"


class Opcode(bytes, Enum):
    """Leading bytes of each outbound frame."""

    SEND_MESSAGE = b"\x01"
    SEND_AUTH_MESSAGE = b"\x02"
    REGISTER = b"\x03"
    GET_SIZE = b"\x00"
    READ_ALL = b"\x00\x01"
    READ_CHUNKED = b"\x00\x02"
    GET_SERVER_INFO = b"\x69"


class CommandKind(str, Enum):
    """All supported command kinds."""

    PLAIN_MESSAGE = "send_message"
    AUTH_MESSAGE = "send_auth_message"
    REGISTER = "register"
    GET_SIZE = "get_message_size"
    READ_ALL = "read_all_messages"
    READ_CHUNKED = "read_chunked_messages"
    GET_SERVER_INFO = "get_server_info"

    @property
    def expects_reply(self) -> bool:
        """Whether the server answers this command with a frame."""
        return self is not CommandKind.PLAIN_MESSAGE


class Command(BaseModel):
    """Base class for all commands.

    Subclasses set ``kind`` and implement ``encode``.
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[CommandKind]

    def encode(self) -> bytes:
        raise NotImplementedError


class PlainMessage(Command):
    """Unauthenticated message. The server never replies."""

    kind: ClassVar[CommandKind] = CommandKind.PLAIN_MESSAGE

    text: str

    def encode(self) -> bytes:
        return Opcode.SEND_MESSAGE.value + self.text.encode("utf-8")


class AuthMessage(Command):
    """Message sent on behalf of a registered user."""

    kind: ClassVar[CommandKind] = CommandKind.AUTH_MESSAGE

    username: str
    password: str
    text: str

    def encode(self) -> bytes:
        return Opcode.SEND_AUTH_MESSAGE.value + SEPARATOR.join(
            [
                self.username.encode("utf-8"),
                self.password.encode("utf-8"),
                self.text.encode("utf-8"),
            ]
        )


class Register(Command):
    """Register a new user."""

    kind: ClassVar[CommandKind] = CommandKind.REGISTER

    username: str
    password: str

    def encode(self) -> bytes:
        return Opcode.REGISTER.value + SEPARATOR.join(
            [self.username.encode("utf-8"), self.password.encode("utf-8")]
        )


class GetSize(Command):
    """Ask for the total size in bytes of the server's message log."""

    kind: ClassVar[CommandKind] = CommandKind.GET_SIZE

    def encode(self) -> bytes:
        return Opcode.GET_SIZE.value


class ReadAll(Command):
    kind: ClassVar[CommandKind] = CommandKind.READ_ALL

    def encode(self) -> bytes:
        return Opcode.READ_ALL.value


class ReadChunked(Command):
    """Read the messages written after ``last_size`` bytes of the log."""

    kind: ClassVar[CommandKind] = CommandKind.READ_CHUNKED

    last_size: int = Field(ge=0)

    def encode(self) -> bytes:
        return Opcode.READ_CHUNKED.value + str(self.last_size).encode("ascii")


class GetServerInfo(Command):
    kind: ClassVar[CommandKind] = CommandKind.GET_SERVER_INFO

    def encode(self) -> bytes:
        return Opcode.GET_SERVER_INFO.value
