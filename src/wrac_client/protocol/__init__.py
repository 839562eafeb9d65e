"""wRAC wire protocol.

Defines the binary command layouts and the classification of inbound
frames. Nothing here touches the transport or holds state.

Key concepts:
- Commands: client -> server frames, opcode first
- Frames: server -> client payloads with no correlation ID
- Correlation: decided by the dispatcher from the set of pending kinds
"""

from .commands import (
    AuthMessage,
    Command,
    CommandKind,
    GetServerInfo,
    GetSize,
    Opcode,
    PlainMessage,
    ReadAll,
    ReadChunked,
    Register,
)
from .frames import FrameKind, InboundFrame, decode_frame, split_messages
from .types import AuthResult, RegisterResult, ServerInfo

__all__ = [
    # Commands
    "Command",
    "CommandKind",
    "Opcode",
    "PlainMessage",
    "AuthMessage",
    "Register",
    "GetSize",
    "ReadAll",
    "ReadChunked",
    "GetServerInfo",
    # Frames
    "FrameKind",
    "InboundFrame",
    "decode_frame",
    "split_messages",
    # Reply values
    "AuthResult",
    "RegisterResult",
    "ServerInfo",
]
