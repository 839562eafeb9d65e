"""Unit tests for command encoding."""

import pytest
from pydantic import ValidationError

from wrac_client.protocol.commands import (
    AuthMessage,
    CommandKind,
    GetServerInfo,
    GetSize,
    PlainMessage,
    ReadAll,
    ReadChunked,
    Register,
)

# =============================================================================
# Encoding Tests
# =============================================================================


class TestCommandEncoding:
    """Each command maps to an exact byte layout."""

    def test_plain_message(self) -> None:
        """Plain message is opcode 0x01 followed by the text."""
        assert PlainMessage(text="hello").encode() == b"\x01hello"

    def test_plain_message_utf8(self) -> None:
        """Message text is encoded as UTF-8."""
        assert PlainMessage(text="héllo").encode() == b"\x01h\xc3\xa9llo"

    def test_plain_message_empty(self) -> None:
        """Empty text encodes to the bare opcode."""
        assert PlainMessage(text="").encode() == b"\x01"

    def test_auth_message(self) -> None:
        """Auth message joins username, password and text with newlines."""
        cmd = AuthMessage(username="alice", password="pw", text="hi there")

        assert cmd.encode() == b"\x02alice\npw\nhi there"

    def test_register(self) -> None:
        """Register joins username and password with a newline."""
        assert Register(username="bob", password="secret").encode() == b"\x03bob\nsecret"

    def test_get_size(self) -> None:
        """Size query is the single byte 0x00."""
        assert GetSize().encode() == b"\x00"

    def test_read_all(self) -> None:
        """Read-all is 0x00 0x01."""
        assert ReadAll().encode() == b"\x00\x01"

    def test_read_chunked(self) -> None:
        """Chunked read appends the offset as ASCII digits."""
        assert ReadChunked(last_size=1024).encode() == b"\x00\x021024"

    def test_read_chunked_zero(self) -> None:
        """Offset zero is still written as a digit."""
        assert ReadChunked(last_size=0).encode() == b"\x00\x020"

    def test_get_server_info(self) -> None:
        """Server info query is the single byte 0x69."""
        assert GetServerInfo().encode() == b"\x69"

    def test_newline_in_fields_is_not_escaped(self) -> None:
        """Separator inside a field is passed through as is."""
        cmd = Register(username="a\nb", password="c")

        assert cmd.encode() == b"\x03a\nb\nc"


# =============================================================================
# Validation Tests
# =============================================================================


class TestCommandValidation:
    """Command models validate their fields."""

    def test_read_chunked_rejects_negative_size(self) -> None:
        """Negative offsets are rejected."""
        with pytest.raises(ValidationError):
            ReadChunked(last_size=-1)

    def test_commands_are_frozen(self) -> None:
        """Commands cannot be modified after creation."""
        cmd = PlainMessage(text="x")

        with pytest.raises(ValidationError):
            cmd.text = "y"

    def test_auth_message_requires_all_fields(self) -> None:
        """Auth message without text fails validation."""
        with pytest.raises(ValidationError):
            AuthMessage(username="alice", password="pw")


# =============================================================================
# CommandKind Tests
# =============================================================================


class TestCommandKind:
    """Command kinds key the pending request table."""

    def test_each_command_has_its_kind(self) -> None:
        """Every command class carries its own kind."""
        assert PlainMessage(text="").kind is CommandKind.PLAIN_MESSAGE
        assert AuthMessage(username="u", password="p", text="t").kind is CommandKind.AUTH_MESSAGE
        assert Register(username="u", password="p").kind is CommandKind.REGISTER
        assert GetSize().kind is CommandKind.GET_SIZE
        assert ReadAll().kind is CommandKind.READ_ALL
        assert ReadChunked(last_size=1).kind is CommandKind.READ_CHUNKED
        assert GetServerInfo().kind is CommandKind.GET_SERVER_INFO

    def test_only_plain_message_has_no_reply(self) -> None:
        """Plain message is the only kind the server never answers."""
        no_reply = [kind for kind in CommandKind if not kind.expects_reply]

        assert no_reply == [CommandKind.PLAIN_MESSAGE]

    def test_kind_values(self) -> None:
        """Kind values are the client method names."""
        assert CommandKind.GET_SIZE.value == "get_message_size"
        assert CommandKind.READ_CHUNKED.value == "read_chunked_messages"
