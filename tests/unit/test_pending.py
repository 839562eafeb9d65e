"""Unit tests for the pending request table."""

import asyncio

import pytest

from wrac_client.pending import PendingRequestTable
from wrac_client.protocol.commands import CommandKind


@pytest.fixture
def table() -> PendingRequestTable:
    return PendingRequestTable()


# =============================================================================
# Register Tests
# =============================================================================


class TestRegister:
    """One slot per command kind."""

    @pytest.mark.asyncio
    async def test_register_and_has(self, table) -> None:
        """A registered future is pending under its kind."""
        future = asyncio.get_running_loop().create_future()

        assert table.register(CommandKind.GET_SIZE, future) is None
        assert table.has(CommandKind.GET_SIZE)
        assert CommandKind.GET_SIZE in table
        assert len(table) == 1

    @pytest.mark.asyncio
    async def test_second_register_orphans_first(self, table) -> None:
        """The newer future takes the slot; the older one is returned untouched."""
        loop = asyncio.get_running_loop()
        first = loop.create_future()
        second = loop.create_future()

        table.register(CommandKind.GET_SIZE, first)
        orphaned = table.register(CommandKind.GET_SIZE, second)

        assert orphaned is first
        assert table.take(CommandKind.GET_SIZE) is second
        assert not first.done()

    @pytest.mark.asyncio
    async def test_plain_message_cannot_be_registered(self, table) -> None:
        """Kinds without a reply are rejected."""
        future = asyncio.get_running_loop().create_future()

        with pytest.raises(ValueError):
            table.register(CommandKind.PLAIN_MESSAGE, future)


# =============================================================================
# Take and Resolve Tests
# =============================================================================


class TestTakeAndResolve:
    """Taking or resolving a kind empties its slot."""

    @pytest.mark.asyncio
    async def test_take_removes(self, table) -> None:
        """take returns the future once."""
        future = asyncio.get_running_loop().create_future()
        table.register(CommandKind.READ_ALL, future)

        assert table.take(CommandKind.READ_ALL) is future
        assert table.take(CommandKind.READ_ALL) is None
        assert not table.has(CommandKind.READ_ALL)

    def test_take_missing(self, table) -> None:
        """take on an empty slot returns None."""
        assert table.take(CommandKind.GET_SERVER_INFO) is None

    @pytest.mark.asyncio
    async def test_resolve_sets_result(self, table) -> None:
        """resolve completes the future and frees the slot."""
        future = asyncio.get_running_loop().create_future()
        table.register(CommandKind.GET_SIZE, future)

        assert table.resolve(CommandKind.GET_SIZE, 10) is True
        assert future.result() == 10
        assert len(table) == 0

    def test_resolve_missing(self, table) -> None:
        """resolve with nothing pending reports False."""
        assert table.resolve(CommandKind.GET_SIZE, 10) is False

    @pytest.mark.asyncio
    async def test_cancelled_future_no_longer_counts_as_pending(self, table) -> None:
        """A future cancelled by its caller does not claim replies."""
        future = asyncio.get_running_loop().create_future()
        table.register(CommandKind.GET_SIZE, future)
        future.cancel()

        assert not table.has(CommandKind.GET_SIZE)
        assert table.resolve(CommandKind.GET_SIZE, 1) is False
        assert table.kinds() == []


# =============================================================================
# Forget Tests
# =============================================================================


class TestForget:
    """forget drops a pending request for a host-side timeout."""

    @pytest.mark.asyncio
    async def test_forget_cancels(self, table) -> None:
        """Forgotten futures are cancelled."""
        future = asyncio.get_running_loop().create_future()
        table.register(CommandKind.REGISTER, future)

        assert table.forget(CommandKind.REGISTER) is True
        assert future.cancelled()
        assert not table.has(CommandKind.REGISTER)

    def test_forget_missing(self, table) -> None:
        """forget with nothing pending reports False."""
        assert table.forget(CommandKind.REGISTER) is False

    @pytest.mark.asyncio
    async def test_kinds_in_registration_order(self, table) -> None:
        """kinds lists outstanding kinds oldest first."""
        loop = asyncio.get_running_loop()
        table.register(CommandKind.READ_ALL, loop.create_future())
        table.register(CommandKind.GET_SIZE, loop.create_future())

        assert table.kinds() == [CommandKind.READ_ALL, CommandKind.GET_SIZE]
