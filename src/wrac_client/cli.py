"""wRAC command line client.

Usage:
    wrac --url ws://host:42666 info          # Server name and protocol version
    wrac size                                # Message log size in bytes
    wrac read                                # All messages
    wrac read --since 1024                   # Messages after byte 1024
    wrac send "hello"                        # Unauthenticated message
    wrac send "hello" -u alice -p secret     # Authenticated message
    wrac register alice secret               # Register a user
    wrac listen                              # Poll for new messages

The server URL defaults to $WRAC_URL.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from .client import WracClient
from .config import ClientConfig
from .protocol.commands import CommandKind
from .protocol.types import AuthResult, RegisterResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Output format options
FORMAT_TEXT = "text"
FORMAT_JSON = "json"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def make_client(config: ClientConfig) -> WracClient:
    """Build the client used by every command."""
    return WracClient(config=config)


async def await_reply(
    client: WracClient, kind: CommandKind, future: Awaitable[T], timeout: float
) -> T:
    """Wait for a reply, dropping the pending request on timeout."""
    try:
        return await asyncio.wait_for(future, timeout=timeout)
    except TimeoutError:
        client.forget(kind)
        raise


def run_with_client(config: ClientConfig, action: Callable[[WracClient], Awaitable[T]]) -> T:
    """Connect, run ``action``, disconnect."""

    async def runner() -> T:
        client = make_client(config)
        try:
            await client.connect()
        except ConnectionError as e:
            raise click.ClickException(f"Cannot connect to {config.url}: {e}") from e
        try:
            return await action(client)
        except TimeoutError as e:
            raise click.ClickException(
                f"No reply from {config.url} within {config.reply_timeout}s"
            ) from e
        finally:
            await client.disconnect()

    return asyncio.run(runner())


async def confirm_no_error(
    client: WracClient, kind: CommandKind, future: Awaitable[T], timeout: float
) -> T:
    """Wait for an auth or register outcome.

    The server only answers these on failure. A size query sent right after
    is answered in order, so its reply settles the pending request as "ok"
    when no error byte came first.
    """
    probe = client.get_message_size()
    result = await await_reply(client, kind, future, timeout)
    if not probe.done():
        client.forget(CommandKind.GET_SIZE)
    return result


@click.group()
@click.option("--url", default=None, help="Server URL, ws:// or wss:// (default: $WRAC_URL)")
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds to wait for each reply (default: $WRAC_REPLY_TIMEOUT or 10)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Log level for diagnostics on stderr",
)
@click.pass_context
def main(ctx: click.Context, url: str | None, timeout: float | None, log_level: str) -> None:
    """wRAC chat client."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        ctx.obj = ClientConfig.from_env(url=url, reply_timeout=timeout)
    except ValueError as e:
        # The bad value may come from --url or from a WRAC_* variable
        raise click.UsageError(str(e), ctx=ctx) from e


@main.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([FORMAT_TEXT, FORMAT_JSON]),
    default=FORMAT_TEXT,
    help="Output format",
)
@click.pass_obj
def info(config: ClientConfig, output_format: str) -> None:
    """Show the server name and protocol version."""

    async def action(client: WracClient) -> Any:
        return await await_reply(
            client, CommandKind.GET_SERVER_INFO, client.get_server_info(), config.reply_timeout
        )

    server = run_with_client(config, action)
    if output_format == FORMAT_JSON:
        click.echo(server.model_dump_json())
    else:
        click.echo(f"{server.name} (protocol version {server.version})")


@main.command()
@click.pass_obj
def size(config: ClientConfig) -> None:
    """Show the size of the server's message log in bytes."""

    async def action(client: WracClient) -> int:
        return await await_reply(
            client, CommandKind.GET_SIZE, client.get_message_size(), config.reply_timeout
        )

    click.echo(run_with_client(config, action))


@main.command()
@click.option(
    "--since",
    type=click.IntRange(min=0),
    default=None,
    help="Only messages after this byte offset",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([FORMAT_TEXT, FORMAT_JSON]),
    default=FORMAT_TEXT,
    help="Output format",
)
@click.pass_obj
def read(config: ClientConfig, since: int | None, output_format: str) -> None:
    """Print messages from the server.

    Examples:

        # Everything
        wrac read

        # Only what was written after byte 1024
        wrac read --since 1024
    """

    async def action(client: WracClient) -> list[str]:
        if since is None:
            return await await_reply(
                client, CommandKind.READ_ALL, client.read_all_messages(), config.reply_timeout
            )
        return await await_reply(
            client,
            CommandKind.READ_CHUNKED,
            client.read_chunked_messages(since),
            config.reply_timeout,
        )

    messages = run_with_client(config, action)
    if output_format == FORMAT_JSON:
        click.echo(json.dumps(messages, ensure_ascii=False))
        return
    for message in messages:
        click.echo(message)


@main.command()
@click.argument("text")
@click.option("--user", "-u", default=None, help="Send as this registered user")
@click.option("--password", "-p", default=None, help="Password for --user")
@click.pass_obj
def send(config: ClientConfig, text: str, user: str | None, password: str | None) -> None:
    """Send a message."""
    if (user is None) != (password is None):
        raise click.UsageError("--user and --password must be given together")

    async def action(client: WracClient) -> AuthResult | None:
        if user is None or password is None:
            client.send_message(text)
            return None
        return await confirm_no_error(
            client,
            CommandKind.AUTH_MESSAGE,
            client.send_auth_message(user, password, text),
            config.reply_timeout,
        )

    result = run_with_client(config, action)
    if result == AuthResult.NO_USER:
        raise click.ClickException(f"No such user: {user}")
    if result == AuthResult.BAD_PASS:
        raise click.ClickException(f"Wrong password for {user}")
    click.echo("Sent", err=True)


@main.command()
@click.argument("username")
@click.argument("password")
@click.pass_obj
def register(config: ClientConfig, username: str, password: str) -> None:
    """Register a new user."""

    async def action(client: WracClient) -> RegisterResult:
        return await confirm_no_error(
            client,
            CommandKind.REGISTER,
            client.register(username, password),
            config.reply_timeout,
        )

    result = run_with_client(config, action)
    if result == RegisterResult.USERNAME_TAKEN:
        raise click.ClickException(f"Username already taken: {username}")
    click.echo(f"Registered {username}", err=True)


@main.command()
@click.option("--interval", type=float, default=1.0, help="Seconds between polls")
@click.option(
    "--since",
    type=click.IntRange(min=0),
    default=None,
    help="Start from this byte offset (default: now)",
)
@click.option(
    "--count", type=click.IntRange(min=1), default=None, help="Exit after this many messages"
)
@click.pass_obj
def listen(config: ClientConfig, interval: float, since: int | None, count: int | None) -> None:
    """Poll the server and print new messages as they arrive."""

    async def next_size(client: WracClient) -> int:
        return await await_reply(
            client, CommandKind.GET_SIZE, client.get_message_size(), config.reply_timeout
        )

    async def action(client: WracClient) -> None:
        printed = 0
        last = since if since is not None else await next_size(client)
        while True:
            current = await next_size(client)
            if current > last:
                messages = await await_reply(
                    client,
                    CommandKind.READ_CHUNKED,
                    client.read_chunked_messages(last),
                    config.reply_timeout,
                )
                for message in messages:
                    click.echo(message)
                    printed += 1
                    if count is not None and printed >= count:
                        return
            last = current
            await asyncio.sleep(interval)

    try:
        run_with_client(config, action)
    except KeyboardInterrupt:
        click.echo("\nStopped", err=True)


if __name__ == "__main__":
    main()
