"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_URL = "ws://localhost:42666"


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got {value!r}") from e


def normalize_url(url: str) -> str:
    """Return a ws:// or wss:// URL, converting http(s):// schemes."""
    if url.startswith("http://"):
        url = "ws://" + url[len("http://") :]
    elif url.startswith("https://"):
        url = "wss://" + url[len("https://") :]
    if not url.startswith(("ws://", "wss://")):
        raise ValueError(f"Unsupported URL scheme: {url!r} (expected ws:// or wss://)")
    return url


@dataclass
class ClientConfig:
    """Configuration for a wRAC client and its transport."""

    # wRAC over ws://, wRACs over wss://
    url: str = DEFAULT_URL

    # Connection
    open_timeout: float | None = 10.0
    close_timeout: float | None = 5.0
    ping_interval: float | None = 30.0
    ping_timeout: float | None = 10.0
    max_size: int | None = 2**24

    # How long the CLI waits for a reply. The client itself never times out.
    reply_timeout: float = 10.0

    def __post_init__(self) -> None:
        self.url = normalize_url(self.url)

    @classmethod
    def from_env(cls, **overrides: object) -> ClientConfig:
        """Build a config from WRAC_* environment variables.

        Keyword arguments that are not None take precedence.

        Raises:
            ValueError: If a variable holds an invalid value; the message names it
        """
        values: dict[str, object] = {}
        if url := os.getenv("WRAC_URL"):
            values["url"] = url
        if (open_timeout := _env_float("WRAC_OPEN_TIMEOUT")) is not None:
            values["open_timeout"] = open_timeout
        if (reply_timeout := _env_float("WRAC_REPLY_TIMEOUT")) is not None:
            values["reply_timeout"] = reply_timeout
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
