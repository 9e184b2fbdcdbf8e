"""Option records for the bot, its API client and its update loop."""

from __future__ import annotations

import dataclasses

from sdk.client import DEFAULT_API_URL


@dataclasses.dataclass(frozen=True, slots=True)
class ClientOptions:
    api_url: str = DEFAULT_API_URL
    timeout: int = 10  # seconds, per request


@dataclasses.dataclass(frozen=True, slots=True)
class LoopOptions:
    """Long-polling settings.

    ``retry_delay`` is a fixed pause after a failed poll, or after a batch whose
    updates carry no usable ``update_id``; there is no backoff.
    An empty ``allowed_updates`` leaves the platform default in place.
    """

    poll_timeout: int = 30
    limit: int = 100
    retry_delay: float = 5.0
    allowed_updates: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True)
class BotOptions:
    client: ClientOptions = dataclasses.field(default_factory=ClientOptions)
    loop: LoopOptions = dataclasses.field(default_factory=LoopOptions)

    @classmethod
    def from_config(cls) -> "BotOptions":
        """Build options from the environment-backed :mod:`config` module."""
        import config

        return cls(
            client=ClientOptions(api_url=config.API_URL),
            loop=LoopOptions(
                poll_timeout=config.POLL_TIMEOUT,
                limit=config.POLL_LIMIT,
                retry_delay=config.RETRY_DELAY,
                allowed_updates=tuple(config.ALLOWED_UPDATES),
            ),
        )
