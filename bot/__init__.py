"""Bot application layer — the :class:`Bot` facade and the polling loop.

This package may import from ``core/``, ``sdk/`` and ``config`` only.
"""

from bot.bot import Bot
from bot.options import BotOptions, ClientOptions, LoopOptions
from bot.update_loop import UpdateLoop

__all__ = [
    "Bot",
    "BotOptions",
    "ClientOptions",
    "LoopOptions",
    "UpdateLoop",
]
