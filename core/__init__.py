"""Core dispatch engine — classification, handler chain, filters, commands.

This package may import from ``sdk.models`` only.  It must NEVER import from
``bot/`` or perform network I/O.
"""

from core.chain import Handler, HandlerChain, Next
from core.commands import Command, match_command, parse_command
from core.events import EventHub
from core.exceptions import InvalidHandlerError, SwitchyardError, UpdateDecodeError
from core.filters import command_matches, filter_handler, kind_is, message_has
from core.incoming import IncomingUpdate, UpdateKind, classify
from core.logger import SwitchyardLogger

__all__ = [
    "classify",
    "IncomingUpdate",
    "UpdateKind",
    "Handler",
    "HandlerChain",
    "Next",
    "filter_handler",
    "kind_is",
    "message_has",
    "command_matches",
    "Command",
    "parse_command",
    "match_command",
    "EventHub",
    "SwitchyardError",
    "InvalidHandlerError",
    "UpdateDecodeError",
    "SwitchyardLogger",
]
