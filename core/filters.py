"""Filter combinators and the predicates behind the typed registrations."""

from __future__ import annotations

from typing import Callable, Sequence

from core.chain import Handler, Next
from core.commands import CommandPattern, match_command, parse_command
from core.incoming import IncomingUpdate, UpdateKind

Predicate = Callable[[IncomingUpdate], bool]

# Message fields that back the on_<subtype> registrations.
MESSAGE_CONTENT_FIELDS: tuple[str, ...] = (
    "text",
    "audio",
    "document",
    "animation",
    "game",
    "photo",
    "sticker",
    "video",
    "voice",
    "video_note",
    "contact",
    "location",
    "venue",
    "poll",
)


def filter_handler(predicate: Predicate, handler: Handler) -> Handler:
    """Wrap *handler* so it only runs when *predicate* holds.

    When the predicate is false the wrapper calls ``next()`` itself, so it is
    invisible to updates it does not match.
    """

    def filtered(info: IncomingUpdate, next: Next):
        if predicate(info):
            return handler(info, next)
        return next()

    filtered.__wrapped__ = handler  # type: ignore[attr-defined]
    filtered.__qualname__ = f"filtered({getattr(handler, '__qualname__', repr(handler))})"
    return filtered


def kind_is(kind: UpdateKind) -> Predicate:
    def predicate(info: IncomingUpdate) -> bool:
        return info.kind is kind

    return predicate


def message_has(field: str) -> Predicate:
    """Predicate: the update's message has *field* populated."""
    if field not in MESSAGE_CONTENT_FIELDS:
        raise ValueError(f"Unknown message content field: {field!r}")

    def predicate(info: IncomingUpdate) -> bool:
        return info.msg is not None and getattr(info.msg, field) is not None

    return predicate


def command_matches(patterns: Sequence[CommandPattern]) -> Predicate:
    """Predicate: the message is a command matching *patterns*.

    On success the parsed command is stored on ``info.command``.  A command
    already stored there by an earlier filter is reused, not re-parsed.
    """
    patterns = tuple(patterns)

    def predicate(info: IncomingUpdate) -> bool:
        command = info.command
        if command is None and info.msg is not None:
            command = parse_command(info.msg)
        if command is None:
            return False
        if patterns and not match_command(command.name, patterns):
            return False
        info.cache_command(command)
        return True

    return predicate
