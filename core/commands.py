"""Slash-command parsing and matching.

``/start@mybot hello`` parses to ``Command(name="start", username="mybot",
payload="hello")``.  Names compare case-insensitively against string
patterns; compiled regular expressions are searched against the name as-is.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Iterable, Optional, Union

from sdk.models import Message

CommandPattern = Union[str, re.Pattern]

_COMMAND_RE = re.compile(r"^/([A-Za-z0-9_]+)(?:@([A-Za-z0-9_]+))?(?:\s+|$)(.*)\Z", re.DOTALL)


@dataclasses.dataclass(frozen=True)
class Command:
    """A parsed bot command."""

    name: str
    payload: str = ""
    username: Optional[str] = None

    def is_named(self, name: str) -> bool:
        return self.name.lower() == name.lstrip("/").lower()


def parse_command(message: Message) -> Optional[Command]:
    """Extract the command carried by *message*, or ``None``.

    A message is a command when its text starts with ``/`` and a name token.
    If the message has entities, the first one must also be a
    ``bot_command`` at offset 0.
    """
    text = message.text
    if not text:
        return None

    if message.entities:
        first = message.entities[0]
        if first.type != "bot_command" or first.offset != 0:
            return None

    match = _COMMAND_RE.match(text)
    if match is None:
        return None

    name, username, payload = match.groups()
    return Command(name=name, payload=payload.strip(), username=username)


def is_command_pattern(value: object) -> bool:
    """True for values :func:`match_command` accepts as a pattern."""
    return isinstance(value, (str, re.Pattern))


def match_command(name: str, patterns: Iterable[CommandPattern]) -> bool:
    """True if *patterns* is empty or *name* matches at least one of them."""
    patterns = list(patterns)
    if not patterns:
        return True

    lowered = name.lower()
    for pattern in patterns:
        if isinstance(pattern, str):
            if pattern.lstrip("/").lower() == lowered:
                return True
        elif pattern.search(name):
            return True
    return False
