"""Update classification.

Turns a decoded :class:`~sdk.models.Update` into an :class:`IncomingUpdate`:
a normalized record tagged with exactly one :class:`UpdateKind`, carrying
shortcuts to the objects handlers usually need (``msg``, ``chat``,
``channel``, ``query``, ``result``, ``poll``).

Downstream code switches on ``info.kind`` and never re-inspects the optional
fields of the raw update.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Optional

from core.logger import SwitchyardLogger
from sdk.models import Chat, Message, Poll, Update

logger = SwitchyardLogger.get_logger()


class UpdateKind(str, enum.Enum):
    """Closed set of update kinds the dispatcher understands.

    Declaration order is the classification priority.
    """

    MESSAGE = "message"
    EDITED_MESSAGE = "edited_message"
    CHANNEL_POST = "channel_post"
    EDITED_CHANNEL_POST = "edited_channel_post"
    INLINE_QUERY = "inline_query"
    CHOSEN_INLINE_RESULT = "chosen_inline_result"
    CALLBACK_QUERY = "callback_query"
    SHIPPING_QUERY = "shipping_query"
    PRE_CHECKOUT_QUERY = "pre_checkout_query"
    POLL = "poll"

    @property
    def is_message_like(self) -> bool:
        return self in _MESSAGE_KINDS

    @property
    def is_edited(self) -> bool:
        return self in (UpdateKind.EDITED_MESSAGE, UpdateKind.EDITED_CHANNEL_POST)


_MESSAGE_KINDS = frozenset({
    UpdateKind.MESSAGE,
    UpdateKind.EDITED_MESSAGE,
    UpdateKind.CHANNEL_POST,
    UpdateKind.EDITED_CHANNEL_POST,
})

_CHANNEL_KINDS = frozenset({UpdateKind.CHANNEL_POST, UpdateKind.EDITED_CHANNEL_POST})

_QUERY_KINDS = frozenset({
    UpdateKind.INLINE_QUERY,
    UpdateKind.CALLBACK_QUERY,
    UpdateKind.SHIPPING_QUERY,
    UpdateKind.PRE_CHECKOUT_QUERY,
})


@dataclasses.dataclass(frozen=True)
class IncomingUpdate:
    """Normalized view of one update, owned by the dispatch that created it.

    Only the fields relevant to ``kind`` are populated:

    ===========================================  ==========================
    kind                                         payload fields
    ===========================================  ==========================
    ``message`` / ``edited_message``             ``msg``, ``chat``
    ``channel_post`` / ``edited_channel_post``   ``msg``, ``channel``
    inline / callback / shipping / pre-checkout  ``query``
    ``chosen_inline_result``                     ``result``
    ``poll``                                     ``poll``
    ===========================================  ==========================

    Records are frozen.  ``command`` is the one writable slot: command
    filters fill it through :meth:`cache_command`, and it does not take part
    in equality.
    """

    kind: UpdateKind
    update: Update
    id: int
    edited: bool = False
    queued: Optional[bool] = None
    msg: Optional[Message] = None
    chat: Optional[Chat] = None
    channel: Optional[Chat] = None
    query: Any = None
    result: Any = None
    poll: Optional[Poll] = None
    command: Any = dataclasses.field(default=None, compare=False, repr=False)

    @property
    def is_message_like(self) -> bool:
        """True for the four kinds that carry a :class:`Message`."""
        return self.kind.is_message_like

    def cache_command(self, command: Any) -> None:
        object.__setattr__(self, "command", command)


def classify(update: Update, queued: Optional[bool] = None) -> Optional[IncomingUpdate]:
    """Return the :class:`IncomingUpdate` for *update*, or ``None``.

    Variant fields are tested in :class:`UpdateKind` order and the first
    populated one wins.  ``None`` means the update carries no kind known to
    this version (e.g. ``poll_answer``); callers drop it silently.
    """
    for kind in UpdateKind:
        payload = getattr(update, kind.value, None)
        if payload is None:
            continue

        fields: dict[str, Any] = {}
        if kind in _MESSAGE_KINDS:
            fields["msg"] = payload
            fields["channel" if kind in _CHANNEL_KINDS else "chat"] = payload.chat
        elif kind in _QUERY_KINDS:
            fields["query"] = payload
        elif kind is UpdateKind.CHOSEN_INLINE_RESULT:
            fields["result"] = payload
        else:
            fields["poll"] = payload

        return IncomingUpdate(
            kind=kind,
            update=update,
            id=update.update_id,
            edited=kind.is_edited,
            queued=queued,
            **fields,
        )

    logger.debug("Update has no recognized kind, dropping", extra={"update_id": update.update_id})
    return None
