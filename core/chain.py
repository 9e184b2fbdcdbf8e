"""Ordered handler chain with explicit continuation.

Each handler is called as ``handler(info, next)``.  Calling ``next()`` runs
the following handler and returns its result; not calling it ends the
traversal for that update.  This is the only routing primitive: filters,
typed registrations and command matching are all built on top of it.

Example::

    chain = HandlerChain()

    def log_all(info, next):
        logger.info("got update", extra={"update_id": info.id})
        return next()

    def reply(info, next):
        return "handled"

    chain.use(log_all).use(reply)
    chain.dispatch(info)  # -> "handled"
"""

from __future__ import annotations

from typing import Any, Callable, List

from core.exceptions import InvalidHandlerError
from core.incoming import IncomingUpdate
from core.logger import SwitchyardLogger

logger = SwitchyardLogger.get_logger()

Next = Callable[[], Any]
Handler = Callable[[IncomingUpdate, Next], Any]


class HandlerChain:
    """Append-only sequence of handlers, dispatched in registration order."""

    def __init__(self) -> None:
        self._handlers: List[Handler] = []

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        """Snapshot of the registered handlers, in priority order."""
        return tuple(self._handlers)

    def use(self, handler: Handler) -> "HandlerChain":
        """Append *handler* so it sees every update not consumed earlier.

        Returns ``self`` so registrations can be chained.

        Raises:
            InvalidHandlerError: If *handler* is not callable.
        """
        if not callable(handler):
            raise InvalidHandlerError(f"Handler must be callable, got {type(handler).__name__}", handler)
        self._handlers.append(handler)
        logger.debug(
            "Handler registered",
            extra={"handler": getattr(handler, "__qualname__", repr(handler)), "handler_index": len(self._handlers) - 1},
        )
        return self

    def dispatch(self, info: IncomingUpdate) -> Any:
        """Run *info* through the chain and return the first handler's result.

        Exceptions raised by a handler propagate to the caller; no later
        handler runs for this update.
        """
        return self._call(info, 0)

    def _call(self, info: IncomingUpdate, index: int) -> Any:
        # Length is read on every step: handlers appended mid-dispatch may be seen.
        if index >= len(self._handlers):
            return None
        handler = self._handlers[index]
        return handler(info, lambda: self._call(info, index + 1))
