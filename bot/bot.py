"""The :class:`Bot` — handler registration, update intake and the poll loop.

Typical use::

    bot = Bot(token)

    @bot.command("start")
    async def start(info, next):
        await asyncio.to_thread(bot.client.send_message, info.chat.id, "Hi!")

    @bot.on_text()
    def fallback(info, next):
        ...

    asyncio.run(bot.run_forever())

Handlers are tried in registration order.  The first one whose filter
matches receives ``(info, next)``; it may call ``next()`` to let later
handlers see the update as well.  Whatever the handler returns is returned
by :meth:`Bot.process_update`; coroutines are not awaited by the chain, the
update loop schedules them as tasks.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import json
from typing import Any, Callable, Dict, List, Optional, Set, Union

from pydantic import ValidationError

from bot.options import BotOptions
from bot.update_loop import UpdateLoop
from core.chain import Handler, HandlerChain
from core.commands import CommandPattern, is_command_pattern
from core.events import ERROR, SYNC, UPDATE_ERROR, EventHub, Observer
from core.exceptions import InvalidHandlerError, UpdateDecodeError
from core.filters import command_matches, filter_handler, kind_is, message_has
from core.incoming import IncomingUpdate, UpdateKind, classify
from core.logger import SwitchyardLogger
from sdk.client import SwitchyardClient
from sdk.models import Update

logger = SwitchyardLogger.get_logger()

RawUpdate = Union[bytes, bytearray, str, Dict[str, Any], Update]
Registration = Union["Bot", Callable[[Handler], Handler]]


def _check_handler(handler: Any) -> None:
    if not callable(handler):
        raise InvalidHandlerError(f"Invalid handler was passed: {handler!r}", handler)


def _check_patterns(patterns: Any) -> None:
    invalid = [value for value in patterns if not is_command_pattern(value)]
    if invalid:
        raise InvalidHandlerError(f"Invalid command pattern: {invalid[-1]!r}", invalid[-1])


class Bot(HandlerChain):
    """Dispatcher bound to one bot token.

    Every ``on_*`` method returns the bot when given a handler, so calls can
    be chained, or a decorator when called without one.  :meth:`on_command`
    always needs its handler; :meth:`command` is its decorator form.
    """

    def __init__(
        self,
        token: str,
        options: Optional[BotOptions] = None,
        client: Optional[SwitchyardClient] = None,
    ) -> None:
        super().__init__()
        self.options = options or BotOptions()
        self.client = client or SwitchyardClient(
            token,
            api_url=self.options.client.api_url,
            timeout=self.options.client.timeout,
        )
        self._events = EventHub()
        self._update_loop: Optional[UpdateLoop] = None
        self._pending: Set[asyncio.Future] = set()

    # ------------------------------------------------------------------
    # Lifecycle signals
    # ------------------------------------------------------------------

    def on_event(self, signal: str, observer: Observer) -> "Bot":
        """Subscribe to ``"sync"``, ``"error"`` or ``"update_error"``.

        * ``sync()``: the backlog pending at start-up has been processed.
        * ``error(exc, info)``: a handler (or its deferred result) failed;
          *info* is the :class:`IncomingUpdate` being processed.
        * ``update_error(exc, retry)``: polling failed and will be retried.
        """
        self._events.subscribe(signal, observer)
        return self

    def off_event(self, signal: str, observer: Observer) -> bool:
        return self._events.unsubscribe(signal, observer)

    # ------------------------------------------------------------------
    # Update intake
    # ------------------------------------------------------------------

    @staticmethod
    def decode(raw: RawUpdate) -> Update:
        """Turn *raw* (JSON bytes/str, a dict or an Update) into an :class:`Update`.

        Raises:
            UpdateDecodeError: If the payload is not valid JSON or not a
                valid update object.
        """
        if isinstance(raw, Update):
            return raw
        payload: Any = raw
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = bytes(payload).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise UpdateDecodeError("Update payload is not valid UTF-8", raw, exc) from exc
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as exc:
                raise UpdateDecodeError("Update payload is not valid JSON", raw, exc) from exc
        if not isinstance(payload, dict):
            raise UpdateDecodeError(f"Update payload must be an object, got {type(payload).__name__}", raw)
        try:
            return Update.model_validate(payload)
        except ValidationError as exc:
            raise UpdateDecodeError("Update payload failed validation", raw, exc) from exc

    def process_update(self, raw: RawUpdate) -> Any:
        """Classify and dispatch one update; return the chain's result.

        Returns ``None`` without calling any handler when the update is of an
        unrecognized kind.  Handler exceptions propagate to the caller.
        """
        return self._process(self.decode(raw))

    def _process(self, update: Update, queued: Optional[bool] = None) -> Any:
        info = classify(update, queued)
        if info is None:
            return None
        logger.debug("Dispatching update", extra={"update_id": info.id, "kind": info.kind.value})
        return self.dispatch(info)

    def handle_batch(self, updates: List[RawUpdate], queued: bool = False) -> None:
        """Process a batch from the update source, isolating each update.

        Undecodable updates are logged and skipped.  A failing handler is
        logged and reported through the ``error`` signal, and processing
        continues with the next update.  Awaitable results are scheduled as
        tasks on the running event loop.
        """
        for raw in updates:
            try:
                update = self.decode(raw)
            except UpdateDecodeError as exc:
                logger.warning("Skipping undecodable update", extra={"error": str(exc)})
                continue

            info = classify(update, queued)
            if info is None:
                continue

            try:
                result = self.dispatch(info)
            except Exception as exc:
                logger.exception("Handler failed", extra={"update_id": info.id, "kind": info.kind.value})
                self._events.emit(ERROR, exc, info)
                continue

            if inspect.isawaitable(result):
                self._schedule(result, info)

    def _schedule(self, awaitable: Any, info: IncomingUpdate) -> None:
        future = asyncio.ensure_future(awaitable)
        self._pending.add(future)
        future.add_done_callback(functools.partial(self._on_deferred_done, info))

    def _on_deferred_done(self, info: IncomingUpdate, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Deferred handler result failed",
                exc_info=exc,
                extra={"update_id": info.id, "kind": info.kind.value},
            )
            self._events.emit(ERROR, exc, info)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def listen(self) -> "Bot":
        """Start long-polling on the running event loop (idempotent)."""
        if self._update_loop is None:
            self._update_loop = UpdateLoop(
                self.client,
                on_batch=self.handle_batch,
                options=self.options.loop,
                on_sync=lambda: self._events.emit(SYNC),
                on_error=lambda exc: self._events.emit(UPDATE_ERROR, exc, True),
            )
        self._update_loop.start()
        return self

    def stop(self) -> "Bot":
        if self._update_loop is not None:
            self._update_loop.stop()
            self._update_loop = None
        return self

    @property
    def listening(self) -> bool:
        return self._update_loop is not None and self._update_loop.running

    async def run_forever(self) -> None:
        """Listen until :meth:`stop` is called or this coroutine is cancelled."""
        self.listen()
        loop = self._update_loop
        try:
            await loop.task
        except asyncio.CancelledError:
            # stop() was called from a handler: a normal exit.
            if self._update_loop is loop:
                raise
        finally:
            if self._update_loop is loop:
                self.stop()

    async def drain(self) -> None:
        """Wait for every scheduled deferred handler result to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def use(self, handler: Optional[Handler] = None) -> Registration:
        """Register *handler* for every update."""
        if handler is None:
            return self._decorator(self.use)
        return super().use(handler)

    def _decorator(self, register: Callable[[Handler], Any]) -> Callable[[Handler], Handler]:
        def decorator(func: Handler) -> Handler:
            register(func)
            return func

        return decorator

    def _on_kind(self, kind: UpdateKind, handler: Optional[Handler]) -> Registration:
        if handler is None:
            return self._decorator(functools.partial(self._on_kind, kind))
        _check_handler(handler)
        return self.use(filter_handler(kind_is(kind), handler))

    def _on_content(self, field: str, handler: Optional[Handler]) -> Registration:
        if handler is None:
            return self._decorator(functools.partial(self._on_content, field))
        _check_handler(handler)
        return self.on_message(filter_handler(message_has(field), handler))

    def on_message(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.MESSAGE, handler)

    def on_edited_message(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.EDITED_MESSAGE, handler)

    def on_channel_post(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.CHANNEL_POST, handler)

    def on_edited_channel_post(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.EDITED_CHANNEL_POST, handler)

    def on_inline_query(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.INLINE_QUERY, handler)

    def on_chosen_inline_result(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.CHOSEN_INLINE_RESULT, handler)

    def on_callback_query(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.CALLBACK_QUERY, handler)

    def on_shipping_query(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.SHIPPING_QUERY, handler)

    def on_pre_checkout_query(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_kind(UpdateKind.PRE_CHECKOUT_QUERY, handler)

    def on_poll_update(self, handler: Optional[Handler] = None) -> Registration:
        """Register *handler* for standalone poll state updates.

        See :meth:`on_poll` for messages that contain a poll.
        """
        return self._on_kind(UpdateKind.POLL, handler)

    # Message content ─────────────────────────────────────────────────────

    def on_text(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("text", handler)

    def on_audio(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("audio", handler)

    def on_document(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("document", handler)

    def on_animation(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("animation", handler)

    def on_game(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("game", handler)

    def on_photo(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("photo", handler)

    def on_sticker(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("sticker", handler)

    def on_video(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("video", handler)

    def on_voice(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("voice", handler)

    def on_video_note(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("video_note", handler)

    def on_contact(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("contact", handler)

    def on_location(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("location", handler)

    def on_venue(self, handler: Optional[Handler] = None) -> Registration:
        return self._on_content("venue", handler)

    def on_poll(self, handler: Optional[Handler] = None) -> Registration:
        """Register *handler* for messages that contain a poll."""
        return self._on_content("poll", handler)

    # Commands ────────────────────────────────────────────────────────────

    def on_command(self, *patterns_and_handler: Any) -> "Bot":
        """Register a handler for slash commands.

        Accepts zero or more name patterns (``str`` or compiled regex)
        followed by the handler.  With no patterns every command matches::

            bot.on_command("start", "help", handle_start)
            bot.on_command(re.compile(r"^set_\\w+$"), handle_setter)

        The handler sees ``info.command`` populated.  Use :meth:`command`
        for the decorator form.

        Raises:
            InvalidHandlerError: If the last argument is not a callable
                handler, or any earlier argument is not a pattern.
        """
        args = list(patterns_and_handler)
        if not args or not callable(args[-1]) or is_command_pattern(args[-1]):
            last = args[-1] if args else None
            raise InvalidHandlerError(f"Invalid handler was passed: {last!r}", last)
        handler = args.pop()
        _check_patterns(args)
        return self.on_message(filter_handler(command_matches(args), handler))

    def command(self, *patterns: CommandPattern) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`on_command`::

            @bot.command("echo")
            def echo(info, next): ...

        Raises:
            InvalidHandlerError: If any argument is not a pattern.
        """
        _check_patterns(patterns)
        return self._decorator(lambda func: self.on_command(*patterns, func))
