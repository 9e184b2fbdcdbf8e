"""SwitchyardClient — thin service layer over the Telegram Bot API.

The dispatcher itself never calls this client; it is handed to user code
through :attr:`bot.Bot.client`, and the update loop uses
:meth:`SwitchyardClient.get_updates`.  HTTP calls use ``requests`` and are
blocking; async callers offload them with :func:`asyncio.to_thread`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import requests

from core.logger import SwitchyardLogger
from sdk.exceptions import APIException

logger = SwitchyardLogger.get_logger()

DEFAULT_API_URL = "https://api.telegram.org"


class SwitchyardClient:
    """Client for the subset of Bot API methods a dispatcher-based bot needs.

    Every method POSTs a JSON payload to ``{base_url}/{method}`` and returns
    the ``result`` field of the response.  Non-2xx responses, and 2xx bodies
    with ``ok: false``, raise :class:`APIException`.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: int = _DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a client for the bot identified by *token*.

        Args:
            token: Bot token issued by BotFather.
            api_url: API root, for self-hosted Bot API servers.
            timeout: Default request timeout in seconds.
            session: Optional :class:`requests.Session` for connection reuse.
        """
        self._token = token
        self._base_url = f"{api_url.rstrip('/')}/bot{token}"
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def _post(self, method: str, payload: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> Any:
        """POST *payload* to *method* and return the decoded ``result``.

        Raises:
            APIException: On a non-2xx status or an ``ok: false`` body.
            requests.RequestException: On transport-level failures.
        """
        url = f"{self._base_url}/{method}"
        response = self._session.post(url, json=payload or {}, timeout=timeout or self._timeout)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if not response.ok or not body.get("ok", False):
            logger.warning(
                "Bot API call failed",
                extra={"api_endpoint": method, "status_code": response.status_code, "api_response": body},
            )
            raise APIException(response.status_code, body, method=method)
        return body.get("result")

    @staticmethod
    def _payload(**fields: Any) -> Dict[str, Any]:
        """Build a request payload, dropping ``None`` values."""
        return {key: value for key, value in fields.items() if value is not None}

    # ------------------------------------------------------------------
    #  Bot API methods
    # ------------------------------------------------------------------

    def get_me(self) -> Dict[str, Any]:
        """Return basic information about the bot as a User dict."""
        return self._post("getMe")

    def get_updates(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = 100,
        timeout: Optional[int] = 0,
        allowed_updates: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Long-poll for updates and return them as raw dicts.

        The HTTP timeout is the long-poll *timeout* plus the client default,
        so a quiet long-poll does not surface as a transport error.
        """
        payload = self._payload(offset=offset, limit=limit, timeout=timeout, allowed_updates=allowed_updates)
        return self._post("getUpdates", payload, timeout=(timeout or 0) + self._timeout)

    def delete_webhook(self, drop_pending_updates: Optional[bool] = None) -> bool:
        """Remove webhook integration so ``getUpdates`` can be used."""
        return self._post("deleteWebhook", self._payload(drop_pending_updates=drop_pending_updates))

    def send_message(
        self,
        chat_id: Union[int, str],
        text: str,
        parse_mode: Optional[str] = None,
        reply_to_message_id: Optional[int] = None,
        disable_notification: Optional[bool] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a text message; returns the sent Message dict."""
        payload = self._payload(
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
            reply_to_message_id=reply_to_message_id,
            disable_notification=disable_notification,
            reply_markup=reply_markup,
        )
        logger.debug("Sending message", extra={"chat_id": chat_id, "api_endpoint": "sendMessage", "text_preview": text[:80]})
        return self._post("sendMessage", payload)

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: Optional[bool] = None,
        url: Optional[str] = None,
        cache_time: Optional[int] = None,
    ) -> bool:
        """Acknowledge a callback query so the spinner disappears for the user."""
        payload = self._payload(
            callback_query_id=callback_query_id,
            text=text,
            show_alert=show_alert,
            url=url,
            cache_time=cache_time,
        )
        return self._post("answerCallbackQuery", payload)

    def answer_inline_query(
        self,
        inline_query_id: str,
        results: List[Dict[str, Any]],
        cache_time: Optional[int] = None,
        is_personal: Optional[bool] = None,
        next_offset: Optional[str] = None,
    ) -> bool:
        payload = self._payload(
            inline_query_id=inline_query_id,
            results=results,
            cache_time=cache_time,
            is_personal=is_personal,
            next_offset=next_offset,
        )
        return self._post("answerInlineQuery", payload)

    def answer_shipping_query(
        self,
        shipping_query_id: str,
        ok: bool,
        shipping_options: Optional[List[Dict[str, Any]]] = None,
        error_message: Optional[str] = None,
    ) -> bool:
        """Reply to a shipping query; *shipping_options* is required when *ok*."""
        if ok and not shipping_options:
            raise ValueError("shipping_options is required when ok is True")
        if not ok and not error_message:
            raise ValueError("error_message is required when ok is False")
        payload = self._payload(
            shipping_query_id=shipping_query_id,
            ok=ok,
            shipping_options=shipping_options,
            error_message=error_message,
        )
        return self._post("answerShippingQuery", payload)

    def answer_pre_checkout_query(
        self,
        pre_checkout_query_id: str,
        ok: bool,
        error_message: Optional[str] = None,
    ) -> bool:
        if not ok and not error_message:
            raise ValueError("error_message is required when ok is False")
        payload = self._payload(pre_checkout_query_id=pre_checkout_query_id, ok=ok, error_message=error_message)
        return self._post("answerPreCheckoutQuery", payload)
