"""Exception hierarchy for the Switchyard Bot API client."""

from typing import Any, Dict, Optional


class APIException(Exception):
    """A Bot API call failed: non-2xx status, or a 2xx body with ``ok: false``.

    Attributes:
        status_code: HTTP status code returned by the API.
        response_body: Raw response body as a dict, when available.
        method: Bot API method that was called (e.g. ``"getUpdates"``).
        description: Telegram's error description.
        retry_after: Seconds to wait, when the API asked for it (HTTP 429).
    """

    def __init__(
        self,
        status_code: int,
        response_body: Optional[Dict[str, Any]] = None,
        method: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body or {}
        self.method = method
        self.description: str = self.response_body.get("description", "Unknown error")
        parameters = self.response_body.get("parameters") or {}
        self.retry_after: Optional[int] = parameters.get("retry_after")
        where = f" in {method}" if method else ""
        super().__init__(f"API error {status_code}{where}: {self.description}")
