"""Exception hierarchy for the Switchyard dispatch core."""

from typing import Any, Optional


class SwitchyardError(Exception):
    """Base class for every error raised by the dispatch core."""


class InvalidHandlerError(SwitchyardError, TypeError):
    """A registration was given something that cannot act as a handler.

    Raised synchronously at registration time, never during dispatch.

    Attributes:
        value: The offending object.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        self.value = value
        super().__init__(message)


class UpdateDecodeError(SwitchyardError, ValueError):
    """A raw payload could not be turned into an :class:`~sdk.models.Update`.

    Attributes:
        raw: The payload as received (truncated for ``str``/``bytes``).
        cause: The underlying JSON or validation error, if any.
    """

    _PREVIEW_LEN: int = 200

    def __init__(self, message: str, raw: Any = None, cause: Optional[BaseException] = None) -> None:
        if isinstance(raw, (str, bytes)):
            raw = raw[: self._PREVIEW_LEN]
        self.raw = raw
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{message}{detail}")
