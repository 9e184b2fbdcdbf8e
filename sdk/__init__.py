"""Telegram Bot API SDK — Pydantic models, blocking client, and exceptions.

Usage::

    from sdk import SwitchyardClient, APIException
    from sdk.models import Update, Message
"""

from sdk.client import SwitchyardClient
from sdk.exceptions import APIException

__all__ = [
    "SwitchyardClient",
    "APIException",
]
