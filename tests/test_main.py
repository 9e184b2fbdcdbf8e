"""Tests for the example bot wiring in ``main.py``."""

import sys
import os
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from bot import Bot
from main import register_handlers
from sdk.client import SwitchyardClient


@pytest.fixture()
def bot():
    return register_handlers(Bot("123:TEST", client=MagicMock(spec=SwitchyardClient)))


def _text_update(text: str) -> dict:
    return {
        "update_id": 1,
        "message": {
            "message_id": 1,
            "date": 0,
            "chat": {"id": 77, "type": "private"},
            "from": {"id": 5, "is_bot": False, "first_name": "Ada"},
            "text": text,
        },
    }


class TestExampleHandlers:
    @pytest.mark.asyncio
    async def test_start_greets_user(self, bot) -> None:
        await bot.process_update(_text_update("/start"))
        bot.client.send_message.assert_called_once()
        chat_id, text = bot.client.send_message.call_args.args
        assert chat_id == 77
        assert "Ada" in text

    @pytest.mark.asyncio
    async def test_help_lists_commands(self, bot) -> None:
        await bot.process_update(_text_update("/help"))
        text = bot.client.send_message.call_args.args[1]
        assert "/start" in text and "/echo" in text

    @pytest.mark.asyncio
    async def test_echo_repeats_payload(self, bot) -> None:
        await bot.process_update(_text_update("/echo@testbot hello there"))
        bot.client.send_message.assert_called_once_with(77, "hello there")

    @pytest.mark.asyncio
    async def test_unknown_command(self, bot) -> None:
        await bot.process_update(_text_update("/nope"))
        assert "Unknown command /nope" in bot.client.send_message.call_args.args[1]

    @pytest.mark.asyncio
    async def test_callback_acknowledged(self, bot) -> None:
        update = {
            "update_id": 2,
            "callback_query": {"id": "cb9", "from": {"id": 5, "is_bot": False, "first_name": "Ada"}, "chat_instance": "c"},
        }
        await bot.process_update(update)
        bot.client.answer_callback_query.assert_called_once_with("cb9")

    def test_plain_text_is_not_answered(self, bot) -> None:
        assert bot.process_update(_text_update("hello")) is None
        bot.client.send_message.assert_not_called()
