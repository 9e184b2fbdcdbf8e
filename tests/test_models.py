"""Tests for the Pydantic Bot API models."""

import sys
import os

import pytest
from pydantic import ValidationError

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sdk.models import (
    CallbackQuery,
    Chat,
    Message,
    MessageEntity,
    PhotoSize,
    Poll,
    Update,
    User,
)


def _message_dict(**extra) -> dict:
    data = {
        "message_id": 1,
        "date": 0,
        "chat": {"id": 10, "type": "private"},
        "from": {"id": 5, "is_bot": False, "first_name": "Ada"},
    }
    data.update(extra)
    return data


# ── User / Chat ──────────────────────────────────────────────────────────────


class TestUserModel:
    def test_minimal_user(self) -> None:
        u = User(id=42, is_bot=False, first_name="Ada")
        assert u.id == 42
        assert u.last_name is None
        assert u.username is None

    def test_missing_required_raises(self) -> None:
        with pytest.raises(ValidationError):
            User(id=1, is_bot=False)  # missing first_name


class TestChatModel:
    def test_channel(self) -> None:
        c = Chat(id=-100, type="channel", title="News")
        assert c.title == "News"


# ── Message ──────────────────────────────────────────────────────────────────


class TestMessageModel:
    def test_from_alias(self) -> None:
        """The 'from' key is exposed as ``from_user``."""
        msg = Message.model_validate(_message_dict())
        assert msg.from_user is not None
        assert msg.from_user.first_name == "Ada"

    def test_populate_by_name(self) -> None:
        msg = Message(message_id=1, date=0, chat=Chat(id=1, type="private"), from_user=User(id=2, is_bot=False, first_name="B"))
        assert msg.from_user.id == 2

    def test_content_fields_default_to_none(self) -> None:
        msg = Message.model_validate(_message_dict(text="hi"))
        assert msg.text == "hi"
        assert msg.photo is None
        assert msg.poll is None

    def test_photo_list(self) -> None:
        photo = [{"file_id": "a", "file_unique_id": "u", "width": 1, "height": 1}]
        msg = Message.model_validate(_message_dict(photo=photo))
        assert isinstance(msg.photo[0], PhotoSize)

    def test_entities(self) -> None:
        msg = Message.model_validate(_message_dict(text="/start", entities=[{"type": "bot_command", "offset": 0, "length": 6}]))
        assert msg.entities == [MessageEntity(type="bot_command", offset=0, length=6)]

    def test_nested_reply(self) -> None:
        msg = Message.model_validate(_message_dict(reply_to_message=_message_dict(text="original")))
        assert msg.reply_to_message.text == "original"

    def test_frozen(self) -> None:
        msg = Message.model_validate(_message_dict(text="hi"))
        with pytest.raises(ValidationError):
            msg.text = "changed"


# ── Update ───────────────────────────────────────────────────────────────────


class TestUpdateModel:
    def test_message_update(self) -> None:
        up = Update.model_validate({"update_id": 7, "message": _message_dict(text="hi")})
        assert up.update_id == 7
        assert up.message.text == "hi"
        assert up.callback_query is None

    def test_callback_query_update(self) -> None:
        data = {
            "update_id": 2,
            "callback_query": {
                "id": "cb1",
                "from": {"id": 5, "is_bot": False, "first_name": "Ada"},
                "chat_instance": "x",
                "data": "approve",
            },
        }
        up = Update.model_validate(data)
        assert isinstance(up.callback_query, CallbackQuery)
        assert up.callback_query.from_user.id == 5

    def test_poll_update(self) -> None:
        poll = {
            "id": "p1",
            "question": "?",
            "options": [{"text": "a", "voter_count": 1}],
            "total_voter_count": 1,
            "is_closed": False,
            "is_anonymous": True,
            "type": "regular",
            "allows_multiple_answers": False,
        }
        up = Update.model_validate({"update_id": 3, "poll": poll})
        assert isinstance(up.poll, Poll)

    def test_unknown_fields_ignored(self) -> None:
        """Payloads from newer API versions still decode."""
        up = Update.model_validate({"update_id": 4, "message_reaction": {"anything": 1}})
        assert up.update_id == 4
        assert up.message is None

    def test_missing_update_id_raises(self) -> None:
        with pytest.raises(ValidationError):
            Update.model_validate({"message": _message_dict()})

    def test_equal_by_value(self) -> None:
        data = {"update_id": 1, "message": _message_dict(text="x")}
        assert Update.model_validate(data) == Update.model_validate(data)
