"""Tests for update classification."""

import dataclasses
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.commands import Command
from core.incoming import IncomingUpdate, UpdateKind, classify
from sdk.models import Update

_USER = {"id": 5, "is_bot": False, "first_name": "Ada"}
_MESSAGE = {"message_id": 1, "date": 0, "chat": {"id": 10, "type": "private"}, "text": "hi"}
_CHANNEL_MESSAGE = {"message_id": 2, "date": 0, "chat": {"id": -100, "type": "channel"}, "text": "news"}
_POLL = {
    "id": "p1",
    "question": "?",
    "options": [],
    "total_voter_count": 0,
    "is_closed": False,
    "is_anonymous": True,
    "type": "regular",
    "allows_multiple_answers": False,
}
_ADDRESS = {
    "country_code": "DE",
    "state": "",
    "city": "Berlin",
    "street_line1": "a",
    "street_line2": "",
    "post_code": "10115",
}

VARIANTS = {
    "message": _MESSAGE,
    "edited_message": _MESSAGE,
    "channel_post": _CHANNEL_MESSAGE,
    "edited_channel_post": _CHANNEL_MESSAGE,
    "inline_query": {"id": "iq", "from": _USER, "query": "cats", "offset": ""},
    "chosen_inline_result": {"result_id": "r1", "from": _USER, "query": "cats"},
    "callback_query": {"id": "cb", "from": _USER, "chat_instance": "ci", "data": "x"},
    "shipping_query": {"id": "sq", "from": _USER, "invoice_payload": "p", "shipping_address": _ADDRESS},
    "pre_checkout_query": {"id": "pq", "from": _USER, "currency": "EUR", "total_amount": 100, "invoice_payload": "p"},
    "poll": _POLL,
}


def _make_update(update_id: int = 1, **variants) -> Update:
    return Update.model_validate({"update_id": update_id, **variants})


class TestClassifyKinds:
    @pytest.mark.parametrize("field", list(VARIANTS))
    def test_kind_matches_variant(self, field) -> None:
        info = classify(_make_update(**{field: VARIANTS[field]}))
        assert info is not None
        assert info.kind is UpdateKind(field)
        assert info.kind.value == field

    @pytest.mark.parametrize("field", list(VARIANTS))
    def test_edited_only_for_edited_kinds(self, field) -> None:
        info = classify(_make_update(**{field: VARIANTS[field]}))
        assert info.edited is (field in ("edited_message", "edited_channel_post"))

    def test_update_and_id(self) -> None:
        update = _make_update(42, message=_MESSAGE)
        info = classify(update)
        assert info.update is update
        assert info.id == 42


class TestClassifyPayload:
    def test_message_aliases_chat(self) -> None:
        info = classify(_make_update(message=_MESSAGE))
        assert info.msg.text == "hi"
        assert info.chat.id == 10
        assert info.channel is None
        assert info.is_message_like

    def test_channel_post_aliases_channel(self) -> None:
        info = classify(_make_update(edited_channel_post=_CHANNEL_MESSAGE))
        assert info.channel.id == -100
        assert info.chat is None
        assert info.edited is True

    @pytest.mark.parametrize("field", ["inline_query", "callback_query", "shipping_query", "pre_checkout_query"])
    def test_queries(self, field) -> None:
        update = _make_update(**{field: VARIANTS[field]})
        info = classify(update)
        assert info.query is getattr(update, field)
        assert info.msg is None
        assert not info.is_message_like

    def test_chosen_inline_result(self) -> None:
        info = classify(_make_update(chosen_inline_result=VARIANTS["chosen_inline_result"]))
        assert info.result.result_id == "r1"
        assert info.query is None

    def test_poll(self) -> None:
        info = classify(_make_update(poll=_POLL))
        assert info.poll.id == "p1"

    def test_queued_flag_carried(self) -> None:
        assert classify(_make_update(message=_MESSAGE), queued=True).queued is True
        assert classify(_make_update(message=_MESSAGE)).queued is None


class TestClassifyEdgeCases:
    def test_no_variant_is_absent(self) -> None:
        assert classify(_make_update()) is None

    def test_unrecognized_kind_is_absent(self) -> None:
        answer = {"poll_id": "p1", "user": _USER, "option_ids": [0]}
        assert classify(_make_update(poll_answer=answer)) is None

    def test_priority_order_breaks_ties(self) -> None:
        info = classify(_make_update(callback_query=VARIANTS["callback_query"], channel_post=_CHANNEL_MESSAGE))
        assert info.kind is UpdateKind.CHANNEL_POST

    def test_reclassify_is_idempotent(self) -> None:
        update = _make_update(message=_MESSAGE)
        first, second = classify(update), classify(update)
        assert first is not second
        assert first == second

    def test_command_cache_excluded_from_equality(self) -> None:
        update = _make_update(message=_MESSAGE)
        first, second = classify(update), classify(update)
        first.cache_command(Command(name="start"))
        assert first == second

    @pytest.mark.parametrize("field, value", [("kind", UpdateKind.CALLBACK_QUERY), ("msg", None), ("command", None)])
    def test_record_is_read_only(self, field, value) -> None:
        info = classify(_make_update(message=_MESSAGE))
        with pytest.raises(dataclasses.FrozenInstanceError):
            setattr(info, field, value)
        assert info.kind is UpdateKind.MESSAGE

    def test_kind_order_is_priority_order(self) -> None:
        assert [kind.value for kind in UpdateKind] == list(VARIANTS)

    def test_record_type(self) -> None:
        assert isinstance(classify(_make_update(poll=_POLL)), IncomingUpdate)
