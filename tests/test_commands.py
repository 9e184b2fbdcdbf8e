"""Tests for slash-command parsing and matching."""

import re
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.commands import Command, is_command_pattern, match_command, parse_command
from sdk.models import Chat, Message, MessageEntity


def _make_message(text, entities=None) -> Message:
    return Message(message_id=1, date=0, chat=Chat(id=1, type="private"), text=text, entities=entities)


def _command_entity(length: int, offset: int = 0) -> MessageEntity:
    return MessageEntity(type="bot_command", offset=offset, length=length)


# ── parse_command ────────────────────────────────────────────────────────────


class TestParseCommand:
    def test_name_username_payload(self) -> None:
        cmd = parse_command(_make_message("/start@mybot hello"))
        assert cmd == Command(name="start", payload="hello", username="mybot")

    def test_bare_command(self) -> None:
        cmd = parse_command(_make_message("/start"))
        assert cmd.name == "start"
        assert cmd.payload == ""
        assert cmd.username is None

    def test_payload_keeps_inner_whitespace(self) -> None:
        cmd = parse_command(_make_message("/echo  a  b\nc  "))
        assert cmd.payload == "a  b\nc"

    def test_case_preserved(self) -> None:
        assert parse_command(_make_message("/START")).name == "START"

    @pytest.mark.parametrize("text", ["hello", "", " /start", "/", "/start-now", "//start"])
    def test_not_a_command(self, text) -> None:
        assert parse_command(_make_message(text)) is None

    def test_no_text(self) -> None:
        assert parse_command(_make_message(None)) is None

    def test_entities_confirm_command(self) -> None:
        cmd = parse_command(_make_message("/help me", entities=[_command_entity(5)]))
        assert cmd.name == "help"
        assert cmd.payload == "me"

    def test_first_entity_must_be_command_at_start(self) -> None:
        bold = MessageEntity(type="bold", offset=0, length=6)
        assert parse_command(_make_message("/start", entities=[bold])) is None


# ── match_command ────────────────────────────────────────────────────────────


class TestMatchCommand:
    def test_empty_patterns_match_all(self) -> None:
        assert match_command("start", []) is True

    def test_string_mismatch(self) -> None:
        assert match_command("start", ["stop"]) is False

    def test_string_is_case_insensitive(self) -> None:
        assert match_command("Start", ["START"]) is True

    def test_leading_slash_in_pattern_ignored(self) -> None:
        assert match_command("start", ["/start"]) is True

    def test_regex_pattern(self) -> None:
        assert match_command("START", [re.compile(r"^start$", re.I)]) is True

    def test_regex_is_case_sensitive_unless_flagged(self) -> None:
        assert match_command("START", [re.compile(r"^start$")]) is False

    def test_any_pattern_suffices(self) -> None:
        assert match_command("help", ["start", re.compile("^he"), "stop"]) is True

    def test_accepts_generator(self) -> None:
        assert match_command("a", (p for p in ["b", "a"])) is True


class TestCommandHelpers:
    def test_is_named(self) -> None:
        cmd = Command(name="Echo")
        assert cmd.is_named("/echo")
        assert not cmd.is_named("ech")

    @pytest.mark.parametrize("value,expected", [("x", True), (re.compile("x"), True), (1, False), (None, False), (print, False)])
    def test_is_command_pattern(self, value, expected) -> None:
        assert is_command_pattern(value) is expected
