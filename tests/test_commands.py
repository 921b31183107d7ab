"""Tests for the command table and its helpers."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sdk.models import Message, Update
from bot.actions import NOTHING, SendMessage
from bot.commands import Command, CommandTable, argument_text, command_token, is_command, tokenize

from fakes import update_json


def _message(text: str | None, chat_id: int = 42) -> Message:
    return Update.model_validate(update_json(1, text=text, chat_id=chat_id)).message


def _reply(text: str):
    return lambda message: SendMessage(message.chat.id, text)


# ── Token helpers ────────────────────────────────────────────────────────────


class TestTokens:
    """Validate command token extraction."""

    def test_command_token(self) -> None:
        assert command_token("/ping") == "/ping"
        assert command_token("/ping@mybot extra words") == "/ping"
        assert command_token("  /echo   hi") == "/echo"
        assert command_token("") == ""
        assert command_token("   ") == ""

    def test_tokenize(self) -> None:
        assert tokenize("/echo hello   world") == ["hello", "world"]
        assert tokenize("/echo") == []
        assert tokenize("") == []

    def test_argument_text_keeps_spacing(self) -> None:
        assert argument_text("/echo hello   world") == "hello   world"
        assert argument_text("/echo@MyBot line one\n  line two") == "line one\n  line two"
        assert argument_text("/echo") == ""
        assert argument_text("") == ""

    def test_is_command(self) -> None:
        assert is_command(Update.model_validate(update_json(1, text="/ping")))
        assert not is_command(Update.model_validate(update_json(1, text="ping")))
        assert not is_command(Update.model_validate(update_json(1)))


# ── Registration ─────────────────────────────────────────────────────────────


class TestRegistration:
    """Validate building a table."""

    def test_help_is_always_first(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert [c.name for c in table] == ["help", "ping"]
        assert len(table) == 2

    def test_register_decorator(self) -> None:
        table = CommandTable()

        @table.register("ping", description="Check the bot is alive")
        def ping(message):
            return SendMessage(message.chat.id, "pong")

        command = table.get("ping")
        assert command is not None
        assert command.handler is ping
        assert command.description == "Check the bot is alive"
        assert command.enabled is True

    def test_get_unknown(self) -> None:
        assert CommandTable().get("nope") is None


# ── Matching ─────────────────────────────────────────────────────────────────


class TestMatching:
    """Validate which command a message selects."""

    def test_match_runs_handler(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert table.match(_message("/ping")) == SendMessage(42, "pong")

    def test_bot_suffix_is_ignored(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert table.match(_message("/ping@courier_bot")) == SendMessage(42, "pong")

    def test_trailing_arguments_still_match(self) -> None:
        table = CommandTable([Command("echo", "Echo", _reply("echoed"))])
        assert table.find(_message("/echo hello")).name == "echo"

    def test_prefix_does_not_match(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert table.find(_message("/pingpong")) is None

    def test_case_sensitive(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert table.find(_message("/PING")) is None

    def test_first_match_wins(self) -> None:
        table = CommandTable([
            Command("dup", "first", _reply("one")),
            Command("dup", "second", _reply("two")),
        ])
        assert table.match(_message("/dup")) == SendMessage(42, "one")

    def test_disabled_command_is_skipped(self) -> None:
        table = CommandTable([
            Command("dup", "first", _reply("one"), enabled=False),
            Command("dup", "second", _reply("two")),
        ])
        assert table.match(_message("/dup")) == SendMessage(42, "two")

    def test_enable_and_disable(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert table.disable("ping") is True
        assert table.find(_message("/ping")) is None
        assert table.enable("ping") is True
        assert table.find(_message("/ping")).name == "ping"
        assert table.disable("missing") is False

    def test_non_command_text(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert table.match(_message("ping")) is NOTHING
        assert table.match(_message("hello /ping")) is NOTHING

    def test_message_without_text(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        message = Message.model_validate({"message_id": 1, "date": 0, "chat": {"id": 42, "type": "group"}})
        assert table.find(message) is None
        assert table.match(message) is NOTHING

    def test_unknown_command(self) -> None:
        assert CommandTable().match(_message("/nope")) is NOTHING


# ── Help ─────────────────────────────────────────────────────────────────────


class TestHelp:
    """Validate the implicit help command."""

    def test_help_text_lists_every_command(self) -> None:
        table = CommandTable([
            Command("ping", "Check the bot is alive", _reply("pong")),
            Command("secret", "Hidden", _reply("x"), enabled=False),
        ])
        assert table.help_text() == (
            "\n/help - Show this message"
            "\n/ping - Check the bot is alive"
            "\n/secret - Hidden"
        )

    def test_help_command_replies(self) -> None:
        table = CommandTable([Command("ping", "Check", _reply("pong"))])
        assert table.match(_message("/help", chat_id=5)) == SendMessage(
            5, "Commands:\n/help - Show this message\n/ping - Check"
        )

    def test_help_reflects_later_registrations(self) -> None:
        table = CommandTable()
        table.add(Command("late", "Added later", _reply("x")))
        action = table.match(_message("/help"))
        assert action.text.endswith("\n/late - Added later")
