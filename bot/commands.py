"""Command table — ordered slash-command → handler mapping.

Design:
- ``Command`` is a small mutable record: its ``enabled`` flag may be
  flipped at runtime by the embedding application.  Disabled commands are
  skipped when matching but still listed by ``/help``.
- ``CommandTable`` keeps commands in registration order with an implicit
  ``help`` command always first.  Matching walks the table in that order
  and the first enabled match wins.
- ``@table.register`` binds a handler, its name and a description in one
  place.

A command token is the first whitespace-separated word of the message with
any ``@botname`` suffix removed, so ``/ping@mybot`` and ``/ping`` both
select the ``ping`` command.  Comparison is case-sensitive.

The table is read by the dispatcher on every message and written only by
the embedding application (single writer, no locking).
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Iterator, Protocol, runtime_checkable

from core.logger import CourierLogger
from sdk.models import Message, Update
from bot.actions import NOTHING, Action, SendMessage

logger = CourierLogger.get_logger()


@runtime_checkable
class CommandHandler(Protocol):
    """Pure function from the triggering message to the action to run."""

    def __call__(self, message: Message) -> Action: ...  # noqa: E704


@dataclasses.dataclass(slots=True)
class Command:
    """Metadata for a single slash-command."""

    name: str                 # e.g. "ping", without the slash
    description: str          # shown in /help
    handler: CommandHandler
    enabled: bool = True


def command_token(text: str) -> str:
    """Return the command part of *text*: first word, ``@suffix`` stripped."""
    words = text.split()
    if not words:
        return ""
    return words[0].split("@")[0]


def tokenize(text: str) -> list[str]:
    """Arguments following the command token, split on whitespace."""
    return text.split()[1:]


def argument_text(text: str) -> str:
    """Everything after the command token, with its spacing and newlines kept."""
    parts = text.lstrip().split(None, 1)
    return parts[1] if len(parts) > 1 else ""


def is_command(update: Update) -> bool:
    """``True`` if *update* carries a message whose text starts with ``/``."""
    message = update.message
    return bool(message and message.text and message.text.startswith("/"))


class CommandTable:
    """Ordered command table with an implicit ``help`` command.

    Usage::

        commands = CommandTable()

        @commands.register("ping", description="Check the bot is alive")
        def ping(message: Message) -> Action:
            return SendMessage(message.chat.id, "pong")

        action = commands.match(message)
    """

    HELP_NAME = "help"

    def __init__(self, commands: list[Command] | None = None) -> None:
        help_command = Command(
            name=self.HELP_NAME,
            description="Show this message",
            handler=self._reply_with_help,
        )
        self._commands: list[Command] = [help_command]
        for command in commands or []:
            self.add(command)

    # ── registration ─────────────────────────────────────────────────────

    def add(self, command: Command) -> Command:
        """Append *command*; later entries lose ties to earlier ones."""
        self._commands.append(command)
        logger.debug("Command registered", extra={"command": command.name, "enabled": command.enabled})
        return command

    def register(
        self,
        name: str,
        *,
        description: str,
        enabled: bool = True,
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator that appends the decorated handler as command *name*.

        Example::

            @commands.register("say_hi", description="Say hi!")
            def say_hi(message): ...
        """
        def decorator(func: CommandHandler) -> CommandHandler:
            self.add(Command(name=name, description=description, handler=func, enabled=enabled))
            return func
        return decorator

    # ── runtime switches ─────────────────────────────────────────────────

    def get(self, name: str) -> Command | None:
        """Return the first command called *name*, or ``None``."""
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def enable(self, name: str) -> bool:
        return self._set_enabled(name, True)

    def disable(self, name: str) -> bool:
        return self._set_enabled(name, False)

    def _set_enabled(self, name: str, enabled: bool) -> bool:
        command = self.get(name)
        if command is None:
            return False
        command.enabled = enabled
        logger.info("Command toggled", extra={"command": name, "enabled": enabled})
        return True

    # ── lookup helpers ───────────────────────────────────────────────────

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def find(self, message: Message) -> Command | None:
        """First enabled command addressed by *message*, or ``None``."""
        text = message.text
        if not text or not text.startswith("/"):
            return None
        token = command_token(text)
        for command in self._commands:
            if command.enabled and token == "/" + command.name:
                return command
        return None

    def match(self, message: Message) -> Action:
        """Action produced by the matching command's handler, or ``NOTHING``."""
        command = self.find(message)
        if command is None:
            return NOTHING
        logger.info("Command matched", extra={"command": command.name, "chat_id": message.chat.id})
        return command.handler(message)

    def help_text(self) -> str:
        """One ``\\n/name - description`` line per command, enabled or not."""
        return "".join(f"\n/{command.name} - {command.description}" for command in self._commands)

    def _reply_with_help(self, message: Message) -> Action:
        return SendMessage(message.chat.id, "Commands:" + self.help_text())
