"""Bot application layer — actions, evaluator, command table and poll loop.

This package may import from ``core/`` and ``sdk/`` only.
"""

from bot.actions import NOTHING, Action, Chain, chain
from bot.commands import Command, CommandTable, argument_text, is_command, tokenize
from bot.dispatcher import Dispatcher
from bot.evaluator import Evaluator
from bot.session import Session

__all__ = [
    # Actions
    "Action",
    "Chain",
    "NOTHING",
    "chain",
    # Commands
    "Command",
    "CommandTable",
    "argument_text",
    "is_command",
    "tokenize",
    # Runtime
    "Dispatcher",
    "Evaluator",
    "Session",
]
