"""Per-bot mutable state read and written by the poll loop."""

from __future__ import annotations

import dataclasses
from typing import Callable

from sdk.models import InlineQuery
from bot.actions import NOTHING, Action
from bot.commands import CommandTable


def _ignore_inline(_: InlineQuery) -> Action:
    return NOTHING


@dataclasses.dataclass
class Session:
    """Offset cursor, command table and inline handler for one bot.

    ``offset`` is the id of the next update to fetch.  It starts at 0 and is
    only ever moved forward, by :meth:`advance`.  The dispatcher is its
    single writer; it is kept in memory only, so after a restart the last
    unacknowledged update may be delivered again.
    """

    commands: CommandTable = dataclasses.field(default_factory=CommandTable)
    inline_handler: Callable[[InlineQuery], Action] = _ignore_inline
    offset: int = 0

    def advance(self, update_id: int) -> int:
        """Move the cursor past *update_id*; never moves it backwards."""
        self.offset = max(self.offset, update_id + 1)
        return self.offset
