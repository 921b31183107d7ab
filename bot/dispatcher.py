"""Update dispatcher and polling loop.

Each :meth:`Dispatcher.pop_update` call walks one cycle of
fetch → advance offset → acknowledge → dispatch:

1. ask ``getUpdates`` for at most one update at the current offset;
2. move the offset past the update, if there was one;
3. call ``getUpdates`` again with ``limit=0`` so the server drops what we
   have seen (the reply is ignored);
4. route the update: inline query first, then a matching enabled command,
   otherwise hand the update back untouched.

The two-call acknowledgment is not atomic: if the process dies between
fetching and acknowledging, the update is delivered again after restart
(at-least-once delivery).

Calls are strictly sequential (one update in flight, one API call at a
time), so the offset needs no locking.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from core.logger import CourierLogger
from core.result import NO_UPDATE, Failure, Result, Success, is_no_update
from sdk.client import TelegramClient
from sdk.models import Update
from bot.evaluator import Evaluator
from bot.session import Session

logger = CourierLogger.get_logger()

# Seconds to wait after a failed fetch before polling again.
FAILURE_DELAY = 5.0


class Dispatcher:
    """Long-polling loop bound to one client and one :class:`Session`.

    Args:
        client: API client.
        session: Offset cursor, commands and inline handler.
        poll_timeout: Long-poll timeout sent with the fetch; ``None`` leaves
            it out so the server answers immediately.
    """

    def __init__(
        self,
        client: TelegramClient,
        session: Session | None = None,
        poll_timeout: int | None = None,
    ) -> None:
        self.client = client
        self.session = session if session is not None else Session()
        self.poll_timeout = poll_timeout
        self.evaluator = Evaluator(client, self)

    # ── fetching ─────────────────────────────────────────────────────────

    async def get_updates(self) -> Result[list[Update]]:
        """Read the backlog from the current offset without moving it."""
        return await self.client.get_updates(offset=self.session.offset, timeout=self.poll_timeout)

    async def _fetch_one(self) -> Result[Update]:
        result = await self.client.get_updates(offset=self.session.offset, limit=1, timeout=self.poll_timeout)
        if not isinstance(result, Success):
            return result
        if not result.value:
            return Failure(NO_UPDATE)
        return Success(result.value[0])

    async def peek_update(self) -> Result[Update]:
        """Next update at the current offset; nothing is advanced or acknowledged."""
        return await self._fetch_one()

    async def clear_update(self) -> None:
        """Tell the server to forget every update below the current offset."""
        await self.client.get_updates(offset=self.session.offset, limit=0)

    # ── one cycle ────────────────────────────────────────────────────────

    async def pop_update(self, run_commands: bool = True) -> Result[Update]:
        """Fetch, acknowledge and (optionally) dispatch the next update.

        Returns:
            ``Success`` with a bare ``Update(update_id=…)`` when an inline
            handler or command consumed the update, ``Success`` with the full
            update when nothing did (or *run_commands* is off), the fetch's
            ``Failure`` as is, or ``Failure(NO_UPDATE)`` when the backlog was
            empty.
        """
        fetched = await self._fetch_one()
        if is_no_update(fetched):
            await self.clear_update()
            return fetched
        if not isinstance(fetched, Success):
            return fetched

        update = fetched.value
        offset = self.session.advance(update.update_id)
        logger.debug("Offset advanced", extra={"update_id": update.update_id, "offset": offset})

        await self.clear_update()

        if not run_commands:
            return Success(update)
        return await self.process_update(update)

    async def process_update(self, update: Update) -> Result[Update]:
        """Route *update* to the inline handler or a command.

        Precedence is inline query, then command, then pass-through; only one
        path runs.
        """
        update_id = update.update_id

        if update.inline_query is not None:
            logger.info("Dispatching inline query", extra={"update_id": update_id})
            await self.evaluator.evaluate(self.session.inline_handler(update.inline_query))
            return Success(Update(update_id=update_id))

        if update.message is not None:
            command = self.session.commands.find(update.message)
            if command is not None:
                logger.info(
                    "Dispatching command",
                    extra={"update_id": update_id, "command": command.name, "chat_id": update.message.chat.id},
                )
                await self.evaluator.evaluate(command.handler(update.message))
                return Success(Update(update_id=update_id))

        logger.debug("Update not consumed", extra={"update_id": update_id})
        return Success(update)

    # ── loop ─────────────────────────────────────────────────────────────

    async def run(
        self,
        run_commands: bool = True,
        stop: Callable[[], bool] | None = None,
        idle_delay: float = 0.0,
        failure_delay: float = FAILURE_DELAY,
    ) -> None:
        """Pop updates until *stop* returns ``True`` (forever by default).

        The empty-backlog sentinel is ignored and followed by *idle_delay*
        seconds of sleep.  Any other failure (bad token, a competing poller,
        an update that cannot be decoded) is logged and followed by
        *failure_delay* seconds of sleep before the next fetch.  Transport
        exceptions are not caught.
        """
        logger.info("Polling for updates", extra={"offset": self.session.offset, "poll_timeout": self.poll_timeout})
        while stop is None or not stop():
            result = await self.pop_update(run_commands=run_commands)
            if is_no_update(result):
                if idle_delay:
                    await asyncio.sleep(idle_delay)
                continue
            if isinstance(result, Failure):
                logger.warning(
                    "getUpdates failed, pausing before the next fetch",
                    extra={"error": result.description, "offset": self.session.offset, "delay": failure_delay},
                )
                if failure_delay:
                    await asyncio.sleep(failure_delay)
