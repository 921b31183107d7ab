"""Entry point: poll the Bot API and serve the example commands.

Run with ``python main.py`` after setting ``BOT_TOKEN`` (directly or in a
``.env`` file).
"""

import asyncio

import requests

from config import API_HOST, BOT_TOKEN, HTTP_TIMEOUT, POLL_TIMEOUT, RUN_COMMANDS
from core.logger import CourierLogger
from sdk.client import TelegramClient
from sdk.transport import RequestsTransport
from bot.dispatcher import Dispatcher
from bot.handlers import commands, inline_echo
from bot.session import Session

logger = CourierLogger.get_logger()

# Pause before polling again after the loop raised.
RESTART_DELAY = 5


def build_dispatcher() -> Dispatcher:
    """Wire config, client, session and dispatcher together.

    Raises:
        EnvironmentError: If ``BOT_TOKEN`` is not set.
    """
    if not BOT_TOKEN:
        raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")

    client = TelegramClient(BOT_TOKEN, RequestsTransport(timeout=HTTP_TIMEOUT), host=API_HOST)
    session = Session(commands=commands, inline_handler=inline_echo)
    return Dispatcher(client, session, poll_timeout=POLL_TIMEOUT)


async def poll_once(dispatcher: Dispatcher, restart_delay: float = RESTART_DELAY) -> None:
    """Run the poll loop until it raises, then log and pause.

    The offset is advanced and acknowledged before an update is dispatched,
    so restarting afterwards never replays the update that raised.
    """
    try:
        await dispatcher.run(run_commands=RUN_COMMANDS)
    except requests.RequestException as exc:
        logger.error("Transport error, restarting poll loop", extra={"error": str(exc), "offset": dispatcher.session.offset})
    except Exception as exc:
        # A handler's action failed locally, e.g. an upload path that cannot be read.
        logger.error(
            "Unexpected error, restarting poll loop",
            extra={"error": str(exc), "offset": dispatcher.session.offset},
            exc_info=True,
        )
    await asyncio.sleep(restart_delay)


async def main() -> None:
    dispatcher = build_dispatcher()
    logger.info("Courier bot is running", extra={"commands": [c.name for c in dispatcher.session.commands]})
    while True:
        await poll_once(dispatcher)


if __name__ == "__main__":
    asyncio.run(main())
