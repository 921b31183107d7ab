"""Example command and inline handlers.

Each handler is a pure function from the incoming object to an
:class:`~bot.actions.Action`; none of them touch the network.  The
dispatcher evaluates whatever they return.
"""

from core.logger import CourierLogger
from core.result import Success
from sdk.models import (
    InlineQuery,
    InlineQueryResultArticle,
    InputTextMessageContent,
    Message,
)
from bot.actions import (
    NOTHING,
    Action,
    AnswerInlineQuery,
    GetUserProfilePhotos,
    SendMessage,
)
from bot.commands import CommandTable, argument_text

logger = CourierLogger.get_logger()

commands = CommandTable()


@commands.register("say_hi", description="Say hi!")
def say_hi(message: Message) -> Action:
    """Greet the sender by name when we know it."""
    name = message.from_field.first_name if message.from_field else None
    return SendMessage(message.chat.id, f"Hi, {name}!" if name else "Hi")


@commands.register("ping", description="Check the bot is alive")
def ping(message: Message) -> Action:
    return SendMessage(message.chat.id, "pong")


@commands.register("echo", description="Repeat the text after the command")
def echo(message: Message) -> Action:
    text = argument_text(message.text or "")
    if not text.strip():
        return SendMessage(message.chat.id, "Usage: /echo <text>", reply_to=message.message_id)
    return SendMessage(message.chat.id, text, reply_to=message.message_id)


@commands.register("my_pics", description="Count profile pictures")
def my_pics(message: Message) -> Action:
    """Look up the sender's profile photos, then report the count.

    The reply depends on how the lookup went, so it is decided inside the
    continuation.
    """
    chat_id = message.chat.id
    if message.from_field is None:
        return SendMessage(chat_id, "Couldn't get your profile pictures!")

    def report(result) -> Action:
        if isinstance(result, Success):
            return SendMessage(chat_id, f"Your photos: {result.value.total_count}")
        return SendMessage(chat_id, "Couldn't get your profile pictures!")

    return GetUserProfilePhotos(message.from_field.id, then=report)


def inline_echo(query: InlineQuery) -> Action:
    """Answer every inline query with one article echoing the query text."""
    logger.info("Inline query received", extra={"inline_query_id": query.id, "query": query.query[:80]})
    if not query.query:
        return NOTHING
    article = InlineQueryResultArticle(
        id="QueryTest",
        title="Test",
        input_message_content=InputTextMessageContent(message_text=query.query),
    )
    return AnswerInlineQuery(query.id, [article])
