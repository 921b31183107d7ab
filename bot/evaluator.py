"""Evaluator — runs :mod:`bot.actions` values against the API client.

Each parameterised action turns into exactly one client call.  For
fire-and-forget actions the outcome is dropped; for continuation-bearing
actions it is fed to ``then`` and the returned action runs next.  The
continuation chain is followed in a loop rather than by recursion, so an
arbitrarily long workflow never grows the stack, and only one call is in
flight at a time.

Nothing is retried.  A :class:`~core.result.Failure` reaches the
continuation like any other outcome; transport exceptions propagate to
the caller of :meth:`Evaluator.evaluate`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable

from core.logger import CourierLogger
from sdk.client import TelegramClient
from bot.actions import (
    CONTINUATION_ACTIONS,
    Action,
    AnswerInlineQuery,
    Chain,
    DownloadFile,
    ForwardMessage,
    GetFile,
    GetFileContents,
    GetMe,
    GetUpdates,
    GetUserProfilePhotos,
    Nothing,
    PeekUpdate,
    PopUpdate,
    ResendAudio,
    ResendDocument,
    ResendPhoto,
    ResendSticker,
    ResendVideo,
    ResendVoice,
    SendAudio,
    SendChatAction,
    SendDocument,
    SendLocation,
    SendMessage,
    SendPhoto,
    SendSticker,
    SendVideo,
    SendVoice,
)

if TYPE_CHECKING:
    from bot.dispatcher import Dispatcher

logger = CourierLogger.get_logger()


class Evaluator:
    """Interpreter for actions.

    Args:
        client: API client every call goes through.
        dispatcher: Poll loop used by ``PeekUpdate`` / ``PopUpdate``.  An
            evaluator created by :class:`~bot.dispatcher.Dispatcher` is
            bound automatically.
    """

    def __init__(self, client: TelegramClient, dispatcher: Dispatcher | None = None) -> None:
        self._client = client
        self._dispatcher = dispatcher
        self._calls: dict[type[Action], Callable[[Any], Awaitable[Any]]] = {
            GetMe: lambda a: client.get_me(),
            SendMessage: lambda a: client.send_message(
                a.chat_id, a.text, a.reply_to, a.reply_markup, a.parse_mode, a.disable_notification,
            ),
            ForwardMessage: lambda a: client.forward_message(a.chat_id, a.from_chat_id, a.message_id),
            SendChatAction: lambda a: client.send_chat_action(a.chat_id, a.action),
            SendLocation: lambda a: client.send_location(
                a.chat_id, a.latitude, a.longitude, a.reply_to, a.reply_markup,
            ),
            SendPhoto: lambda a: client.send_photo(a.chat_id, a.photo, a.caption, a.reply_to, a.reply_markup),
            ResendPhoto: lambda a: client.resend_photo(a.chat_id, a.photo, a.caption, a.reply_to, a.reply_markup),
            SendAudio: lambda a: client.send_audio(
                a.chat_id, a.audio, a.performer, a.title, a.reply_to, a.reply_markup,
            ),
            ResendAudio: lambda a: client.resend_audio(
                a.chat_id, a.audio, a.performer, a.title, a.reply_to, a.reply_markup,
            ),
            SendDocument: lambda a: client.send_document(a.chat_id, a.document, a.reply_to, a.reply_markup),
            ResendDocument: lambda a: client.resend_document(a.chat_id, a.document, a.reply_to, a.reply_markup),
            SendSticker: lambda a: client.send_sticker(a.chat_id, a.sticker, a.reply_to, a.reply_markup),
            ResendSticker: lambda a: client.resend_sticker(a.chat_id, a.sticker, a.reply_to, a.reply_markup),
            SendVideo: lambda a: client.send_video(
                a.chat_id, a.video, a.duration, a.caption, a.reply_to, a.reply_markup,
            ),
            ResendVideo: lambda a: client.resend_video(
                a.chat_id, a.video, a.duration, a.caption, a.reply_to, a.reply_markup,
            ),
            SendVoice: lambda a: client.send_voice(a.chat_id, a.voice, a.reply_to, a.reply_markup),
            ResendVoice: lambda a: client.resend_voice(a.chat_id, a.voice, a.reply_to, a.reply_markup),
            GetUserProfilePhotos: lambda a: client.get_user_profile_photos(a.user_id, a.offset, a.limit),
            GetFile: lambda a: client.get_file(a.file_id),
            GetFileContents: lambda a: client.get_file_contents(a.file_id),
            DownloadFile: lambda a: client.download_file(a.file),
            AnswerInlineQuery: lambda a: client.answer_inline_query(
                a.inline_query_id, a.results, a.cache_time, a.is_personal, a.next_offset,
            ),
            GetUpdates: lambda a: self._bound().get_updates(),
            PeekUpdate: lambda a: self._bound().peek_update(),
            PopUpdate: lambda a: self._bound().pop_update(),
        }

    def bind(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def _bound(self) -> Dispatcher:
        if self._dispatcher is None:
            raise RuntimeError("Update actions need an evaluator bound to a Dispatcher")
        return self._dispatcher

    async def evaluate(self, action: Action) -> None:
        """Run *action* and everything its continuations lead to.

        Raises:
            TypeError: If *action* (or a continuation's return value) is not
                an :class:`~bot.actions.Action`.
        """
        current: Action = action
        while True:
            if isinstance(current, Nothing):
                return
            if isinstance(current, Chain):
                await self.evaluate(current.first)
                current = current.second
                continue

            call = self._calls.get(type(current))
            if call is None:
                raise TypeError(f"Cannot evaluate {current!r}: not an Action")

            name = type(current).__name__
            logger.debug("Evaluating action", extra={"action": name})
            outcome = await call(current)

            if not isinstance(current, CONTINUATION_ACTIONS):
                return
            current = current.then(outcome)  # type: ignore[attr-defined]
