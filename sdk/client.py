"""TelegramClient — async service layer for the Bot API methods Courier uses.

Every method builds its request body with
:func:`sdk.envelope.build_request_object`, hands it to the configured
:class:`~sdk.transport.Transport`, and decodes the envelope into a
:class:`~core.result.Result`.  API errors come back as
:class:`~core.result.Failure` values; only transport-level exceptions
escape.

Upload methods (``send_photo``, ``send_audio``, …) take a local path and
post a multipart body; their ``resend_*`` twins re-send a file Telegram
already stores, addressed by its ``file_id``, as plain JSON.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Callable, Iterable, Sequence, TypeVar

from core.logger import CourierLogger
from core.result import Failure, Result, Success
from sdk.envelope import build_request_object, decode_result, parse_body
from sdk.models import (
    ChatAction,
    File,
    InlineQueryResult,
    Message,
    ParseMode,
    ReplyMarkup,
    Update,
    User,
    UserProfilePhotos,
    encode,
)
from sdk.multipart import content_type, encode_multipart, form_fields, guess_mime_type
from sdk.transport import RequestsTransport, Transport

logger = CourierLogger.get_logger()

T = TypeVar("T")

_JSON_HEADERS = {"Content-Type": "application/json"}


def _ignore(_: Any) -> None:
    return None


def _markup(reply_markup: ReplyMarkup | None) -> dict[str, Any] | None:
    return encode(reply_markup) if reply_markup is not None else None


def _enum(value: ParseMode | ChatAction | str | None) -> str | None:
    if value is None:
        return None
    return value.value if isinstance(value, (ParseMode, ChatAction)) else value


def _uploaded_file_id(kind: str) -> Callable[[Any], str]:
    """Decoder pulling the stored ``file_id`` out of the sent Message."""
    def decoder(raw: Any) -> str:
        message = Message.model_validate(raw)
        if kind == "photo":
            return message.photo[0].file_id  # type: ignore[index]
        return getattr(message, kind).file_id
    return decoder


class TelegramClient:
    """Client for one bot token.

    Args:
        token: The bot token issued by BotFather.
        transport: HTTP transport; defaults to :class:`RequestsTransport`.
        host: API host name, e.g. ``api.telegram.org``.
    """

    def __init__(
        self,
        token: str,
        transport: Transport | None = None,
        host: str = "api.telegram.org",
    ) -> None:
        self._token = token
        self._transport = transport if transport is not None else RequestsTransport()
        self._base_url = f"https://{host}/bot{token}"
        self._file_base_url = f"https://{host}/file/bot{token}"

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def method_url(self, method: str) -> str:
        return f"{self._base_url}/{method}"

    def file_url(self, file_path: str) -> str:
        return f"{self._file_base_url}/{file_path.lstrip('/')}"

    async def _call(
        self,
        http_method: str,
        api_method: str,
        decoder: Callable[[Any], T],
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Result[T]:
        """Issue one transport call and decode the envelope with *decoder*."""
        raw = await self._transport.request(http_method, self.method_url(api_method), headers, body)
        parsed = parse_body(raw)
        if not isinstance(parsed, Success):
            logger.warning("Unreadable response body", extra={"api_method": api_method, "error": parsed.description})
            return parsed
        result = decode_result(parsed.value, decoder)
        if isinstance(result, Failure):
            logger.warning("API call failed", extra={"api_method": api_method, "error": result.description})
        else:
            logger.debug("API call succeeded", extra={"api_method": api_method})
        return result

    async def _post_json(self, api_method: str, payload: dict[str, Any], decoder: Callable[[Any], T]) -> Result[T]:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return await self._call("POST", api_method, decoder, _JSON_HEADERS, body)

    async def _post_multipart(
        self,
        api_method: str,
        payload: dict[str, Any],
        file_part: tuple[str, str, str],
        decoder: Callable[[Any], T],
    ) -> Result[T]:
        boundary = uuid.uuid4().hex
        body = await encode_multipart(form_fields(payload), file_part, boundary)
        logger.debug(
            "Uploading file",
            extra={"api_method": api_method, "path": file_part[1], "mime_type": file_part[2], "size": len(body)},
        )
        return await self._call("POST", api_method, decoder, {"Content-Type": content_type(boundary)}, body)

    @staticmethod
    def _reply_options(
        reply_to: int | None,
        reply_markup: ReplyMarkup | None,
    ) -> list[tuple[str, Any]]:
        return [("reply_to_message_id", reply_to), ("reply_markup", _markup(reply_markup))]

    # ------------------------------------------------------------------
    #  Identity and messages
    # ------------------------------------------------------------------

    async def get_me(self) -> Result[User]:
        """Return the bot's own :class:`User`; handy for checking the token."""
        return await self._call("GET", "getMe", User.model_validate)

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
        parse_mode: ParseMode | str | None = None,
        disable_notification: bool | None = None,
    ) -> Result[None]:
        logger.debug("Sending message", extra={"chat_id": chat_id, "text_preview": text[:80]})
        payload = build_request_object(
            [("chat_id", chat_id), ("text", text)],
            [
                ("parse_mode", _enum(parse_mode)),
                ("disable_notification", disable_notification),
                *self._reply_options(reply_to, reply_markup),
            ],
        )
        return await self._post_json("sendMessage", payload, _ignore)

    async def forward_message(self, chat_id: int, from_chat_id: int, message_id: int) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("from_chat_id", from_chat_id), ("message_id", message_id)],
        )
        return await self._post_json("forwardMessage", payload, _ignore)

    async def send_chat_action(self, chat_id: int, action: ChatAction | str) -> Result[None]:
        payload = build_request_object([("chat_id", chat_id), ("action", _enum(action))])
        return await self._post_json("sendChatAction", payload, _ignore)

    async def send_location(
        self,
        chat_id: int,
        latitude: float,
        longitude: float,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("latitude", latitude), ("longitude", longitude)],
            self._reply_options(reply_to, reply_markup),
        )
        return await self._post_json("sendLocation", payload, _ignore)

    # ------------------------------------------------------------------
    #  Media: upload (multipart) and resend (by file_id)
    # ------------------------------------------------------------------

    async def send_photo(
        self,
        chat_id: int,
        photo: str,
        caption: str | None = None,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[str]:
        """Upload the local file *photo*; on success the result is its new ``file_id``."""
        payload = build_request_object(
            [("chat_id", chat_id)],
            [("caption", caption), *self._reply_options(reply_to, reply_markup)],
        )
        file_part = ("photo", photo, guess_mime_type(photo))
        return await self._post_multipart("sendPhoto", payload, file_part, _uploaded_file_id("photo"))

    async def resend_photo(
        self,
        chat_id: int,
        photo: str,
        caption: str | None = None,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("photo", photo)],
            [("caption", caption), *self._reply_options(reply_to, reply_markup)],
        )
        return await self._post_json("sendPhoto", payload, _ignore)

    async def send_audio(
        self,
        chat_id: int,
        audio: str,
        performer: str,
        title: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[str]:
        payload = build_request_object(
            [("chat_id", chat_id), ("performer", performer), ("title", title)],
            self._reply_options(reply_to, reply_markup),
        )
        file_part = ("audio", audio, "audio/mpeg")
        return await self._post_multipart("sendAudio", payload, file_part, _uploaded_file_id("audio"))

    async def resend_audio(
        self,
        chat_id: int,
        audio: str,
        performer: str,
        title: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("audio", audio), ("performer", performer), ("title", title)],
            self._reply_options(reply_to, reply_markup),
        )
        return await self._post_json("sendAudio", payload, _ignore)

    async def send_document(
        self,
        chat_id: int,
        document: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[str]:
        payload = build_request_object([("chat_id", chat_id)], self._reply_options(reply_to, reply_markup))
        file_part = ("document", document, guess_mime_type(document))
        return await self._post_multipart("sendDocument", payload, file_part, _uploaded_file_id("document"))

    async def resend_document(
        self,
        chat_id: int,
        document: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("document", document)],
            self._reply_options(reply_to, reply_markup),
        )
        return await self._post_json("sendDocument", payload, _ignore)

    async def send_sticker(
        self,
        chat_id: int,
        sticker: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[str]:
        payload = build_request_object([("chat_id", chat_id)], self._reply_options(reply_to, reply_markup))
        file_part = ("sticker", sticker, "image/webp")
        return await self._post_multipart("sendSticker", payload, file_part, _uploaded_file_id("sticker"))

    async def resend_sticker(
        self,
        chat_id: int,
        sticker: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("sticker", sticker)],
            self._reply_options(reply_to, reply_markup),
        )
        return await self._post_json("sendSticker", payload, _ignore)

    async def send_video(
        self,
        chat_id: int,
        video: str,
        duration: int | None = None,
        caption: str | None = None,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[str]:
        payload = build_request_object(
            [("chat_id", chat_id)],
            [("duration", duration), ("caption", caption), *self._reply_options(reply_to, reply_markup)],
        )
        file_part = ("video", video, guess_mime_type(video))
        return await self._post_multipart("sendVideo", payload, file_part, _uploaded_file_id("video"))

    async def resend_video(
        self,
        chat_id: int,
        video: str,
        duration: int | None = None,
        caption: str | None = None,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("video", video)],
            [("duration", duration), ("caption", caption), *self._reply_options(reply_to, reply_markup)],
        )
        return await self._post_json("sendVideo", payload, _ignore)

    async def send_voice(
        self,
        chat_id: int,
        voice: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[str]:
        payload = build_request_object([("chat_id", chat_id)], self._reply_options(reply_to, reply_markup))
        file_part = ("voice", voice, "audio/ogg")
        return await self._post_multipart("sendVoice", payload, file_part, _uploaded_file_id("voice"))

    async def resend_voice(
        self,
        chat_id: int,
        voice: str,
        reply_to: int | None = None,
        reply_markup: ReplyMarkup | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("chat_id", chat_id), ("voice", voice)],
            self._reply_options(reply_to, reply_markup),
        )
        return await self._post_json("sendVoice", payload, _ignore)

    # ------------------------------------------------------------------
    #  Users and files
    # ------------------------------------------------------------------

    async def get_user_profile_photos(
        self,
        user_id: int,
        offset: int | None = None,
        limit: int | None = None,
    ) -> Result[UserProfilePhotos]:
        payload = build_request_object([("user_id", user_id)], [("offset", offset), ("limit", limit)])
        return await self._post_json("getUserProfilePhotos", payload, UserProfilePhotos.model_validate)

    async def get_file(self, file_id: str) -> Result[File]:
        """Resolve *file_id* to a :class:`File` carrying its download path."""
        payload = build_request_object([("file_id", file_id)])
        return await self._post_json("getFile", payload, File.model_validate)

    async def download_file(self, file: File) -> bytes | None:
        """Fetch the raw bytes of *file*.

        Returns ``None`` without touching the network when the file has no
        ``file_path``.
        """
        if not file.file_path:
            logger.info("File has no download path", extra={"file_id": file.file_id})
            return None
        return await self._transport.request("GET", self.file_url(file.file_path))

    async def get_file_contents(self, file_id: str) -> bytes | None:
        """``getFile`` followed by :meth:`download_file`; ``None`` if either step has nothing."""
        result = await self.get_file(file_id)
        if not isinstance(result, Success):
            return None
        return await self.download_file(result.value)

    # ------------------------------------------------------------------
    #  Inline mode
    # ------------------------------------------------------------------

    async def answer_inline_query(
        self,
        inline_query_id: str,
        results: Sequence[InlineQueryResult],
        cache_time: int | None = None,
        is_personal: bool | None = None,
        next_offset: str | None = None,
    ) -> Result[None]:
        payload = build_request_object(
            [("inline_query_id", inline_query_id), ("results", [encode(r) for r in results])],
            [("cache_time", cache_time), ("is_personal", is_personal), ("next_offset", next_offset)],
        )
        return await self._post_json("answerInlineQuery", payload, _ignore)

    # ------------------------------------------------------------------
    #  Updates
    # ------------------------------------------------------------------

    async def get_updates(
        self,
        offset: int | None = None,
        limit: int | None = None,
        timeout: int | None = None,
        allowed_updates: Iterable[str] | None = None,
    ) -> Result[list[Update]]:
        """Fetch pending updates.  Unset parameters are left to the server's defaults."""
        payload = build_request_object(
            [],
            [
                ("offset", offset),
                ("limit", limit),
                ("timeout", timeout),
                ("allowed_updates", list(allowed_updates) if allowed_updates is not None else None),
            ],
        )
        return await self._post_json("getUpdates", payload, lambda raw: [Update.model_validate(u) for u in raw])
