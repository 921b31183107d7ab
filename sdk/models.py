"""Pydantic data models for the Bot API objects Courier reads and writes.

Inbound objects (``Update``, ``Message``, ``User``, …) are frozen: they are
decoded once with ``Model.model_validate(obj)`` and only ever read.
Outbound objects (reply markup, inline query results) are serialised with
:func:`encode`, which drops unset fields instead of sending ``null``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

_INBOUND = {"populate_by_name": True, "frozen": True}
_OUTBOUND = {"populate_by_name": True}


def encode(model: BaseModel) -> dict[str, Any]:
    """Serialise *model* to plain JSON data, omitting every unset field."""
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


# ── Enumerations ─────────────────────────────────────────────────────────────


class ChatType(str, Enum):
    """Kind of chat.  Unknown strings fail validation."""

    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"


class ChatAction(str, Enum):
    """Status broadcast with ``sendChatAction``."""

    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"
    RECORD_VIDEO = "record_video"
    UPLOAD_VIDEO = "upload_video"
    RECORD_AUDIO = "record_audio"
    UPLOAD_AUDIO = "upload_audio"
    UPLOAD_DOCUMENT = "upload_document"
    FIND_LOCATION = "find_location"
    RECORD_VOICE = "record_voice"
    UPLOAD_VOICE = "upload_voice"


class ParseMode(str, Enum):
    MARKDOWN = "Markdown"
    HTML = "HTML"


# ── Inbound objects ──────────────────────────────────────────────────────────


class User(BaseModel):
    """This object represents a Telegram user or bot."""

    id: int
    is_bot: Optional[bool] = None
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None

    model_config = _INBOUND


class Chat(BaseModel):
    """This object represents a chat."""

    id: int
    type: ChatType
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = _INBOUND


class MessageEntity(BaseModel):
    """One special entity in a text message (hashtag, mention, URL, …)."""

    type: str
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional["User"] = None

    model_config = _INBOUND


class PhotoSize(BaseModel):
    """One size of a photo or a file / sticker thumbnail."""

    file_id: str
    file_unique_id: Optional[str] = None
    width: int
    height: int
    file_size: Optional[int] = None

    model_config = _INBOUND


class Audio(BaseModel):
    """An audio file to be treated as music by the Telegram clients."""

    file_id: str
    duration: int
    performer: Optional[str] = None
    title: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    model_config = _INBOUND


class Document(BaseModel):
    """A general file (as opposed to photos, voice messages and audio files)."""

    file_id: str
    thumb: Optional["PhotoSize"] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    model_config = _INBOUND


class Sticker(BaseModel):
    """This object represents a sticker."""

    file_id: str
    width: int
    height: int
    thumb: Optional["PhotoSize"] = None
    emoji: Optional[str] = None
    file_size: Optional[int] = None

    model_config = _INBOUND


class Video(BaseModel):
    """This object represents a video file."""

    file_id: str
    width: int
    height: int
    duration: int
    thumb: Optional["PhotoSize"] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    model_config = _INBOUND


class Voice(BaseModel):
    """This object represents a voice note."""

    file_id: str
    duration: int
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    model_config = _INBOUND


class Contact(BaseModel):
    """This object represents a phone contact."""

    phone_number: str
    first_name: str
    last_name: Optional[str] = None
    user_id: Optional[int] = None

    model_config = _INBOUND


class Location(BaseModel):
    """This object represents a point on the map."""

    longitude: float
    latitude: float

    model_config = _INBOUND


class Venue(BaseModel):
    """This object represents a venue."""

    location: "Location"
    title: str
    address: str
    foursquare_id: Optional[str] = None

    model_config = _INBOUND


class UserProfilePhotos(BaseModel):
    """A user's profile pictures."""

    total_count: int
    photos: List[List["PhotoSize"]]

    model_config = _INBOUND


class File(BaseModel):
    """A file ready to be downloaded.

    ``file_path`` is absent when Telegram could not prepare a download link.
    """

    file_id: str
    file_size: Optional[int] = None
    file_path: Optional[str] = None

    model_config = _INBOUND


class Message(BaseModel):
    """This object represents a message."""

    message_id: int
    from_field: Optional["User"] = Field(None, alias="from")
    date: int
    chat: "Chat"
    forward_from: Optional["User"] = None
    forward_date: Optional[int] = None
    reply_to_message: Optional["Message"] = None
    text: Optional[str] = None
    entities: Optional[List["MessageEntity"]] = None
    audio: Optional["Audio"] = None
    document: Optional["Document"] = None
    photo: Optional[List["PhotoSize"]] = None
    sticker: Optional["Sticker"] = None
    video: Optional["Video"] = None
    voice: Optional["Voice"] = None
    caption: Optional[str] = None
    contact: Optional["Contact"] = None
    location: Optional["Location"] = None
    venue: Optional["Venue"] = None
    new_chat_members: Optional[List["User"]] = None
    left_chat_member: Optional["User"] = None
    new_chat_title: Optional[str] = None
    new_chat_photo: Optional[List["PhotoSize"]] = None
    delete_chat_photo: Optional[bool] = None
    group_chat_created: Optional[bool] = None
    supergroup_chat_created: Optional[bool] = None
    channel_chat_created: Optional[bool] = None
    migrate_to_chat_id: Optional[int] = None
    migrate_from_chat_id: Optional[int] = None
    pinned_message: Optional["Message"] = None

    model_config = _INBOUND

    def sender(self) -> str:
        """Display name of the sender: ``"First (username)"`` or just ``"First"``."""
        if self.from_field is None:
            return ""
        if self.from_field.username:
            return f"{self.from_field.first_name} ({self.from_field.username})"
        return self.from_field.first_name


class CallbackQuery(BaseModel):
    """An incoming callback query from an inline keyboard button."""

    id: str
    from_field: "User" = Field(..., alias="from")
    message: Optional["Message"] = None
    inline_message_id: Optional[str] = None
    data: Optional[str] = None

    model_config = _INBOUND


class InlineQuery(BaseModel):
    """An incoming inline query."""

    id: str
    from_field: "User" = Field(..., alias="from")
    query: str
    offset: str

    model_config = _INBOUND


class ChosenInlineResult(BaseModel):
    """A result of an inline query that was chosen by the user."""

    result_id: str
    from_field: "User" = Field(..., alias="from")
    query: str

    model_config = _INBOUND


class Update(BaseModel):
    """An incoming update.  At most one of the optional payloads is expected."""

    update_id: int
    message: Optional["Message"] = None
    inline_query: Optional["InlineQuery"] = None
    chosen_inline_result: Optional["ChosenInlineResult"] = None
    callback_query: Optional["CallbackQuery"] = None

    model_config = _INBOUND


# ── Reply markup ─────────────────────────────────────────────────────────────


class KeyboardButton(BaseModel):
    """One button of a custom reply keyboard."""

    text: str
    request_contact: Optional[bool] = None
    request_location: Optional[bool] = None

    model_config = _OUTBOUND


class InlineKeyboardButton(BaseModel):
    """One button of an inline keyboard."""

    text: str
    url: Optional[str] = None
    callback_data: Optional[str] = None
    switch_inline_query: Optional[str] = None

    model_config = _OUTBOUND


class ReplyKeyboardMarkup(BaseModel):
    """A custom keyboard with reply options."""

    keyboard: List[List["KeyboardButton"]]
    resize_keyboard: Optional[bool] = None
    one_time_keyboard: Optional[bool] = None
    selective: Optional[bool] = None

    model_config = _OUTBOUND


class InlineKeyboardMarkup(BaseModel):
    """An inline keyboard that appears right next to the message it belongs to."""

    inline_keyboard: List[List["InlineKeyboardButton"]]

    model_config = _OUTBOUND


class ReplyKeyboardRemove(BaseModel):
    """Ask clients to remove the current custom keyboard."""

    remove_keyboard: Literal[True] = True
    selective: Optional[bool] = None

    model_config = _OUTBOUND


class ForceReply(BaseModel):
    """Ask clients to display a reply interface to the user."""

    force_reply: Literal[True] = True
    selective: Optional[bool] = None

    model_config = _OUTBOUND


ReplyMarkup = Union[ReplyKeyboardMarkup, InlineKeyboardMarkup, ReplyKeyboardRemove, ForceReply]


# ── Inline query results ─────────────────────────────────────────────────────


class InputTextMessageContent(BaseModel):
    """Content of a text message sent as the result of an inline query."""

    message_text: str
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: Optional[bool] = None

    model_config = _OUTBOUND


class InlineQueryResultArticle(BaseModel):
    """Link to an article or web page."""

    type: Literal["article"] = "article"
    id: str
    title: str
    input_message_content: "InputTextMessageContent"
    url: Optional[str] = None
    hide_url: Optional[bool] = None
    description: Optional[str] = None
    thumb_url: Optional[str] = None
    thumb_width: Optional[int] = None
    thumb_height: Optional[int] = None

    model_config = _OUTBOUND


class InlineQueryResultPhoto(BaseModel):
    """Link to a photo."""

    type: Literal["photo"] = "photo"
    id: str
    photo_url: str
    thumb_url: str
    photo_width: Optional[int] = None
    photo_height: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    caption: Optional[str] = None
    input_message_content: Optional["InputTextMessageContent"] = None

    model_config = _OUTBOUND


class InlineQueryResultGif(BaseModel):
    """Link to an animated GIF file."""

    type: Literal["gif"] = "gif"
    id: str
    gif_url: str
    thumb_url: str
    gif_width: Optional[int] = None
    gif_height: Optional[int] = None
    title: Optional[str] = None
    caption: Optional[str] = None
    input_message_content: Optional["InputTextMessageContent"] = None

    model_config = _OUTBOUND


class InlineQueryResultMpeg4Gif(BaseModel):
    """Link to a video animation (H.264/MPEG-4 AVC video without sound)."""

    type: Literal["mpeg4_gif"] = "mpeg4_gif"
    id: str
    mpeg4_url: str
    thumb_url: str
    mpeg4_width: Optional[int] = None
    mpeg4_height: Optional[int] = None
    title: Optional[str] = None
    caption: Optional[str] = None
    input_message_content: Optional["InputTextMessageContent"] = None

    model_config = _OUTBOUND


class InlineQueryResultVideo(BaseModel):
    """Link to a page containing an embedded video player or a video file."""

    type: Literal["video"] = "video"
    id: str
    video_url: str
    mime_type: str
    thumb_url: str
    title: str
    video_width: Optional[int] = None
    video_height: Optional[int] = None
    video_duration: Optional[int] = None
    description: Optional[str] = None
    input_message_content: Optional["InputTextMessageContent"] = None

    model_config = _OUTBOUND


InlineQueryResult = Union[
    InlineQueryResultArticle,
    InlineQueryResultPhoto,
    InlineQueryResultGif,
    InlineQueryResultMpeg4Gif,
    InlineQueryResultVideo,
]
