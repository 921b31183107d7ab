"""Actions — "what the bot wants to do next", represented as data.

Command and inline handlers return an :class:`Action` instead of calling
the API themselves.  Nothing happens when an action is built; the
:class:`~bot.evaluator.Evaluator` later performs exactly one API call per
action and, for actions that expect a result, passes the outcome to the
action's ``then`` continuation to obtain the next action.

Three groups exist:

* fire-and-forget (``SendMessage``, ``ForwardMessage``, ``Resend*``, …):
  parameters only, the outcome is discarded;
* continuation-bearing (``GetMe``, ``Send*`` uploads, ``GetFile``,
  ``PopUpdate``, …): parameters plus ``then``;
* structural: :data:`NOTHING` and :class:`Chain`.

A continuation can branch on the outcome, so multi-step workflows are
plain values::

    GetUserProfilePhotos(
        user_id,
        then=lambda r: SendMessage(chat_id, f"Your photos: {r.value.total_count}")
        if isinstance(r, Success)
        else SendMessage(chat_id, "Couldn't get your profile pictures!"),
    )

Evaluating the same action twice repeats its side effect.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Sequence

from core.result import Result
from sdk.models import (
    ChatAction,
    File,
    InlineQueryResult,
    ParseMode,
    ReplyMarkup,
    Update,
    User,
    UserProfilePhotos,
)


class Action:
    """Base class of every action value."""

    __slots__ = ()


# A continuation maps a call's outcome to the next action.
Continuation = Callable[[Any], Action]


def _finish(_: Any) -> Action:
    return NOTHING


@dataclasses.dataclass(frozen=True, slots=True)
class Nothing(Action):
    """Terminal no-op."""


NOTHING = Nothing()


@dataclasses.dataclass(frozen=True, slots=True)
class Chain(Action):
    """Run *first*, ignore how it went, then run *second*."""

    first: Action
    second: Action


def chain(*actions: Action) -> Action:
    """Fold *actions* into nested :class:`Chain` values, in order.

    ``chain()`` is :data:`NOTHING` and ``chain(a)`` is ``a``.
    """
    if not actions:
        return NOTHING
    result = actions[-1]
    for action in reversed(actions[:-1]):
        result = Chain(action, result)
    return result


# ── Fire-and-forget ──────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True)
class SendMessage(Action):
    chat_id: int
    text: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None
    parse_mode: ParseMode | None = None
    disable_notification: bool | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ForwardMessage(Action):
    chat_id: int
    from_chat_id: int
    message_id: int


@dataclasses.dataclass(frozen=True, slots=True)
class SendChatAction(Action):
    chat_id: int
    action: ChatAction


@dataclasses.dataclass(frozen=True, slots=True)
class SendLocation(Action):
    chat_id: int
    latitude: float
    longitude: float
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ResendPhoto(Action):
    """Send a photo Telegram already stores, by ``file_id``."""

    chat_id: int
    photo: str
    caption: str | None = None
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ResendAudio(Action):
    chat_id: int
    audio: str
    performer: str
    title: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ResendDocument(Action):
    chat_id: int
    document: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ResendSticker(Action):
    chat_id: int
    sticker: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ResendVideo(Action):
    chat_id: int
    video: str
    duration: int | None = None
    caption: str | None = None
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ResendVoice(Action):
    chat_id: int
    voice: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class AnswerInlineQuery(Action):
    inline_query_id: str
    results: Sequence[InlineQueryResult]
    cache_time: int | None = None
    is_personal: bool | None = None
    next_offset: str | None = None


# ── Continuation-bearing ─────────────────────────────────────────────────────
#
# ``then`` always comes last and defaults to finishing the chain, so a
# handler that does not care about the outcome may leave it out.


@dataclasses.dataclass(frozen=True, slots=True)
class GetMe(Action):
    """``then`` receives ``Result[User]``."""

    then: Callable[[Result[User]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class SendPhoto(Action):
    """Upload a local photo; ``then`` receives ``Result[str]`` with the new ``file_id``."""

    chat_id: int
    photo: str
    caption: str | None = None
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None
    then: Callable[[Result[str]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class SendAudio(Action):
    chat_id: int
    audio: str
    performer: str
    title: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None
    then: Callable[[Result[str]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class SendDocument(Action):
    chat_id: int
    document: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None
    then: Callable[[Result[str]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class SendSticker(Action):
    chat_id: int
    sticker: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None
    then: Callable[[Result[str]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class SendVideo(Action):
    chat_id: int
    video: str
    duration: int | None = None
    caption: str | None = None
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None
    then: Callable[[Result[str]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class SendVoice(Action):
    chat_id: int
    voice: str
    reply_to: int | None = None
    reply_markup: ReplyMarkup | None = None
    then: Callable[[Result[str]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class GetUserProfilePhotos(Action):
    user_id: int
    offset: int | None = None
    limit: int | None = None
    then: Callable[[Result[UserProfilePhotos]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class GetFile(Action):
    file_id: str
    then: Callable[[Result[File]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class GetFileContents(Action):
    """Resolve *file_id* and download it; ``then`` receives ``bytes`` or ``None``."""

    file_id: str
    then: Callable[[bytes | None], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class DownloadFile(Action):
    """Download an already-resolved :class:`File`; ``then`` receives ``bytes`` or ``None``."""

    file: File
    then: Callable[[bytes | None], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class GetUpdates(Action):
    """Read the pending backlog without moving the offset cursor."""

    then: Callable[[Result[list[Update]]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class PeekUpdate(Action):
    """Look at the next update without acknowledging it."""

    then: Callable[[Result[Update]], Action] = _finish


@dataclasses.dataclass(frozen=True, slots=True)
class PopUpdate(Action):
    """Fetch, acknowledge and dispatch the next update."""

    then: Callable[[Result[Update]], Action] = _finish


# Actions whose ``then`` gets the outcome of the call.
CONTINUATION_ACTIONS: tuple[type[Action], ...] = (
    GetMe,
    SendPhoto,
    SendAudio,
    SendDocument,
    SendSticker,
    SendVideo,
    SendVoice,
    GetUserProfilePhotos,
    GetFile,
    GetFileContents,
    DownloadFile,
    GetUpdates,
    PeekUpdate,
    PopUpdate,
)
