"""Tests for TelegramClient and RequestsTransport."""

import json
import sys
import os
from unittest.mock import patch, MagicMock

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fakes import FakeTransport
from core.result import DecodeError, Failure, Success
from sdk.client import TelegramClient
from sdk.models import (
    ChatAction,
    File,
    ForceReply,
    InlineQueryResultArticle,
    InputTextMessageContent,
    ParseMode,
    ReplyKeyboardRemove,
)
from sdk.transport import RequestsTransport, Transport


def _sent_message(**media) -> dict:
    message = {"message_id": 1, "date": 0, "chat": {"id": 42, "type": "private"}}
    message.update(media)
    return {"ok": True, "result": message}


# ── Construction ─────────────────────────────────────────────────────────────


class TestClientInit:
    """Validate URL construction."""

    def test_method_url(self) -> None:
        c = TelegramClient("123:abc", FakeTransport())
        assert c.method_url("getMe") == "https://api.telegram.org/bot123:abc/getMe"

    def test_file_url(self) -> None:
        c = TelegramClient("123:abc", FakeTransport())
        assert c.file_url("photos/file_1.jpg") == "https://api.telegram.org/file/bot123:abc/photos/file_1.jpg"

    def test_custom_host(self) -> None:
        c = TelegramClient("T", FakeTransport(), host="localhost:8081")
        assert c.method_url("getMe") == "https://localhost:8081/botT/getMe"

    def test_default_transport(self) -> None:
        c = TelegramClient("T")
        assert isinstance(c._transport, RequestsTransport)
        assert isinstance(c._transport, Transport)


# ── Envelope handling ────────────────────────────────────────────────────────


class TestEnvelopeHandling:
    """Validate how responses become Result values."""

    @pytest.mark.asyncio
    async def test_get_me_uses_get(self) -> None:
        transport = FakeTransport({"ok": True, "result": {"id": 1, "is_bot": True, "first_name": "Bot"}})
        result = await TelegramClient("T", transport).get_me()
        assert isinstance(result, Success)
        assert result.value.first_name == "Bot"
        assert transport.calls[0]["method"] == "GET"
        assert transport.calls[0]["body"] is None

    @pytest.mark.asyncio
    async def test_api_error_is_failure(self) -> None:
        transport = FakeTransport({"ok": False, "error_code": 401, "description": "Unauthorized"})
        result = await TelegramClient("T", transport).get_me()
        assert result == Failure("Unauthorized")

    @pytest.mark.asyncio
    async def test_malformed_body_is_decode_error(self) -> None:
        transport = FakeTransport(b"<html>502 Bad Gateway</html>")
        result = await TelegramClient("T", transport).send_message(42, "hi")
        assert isinstance(result, DecodeError)

    @pytest.mark.asyncio
    async def test_unexpected_result_shape_is_decode_error(self) -> None:
        transport = FakeTransport({"ok": True, "result": {"unexpected": True}})
        result = await TelegramClient("T", transport).get_me()
        assert isinstance(result, DecodeError)

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self) -> None:
        transport = FakeTransport(requests.ConnectionError("offline"))
        with pytest.raises(requests.ConnectionError):
            await TelegramClient("T", transport).get_me()


# ── JSON methods ─────────────────────────────────────────────────────────────


class TestJsonMethods:
    """Validate request bodies of JSON methods."""

    @pytest.mark.asyncio
    async def test_send_message_minimal(self) -> None:
        transport = FakeTransport(_sent_message(text="pong"))
        result = await TelegramClient("T", transport).send_message(42, "pong")
        assert result == Success(None)
        call = transport.calls[0]
        assert call["method"] == "POST"
        assert call["url"].endswith("/sendMessage")
        assert call["headers"]["Content-Type"] == "application/json"
        assert json.loads(call["body"]) == {"chat_id": 42, "text": "pong"}

    @pytest.mark.asyncio
    async def test_send_message_with_options(self) -> None:
        transport = FakeTransport()
        await TelegramClient("T", transport).send_message(
            42,
            "*hi*",
            reply_to=7,
            reply_markup=ForceReply(),
            parse_mode=ParseMode.MARKDOWN,
            disable_notification=True,
        )
        assert transport.json_body() == {
            "chat_id": 42,
            "text": "*hi*",
            "parse_mode": "Markdown",
            "disable_notification": True,
            "reply_to_message_id": 7,
            "reply_markup": {"force_reply": True},
        }

    @pytest.mark.asyncio
    async def test_forward_message(self) -> None:
        transport = FakeTransport()
        await TelegramClient("T", transport).forward_message(1, 2, 3)
        assert transport.api_methods() == ["forwardMessage"]
        assert transport.json_body() == {"chat_id": 1, "from_chat_id": 2, "message_id": 3}

    @pytest.mark.asyncio
    async def test_send_chat_action(self) -> None:
        transport = FakeTransport()
        await TelegramClient("T", transport).send_chat_action(42, ChatAction.TYPING)
        assert transport.json_body() == {"chat_id": 42, "action": "typing"}

    @pytest.mark.asyncio
    async def test_send_location_with_markup(self) -> None:
        transport = FakeTransport()
        await TelegramClient("T", transport).send_location(42, 1.5, -2.25, reply_markup=ReplyKeyboardRemove())
        assert transport.json_body() == {
            "chat_id": 42,
            "latitude": 1.5,
            "longitude": -2.25,
            "reply_markup": {"remove_keyboard": True},
        }

    @pytest.mark.asyncio
    async def test_resend_photo_by_file_id(self) -> None:
        transport = FakeTransport(_sent_message(photo=[{"file_id": "abc", "width": 1, "height": 1}]))
        result = await TelegramClient("T", transport).resend_photo(42, "abc", caption="again")
        assert result == Success(None)
        assert transport.api_methods() == ["sendPhoto"]
        assert transport.json_body() == {"chat_id": 42, "photo": "abc", "caption": "again"}

    @pytest.mark.asyncio
    async def test_resend_audio(self) -> None:
        transport = FakeTransport()
        await TelegramClient("T", transport).resend_audio(42, "aud", "Band", "Song")
        assert transport.json_body() == {"chat_id": 42, "audio": "aud", "performer": "Band", "title": "Song"}

    @pytest.mark.asyncio
    async def test_get_user_profile_photos(self) -> None:
        transport = FakeTransport({
            "ok": True,
            "result": {"total_count": 2, "photos": [[{"file_id": "p1", "width": 1, "height": 1}], []]},
        })
        result = await TelegramClient("T", transport).get_user_profile_photos(7, limit=5)
        assert isinstance(result, Success)
        assert result.value.total_count == 2
        assert transport.json_body() == {"user_id": 7, "limit": 5}

    @pytest.mark.asyncio
    async def test_answer_inline_query(self) -> None:
        transport = FakeTransport()
        article = InlineQueryResultArticle(
            id="1",
            title="Test",
            input_message_content=InputTextMessageContent(message_text="hello"),
        )
        await TelegramClient("T", transport).answer_inline_query("q1", [article], cache_time=0)
        assert transport.json_body() == {
            "inline_query_id": "q1",
            "results": [
                {
                    "type": "article",
                    "id": "1",
                    "title": "Test",
                    "input_message_content": {"message_text": "hello"},
                }
            ],
            "cache_time": 0,
        }


# ── Updates ──────────────────────────────────────────────────────────────────


class TestGetUpdates:
    """Validate getUpdates encoding and decoding."""

    @pytest.mark.asyncio
    async def test_no_parameters_sends_empty_object(self) -> None:
        transport = FakeTransport({"ok": True, "result": []})
        result = await TelegramClient("T", transport).get_updates()
        assert result == Success([])
        assert transport.calls[0]["method"] == "POST"
        assert transport.json_body() == {}

    @pytest.mark.asyncio
    async def test_parameters_and_decoding(self) -> None:
        transport = FakeTransport({"ok": True, "result": [{"update_id": 5}, {"update_id": 6}]})
        result = await TelegramClient("T", transport).get_updates(
            offset=5, limit=1, timeout=30, allowed_updates=["message"]
        )
        assert [u.update_id for u in result.value] == [5, 6]
        assert transport.json_body() == {"offset": 5, "limit": 1, "timeout": 30, "allowed_updates": ["message"]}


# ── Uploads ──────────────────────────────────────────────────────────────────


class TestUploads:
    """Validate multipart uploads."""

    @pytest.mark.asyncio
    async def test_send_photo_returns_first_file_id(self, tmp_path) -> None:
        path = tmp_path / "cat.png"
        path.write_bytes(b"\x89PNG")
        transport = FakeTransport(_sent_message(photo=[
            {"file_id": "small", "width": 90, "height": 90},
            {"file_id": "large", "width": 800, "height": 800},
        ]))
        result = await TelegramClient("T", transport).send_photo(42, str(path), caption="cute")
        assert result == Success("small")

        call = transport.calls[0]
        boundary = call["headers"]["Content-Type"].split("boundary=", 1)[1]
        assert call["headers"]["Content-Type"].startswith("multipart/form-data; boundary=")
        assert call["body"].startswith(
            f'--{boundary}\r\nContent-Disposition: form-data; name="chat_id"\r\n\r\n42\r\n'.encode()
        )
        assert b'name="caption"\r\n\r\ncute\r\n' in call["body"]
        assert b'name="photo"; filename="cat.png"\r\nContent-Type: image/png\r\n\r\n\x89PNG\r\n' in call["body"]
        assert call["body"].endswith(f"--{boundary}--".encode())

    @pytest.mark.asyncio
    async def test_boundary_differs_per_request(self, tmp_path) -> None:
        path = tmp_path / "a.txt"
        path.write_bytes(b"x")
        transport = FakeTransport(
            _sent_message(document={"file_id": "d1"}),
            _sent_message(document={"file_id": "d2"}),
        )
        client = TelegramClient("T", transport)
        assert await client.send_document(42, str(path)) == Success("d1")
        assert await client.send_document(42, str(path)) == Success("d2")
        first, second = (c["headers"]["Content-Type"] for c in transport.calls)
        assert first != second

    @pytest.mark.asyncio
    async def test_fixed_mime_types(self, tmp_path) -> None:
        path = tmp_path / "clip.bin"
        path.write_bytes(b"x")
        transport = FakeTransport(
            _sent_message(audio={"file_id": "a", "duration": 1}),
            _sent_message(voice={"file_id": "v", "duration": 1}),
            _sent_message(sticker={"file_id": "s", "width": 1, "height": 1}),
        )
        client = TelegramClient("T", transport)
        assert await client.send_audio(42, str(path), "Band", "Song") == Success("a")
        assert await client.send_voice(42, str(path)) == Success("v")
        assert await client.send_sticker(42, str(path)) == Success("s")
        assert b"Content-Type: audio/mpeg" in transport.calls[0]["body"]
        assert b"Content-Type: audio/ogg" in transport.calls[1]["body"]
        assert b"Content-Type: image/webp" in transport.calls[2]["body"]

    @pytest.mark.asyncio
    async def test_upload_failure(self, tmp_path) -> None:
        path = tmp_path / "movie.mp4"
        path.write_bytes(b"x")
        transport = FakeTransport({"ok": False, "description": "Request Entity Too Large"})
        result = await TelegramClient("T", transport).send_video(42, str(path), duration=3)
        assert result == Failure("Request Entity Too Large")
        assert b"Content-Type: video/mp4" in transport.calls[0]["body"]
        assert b'name="duration"\r\n\r\n3\r\n' in transport.calls[0]["body"]

    @pytest.mark.asyncio
    async def test_missing_file_raises_before_network(self, tmp_path) -> None:
        transport = FakeTransport()
        with pytest.raises(OSError):
            await TelegramClient("T", transport).send_photo(42, str(tmp_path / "missing.jpg"))
        assert transport.calls == []


# ── Files ────────────────────────────────────────────────────────────────────


class TestFiles:
    """Validate getFile and downloads."""

    @pytest.mark.asyncio
    async def test_download_without_path_skips_network(self) -> None:
        transport = FakeTransport()
        content = await TelegramClient("T", transport).download_file(File(file_id="f"))
        assert content is None
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_download_with_path(self) -> None:
        transport = FakeTransport(b"raw-bytes")
        content = await TelegramClient("T", transport).download_file(File(file_id="f", file_path="docs/a.txt"))
        assert content == b"raw-bytes"
        assert transport.calls[0]["method"] == "GET"
        assert transport.calls[0]["url"] == "https://api.telegram.org/file/botT/docs/a.txt"

    @pytest.mark.asyncio
    async def test_get_file_contents(self) -> None:
        transport = FakeTransport(
            {"ok": True, "result": {"file_id": "f", "file_path": "voice/v.ogg"}},
            b"OggS",
        )
        content = await TelegramClient("T", transport).get_file_contents("f")
        assert content == b"OggS"
        assert transport.api_methods() == ["getFile", "v.ogg"]
        assert transport.json_body(0) == {"file_id": "f"}

    @pytest.mark.asyncio
    async def test_get_file_contents_failure(self) -> None:
        transport = FakeTransport({"ok": False, "description": "Bad Request: invalid file_id"})
        assert await TelegramClient("T", transport).get_file_contents("nope") is None
        assert len(transport.calls) == 1


# ── RequestsTransport ────────────────────────────────────────────────────────


class TestRequestsTransport:
    """Validate the requests-backed transport."""

    @pytest.mark.asyncio
    async def test_post_returns_content(self) -> None:
        mock_resp = MagicMock()
        mock_resp.ok = True
        mock_resp.content = b'{"ok":true,"result":true}'

        with patch("sdk.transport.requests.post", return_value=mock_resp) as mock_post:
            body = await RequestsTransport(timeout=5).request(
                "POST", "https://example/botT/getMe", {"Content-Type": "application/json"}, b"{}"
            )
        assert body == b'{"ok":true,"result":true}'
        mock_post.assert_called_once_with(
            "https://example/botT/getMe",
            headers={"Content-Type": "application/json"},
            data=b"{}",
            timeout=5,
        )

    @pytest.mark.asyncio
    async def test_status_is_ignored(self) -> None:
        mock_resp = MagicMock()
        mock_resp.ok = False
        mock_resp.status_code = 401
        mock_resp.content = b'{"ok":false,"description":"Unauthorized"}'

        with patch("sdk.transport.requests.get", return_value=mock_resp):
            body = await RequestsTransport().request("GET", "https://example/botT/getMe")
        assert body == b'{"ok":false,"description":"Unauthorized"}'

    @pytest.mark.asyncio
    async def test_network_error_propagates(self) -> None:
        with patch("sdk.transport.requests.post", side_effect=requests.ConnectionError("offline")):
            with pytest.raises(requests.ConnectionError):
                await RequestsTransport().request("POST", "https://example/botT/getMe")
