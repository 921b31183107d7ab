"""Telegram Bot API SDK — envelope codec, multipart bodies, transport, client.

Usage::

    from sdk import TelegramClient
    from sdk.models import Message, Update
"""

from sdk.client import TelegramClient
from sdk.envelope import build_request_object, decode_envelope
from sdk.transport import RequestsTransport, Transport

__all__ = [
    "TelegramClient",
    "RequestsTransport",
    "Transport",
    "build_request_object",
    "decode_envelope",
]
