"""Envelope codec for the Bot API wire protocol.

Every response is a JSON object ``{"ok": true, "result": …}`` or
``{"ok": false, "description": "…"}``.  This module unwraps that shape
into :mod:`core.result` values and builds request bodies with the
optional-field rule used by every outbound call: unset values are
omitted, never sent as ``null``.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, TypeVar

from core.result import DecodeError, Failure, Result, Success

T = TypeVar("T")


def parse_body(body: bytes | str) -> Result[Any]:
    """JSON-decode a raw transport body."""
    try:
        return Success(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        return DecodeError(f"Malformed response body: {exc}")


def decode_envelope(obj: Any) -> Result[Any]:
    """Unwrap the ``{ok, result|description}`` envelope.

    ``ok`` must be exactly ``true`` for a :class:`Success`; anything else
    (false, missing, ill-typed) is a :class:`Failure` carrying
    ``description``, or ``""`` when that field is not a string.
    """
    if not isinstance(obj, dict):
        return DecodeError(f"Expected a JSON object, got {type(obj).__name__}")
    if obj.get("ok") is True:
        if "result" not in obj:
            return DecodeError("Envelope has ok=true but no result")
        return Success(obj["result"])
    description = obj.get("description")
    return Failure(description if isinstance(description, str) else "")


def decode_result(obj: Any, decoder: Callable[[Any], T]) -> Result[T]:
    """Unwrap the envelope and run *decoder* over the raw ``result`` value.

    Decoder errors (pydantic ``ValidationError``, missing keys, wrong types)
    are reported as :class:`DecodeError` instead of being raised.
    """
    envelope = decode_envelope(obj)
    if not isinstance(envelope, Success):
        return envelope
    try:
        return Success(decoder(envelope.value))
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
        return DecodeError(f"Could not decode result: {exc}")


def build_request_object(
    required: Iterable[tuple[str, Any]],
    optional: Iterable[tuple[str, Any]] = (),
) -> dict[str, Any]:
    """Compose a request body from always-present and optional pairs.

    Required pairs come first in their declared order, followed by every
    optional pair whose value is not ``None``.  Example::

        >>> build_request_object([("chat_id", 42)], [("reply_to_message_id", None), ("text", "hi")])
        {'chat_id': 42, 'text': 'hi'}
    """
    payload: dict[str, Any] = {}
    for key, value in required:
        payload[key] = value
    for key, value in optional:
        if value is not None:
            payload[key] = value
    return payload
