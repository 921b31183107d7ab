"""multipart/form-data bodies for the upload endpoints.

Layout, with ``B`` as the boundary::

    --B\\r\\n
    Content-Disposition: form-data; name="chat_id"\\r\\n
    \\r\\n
    42\\r\\n
    --B\\r\\n
    Content-Disposition: form-data; name="photo"; filename="cat.png"\\r\\n
    Content-Type: image/png\\r\\n
    \\r\\n
    <bytes>\\r\\n
    --B--
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Iterable

_CRLF = b"\r\n"

# Extension → MIME type.  Anything not listed falls back to ``text/plain``.
MIME_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".webm": "video/webm",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".json": "application/json",
    ".txt": "text/plain",
}

DEFAULT_MIME_TYPE = "text/plain"

# Header parameter escapes for names and filenames, as browsers apply them.
_QUOTE_ESCAPES = str.maketrans({'"': "%22", "\r": "%0D", "\n": "%0A"})


def quote_param(value: str) -> str:
    """Escape *value* for use inside a quoted ``name=""`` or ``filename=""``."""
    return value.translate(_QUOTE_ESCAPES)


def guess_mime_type(path: str, default: str = DEFAULT_MIME_TYPE) -> str:
    """Look up *path*'s extension (case-insensitive) in :data:`MIME_TYPES`."""
    _, ext = os.path.splitext(path)
    return MIME_TYPES.get(ext.lower(), default)


def form_fields(payload: dict[str, Any]) -> list[tuple[str, str]]:
    """Stringify a request object for use as form fields.

    Integers and floats use ``str``, booleans become ``true``/``false`` and
    nested objects (reply markup) are embedded as compact JSON.
    """
    fields: list[tuple[str, str]] = []
    for name, value in payload.items():
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, (dict, list)):
            text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        else:
            text = str(value)
        fields.append((name, text))
    return fields


def render_multipart(
    fields: Iterable[tuple[str, str]],
    file_part: tuple[str, str, str],
    content: bytes,
    boundary: str,
) -> bytes:
    """Build the body from already-loaded file *content*."""
    name, path, mime = file_part
    delimiter = b"--" + boundary.encode("ascii")
    chunks: list[bytes] = []
    for field_name, value in fields:
        chunks += [
            delimiter, _CRLF,
            f'Content-Disposition: form-data; name="{quote_param(field_name)}"'.encode("utf-8"), _CRLF, _CRLF,
            value.encode("utf-8"), _CRLF,
        ]
    filename = os.path.basename(path)
    chunks += [
        delimiter, _CRLF,
        f'Content-Disposition: form-data; name="{quote_param(name)}"; filename="{quote_param(filename)}"'.encode("utf-8"), _CRLF,
        f"Content-Type: {mime}".encode("utf-8"), _CRLF, _CRLF,
        content, _CRLF,
        delimiter, b"--",
    ]
    return b"".join(chunks)


async def encode_multipart(
    fields: Iterable[tuple[str, str]],
    file_part: tuple[str, str, str],
    boundary: str,
) -> bytes:
    """Read the local file named in *file_part* and build the form body.

    *file_part* is ``(field_name, local_path, mime_type)``.

    Raises:
        OSError: If the file cannot be read.  No retry is attempted.
    """
    content = await asyncio.to_thread(Path(file_part[1]).read_bytes)
    return render_multipart(fields, file_part, content, boundary)


def content_type(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"
