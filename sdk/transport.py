"""HTTP transport boundary.

The client never talks to the network directly; it hands a method, URL,
headers and body to a :class:`Transport` and gets the raw response body
back.  The default :class:`RequestsTransport` runs :mod:`requests` inside a
worker thread via :func:`asyncio.to_thread` so the event loop is never
blocked.

Status codes are ignored: the Bot API reports errors inside
the JSON envelope, which :mod:`sdk.envelope` decodes.  Transport-level
failures (connection, TLS, timeout) propagate as
:class:`requests.RequestException`.  Nothing is retried.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

import requests

from core.logger import CourierLogger

logger = CourierLogger.get_logger()


@runtime_checkable
class Transport(Protocol):
    """Anything that can perform one HTTP exchange and return the body."""

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> bytes: ...  # noqa: E704


async def make_request(method: str, url: str, **kwargs: object) -> requests.Response:
    """Run a :mod:`requests` call inside a thread to keep the event loop free.

    *method* is the HTTP verb (``"get"``, ``"post"``, …).
    """
    func = getattr(requests, method.lower())
    return await asyncio.to_thread(func, url, **kwargs)


class RequestsTransport:
    """:class:`Transport` backed by :mod:`requests`.

    Args:
        timeout: Per-request timeout in seconds.  ``None`` (the default)
            waits indefinitely; callers that need responsiveness should set
            one, larger than any long-poll timeout in use.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> bytes:
        response = await make_request(
            method,
            url,
            headers=headers or {},
            data=body,
            timeout=self._timeout,
        )
        if not response.ok:
            logger.debug("Non-2xx status from transport", extra={"status_code": response.status_code})
        return response.content
