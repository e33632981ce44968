"""HTTP transport for the Manticore client.

Wraps a pooled ``httpx.AsyncClient`` and reduces every exchange to the raw
body text and a success flag. No interpretation of the body happens here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Undecoded outcome of one HTTP exchange."""

    body: str
    is_success: bool
    status_code: int = 0


class Transport(Protocol):
    """What the client needs from an HTTP transport."""

    async def send(
        self,
        endpoint: str,
        method: str,
        *,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> RawResponse: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """``Transport`` backed by ``httpx.AsyncClient``.

    Parameters
    ----------
    client:
        The pooled client to send through. Relative endpoints are resolved
        against its ``base_url``.
    owns_client:
        Whether :meth:`aclose` should also close ``client``.
    base_url:
        Prefix for endpoints when ``client`` has no ``base_url`` of its own.
        The client itself is left untouched.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        owns_client: bool = True,
        base_url: Optional[str] = None,
    ) -> None:
        self._client = client
        self._owns_client = owns_client
        self._base_url = base_url.rstrip("/") if base_url else ""

    @classmethod
    def create(cls, base_url: str, *, timeout: float, verify_ssl: bool = True) -> "HttpxTransport":
        client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            verify=verify_ssl,
            headers={"Accept": "application/json"},
        )
        return cls(client, owns_client=True)

    async def send(
        self,
        endpoint: str,
        method: str,
        *,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> RawResponse:
        headers = {"Content-Type": content_type} if content_type else None
        resp = await self._client.request(method, self._base_url + endpoint, content=body, headers=headers)
        logger.debug("%s %s -> %s", method, endpoint, resp.status_code)
        return RawResponse(body=resp.text, is_success=resp.is_success, status_code=resp.status_code)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
