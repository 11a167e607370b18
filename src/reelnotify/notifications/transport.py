"""
HttpTransport — one outbound HTTP request, one outcome.

Every network call in the engine goes through ``HttpTransport.request``.
The call is bounded by a hard deadline, the response body is capped, and
whichever of data / protocol error / timeout finishes first decides the
result. The streamed response is closed on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

MAX_RESPONSE_BYTES = 10_000
TRUNCATION_MARKER = "...[truncated]"

METADATA_TIMEOUT = 5.0
WEBHOOK_TIMEOUT = 10.0


class TransportResult(BaseModel):
    success: bool = False
    status_code: Optional[int] = None
    body: str = ""
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> TransportResult:
        return cls(success=False, error=error)


class OutcomeCell:
    """Single-assignment holder: the first settle wins, later ones are dropped."""

    def __init__(self) -> None:
        self._result: Optional[TransportResult] = None

    @property
    def settled(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> TransportResult:
        if self._result is None:
            return TransportResult.failure("Request produced no outcome")
        return self._result

    def settle(self, result: TransportResult) -> bool:
        if self._result is not None:
            logger.debug("Discarding late outcome: %s", result.error or result.status_code)
            return False
        self._result = result
        return True


class HttpTransport:
    """Cancellable request helper on top of ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        max_body: int = MAX_RESPONSE_BYTES,
    ) -> None:
        self._client = client
        self.max_body = max_body

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[dict[str, str]] = None,
        body: Optional[bytes] = None,
        timeout: float = METADATA_TIMEOUT,
    ) -> TransportResult:
        cell = OutcomeCell()
        client = self._client or httpx.AsyncClient(timeout=timeout)
        try:
            await asyncio.wait_for(
                self._exchange(client, cell, url, method, headers, body, timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            cell.settle(
                TransportResult.failure(
                    f"Request timeout after {int(timeout * 1000)}ms"
                )
            )
        except httpx.HTTPError as exc:
            cell.settle(TransportResult.failure(str(exc) or type(exc).__name__))
        finally:
            if not self._client:
                await client.aclose()
        return cell.result

    async def _exchange(
        self,
        client: httpx.AsyncClient,
        cell: OutcomeCell,
        url: str,
        method: str,
        headers: Optional[dict[str, str]],
        body: Optional[bytes],
        timeout: float,
    ) -> None:
        async with client.stream(
            method, url, headers=headers, content=body, timeout=timeout
        ) as response:
            data = bytearray()
            truncated = False
            async for chunk in response.aiter_bytes():
                data.extend(chunk)
                if len(data) > self.max_body:
                    truncated = True
                    break

            text = bytes(data[: self.max_body]).decode("utf-8", errors="replace")
            if truncated:
                text += TRUNCATION_MARKER

            cell.settle(
                TransportResult(
                    success=200 <= response.status_code < 300,
                    status_code=response.status_code,
                    body=text,
                )
            )
