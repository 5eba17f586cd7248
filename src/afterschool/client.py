"""Async SDK client for the after-school lessons API.

Usage::

    async with AfterschoolClient("http://localhost:3000") as client:
        lessons = await client.search("math")
        order = await client.create_order(
            name="Ada", phone="07700900000",
            lesson_ids=[lessons[0]["_id"]], spaces=1,
        )
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger("afterschool.client")

_DEFAULT_URL = "http://localhost:3000"
_DEFAULT_TIMEOUT = 5.0
_RETRY_BACKOFFS = [0.5, 1.0, 2.0]
_RETRYABLE_STATUS = {502, 503, 504}


class ApiError(Exception):
    """Raised for non-2xx responses, carrying the server's error body."""

    def __init__(self, status_code: int, error: str, message: str = "") -> None:
        self.status_code = status_code
        self.error = error
        self.message = message
        super().__init__(f"{status_code} {error}: {message}" if message else f"{status_code} {error}")


class AfterschoolClient:
    """Async client for the lessons API.

    Parameters:
        url: Server URL. Defaults to ``AFTERSCHOOL_URL`` env var or ``http://localhost:3000``.
        timeout: Request timeout in seconds.

    Only GET requests are retried, and only on gateway errors. Orders and
    spaces updates are sent once.
    """

    def __init__(self, url: Optional[str] = None, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self._url = (url or os.environ.get("AFTERSCHOOL_URL", _DEFAULT_URL)).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self._url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def __aenter__(self) -> "AfterschoolClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    # ── Core API ──────────────────────────────────────────────────────

    async def list_lessons(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/lessons")

    async def search(self, q: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/search", params={"q": q})

    async def create_order(
        self,
        name: str,
        phone: str,
        lesson_ids: List[str],
        spaces: int,
    ) -> Dict[str, Any]:
        """Place an order. Returns ``{message, orderId, order}``."""
        return await self._request(
            "POST",
            "/orders",
            json={"name": name, "phone": phone, "lessonIds": lesson_ids, "spaces": spaces},
        )

    async def set_spaces(self, lesson_id: str, spaces: int) -> int:
        """Overwrite a lesson's spaces. Returns the modified count."""
        path = f"/lessons/{quote(lesson_id, safe='')}"
        data = await self._request("PUT", path, json={"spaces": spaces})
        return data["modifiedCount"]

    # ── Internals ─────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        backoffs = _RETRY_BACKOFFS if method == "GET" else []
        for delay in backoffs:
            resp = await self._http.request(method, path, **kwargs)
            if resp.status_code not in _RETRYABLE_STATUS:
                return _unwrap(resp)
            logger.warning(
                "%s %s returned %d, retrying in %.1fs",
                method, path, resp.status_code, delay,
            )
            await asyncio.sleep(delay)
        return _unwrap(await self._http.request(method, path, **kwargs))


def _unwrap(resp: httpx.Response) -> Any:
    if resp.is_success:
        return resp.json()
    try:
        body = resp.json()
    except ValueError:
        raise ApiError(resp.status_code, "http_error", resp.text) from None
    if not isinstance(body, dict):
        raise ApiError(resp.status_code, "http_error", str(body))
    raise ApiError(resp.status_code, body.get("error", "http_error"), body.get("message", ""))
