"""HTTP client for the studio API."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..config import StudioSettings
from ..errors import NetworkFailure
from ..metrics import SYNC_REQUEST_COUNTER, SYNC_REQUEST_LATENCY

LOGGER = logging.getLogger("tts_studio.sync")

JSON_HEADERS = {"Content-Type": "application/json"}


class SyncClient:
    """Fetches the dataset and persists segment edits.

    Every call is a single request: no retries, no deduplication. Failures of
    any kind surface as :class:`NetworkFailure`.
    """

    def __init__(
        self,
        settings: StudioSettings,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)

    def _url(self, path: str) -> str:
        base = self.settings.server_url.rstrip("/")
        if not base:
            raise NetworkFailure("Server URL missing")
        return f"{base}{path}"

    async def fetch_dataset(self) -> Dict[str, Any]:
        return await self._request_json("data", "GET", "/data")

    async def update_segment_slice(self, uid: str, *, start: float, end: float, text: str) -> Dict[str, Any]:
        body = {"start": start, "end": end, "text": text}
        return await self._request_json("slice", "POST", f"/segment/{uid}/slice", body)

    async def update_segment_status(self, uid: str, status: str) -> Dict[str, Any]:
        return await self._request_json("status", "POST", f"/segment/{uid}/status", {"status": status})

    def segment_audio_url(self, uid: str, cache_buster: Optional[int] = None) -> str:
        if cache_buster is None:
            cache_buster = int(time.time() * 1000)
        return self._url(f"/segment/{uid}/wav?t={cache_buster}")

    async def fetch_segment_audio(self, uid: str, cache_buster: Optional[int] = None) -> bytes:
        resp = await self._send("wav", "GET", self.segment_audio_url(uid, cache_buster))
        return resp.content

    async def _request_json(
        self,
        endpoint: str,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        resp = await self._send(endpoint, method, self._url(path), body)
        try:
            return resp.json()
        except ValueError as exc:
            raise NetworkFailure(f"Invalid response from {path}: {exc}", resp.status_code) from exc

    async def _send(
        self,
        endpoint: str,
        method: str,
        url: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        started = time.perf_counter()
        status = "error"
        try:
            resp = await self._client.request(method, url, headers=JSON_HEADERS, json=body)
            status = str(resp.status_code)
            resp.raise_for_status()
            return resp
        except httpx.HTTPStatusError as exc:
            LOGGER.warning("%s %s failed with %s", method, url, exc.response.status_code)
            raise NetworkFailure(
                f"{method} {url} failed: {exc.response.status_code}",
                exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            LOGGER.warning("%s %s failed: %s", method, url, exc)
            raise NetworkFailure(str(exc) or exc.__class__.__name__) from exc
        finally:
            SYNC_REQUEST_COUNTER.labels(endpoint=endpoint, status=status).inc()
            SYNC_REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - started)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SyncClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


__all__ = ["SyncClient"]
