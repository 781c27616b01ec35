from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from ..core.constants import DEFAULT_API_PORT, REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResult:
    """Uniform result of an API call; callers branch on success."""

    success: bool
    data: Any = None
    message: Optional[str] = None
    status_code: Optional[int] = None
    cancelled: bool = False
    extra: dict = field(default_factory=dict)


def api_base_url(host: str, port: int = DEFAULT_API_PORT, *, scheme: str = "http") -> str:
    """Base URL derived from the host at runtime."""

    return f"{scheme}://{host}:{port}/api"


def _result_from_response(response: httpx.Response) -> ApiResult:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        extra = {k: v for k, v in body.items() if k not in {"success", "data", "message"}}
        success = bool(body.get("success", response.is_success)) and response.is_success
        message = body.get("message")
        data = body.get("data")
    else:
        extra = {}
        success = response.is_success
        message = None
        data = body

    if not success and not message:
        message = f"HTTP {response.status_code}"
    return ApiResult(success=success, data=data, message=message, status_code=response.status_code, extra=extra)


class BackofficeClient:
    """httpx.AsyncClient wrapper with a fixed timeout and per-key supersede.

    When a request is issued with a key while an earlier request with the
    same key is still running, the earlier one is cancelled and its caller
    receives a cancelled ApiResult. No retries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self._inflight: dict[str, asyncio.Task] = {}
        self._superseded: set[asyncio.Task] = set()

    async def aclose(self) -> None:
        for task in list(self._inflight.values()):
            task.cancel()
        await self._http.aclose()

    async def __aenter__(self) -> "BackofficeClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> ApiResult:
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.TimeoutException:
            logger.warning("%s %s timed out", method, path)
            return ApiResult(success=False, message="Request timed out")
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return ApiResult(success=False, message=f"Network error: {e}")

        result = _result_from_response(response)
        if not result.success:
            logger.warning("%s %s -> %s %s", method, path, response.status_code, result.message)
        return result

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        key: Optional[str] = None,
    ) -> ApiResult:
        if key is None:
            return await self._send(method, path, params=params, json=json)

        previous = self._inflight.get(key)
        if previous is not None and not previous.done():
            self._superseded.add(previous)
            previous.cancel()

        task = asyncio.ensure_future(self._send(method, path, params=params, json=json))
        self._inflight[key] = task
        try:
            return await task
        except asyncio.CancelledError:
            if task in self._superseded:
                return ApiResult(success=False, message="Request superseded", cancelled=True)
            raise
        finally:
            self._superseded.discard(task)
            if self._inflight.get(key) is task:
                del self._inflight[key]

    async def get(self, path: str, *, params: Optional[Mapping[str, Any]] = None, key: Optional[str] = None):
        return await self.request("GET", path, params=params, key=key)

    async def post(self, path: str, json: Any = None) -> ApiResult:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> ApiResult:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> ApiResult:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> ApiResult:
        return await self.request("DELETE", path)
