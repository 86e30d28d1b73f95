"""Shared async HTTP plumbing for upstream JSON APIs."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger("upstream")


def drop_none(params: dict[str, Any]) -> dict[str, Any]:
    """Remove query parameters that were not supplied."""
    return {k: v for k, v in params.items() if v is not None}


def is_retryable(exc: BaseException) -> bool:
    """Transport failures and 5xx responses are worth another attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


def _log_retry(url: str, state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
    log.warning("upstream_retry", url=url, attempt=state.attempt_number, status=status, error=str(exc))


class JsonApiClient:
    """Lazily-created ``httpx.AsyncClient`` with retried GET requests.

    Transport errors and 5xx responses are retried up to *attempts* times with
    exponential backoff; 4xx responses fail immediately.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout_s: float = 15.0,
        attempts: int = 5,
        retry_delay_s: float = 0.5,
        max_retry_delay_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout_s = timeout_s
        self.attempts = max(attempts, 1)
        self.retry_delay_s = retry_delay_s
        self.max_retry_delay_s = max_retry_delay_s
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=self.timeout_s,
                headers=self.headers,
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    def _url(self, path: str) -> str:
        if not path:
            return self.base_url
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        http = await self._get_http()
        url = self._url(path)
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.retry_delay_s, max=self.max_retry_delay_s),
            retry=retry_if_exception(is_retryable),
            before_sleep=lambda state: _log_retry(url, state),
            reraise=True,
        ):
            with attempt:
                resp = await http.get(url, params=drop_none(params or {}), headers=headers)
                resp.raise_for_status()
                return resp.json()
