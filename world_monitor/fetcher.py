"""HTTP access to the Lodestone world status page."""

from __future__ import annotations

import time

import httpx
import structlog

from .errors import FetchError

logger = structlog.get_logger(__name__)

DEFAULT_STATUS_URL = "https://na.finalfantasyxiv.com/lodestone/worldstatus"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class StatusPageFetcher:
    """Fetches the status page text with a browser-like User-Agent."""

    def __init__(
        self,
        url: str = DEFAULT_STATUS_URL,
        *,
        timeout_seconds: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._client = client
        self._owns_client = client is None

    async def fetch(self) -> str:
        """Return the page body.

        Raises:
            FetchError: on transport errors, timeouts and non-2xx responses.
        """
        client = self._get_client()
        started = time.perf_counter()
        try:
            resp = await client.get(
                self.url,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                timeout=self.timeout_seconds,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"status page returned HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"{type(e).__name__}: {e}") from e

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.debug("Fetched status page", url=self.url, status_code=resp.status_code, elapsed_ms=round(elapsed_ms, 3))
        return resp.text or ""

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client
